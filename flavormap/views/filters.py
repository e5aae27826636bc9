from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

import numpy as np
import pandas as pd

from ..errors import ValidationError, ViewConfigurationError
from .models import CountryMatch, CountryRequirement, ViewKind

PRICE_LEVELS: dict[str, str] = {
    "€": "cheap",
    "€€-€€€": "medium",
    "€€€€": "luxury",
}
PRICE_RANK: dict[str, int] = {"€": 1, "€€-€€€": 2, "€€€€": 3}

SUB_SCORES = ("food", "service", "value", "atmosphere")

_DECIMAL_RE = re.compile(r"^[0-9]+(\.[0-9]+)?$")

RowPredicate = Callable[[pd.DataFrame], pd.Series]


# ---------------------------------------------------------------------------
# Value validators
# ---------------------------------------------------------------------------


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def parse_decimal(value: Any) -> float | None:
    """
    Parse a stored sub-score.

    Only plain non-negative decimals such as ``"4"`` or ``"4.5"`` count;
    anything else (``"n/a"``, ``"-1"``, ``""``) is absent, not zero.
    """
    if _is_missing(value):
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value) if math.isfinite(value) and value >= 0 else None
    text = str(value)
    if not _DECIMAL_RE.fullmatch(text):
        return None
    return float(text)


def parse_coordinate(value: Any) -> float | None:
    """Return a finite float for a textual or numeric coordinate, else None."""
    if _is_missing(value) or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def clean_price_level(value: Any) -> str | None:
    """Return the trimmed price token if it is one of the recognised levels."""
    if not isinstance(value, str):
        return None
    token = value.strip()
    return token if token in PRICE_LEVELS else None


def split_cuisines(value: Any) -> list[str]:
    if not isinstance(value, str):
        return []
    return [c.strip() for c in value.split(",") if c.strip()]


def is_flag_set(value: Any) -> bool:
    return isinstance(value, str) and value.lower() == "y"


def _lower(value: Any) -> str | None:
    return value.lower() if isinstance(value, str) else None


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


# ---------------------------------------------------------------------------
# Row predicates
# ---------------------------------------------------------------------------


def has_coordinates(frame: pd.DataFrame) -> pd.Series:
    lat = frame["latitude"].map(parse_coordinate).astype("float64")
    lng = frame["longitude"].map(parse_coordinate).astype("float64")
    return pd.Series(np.isfinite(lat) & np.isfinite(lng), index=frame.index)


def has_price_level(frame: pd.DataFrame) -> pd.Series:
    return frame["price_level"].map(clean_price_level).notna()


def has_rating(frame: pd.DataFrame) -> pd.Series:
    return frame["avg_rating"].notna()


def has_reviews(frame: pd.DataFrame) -> pd.Series:
    reviews = frame["total_reviews_count"]
    return reviews.notna() & (reviews > 0)


def has_cuisines(frame: pd.DataFrame) -> pd.Series:
    return ~frame["cuisines"].map(_is_blank).astype(bool)


def has_country(frame: pd.DataFrame) -> pd.Series:
    return ~frame["country"].map(_is_blank).astype(bool)


def mentions_cafe(frame: pd.DataFrame) -> pd.Series:
    def _contains(value: Any) -> bool:
        return isinstance(value, str) and "cafe" in value.lower()

    mask = pd.Series(False, index=frame.index)
    for col in ("cuisines", "top_tags", "restaurant_name"):
        mask = mask | frame[col].map(_contains).astype(bool)
    return mask


# ---------------------------------------------------------------------------
# ViewFilter
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ViewFilter:
    """Conjunctive row filter for one view request."""

    country_variants: tuple[str, ...] = ()
    country_match: CountryMatch = CountryMatch.any
    extra_predicates: tuple[RowPredicate, ...] = ()

    def mask(self, frame: pd.DataFrame) -> pd.Series:
        if self.country_match == CountryMatch.exact:
            mask = frame["country"].isin(self.country_variants)
        elif self.country_match == CountryMatch.single:
            wanted = self.country_variants[0].lower()
            mask = frame["country"].map(_lower) == wanted
        else:
            mask = pd.Series(True, index=frame.index)

        for predicate in self.extra_predicates:
            mask = mask & predicate(frame)
        return mask.astype(bool)

    def apply(self, frame: pd.DataFrame) -> pd.DataFrame:
        return frame.loc[self.mask(frame)]


@dataclass(frozen=True)
class FilterSpec:
    match: CountryMatch
    requirement: CountryRequirement
    predicates: tuple[RowPredicate, ...] = field(default_factory=tuple)


_GEO = (has_coordinates,)

VIEW_FILTERS: dict[ViewKind, FilterSpec] = {
    ViewKind.restaurant_count: FilterSpec(CountryMatch.exact, CountryRequirement.required),
    ViewKind.country_stats: FilterSpec(CountryMatch.exact, CountryRequirement.required),
    ViewKind.country_prices: FilterSpec(CountryMatch.exact, CountryRequirement.required),
    ViewKind.restaurants: FilterSpec(CountryMatch.single, CountryRequirement.required, _GEO),
    ViewKind.heatmap: FilterSpec(CountryMatch.single, CountryRequirement.required, _GEO),
    ViewKind.prices: FilterSpec(
        CountryMatch.single, CountryRequirement.required, _GEO + (has_price_level,)
    ),
    ViewKind.top_restaurants: FilterSpec(CountryMatch.single, CountryRequirement.required, _GEO),
    ViewKind.top_cafes: FilterSpec(
        CountryMatch.exact, CountryRequirement.required, (mentions_cafe,)
    ),
    ViewKind.experience: FilterSpec(
        CountryMatch.exact, CountryRequirement.optional, (has_country,)
    ),
    ViewKind.cuisine_distribution: FilterSpec(
        CountryMatch.exact, CountryRequirement.optional, (has_rating, has_cuisines)
    ),
    ViewKind.price_vs_rating: FilterSpec(
        CountryMatch.exact,
        CountryRequirement.optional,
        (has_rating, has_price_level, has_reviews),
    ),
    ViewKind.countries: FilterSpec(CountryMatch.any, CountryRequirement.none, (has_country,)),
    ViewKind.top_countries: FilterSpec(CountryMatch.any, CountryRequirement.none, (has_country,)),
    ViewKind.top_countries_stats: FilterSpec(
        CountryMatch.any, CountryRequirement.none, (has_country,)
    ),
    ViewKind.countries_avg: FilterSpec(
        CountryMatch.any, CountryRequirement.none, (has_country, has_rating, has_price_level)
    ),
    ViewKind.countries_avg_rating: FilterSpec(
        CountryMatch.any, CountryRequirement.none, (has_country, has_rating)
    ),
}


def compose(country_variants: Iterable[str] | None, view_kind: ViewKind) -> ViewFilter:
    """
    Build the row filter for ``view_kind`` from resolved country variants.

    Raises ``ValidationError`` when a country is required but none was
    given, and ``ViewConfigurationError`` when a single-country view gets
    more than one variant.
    """
    spec = VIEW_FILTERS[view_kind]
    variants = tuple(dict.fromkeys(country_variants or ()))

    if spec.requirement == CountryRequirement.none:
        return ViewFilter(country_match=CountryMatch.any, extra_predicates=spec.predicates)

    if not variants:
        if spec.requirement == CountryRequirement.required:
            raise ValidationError("Country is required", detail=f"view '{view_kind.value}'")
        return ViewFilter(country_match=CountryMatch.any, extra_predicates=spec.predicates)

    if spec.match == CountryMatch.single and len(variants) > 1:
        raise ViewConfigurationError(
            f"View '{view_kind.value}' needs a single country",
            detail=f"country resolves to {len(variants)} variants: {', '.join(variants)}",
        )

    return ViewFilter(
        country_variants=variants,
        country_match=spec.match,
        extra_predicates=spec.predicates,
    )
