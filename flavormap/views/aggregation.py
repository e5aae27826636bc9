from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

import pandas as pd

from ..errors import StoreFailure
from .filters import (
    PRICE_LEVELS,
    PRICE_RANK,
    SUB_SCORES,
    ViewFilter,
    clean_price_level,
    is_flag_set,
    parse_coordinate,
    parse_decimal,
    split_cuisines,
)
from .models import (
    CountryStats,
    ExperienceScores,
    GeoPoint,
    GroupStats,
    LeaderboardEntry,
    PriceBuckets,
    PriceRatingPoint,
    RankedRestaurant,
    RestaurantCount,
    Shape,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregateOptions:
    order_by: tuple[str, ...] = ()
    limit: int | None = None
    min_count: int | None = None  # groups must have strictly more rows
    label: str | None = None
    round_to: int | None = None
    collapse: bool = False
    include_price: bool = False
    include_coordinates: bool = False


def _optional_float(value: Any) -> float | None:
    return None if pd.isna(value) else float(value)


def _optional_int(value: Any) -> int | None:
    return None if pd.isna(value) else int(value)


def _optional_text(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _round(value: float | None, digits: int | None) -> float | None:
    if value is None or digits is None:
        return value
    return round(value, digits)


def _flag_counts(rows: pd.DataFrame) -> pd.DataFrame:
    return rows.assign(
        _vegan=rows["vegan_options"].map(is_flag_set).astype(int),
        _gluten=rows["gluten_free"].map(is_flag_set).astype(int),
    )


# ---------------------------------------------------------------------------
# Shapes
# ---------------------------------------------------------------------------


def _count(rows: pd.DataFrame, view_filter: ViewFilter, opts: AggregateOptions) -> RestaurantCount:
    return RestaurantCount(country=list(view_filter.country_variants), count=len(rows))


def _grouped_stats(
    rows: pd.DataFrame, view_filter: ViewFilter, opts: AggregateOptions
) -> CountryStats | list[GroupStats]:
    flagged = _flag_counts(rows)

    if opts.collapse:
        label = opts.label or ", ".join(view_filter.country_variants)
        total = len(flagged)
        return CountryStats(
            country=label,
            total_restaurants=total,
            vegan=int(flagged["_vegan"].sum()),
            gluten_free=int(flagged["_gluten"].sum()),
            empty=total == 0,
        )

    grouped = flagged.groupby("country", sort=False).agg(
        total=("_vegan", "size"),
        vegan=("_vegan", "sum"),
        gluten=("_gluten", "sum"),
    )
    grouped = grouped.sort_values("total", ascending=False, kind="mergesort")
    if opts.limit is not None:
        grouped = grouped.head(opts.limit)

    return [
        GroupStats(
            country=str(country),
            total_restaurants=int(row["total"]),
            vegan=int(row["vegan"]),
            gluten_free=int(row["gluten"]),
        )
        for country, row in grouped.iterrows()
    ]


def _threshold_grouped(
    rows: pd.DataFrame, view_filter: ViewFilter, opts: AggregateOptions
) -> list[GroupStats]:
    flagged = _flag_counts(rows).assign(
        _price=rows["price_level"]
        .map(lambda v: PRICE_RANK.get(clean_price_level(v) or ""))
        .astype("float64"),
    )

    grouped = flagged.groupby("country", sort=False).agg(
        total=("_vegan", "size"),
        vegan=("_vegan", "sum"),
        gluten=("_gluten", "sum"),
        avg_rating=("avg_rating", "mean"),
        avg_price_level=("_price", "mean"),
    )
    if opts.min_count is not None:
        grouped = grouped[grouped["total"] > opts.min_count]
    grouped = grouped.sort_values(
        "avg_rating", ascending=False, na_position="last", kind="mergesort"
    )
    if opts.limit is not None:
        grouped = grouped.head(opts.limit)

    return [
        GroupStats(
            country=str(country),
            total_restaurants=int(row["total"]),
            vegan=int(row["vegan"]),
            gluten_free=int(row["gluten"]),
            avg_rating=_round(_optional_float(row["avg_rating"]), opts.round_to),
            avg_price_level=_optional_float(row["avg_price_level"]),
        )
        for country, row in grouped.iterrows()
    ]


def _price_buckets(
    rows: pd.DataFrame, view_filter: ViewFilter, opts: AggregateOptions
) -> PriceBuckets:
    tokens = rows["price_level"].map(clean_price_level)
    return PriceBuckets(**{
        bucket: int((tokens == token).sum()) for token, bucket in PRICE_LEVELS.items()
    })


def _points(rows: pd.DataFrame, view_filter: ViewFilter, opts: AggregateOptions) -> list[GeoPoint]:
    points: list[GeoPoint] = []
    for _, row in rows.iterrows():
        lat = parse_coordinate(row["latitude"])
        lng = parse_coordinate(row["longitude"])
        if lat is None or lng is None:
            continue
        points.append(GeoPoint(
            name=_optional_text(row["restaurant_name"]),
            lat=lat,
            lng=lng,
            price_level=clean_price_level(row["price_level"]) if opts.include_price else None,
        ))
    return points


def _top_n(
    rows: pd.DataFrame, view_filter: ViewFilter, opts: AggregateOptions
) -> list[RankedRestaurant]:
    ranked = rows
    if opts.order_by:
        # Stable, so equal keys keep their input order
        ranked = rows.sort_values(
            list(opts.order_by), ascending=False, na_position="last", kind="mergesort"
        )
    if opts.limit is not None:
        ranked = ranked.head(opts.limit)

    results: list[RankedRestaurant] = []
    for _, row in ranked.iterrows():
        coords: dict[str, float | None] = {}
        if opts.include_coordinates:
            coords = {
                "lat": parse_coordinate(row["latitude"]),
                "lng": parse_coordinate(row["longitude"]),
            }
        results.append(RankedRestaurant(
            name=_optional_text(row["restaurant_name"]),
            city=_optional_text(row["city"]),
            avg_rating=_optional_float(row["avg_rating"]),
            total_reviews_count=_optional_int(row["total_reviews_count"]),
            **coords,
        ))
    return results


def _leaderboard(
    rows: pd.DataFrame, view_filter: ViewFilter, opts: AggregateOptions
) -> list[LeaderboardEntry]:
    sizes = rows.groupby("country", sort=False).size()
    sizes = sizes.sort_values(ascending=False, kind="mergesort")
    if opts.limit is not None:
        sizes = sizes.head(opts.limit)
    return [LeaderboardEntry(country=str(c), count=int(n)) for c, n in sizes.items()]


def _experience(
    rows: pd.DataFrame, view_filter: ViewFilter, opts: AggregateOptions
) -> list[ExperienceScores]:
    scores = pd.DataFrame(
        {col: rows[col].map(parse_decimal).astype("float64") for col in SUB_SCORES},
        index=rows.index,
    )
    scores["country"] = rows["country"]
    means = scores.groupby("country", sort=True)[list(SUB_SCORES)].mean()

    return [
        ExperienceScores(
            country=str(country),
            **{col: _round(_optional_float(row[col]), opts.round_to) for col in SUB_SCORES},
        )
        for country, row in means.iterrows()
    ]


def _cuisine_distribution(
    rows: pd.DataFrame, view_filter: ViewFilter, opts: AggregateOptions
) -> dict[str, list[float]]:
    distribution: dict[str, list[float]] = {}
    for cuisines, rating in zip(rows["cuisines"], rows["avg_rating"]):
        if pd.isna(rating):
            continue
        for cuisine in split_cuisines(cuisines):
            distribution.setdefault(cuisine, []).append(float(rating))
    return distribution


def _rows(
    rows: pd.DataFrame, view_filter: ViewFilter, opts: AggregateOptions
) -> list[PriceRatingPoint]:
    return [
        PriceRatingPoint(
            name=_optional_text(row["restaurant_name"]),
            avg_rating=float(row["avg_rating"]),
            price_level=clean_price_level(row["price_level"]),
            total_reviews_count=int(row["total_reviews_count"]),
            country=_optional_text(row["country"]),
        )
        for _, row in rows.iterrows()
    ]


def _distinct(rows: pd.DataFrame, view_filter: ViewFilter, opts: AggregateOptions) -> list[str]:
    return sorted({c for c in rows["country"] if isinstance(c, str)})


_SHAPES: dict[Shape, Callable[[pd.DataFrame, ViewFilter, AggregateOptions], Any]] = {
    Shape.count: _count,
    Shape.grouped_stats: _grouped_stats,
    Shape.threshold_grouped: _threshold_grouped,
    Shape.price_buckets: _price_buckets,
    Shape.points: _points,
    Shape.top_n: _top_n,
    Shape.leaderboard: _leaderboard,
    Shape.experience: _experience,
    Shape.cuisine_distribution: _cuisine_distribution,
    Shape.rows: _rows,
    Shape.distinct: _distinct,
}


def aggregate(
    view_filter: ViewFilter,
    shape: Shape,
    frame: pd.DataFrame,
    options: AggregateOptions | None = None,
) -> Any:
    """
    Select the rows matching ``view_filter`` and shape them as ``shape``.

    Zero matching rows give an empty or zero-valued result. Any failure
    while evaluating against the frame (a missing column, a bad type) is
    raised as ``StoreFailure``.
    """
    opts = options or AggregateOptions()
    handler = _SHAPES[shape]
    try:
        rows = view_filter.apply(frame)
        return handler(rows, view_filter, opts)
    except (KeyError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Aggregation %s failed", shape.value, exc_info=True)
        raise StoreFailure("Query failed", detail=f"{type(exc).__name__}: {exc}") from exc
