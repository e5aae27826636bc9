from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from ..countries.resolver import NameResolver
from ..errors import ValidationError
from ..store.data_store import RestaurantStore
from .aggregation import aggregate
from .filters import compose
from .models import ViewKind
from .registry import VIEW_SPECS, ViewSpec

logger = logging.getLogger(__name__)


def parse_view_kind(value: str | None) -> ViewKind:
    if not value or not value.strip():
        raise ValidationError("View kind is required")
    try:
        return ViewKind(value.strip())
    except ValueError:
        known = ", ".join(k.value for k in ViewKind)
        raise ValidationError(f"Unknown view kind '{value}'", detail=f"expected one of: {known}") from None


def run_view(
    view_kind: str | ViewKind | None,
    country: str | None,
    store: RestaurantStore,
    resolver: NameResolver,
    specs: dict[ViewKind, ViewSpec] = VIEW_SPECS,
) -> Any:
    """
    Resolve ``country``, compose the view's filter and aggregate the store.

    The country is trimmed first; a blank country counts as missing.
    """
    kind = view_kind if isinstance(view_kind, ViewKind) else parse_view_kind(view_kind)
    country = country.strip() if country else None
    if not country:
        country = None

    variants = resolver.resolve(country) if country is not None else None
    view_filter = compose(variants, kind)

    spec = specs[kind]
    options = replace(spec.options, label=country) if country is not None else spec.options

    logger.info("View %s for country=%r (variants=%s)", kind.value, country, variants)
    return aggregate(view_filter, spec.shape, store.frame(), options)
