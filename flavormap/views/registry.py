from __future__ import annotations

from dataclasses import dataclass, field

from .aggregation import AggregateOptions
from .config import DEFAULT_VIEW_CONFIG, ViewConfig
from .models import Shape, ViewKind


@dataclass(frozen=True)
class ViewSpec:
    shape: Shape
    options: AggregateOptions = field(default_factory=AggregateOptions)


def build_view_specs(config: ViewConfig = DEFAULT_VIEW_CONFIG) -> dict[ViewKind, ViewSpec]:
    """Bind every view kind to its result shape and fixed parameters."""
    points = ViewSpec(Shape.points)
    return {
        ViewKind.restaurant_count: ViewSpec(Shape.count),
        ViewKind.country_stats: ViewSpec(Shape.grouped_stats, AggregateOptions(collapse=True)),
        ViewKind.country_prices: ViewSpec(Shape.price_buckets),
        ViewKind.restaurants: points,
        ViewKind.heatmap: points,
        ViewKind.prices: ViewSpec(Shape.points, AggregateOptions(include_price=True)),
        ViewKind.top_restaurants: ViewSpec(
            Shape.top_n,
            AggregateOptions(
                order_by=("total_reviews_count",),
                limit=config.top_n,
                include_coordinates=True,
            ),
        ),
        ViewKind.top_cafes: ViewSpec(
            Shape.top_n,
            AggregateOptions(order_by=("avg_rating", "total_reviews_count"), limit=config.top_n),
        ),
        ViewKind.experience: ViewSpec(Shape.experience),
        ViewKind.cuisine_distribution: ViewSpec(Shape.cuisine_distribution),
        ViewKind.price_vs_rating: ViewSpec(Shape.rows),
        ViewKind.countries: ViewSpec(Shape.distinct),
        ViewKind.top_countries: ViewSpec(
            Shape.leaderboard, AggregateOptions(limit=config.leaderboard_size)
        ),
        ViewKind.top_countries_stats: ViewSpec(
            Shape.grouped_stats, AggregateOptions(limit=config.top_countries_stats_size)
        ),
        ViewKind.countries_avg: ViewSpec(
            Shape.threshold_grouped,
            AggregateOptions(min_count=config.min_group_size, limit=config.avg_price_limit),
        ),
        ViewKind.countries_avg_rating: ViewSpec(
            Shape.threshold_grouped,
            AggregateOptions(
                min_count=config.min_group_size,
                limit=config.avg_rating_limit,
                round_to=config.rating_decimals,
            ),
        ),
    }


VIEW_SPECS: dict[ViewKind, ViewSpec] = build_view_specs()
