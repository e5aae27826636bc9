from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ViewConfig:
    top_n: int = 3
    leaderboard_size: int = 5
    top_countries_stats_size: int = 3
    min_group_size: int = 8  # groups need strictly more rows than this
    avg_rating_limit: int = 20
    avg_price_limit: int = 50
    rating_decimals: int = 2


DEFAULT_VIEW_CONFIG = ViewConfig()
