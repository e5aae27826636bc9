from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ViewKind(str, Enum):
    restaurant_count = "restaurant-count"
    country_stats = "country-stats"
    country_prices = "country-prices"
    restaurants = "restaurants"
    heatmap = "heatmap"
    prices = "prices"
    top_restaurants = "top-restaurants"
    top_cafes = "top-cafes"
    experience = "experience-by-country"
    cuisine_distribution = "violin-cuisines"
    price_vs_rating = "price-vs-rating"
    countries = "countries"
    top_countries = "top-countries"
    top_countries_stats = "top-countries-stats"
    countries_avg = "countries-avg"
    countries_avg_rating = "countries-avg-rating"


class Shape(str, Enum):
    count = "count"
    grouped_stats = "grouped-stats"
    price_buckets = "price-buckets"
    points = "points"
    top_n = "top-n"
    leaderboard = "leaderboard"
    threshold_grouped = "threshold-grouped"
    experience = "experience"
    cuisine_distribution = "cuisine-distribution"
    rows = "rows"
    distinct = "distinct"


class CountryMatch(str, Enum):
    exact = "exact"
    single = "single"
    any = "any"


class CountryRequirement(str, Enum):
    required = "required"
    optional = "optional"
    none = "none"


# ── Requests ────────────────────────────────────────────────────────────


class ViewRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    country: str | None = None
    view_kind: str | None = Field(
        default=None, alias="viewKind", description="One of the ViewKind values"
    )


# ── Results ─────────────────────────────────────────────────────────────


class RestaurantCount(BaseModel):
    country: list[str]
    count: int


class CountryStats(BaseModel):
    country: str
    total_restaurants: int
    vegan: int
    gluten_free: int
    empty: bool = False


class GroupStats(BaseModel):
    country: str
    total_restaurants: int
    vegan: int
    gluten_free: int
    avg_rating: float | None = None
    avg_price_level: float | None = None


class PriceBuckets(BaseModel):
    cheap: int = 0
    medium: int = 0
    luxury: int = 0


class GeoPoint(BaseModel):
    name: str | None
    lat: float
    lng: float
    price_level: str | None = None


class RankedRestaurant(BaseModel):
    name: str | None
    city: str | None
    avg_rating: float | None
    total_reviews_count: int | None
    lat: float | None = None
    lng: float | None = None


class LeaderboardEntry(BaseModel):
    country: str
    count: int


class ExperienceScores(BaseModel):
    country: str
    food: float | None
    service: float | None
    value: float | None
    atmosphere: float | None


class PriceRatingPoint(BaseModel):
    name: str | None
    avg_rating: float
    price_level: str
    total_reviews_count: int
    country: str | None


class ErrorResponse(BaseModel):
    error: str
    detail: str | None = None
