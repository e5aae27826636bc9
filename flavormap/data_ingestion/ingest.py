from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import pandas as pd

from .config import DEFAULT_INGESTION_CONFIG, IngestionConfig

logger = logging.getLogger(__name__)


CANONICAL_COLUMNS: List[str] = [
    "restaurant_name",
    "country",
    "city",
    "latitude",
    "longitude",
    "price_level",
    "avg_rating",
    "total_reviews_count",
    "cuisines",
    "top_tags",
    "food",
    "service",
    "value",
    "atmosphere",
    "vegan_options",
    "gluten_free",
]

# Spellings seen across exports of the same dataset, first match wins
_COLUMN_CANDIDATES: dict[str, List[str]] = {
    "restaurant_name": ["restaurant_name", "name"],
    "country": ["country"],
    "city": ["city"],
    "latitude": ["latitude", "lat"],
    "longitude": ["longitude", "lng", "lon"],
    "price_level": ["price_level"],
    "avg_rating": ["avg_rating", "rating"],
    "total_reviews_count": ["total_reviews_count", "reviews_count"],
    "cuisines": ["cuisines", "cuisines_list"],
    "top_tags": ["top_tags", "top_tags_list"],
    "food": ["food"],
    "service": ["service"],
    "value": ["value"],
    "atmosphere": ["atmosphere"],
    "vegan_options": ["vegan_options"],
    "gluten_free": ["gluten_free"],
}


def _first_present(columns: List[str], candidates: List[str]) -> str | None:
    for col in candidates:
        if col in columns:
            return col
    return None


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Project a raw export onto ``CANONICAL_COLUMNS``; absent columns are empty."""
    canonical = pd.DataFrame(index=df.index)
    for target in CANONICAL_COLUMNS:
        source = _first_present(list(df.columns), _COLUMN_CANDIDATES[target])
        if source is None:
            logger.warning("Raw data has no column for %s", target)
            canonical[target] = pd.NA
        else:
            canonical[target] = df[source]
    return canonical[CANONICAL_COLUMNS]


def run_ingestion(config: IngestionConfig = DEFAULT_INGESTION_CONFIG) -> Path:
    """
    Execute the ingestion step.

    Steps:
    - Read the raw export as text, keeping every value as stored.
    - Map raw fields onto the canonical restaurant columns.
    - Persist the processed CSV for the store.
    """
    config.processed_data_dir.mkdir(parents=True, exist_ok=True)

    df = pd.read_csv(
        config.raw_path, dtype=str, encoding="utf-8", keep_default_na=False, na_values=[""]
    )
    canonical = normalize_columns(df)

    output_path = config.processed_path
    canonical.to_csv(output_path, index=False)
    logger.info("Wrote %d restaurants to %s", len(canonical), output_path)
    return output_path


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    path = run_ingestion()
    print(f"Ingestion complete. Processed data saved to: {path}")
