from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from ..errors import StoreFailure
from .config import DEFAULT_STORE_CONFIG, StoreConfig

logger = logging.getLogger(__name__)

NUMERIC_COLUMNS = ("avg_rating", "total_reviews_count")


class RestaurantStore:
    """Read-only, in-memory view of the restaurants table."""

    def __init__(self, frame: pd.DataFrame) -> None:
        frame = frame.reset_index(drop=True).copy()
        for col in NUMERIC_COLUMNS:
            if col in frame.columns:
                frame[col] = pd.to_numeric(frame[col], errors="coerce").astype("float64")
        self._frame = frame

    @classmethod
    def from_records(cls, records: list[dict]) -> "RestaurantStore":
        return cls(pd.DataFrame.from_records(records))

    @classmethod
    def from_csv(cls, path: Path, encoding: str = "utf-8") -> "RestaurantStore":
        try:
            # Text columns stay text; sub-scores and coordinates are validated per view
            frame = pd.read_csv(
                path, dtype=str, encoding=encoding, keep_default_na=False, na_values=[""]
            )
        except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            logger.warning("Could not load restaurants from %s", path, exc_info=True)
            raise StoreFailure("Restaurant data unavailable", detail=str(exc)) from exc
        logger.info("Loaded %d restaurants from %s", len(frame), path)
        return cls(frame)

    def frame(self) -> pd.DataFrame:
        return self._frame

    def __len__(self) -> int:
        return len(self._frame)


_store: RestaurantStore | None = None


def get_store(config: StoreConfig = DEFAULT_STORE_CONFIG) -> RestaurantStore:
    """Return the in-memory restaurant store, loading it on first call."""
    global _store
    if _store is None:
        _store = RestaurantStore.from_csv(config.csv_path, encoding=config.encoding)
    return _store
