"""
Configuration for the ingestion step.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class IngestionConfig:
    raw_path: Path = Path(
        os.getenv("RAW_RESTAURANTS_CSV", "flavormap/data/raw/tripadvisor_european_restaurants.csv")
    )
    processed_data_dir: Path = Path("flavormap/data/processed")
    processed_filename: str = "restaurants.csv"

    @property
    def processed_path(self) -> Path:
        return self.processed_data_dir / self.processed_filename


DEFAULT_INGESTION_CONFIG = IngestionConfig()
