from pathlib import Path

import pandas as pd

from flavormap.data_ingestion.config import IngestionConfig
from flavormap.data_ingestion.ingest import CANONICAL_COLUMNS, normalize_columns, run_ingestion
from flavormap.store.data_store import RestaurantStore


def test_run_ingestion_creates_canonical_processed_file(tmp_path: Path):
    """
    End-to-end ingestion over a small raw export.

    Uses a temporary output directory so we don't pollute real data directories.
    """
    raw = tmp_path / "raw.csv"
    raw.write_text(
        "restaurant_link,restaurant_name,country,city,latitude,longitude,price_level,"
        "avg_rating,total_reviews_count,cuisines,top_tags,food,service,value,atmosphere,"
        "vegan_options,gluten_free\n"
        'g1,Casa,Spain,Madrid,40.4,-3.7,€,4.5,120,"Spanish, Cafe",Cheap Eats,4.5,4,n/a,,Y,N\n',
        encoding="utf-8",
    )
    cfg = IngestionConfig(raw_path=raw, processed_data_dir=tmp_path / "processed")

    output_path = run_ingestion(config=cfg)

    assert output_path.is_file(), "Processed CSV should be created"

    df = pd.read_csv(output_path, dtype=str, keep_default_na=False, na_values=[""])
    assert list(df.columns) == CANONICAL_COLUMNS
    assert df.loc[0, "cuisines"] == "Spanish, Cafe"
    assert df.loc[0, "value"] == "n/a"


def test_normalize_columns_maps_alternate_names():
    raw = pd.DataFrame([{"name": "Casa", "country": "Spain", "lat": "40.4", "lng": "-3.7"}])
    canonical = normalize_columns(raw)

    assert list(canonical.columns) == CANONICAL_COLUMNS
    assert canonical.loc[0, "restaurant_name"] == "Casa"
    assert canonical.loc[0, "latitude"] == "40.4"
    assert pd.isna(canonical.loc[0, "price_level"])


def test_ingestion_keeps_sentinel_words(tmp_path: Path):
    raw = tmp_path / "raw.csv"
    raw.write_text(
        "restaurant_name,country,city,food\n"
        "None,NA,Windhoek,n/a\n",
        encoding="utf-8",
    )
    cfg = IngestionConfig(raw_path=raw, processed_data_dir=tmp_path / "processed")

    store = RestaurantStore.from_csv(run_ingestion(config=cfg))
    frame = store.frame()

    assert frame.loc[0, "restaurant_name"] == "None"
    assert frame.loc[0, "country"] == "NA"
    assert frame.loc[0, "food"] == "n/a"
