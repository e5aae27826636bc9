from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class CountryConfig:
    # JSON file with {"Canonical": ["Variant", ...]}; built-in table when unset
    aliases_path: Path | None = (
        Path(os.environ["COUNTRY_ALIASES_PATH"]) if os.getenv("COUNTRY_ALIASES_PATH") else None
    )


DEFAULT_COUNTRY_CONFIG = CountryConfig()
