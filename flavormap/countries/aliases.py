from __future__ import annotations

import json
from pathlib import Path

# Display name -> spellings found in restaurant rows and boundary sources.
COUNTRY_ALIASES: dict[str, tuple[str, ...]] = {
    "United Kingdom": ("England", "Scotland", "Wales", "Northern Ireland"),
    "Netherlands": ("The Netherlands", "Netherlands"),
    "Ireland": ("Ireland", "Northern Ireland"),
    "United States": ("United States", "USA", "United States of America"),
}


def load_aliases(path: Path) -> dict[str, tuple[str, ...]]:
    """Read an alias table from a JSON object of ``name -> [variants]``."""
    with open(path, encoding="utf-8") as fh:
        raw = json.load(fh)
    if not isinstance(raw, dict):
        raise ValueError(f"Alias file {path} must contain a JSON object")

    table: dict[str, tuple[str, ...]] = {}
    for name, variants in raw.items():
        if isinstance(variants, str):
            variants = [variants]
        if not isinstance(variants, list) or not all(isinstance(v, str) for v in variants):
            raise ValueError(f"Aliases for {name!r} must be a list of strings")
        table[str(name)] = tuple(variants)
    return table
