from __future__ import annotations

import logging
from typing import Iterable, Mapping

from .aliases import COUNTRY_ALIASES, load_aliases
from .config import DEFAULT_COUNTRY_CONFIG, CountryConfig

logger = logging.getLogger(__name__)


class NameResolver:
    """
    Resolve display country names against a fixed alias table.

    Lookups are exact and case-sensitive. Names without an entry resolve
    to themselves, since the store may use that exact spelling.
    """

    def __init__(self, aliases: Mapping[str, Iterable[str]] | None = None) -> None:
        source = COUNTRY_ALIASES if aliases is None else aliases
        self._aliases: dict[str, tuple[str, ...]] = {}
        for name, variants in source.items():
            # Keep declaration order, drop repeats
            ordered = tuple(dict.fromkeys(variants))
            if not ordered:
                raise ValueError(f"Country alias {name!r} has no variants")
            self._aliases[name] = ordered

        self._canonical: dict[str, str] = {}
        for name, variants in self._aliases.items():
            for variant in variants:
                self._canonical.setdefault(variant, name)

    def resolve(self, display_name: str) -> tuple[str, ...]:
        """Return the row-level variants for ``display_name`` (never empty)."""
        return self._aliases.get(display_name, (display_name,))

    def canonical_name(self, variant: str) -> str:
        """Return the display name a row-level spelling belongs to."""
        return self._canonical.get(variant, variant)

    def aliases(self) -> dict[str, list[str]]:
        return {name: list(variants) for name, variants in self._aliases.items()}


_resolver: NameResolver | None = None


def get_resolver(config: CountryConfig = DEFAULT_COUNTRY_CONFIG) -> NameResolver:
    """Return the process-wide resolver, building it on first call."""
    global _resolver
    if _resolver is None:
        if config.aliases_path is not None:
            logger.info("Loading country aliases from %s", config.aliases_path)
            _resolver = NameResolver(load_aliases(config.aliases_path))
        else:
            _resolver = NameResolver()
    return _resolver
