from __future__ import annotations


class FlavorMapError(Exception):
    """Base class for errors surfaced to API callers."""

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(FlavorMapError):
    """Required input is missing or the view kind is not recognised."""


class ViewConfigurationError(FlavorMapError):
    """A single-country view was given more than one country variant."""


class StoreFailure(FlavorMapError):
    """The restaurant store could not be loaded or queried."""
