"""bmadflow core — error hierarchy."""

from bmadflow.core.errors import (
    BmadError,
    ConfigError,
    DocumentParseError,
    NotFoundError,
)

__all__ = [
    "BmadError",
    "ConfigError",
    "DocumentParseError",
    "NotFoundError",
]
