"""Core error hierarchy for bmadflow."""

from __future__ import annotations


class BmadError(Exception):
    """Base exception for all bmadflow errors."""


class NotFoundError(BmadError):
    """Raised when a referenced document, agent, or template does not exist."""


class DocumentParseError(BmadError):
    """Raised when a document exists but cannot be decoded as a mapping."""


class ConfigError(BmadError):
    """Raised when the module configuration file cannot be loaded."""
