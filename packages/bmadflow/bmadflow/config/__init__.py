"""bmadflow configuration — module.yaml loading and lookups."""

from bmadflow.config.provider import (
    DEFAULT_CONFIG,
    ConfigProvider,
    ConfigValidation,
    deep_merge,
    resolve_env_vars,
)

__all__ = [
    "DEFAULT_CONFIG",
    "ConfigProvider",
    "ConfigValidation",
    "deep_merge",
    "resolve_env_vars",
]
