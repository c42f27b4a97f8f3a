"""Module configuration — YAML file merged over built-in defaults."""

from __future__ import annotations

import copy
import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from bmadflow.core.errors import ConfigError
from bmadflow.schemas.naming import NamingConvention

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "./src/core/module.yaml"
DEFAULT_INSTANCE_URL = "http://localhost:5678"
INSTANCE_URL_ENV = "N8N_INSTANCE_URL"

DEFAULT_CONFIG: dict[str, Any] = {
    "framework": {
        "name": "n8n-BMAD",
        "version": "1.0.0",
        "description": "AI-powered methodology framework for n8n workflow automation teams",
    },
    "options": {
        "n8n_instance_url": {
            "default": DEFAULT_INSTANCE_URL,
            "env_var": INSTANCE_URL_ENV,
        },
        "naming_convention": {
            "default": {
                "workflow_prefix": "wf_",
                "credential_prefix": "cred_",
                "environment_separator": "_",
                "use_snake_case": True,
            },
        },
    },
    "defaults": {
        "workflow": {
            "timezone": "UTC",
            "save_execution_progress": True,
        },
        "validation": {
            "check_naming": True,
            "check_credentials": True,
            "check_expressions": True,
            "check_connections": True,
        },
    },
    "output": {
        "docs_path": "./docs/generated",
        "exports_path": "./exports",
        "backups_path": "./backups",
        "reports_path": "./reports",
    },
    "agents": {
        "default_agent": "n8n-master",
        "agent_path": "./src/core/agents",
        "available_agents": [
            "n8n-master",
            "po",
            "pm",
            "sm",
            "architect",
            "developer",
            "qa",
            "devops",
            "ba",
            "security",
            "integration",
            "data-analyst",
            "tech-writer",
        ],
    },
    "templates": {
        "path": "./templates",
        "categories": [
            "project",
            "agile",
            "architecture",
            "operations",
            "testing",
            "n8n-specific",
            "security",
        ],
    },
    "patterns": {
        "path": "./patterns",
        "categories": [
            "error-handling",
            "integration",
            "data-transformation",
            "scheduling",
        ],
    },
    "reference": {
        "path": "./reference",
    },
    "logging": {
        "level": "info",
        "format": "text",
        "output": "console",
    },
}

_REQUIRED_SECTIONS = ("framework", "agents", "templates")
_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


class ConfigValidation(BaseModel):
    """Outcome of checking a loaded configuration for required sections."""

    valid: bool
    errors: list[str] = Field(default_factory=list)


def deep_merge(target: dict[str, Any], source: dict[str, Any]) -> dict[str, Any]:
    """Merge ``source`` over ``target`` without mutating either.

    Nested mappings merge key by key; any other value in ``source``
    replaces the one in ``target``.
    """
    result = dict(target)
    for key, value in source.items():
        if isinstance(value, dict):
            if isinstance(target.get(key), dict):
                result[key] = deep_merge(target[key], value)
            else:
                result[key] = dict(value)
        else:
            result[key] = value
    return result


def _resolve_value(value: Any) -> Any:
    if isinstance(value, str):
        return _ENV_VAR_PATTERN.sub(
            lambda m: os.environ.get(m.group(1)) or m.group(0), value
        )
    if isinstance(value, dict):
        return resolve_env_vars(value)
    if isinstance(value, list):
        return [_resolve_value(item) for item in value]
    return value


def resolve_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Replace ``${VAR}`` in string values with environment variables.

    Mappings and lists are walked recursively. Unknown variables are left
    as written.
    """
    return {key: _resolve_value(value) for key, value in config.items()}


class ConfigProvider:
    """Read-only access to the framework's module configuration.

    The file is parsed on first access and kept for the provider's lifetime.
    A missing file yields the built-in defaults when ``merge_defaults`` is
    set; otherwise it is a ConfigError.
    """

    def __init__(
        self,
        config_path: str | Path = DEFAULT_CONFIG_PATH,
        *,
        merge_defaults: bool = True,
    ) -> None:
        self._path = Path(config_path)
        if not self._path.is_absolute():
            self._path = Path.cwd() / self._path
        self._merge_defaults = merge_defaults
        self._config: dict[str, Any] | None = None
        self._project_root: Path | None = None

    @property
    def config_path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any]:
        """Return the merged configuration, reading the file on first call."""
        if self._config is not None:
            return self._config

        if not self._path.exists():
            if not self._merge_defaults:
                raise ConfigError(f"Configuration file not found: {self._path}")
            logger.debug("No configuration at %s, using defaults", self._path)
            self._config = copy.deepcopy(DEFAULT_CONFIG)
            return self._config

        try:
            data = yaml.safe_load(self._path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in configuration file: {exc}") from exc
        except OSError as exc:
            raise ConfigError(f"Cannot read configuration file {self._path}: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file {self._path} must contain a mapping")

        data = resolve_env_vars(data)
        self._config = deep_merge(DEFAULT_CONFIG, data) if self._merge_defaults else data
        # <root>/src/core/module.yaml
        self._project_root = self._path.parent.parent.parent
        return self._config

    def clear_cache(self) -> None:
        self._config = None
        self._project_root = None

    def get_value(self, key_path: str, default: Any = None) -> Any:
        """Look up a dot-separated path such as ``agents.default_agent``."""
        value: Any = self.load()
        for key in key_path.split("."):
            if not isinstance(value, dict):
                return default
            value = value.get(key)
            if value is None:
                return default
        return value

    @property
    def project_root(self) -> Path:
        self.load()
        return self._project_root or Path.cwd()

    def resolve_path(self, key_path: str, default: str) -> Path:
        """Resolve a configured directory against the project root."""
        return (self.project_root / self.get_value(key_path, default)).resolve()

    def get_naming_convention(self) -> NamingConvention:
        convention = self.get_value("options.naming_convention", {})
        settings = convention.get("default") if isinstance(convention, dict) else None
        if not settings:
            return NamingConvention()
        return NamingConvention.model_validate(settings)

    def get_instance_url(self) -> str:
        """Automation instance URL: environment first, then configuration."""
        env_url = os.environ.get(INSTANCE_URL_ENV)
        if env_url:
            return env_url
        url_config = self.get_value("options.n8n_instance_url", {})
        if not isinstance(url_config, dict):
            return DEFAULT_INSTANCE_URL
        return url_config.get("default") or DEFAULT_INSTANCE_URL

    def template_categories(self) -> list[str]:
        return list(self.get_value("templates.categories", []))

    def pattern_categories(self) -> list[str]:
        return list(self.get_value("patterns.categories", []))

    def available_agents(self) -> list[str]:
        return list(self.get_value("agents.available_agents", []))

    def default_agent(self) -> str:
        return self.get_value("agents.default_agent", "n8n-master")

    def validate(self) -> ConfigValidation:
        """Check that required sections and at least one agent are configured."""
        try:
            config = self.load()
        except ConfigError as exc:
            return ConfigValidation(valid=False, errors=[str(exc)])

        errors: list[str] = []
        for section in _REQUIRED_SECTIONS:
            if not config.get(section):
                errors.append(f"Missing required section: {section}")

        agents = config.get("agents")
        if agents and not agents.get("available_agents"):
            errors.append("No agents defined in configuration")

        return ConfigValidation(valid=not errors, errors=errors)
