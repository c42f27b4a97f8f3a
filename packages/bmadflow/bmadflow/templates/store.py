"""Template store — read-only catalogue of markdown document templates."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pydantic import BaseModel, Field

from bmadflow.config.provider import ConfigProvider
from bmadflow.core.errors import NotFoundError

logger = logging.getLogger(__name__)

_TITLE_PATTERN = re.compile(r"^#\s+(.+)", re.MULTILINE)
_DESCRIPTION_PATTERN = re.compile(r"^#.+\n+([^#\n].+)", re.MULTILINE)
_VARIABLE_PATTERN = re.compile(r"\{\{([^}]+)\}\}")

CATEGORY_DESCRIPTIONS = {
    "project": "Project planning documents (PRD, charter, brief)",
    "agile": "Agile artifacts (epics, stories, sprints)",
    "architecture": "Technical design documents (ADR, solution design)",
    "operations": "Ops documents (runbooks, incident reports)",
    "testing": "QA documents (test plans, test cases)",
    "n8n-specific": "n8n workflow documentation",
    "security": "Security assessments and reviews",
}


class TemplateSummary(BaseModel):
    """Lightweight summary for template listings."""

    name: str
    file: str
    title: str
    description: str = ""
    path: str
    category: str


class Template(BaseModel):
    """A template's content and the placeholders it expects."""

    name: str
    file: str
    title: str
    content: str
    variables: list[str] = Field(default_factory=list)
    path: str
    category: str


def extract_title(content: str, fallback: str) -> str:
    match = _TITLE_PATTERN.search(content)
    return match.group(1) if match else fallback


def extract_variables(content: str) -> list[str]:
    """Unique ``{{variable}}`` names in order of first appearance."""
    seen: list[str] = []
    for match in _VARIABLE_PATTERN.finditer(content):
        if match.group(1) not in seen:
            seen.append(match.group(1))
    return seen


def generate_content(content: str, variables: dict[str, str]) -> str:
    """Substitute every ``{{key}}`` placeholder with its value."""
    result = content
    for key, value in variables.items():
        result = result.replace(f"{{{{{key}}}}}", str(value))
    return result


def parse_variables(pairs: list[str]) -> dict[str, str]:
    """Turn ``key=value`` strings into a mapping.

    The value may itself contain ``=``. Pairs without a key or without
    ``=`` are skipped.
    """
    variables: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not key or not sep:
            logger.warning("Ignoring template variable without key=value form: %r", pair)
            continue
        variables[key] = value
    return variables


class TemplateStore:
    """Read-only store for templates grouped by category.

    Templates are ``*.md`` files under ``{templates_dir}/{category}/``.
    Only the configured categories are listed.
    """

    def __init__(self, templates_dir: str | Path, categories: list[str]) -> None:
        self._dir = Path(templates_dir)
        self._categories = list(categories)

    @classmethod
    def from_config(cls, config: ConfigProvider) -> TemplateStore:
        return cls(
            config.resolve_path("templates.path", "./templates"),
            config.template_categories(),
        )

    @property
    def categories(self) -> list[str]:
        return list(self._categories)

    def list(self, category: str | None = None) -> dict[str, list[TemplateSummary]]:
        """Templates by category; ``category`` filters by case-insensitive substring."""
        targets = self._categories
        if category:
            needle = category.lower()
            targets = [c for c in targets if needle in c.lower()]

        templates: dict[str, list[TemplateSummary]] = {}
        for cat in targets:
            category_dir = self._dir / cat
            if not category_dir.is_dir():
                templates[cat] = []
                continue
            summaries: list[TemplateSummary] = []
            for path in sorted(category_dir.glob("*.md")):
                try:
                    content = path.read_text(encoding="utf-8")
                except OSError as exc:
                    logger.warning("Failed to read template %s: %s", path, exc)
                    continue
                description = _DESCRIPTION_PATTERN.search(content)
                summaries.append(TemplateSummary(
                    name=path.stem,
                    file=path.name,
                    title=extract_title(content, path.stem),
                    description=description.group(1)[:100].strip() if description else "",
                    path=str(path),
                    category=cat,
                ))
            templates[cat] = summaries
        return templates

    def get(self, category: str, name: str) -> Template:
        """Load one template.

        Raises:
            NotFoundError: If the template doesn't exist.
        """
        file_name = name if name.endswith(".md") else f"{name}.md"
        path = self._dir / Path(category).name / Path(file_name).name
        if not path.is_file():
            raise NotFoundError(f"Template not found: {category}/{name}")

        content = path.read_text(encoding="utf-8")
        return Template(
            name=name,
            file=file_name,
            title=extract_title(content, name),
            content=content,
            variables=extract_variables(content),
            path=str(path),
            category=category,
        )
