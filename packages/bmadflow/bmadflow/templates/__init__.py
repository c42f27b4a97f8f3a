"""bmadflow templates — markdown template catalogue and variable substitution."""

from bmadflow.templates.store import (
    CATEGORY_DESCRIPTIONS,
    Template,
    TemplateStore,
    TemplateSummary,
    extract_variables,
    generate_content,
    parse_variables,
)

__all__ = [
    "CATEGORY_DESCRIPTIONS",
    "Template",
    "TemplateStore",
    "TemplateSummary",
    "extract_variables",
    "generate_content",
    "parse_variables",
]
