"""Credential checks — hardcoded secrets and unconfigured credential bindings."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from bmadflow.schemas.validation import IssueLevel, ValidationIssue
from bmadflow.validation.structure import as_mapping, node_list

# Tested in order against the lower-cased parameter text; the first hit wins.
SENSITIVE_PATTERNS = (
    re.compile(r"api[_-]?key[\s]*[=:][\s]*['\"][^'\"]+['\"]", re.IGNORECASE),
    re.compile(r"password[\s]*[=:][\s]*['\"][^'\"]+['\"]", re.IGNORECASE),
    re.compile(r"secret[\s]*[=:][\s]*['\"][^'\"]+['\"]", re.IGNORECASE),
    re.compile(r"token[\s]*[=:][\s]*['\"][^'\"]+['\"]", re.IGNORECASE),
    re.compile(r"bearer[\s]+[a-zA-Z0-9_-]+", re.IGNORECASE),
)

CREDENTIAL_NODE_TYPES = (
    "n8n-nodes-base.httpRequest",
    "n8n-nodes-base.postgres",
    "n8n-nodes-base.mysql",
    "n8n-nodes-base.mongodb",
    "n8n-nodes-base.redis",
    "n8n-nodes-base.slack",
    "n8n-nodes-base.github",
)


def render_parameters(value: Any, key: str | None = None, depth: int = 0) -> list[str]:
    """Render parameters as ``key: "value"`` lines for pattern scanning.

    Keys are written bare so the key/value patterns can see them. String
    literals are quoted; strings holding a ``{{ }}`` expression are written
    unquoted, since they resolve credentials at run time.
    """
    indent = "  " * depth
    label = f"{indent}{key}: " if key is not None else indent

    if isinstance(value, Mapping):
        if key is None:
            lines, child_depth = [], depth
        else:
            lines, child_depth = [label.rstrip()], depth + 1
        for child_key, child in value.items():
            lines.extend(render_parameters(child, str(child_key), child_depth))
        return lines
    if isinstance(value, list):
        lines = [label.rstrip()] if key is not None else []
        for item in value:
            lines.extend(render_parameters(item, None, depth + 1))
        return lines
    if isinstance(value, str):
        text = value if "{{" in value else f'"{value}"'
        return [f"{label}{text}"]
    return [f"{label}{value}"]


def parameters_text(parameters: Any) -> str:
    return "\n".join(render_parameters(parameters)).lower()


def find_hardcoded_credential(parameters: Any) -> re.Pattern[str] | None:
    """The first sensitive pattern found in ``parameters``, if any."""
    text = parameters_text(parameters)
    for pattern in SENSITIVE_PATTERNS:
        if pattern.search(text):
            return pattern
    return None


def requires_credentials(node_type: Any) -> bool:
    if not isinstance(node_type, str):
        return False
    return any(cn.split(".")[1] in node_type for cn in CREDENTIAL_NODE_TYPES)


def check_credentials(workflow: Mapping[str, Any]) -> list[ValidationIssue]:
    """Flag secrets written into parameters and credential nodes without bindings."""
    issues: list[ValidationIssue] = []

    for index, node in enumerate(as_mapping(n) for n in node_list(workflow)):
        name = node.get("name")
        parameters = node.get("parameters")

        if parameters and find_hardcoded_credential(parameters) is not None:
            issues.append(ValidationIssue(
                level=IssueLevel.ERROR,
                rule="hardcoded-credential",
                message=f'Node "{name}" may contain hardcoded credentials',
                location=f"nodes[{index}].parameters",
            ))

        if requires_credentials(node.get("type")) and not node.get("credentials"):
            issues.append(ValidationIssue(
                level=IssueLevel.INFO,
                rule="missing-credentials",
                message=f'Node "{name}" may need credentials configured',
                location=f"nodes[{index}]",
            ))

    return issues
