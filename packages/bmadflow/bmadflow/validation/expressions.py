"""Expression checks — node references and null safety inside ``{{ }}`` spans.

These are textual heuristics over the raw parameter strings. Nothing is
parsed or evaluated.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from typing import Any

from bmadflow.schemas.validation import IssueLevel, ValidationIssue
from bmadflow.validation.structure import as_mapping, node_list

EXPRESSION_PATTERN = re.compile(r"\{\{([^}]+)\}\}")
NODE_REFERENCE_PATTERN = re.compile(r"\$\(['\"]([^'\"]+)['\"]\)")


def iter_strings(value: Any, path: str) -> Iterator[tuple[str, str]]:
    """Yield ``(path, text)`` for every string reachable from ``value``."""
    if isinstance(value, str):
        yield path, value
    elif isinstance(value, list):
        for i, item in enumerate(value):
            yield from iter_strings(item, f"{path}[{i}]")
    elif isinstance(value, Mapping):
        for key, item in value.items():
            yield from iter_strings(item, f"{path}.{key}")


def check_expressions(workflow: Mapping[str, Any]) -> list[ValidationIssue]:
    """Scan node parameters for broken references and unguarded property access."""
    issues: list[ValidationIssue] = []
    nodes = [as_mapping(n) for n in node_list(workflow)]
    node_names = [n.get("name") for n in nodes]

    for node_index, node in enumerate(nodes):
        parameters = node.get("parameters")
        if not parameters:
            continue
        for path, text in iter_strings(parameters, "parameters"):
            location = f"nodes[{node_index}].{path}"
            for match in EXPRESSION_PATTERN.finditer(text):
                issues.extend(_check_expression(match, location, node_names))

    return issues


def _check_expression(
    match: re.Match[str], location: str, node_names: list[Any]
) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    expression = match.group(1)

    reference = NODE_REFERENCE_PATTERN.search(expression)
    if reference and reference.group(1) not in node_names:
        issues.append(ValidationIssue(
            level=IssueLevel.ERROR,
            rule="expression-node-ref",
            message=f'Expression references non-existent node: "{reference.group(1)}"',
            location=location,
            expression=match.group(0),
        ))

    if "." in expression and "??" not in expression and "?." not in expression:
        issues.append(ValidationIssue(
            level=IssueLevel.INFO,
            rule="expression-null-safety",
            message="Expression may need null-safe access (?. or ??)",
            location=location,
            expression=match.group(0),
        ))

    return issues
