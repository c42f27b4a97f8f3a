"""Naming checks — workflow prefix, snake_case, and descriptive node names."""

from __future__ import annotations

import re
from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from bmadflow.schemas.naming import NamingConvention
from bmadflow.schemas.validation import IssueLevel, ValidationIssue
from bmadflow.validation.structure import as_mapping, node_list

GENERIC_NODE_NAMES = ("Set", "Code", "HTTP Request", "If", "Switch", "Function")
NUMBERED_GENERIC_PATTERN = re.compile(r"(Set|Code|HTTP Request|If|Switch|Function)[0-9]+")
SNAKE_CASE_PATTERN = re.compile(r"[a-z][a-z0-9_]*")


class NameKind(StrEnum):
    """What a standalone name passed to :func:`validate_name` identifies."""

    WORKFLOW = "workflow"
    CREDENTIAL = "credential"
    NODE = "node"


def strip_prefix(name: str, prefix: str) -> str:
    """Remove the first occurrence of ``prefix``, wherever it appears."""
    return name.replace(prefix, "", 1) if prefix else name


def snake_case_suggestion(name: str) -> str:
    lowered = re.sub(r"\s+", "_", name.lower())
    return re.sub(r"[^a-z0-9_]", "", lowered)


def check_naming(
    workflow: Mapping[str, Any], convention: NamingConvention | None = None
) -> list[ValidationIssue]:
    """Check the workflow name against ``convention`` and flag generic node names."""
    convention = convention or NamingConvention()
    issues: list[ValidationIssue] = []

    name = workflow.get("name")
    if name and isinstance(name, str):
        issues.extend(_check_workflow_name(name, convention))

    for index, node in enumerate(as_mapping(n) for n in node_list(workflow)):
        node_name = node.get("name")
        if node_name and isinstance(node_name, str):
            issues.extend(_check_node_name(node_name, f"nodes[{index}].name"))

    return issues


def _check_workflow_name(name: str, convention: NamingConvention) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    prefix = convention.workflow_prefix

    if prefix and not name.startswith(prefix):
        issues.append(ValidationIssue(
            level=IssueLevel.WARNING,
            rule="workflow-prefix",
            message=f'Workflow name should start with "{prefix}"',
            location="name",
            current=name,
            suggestion=f"{prefix}{name}",
        ))

    if convention.use_snake_case:
        bare = strip_prefix(name, prefix)
        if bare and not SNAKE_CASE_PATTERN.fullmatch(bare):
            issues.append(ValidationIssue(
                level=IssueLevel.WARNING,
                rule="workflow-snake-case",
                message="Workflow name should use snake_case",
                location="name",
                current=name,
            ))

    return issues


def _check_node_name(name: str, location: str) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    if name in GENERIC_NODE_NAMES:
        issues.append(ValidationIssue(
            level=IssueLevel.INFO,
            rule="generic-node-name",
            message=(
                f'Node "{name}" has a generic name - consider making it more descriptive'
            ),
            location=location,
        ))

    if NUMBERED_GENERIC_PATTERN.fullmatch(name):
        issues.append(ValidationIssue(
            level=IssueLevel.WARNING,
            rule="numbered-node-name",
            message=f'Node "{name}" should have a descriptive name',
            location=location,
        ))

    return issues


def validate_name(
    name: str,
    kind: NameKind | str = NameKind.WORKFLOW,
    convention: NamingConvention | None = None,
) -> list[ValidationIssue]:
    """Check a single name outside of any workflow document.

    Workflow names get prefix and snake_case checks, each with a suggested
    replacement; credential names get the credential prefix check; node
    names get the generic-name checks.
    """
    convention = convention or NamingConvention()
    kind = NameKind(kind)

    if kind is NameKind.NODE:
        return _check_node_name(name, "name")

    if kind is NameKind.CREDENTIAL:
        prefix = convention.credential_prefix
        if prefix and not name.startswith(prefix):
            return [ValidationIssue(
                level=IssueLevel.WARNING,
                rule="credential-prefix",
                message=f'Should start with "{prefix}"',
                location="name",
                current=name,
                suggestion=f"{prefix}{name}",
            )]
        return []

    issues: list[ValidationIssue] = []
    for issue in _check_workflow_name(name, convention):
        if issue.rule == "workflow-snake-case":
            bare = strip_prefix(name, convention.workflow_prefix)
            issue = issue.model_copy(update={"suggestion": snake_case_suggestion(bare)})
        issues.append(issue)
    return issues
