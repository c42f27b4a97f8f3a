"""Structure checks — required fields, node shape, connections, and triggers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from bmadflow.schemas.validation import IssueLevel, ValidationIssue

REQUIRED_FIELDS = ("name", "nodes", "connections")

TRIGGER_NODE_TYPES = (
    "n8n-nodes-base.webhook",
    "n8n-nodes-base.manualTrigger",
)


def is_missing(value: Any) -> bool:
    """True for absent or falsy scalars. Empty lists and mappings are present."""
    if value is None:
        return True
    if isinstance(value, (list, dict)):
        return False
    return not value


def as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def node_list(workflow: Mapping[str, Any]) -> list[Any]:
    """The workflow's nodes, or an empty list when they are not an array."""
    nodes = workflow.get("nodes")
    return nodes if isinstance(nodes, list) else []


def is_trigger_type(node_type: Any) -> bool:
    if not isinstance(node_type, str):
        return False
    return (
        "trigger" in node_type
        or "Trigger" in node_type
        or node_type in TRIGGER_NODE_TYPES
    )


def check_structure(workflow: Mapping[str, Any]) -> list[ValidationIssue]:
    """Check the workflow's shape.

    Checks performed, in order:
    - ``name``, ``nodes`` and ``connections`` are present
    - ``nodes`` is an array
    - every node has a type, a name and a position, and a unique name
    - every connection source and target names an existing node
    - at least one node is a trigger
    """
    issues: list[ValidationIssue] = []

    for field in REQUIRED_FIELDS:
        if is_missing(workflow.get(field)):
            issues.append(ValidationIssue(
                level=IssueLevel.ERROR,
                rule="required-field",
                message=f"Missing required field: {field}",
                location="root",
            ))

    nodes = workflow.get("nodes")
    if not is_missing(nodes) and not isinstance(nodes, list):
        issues.append(ValidationIssue(
            level=IssueLevel.ERROR,
            rule="nodes-array",
            message="Nodes must be an array",
            location="nodes",
        ))

    all_nodes = [as_mapping(n) for n in node_list(workflow)]
    for index, node in enumerate(all_nodes):
        issues.extend(_check_node(node, index, all_nodes))

    node_names = {n["name"] for n in all_nodes if isinstance(n.get("name"), str) and n["name"]}
    connections = workflow.get("connections")
    if isinstance(connections, Mapping):
        for source_name, outputs in connections.items():
            issues.extend(_check_connection(source_name, outputs, node_names))

    if isinstance(nodes, list) and not any(is_trigger_type(n.get("type")) for n in all_nodes):
        issues.append(ValidationIssue(
            level=IssueLevel.WARNING,
            rule="no-trigger",
            message="Workflow has no trigger node",
            location="nodes",
        ))

    return issues


def _check_node(
    node: Mapping[str, Any], index: int, all_nodes: list[Mapping[str, Any]]
) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    location = f"nodes[{index}]"
    name = node.get("name")

    if is_missing(node.get("type")):
        issues.append(ValidationIssue(
            level=IssueLevel.ERROR,
            rule="node-type",
            message=f"Node at index {index} missing type",
            location=location,
        ))

    if is_missing(name):
        issues.append(ValidationIssue(
            level=IssueLevel.ERROR,
            rule="node-name",
            message=f"Node at index {index} missing name",
            location=location,
        ))

    if is_missing(node.get("position")):
        issues.append(ValidationIssue(
            level=IssueLevel.WARNING,
            rule="node-position",
            message=f'Node "{name if not is_missing(name) else index}" missing position',
            location=location,
        ))

    # One issue per offending node, so a duplicated pair yields two. Nodes
    # without a name share the same missing name.
    if any(
        i != index and other.get("name") == name for i, other in enumerate(all_nodes)
    ):
        issues.append(ValidationIssue(
            level=IssueLevel.ERROR,
            rule="duplicate-node-name",
            message=f'Duplicate node name: "{name}"',
            location=location,
        ))

    return issues


def _check_connection(
    source_name: str, outputs: Any, node_names: set[str]
) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    if source_name not in node_names:
        issues.append(ValidationIssue(
            level=IssueLevel.ERROR,
            rule="connection-source",
            message=f'Connection references non-existent node: "{source_name}"',
            location=f"connections.{source_name}",
        ))

    main = as_mapping(outputs).get("main")
    if not isinstance(main, list):
        return issues

    for output_index, targets in enumerate(main):
        if not isinstance(targets, list):
            continue
        for conn_index, conn in enumerate(targets):
            target = as_mapping(conn).get("node")
            if is_missing(target) or (isinstance(target, str) and target in node_names):
                continue
            issues.append(ValidationIssue(
                level=IssueLevel.ERROR,
                rule="connection-target",
                message=(
                    f'Connection from "{source_name}" targets non-existent node: "{target}"'
                ),
                location=f"connections.{source_name}.main[{output_index}][{conn_index}]",
            ))

    return issues
