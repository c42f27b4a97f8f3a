"""Tests for validate_workflow — checker composition and report output."""

from __future__ import annotations

import copy
from typing import Any

from bmadflow.schemas.naming import NamingConvention
from bmadflow.schemas.validation import IssueLevel
from bmadflow.validation.engine import RULE_CHECKERS, validate_workflow


class TestValidateWorkflow:
    def test_clean_workflow(self, valid_workflow: dict[str, Any]) -> None:
        report = validate_workflow(valid_workflow)
        assert report.issues == []
        assert report.passed

    def test_single_manual_trigger(self) -> None:
        report = validate_workflow({
            "name": "wf_test",
            "nodes": [{"name": "Start", "type": "n8n-nodes-base.manualTrigger"}],
            "connections": {},
        })
        assert report.error_count == 0
        assert report.passed
        assert "no-trigger" not in [i.rule for i in report.issues]
        assert [i.rule for i in report.warnings] == ["node-position"]

    def test_unprefixed_empty_workflow(self) -> None:
        report = validate_workflow({"name": "Test", "nodes": [], "connections": {}})
        assert [i.rule for i in report.warnings] == [
            "no-trigger",
            "workflow-prefix",
            "workflow-snake-case",
        ]
        assert report.passed
        assert report.exit_code(strict=True) == 1

    def test_hardcoded_api_key(self) -> None:
        report = validate_workflow({
            "name": "wf_call",
            "nodes": [
                {"name": "Start", "type": "n8n-nodes-base.manualTrigger", "position": [0, 0]},
                {
                    "name": "Call",
                    "type": "n8n-nodes-base.httpRequest",
                    "position": [1, 0],
                    "parameters": {"apiKey": "abc123secret"},
                },
            ],
            "connections": {},
        })
        assert [i.rule for i in report.errors] == ["hardcoded-credential"]
        assert not report.passed

    def test_missing_fields_in_order(self) -> None:
        report = validate_workflow({})
        assert [i.message for i in report.errors] == [
            "Missing required field: name",
            "Missing required field: nodes",
            "Missing required field: connections",
        ]

    def test_duplicate_names_symmetric(self) -> None:
        report = validate_workflow({
            "name": "wf_dup",
            "nodes": [
                {"name": "Trigger", "type": "n8n-nodes-base.manualTrigger", "position": [0, 0]},
                {"name": "Step", "type": "n8n-nodes-base.noOp", "position": [1, 0]},
                {"name": "Step", "type": "n8n-nodes-base.noOp", "position": [2, 0]},
            ],
            "connections": {},
        })
        duplicates = [i for i in report.issues if i.rule == "duplicate-node-name"]
        assert [i.location for i in duplicates] == ["nodes[1]", "nodes[2]"]

    def test_checker_order(self) -> None:
        report = validate_workflow({
            "name": "Bad Name",
            "nodes": [
                {
                    "name": "Set",
                    "type": "n8n-nodes-base.set",
                    "parameters": {"value": "{{ $json.a }}", "password": "pw"},
                },
            ],
            "connections": {},
        })
        assert [i.rule for i in report.issues] == [
            "node-position",
            "no-trigger",
            "expression-null-safety",
            "workflow-prefix",
            "workflow-snake-case",
            "generic-node-name",
            "hardcoded-credential",
        ]

    def test_checkers_can_be_disabled(self) -> None:
        workflow = {"name": "Bad Name", "nodes": [], "connections": {}}
        report = validate_workflow(workflow, naming=False)
        assert [i.rule for i in report.issues] == ["no-trigger"]
        disabled = {name: False for name in RULE_CHECKERS}
        assert validate_workflow(workflow, **disabled).issues == []

    def test_convention_applied(self) -> None:
        report = validate_workflow(
            {"name": "flow_orders", "nodes": [], "connections": {}},
            NamingConvention(workflow_prefix="flow_"),
        )
        assert [i.rule for i in report.issues] == ["no-trigger"]

    def test_document_not_modified(self, valid_workflow: dict[str, Any]) -> None:
        before = copy.deepcopy(valid_workflow)
        validate_workflow(valid_workflow)
        assert valid_workflow == before

    def test_deterministic(self) -> None:
        workflow = {"name": "Test", "nodes": [{"name": "Set"}], "connections": {"X": {}}}
        assert validate_workflow(workflow) == validate_workflow(workflow)

    def test_levels(self) -> None:
        report = validate_workflow({"name": "wf_a", "nodes": [{"name": "Code"}], "connections": {}})
        levels = {i.rule: i.level for i in report.issues}
        assert levels["node-type"] is IssueLevel.ERROR
        assert levels["generic-node-name"] is IssueLevel.INFO
