"""Tests for DocumentSource — raw agent and workflow documents."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from bmadflow.config.provider import ConfigProvider
from bmadflow.core.errors import DocumentParseError, NotFoundError
from bmadflow.runtime.documents import DocumentSource


class TestAgentDocuments:
    def test_load_agent(self, agents_dir: Path) -> None:
        raw = DocumentSource(agents_dir).load_raw_agent_document("qa")
        assert raw["agent"]["name"] == "QA Engineer"

    def test_missing_agent(self, agents_dir: Path) -> None:
        with pytest.raises(NotFoundError, match="Agent not found: ghost"):
            DocumentSource(agents_dir).load_raw_agent_document("ghost")

    def test_invalid_yaml(self, agents_dir: Path) -> None:
        with pytest.raises(DocumentParseError, match="Invalid YAML"):
            DocumentSource(agents_dir).load_raw_agent_document("broken")

    def test_non_mapping(self, agents_dir: Path) -> None:
        (agents_dir / "list.agent.yaml").write_text("- one\n- two\n", encoding="utf-8")
        with pytest.raises(DocumentParseError, match="does not contain a mapping"):
            DocumentSource(agents_dir).load_raw_agent_document("list")

    def test_path_stays_in_directory(self, agents_dir: Path) -> None:
        path = DocumentSource(agents_dir).agent_path("../../etc/qa")
        assert path == agents_dir / "qa.agent.yaml"

    def test_from_config(self, config: ConfigProvider, project: Path) -> None:
        source = DocumentSource.from_config(config)
        assert source.agents_dir == (project / "src" / "core" / "agents").resolve()


class TestWorkflowDocuments:
    def test_load_workflow(self, tmp_path: Path) -> None:
        path = tmp_path / "wf.json"
        path.write_text(json.dumps({"name": "wf_x", "nodes": []}), encoding="utf-8")
        assert DocumentSource(tmp_path).load_raw_workflow_document(path) == {
            "name": "wf_x",
            "nodes": [],
        }

    def test_missing_workflow(self, tmp_path: Path) -> None:
        with pytest.raises(NotFoundError, match="File not found"):
            DocumentSource(tmp_path).load_raw_workflow_document(tmp_path / "none.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "wf.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(DocumentParseError, match="Failed to parse JSON"):
            DocumentSource(tmp_path).load_raw_workflow_document(path)

    def test_non_object(self, tmp_path: Path) -> None:
        path = tmp_path / "wf.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(DocumentParseError, match="JSON object"):
            DocumentSource(tmp_path).load_raw_workflow_document(path)
