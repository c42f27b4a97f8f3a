"""Shared test fixtures for bmadflow."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from bmadflow.config.provider import ConfigProvider
from bmadflow.runtime.agent_cache import AgentCache
from bmadflow.runtime.agent_loader import AgentLoader
from bmadflow.runtime.documents import DocumentSource


# ── Agent documents ────────────────────────────────────────────────


MASTER_AGENT: dict[str, Any] = {
    "agent": {"id": "n8n-master", "name": "n8n Master", "role": "Orchestrator"},
    "identity": {
        "description": "Routes requests to specialists.\nKeeps the team in sync.",
        "expertise": ["Team coordination", "Workflow planning"],
        "personality": ["Calm"],
    },
    "menu": {
        "sections": [
            {
                "name": "Workflows",
                "commands": [
                    {"key": "v", "action": "validate", "description": "Validate a workflow"},
                ],
            },
        ],
    },
    "routing": {
        "rules": [
            {
                "condition": "webhook OR api",
                "agent": "integration",
                "reason": "Integration specialist handles external systems",
            },
            {
                "condition": "security OR audit",
                "agent": "ghost",
                "reason": "Nobody home",
            },
            {
                "condition": "audit OR test",
                "agent": "qa",
                "reason": "QA owns reviews",
            },
        ],
    },
    "collaborates_with": [
        {"agent": "integration", "relationship": "delegates integrations"},
        {"agent": "ghost", "relationship": "never answers"},
        {"agent": "qa"},
    ],
    "prompts": {"greeting": "Hello, what are we building?"},
}

INTEGRATION_AGENT: dict[str, Any] = {
    "agent": {
        "id": "integration",
        "name": "Integration Specialist",
        "role": "Integration Engineer",
    },
    "identity": {
        "description": "Connects external APIs and webhooks.",
        "expertise": ["REST APIs", "Webhooks", "OAuth"],
    },
}

QA_AGENT: dict[str, Any] = {
    "agent": {"id": "qa", "name": "QA Engineer", "role": "Quality Assurance"},
    "identity": {"description": "Tests workflows before release."},
}


def write_agent(agents_dir: Path, agent_id: str, document: Any) -> Path:
    """Write ``document`` as ``<agent_id>.agent.yaml`` under ``agents_dir``."""
    agents_dir.mkdir(parents=True, exist_ok=True)
    path = agents_dir / f"{agent_id}.agent.yaml"
    path.write_text(yaml.safe_dump(document, sort_keys=False), encoding="utf-8")
    return path


# ── Fixtures ───────────────────────────────────────────────────────


@pytest.fixture()
def agents_dir(tmp_path: Path) -> Path:
    """Agent directory with a master, two specialists, and a broken file."""
    directory = tmp_path / "agents"
    write_agent(directory, "n8n-master", MASTER_AGENT)
    write_agent(directory, "integration", INTEGRATION_AGENT)
    write_agent(directory, "qa", QA_AGENT)
    (directory / "broken.agent.yaml").write_text("agent: [unclosed\n", encoding="utf-8")
    return directory


@pytest.fixture()
def loader(agents_dir: Path) -> AgentLoader:
    """Loader over ``agents_dir`` whose roster includes a missing agent."""
    return AgentLoader(
        DocumentSource(agents_dir),
        cache=AgentCache(),
        available_agents=["n8n-master", "integration", "qa", "ghost"],
    )


@pytest.fixture()
def project(tmp_path: Path) -> Path:
    """Project tree laid out as ``<root>/src/core/module.yaml``."""
    core = tmp_path / "src" / "core"
    write_agent(core / "agents", "n8n-master", MASTER_AGENT)
    write_agent(core / "agents", "integration", INTEGRATION_AGENT)
    write_agent(core / "agents", "qa", QA_AGENT)

    module = {
        "agents": {
            "default_agent": "n8n-master",
            "agent_path": "./src/core/agents",
            "available_agents": ["n8n-master", "integration", "qa"],
        },
        "templates": {"path": "./templates", "categories": ["agile", "n8n-specific"]},
    }
    (core / "module.yaml").write_text(yaml.safe_dump(module), encoding="utf-8")

    agile = tmp_path / "templates" / "agile"
    agile.mkdir(parents=True)
    (agile / "user-story.md").write_text(
        "# User Story\n\nCaptures one user need.\n\nAs a {{role}} I want {{goal}}.\n",
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture()
def config(project: Path) -> ConfigProvider:
    return ConfigProvider(project / "src" / "core" / "module.yaml")


@pytest.fixture()
def valid_workflow() -> dict[str, Any]:
    """A workflow that passes every rule without issues."""
    return {
        "name": "wf_customer_sync",
        "nodes": [
            {
                "name": "Manual Trigger",
                "type": "n8n-nodes-base.manualTrigger",
                "position": [0, 0],
            },
            {
                "name": "Fetch Customers",
                "type": "n8n-nodes-base.httpRequest",
                "position": [200, 0],
                "parameters": {"url": "https://example.com/{{ $json.id ?? '' }}"},
                "credentials": {"httpHeaderAuth": {"id": "1", "name": "cred_crm"}},
            },
        ],
        "connections": {
            "Manual Trigger": {"main": [[{"node": "Fetch Customers", "type": "main", "index": 0}]]},
        },
    }
