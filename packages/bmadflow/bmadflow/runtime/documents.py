"""Document source — reads agent YAML and workflow JSON from the filesystem."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from bmadflow.config.provider import ConfigProvider
from bmadflow.core.errors import DocumentParseError, NotFoundError

logger = logging.getLogger(__name__)

AGENT_FILE_SUFFIX = ".agent.yaml"


class DocumentSource:
    """Loads raw, undecorated documents.

    Agents live as ``{agent_id}.agent.yaml`` in one directory. Workflows
    are addressed by path. Both loaders return plain mappings; shaping
    them is left to the caller.
    """

    def __init__(self, agents_dir: str | Path) -> None:
        self._agents_dir = Path(agents_dir)

    @classmethod
    def from_config(cls, config: ConfigProvider) -> DocumentSource:
        """Use the ``agents.agent_path`` directory of the project."""
        return cls(config.resolve_path("agents.agent_path", "./src/core/agents"))

    @property
    def agents_dir(self) -> Path:
        return self._agents_dir

    def agent_path(self, agent_id: str) -> Path:
        # Only the final component is used, to stay inside agents_dir
        safe_id = Path(agent_id).name
        return self._agents_dir / f"{safe_id}{AGENT_FILE_SUFFIX}"

    def load_raw_agent_document(self, agent_id: str) -> dict[str, Any]:
        """Parse an agent document.

        Raises:
            NotFoundError: If no document exists for ``agent_id``.
            DocumentParseError: If the file is not valid YAML or not a mapping.
        """
        path = self.agent_path(agent_id)
        if not path.is_file():
            raise NotFoundError(f"Agent not found: {agent_id} (expected at {path})")
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise DocumentParseError(f"Invalid YAML in agent file {agent_id}: {exc}") from exc
        if not isinstance(data, dict):
            raise DocumentParseError(f"Agent file {agent_id} does not contain a mapping")
        logger.debug("Read agent document %s from %s", agent_id, path)
        return data

    def load_raw_workflow_document(self, path: str | Path) -> dict[str, Any]:
        """Parse a workflow JSON export.

        Raises:
            NotFoundError: If the file does not exist.
            DocumentParseError: If the file is not valid JSON or not an object.
        """
        path = Path(path)
        if not path.is_file():
            raise NotFoundError(f"File not found: {path}")
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise DocumentParseError(f"Failed to parse JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise DocumentParseError(f"Workflow file {path} must contain a JSON object")
        return data
