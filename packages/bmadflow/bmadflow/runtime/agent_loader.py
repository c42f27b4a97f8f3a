"""Agent loader — cached loading, listing, and lookup of agent personas."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, Field

from bmadflow.config.provider import ConfigProvider
from bmadflow.core.errors import BmadError
from bmadflow.runtime.agent_cache import AgentCache
from bmadflow.runtime.documents import DocumentSource
from bmadflow.schemas.agent import Agent, Menu, normalize_agent

logger = logging.getLogger(__name__)


class AgentSummary(BaseModel):
    """Lightweight summary for agent listings.

    Agents that fail to load are still listed, with ``error`` set and the
    failure in ``description``.
    """

    id: str
    name: str
    role: str
    description: str = ""
    expertise_count: int = 0
    has_menu: bool = False
    error: bool = False


class AgentValidation(BaseModel):
    """Result of checking one agent document for required fields."""

    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    agent: Agent | None = None


class AgentLoader:
    """Loads agent documents through a :class:`DocumentSource`.

    Loaded agents are memoized in an :class:`AgentCache`, which callers may
    share or isolate. ``available_agents`` is the configured roster used by
    the listing and search operations.
    """

    def __init__(
        self,
        source: DocumentSource,
        cache: AgentCache | None = None,
        available_agents: list[str] | None = None,
    ) -> None:
        self._source = source
        self._cache = cache if cache is not None else AgentCache()
        self._available = list(available_agents or [])

    @classmethod
    def from_config(
        cls, config: ConfigProvider, cache: AgentCache | None = None
    ) -> AgentLoader:
        """Build a loader over the project's agent directory and roster."""
        return cls(
            DocumentSource.from_config(config),
            cache=cache,
            available_agents=config.available_agents(),
        )

    @property
    def cache(self) -> AgentCache:
        return self._cache

    @property
    def available_agents(self) -> list[str]:
        return list(self._available)

    def load_agent(self, agent_id: str, *, use_cache: bool = True) -> Agent:
        """Load and normalize one agent.

        Raises:
            NotFoundError: If the agent document does not exist.
            DocumentParseError: If the document cannot be decoded.
        """
        if use_cache:
            cached = self._cache.get(agent_id)
            if cached is not None:
                return cached

        raw = self._source.load_raw_agent_document(agent_id)
        agent = normalize_agent(raw, agent_id)
        if not use_cache:
            return agent
        return self._cache.put(agent_id, agent)

    def load_all_agents(self) -> list[Agent]:
        """Load every available agent, skipping those that fail."""
        agents: list[Agent] = []
        for agent_id in self._available:
            try:
                agents.append(self.load_agent(agent_id))
            except BmadError as exc:
                logger.warning("Could not load agent %s: %s", agent_id, exc)
        return agents

    def list_agents(self) -> list[AgentSummary]:
        """Summarize every available agent in roster order."""
        summaries: list[AgentSummary] = []
        for agent_id in self._available:
            try:
                agent = self.load_agent(agent_id)
            except BmadError as exc:
                logger.warning("Listing placeholder for agent %s: %s", agent_id, exc)
                summaries.append(AgentSummary(
                    id=agent_id,
                    name=agent_id,
                    role="Unknown",
                    description=f"Error: {exc}",
                    error=True,
                ))
                continue
            summaries.append(AgentSummary(
                id=agent.id,
                name=agent.name,
                role=agent.role,
                description=agent.short_description[:100],
                expertise_count=len(agent.expertise),
                has_menu=agent.menu is not None,
            ))
        return summaries

    def get_menu(self, agent_id: str) -> Menu | None:
        return self.load_agent(agent_id).menu

    def get_expertise(self, agent_id: str) -> list[str]:
        return self.load_agent(agent_id).expertise

    def get_prompts(self, agent_id: str, prompt_key: str | None = None) -> Any:
        """Return all prompts of an agent, or one prompt (None if missing)."""
        prompts = self.load_agent(agent_id).prompts
        if prompt_key:
            return prompts.get(prompt_key)
        return prompts

    def find_agents_by_expertise(self, keyword: str) -> list[Agent]:
        """Agents whose expertise, description, or role mention ``keyword``."""
        needle = keyword.lower()
        return [
            agent
            for agent in self.load_all_agents()
            if any(needle in e.lower() for e in agent.expertise)
            or needle in agent.description.lower()
            or needle in agent.role.lower()
        ]

    def validate_agent(self, agent_id: str) -> AgentValidation:
        """Re-read an agent from disk and check its required fields."""
        try:
            agent = self.load_agent(agent_id, use_cache=False)
        except BmadError as exc:
            return AgentValidation(valid=False, errors=[str(exc)])

        errors: list[str] = []
        warnings: list[str] = []
        header = agent.raw.get("agent")
        if not isinstance(header, dict):
            header = {}
        for field in ("id", "name", "role"):
            if not header.get(field):
                errors.append(f"Missing agent.{field}")
        if not agent.description:
            warnings.append("Missing identity.description")
        if not agent.expertise:
            warnings.append("No expertise defined")

        return AgentValidation(
            valid=not errors,
            errors=errors,
            warnings=warnings,
            agent=agent if not errors else None,
        )


def format_agent_for_display(agent: Agent, *, detailed: bool = False) -> dict[str, Any]:
    """Flatten an agent into the fields shown by the CLI."""
    formatted: dict[str, Any] = {
        "id": agent.id,
        "name": agent.name,
        "role": agent.role,
        "shortDescription": agent.short_description,
    }
    if detailed:
        formatted.update({
            "fullDescription": agent.description,
            "expertise": agent.expertise,
            "personality": agent.personality,
            "capabilities": agent.capabilities,
            "templates": agent.templates,
            "hasMenu": agent.menu is not None,
            "hasPrompts": bool(agent.prompts),
        })
    return formatted
