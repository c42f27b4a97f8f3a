"""Agent persona schema and normalization of raw agent documents."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from bmadflow.core.errors import DocumentParseError


class MenuCommand(BaseModel):
    """A single menu entry, selected by a one-character key."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    key: str = ""
    action: str = ""
    description: str = ""


class MenuSection(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str = ""
    commands: list[MenuCommand] = Field(default_factory=list)


class Menu(BaseModel):
    """Command menu shown when an agent is loaded."""

    sections: list[MenuSection] = Field(default_factory=list)


class RoutingRule(BaseModel):
    """Keyword-triggered recommendation of a target agent.

    ``condition`` holds literal keywords joined by ``" OR "``.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    condition: str = ""
    agent: str = ""
    reason: str = ""

    def keywords(self) -> list[str]:
        """Lower-cased keywords of the condition, in declared order."""
        return [k.strip().lower() for k in self.condition.split(" OR ")]


class RoutingTable(BaseModel):
    rules: list[RoutingRule] = Field(default_factory=list)


class CollaboratorRef(BaseModel):
    """Declared edge from an agent to one of its collaborators."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    agent: str
    relationship: str | None = None


class Agent(BaseModel):
    """A normalized agent persona.

    Every optional field is defaulted once, at normalization time, so
    downstream code never has to check for missing sections. ``raw`` keeps
    the document as it was read. YAML numbers in text fields, such as a menu
    key of ``1``, are read as strings.
    """

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    id: str
    name: str
    role: str = "Agent"
    version: str = "1.0.0"

    description: str = ""
    expertise: list[str] = Field(default_factory=list)
    personality: list[str] = Field(default_factory=list)

    responsibilities: dict[str, Any] = Field(default_factory=dict)
    menu: Menu | None = None
    help_system: dict[str, Any] | None = None
    routing: RoutingTable | None = None
    templates: list[str] = Field(default_factory=list)
    collaborates_with: list[CollaboratorRef] = Field(default_factory=list)
    prompts: dict[str, Any] = Field(default_factory=dict)
    capabilities: list[str] = Field(default_factory=list)
    integrations: list[Any] = Field(default_factory=list)

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)

    @property
    def short_description(self) -> str:
        """First line of the description."""
        return self.description.split("\n")[0].strip()


class Collaborator(Agent):
    """An agent annotated with its relationship to the agent that declared it."""

    relationship: str | None = None


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    value = raw.get(key)
    return value if isinstance(value, dict) else {}


def normalize_agent(raw: Any, agent_id: str) -> Agent:
    """Build an :class:`Agent` from a parsed agent document.

    Missing or empty fields fall back to defaults; ``id`` and ``name``
    default to ``agent_id``. Raises DocumentParseError if ``raw`` is not a
    mapping or one of its sections has the wrong shape.
    """
    if not isinstance(raw, dict):
        raise DocumentParseError(
            f"Agent document '{agent_id}' must be a mapping, got {type(raw).__name__}"
        )

    header = _section(raw, "agent")
    identity = _section(raw, "identity")

    try:
        return Agent(
            id=header.get("id") or agent_id,
            name=header.get("name") or agent_id,
            role=header.get("role") or "Agent",
            version=str(header.get("version") or "1.0.0"),
            description=identity.get("description") or "",
            expertise=identity.get("expertise") or [],
            personality=identity.get("personality") or [],
            responsibilities=raw.get("responsibilities") or {},
            menu=raw.get("menu") or None,
            help_system=raw.get("help_system") or None,
            routing=raw.get("routing") or None,
            templates=raw.get("templates") or [],
            collaborates_with=raw.get("collaborates_with") or [],
            prompts=raw.get("prompts") or {},
            capabilities=raw.get("capabilities") or [],
            integrations=raw.get("integrations") or [],
            raw=raw,
        )
    except ValidationError as exc:
        raise DocumentParseError(f"Invalid agent document '{agent_id}': {exc}") from exc
