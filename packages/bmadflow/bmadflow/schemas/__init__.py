"""bmadflow schemas — Pydantic v2 models for agents, naming rules, and issues."""

from bmadflow.schemas.agent import (
    Agent,
    Collaborator,
    CollaboratorRef,
    Menu,
    MenuCommand,
    MenuSection,
    RoutingRule,
    RoutingTable,
    normalize_agent,
)
from bmadflow.schemas.naming import NamingConvention
from bmadflow.schemas.validation import IssueLevel, ValidationIssue, ValidationReport

__all__ = [
    "Agent",
    "Collaborator",
    "CollaboratorRef",
    "IssueLevel",
    "Menu",
    "MenuCommand",
    "MenuSection",
    "NamingConvention",
    "RoutingRule",
    "RoutingTable",
    "ValidationIssue",
    "ValidationReport",
    "normalize_agent",
]
