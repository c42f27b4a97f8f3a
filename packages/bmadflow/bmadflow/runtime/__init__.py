"""bmadflow runtime — document loading, agent cache, routing, and collaboration."""

from bmadflow.runtime.agent_cache import AgentCache
from bmadflow.runtime.agent_loader import (
    AgentLoader,
    AgentSummary,
    AgentValidation,
    format_agent_for_display,
)
from bmadflow.runtime.collaboration import get_collaborators
from bmadflow.runtime.documents import DocumentSource
from bmadflow.runtime.routing import RouteResult, get_routing_rules, route_to_agent

__all__ = [
    "AgentCache",
    "AgentLoader",
    "AgentSummary",
    "AgentValidation",
    "DocumentSource",
    "RouteResult",
    "format_agent_for_display",
    "get_collaborators",
    "get_routing_rules",
    "route_to_agent",
]
