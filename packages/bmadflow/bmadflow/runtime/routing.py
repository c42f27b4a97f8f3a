"""Agent routing — recommend an agent for a free-text query."""

from __future__ import annotations

import logging

from pydantic import BaseModel

from bmadflow.core.errors import BmadError
from bmadflow.runtime.agent_loader import AgentLoader
from bmadflow.schemas.agent import Agent, RoutingTable

logger = logging.getLogger(__name__)

MASTER_AGENT_ID = "n8n-master"


class RouteResult(BaseModel):
    """The agent a query was routed to and why."""

    agent: Agent
    reason: str
    matched_keyword: str


def get_routing_rules(
    loader: AgentLoader, master_id: str = MASTER_AGENT_ID
) -> RoutingTable | None:
    """Routing table of the master agent, or None if it cannot be loaded."""
    try:
        master = loader.load_agent(master_id)
    except BmadError as exc:
        logger.warning("Master agent %s unavailable for routing: %s", master_id, exc)
        return None
    return master.routing


def route_to_agent(
    query: str,
    loader: AgentLoader,
    master_id: str = MASTER_AGENT_ID,
) -> RouteResult | None:
    """Route ``query`` using the master agent's ordered rules.

    A rule matches when one of its keywords is a case-insensitive substring
    of the query. The first keyword whose target agent loads wins; targets
    that fail to load are skipped and scanning continues.
    """
    routing = get_routing_rules(loader, master_id)
    if routing is None or not routing.rules:
        return None

    lower_query = query.lower()
    for rule in routing.rules:
        for keyword in rule.keywords():
            if keyword not in lower_query:
                continue
            try:
                agent = loader.load_agent(rule.agent)
            except BmadError as exc:
                logger.warning(
                    "Routing target %s for keyword '%s' unavailable: %s",
                    rule.agent, keyword, exc,
                )
                continue
            return RouteResult(agent=agent, reason=rule.reason, matched_keyword=keyword)
    return None
