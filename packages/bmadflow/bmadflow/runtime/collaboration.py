"""Collaboration resolution — load the agents an agent works with."""

from __future__ import annotations

import logging

from bmadflow.core.errors import BmadError
from bmadflow.runtime.agent_loader import AgentLoader
from bmadflow.schemas.agent import Collaborator

logger = logging.getLogger(__name__)


def get_collaborators(agent_id: str, loader: AgentLoader) -> list[Collaborator]:
    """Direct collaborators of ``agent_id`` in declared order.

    Loading ``agent_id`` itself is required and its errors propagate.
    Collaborators that cannot be loaded are left out of the result.
    """
    agent = loader.load_agent(agent_id)

    collaborators: list[Collaborator] = []
    for ref in agent.collaborates_with:
        try:
            collaborator = loader.load_agent(ref.agent)
        except BmadError as exc:
            logger.warning(
                "Skipping collaborator %s of %s: %s", ref.agent, agent_id, exc
            )
            continue
        collaborators.append(
            Collaborator(**dict(collaborator), relationship=ref.relationship)
        )
    return collaborators
