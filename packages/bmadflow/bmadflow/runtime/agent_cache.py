"""Agent cache — identity-keyed memo of loaded agents."""

from __future__ import annotations

import threading

from bmadflow.schemas.agent import Agent


class AgentCache:
    """Maps agent id to the loaded :class:`Agent`.

    Entries never expire; they stay until :meth:`clear` is called. Access
    is serialized with a lock so concurrent readers and writers see a
    consistent mapping.
    """

    def __init__(self) -> None:
        self._agents: dict[str, Agent] = {}
        self._lock = threading.Lock()

    def get(self, agent_id: str) -> Agent | None:
        with self._lock:
            return self._agents.get(agent_id)

    def put(self, agent_id: str, agent: Agent) -> Agent:
        """Store ``agent`` unless an entry exists; return the cached one."""
        with self._lock:
            return self._agents.setdefault(agent_id, agent)

    def clear(self) -> None:
        with self._lock:
            self._agents.clear()

    def __contains__(self, agent_id: object) -> bool:
        with self._lock:
            return agent_id in self._agents

    def __len__(self) -> int:
        with self._lock:
            return len(self._agents)
