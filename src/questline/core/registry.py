"""Ordered, identity-keyed registry of agent definitions.

Registry order is pipeline stage order. Edits address agents by id so
positions can change without invalidating references.
"""

from __future__ import annotations

from typing import Iterator, Optional

from ..errors import DuplicateAgentError, UnknownAgentError
from ..models.agent import AgentDefinition
from .agents import load_agents


class AgentRegistry:
    def __init__(self, agents: Optional[list[AgentDefinition]] = None):
        self._agents: dict[str, AgentDefinition] = {}
        for agent in agents or []:
            self.add(agent)

    @classmethod
    def from_config(cls, config: dict) -> "AgentRegistry":
        return cls(load_agents(config))

    # -- Reads --

    def get(self, agent_id: str) -> AgentDefinition:
        try:
            return self._agents[agent_id]
        except KeyError:
            raise UnknownAgentError(f"Unknown agent: {agent_id}") from None

    def get_by_index(self, index: int) -> AgentDefinition:
        ids = self.ids()
        if not 0 <= index < len(ids):
            raise UnknownAgentError(f"No agent at stage {index}")
        return self._agents[ids[index]]

    def index_of(self, agent_id: str) -> int:
        self.get(agent_id)
        return self.ids().index(agent_id)

    def previous(self, agent_id: str) -> Optional[AgentDefinition]:
        """The stage feeding this agent, or None for stage 0."""
        index = self.index_of(agent_id)
        return self.get_by_index(index - 1) if index > 0 else None

    def ids(self) -> list[str]:
        return list(self._agents)

    def __contains__(self, agent_id: object) -> bool:
        return agent_id in self._agents

    def __iter__(self) -> Iterator[AgentDefinition]:
        return iter(list(self._agents.values()))

    def __len__(self) -> int:
        return len(self._agents)

    # -- Edits --

    def update(self, agent_id: str, **changes) -> AgentDefinition:
        """Validate and apply field edits, keeping the agent's position.

        The stored definition is untouched if validation fails.
        """
        current = self.get(agent_id)
        if "id" in changes and changes["id"] != agent_id:
            raise ValueError("Agent id cannot be changed")
        updated = AgentDefinition.model_validate({**current.model_dump(), **changes})
        self._agents[agent_id] = updated
        return updated

    def update_at(self, index: int, **changes) -> AgentDefinition:
        return self.update(self.get_by_index(index).id, **changes)

    def set_model(self, agent_id: str, model: str) -> AgentDefinition:
        return self.update(agent_id, model=model)

    def set_max_tokens(self, agent_id: str, max_tokens: int) -> AgentDefinition:
        return self.update(agent_id, max_tokens=max_tokens)

    def set_system_prompt(self, agent_id: str, system_prompt: str) -> AgentDefinition:
        return self.update(agent_id, system_prompt=system_prompt)

    def add(self, agent: AgentDefinition) -> None:
        if agent.id in self._agents:
            raise DuplicateAgentError(f"Agent already registered: {agent.id}")
        self._agents[agent.id] = agent

    def remove(self, agent_id: str) -> AgentDefinition:
        agent = self.get(agent_id)
        del self._agents[agent_id]
        return agent
