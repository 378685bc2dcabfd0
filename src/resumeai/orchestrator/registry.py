"""
Agent Registry - read-only map from agent id to agent instance.

CLASSES:
    AgentRegistry

FUNCTIONS:
    build_default_registry   (public)
"""

import logging
from types import MappingProxyType
from typing import Dict, Iterable, List

from resumeai.agents import BUILTIN_AGENTS
from resumeai.agents.base import Agent
from resumeai.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class AgentRegistry:
    """Holds every agent the orchestrator can run.

    Built once and never mutated afterwards, so concurrent workflows can share
    it without locking.

    Args:
        agents: Agent instances in registration order.

    Raises:
        ConfigurationError: If an agent has no id or two agents share one.
    """

    def __init__(self, agents: Iterable[Agent]):
        agents_by_id: Dict[str, Agent] = {}
        for agent in agents:
            if not agent.agent_id:
                raise ConfigurationError(f"{type(agent).__name__} has no agent_id")
            if agent.agent_id in agents_by_id:
                raise ConfigurationError(f"Duplicate agent id: {agent.agent_id}")
            agents_by_id[agent.agent_id] = agent

        self._agents = MappingProxyType(agents_by_id)
        logger.info(f" Agent registry built with {len(agents_by_id)} agents")

    def get(self, agent_id: str) -> Agent:
        """Look up an agent.

        Raises:
            ConfigurationError: If no agent is registered under agent_id.
        """
        try:
            return self._agents[agent_id]
        except KeyError:
            raise ConfigurationError(f"Unknown agent: {agent_id}") from None

    def __contains__(self, agent_id: str) -> bool:
        return agent_id in self._agents

    def __len__(self) -> int:
        return len(self._agents)

    def ids(self) -> List[str]:
        return list(self._agents)

    def describe(self) -> List[Dict[str, str]]:
        return [agent.describe() for agent in self._agents.values()]


def build_default_registry(extra_agents: Iterable[Agent] = ()) -> AgentRegistry:
    """Registry with the built-in agents followed by any custom agents."""
    return AgentRegistry([agent_cls() for agent_cls in BUILTIN_AGENTS] + list(extra_agents))
