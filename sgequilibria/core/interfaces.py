"""
Interfaces of the collaborators consumed by the equilibrium engine.

States are opaque to this package; they are only handed to action types,
Q-sources and the world's models. Implementations live outside sgequilibria
(world simulation, Q-learning, state representations).
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, TYPE_CHECKING

if TYPE_CHECKING:
    from sgequilibria.core.actions import ActionType, JointAction
    from sgequilibria.agents.base import Agent


@dataclass
class AgentType:
    """
    The declared action types of a class of agents.

    Attributes:
        name: Name of the agent type
        actions: Action types agents of this type may take, in declaration order
    """
    name: str
    actions: List["ActionType"] = field(default_factory=list)


class QSourceForSingleAgent(ABC):
    """
    Read-only view of one agent's joint-action Q-values.

    The owner of the Q-values must not write to them while a backup is
    reading the same state.
    """

    @abstractmethod
    def q_value(self, state: Any, joint_action: "JointAction") -> float:
        """
        Get the Q-value of a joint action in a state.

        Args:
            state: The state
            joint_action: Joint action taken in the state

        Returns:
            Q-value estimate for the agent that owns this source
        """
        pass


class AgentQSourceMap(ABC):
    """Maps agent names to their Q-sources."""

    @abstractmethod
    def agent_q_source(self, agent_name: str) -> QSourceForSingleAgent:
        pass


class DictAgentQSourceMap(AgentQSourceMap):
    """AgentQSourceMap backed by a plain dictionary."""

    def __init__(self, q_sources: Dict[str, QSourceForSingleAgent]):
        self.q_sources = dict(q_sources)

    def agent_q_source(self, agent_name: str) -> QSourceForSingleAgent:
        if agent_name not in self.q_sources:
            raise KeyError(f"No Q-source registered for agent '{agent_name}'")
        return self.q_sources[agent_name]


class JointActionModel(ABC):
    """Transition dynamics for joint actions."""

    @abstractmethod
    def perform_joint_action(self, state: Any, joint_action: "JointAction") -> Any:
        """
        Returns:
            The successor state of taking joint_action in state
        """
        pass


class JointReward(ABC):
    """Reward function over joint actions."""

    @abstractmethod
    def reward(self, state: Any, joint_action: "JointAction", next_state: Any) -> Dict[str, float]:
        """
        Returns:
            Mapping from agent name to the reward it receives for the transition
        """
        pass


class World(ABC):
    """The parts of the world simulation an agent may consult."""

    @abstractmethod
    def get_registered_agents(self) -> List["Agent"]:
        pass

    @abstractmethod
    def get_reward_model(self) -> JointReward:
        pass

    @abstractmethod
    def get_action_model(self) -> JointActionModel:
        pass
