from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from sgequilibria.core.actions import GroundedAction, JointAction
from sgequilibria.core.interfaces import AgentType, JointReward, World


class Agent(ABC):
    """
    An agent that plays in a stochastic game world.

    The world calls join_world when the agent is registered, then drives the
    game_starting / get_action / observe_outcome / game_terminated cycle.
    """

    def __init__(self):
        self.world: Optional[World] = None
        self.agent_name: Optional[str] = None
        self.agent_type: Optional[AgentType] = None
        self.internal_reward_function: Optional[JointReward] = None

    def join_world(self, world: World, agent_name: str, agent_type: AgentType) -> None:
        self.world = world
        self.agent_name = agent_name
        self.agent_type = agent_type

    def set_internal_reward_function(self, reward_function: Optional[JointReward]) -> None:
        """Use reward_function instead of the world's reward model for this agent's own decisions."""
        self.internal_reward_function = reward_function

    @abstractmethod
    def game_starting(self) -> None:
        pass

    @abstractmethod
    def get_action(self, state: Any) -> GroundedAction:
        pass

    @abstractmethod
    def observe_outcome(self, state: Any, joint_action: JointAction, joint_reward: Dict[str, float],
                        next_state: Any, is_terminal: bool) -> None:
        pass

    @abstractmethod
    def game_terminated(self) -> None:
        pass
