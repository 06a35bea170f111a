"""
An agent that treats every state as a single-stage game over its immediate
joint rewards and plays an equilibrium strategy of that game.
"""
import logging
from typing import Optional

from sgequilibria.agents.base import Agent
from sgequilibria.core.actions import GroundedAction, enumerate_grounded_actions
from sgequilibria.core.bimatrix import Bimatrix, bimatrix_from_joint_rewards
from sgequilibria.errors import UnsupportedPlayerCount
from sgequilibria.solvers.bimatrix_solvers import BimatrixEquilibriumSolver, MaxMax
from sgequilibria.utils.sampling import StrategySampler, shared_sampler

logger = logging.getLogger(__name__)


class EquilibriumPlayingAgent(Agent):
    """
    Plays the row strategy of a bimatrix solution concept computed from the
    immediate joint rewards of the current state. The default concept is
    MaxMax: assume the opponent will choose actions that maximise our reward.

    The agent keeps no memory between decisions; the observation callbacks
    do nothing.
    """

    def __init__(self, solver: Optional[BimatrixEquilibriumSolver] = None,
                 sampler: Optional[StrategySampler] = None):
        """
        Args:
            solver: Solution concept to play (MaxMax if None)
            sampler: Strategy sampler (the shared sampler if None)
        """
        super().__init__()
        self.solver = solver if solver is not None else MaxMax()
        self.sampler = sampler if sampler is not None else shared_sampler()

    def game_starting(self):
        pass

    def get_action(self, state) -> GroundedAction:
        my_actions = enumerate_grounded_actions(state, self.agent_name, self.agent_type.actions)
        bimatrix = self.construct_bimatrix(state, my_actions)
        row_strategy, _ = self.solver.solve(bimatrix.row_payoffs, bimatrix.col_payoffs)
        selection = my_actions[self.sampler.sample(row_strategy)]
        logger.debug("%s selected %s", self.agent_name, selection)
        return selection

    def observe_outcome(self, state, joint_action, joint_reward, next_state, is_terminal):
        pass

    def game_terminated(self):
        pass

    def construct_bimatrix(self, state, my_actions) -> Bimatrix:
        """
        Build the immediate-reward game of state with this agent as the row
        player. The agent's internal reward function is used when set,
        otherwise the world's reward model.
        """
        reward_model = self.internal_reward_function
        if reward_model is None:
            reward_model = self.world.get_reward_model()

        opponent = self.get_opponent()
        opponent_actions = enumerate_grounded_actions(state, opponent.agent_name, opponent.agent_type.actions)
        return bimatrix_from_joint_rewards(state, self.agent_name, my_actions,
                                           opponent.agent_name, opponent_actions,
                                           self.world.get_action_model(), reward_model)

    def get_opponent(self) -> Agent:
        """
        Returns:
            The other agent registered in the world

        Raises:
            UnsupportedPlayerCount: if the world does not hold exactly this agent and one other
        """
        agents = self.world.get_registered_agents()
        if len(agents) != 2:
            raise UnsupportedPlayerCount(len(agents), "EquilibriumPlayingAgent")
        if agents[0] is self:
            return agents[1]
        if agents[1] is self:
            return agents[0]
        raise UnsupportedPlayerCount(len(agents),
                                     f"Agent '{self.agent_name}' is not registered in its world")
