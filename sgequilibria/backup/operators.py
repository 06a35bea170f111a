"""
Equilibrium backup operators for multi-agent Q-learning and dynamic
programming in two-player stochastic games.

A backup turns the agents' joint-action Q-values in a state into the
bimatrix game (Q_i(s, .), Q_j(s, .)), solves it and returns the value of the
state for one agent under the resulting equilibrium. Q-sources are only read.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict

from sgequilibria.core.bimatrix import bimatrix_from_q_sources, other_agent_name
from sgequilibria.core.constants import DEFAULT_DEVICE
from sgequilibria.core.interfaces import AgentQSourceMap, AgentType
from sgequilibria.solvers.bimatrix_solvers import BimatrixEquilibriumSolver
from sgequilibria.solvers.correlated import CorrelatedEquilibriumObjective, CorrelatedEquilibriumSolver
from sgequilibria.solvers.tools import expected_payoffs, joint_action_probabilities

logger = logging.getLogger(__name__)


class SGBackupOperator(ABC):
    """
    Abstract base class for stochastic game backup operators.
    """

    @abstractmethod
    def perform_backup(self, state: Any, for_agent: str,
                       agent_definitions: Dict[str, AgentType],
                       q_source_map: AgentQSourceMap) -> float:
        """
        Compute the value of a state for one agent.

        Args:
            state: State to back up
            for_agent: Agent whose value is returned
            agent_definitions: Agent name -> AgentType of every agent in the game
            q_source_map: Read-only Q-sources of every agent

        Returns:
            Value of state for for_agent
        """
        pass


class CorrelatedQ(SGBackupOperator):
    """
    Correlated-Q backup (Greenwald, Hall & Serrano, "Correlated Q-learning",
    ICML 2003). Defined for two agents only; the agent being backed up is
    always the row player, so LIBERTARIAN selects its own preferred equilibrium.
    """

    def __init__(self,
                 objective: CorrelatedEquilibriumObjective = CorrelatedEquilibriumObjective.UTILITARIAN,
                 device: str = DEFAULT_DEVICE):
        self.objective = CorrelatedEquilibriumObjective(objective)
        self.device = device

    def perform_backup(self, state, for_agent, agent_definitions, q_source_map):
        other = other_agent_name(agent_definitions, for_agent)
        bimatrix = bimatrix_from_q_sources(state, for_agent, other, agent_definitions,
                                           q_source_map, device=self.device)

        # fresh solver per call; backups share no state
        solver = CorrelatedEquilibriumSolver(self.objective, device=self.device)
        joint = solver.solve(bimatrix.row_payoffs, bimatrix.col_payoffs)
        value, _ = expected_payoffs(bimatrix.row_payoffs, bimatrix.col_payoffs, joint)
        logger.debug("CorrelatedQ(%s) backup for %s: %.6f", self.objective.value, for_agent, value)
        return value


class BimatrixQBackup(SGBackupOperator):
    """
    Backup under any bimatrix solution concept. Players are assumed to sample
    independently, so the joint distribution is the outer product of the row
    and column strategies.

    The solver caches its last strategies, so one instance should not be
    shared across threads.
    """

    def __init__(self, solver: BimatrixEquilibriumSolver, device: str = DEFAULT_DEVICE):
        self.solver = solver
        self.device = device

    def perform_backup(self, state, for_agent, agent_definitions, q_source_map):
        other = other_agent_name(agent_definitions, for_agent)
        bimatrix = bimatrix_from_q_sources(state, for_agent, other, agent_definitions,
                                           q_source_map, device=self.device)
        row_strategy, col_strategy = self.solver.solve(bimatrix.row_payoffs, bimatrix.col_payoffs)
        joint = joint_action_probabilities(row_strategy, col_strategy)
        value, _ = expected_payoffs(bimatrix.row_payoffs, bimatrix.col_payoffs, joint)
        return value
