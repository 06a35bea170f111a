"""
Bimatrix payoff pairs and their construction from Q-sources or from
simulated immediate joint rewards.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

import torch
from tabulate import tabulate

from sgequilibria.core.actions import GroundedAction, JointAction, enumerate_grounded_actions
from sgequilibria.core.constants import DTYPE, DEFAULT_DEVICE
from sgequilibria.core.interfaces import AgentQSourceMap, AgentType, JointActionModel, JointReward
from sgequilibria.errors import UnsupportedPlayerCount

logger = logging.getLogger(__name__)


class Bimatrix:
    """
    Row and column player payoffs of a two-player game.

    Both payoff tensors have shape (n_rows, n_cols) where rows index the row
    player's actions and columns the column player's actions.
    """

    def __init__(self, row_payoffs, col_payoffs, device: str = DEFAULT_DEVICE):
        """
        Args:
            row_payoffs: 2-D array-like of the row player's payoffs
            col_payoffs: 2-D array-like of the column player's payoffs
            device: PyTorch device
        """
        self.row_payoffs = torch.as_tensor(row_payoffs, dtype=DTYPE, device=device)
        self.col_payoffs = torch.as_tensor(col_payoffs, dtype=DTYPE, device=device)
        if self.row_payoffs.dim() != 2 or self.row_payoffs.shape != self.col_payoffs.shape:
            raise ValueError(f"Payoff matrices are not of equal 2-D dimension: "
                             f"{tuple(self.row_payoffs.shape)} vs {tuple(self.col_payoffs.shape)}")

    @classmethod
    def zeros(cls, n_rows: int, n_cols: int, device: str = DEFAULT_DEVICE) -> "Bimatrix":
        return cls(torch.zeros((n_rows, n_cols), dtype=DTYPE),
                   torch.zeros((n_rows, n_cols), dtype=DTYPE), device=device)

    @property
    def n_rows(self) -> int:
        return self.row_payoffs.shape[0]

    @property
    def n_cols(self) -> int:
        return self.row_payoffs.shape[1]

    @property
    def shape(self):
        return tuple(self.row_payoffs.shape)

    def set_payoff(self, row: int, col: int, row_payoff: float, col_payoff: float) -> None:
        self.row_payoffs[row, col] = row_payoff
        self.col_payoffs[row, col] = col_payoff

    def to_table(self, row_labels: Optional[Sequence[str]] = None,
                 col_labels: Optional[Sequence[str]] = None,
                 floatfmt: str = ".4f") -> str:
        """
        Render the game as a table whose cells read "row payoff, col payoff".
        """
        row_labels = list(row_labels) if row_labels is not None else [f"r{i}" for i in range(self.n_rows)]
        col_labels = list(col_labels) if col_labels is not None else [f"c{j}" for j in range(self.n_cols)]
        rows = []
        for i in range(self.n_rows):
            row = [row_labels[i]]
            for j in range(self.n_cols):
                row.append(f"{self.row_payoffs[i, j].item():{floatfmt}}, "
                           f"{self.col_payoffs[i, j].item():{floatfmt}}")
            rows.append(row)
        return tabulate(rows, headers=[""] + col_labels, tablefmt="pipe")

    def __str__(self):
        return self.to_table()

    def __repr__(self):
        return f"Bimatrix(shape={self.shape})"


def other_agent_name(agent_definitions: Dict[str, AgentType], for_agent: str) -> str:
    """
    Get the name of the single agent other than for_agent.

    Raises:
        UnsupportedPlayerCount: if there are not exactly two agents, or
            for_agent is not one of them
    """
    if len(agent_definitions) != 2:
        raise UnsupportedPlayerCount(len(agent_definitions))
    if for_agent not in agent_definitions:
        raise UnsupportedPlayerCount(len(agent_definitions),
                                     f"Agent '{for_agent}' is not one of the two defined agents")
    for name in agent_definitions:
        if name != for_agent:
            return name
    raise UnsupportedPlayerCount(1, "Both agent definitions share the same name")


def bimatrix_from_q_sources(state: Any, row_agent: str, col_agent: str,
                            agent_definitions: Dict[str, AgentType],
                            q_source_map: AgentQSourceMap,
                            device: str = DEFAULT_DEVICE) -> Bimatrix:
    """
    Build the bimatrix game whose payoffs are each agent's joint-action Q-values.

    Args:
        state: State whose joint actions are evaluated
        row_agent: Agent whose actions index the rows
        col_agent: Agent whose actions index the columns
        agent_definitions: Agent name -> AgentType, exactly two entries
        q_source_map: Read-only Q-sources of both agents
        device: PyTorch device

    Returns:
        Bimatrix with row_payoffs[i, j] = Q_row(s, (a_i, b_j)) and
        col_payoffs[i, j] = Q_col(s, (a_i, b_j))
    """
    if len(agent_definitions) != 2:
        raise UnsupportedPlayerCount(len(agent_definitions))

    row_q = q_source_map.agent_q_source(row_agent)
    col_q = q_source_map.agent_q_source(col_agent)

    row_actions = enumerate_grounded_actions(state, row_agent, agent_definitions[row_agent].actions)
    col_actions = enumerate_grounded_actions(state, col_agent, agent_definitions[col_agent].actions)

    bimatrix = Bimatrix.zeros(len(row_actions), len(col_actions), device=device)
    for i, ra in enumerate(row_actions):
        for j, ca in enumerate(col_actions):
            ja = JointAction.of(ra, ca)
            bimatrix.set_payoff(i, j, row_q.q_value(state, ja), col_q.q_value(state, ja))
    logger.debug("Built %dx%d bimatrix from Q-sources of %s and %s",
                 bimatrix.n_rows, bimatrix.n_cols, row_agent, col_agent)
    return bimatrix


def bimatrix_from_joint_rewards(state: Any,
                                row_agent: str, row_actions: List[GroundedAction],
                                col_agent: str, col_actions: List[GroundedAction],
                                action_model: JointActionModel,
                                reward_model: JointReward,
                                device: str = DEFAULT_DEVICE) -> Bimatrix:
    """
    Build the single-stage game of immediate rewards in a state.

    Each joint action is simulated once with the action model and scored with
    the reward model. Callers with their own reward function pass it as
    reward_model in place of the world's.
    """
    bimatrix = Bimatrix.zeros(len(row_actions), len(col_actions), device=device)
    for i, ra in enumerate(row_actions):
        for j, ca in enumerate(col_actions):
            ja = JointAction.of(ra, ca)
            next_state = action_model.perform_joint_action(state, ja)
            rewards = reward_model.reward(state, ja, next_state)
            bimatrix.set_payoff(i, j, rewards[row_agent], rewards[col_agent])
    logger.debug("Built %dx%d bimatrix from immediate rewards for %s vs %s",
                 bimatrix.n_rows, bimatrix.n_cols, row_agent, col_agent)
    return bimatrix
