"""
Solution concepts for two-player single-stage (bimatrix) games that produce
independent row and column strategies.
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional, Tuple

import torch

from sgequilibria.core.constants import DTYPE, DEFAULT_DEVICE, LP_METHOD
from sgequilibria.solvers.correlated import CorrelatedEquilibriumObjective, CorrelatedEquilibriumSolver
from sgequilibria.solvers.lp import maximin_strategy
from sgequilibria.solvers.tools import as_tensor, marginalize, pure_strategy

logger = logging.getLogger(__name__)


class BimatrixEquilibriumSolver(ABC):
    """
    Abstract base class for bimatrix solution concepts.

    Subclasses compute each player's strategy from the two payoff matrices;
    solve() caches the results so they can be inspected afterwards.
    """

    def __init__(self):
        self.last_computed_row_strategy: Optional[torch.Tensor] = None
        self.last_computed_col_strategy: Optional[torch.Tensor] = None

    def solve(self, row_payoffs, col_payoffs) -> Tuple[torch.Tensor, torch.Tensor]:
        """
        Solve a bimatrix game.

        Args:
            row_payoffs: (n_rows, n_cols) row player payoffs
            col_payoffs: (n_rows, n_cols) column player payoffs

        Returns:
            Tuple of (row strategy, column strategy)
        """
        row_payoffs = as_tensor(row_payoffs)
        col_payoffs = as_tensor(col_payoffs)
        if row_payoffs.dim() != 2 or row_payoffs.shape != col_payoffs.shape:
            raise ValueError(f"Payoff matrices are not of equal 2-D dimension: "
                             f"{tuple(row_payoffs.shape)} vs {tuple(col_payoffs.shape)}")
        self.last_computed_row_strategy = self.compute_row_strategy(row_payoffs, col_payoffs)
        self.last_computed_col_strategy = self.compute_col_strategy(row_payoffs, col_payoffs)
        logger.debug("%s strategies: row=%s col=%s", self.__class__.__name__,
                     self.last_computed_row_strategy.tolist(), self.last_computed_col_strategy.tolist())
        return self.last_computed_row_strategy, self.last_computed_col_strategy

    @abstractmethod
    def compute_row_strategy(self, row_payoffs: torch.Tensor, col_payoffs: torch.Tensor) -> torch.Tensor:
        pass

    @abstractmethod
    def compute_col_strategy(self, row_payoffs: torch.Tensor, col_payoffs: torch.Tensor) -> torch.Tensor:
        pass


class MaxMax(BimatrixEquilibriumSolver):
    """
    Each player assumes the opponent will help it reach its own best payoff
    and plays the action of its largest matrix entry. Ties go to the first
    entry in row-major order.
    """

    def compute_row_strategy(self, row_payoffs, col_payoffs):
        n_cols = row_payoffs.shape[1]
        flat = int(torch.argmax(row_payoffs.reshape(-1)).item())
        return pure_strategy(row_payoffs.shape[0], flat // n_cols)

    def compute_col_strategy(self, row_payoffs, col_payoffs):
        n_cols = col_payoffs.shape[1]
        flat = int(torch.argmax(col_payoffs.reshape(-1)).item())
        return pure_strategy(n_cols, flat % n_cols)


class MinMax(BimatrixEquilibriumSolver):
    """
    Each player plays its security (maximin) strategy, assuming the opponent
    minimises the player's payoff. For zero-sum games this is the Nash
    equilibrium.
    """

    def __init__(self, method: str = LP_METHOD):
        super().__init__()
        self.method = method

    def compute_row_strategy(self, row_payoffs, col_payoffs):
        strategy, _ = maximin_strategy(row_payoffs.cpu().numpy(), method=self.method)
        return torch.as_tensor(strategy, dtype=DTYPE)

    def compute_col_strategy(self, row_payoffs, col_payoffs):
        strategy, _ = maximin_strategy(col_payoffs.T.cpu().numpy(), method=self.method)
        return torch.as_tensor(strategy, dtype=DTYPE)


class Utilitarian(BimatrixEquilibriumSolver):
    """
    Both players coordinate on the joint action with the largest summed
    payoff (first in row-major order on ties).
    """

    def _best_joint_action(self, row_payoffs, col_payoffs):
        n_cols = row_payoffs.shape[1]
        flat = int(torch.argmax((row_payoffs + col_payoffs).reshape(-1)).item())
        return divmod(flat, n_cols)

    def compute_row_strategy(self, row_payoffs, col_payoffs):
        i, _ = self._best_joint_action(row_payoffs, col_payoffs)
        return pure_strategy(row_payoffs.shape[0], i)

    def compute_col_strategy(self, row_payoffs, col_payoffs):
        _, j = self._best_joint_action(row_payoffs, col_payoffs)
        return pure_strategy(row_payoffs.shape[1], j)


class CorrelatedEquilibrium(BimatrixEquilibriumSolver):
    """
    Solves for a correlated equilibrium and plays its marginals. Without a
    shared correlation device the players sample independently, so the
    marginals are only an approximation of the joint recommendation.
    """

    def __init__(self,
                 objective: CorrelatedEquilibriumObjective = CorrelatedEquilibriumObjective.UTILITARIAN,
                 method: str = LP_METHOD,
                 device: str = DEFAULT_DEVICE):
        super().__init__()
        self.ce_solver = CorrelatedEquilibriumSolver(objective, method=method, device=device)
        self._last_payoffs: Optional[Tuple[torch.Tensor, torch.Tensor]] = None

    @property
    def last_computed_joint_strategy(self):
        return self.ce_solver.last_computed_joint_strategy

    def joint_strategy(self, row_payoffs, col_payoffs) -> torch.Tensor:
        """
        Correlated equilibrium of the game, reusing the last solution when the
        payoffs are unchanged so both marginals come from one LP.
        """
        row_payoffs = as_tensor(row_payoffs)
        col_payoffs = as_tensor(col_payoffs)
        last = self.ce_solver.last_computed_joint_strategy
        if (last is not None and self._last_payoffs is not None
                and torch.equal(self._last_payoffs[0], row_payoffs)
                and torch.equal(self._last_payoffs[1], col_payoffs)):
            return last
        joint = self.ce_solver.solve(row_payoffs, col_payoffs)
        self._last_payoffs = (row_payoffs.clone(), col_payoffs.clone())
        return joint

    def compute_row_strategy(self, row_payoffs, col_payoffs):
        return marginalize(self.joint_strategy(row_payoffs, col_payoffs))[0]

    def compute_col_strategy(self, row_payoffs, col_payoffs):
        return marginalize(self.joint_strategy(row_payoffs, col_payoffs))[1]


BIMATRIX_SOLVERS = {
    "maxmax": MaxMax,
    "minmax": MinMax,
    "utilitarian": Utilitarian,
    "correlated": CorrelatedEquilibrium,
}


def create_bimatrix_solver(name: str, **kwargs) -> BimatrixEquilibriumSolver:
    """
    Create a bimatrix solver by name.

    Args:
        name: One of BIMATRIX_SOLVERS
        **kwargs: Passed to the solver's constructor
    """
    key = name.lower()
    if key not in BIMATRIX_SOLVERS:
        raise ValueError(f"Unknown solver: {name}. Choose from: {list(BIMATRIX_SOLVERS.keys())}")
    return BIMATRIX_SOLVERS[key](**kwargs)
