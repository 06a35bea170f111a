"""
Correlated equilibrium solver for bimatrix games.

A correlated equilibrium is a distribution p over joint actions such that no
player gains by deviating from the action a recommendation draw tells it to
play. For a bimatrix game (R, C) this is the polytope

    sum_j p[a, j] * (R[a, j] - R[a', j]) >= 0   for all row actions a != a'
    sum_i p[i, b] * (C[i, b] - C[i, b']) >= 0   for all col actions b != b'
    sum p = 1,  p >= 0

which is generally not a single point, so an objective selects one
equilibrium (Greenwald & Hall, "Correlated Q-learning", ICML 2003):

    UTILITARIAN  maximise the sum of both players' expected payoffs
    EGALITARIAN  maximise the minimum of the players' expected payoffs
    REPUBLICAN   maximise the maximum of the players' expected payoffs
    LIBERTARIAN  maximise the row player's own expected payoff
"""
import logging
from enum import Enum
from typing import Optional

import numpy as np
import torch

from sgequilibria.core.constants import DTYPE, DEFAULT_DEVICE, LP_METHOD, LP_TOLERANCE, PROBABILITY_TOLERANCE
from sgequilibria.solvers.lp import solve_lp
from sgequilibria.solvers.tools import expected_payoffs

logger = logging.getLogger(__name__)


class CorrelatedEquilibriumObjective(Enum):
    UTILITARIAN = "utilitarian"
    EGALITARIAN = "egalitarian"
    REPUBLICAN = "republican"
    LIBERTARIAN = "libertarian"


def correlated_constraints(row_payoffs: np.ndarray, col_payoffs: np.ndarray) -> np.ndarray:
    """
    Rationality constraints as rows of A in A @ vec(p) <= 0, where vec(p) is
    the row-major flattening of the joint distribution.
    """
    n_rows, n_cols = row_payoffs.shape
    constraints = []

    # row player told to play a considers switching to a2
    for a in range(n_rows):
        for a2 in range(n_rows):
            if a == a2:
                continue
            con = np.zeros((n_rows, n_cols))
            con[a, :] = row_payoffs[a2, :] - row_payoffs[a, :]
            constraints.append(con.ravel())

    # column player told to play b considers switching to b2
    for b in range(n_cols):
        for b2 in range(n_cols):
            if b == b2:
                continue
            con = np.zeros((n_rows, n_cols))
            con[:, b] = col_payoffs[:, b2] - col_payoffs[:, b]
            constraints.append(con.ravel())

    if not constraints:
        return np.zeros((0, n_rows * n_cols))
    return np.vstack(constraints)


class CorrelatedEquilibriumSolver:
    """
    Solves bimatrix games for the correlated equilibrium selected by an objective.

    The objective is fixed at construction. The most recent solution is kept in
    last_computed_joint_strategy; nothing else is carried between calls.
    """

    def __init__(self,
                 objective: CorrelatedEquilibriumObjective = CorrelatedEquilibriumObjective.UTILITARIAN,
                 method: str = LP_METHOD,
                 device: str = DEFAULT_DEVICE):
        """
        Args:
            objective: Objective used to select among correlated equilibria
            method: scipy.optimize.linprog backend
            device: PyTorch device of returned strategies
        """
        self._objective = CorrelatedEquilibriumObjective(objective)
        self.method = method
        self.device = device
        self.last_computed_joint_strategy: Optional[torch.Tensor] = None

    @property
    def objective(self) -> CorrelatedEquilibriumObjective:
        return self._objective

    def solve(self, row_payoffs, col_payoffs) -> torch.Tensor:
        """
        Compute a correlated equilibrium.

        Args:
            row_payoffs: (n_rows, n_cols) row player payoffs
            col_payoffs: (n_rows, n_cols) column player payoffs

        Returns:
            (n_rows, n_cols) joint action distribution

        Raises:
            InfeasibleEquilibrium, UnboundedObjective, EquilibriumComputationError
        """
        R = _to_numpy(row_payoffs)
        C = _to_numpy(col_payoffs)
        if R.ndim != 2 or R.shape != C.shape:
            raise ValueError(f"Payoff matrices are not of equal 2-D dimension: {R.shape} vs {C.shape}")

        if self._objective == CorrelatedEquilibriumObjective.UTILITARIAN:
            p = self._solve_linear_objective(R, C, R + C)
        elif self._objective == CorrelatedEquilibriumObjective.LIBERTARIAN:
            p = self._solve_linear_objective(R, C, R)
        elif self._objective == CorrelatedEquilibriumObjective.EGALITARIAN:
            p = self._solve_egalitarian(R, C)
        else:
            p = self._solve_republican(R, C)

        joint = torch.as_tensor(p.reshape(R.shape), dtype=DTYPE, device=self.device)
        self.last_computed_joint_strategy = joint
        return joint

    def _solve_linear_objective(self, R: np.ndarray, C: np.ndarray, weights: np.ndarray) -> np.ndarray:
        """Maximise sum(p * weights) over the correlated equilibrium polytope."""
        n = R.size
        A_ub = correlated_constraints(R, C)
        b_ub = np.zeros(A_ub.shape[0])
        A_eq = np.ones((1, n))
        b_eq = np.array([1.0])
        x = solve_lp(-weights.ravel(), A_ub, b_ub, A_eq, b_eq, [(0, None)] * n, method=self.method)
        return _clip_probabilities(x[:n])

    def _solve_egalitarian(self, R: np.ndarray, C: np.ndarray) -> np.ndarray:
        # variables: [vec(p), z]; maximise z with z <= E_R(p) and z <= E_C(p)
        n = R.size
        ce = correlated_constraints(R, C)
        A_ub = np.vstack([
            np.hstack([ce, np.zeros((ce.shape[0], 1))]),
            np.hstack([-R.ravel(), [1.0]]),
            np.hstack([-C.ravel(), [1.0]]),
        ])
        b_ub = np.zeros(A_ub.shape[0])
        A_eq = np.hstack([np.ones(n), [0.0]]).reshape(1, -1)
        b_eq = np.array([1.0])
        c = np.zeros(n + 1)
        c[-1] = -1.0
        x = solve_lp(c, A_ub, b_ub, A_eq, b_eq, [(0, None)] * n + [(None, None)], method=self.method)
        return _clip_probabilities(x[:n])

    def _solve_republican(self, R: np.ndarray, C: np.ndarray) -> np.ndarray:
        row_best = self._solve_linear_objective(R, C, R)
        col_best = self._solve_linear_objective(R, C, C)
        row_value = expected_payoffs(R, C, row_best.reshape(R.shape))[0]
        col_value = expected_payoffs(R, C, col_best.reshape(R.shape))[1]
        # row player wins ties, up to LP round-off
        if col_value > row_value + LP_TOLERANCE * max(1.0, abs(row_value)):
            return col_best
        return row_best


def get_correlated_eq_joint_strategy(objective: CorrelatedEquilibriumObjective,
                                     row_payoffs, col_payoffs) -> torch.Tensor:
    """One-shot convenience wrapper around CorrelatedEquilibriumSolver."""
    return CorrelatedEquilibriumSolver(objective).solve(row_payoffs, col_payoffs)


def _to_numpy(payoffs) -> np.ndarray:
    if torch.is_tensor(payoffs):
        return payoffs.detach().cpu().numpy().astype(np.float64)
    return np.asarray(payoffs, dtype=np.float64)


def _clip_probabilities(p: np.ndarray) -> np.ndarray:
    """Zero out negative LP round-off; the total is left untouched."""
    if p.min() < -PROBABILITY_TOLERANCE:
        logger.warning("Correlated equilibrium LP returned probability %.3g below zero", p.min())
    total = p.sum()
    if abs(total - 1.0) > PROBABILITY_TOLERANCE:
        logger.warning("Correlated equilibrium LP returned distribution summing to %.12f", total)
    return np.maximum(p, 0.0)
