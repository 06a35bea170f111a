"""
Thin wrapper around scipy.optimize.linprog that maps solver status codes to
the package's error taxonomy, plus the maximin (security strategy) LP.
"""
import logging
from typing import Optional, Sequence, Tuple

import numpy as np
from scipy.optimize import linprog

from sgequilibria.core.constants import LP_METHOD
from sgequilibria.errors import EquilibriumComputationError, InfeasibleEquilibrium, UnboundedObjective

logger = logging.getLogger(__name__)

# scipy.optimize.linprog status codes
LP_INFEASIBLE = 2
LP_UNBOUNDED = 3


def solve_lp(c: np.ndarray,
             A_ub: Optional[np.ndarray] = None,
             b_ub: Optional[np.ndarray] = None,
             A_eq: Optional[np.ndarray] = None,
             b_eq: Optional[np.ndarray] = None,
             bounds: Optional[Sequence[Tuple[Optional[float], Optional[float]]]] = None,
             method: str = LP_METHOD) -> np.ndarray:
    """
    Minimise c @ x subject to A_ub @ x <= b_ub and A_eq @ x == b_eq.

    Returns:
        The optimal x

    Raises:
        InfeasibleEquilibrium: if the constraints admit no solution
        UnboundedObjective: if the objective is unbounded below
        EquilibriumComputationError: for any other solver failure
    """
    if A_ub is not None and A_ub.shape[0] == 0:
        A_ub, b_ub = None, None

    result = linprog(c=c, A_ub=A_ub, b_ub=b_ub, A_eq=A_eq, b_eq=b_eq,
                     bounds=bounds, method=method)
    logger.debug("linprog(%d vars) finished with status %d: %s", len(c), result.status, result.message)

    if result.status == LP_INFEASIBLE:
        raise InfeasibleEquilibrium(f"Equilibrium LP is infeasible: {result.message}", result.status)
    if result.status == LP_UNBOUNDED:
        raise UnboundedObjective(f"Equilibrium LP objective is unbounded: {result.message}", result.status)
    if not result.success:
        raise EquilibriumComputationError(f"Equilibrium LP failed: {result.message}", result.status)
    return result.x


def maximin_strategy(payoffs: np.ndarray, method: str = LP_METHOD) -> Tuple[np.ndarray, float]:
    """
    Security strategy of the player choosing rows of payoffs.

        maximize v
        subject to:
            sum_i payoffs[i, j] * x_i >= v  for all j
            sum_i x_i = 1
            x_i >= 0

    Args:
        payoffs: (n_rows, n_cols) payoffs of the player choosing the row
        method: linprog backend

    Returns:
        (strategy over rows, guaranteed value)
    """
    payoffs = np.asarray(payoffs, dtype=np.float64)
    n_rows, n_cols = payoffs.shape

    # variables: [x_1, ..., x_n, v]; minimise -v
    c = np.zeros(n_rows + 1)
    c[-1] = -1.0

    # v - payoffs^T x <= 0
    A_ub = np.hstack([-payoffs.T, np.ones((n_cols, 1))])
    b_ub = np.zeros(n_cols)

    A_eq = np.zeros((1, n_rows + 1))
    A_eq[0, :n_rows] = 1.0
    b_eq = np.array([1.0])

    bounds = [(0, None)] * n_rows + [(None, None)]
    x = solve_lp(c, A_ub, b_ub, A_eq, b_eq, bounds, method=method)
    return np.maximum(x[:n_rows], 0.0), float(x[-1])
