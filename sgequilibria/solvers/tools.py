"""
Strategy helpers shared by the bimatrix and correlated equilibrium solvers:
expected payoffs, joint/marginal conversions and deviation gains.

Distributions are never renormalised here. Solver output is expected to sum
to one within PROBABILITY_TOLERANCE; whatever mass it carries is used as is.
"""
from typing import Tuple

import torch

from sgequilibria.core.constants import DTYPE, DEFAULT_DEVICE


def as_tensor(values, device: str = DEFAULT_DEVICE) -> torch.Tensor:
    """Convert an array-like of payoffs or probabilities to a float64 tensor."""
    return torch.as_tensor(values, dtype=DTYPE, device=device)


def expected_payoffs(row_payoffs, col_payoffs, joint_strategy) -> Tuple[float, float]:
    """
    Expected payoff of each player under a joint action distribution.

    Args:
        row_payoffs: (n_rows, n_cols) row player payoffs
        col_payoffs: (n_rows, n_cols) column player payoffs
        joint_strategy: (n_rows, n_cols) probability of each joint action

    Returns:
        (row expected payoff, column expected payoff)
    """
    row_payoffs = as_tensor(row_payoffs)
    col_payoffs = as_tensor(col_payoffs)
    joint_strategy = as_tensor(joint_strategy)
    if joint_strategy.shape != row_payoffs.shape or joint_strategy.shape != col_payoffs.shape:
        raise ValueError(f"Joint strategy shape {tuple(joint_strategy.shape)} does not match "
                         f"payoff shapes {tuple(row_payoffs.shape)} / {tuple(col_payoffs.shape)}")
    return (torch.sum(joint_strategy * row_payoffs).item(),
            torch.sum(joint_strategy * col_payoffs).item())


def joint_action_probabilities(row_strategy, col_strategy) -> torch.Tensor:
    """Joint distribution of two independent strategies (their outer product)."""
    return torch.outer(as_tensor(row_strategy), as_tensor(col_strategy))


def marginalize(joint_strategy) -> Tuple[torch.Tensor, torch.Tensor]:
    """Row and column marginals of a joint distribution."""
    joint_strategy = as_tensor(joint_strategy)
    return joint_strategy.sum(dim=1), joint_strategy.sum(dim=0)


def pure_strategy(size: int, index: int) -> torch.Tensor:
    strategy = torch.zeros(size, dtype=DTYPE)
    strategy[index] = 1.0
    return strategy


def correlated_deviation_gains(row_payoffs, col_payoffs,
                               joint_strategy) -> Tuple[torch.Tensor, torch.Tensor]:
    """
    Gain each player gets from switching away from a recommended action.

    returns:
        row_gains[a, a'] = sum_j p[a, j] * (R[a', j] - R[a, j])
        col_gains[b, b'] = sum_i p[i, b] * (C[i, b'] - C[i, b])
    A joint distribution is a correlated equilibrium iff no entry is positive.
    """
    R = as_tensor(row_payoffs)
    C = as_tensor(col_payoffs)
    P = as_tensor(joint_strategy)
    row_gains = P @ R.T - (P * R).sum(dim=1, keepdim=True)
    col_gains = P.T @ C - (P * C).sum(dim=0).unsqueeze(1)
    return row_gains, col_gains


def correlated_equilibrium_violation(row_payoffs, col_payoffs, joint_strategy) -> float:
    """Largest gain any player gets from deviating from a recommendation (0 at a CE)."""
    row_gains, col_gains = correlated_deviation_gains(row_payoffs, col_payoffs, joint_strategy)
    return max(0.0, row_gains.max().item(), col_gains.max().item())
