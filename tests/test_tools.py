"""
Tests for expected payoffs and joint/marginal strategy helpers.
"""

import pathlib, sys
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import torch

from sgequilibria.solvers.tools import (
    expected_payoffs, joint_action_probabilities, marginalize,
    correlated_deviation_gains, correlated_equilibrium_violation
)


def test_expected_payoffs_simple():
    row = [[2., 0.], [0., 1.]]
    col = [[1., 0.], [0., 2.]]
    joint = [[0.5, 0.], [0., 0.5]]
    assert expected_payoffs(row, col, joint) == pytest.approx((1.5, 1.5))


def test_expected_payoffs_does_not_renormalise():
    row = [[4.]]
    col = [[2.]]
    assert expected_payoffs(row, col, [[0.5]]) == pytest.approx((2.0, 1.0))


def test_expected_payoffs_shape_mismatch():
    with pytest.raises(ValueError):
        expected_payoffs([[1., 2.]], [[1., 2.]], [[1.]])


def test_outer_product_and_marginals():
    joint = joint_action_probabilities([0.25, 0.75], [0.5, 0.3, 0.2])
    assert joint.shape == (2, 3)
    assert joint[1, 1].item() == pytest.approx(0.225)
    assert joint.sum().item() == pytest.approx(1.0)
    row, col = marginalize(joint)
    assert torch.allclose(row, torch.tensor([0.25, 0.75], dtype=torch.float64))
    assert torch.allclose(col, torch.tensor([0.5, 0.3, 0.2], dtype=torch.float64))


def test_deviation_gains():
    # pure (0, 0) in a game where the row player prefers row 1
    row = [[1., 0.], [3., 0.]]
    col = [[1., 0.], [0., 0.]]
    joint = [[1., 0.], [0., 0.]]
    row_gains, col_gains = correlated_deviation_gains(row, col, joint)
    assert row_gains[0, 1].item() == pytest.approx(2.0)
    assert row_gains[1, 0].item() == pytest.approx(0.0)
    assert col_gains[0, 1].item() == pytest.approx(-1.0)
    assert correlated_equilibrium_violation(row, col, joint) == pytest.approx(2.0)
    assert correlated_equilibrium_violation(row, col, [[0., 0.], [1., 0.]]) == pytest.approx(0.0)
