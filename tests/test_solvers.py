"""
Tests for the bimatrix solution concepts and the correlated equilibrium LP.
"""

import pathlib, sys
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from types import SimpleNamespace

import pytest
import torch

import sgequilibria.solvers.lp as lp_module
from sgequilibria.errors import EquilibriumComputationError, InfeasibleEquilibrium, UnboundedObjective
from sgequilibria.solvers.bimatrix_solvers import (
    MaxMax, MinMax, Utilitarian, CorrelatedEquilibrium, create_bimatrix_solver
)
from sgequilibria.solvers.correlated import (
    CorrelatedEquilibriumObjective, CorrelatedEquilibriumSolver, correlated_constraints,
    get_correlated_eq_joint_strategy
)
from sgequilibria.solvers.lp import maximin_strategy
from sgequilibria.solvers.tools import correlated_equilibrium_violation, expected_payoffs


# ---------------------------------------------------------------------------
# Games
# ---------------------------------------------------------------------------

CHICKEN_ROW = [[6., 2.], [7., 0.]]
CHICKEN_COL = [[6., 7.], [2., 0.]]

PD_ROW = [[3., 0.], [5., 1.]]
PD_COL = [[3., 5.], [0., 1.]]

PENNIES_ROW = [[1., -1.], [-1., 1.]]
PENNIES_COL = [[-1., 1.], [1., -1.]]


# ---------------------------------------------------------------------------
# Bimatrix solvers
# ---------------------------------------------------------------------------

def test_maxmax_first_index_tie_break():
    row = [[2., 0.], [0., 2.]]
    col = [[0., 1.], [1., 0.]]
    solver = MaxMax()
    for _ in range(5):
        r, c = solver.solve(row, col)
        assert r.tolist() == [1.0, 0.0]
        assert c.tolist() == [0.0, 1.0]
    assert solver.last_computed_row_strategy.tolist() == [1.0, 0.0]


def test_maxmax_picks_row_and_column_of_best_entry():
    row = [[1., 2., 0.], [0., 0., 9.]]
    col = [[4., 0., 0.], [0., 0., 1.]]
    r, c = MaxMax().solve(row, col)
    assert r.tolist() == [0.0, 1.0]
    assert c.tolist() == [1.0, 0.0, 0.0]


def test_minmax_matching_pennies():
    r, c = MinMax().solve(PENNIES_ROW, PENNIES_COL)
    assert torch.allclose(r, torch.tensor([0.5, 0.5], dtype=torch.float64), atol=1e-7)
    assert torch.allclose(c, torch.tensor([0.5, 0.5], dtype=torch.float64), atol=1e-7)


def test_maximin_value():
    strategy, value = maximin_strategy([[3., 1.], [2., 2.]])
    assert value == pytest.approx(2.0, abs=1e-7)
    assert strategy[1] == pytest.approx(1.0, abs=1e-7)


def test_utilitarian_solver():
    r, c = Utilitarian().solve(PD_ROW, PD_COL)
    assert r.tolist() == [1.0, 0.0]
    assert c.tolist() == [1.0, 0.0]


def test_correlated_bimatrix_solver_marginals():
    solver = CorrelatedEquilibrium()
    r, c = solver.solve(CHICKEN_ROW, CHICKEN_COL)
    assert torch.allclose(r, torch.tensor([0.75, 0.25], dtype=torch.float64), atol=1e-6)
    assert torch.allclose(c, torch.tensor([0.75, 0.25], dtype=torch.float64), atol=1e-6)
    assert solver.last_computed_joint_strategy.shape == (2, 2)


def test_correlated_bimatrix_solver_runs_one_lp(monkeypatch):
    solver = CorrelatedEquilibrium()
    calls = []
    original = solver.ce_solver.solve

    def counting_solve(row, col):
        calls.append(1)
        return original(row, col)

    monkeypatch.setattr(solver.ce_solver, "solve", counting_solve)
    solver.solve(CHICKEN_ROW, CHICKEN_COL)
    assert len(calls) == 1
    joint = solver.last_computed_joint_strategy

    # the per-player helpers reuse the joint already computed for these payoffs
    row_payoffs = torch.tensor(CHICKEN_ROW, dtype=torch.float64)
    col_payoffs = torch.tensor(CHICKEN_COL, dtype=torch.float64)
    r = solver.compute_row_strategy(row_payoffs, col_payoffs)
    c = solver.compute_col_strategy(row_payoffs, col_payoffs)
    assert len(calls) == 1
    assert solver.last_computed_joint_strategy is joint
    assert torch.allclose(r, joint.sum(dim=1)) and torch.allclose(c, joint.sum(dim=0))

    # new payoffs trigger a new LP
    solver.solve(PD_ROW, PD_COL)
    assert len(calls) == 2


def test_solver_rejects_mismatched_shapes():
    with pytest.raises(ValueError):
        MaxMax().solve([[1., 2.]], [[1.], [2.]])
    with pytest.raises(ValueError):
        CorrelatedEquilibriumSolver().solve([[1., 2.]], [[1.], [2.]])


def test_create_bimatrix_solver():
    assert isinstance(create_bimatrix_solver("MaxMax"), MaxMax)
    solver = create_bimatrix_solver("correlated", objective=CorrelatedEquilibriumObjective.EGALITARIAN)
    assert solver.ce_solver.objective == CorrelatedEquilibriumObjective.EGALITARIAN
    with pytest.raises(ValueError):
        create_bimatrix_solver("nash")


# ---------------------------------------------------------------------------
# Correlated equilibrium
# ---------------------------------------------------------------------------

def test_single_cell_game():
    for objective in CorrelatedEquilibriumObjective:
        joint = CorrelatedEquilibriumSolver(objective).solve([[3.]], [[5.]])
        assert joint.shape == (1, 1)
        assert joint[0, 0].item() == pytest.approx(1.0, abs=1e-12)
        row_value, col_value = expected_payoffs([[3.]], [[5.]], joint)
        assert row_value == pytest.approx(3.0, abs=1e-12)
        assert col_value == pytest.approx(5.0, abs=1e-12)


def test_utilitarian_chicken():
    solver = CorrelatedEquilibriumSolver(CorrelatedEquilibriumObjective.UTILITARIAN)
    joint = solver.solve(CHICKEN_ROW, CHICKEN_COL)
    expected = torch.tensor([[0.5, 0.25], [0.25, 0.0]], dtype=torch.float64)
    assert torch.allclose(joint, expected, atol=1e-6)
    assert solver.last_computed_joint_strategy is joint
    row_value, col_value = expected_payoffs(CHICKEN_ROW, CHICKEN_COL, joint)
    assert row_value == pytest.approx(5.25, abs=1e-6)
    assert col_value == pytest.approx(5.25, abs=1e-6)


def test_libertarian_and_republican_chicken():
    for objective in (CorrelatedEquilibriumObjective.LIBERTARIAN, CorrelatedEquilibriumObjective.REPUBLICAN):
        joint = get_correlated_eq_joint_strategy(objective, CHICKEN_ROW, CHICKEN_COL)
        row_value, _ = expected_payoffs(CHICKEN_ROW, CHICKEN_COL, joint)
        assert row_value == pytest.approx(7.0, abs=1e-6)
        assert correlated_equilibrium_violation(CHICKEN_ROW, CHICKEN_COL, joint) < 1e-6


def test_republican_prefers_column_when_better():
    # row player's best CE is worth 1, column player's is worth 4
    row = [[1., 0.], [0., 0.5]]
    col = [[1., 0.], [0., 4.]]
    joint = CorrelatedEquilibriumSolver(CorrelatedEquilibriumObjective.REPUBLICAN).solve(row, col)
    _, col_value = expected_payoffs(row, col, joint)
    assert col_value == pytest.approx(4.0, abs=1e-6)


def test_egalitarian_chicken():
    joint = CorrelatedEquilibriumSolver(CorrelatedEquilibriumObjective.EGALITARIAN).solve(CHICKEN_ROW, CHICKEN_COL)
    row_value, col_value = expected_payoffs(CHICKEN_ROW, CHICKEN_COL, joint)
    assert min(row_value, col_value) == pytest.approx(5.25, abs=1e-6)


def test_prisoners_dilemma_has_unique_ce():
    for objective in CorrelatedEquilibriumObjective:
        joint = CorrelatedEquilibriumSolver(objective).solve(PD_ROW, PD_COL)
        assert torch.allclose(joint, torch.tensor([[0., 0.], [0., 1.]], dtype=torch.float64), atol=1e-6)


def test_correlated_constraints_shape():
    A = correlated_constraints(torch.zeros(3, 2).numpy(), torch.zeros(3, 2).numpy())
    # 3*2 row deviations + 2*1 column deviations, one column per joint action
    assert A.shape == (8, 6)


def test_objective_accepts_string_value():
    assert CorrelatedEquilibriumSolver("egalitarian").objective == CorrelatedEquilibriumObjective.EGALITARIAN


# ---------------------------------------------------------------------------
# LP failure mapping
# ---------------------------------------------------------------------------

def _fake_linprog(status):
    def fake(*args, **kwargs):
        return SimpleNamespace(status=status, success=False, message=f"status {status}", x=None)
    return fake


@pytest.mark.parametrize("status,error", [
    (2, InfeasibleEquilibrium),
    (3, UnboundedObjective),
    (4, EquilibriumComputationError),
])
def test_lp_failures_are_raised(monkeypatch, status, error):
    monkeypatch.setattr(lp_module, "linprog", _fake_linprog(status))
    with pytest.raises(error) as excinfo:
        CorrelatedEquilibriumSolver().solve(CHICKEN_ROW, CHICKEN_COL)
    assert excinfo.value.status == status


def test_infeasible_is_not_swallowed_by_bimatrix_solver(monkeypatch):
    monkeypatch.setattr(lp_module, "linprog", _fake_linprog(2))
    with pytest.raises(InfeasibleEquilibrium):
        MinMax().solve(PENNIES_ROW, PENNIES_COL)
