"""
Equilibrium solvers for bimatrix games.
"""

from sgequilibria.solvers.tools import (
    expected_payoffs, joint_action_probabilities, marginalize,
    correlated_deviation_gains, correlated_equilibrium_violation
)
from sgequilibria.solvers.correlated import (
    CorrelatedEquilibriumObjective, CorrelatedEquilibriumSolver, get_correlated_eq_joint_strategy
)
from sgequilibria.solvers.bimatrix_solvers import (
    BimatrixEquilibriumSolver, MaxMax, MinMax, Utilitarian, CorrelatedEquilibrium,
    create_bimatrix_solver
)
