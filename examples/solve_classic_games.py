"""
Example script that solves classic two-player games under every correlated
equilibrium objective and the bimatrix solution concepts.
"""
import argparse
import logging

from tabulate import tabulate

from sgequilibria.core.bimatrix import Bimatrix
from sgequilibria.solvers.bimatrix_solvers import BIMATRIX_SOLVERS, create_bimatrix_solver
from sgequilibria.solvers.correlated import CorrelatedEquilibriumObjective, CorrelatedEquilibriumSolver
from sgequilibria.solvers.tools import expected_payoffs, joint_action_probabilities

GAMES = {
    "chicken": (["C", "D"], Bimatrix([[6, 2], [7, 0]], [[6, 7], [2, 0]])),
    "prisoners_dilemma": (["C", "D"], Bimatrix([[3, 0], [5, 1]], [[3, 5], [0, 1]])),
    "stag_hunt": (["Stag", "Hare"], Bimatrix([[5, 0], [3, 2]], [[5, 3], [0, 2]])),
    "matching_pennies": (["H", "T"], Bimatrix([[1, -1], [-1, 1]], [[-1, 1], [1, -1]])),
}


def parse_args():
    parser = argparse.ArgumentParser(description='Solve classic bimatrix games for their equilibria')
    parser.add_argument('--game', type=str, default='chicken', choices=sorted(GAMES),
                        help='Game to solve')
    parser.add_argument('--verbose', action='store_true', help='Log solver details')
    return parser.parse_args()


def main():
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(message)s")

    labels, game = GAMES[args.game]
    print(game.to_table(row_labels=labels, col_labels=labels, floatfmt=".1f"))
    print()

    rows = []
    for objective in CorrelatedEquilibriumObjective:
        joint = CorrelatedEquilibriumSolver(objective).solve(game.row_payoffs, game.col_payoffs)
        row_value, col_value = expected_payoffs(game.row_payoffs, game.col_payoffs, joint)
        rows.append([f"CE {objective.value}", f"{row_value:.4f}", f"{col_value:.4f}",
                     [round(p, 4) for p in joint.reshape(-1).tolist()]])

    for name in BIMATRIX_SOLVERS:
        r, c = create_bimatrix_solver(name).solve(game.row_payoffs, game.col_payoffs)
        joint = joint_action_probabilities(r, c)
        row_value, col_value = expected_payoffs(game.row_payoffs, game.col_payoffs, joint)
        rows.append([name, f"{row_value:.4f}", f"{col_value:.4f}",
                     [round(p, 4) for p in joint.reshape(-1).tolist()]])

    print(tabulate(rows, headers=["Concept", "Row value", "Col value", "Joint (row-major)"], tablefmt="pipe"))


if __name__ == "__main__":
    main()
