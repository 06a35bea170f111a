import torch

# all payoffs and strategies are handled in double precision; the LP solver
# works in float64 and strategy sums are checked against PROBABILITY_TOLERANCE
DTYPE = torch.float64
DEFAULT_DEVICE = "cpu"

# expected tolerance on the total mass of a solver-produced distribution
PROBABILITY_TOLERANCE = 1e-9

# scipy.optimize.linprog backend
LP_METHOD = "highs"

# seed of the sampler used by agents that are not given one explicitly
DEFAULT_SEED = 0

# objective values closer than this (relative) are treated as equal;
# matches the HiGHS default primal feasibility tolerance
LP_TOLERANCE = 1e-7
