"""
Equilibrium-based value backups and action selection for two-player
general-sum stochastic games.

Public symbols are resolved lazily so importing the package does not pull in
scipy until a solver is used.
"""

from importlib import import_module
from types import ModuleType
from typing import Any

from sgequilibria.errors import (
    SGEquilibriaError, UnsupportedPlayerCount, InvalidAgentConfiguration,
    EquilibriumComputationError, InfeasibleEquilibrium, UnboundedObjective, MalformedDistribution
)

__version__ = "0.1.0"

_LAZY = {
    # core
    "GroundedAction": "sgequilibria.core.actions",
    "JointAction": "sgequilibria.core.actions",
    "SimpleActionType": "sgequilibria.core.actions",
    "ParameterizedActionType": "sgequilibria.core.actions",
    "enumerate_grounded_actions": "sgequilibria.core.actions",
    "Bimatrix": "sgequilibria.core.bimatrix",
    "AgentType": "sgequilibria.core.interfaces",
    "DictAgentQSourceMap": "sgequilibria.core.interfaces",

    # solvers
    "CorrelatedEquilibriumObjective": "sgequilibria.solvers.correlated",
    "CorrelatedEquilibriumSolver": "sgequilibria.solvers.correlated",
    "MaxMax": "sgequilibria.solvers.bimatrix_solvers",
    "MinMax": "sgequilibria.solvers.bimatrix_solvers",
    "Utilitarian": "sgequilibria.solvers.bimatrix_solvers",
    "CorrelatedEquilibrium": "sgequilibria.solvers.bimatrix_solvers",
    "expected_payoffs": "sgequilibria.solvers.tools",
    "StrategySampler": "sgequilibria.utils.sampling",

    # composition roots
    "CorrelatedQ": "sgequilibria.backup.operators",
    "BimatrixQBackup": "sgequilibria.backup.operators",
    "EquilibriumPlayingAgent": "sgequilibria.agents.equilibrium_agent",
}

__all__ = [
    "SGEquilibriaError", "UnsupportedPlayerCount", "InvalidAgentConfiguration",
    "EquilibriumComputationError", "InfeasibleEquilibrium", "UnboundedObjective",
    "MalformedDistribution",
] + list(_LAZY)


def __getattr__(name: str) -> Any:
    if name in _LAZY:
        mod: ModuleType = import_module(_LAZY[name])
        return getattr(mod, name)
    raise AttributeError(f"module 'sgequilibria' has no attribute '{name}'")
