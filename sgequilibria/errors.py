"""
Error taxonomy for equilibrium backups and equilibrium-playing agents.

Every condition raised here is structural (wrong number of players, empty
action sets, a malformed LP, a strategy that is not a distribution), so none
of them are retried or handled inside the package. They propagate to the
value-iteration sweep or turn loop that called into us.
"""
from typing import Optional


class SGEquilibriaError(Exception):
    """Base class for all errors raised by sgequilibria."""


class UnsupportedPlayerCount(SGEquilibriaError, ValueError):
    """
    Raised when a two-player formulation is asked to handle some other
    number of agents, or when the opponent of an agent cannot be resolved.
    """

    def __init__(self, num_players: int, context: str = ""):
        self.num_players = num_players
        msg = f"Only two-player games are supported, got {num_players} players"
        if context:
            msg = f"{context}: {msg}"
        super().__init__(msg)


class InvalidAgentConfiguration(SGEquilibriaError, ValueError):
    """Raised when an agent has no legal grounded action in a state."""

    def __init__(self, agent_name: str, message: Optional[str] = None):
        self.agent_name = agent_name
        super().__init__(message or f"Agent '{agent_name}' has no applicable actions in this state")


class EquilibriumComputationError(SGEquilibriaError, RuntimeError):
    """
    Raised when the LP backing an equilibrium solver fails.

    Attributes:
        status: scipy.optimize.linprog status code (None if not LP related)
    """

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class InfeasibleEquilibrium(EquilibriumComputationError):
    """The equilibrium LP has no feasible point."""


class UnboundedObjective(EquilibriumComputationError):
    """The equilibrium LP objective is unbounded."""


class MalformedDistribution(SGEquilibriaError, ValueError):
    """
    Raised when a strategy cannot be sampled because its probabilities do not
    sum to (approximately) one.
    """

    def __init__(self, total: float):
        self.total = total
        super().__init__(f"Strategy probability distribution does not sum to 1; it sums to: {total}")
