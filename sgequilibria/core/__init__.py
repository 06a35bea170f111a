"""
Core data types for stochastic-game decision points: grounded and joint
actions, consumed collaborator interfaces and bimatrix payoff pairs.
"""

from sgequilibria.core.actions import (
    ActionType, SimpleActionType, ParameterizedActionType,
    GroundedAction, JointAction, enumerate_grounded_actions
)
from sgequilibria.core.bimatrix import (
    Bimatrix, bimatrix_from_q_sources, bimatrix_from_joint_rewards, other_agent_name
)
