"""
Grounded and joint actions, and enumeration of the grounded actions an agent
may take in a state.

Row and column indices of every payoff matrix come from the order produced by
enumerate_grounded_actions, so enumeration must be deterministic for a fixed
state and action-type list.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from sgequilibria.errors import InvalidAgentConfiguration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroundedAction:
    """
    An action type bound to concrete parameters for one agent.

    Attributes:
        agent_name: Name of the agent taking the action
        action_name: Name of the action type
        params: Concrete parameter values
    """
    agent_name: str
    action_name: str
    params: Tuple[Any, ...] = ()

    def __str__(self):
        if self.params:
            return f"{self.agent_name}:{self.action_name}({', '.join(str(p) for p in self.params)})"
        return f"{self.agent_name}:{self.action_name}"


class ActionType(ABC):
    """An action type that can be grounded for an agent in a state."""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def all_applicable_grounded_actions(self, state: Any, agent_name: str) -> List[GroundedAction]:
        """
        Get every grounding of this action type that agent_name may take in state.
        The returned order must be stable for identical inputs.
        """
        pass

    def __repr__(self):
        return f"{self.__class__.__name__}({self.name!r})"


class SimpleActionType(ActionType):
    """
    A parameter-less action type, applicable everywhere unless a predicate
    `applicable(state, agent_name)` says otherwise.
    """

    def __init__(self, name: str, applicable: Optional[Callable[[Any, str], bool]] = None):
        super().__init__(name)
        self.applicable = applicable

    def all_applicable_grounded_actions(self, state, agent_name):
        if self.applicable is not None and not self.applicable(state, agent_name):
            return []
        return [GroundedAction(agent_name, self.name)]


class ParameterizedActionType(ActionType):
    """
    An action type whose parameter bindings depend on the state.

    `parameter_options(state, agent_name)` yields one tuple of parameter values
    per legal grounding, in the order the groundings should be enumerated.
    """

    def __init__(self, name: str, parameter_options: Callable[[Any, str], Iterable[Sequence[Any]]]):
        super().__init__(name)
        self.parameter_options = parameter_options

    def all_applicable_grounded_actions(self, state, agent_name):
        return [GroundedAction(agent_name, self.name, tuple(params))
                for params in self.parameter_options(state, agent_name)]


def enumerate_grounded_actions(state: Any, agent_name: str,
                               action_types: Sequence[ActionType]) -> List[GroundedAction]:
    """
    Enumerate the grounded actions available to an agent.

    Args:
        state: State the agent acts in
        agent_name: Name of the acting agent
        action_types: The agent's action types, in declaration order

    Returns:
        Groundings of each action type, concatenated in declaration order

    Raises:
        InvalidAgentConfiguration: if the agent has no legal action in state
    """
    actions = []
    for action_type in action_types:
        actions.extend(action_type.all_applicable_grounded_actions(state, agent_name))
    if not actions:
        raise InvalidAgentConfiguration(agent_name)
    logger.debug("Agent %s has %d grounded actions", agent_name, len(actions))
    return actions


class JointAction:
    """
    One grounded action per agent.

    Joint actions are keyed by agent name, so two joint actions holding the
    same actions compare equal regardless of insertion order.
    """

    def __init__(self, actions: Optional[Iterable[GroundedAction]] = None):
        self._actions: Dict[str, GroundedAction] = {}
        for action in actions or ():
            self.add_action(action)

    @classmethod
    def of(cls, *actions: GroundedAction) -> "JointAction":
        return cls(actions)

    def add_action(self, action: GroundedAction) -> None:
        if action.agent_name in self._actions:
            raise ValueError(f"Joint action already contains an action for agent '{action.agent_name}'")
        self._actions[action.agent_name] = action

    def action(self, agent_name: str) -> GroundedAction:
        return self._actions[agent_name]

    @property
    def agent_names(self) -> List[str]:
        return list(self._actions)

    @property
    def actions(self) -> List[GroundedAction]:
        return list(self._actions.values())

    def __iter__(self) -> Iterator[GroundedAction]:
        return iter(self._actions.values())

    def __len__(self):
        return len(self._actions)

    def __contains__(self, agent_name):
        return agent_name in self._actions

    def __eq__(self, other):
        if not isinstance(other, JointAction):
            return NotImplemented
        return self._actions == other._actions

    def __hash__(self):
        return hash(frozenset(self._actions.items()))

    def __repr__(self):
        return f"JointAction({'; '.join(str(a) for a in self._actions.values())})"
