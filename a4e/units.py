"""
A4E Deployable Units and Stack Factory

A deployable unit is a named deployment boundary: the root stack of the
backend, or a NestedStack created under it. Units keep an explicit parent
pointer so that the root can be found from any nested unit without asking CDK,
and they carry the provisioning state used by the orchestrator.

State machine:
    Declared -> GateWaiting -> Provisioning -> Ready -> Deleted
    Declared -> Provisioning (no gate attached)
    GateWaiting -> Failed (gate not satisfied)
    Provisioning -> Failed (builder raised)

Only Ready units may publish handles. Failed units keep their root from
reaching Ready. A Ready unit's stack can still receive the resource of a gate
producer it owns.
"""

import logging
from enum import Enum

from aws_cdk import NestedStack

from .errors import CompositionError, DuplicateUnitError, UnitStateError

logger = logging.getLogger(__name__)


class UnitState(Enum):
    DECLARED = 'Declared'
    GATE_WAITING = 'GateWaiting'
    PROVISIONING = 'Provisioning'
    READY = 'Ready'
    FAILED = 'Failed'
    DELETED = 'Deleted'


_TRANSITIONS = {
    UnitState.DECLARED: {UnitState.GATE_WAITING, UnitState.PROVISIONING, UnitState.DELETED},
    UnitState.GATE_WAITING: {UnitState.PROVISIONING, UnitState.FAILED, UnitState.DELETED},
    UnitState.PROVISIONING: {UnitState.READY, UnitState.FAILED, UnitState.DELETED},
    UnitState.READY: {UnitState.DELETED},
    UnitState.FAILED: {UnitState.DELETED},
    UnitState.DELETED: set(),
}


class DeployableUnit:
    """A root stack or nested stack plus its provisioning bookkeeping."""

    def __init__(self, name, stack, parent=None, is_root=False):
        self.name = name
        self.stack = stack
        self.parent = parent
        self.is_root = is_root
        self.children = []
        # units created under a root, in declaration order
        self.dependents = []
        self.state = UnitState.DECLARED
        self.history = [UnitState.DECLARED]
        self.tags = {}
        # dependency reason -> ReadinessGate
        self.gates = {}
        self.error = None
        self.builder = None
        self.descriptor = None

        if parent is not None:
            parent.children.append(self)
            # tags set on an ancestor reach this stack through CDK aspects
            self.tags = dict(parent.tags)

    @classmethod
    def root(cls, stack):
        return cls(stack.node.id, stack, is_root=True)

    def __repr__(self):
        return f"DeployableUnit({self.name!r}, {self.state.value})"

    def transition(self, state):
        if state not in _TRANSITIONS[self.state]:
            raise UnitStateError(
                f"unit '{self.name}' cannot move from {self.state.value} to {state.value}"
            )
        logger.info(f"unit {self.name}: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def fail(self, error):
        self.error = error
        self.transition(UnitState.FAILED)

    def delete(self):
        # children before parent
        for child in self.children:
            child.delete()
        if self.state is not UnitState.DELETED:
            self.transition(UnitState.DELETED)

    def descendants(self):
        for child in self.children:
            yield child
            yield from child.descendants()

    def reached(self, state):
        return state in self.history


class StackFactory:
    """Creates nested deployable units under a single root."""

    def __init__(self, root):
        if not root.is_root:
            raise CompositionError(f"unit '{root.name}' is not a root unit")
        self.root = root
        self._names = {root.name}

    def create_unit(self, parent, name):
        if not name:
            raise ValueError("unit name must not be empty")
        if name in self._names:
            raise DuplicateUnitError(f"unit name '{name}' is already used under root '{self.root.name}'")
        if parent is not self.root and parent not in self.root.dependents:
            raise CompositionError(f"parent unit '{parent.name}' does not belong to root '{self.root.name}'")

        stack = NestedStack(parent.stack, name)
        unit = DeployableUnit(name, stack, parent=parent)

        self._names.add(name)
        self.root.dependents.append(unit)
        logger.info(f"declared unit {name} under {parent.name}")
        return unit
