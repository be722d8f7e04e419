"""
A4E Readiness Gates

A readiness gate is a named ordering edge: every unit attached to it waits
until the gate's producer task has completed. The producer is a callable that
declares the resource the units must not race (for the backend, the
BucketDeployment that uploads the sample data) and returns it. Once the gate is
satisfied, each attached unit's stack gets a CDK dependency on that resource so
CloudFormation keeps the same order at deploy time.

A producer may add its resource to a unit that is already Ready (the sample
data upload lands in the storage unit, next to the bucket). That unit has
already published its handles and had its compliance handler applied; stack
suppressions are read at synth time, so they cover the added resource too.

A gate may also be driven from outside (producer=None) with complete() and
fail(), which is how a producer that finishes later is modelled.
"""

import logging
from enum import Enum

from .errors import CompositionError, GateAttachmentError, GateUnsatisfiedError
from .units import UnitState

logger = logging.getLogger(__name__)


class GateState(Enum):
    PENDING = 'Pending'
    SATISFIED = 'Satisfied'
    FAILED = 'Failed'


class ReadinessGate:

    def __init__(self, name, producer=None):
        self.name = name
        self.producer = producer
        self.state = GateState.PENDING
        self.handle = None
        self.error = None
        self.units = []

    def __repr__(self):
        return f"ReadinessGate({self.name!r}, {self.state.value})"

    def attach(self, unit, reason):
        existing = unit.gates.get(reason)
        if existing is self:
            return
        if existing is not None:
            raise GateAttachmentError(
                f"unit '{unit.name}' already waits on gate '{existing.name}' for '{reason}'"
            )
        if unit.state is not UnitState.DECLARED:
            raise GateAttachmentError(
                f"unit '{unit.name}' is {unit.state.value}; gates attach to Declared units only"
            )
        unit.gates[reason] = self
        self.units.append(unit)

    @property
    def pending(self):
        return self.state is GateState.PENDING

    @property
    def satisfied(self):
        return self.state is GateState.SATISFIED

    @property
    def failed(self):
        return self.state is GateState.FAILED

    def run(self):
        """Run the producer once, if there is one and the gate is still pending."""
        if not self.pending or self.producer is None:
            return self.state
        try:
            handle = self.producer()
        except Exception as e:
            # recorded on the gate; every attached unit fails with GateUnsatisfiedError
            logger.error(f"producer for gate {self.name} failed: {e}")
            self.fail(e)
        else:
            self.complete(handle)
        return self.state

    def complete(self, handle=None):
        if not self.pending:
            raise CompositionError(f"gate '{self.name}' is already {self.state.value}")
        self.handle = handle
        self.state = GateState.SATISFIED
        logger.info(f"gate {self.name} satisfied")

    def fail(self, error):
        if not self.pending:
            raise CompositionError(f"gate '{self.name}' is already {self.state.value}")
        self.error = error
        self.state = GateState.FAILED

    def bind(self, unit):
        """Make the unit's stack depend on the produced resource."""
        if self.handle is not None and getattr(self.handle, 'node', None) is not None:
            unit.stack.node.add_dependency(self.handle)

    def unsatisfied(self, unit):
        reason = str(self.error) if self.error is not None else 'producer never completed'
        error = GateUnsatisfiedError(self.name, unit.name, reason)
        error.__cause__ = self.error
        return error
