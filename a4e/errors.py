"""
A4E Composition Errors

Every failure raised by the composition engine derives from CompositionError.

Configuration-shape errors (DuplicateUnitError, InvalidGrantError,
HandleConflictError, GateAttachmentError) are raised at declaration time,
before anything is added to the CDK tree of a dependent unit.
GateUnsatisfiedError is recorded on the units attached to a failed gate.
RootNotFoundError aborts the whole pass.
"""


class CompositionError(Exception):
    """Base class for composition failures."""


class HandleNotReadyError(CompositionError):
    """A handle was read before, or published from, a unit that is not ready."""


class HandleConflictError(CompositionError):
    """A handle name was published twice."""


class DuplicateUnitError(CompositionError):
    """A unit name is already used within the root's namespace."""


class InvalidGrantError(CompositionError):
    """A policy grant is empty, too broad, or outside the principal's ceiling."""


class GateUnsatisfiedError(CompositionError):
    """The producer task behind a readiness gate failed or never completed."""

    def __init__(self, gate_name, unit_name, reason=None):
        self.gate_name = gate_name
        self.unit_name = unit_name
        message = f"gate '{gate_name}' was not satisfied for unit '{unit_name}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class GateAttachmentError(CompositionError):
    """A unit already waits on a different gate for the same reason."""


class RootNotFoundError(CompositionError):
    """No root unit could be reached from a unit. Never retried."""


class UnitStateError(CompositionError):
    """A unit was moved through an illegal state transition."""
