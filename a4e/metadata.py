"""
A4E Root Metadata Propagator

Finds the root unit from any nested unit, applies the global tag set to it
(CDK tag aspects then reach every nested stack), and collects the Output Set
that is exposed once the composition pass is over.
"""

import logging

from aws_cdk import CfnOutput, Tags

import config

from .errors import CompositionError, RootNotFoundError

logger = logging.getLogger(__name__)


def resolve_root(unit, max_depth=config.MAX_UNIT_DEPTH):
    """Walk parent pointers up to the root unit.

    Raises RootNotFoundError when the chain ends on a unit that is not a root,
    loops back on itself, or is deeper than max_depth.
    """
    if unit is None:
        raise RootNotFoundError("no unit to resolve a root from")

    seen = set()
    current = unit
    for _ in range(max_depth + 1):
        if current.is_root:
            return current
        if id(current) in seen:
            raise RootNotFoundError(f"parent chain of unit '{unit.name}' loops at '{current.name}'")
        seen.add(id(current))
        if current.parent is None:
            raise RootNotFoundError(f"unit '{unit.name}' has no root; chain ends at '{current.name}'")
        current = current.parent

    raise RootNotFoundError(f"unit '{unit.name}' is nested deeper than {max_depth} levels")


class OutputSet:
    """Append-only key/value outputs, materialised as CfnOutputs on finalize()."""

    def __init__(self):
        self._values = {}
        self.finalized = False

    def publish(self, key, value):
        if self.finalized:
            raise CompositionError(f"output set is finalized; cannot publish '{key}'")
        if key in self._values:
            logger.warning(f"output {key} published twice; keeping the latest value")
        self._values[key] = value

    def finalize(self, root):
        if self.finalized:
            return
        for key, value in self._values.items():
            # logical ids drop non-alphanumerics; the description keeps the key
            CfnOutput(root.stack, key, value=value, description=key)
        self.finalized = True

    def as_dict(self):
        return dict(self._values)

    def __contains__(self, key):
        return key in self._values

    def __getitem__(self, key):
        return self._values[key]

    def __len__(self):
        return len(self._values)


class RootMetadataPropagator:

    def __init__(self, outputs=None, max_depth=config.MAX_UNIT_DEPTH):
        self.outputs = outputs if outputs is not None else OutputSet()
        self.max_depth = max_depth

    def resolve_root(self, unit):
        return resolve_root(unit, self.max_depth)

    def tag_root(self, root, tags):
        if not root.is_root:
            raise CompositionError(f"unit '{root.name}' is not a root unit")
        for key, value in tags.items():
            if root.tags.get(key) == value:
                continue
            Tags.of(root.stack).add(key, value)
            root.tags[key] = value
            for unit in root.descendants():
                unit.tags[key] = value

    def publish_output(self, key, value):
        self.outputs.publish(key, value)

    def publish_descriptor(self, descriptor):
        for key, value in descriptor.outputs().items():
            self.publish_output(key, value)

    def finalize(self, root):
        self.outputs.finalize(root)
