"""
A4E Composition Orchestrator

Drives one composition pass over a root stack:

1. Resolve the root from the anchor unit. Failure aborts before any unit is
   provisioned or any output is published.
2. Tag the root and publish the root-level outputs.
3. Repeatedly advance the declared units in declaration order:
   - a unit with gates waits (GateWaiting) until every gate is satisfied,
     and fails with GateUnsatisfiedError as soon as one of them fails
   - a unit with depends_on waits until those units are Ready, and fails
     if one of them failed; a nested unit's parent counts as one of them
   - otherwise it is provisioned: its builder runs, it becomes Ready, the
     handles it returned are published, its agent descriptor (if any) is
     recorded and forwarded to the Output Set, and the compliance handler
     is applied to it
4. Gates still pending once nothing moves are treated as failed.
5. The root becomes Ready only if no unit failed; the Output Set is finalized.

Nothing here talks to AWS. Builders only add constructs to the CDK tree.
"""

import logging
from dataclasses import dataclass
from typing import Any

import config

from .errors import CompositionError, GateUnsatisfiedError
from .gates import ReadinessGate
from .metadata import RootMetadataPropagator
from .policy import PolicySynthesizer
from .registry import ResourceRegistry
from .units import DeployableUnit, StackFactory, UnitState

logger = logging.getLogger(__name__)

_WAITING = (UnitState.DECLARED, UnitState.GATE_WAITING)


@dataclass(frozen=True)
class AgentBuildContext:
    network: Any
    storage_bucket: Any
    readiness_gate: ReadinessGate
    synthesizer: PolicySynthesizer = None


class Composition:

    def __init__(self, root_stack, registry=None, synthesizer=None, propagator=None,
                 compliance_handler=None, tags=None):
        self.root = DeployableUnit.root(root_stack)
        self.factory = StackFactory(self.root)
        self.registry = registry or ResourceRegistry()
        self.synthesizer = synthesizer or PolicySynthesizer()
        self.propagator = propagator or RootMetadataPropagator()
        self.compliance_handler = compliance_handler
        self.tags = dict(config.RESOURCE_TAGS if tags is None else tags)
        self.gates = {}
        self.descriptors = {}
        self._depends_on = {}
        self._on_ready = {}

    @property
    def outputs(self):
        return self.propagator.outputs

    @property
    def units(self):
        return list(self.root.dependents)

    def unit(self, name):
        for unit in self.root.dependents:
            if unit.name == name:
                return unit
        raise KeyError(name)

    def create_gate(self, name, producer=None):
        if name in self.gates:
            raise CompositionError(f"gate '{name}' already exists")
        gate = ReadinessGate(name, producer)
        self.gates[name] = gate
        return gate

    def declare(self, name, build=None, parent=None, gate=None,
                reason=config.GATE_REASON_ASSET_UPLOAD, depends_on=(), on_ready=None):
        unit = self.factory.create_unit(parent or self.root, name)
        unit.builder = build
        if gate is not None:
            gate.attach(unit, reason)
        self._depends_on[unit.name] = list(depends_on)
        self._on_ready[unit.name] = on_ready
        return unit

    def declare_agent(self, name, kind, builder, gate, parent=None, depends_on=()):
        """Declare a unit whose builder returns an AgentDescriptor of the given kind."""

        def build(unit):
            context = AgentBuildContext(
                network=self.registry.network,
                storage_bucket=self.registry.storage_bucket,
                readiness_gate=gate,
                synthesizer=self.synthesizer,
            )
            descriptor = builder(unit, context)
            if descriptor.kind is not kind:
                raise CompositionError(
                    f"unit '{unit.name}' expected a {kind.value} descriptor, got {descriptor.kind.value}"
                )
            unit.descriptor = descriptor

        return self.declare(name, build, parent=parent, gate=gate, depends_on=depends_on)

    def advance(self):
        """Run one scheduling round; return True if any unit changed state."""
        progress = False
        for unit in self.root.dependents:
            if unit.state not in _WAITING:
                continue

            if unit.gates:
                if unit.state is UnitState.DECLARED:
                    unit.transition(UnitState.GATE_WAITING)
                    progress = True
                for gate in unit.gates.values():
                    gate.run()
                failed_gate = next((g for g in unit.gates.values() if g.failed), None)
                if failed_gate is not None:
                    error = failed_gate.unsatisfied(unit)
                    logger.error(str(error))
                    unit.fail(error)
                    progress = True
                    continue
                if not all(g.satisfied for g in unit.gates.values()):
                    continue

            dependencies = self._dependencies(unit)
            failed_dependency = next((d for d in dependencies if d.state is UnitState.FAILED), None)
            if failed_dependency is not None:
                self._fail_on_dependency(unit, failed_dependency)
                progress = True
                continue
            if not all(d.state is UnitState.READY for d in dependencies):
                continue

            self._provision(unit)
            progress = True
        return progress

    def run(self, anchor=None):
        if anchor is None:
            anchor = self.root.dependents[0] if self.root.dependents else self.root
        root = self.propagator.resolve_root(anchor)

        root.transition(UnitState.PROVISIONING)
        self.propagator.tag_root(root, {**self.tags, config.ROOT_STACK_NAME_TAG: root.stack.stack_name})
        self.propagator.publish_output(config.OUTPUT_ROOT_STACK_NAME, root.stack.stack_name)

        while self.advance():
            pass

        stalled = [gate for unit in root.dependents for gate in unit.gates.values() if gate.pending]
        for gate in dict.fromkeys(stalled):
            gate.fail(CompositionError(f"gate '{gate.name}' never completed"))
        while self.advance():
            pass

        failed = [unit for unit in root.dependents if unit.state is UnitState.FAILED]
        stuck = [unit for unit in root.dependents if unit.state in _WAITING]
        for unit in stuck:
            # left waiting on a dependency that can never become Ready
            if unit.state is UnitState.DECLARED:
                unit.transition(UnitState.GATE_WAITING)
            unit.fail(CompositionError(f"unit '{unit.name}' never became ready"))
            failed.append(unit)

        if failed:
            logger.error(f"composition of {root.name} failed: {', '.join(u.name for u in failed)}")
            root.transition(UnitState.FAILED)
        else:
            root.transition(UnitState.READY)
        self.propagator.finalize(root)
        return root

    def _provision(self, unit):
        unit.transition(UnitState.PROVISIONING)
        for gate in unit.gates.values():
            gate.bind(unit)
        for dependency in self._depends_on.get(unit.name, []):
            unit.stack.node.add_dependency(dependency.stack)

        try:
            handles = unit.builder(unit) if unit.builder is not None else None
        except Exception as e:
            unit.fail(e)
            raise
        unit.transition(UnitState.READY)

        for name, construct in (handles or {}).items():
            self.registry.publish(name, construct, unit)

        if unit.descriptor is not None:
            self.descriptors[unit.descriptor.kind] = unit.descriptor
            self.propagator.publish_descriptor(unit.descriptor)

        on_ready = self._on_ready.get(unit.name)
        if on_ready is not None:
            on_ready(unit)

        if self.compliance_handler is not None:
            self.compliance_handler(unit)

    def _dependencies(self, unit):
        dependencies = list(self._depends_on.get(unit.name, []))
        # a nested unit never provisions ahead of its parent
        if unit.parent is not None and not unit.parent.is_root and unit.parent not in dependencies:
            dependencies.insert(0, unit.parent)
        return dependencies

    def _fail_on_dependency(self, unit, dependency):
        if unit.state is UnitState.DECLARED:
            unit.transition(UnitState.GATE_WAITING)
        error = GateUnsatisfiedError(dependency.name, unit.name, f"unit '{dependency.name}' failed")
        error.__cause__ = dependency.error
        logger.error(str(error))
        unit.fail(error)
