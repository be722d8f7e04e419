import unittest

import aws_cdk as core
from aws_cdk import NestedStack

from a4e.errors import CompositionError, DuplicateUnitError, UnitStateError
from a4e.units import DeployableUnit, StackFactory, UnitState


class TestStackFactory(unittest.TestCase):

    def setUp(self):
        self.app = core.App()
        self.root = DeployableUnit.root(core.Stack(self.app, "Root"))
        self.factory = StackFactory(self.root)

    def test_units_are_nested_stacks_in_declaration_order(self):
        first = self.factory.create_unit(self.root, "authStack")
        second = self.factory.create_unit(self.root, "dataStack")

        self.assertEqual(self.root.dependents, [first, second])
        self.assertIsInstance(first.stack, NestedStack)
        self.assertIs(first.stack.nested_stack_parent, self.root.stack)
        self.assertIs(first.parent, self.root)
        self.assertEqual(first.state, UnitState.DECLARED)

    def test_duplicate_name_rejected(self):
        self.factory.create_unit(self.root, "storageStack")
        with self.assertRaises(DuplicateUnitError):
            self.factory.create_unit(self.root, "storageStack")

    def test_duplicate_name_rejected_at_any_depth(self):
        parent = self.factory.create_unit(self.root, "networkingStack")
        self.factory.create_unit(parent, "subnets")
        with self.assertRaises(DuplicateUnitError):
            self.factory.create_unit(self.root, "subnets")

    def test_root_name_is_reserved(self):
        with self.assertRaises(DuplicateUnitError):
            self.factory.create_unit(self.root, "Root")

    def test_empty_name_rejected(self):
        with self.assertRaises(ValueError):
            self.factory.create_unit(self.root, "")

    def test_parent_from_another_root_rejected(self):
        other_root = DeployableUnit.root(core.Stack(self.app, "Other"))
        foreign = StackFactory(other_root).create_unit(other_root, "foreign")
        with self.assertRaises(CompositionError):
            self.factory.create_unit(foreign, "child")

    def test_factory_needs_a_root(self):
        unit = self.factory.create_unit(self.root, "functionStack")
        with self.assertRaises(CompositionError):
            StackFactory(unit)

    def test_child_inherits_parent_tags(self):
        self.root.tags['Project'] = 'agents-for-energy'
        unit = self.factory.create_unit(self.root, "functionStack")
        self.assertEqual(unit.tags, {'Project': 'agents-for-energy'})


class TestUnitState(unittest.TestCase):

    def setUp(self):
        self.app = core.App()
        self.root = DeployableUnit.root(core.Stack(self.app, "Root"))
        self.factory = StackFactory(self.root)

    def test_gated_path_is_recorded(self):
        unit = self.factory.create_unit(self.root, "maintAgentStack")
        unit.transition(UnitState.GATE_WAITING)
        unit.transition(UnitState.PROVISIONING)
        unit.transition(UnitState.READY)

        self.assertEqual(unit.history, [
            UnitState.DECLARED, UnitState.GATE_WAITING, UnitState.PROVISIONING, UnitState.READY
        ])
        self.assertTrue(unit.reached(UnitState.GATE_WAITING))

    def test_illegal_transition_rejected(self):
        unit = self.factory.create_unit(self.root, "regAgentStack")
        with self.assertRaises(UnitStateError):
            unit.transition(UnitState.READY)
        self.assertEqual(unit.state, UnitState.DECLARED)

    def test_ready_is_final_until_deleted(self):
        unit = self.factory.create_unit(self.root, "petroAgentStack")
        unit.transition(UnitState.PROVISIONING)
        unit.transition(UnitState.READY)
        with self.assertRaises(UnitStateError):
            unit.transition(UnitState.FAILED)

    def test_fail_records_error(self):
        unit = self.factory.create_unit(self.root, "prodAgentStack")
        unit.transition(UnitState.GATE_WAITING)
        error = RuntimeError("upload failed")
        unit.fail(error)
        self.assertEqual(unit.state, UnitState.FAILED)
        self.assertIs(unit.error, error)

    def test_deleting_root_cascades(self):
        parent = self.factory.create_unit(self.root, "networkingStack")
        child = self.factory.create_unit(parent, "subnets")
        sibling = self.factory.create_unit(self.root, "storageStack")

        self.root.delete()

        for unit in (self.root, parent, child, sibling):
            self.assertEqual(unit.state, UnitState.DELETED)
        self.assertEqual(list(self.root.descendants()), [parent, child, sibling])


if __name__ == '__main__':
    unittest.main()
