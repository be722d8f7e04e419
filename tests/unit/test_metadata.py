import unittest
from unittest.mock import patch

import aws_cdk as core
import aws_cdk.aws_s3 as s3
import aws_cdk.assertions as assertions

from a4e.errors import CompositionError, RootNotFoundError
from a4e.metadata import OutputSet, RootMetadataPropagator, resolve_root
from a4e.units import DeployableUnit, StackFactory

TAGS = {'Project': 'agents-for-energy', 'Environment': 'test', 'AgentsForEnergy': 'true'}


class TestResolveRoot(unittest.TestCase):

    def setUp(self):
        self.app = core.App()
        self.root = DeployableUnit.root(core.Stack(self.app, "Root"))
        self.factory = StackFactory(self.root)

    def _chain(self, depth):
        unit = self.root
        for level in range(depth):
            unit = self.factory.create_unit(unit, f"level{level}")
        return unit

    def test_root_resolves_to_itself(self):
        self.assertIs(resolve_root(self.root), self.root)

    def test_depth_guard(self):
        deepest = self._chain(4)
        self.assertIs(resolve_root(deepest, max_depth=4), self.root)
        with self.assertRaises(RootNotFoundError):
            resolve_root(deepest, max_depth=3)

    def test_chain_without_root(self):
        stack = core.Stack(self.app, "Detached")
        top = DeployableUnit("top", stack)
        child = DeployableUnit("child", stack, parent=top)
        with self.assertRaises(RootNotFoundError):
            resolve_root(child)

    def test_parent_cycle(self):
        stack = core.Stack(self.app, "Cycle")
        first = DeployableUnit("first", stack)
        second = DeployableUnit("second", stack, parent=first)
        first.parent = second
        with self.assertRaises(RootNotFoundError):
            resolve_root(second)

    def test_no_unit(self):
        with self.assertRaises(RootNotFoundError):
            resolve_root(None)


class TestTagRoot(unittest.TestCase):

    def setUp(self):
        self.app = core.App()
        self.root = DeployableUnit.root(core.Stack(self.app, "Root"))
        self.storage = StackFactory(self.root).create_unit(self.root, "storageStack")
        self.propagator = RootMetadataPropagator()

    def test_tags_reach_nested_resources(self):
        s3.Bucket(self.storage.stack, "storage")
        self.propagator.tag_root(self.root, TAGS)

        self.assertEqual(self.storage.tags, TAGS)
        template = assertions.Template.from_stack(self.storage.stack)
        template.has_resource_properties("AWS::S3::Bucket", {
            "Tags": assertions.Match.array_with([{"Key": "Project", "Value": "agents-for-energy"}])
        })

    def test_tagging_twice_is_a_no_op(self):
        with patch('a4e.metadata.Tags') as mock_tags:
            self.propagator.tag_root(self.root, TAGS)
            self.propagator.tag_root(self.root, TAGS)

        self.assertEqual(mock_tags.of.return_value.add.call_count, len(TAGS))
        self.assertEqual(self.root.tags, TAGS)

    def test_only_roots_are_tagged(self):
        with self.assertRaises(CompositionError):
            self.propagator.tag_root(self.storage, TAGS)


class TestOutputSet(unittest.TestCase):

    def test_overwrite_warns_and_keeps_latest(self):
        outputs = OutputSet()
        outputs.publish('api_id', 'first')
        with self.assertLogs('a4e.metadata', level='WARNING') as logs:
            outputs.publish('api_id', 'second')

        self.assertEqual(outputs['api_id'], 'second')
        self.assertEqual(len(outputs), 1)
        self.assertIn('api_id', logs.output[0])

    def test_finalize_creates_root_outputs(self):
        app = core.App()
        root = DeployableUnit.root(core.Stack(app, "Root"))
        outputs = OutputSet()
        outputs.publish('root_stack_name', 'Root')
        outputs.finalize(root)

        with self.assertRaises(CompositionError):
            outputs.publish('api_id', 'late')
        template = assertions.Template.from_stack(root.stack)
        found = template.find_outputs("*", {"Description": "root_stack_name"})
        self.assertEqual([output["Value"] for output in found.values()], ["Root"])


if __name__ == '__main__':
    unittest.main()
