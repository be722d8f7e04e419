import unittest

import aws_cdk as core
import aws_cdk.aws_iam as iam
import aws_cdk.assertions as assertions

from a4e import BuildIAM
from a4e.errors import InvalidGrantError
from a4e.policy import PolicySynthesizer, is_broad_pattern

MODEL_ARN = "arn:aws:bedrock:us-east-1::foundation-model/anthropic.claude-3-sonnet-20240229-v1:0"


class TestPolicySynthesizer(unittest.TestCase):

    def setUp(self):
        self.app = core.App()
        self.stack = core.Stack(self.app, "PolicyTest")
        self.role = iam.Role(self.stack, "role", assumed_by=iam.ServicePrincipal("lambda.amazonaws.com"))
        self.synthesizer = PolicySynthesizer()

    def test_grant_is_idempotent(self):
        first = self.synthesizer.grant(self.role, [MODEL_ARN], ["bedrock:InvokeModel"])
        second = self.synthesizer.grant(self.role, [MODEL_ARN], ["bedrock:InvokeModel"])

        self.assertIs(first, second)
        self.assertEqual(len(self.synthesizer.statements_for(self.role)), 1)
        template = assertions.Template.from_stack(self.stack)
        template.has_resource_properties("AWS::IAM::Policy", {
            "PolicyDocument": {
                "Statement": [{"Action": "bedrock:InvokeModel", "Effect": "Allow", "Resource": MODEL_ARN}]
            }
        })

    def test_same_grant_in_another_order_is_not_repeated(self):
        actions = ["bedrock:InvokeModel", "bedrock:InvokeModelWithResponseStream"]
        self.synthesizer.grant(self.role, [MODEL_ARN], actions)
        self.synthesizer.grant(self.role, [MODEL_ARN], list(reversed(actions)))
        self.assertEqual(len(self.synthesizer.grants_for(self.role)), 1)

    def test_empty_actions_or_resources(self):
        with self.assertRaises(InvalidGrantError):
            self.synthesizer.grant(self.role, [MODEL_ARN], [])
        with self.assertRaises(InvalidGrantError):
            self.synthesizer.grant(self.role, [], ["bedrock:InvokeModel"])
        self.assertEqual(self.synthesizer.statements_for(self.role), [])

    def test_wildcard_needs_a_reason(self):
        pattern = "arn:aws:bedrock:us-east-1:123456789012:*"
        with self.assertRaises(InvalidGrantError):
            self.synthesizer.grant(self.role, [pattern], ["bedrock:ListAgents"])

        grant = self.synthesizer.grant(self.role, [pattern], ["bedrock:ListAgents"],
            wildcard_reason="ListAgents is an account-level action")
        self.assertEqual(grant.wildcard_reason, "ListAgents is an account-level action")

    def test_ceiling_blocks_actions_outside_it(self):
        self.synthesizer.restrict(self.role, ["bedrock:ListAgents", "bedrock:ListAgentAliases"])
        self.synthesizer.grant(self.role, ["arn:aws:bedrock:us-east-1:123456789012:agent/AGENT123"], ["bedrock:ListAgents"])

        with self.assertRaises(InvalidGrantError):
            self.synthesizer.grant(self.role, [MODEL_ARN], ["bedrock:InvokeModel"])
        self.assertEqual(len(self.synthesizer.grants_for(self.role)), 1)

    def test_ceiling_below_existing_grant_rejected(self):
        self.synthesizer.grant(self.role, [MODEL_ARN], ["bedrock:InvokeModel"])
        with self.assertRaises(InvalidGrantError):
            self.synthesizer.restrict(self.role, ["bedrock:ListAgents"])

    def test_principals_are_tracked_separately(self):
        other = iam.Role(self.stack, "other", assumed_by=iam.ServicePrincipal("lambda.amazonaws.com"))
        self.synthesizer.grant(self.role, [MODEL_ARN], ["bedrock:InvokeModel"])
        self.synthesizer.grant(other, [MODEL_ARN], ["bedrock:InvokeModel"])
        self.assertEqual(len(self.synthesizer.grants_for(self.role)), 1)
        self.assertEqual(len(self.synthesizer.grants_for(other)), 1)


class TestBroadPatterns(unittest.TestCase):

    def test_broad(self):
        self.assertTrue(is_broad_pattern("*"))
        self.assertTrue(is_broad_pattern("arn:aws:bedrock:us-east-1:123456789012:*"))

    def test_whole_resource_type_is_broad(self):
        self.assertTrue(is_broad_pattern("arn:aws:bedrock:us-east-1::foundation-model/*"))
        self.assertTrue(is_broad_pattern("arn:aws:bedrock:us-east-1:123456789012:agent-alias/*"))
        self.assertTrue(is_broad_pattern("arn:aws:bedrock:us-east-1:123456789012:inference-profile/*"))

    def test_wildcard_region_is_broad(self):
        self.assertTrue(is_broad_pattern("arn:aws:bedrock:*::foundation-model/*"))
        self.assertTrue(is_broad_pattern("arn:aws:bedrock:us-*::foundation-model/anthropic.claude-3-haiku-20240307-v1:0"))

    def test_scoped(self):
        self.assertFalse(is_broad_pattern(MODEL_ARN))
        self.assertFalse(is_broad_pattern("arn:aws:bedrock:us-east-1::foundation-model/anthropic.*"))
        self.assertFalse(is_broad_pattern("arn:aws:glue:us-east-1:123456789012:table/production_db/*"))
        self.assertFalse(is_broad_pattern("arn:aws:s3:::bucket/*"))
        self.assertFalse(is_broad_pattern("arn:aws:s3:::bucket/sample-data/*"))


class TestModelFamilyGrants(unittest.TestCase):

    def setUp(self):
        self.app = core.App()
        self.stack = core.Stack(self.app, "GrantTest")
        self.role = iam.Role(self.stack, "role", assumed_by=iam.ServicePrincipal("lambda.amazonaws.com"))
        self.synthesizer = PolicySynthesizer()

    def test_every_model_family_needs_a_reason(self):
        with self.assertRaises(InvalidGrantError):
            self.synthesizer.grant(self.role, ["arn:aws:bedrock:*::foundation-model/*"], ["bedrock:InvokeModel"])
        self.assertEqual(self.synthesizer.statements_for(self.role), [])

    def test_llm_agent_policies_document_their_wildcards(self):
        runtime = iam.Role(self.stack, "runtime", assumed_by=iam.ServicePrincipal("appsync.amazonaws.com"))
        agents = iam.Role(self.stack, "agents", assumed_by=iam.ServicePrincipal("appsync.amazonaws.com"))
        invoke = iam.Role(self.stack, "invoke", assumed_by=iam.ServicePrincipal("lambda.amazonaws.com"))
        structured = iam.Role(self.stack, "structured", assumed_by=iam.ServicePrincipal("lambda.amazonaws.com"))

        BuildIAM.addLlmAgentPolicies(self.synthesizer, self.stack, runtime, agents, invoke, structured)

        for principal in (runtime, agents, invoke, structured):
            for grant in self.synthesizer.grants_for(principal):
                if any(is_broad_pattern(pattern) for pattern in grant.resources):
                    self.assertTrue(grant.wildcard_reason, sorted(grant.resources))
        self.assertEqual(len(self.synthesizer.grants_for(invoke)), 2)
        self.assertTrue(all(g.wildcard_reason for g in self.synthesizer.grants_for(invoke)))


if __name__ == '__main__':
    unittest.main()
