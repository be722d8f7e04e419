"""
A4E IAM Components Builder

This module creates the execution roles of the application functions and of the
Bedrock agents, and synthesizes their least-privilege policies through the
PolicySynthesizer.

Grants (per principal):
- Bedrock runtime HTTP data source: InvokeModel / InvokeModelWithResponseStream on
  the chat model and the anthropic model family in the stack region
- Bedrock agent HTTP data source: ListAgents / ListAgentAliases only. ListAgents has
  no narrower resource than the account, so this is the one documented wildcard
- invoke-agent function role: InvokeAgent on agent aliases, InvokeModel on foundation
  models in the stack region and in us-* regions
- structured-output function role: InvokeModel on inference profiles and us-* models
- agent roles: InvokeModel on their own model and inference profile, read on the
  sample data prefix of the shared bucket

Security Considerations:
- Trust relationships are scoped to the deploying account
- No wildcard permissions except where required by service limitations
"""

import aws_cdk as cdk
import aws_cdk.aws_iam as iam
import sys
sys.path.append('..')
import config
sys.path.append(config.BASE_DIR + '/utils')
import utils

# execution role for one of the application functions
def buildFunctionRole(self, function_name):
    role = iam.Role(
        self, f"{function_name}-role",
        assumed_by=iam.ServicePrincipal("lambda.amazonaws.com"),
        description=utils.returnName(function_name) + ' execution role',
        managed_policies=[
            iam.ManagedPolicy.from_aws_managed_policy_name("service-role/AWSLambdaBasicExecutionRole")
        ]
    )
    return role

# resource role assumed by a Bedrock agent
def buildAgentRole(self, agent_name):
    stack = cdk.Stack.of(self)
    role = iam.Role(
        self, f"{agent_name}-agent-role",
        assumed_by=iam.ServicePrincipal(
            "bedrock.amazonaws.com",
            conditions={
                "StringEquals": {"aws:SourceAccount": stack.account},
                "ArnLike": {"aws:SourceArn": f"arn:aws:bedrock:{stack.region}:{stack.account}:agent/*"}
            }
        ),
        description=utils.returnName(agent_name) + ' agent resource role'
    )
    return role

def addLlmAgentPolicies(synthesizer, scope, runtime_data_source, agent_data_source,
                        invoke_agent_role, structured_output_role):
    stack = cdk.Stack.of(scope)
    region, account = stack.region, stack.account

    synthesizer.grant(
        runtime_data_source,
        resources=[
            f"arn:aws:bedrock:{region}::foundation-model/{config.BEDROCK_CHAT_MODEL}",
            f"arn:aws:bedrock:{region}::foundation-model/{config.BEDROCK_CHAT_MODEL_FAMILY}",
        ],
        actions=config.BEDROCK_INVOKE_ACTIONS
    )

    # list only; never invoke
    synthesizer.restrict(agent_data_source, config.BEDROCK_LIST_AGENT_ACTIONS)
    synthesizer.grant(
        agent_data_source,
        resources=[f"arn:aws:bedrock:{region}:{account}:*"],
        actions=config.BEDROCK_LIST_AGENT_ACTIONS,
        wildcard_reason="bedrock:ListAgents and bedrock:ListAgentAliases are account-level actions"
    )

    synthesizer.grant(
        invoke_agent_role,
        resources=[f"arn:aws:bedrock:{region}:{account}:agent-alias/*"],
        actions=["bedrock:InvokeAgent"],
        wildcard_reason="agent aliases are created per deployment and chosen by the caller at request time"
    )
    synthesizer.grant(
        invoke_agent_role,
        resources=[
            f"arn:aws:bedrock:{region}::foundation-model/*",
            "arn:aws:bedrock:us-*::foundation-model/*",
        ],
        actions=config.BEDROCK_INVOKE_ACTIONS,
        # documented over-grant across model families
        wildcard_reason="the invoking function selects the foundation model per request, in-region or cross-region"
    )

    synthesizer.grant(
        structured_output_role,
        resources=[
            f"arn:aws:bedrock:{region}:{account}:inference-profile/*",
            "arn:aws:bedrock:us-*::foundation-model/*",
        ],
        actions=["bedrock:InvokeModel"],
        wildcard_reason="inference profiles route to foundation models in any us-* region"
    )

def grantAgentModelAccess(synthesizer, scope, agent_role):
    stack = cdk.Stack.of(scope)
    return synthesizer.grant(
        agent_role,
        resources=[
            f"arn:aws:bedrock:{stack.region}:{stack.account}:inference-profile/{config.BEDROCK_AGENT_INFERENCE_PROFILE}",
            # cross-region inference profiles route to any us-* region
            f"arn:aws:bedrock:us-*::foundation-model/{config.BEDROCK_AGENT_MODEL}",
        ],
        actions=["bedrock:InvokeModel"],
        wildcard_reason="the agent's cross-region inference profile serves its model from any us-* region"
    )

def grantAgentBucketRead(synthesizer, agent_role, bucket):
    synthesizer.grant(
        agent_role,
        resources=[bucket.bucket_arn],
        actions=["s3:ListBucket"]
    )
    return synthesizer.grant(
        agent_role,
        resources=[bucket.arn_for_objects(config.SAMPLE_DATA_PREFIX + '/*')],
        actions=["s3:GetObject"]
    )
