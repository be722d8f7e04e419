"""
A4E Application Configurator

Last unit of the composition. It consumes the aggregated handles and wires the
pieces that need more than one unit to exist:

- an Athena HTTP data source on the GraphQL API, granted query access to the
  production workgroup, its Glue database and the shared bucket
- the startProductionQuery JS resolver on that data source
- the pre sign-up Lambda registered on the user pool. The trigger is set with an
  AwsCustomResource calling UpdateUserPool, so the auth unit never references
  the functions unit
- SSM parameters naming the production database and workgroup
"""

import logging
from dataclasses import dataclass
from typing import Any

import aws_cdk as cdk
import aws_cdk.aws_appsync as appsync
import aws_cdk.aws_lambda as _lambda
import aws_cdk.custom_resources as cr
import config

from . import BuildAppSync, BuildSSM

logger = logging.getLogger(__name__)

ATHENA_QUERY_ACTIONS = [
    "athena:StartQueryExecution",
    "athena:GetQueryExecution",
    "athena:GetQueryResults",
    "athena:StopQueryExecution",
]
GLUE_READ_ACTIONS = [
    "glue:GetDatabase",
    "glue:GetTable",
    "glue:GetTables",
    "glue:GetPartitions",
]


@dataclass(frozen=True)
class ConfiguratorProps:
    production_database: Any
    default_prod_database_name: str
    athena_workgroup: Any
    storage_bucket: Any
    api: Any
    pre_sign_up_function: Any
    user_pool: Any


def loadResolverCode(path, workgroup_name, database_name):
    with open(path) as f:
        code = f.read()
    return code.replace('__ATHENA_WORKGROUP__', workgroup_name).replace('__DATABASE_NAME__', database_name)

def addAthenaQueryPolicies(synthesizer, scope, principal, props):
    stack = cdk.Stack.of(scope)
    region, account = stack.region, stack.account
    database_name = props.default_prod_database_name

    synthesizer.grant(
        principal,
        resources=[f"arn:aws:athena:{region}:{account}:workgroup/{props.athena_workgroup.ref}"],
        actions=ATHENA_QUERY_ACTIONS
    )
    synthesizer.grant(
        principal,
        resources=[
            f"arn:aws:glue:{region}:{account}:catalog",
            f"arn:aws:glue:{region}:{account}:database/{database_name}",
            f"arn:aws:glue:{region}:{account}:table/{database_name}/*",
        ],
        actions=GLUE_READ_ACTIONS
    )
    synthesizer.grant(
        principal,
        resources=[props.storage_bucket.bucket_arn],
        actions=["s3:GetBucketLocation", "s3:ListBucket"]
    )
    synthesizer.grant(
        principal,
        resources=[props.storage_bucket.arn_for_objects(config.SAMPLE_DATA_PREFIX + '/*')],
        actions=["s3:GetObject"]
    )
    synthesizer.grant(
        principal,
        resources=[props.storage_bucket.arn_for_objects(config.ATHENA_RESULTS_PREFIX + '/*')],
        actions=["s3:GetObject", "s3:PutObject", "s3:AbortMultipartUpload"]
    )

def registerPreSignUp(self, user_pool, pre_sign_up_function):
    call = cr.AwsSdkCall(
        service="CognitoIdentityServiceProvider",
        action="updateUserPool",
        parameters={
            "UserPoolId": user_pool.user_pool_id,
            # UpdateUserPool resets attributes that are left out
            "AutoVerifiedAttributes": ["email"],
            "LambdaConfig": {"PreSignUp": pre_sign_up_function.function_arn},
        },
        physical_resource_id=cr.PhysicalResourceId.of(user_pool.user_pool_id)
    )
    trigger = cr.AwsCustomResource(self, "UserPoolPreSignUpTrigger",
        on_create=call,
        on_update=call,
        policy=cr.AwsCustomResourcePolicy.from_sdk_calls(resources=[user_pool.user_pool_arn]),
        install_latest_aws_sdk=False
    )

    permission = _lambda.CfnPermission(self, "PreSignUpInvokePermission",
        action="lambda:InvokeFunction",
        function_name=pre_sign_up_function.function_arn,
        principal="cognito-idp.amazonaws.com",
        source_arn=user_pool.user_pool_arn
    )
    trigger.node.add_dependency(permission)
    return trigger

def buildAppConfigurator(self, props, synthesizer):
    athena_ds = BuildAppSync.buildAthenaDataSource(self, props.api)
    addAthenaQueryPolicies(synthesizer, self, athena_ds, props)

    code = loadResolverCode(config.START_QUERY_RESOLVER_PATH,
        props.athena_workgroup.ref, props.default_prod_database_name)
    resolver = appsync.Resolver(self, "startProductionQueryResolver",
        api=props.api,
        type_name="Mutation",
        field_name="startProductionQuery",
        data_source=athena_ds,
        runtime=appsync.FunctionRuntime.JS_1_0_0,
        code=appsync.Code.from_inline(code)
    )

    trigger = registerPreSignUp(self, props.user_pool, props.pre_sign_up_function)
    parameters = BuildSSM.buildSSMParameters(self,
        props.default_prod_database_name, props.athena_workgroup.ref)

    logger.info("configured production queries, pre sign-up trigger and SSM parameters")
    return {
        'athena_data_source': athena_ds,
        'resolver': resolver,
        'pre_sign_up_trigger': trigger,
        **parameters,
    }
