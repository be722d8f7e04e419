"""
A4E AppSync Components Builder

GraphQL data API authorised by the Cognito user pool, and the two HTTP data
sources that let resolvers call Bedrock directly with SigV4 signing:

- bedrockRuntimeDS -> https://bedrock-runtime.<region>.amazonaws.com
- bedrockAgentDS   -> https://bedrock-agent.<region>.amazonaws.com

The data sources' service roles are the principals granted in
BuildIAM.addLlmAgentPolicies.
"""

import aws_cdk as cdk
import aws_cdk.aws_appsync as appsync
import sys
sys.path.append('..')
import config
sys.path.append(config.BASE_DIR + '/utils')
import utils

def buildGraphqlApi(self, user_pool):
    api = appsync.GraphqlApi(self, utils.returnName(config.GRAPHQL_API_NAME_BASE),
        name=utils.returnName(config.GRAPHQL_API_NAME_BASE),
        definition=appsync.Definition.from_file(config.GRAPHQL_SCHEMA_PATH),
        authorization_config=appsync.AuthorizationConfig(
            default_authorization=appsync.AuthorizationMode(
                authorization_type=appsync.AuthorizationType.USER_POOL,
                user_pool_config=appsync.UserPoolConfig(user_pool=user_pool)
            ),
            additional_authorization_modes=[
                appsync.AuthorizationMode(authorization_type=appsync.AuthorizationType.IAM)
            ]
        ),
        xray_enabled=True
    )
    return api

def _signedEndpoint(service_host, signing_service, region):
    return (
        f"https://{service_host}.{region}.amazonaws.com",
        appsync.AwsIamConfig(signing_region=region, signing_service_name=signing_service)
    )

def buildBedrockDataSources(self, api):
    region = cdk.Stack.of(self).region

    endpoint, signing = _signedEndpoint("bedrock-runtime", "bedrock", region)
    runtime_ds = api.add_http_data_source(config.BEDROCK_RUNTIME_DS, endpoint,
        authorization_config=signing
    )

    endpoint, signing = _signedEndpoint("bedrock-agent", "bedrock", region)
    agent_ds = api.add_http_data_source(config.BEDROCK_AGENT_DS, endpoint,
        authorization_config=signing
    )

    return runtime_ds, agent_ds

def buildAthenaDataSource(self, api):
    region = cdk.Stack.of(self).region
    endpoint, signing = _signedEndpoint("athena", "athena", region)
    return appsync.HttpDataSource(self, config.ATHENA_DS,
        api=api,
        endpoint=endpoint,
        authorization_config=signing,
        description="Athena queries against the production database"
    )
