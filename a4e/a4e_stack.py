"""
A4E Backend Stack

Root deployment unit of Agents for Energy. Every other part of the backend is a
nested unit declared here, in provisioning order:

1. authStack          Cognito user pool               -> userDirectory
2. dataStack          AppSync API + Bedrock sources   -> dataApi, api_id output
3. storageStack       storage bucket                  -> storageBucket
4. functionStack      function roles, pre sign-up     -> functionRole:*, function:*
5. networkingStack    shared VPC                      -> network
6. uploadToS3Deployment gate: sample data upload into the storage bucket
7. maint/reg/petro/prodAgentStack, each waiting on the gate
8. configuratorStack  after the production agent

The Composition owns the unit state machine, the handle registry, the policy
synthesizer and the root metadata; this class only supplies the builders.
"""

import sys

from aws_cdk import Stack
from constructs import Construct

sys.path.append('..')
import config
sys.path.append(config.BASE_DIR + '/utils')
import utils

from . import (
    BuildAgents,
    BuildAppSync,
    BuildCloudWatch,
    BuildCognito,
    BuildConfigurator,
    BuildEC2,
    BuildIAM,
    BuildLambda,
    BuildNag,
    BuildS3,
)
from .descriptors import AgentKind
from .orchestrator import Composition


class A4EBackendStack(Stack):

    def __init__(self, scope: Construct, construct_id: str, compliance_handler=BuildNag.applyNagSuppressions,
                 sample_data_path=None, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.sample_data_path = sample_data_path or config.SAMPLE_DATA_PATH
        self.composition = Composition(self, compliance_handler=compliance_handler)
        composition = self.composition

        composition.declare(config.AUTH_UNIT, self.buildAuth)
        composition.declare(config.DATA_UNIT, self.buildDataApi, on_ready=self.publishApiId)
        self.storage_unit = composition.declare(config.STORAGE_UNIT, self.buildStorage)
        functions = composition.declare(config.FUNCTIONS_UNIT, self.buildFunctions)
        networking = composition.declare(config.NETWORKING_UNIT, self.buildNetworking)

        gate = composition.create_gate(config.ASSET_UPLOAD_GATE_NAME, producer=self.uploadSampleData)

        agent_units = [
            (config.MAINTENANCE_AGENT_UNIT, AgentKind.MAINTENANCE),
            (config.REGULATORY_AGENT_UNIT, AgentKind.REGULATORY),
            (config.PETROPHYSICS_AGENT_UNIT, AgentKind.PETROPHYSICS),
            (config.PRODUCTION_AGENT_UNIT, AgentKind.PRODUCTION),
        ]
        agents = {}
        for name, kind in agent_units:
            agents[kind] = composition.declare_agent(name, kind, BuildAgents.AGENT_BUILDERS[kind], gate)

        composition.declare(config.CONFIGURATOR_UNIT, self.buildConfigurator,
            depends_on=[agents[AgentKind.PRODUCTION], functions])

        self.root_unit = composition.run(anchor=networking)

    @property
    def registry(self):
        return self.composition.registry

    @property
    def outputs(self):
        return self.composition.outputs

    def buildAuth(self, unit):
        return {config.HANDLE_USER_DIRECTORY: BuildCognito.buildUserPool(unit.stack)}

    def buildDataApi(self, unit):
        api = BuildAppSync.buildGraphqlApi(unit.stack, self.registry.user_directory)
        runtime_ds, agent_ds = BuildAppSync.buildBedrockDataSources(unit.stack, api)
        return {
            config.HANDLE_DATA_API: api,
            config.BEDROCK_RUNTIME_DS: runtime_ds,
            config.BEDROCK_AGENT_DS: agent_ds,
        }

    def publishApiId(self, unit):
        self.composition.propagator.publish_output(config.OUTPUT_API_ID, self.registry.data_api.api_id)

    def buildStorage(self, unit):
        return {config.HANDLE_STORAGE_BUCKET: BuildS3.buildS3Bucket(unit.stack)}

    def buildFunctions(self, unit):
        scope = unit.stack
        handles = {}
        for function_name in config.APP_FUNCTIONS:
            handles[utils.functionRoleHandle(function_name)] = BuildIAM.buildFunctionRole(scope, function_name)

        BuildIAM.addLlmAgentPolicies(self.composition.synthesizer, scope,
            runtime_data_source=self.registry.get(config.BEDROCK_RUNTIME_DS),
            agent_data_source=self.registry.get(config.BEDROCK_AGENT_DS),
            invoke_agent_role=handles[utils.functionRoleHandle(config.INVOKE_BEDROCK_AGENT_FUNCTION)],
            structured_output_role=handles[utils.functionRoleHandle(config.STRUCTURED_OUTPUT_FUNCTION)]
        )

        log_group = BuildCloudWatch.buildCWLogGroup(scope)
        pre_sign_up_role = BuildIAM.buildFunctionRole(scope, config.PRE_SIGN_UP_NAME_BASE)
        handles[utils.functionRoleHandle(config.PRE_SIGN_UP_NAME_BASE)] = pre_sign_up_role
        handles[utils.functionHandle(config.PRE_SIGN_UP_NAME_BASE)] = BuildLambda.buildPreSignUp(
            scope, pre_sign_up_role, log_group)
        return handles

    def buildNetworking(self, unit):
        return {config.HANDLE_NETWORK: BuildEC2.buildVPC(unit.stack)}

    def uploadSampleData(self):
        """Gate producer; adds the upload to the storage unit after it is Ready."""
        return BuildS3.deploySampleData(self.storage_unit.stack, self.registry.storage_bucket,
            self.sample_data_path)

    def buildConfigurator(self, unit):
        production = self.composition.descriptors[AgentKind.PRODUCTION].extension
        props = BuildConfigurator.ConfiguratorProps(
            production_database=production.database,
            default_prod_database_name=production.default_database_name,
            athena_workgroup=production.athena_workgroup,
            storage_bucket=self.registry.storage_bucket,
            api=self.registry.data_api,
            pre_sign_up_function=self.registry.function(config.PRE_SIGN_UP_NAME_BASE),
            user_pool=self.registry.user_directory
        )
        self.configuration = BuildConfigurator.buildAppConfigurator(unit.stack, props, self.composition.synthesizer)
