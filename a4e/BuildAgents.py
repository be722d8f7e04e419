"""
A4E Bedrock Agent Builders

One builder per agent kind. The orchestrator calls a builder only once the
asset-upload gate is satisfied, with the unit to build into and an
AgentBuildContext carrying the shared VPC, the shared storage bucket, the gate
and the policy synthesizer. Agents never create their own VPC or bucket.

Every agent gets:
- a resource role assumed by bedrock.amazonaws.com
- a security group in the shared VPC
- a Bedrock agent (CfnAgent) and a stable alias (CfnAgentAlias)

Kind-specific resources:
- maintenance: Glue database for the maintenance records
- regulatory: CloudWatch invocation metric on the alias
- petrophysics: none
- production: Glue database and an Athena workgroup writing results to the
  shared bucket; both are handed to the configurator through the descriptor
"""

import aws_cdk as cdk
import aws_cdk.aws_athena as athena
import aws_cdk.aws_bedrock as bedrock
import aws_cdk.aws_glue as glue
import sys
sys.path.append('..')
import config
sys.path.append(config.BASE_DIR + '/utils')
import utils

from . import BuildCloudWatch, BuildEC2, BuildIAM
from .descriptors import (
    AgentDescriptor,
    AgentKind,
    MaintenanceExtension,
    ProductionExtension,
    RegulatoryExtension,
)

def _buildAgentCore(unit, context, kind):
    scope = unit.stack
    agent_name = kind.value

    role = BuildIAM.buildAgentRole(scope, agent_name)
    BuildIAM.grantAgentModelAccess(context.synthesizer, scope, role)
    BuildIAM.grantAgentBucketRead(context.synthesizer, role, context.storage_bucket)

    BuildEC2.buildAgentSecurityGroup(scope, context.network, agent_name)

    agent = bedrock.CfnAgent(scope, f"{agent_name}-agent",
        agent_name=utils.returnName(f"{agent_name}-agent"),
        agent_resource_role_arn=role.role_arn,
        foundation_model=config.BEDROCK_AGENT_INFERENCE_PROFILE,
        instruction=config.AGENT_INSTRUCTIONS[agent_name],
        description=f"{agent_name} agent",
        idle_session_ttl_in_seconds=config.BEDROCK_AGENT_IDLE_TTL_SECONDS,
        auto_prepare=True
    )
    # the agent validates its role on create
    agent.node.add_dependency(role)

    alias = bedrock.CfnAgentAlias(scope, f"{agent_name}-agent-alias",
        agent_alias_name=config.BEDROCK_AGENT_ALIAS_NAME,
        agent_id=agent.attr_agent_id,
        description=f"{agent_name} agent alias"
    )

    return agent, alias

def _buildGlueDatabase(scope, database_name):
    return glue.CfnDatabase(scope, f"{database_name}-database",
        catalog_id=cdk.Stack.of(scope).account,
        database_input=glue.CfnDatabase.DatabaseInputProperty(
            name=database_name,
            description=f"{utils.returnName(database_name)} tables"
        )
    )

def buildMaintenanceAgent(unit, context):
    agent, alias = _buildAgentCore(unit, context, AgentKind.MAINTENANCE)
    _buildGlueDatabase(unit.stack, config.MAINTENANCE_DATABASE_NAME)

    return AgentDescriptor(
        kind=AgentKind.MAINTENANCE,
        agent_id=agent.attr_agent_id,
        agent_alias_id=alias.attr_agent_alias_id,
        extension=MaintenanceExtension(default_database_name=config.MAINTENANCE_DATABASE_NAME)
    )

def buildRegulatoryAgent(unit, context):
    agent, alias = _buildAgentCore(unit, context, AgentKind.REGULATORY)
    metric = BuildCloudWatch.buildAgentInvocationMetric(alias.attr_agent_alias_arn)

    return AgentDescriptor(
        kind=AgentKind.REGULATORY,
        agent_id=agent.attr_agent_id,
        agent_alias_id=alias.attr_agent_alias_id,
        extension=RegulatoryExtension(metric=metric)
    )

def buildPetrophysicsAgent(unit, context):
    agent, alias = _buildAgentCore(unit, context, AgentKind.PETROPHYSICS)

    return AgentDescriptor(
        kind=AgentKind.PETROPHYSICS,
        agent_id=agent.attr_agent_id,
        agent_alias_id=alias.attr_agent_alias_id
    )

def buildProductionAgent(unit, context):
    scope = unit.stack
    agent, alias = _buildAgentCore(unit, context, AgentKind.PRODUCTION)
    database = _buildGlueDatabase(scope, config.PRODUCTION_DATABASE_NAME)

    bucket = context.storage_bucket
    workgroup = athena.CfnWorkGroup(scope, "production-workgroup",
        name=utils.returnName(config.PRODUCTION_WORKGROUP_NAME_BASE),
        description="Athena queries against the production database",
        state="ENABLED",
        recursive_delete_option=True,
        work_group_configuration=athena.CfnWorkGroup.WorkGroupConfigurationProperty(
            enforce_work_group_configuration=True,
            publish_cloud_watch_metrics_enabled=True,
            result_configuration=athena.CfnWorkGroup.ResultConfigurationProperty(
                output_location=f"s3://{bucket.bucket_name}/{config.ATHENA_RESULTS_PREFIX}/",
                encryption_configuration=athena.CfnWorkGroup.EncryptionConfigurationProperty(
                    encryption_option="SSE_S3"
                )
            )
        )
    )

    return AgentDescriptor(
        kind=AgentKind.PRODUCTION,
        agent_id=agent.attr_agent_id,
        agent_alias_id=alias.attr_agent_alias_id,
        extension=ProductionExtension(
            default_database_name=config.PRODUCTION_DATABASE_NAME,
            database=database,
            athena_workgroup=workgroup
        )
    )

AGENT_BUILDERS = {
    AgentKind.MAINTENANCE: buildMaintenanceAgent,
    AgentKind.REGULATORY: buildRegulatoryAgent,
    AgentKind.PETROPHYSICS: buildPetrophysicsAgent,
    AgentKind.PRODUCTION: buildProductionAgent,
}
