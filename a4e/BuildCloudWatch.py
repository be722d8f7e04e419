"""
A4E CloudWatch Components Builder

Log group shared by the functions unit, and the invocation metric the regulatory
agent exposes in its descriptor.
"""

import aws_cdk as cdk
import aws_cdk.aws_cloudwatch as cw
import aws_cdk.aws_logs as logs
import sys
sys.path.append('..')
import config
sys.path.append(config.BASE_DIR + '/utils')
import utils

# make these configurable
def buildCWLogGroup(self):
    log_group = logs.LogGroup(
        self, utils.returnName(config.LOG_GROUP_NAME_BASE),
        log_group_name=utils.returnName(config.LOG_GROUP_NAME_BASE),
        retention=logs.RetentionDays.ONE_WEEK,
        removal_policy=cdk.RemovalPolicy.DESTROY
    )
    return log_group

def buildAgentInvocationMetric(agent_alias_arn):
    return cw.Metric(
        namespace=config.REGULATORY_METRIC_NAMESPACE,
        metric_name=config.REGULATORY_METRIC_NAME,
        dimensions_map={"AgentAliasArn": agent_alias_arn},
        statistic="Sum",
        period=cdk.Duration.minutes(5)
    )
