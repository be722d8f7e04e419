"""
A4E Systems Manager Parameter Store Builder

Publishes the production database and Athena workgroup names so the application
layer can look them up at runtime instead of hard-coding them.

Parameters Created:
- a4e-<env>-production-database: Glue database queried by the production agent
- a4e-<env>-production-workgroup: Athena workgroup for production queries
"""

from aws_cdk import (
    aws_ssm as ssm
)
import config
import sys
sys.path.append(config.BASE_DIR + '/utils')
import utils

def buildSSMParameters(self, production_database_name, athena_workgroup_name):
    """Build SSM Parameter Store parameters for the production data"""

    database_parameter = ssm.StringParameter(
        self, "A4EProductionDatabaseParameter",
        parameter_name=utils.returnName(config.SSM_PRODUCTION_DATABASE),
        string_value=production_database_name,
        description="Glue database queried by the production agent"
    )

    workgroup_parameter = ssm.StringParameter(
        self, "A4EProductionWorkgroupParameter",
        parameter_name=utils.returnName(config.SSM_PRODUCTION_WORKGROUP),
        string_value=athena_workgroup_name,
        description="Athena workgroup used for production queries"
    )

    return {
        'database_parameter': database_parameter,
        'workgroup_parameter': workgroup_parameter
    }
