# builds unique key for build
import os

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

###
# General
STACK_NAME = os.environ.get('A4E_STACK_NAME', 'A4EBackend')
REGION = os.environ.get('CDK_DEFAULT_REGION', 'us-east-1')
ACCOUNT = os.environ.get('CDK_DEFAULT_ACCOUNT')
ENVIRONMENT = os.environ.get('A4E_ENVIRONMENT', 'dev')

#####
# Tags
PROJ = 'a4e'
RESOURCE_TAGS = {
    'Project': 'agents-for-energy',
    'Environment': ENVIRONMENT,
    'AgentsForEnergy': 'true',
}
ROOT_STACK_NAME_TAG = 'rootStackName'

#####
# Unique Key
KEY = PROJ + '-' + ENVIRONMENT

###
# Composition
# guards root discovery against parent cycles
MAX_UNIT_DEPTH = 16
# dependency reason used by every agent waiting on the sample data upload
GATE_REASON_ASSET_UPLOAD = 'asset-upload'
ASSET_UPLOAD_GATE_NAME = 'uploadToS3Deployment'

# unit names, in provisioning order
AUTH_UNIT = 'authStack'
DATA_UNIT = 'dataStack'
STORAGE_UNIT = 'storageStack'
FUNCTIONS_UNIT = 'functionStack'
NETWORKING_UNIT = 'networkingStack'
MAINTENANCE_AGENT_UNIT = 'maintAgentStack'
REGULATORY_AGENT_UNIT = 'regAgentStack'
PETROPHYSICS_AGENT_UNIT = 'petroAgentStack'
PRODUCTION_AGENT_UNIT = 'prodAgentStack'
CONFIGURATOR_UNIT = 'configuratorStack'

# handle names in the resource registry
HANDLE_NETWORK = 'network'
HANDLE_STORAGE_BUCKET = 'storageBucket'
HANDLE_DATA_API = 'dataApi'
HANDLE_USER_DIRECTORY = 'userDirectory'
HANDLE_FUNCTION_ROLE_PREFIX = 'functionRole:'
HANDLE_FUNCTION_PREFIX = 'function:'

# output set keys
OUTPUT_API_ID = 'api_id'
OUTPUT_ROOT_STACK_NAME = 'root_stack_name'

###
# Networking
VPC_NAME = 'A4E-VPC'
VPC_CIDR = '10.0.0.0/16'
VPC_MAX_AZS = 3
VPC_SUBNET_CIDR_MASK = 24
VPC_FLOW_LOG_NAME = 'flow-log'

###
# Storage
BUCKET_NAME_BASE = 'storage'
LCDAYS = 90
LCDAYS_POLICY = 'LC_TO_INT'
# sample data uploaded before any agent is allowed to deploy
SAMPLE_DATA_PATH = os.path.join(BASE_DIR, 'assets', 'sample-data')
SAMPLE_DATA_PREFIX = 'sample-data'
ATHENA_RESULTS_PREFIX = 'athena_results'

###
# Auth
USER_POOL_NAME_BASE = 'user-pool'
ALLOWED_EMAIL_DOMAINS = os.environ.get('A4E_ALLOWED_EMAIL_DOMAINS', '')

###
# Data API
GRAPHQL_API_NAME_BASE = 'graphql-api'
GRAPHQL_SCHEMA_PATH = os.path.join(BASE_DIR, 'graphql', 'schema.graphql')
START_QUERY_RESOLVER_PATH = os.path.join(BASE_DIR, 'graphql', 'resolvers', 'startProductionQuery.js')
BEDROCK_RUNTIME_DS = 'bedrockRuntimeDS'
BEDROCK_AGENT_DS = 'bedrockAgentDS'
ATHENA_DS = 'athenaDS'

###
# Bedrock
BEDROCK_CHAT_MODEL = 'anthropic.claude-3-sonnet-20240229-v1:0'
BEDROCK_CHAT_MODEL_FAMILY = 'anthropic.*'
BEDROCK_AGENT_MODEL = 'anthropic.claude-3-haiku-20240307-v1:0'
BEDROCK_AGENT_INFERENCE_PROFILE = 'us.anthropic.claude-3-haiku-20240307-v1:0'
BEDROCK_AGENT_IDLE_TTL_SECONDS = 600
BEDROCK_AGENT_ALIAS_NAME = 'agent-alias'

BEDROCK_INVOKE_ACTIONS = ['bedrock:InvokeModel', 'bedrock:InvokeModelWithResponseStream']
BEDROCK_LIST_AGENT_ACTIONS = ['bedrock:ListAgents', 'bedrock:ListAgentAliases']

####
# Functions
# request-time functions whose execution roles are provisioned here;
# their code ships with the application layer
INVOKE_BEDROCK_AGENT_FUNCTION = 'invokeBedrockAgent'
STRUCTURED_OUTPUT_FUNCTION = 'getStructuredOutputFromLangchain'
PRODUCTION_AGENT_FUNCTION = 'productionAgent'
PLAN_AND_EXECUTE_FUNCTION = 'planAndExecuteAgent'
APP_FUNCTIONS = [
    INVOKE_BEDROCK_AGENT_FUNCTION,
    STRUCTURED_OUTPUT_FUNCTION,
    PRODUCTION_AGENT_FUNCTION,
    PLAN_AND_EXECUTE_FUNCTION,
]

# Lambda configs for the pre sign-up hook
PRE_SIGN_UP_NAME_BASE = 'preSignUp'
PRE_SIGN_UP_TIMEOUT = 30
PRE_SIGN_UP_MEMORY = 128
PRE_SIGN_UP_DESC = 'reject sign-ups from email domains that are not allowed'
PRE_SIGN_UP_PATH = os.path.join(BASE_DIR, 'lambda', 'preSignUp')
PRE_SIGN_UP_HANDLER_FILE = 'preSignUp_handler'
PRE_SIGN_UP_HANDLER_FUNC = 'handler'
PRE_SIGN_UP_RETRIES = 0

# CloudWatch
LOG_GROUP_NAME_BASE = 'log-group'

###
# Agents
AGENT_INSTRUCTIONS = {
    'maintenance': (
        'You are an industrial maintenance specialist. Answer questions about '
        'equipment, work orders and maintenance history using the maintenance '
        'database, and say so when the data does not contain the answer.'
    ),
    'regulatory': (
        'You are a regulatory compliance assistant for the energy industry. '
        'Answer questions about permits, reporting obligations and safety '
        'regulations, and cite the regulation you rely on.'
    ),
    'petrophysics': (
        'You are a petrophysicist. Help interpret well logs, estimate porosity, '
        'water saturation and permeability, and explain the assumptions behind '
        'each calculation.'
    ),
    'production': (
        'You are a hydrocarbon production engineer. Answer questions about well '
        'production volumes and trends using the production database and '
        'explain the queries you ran.'
    ),
}
MAINTENANCE_DATABASE_NAME = 'maintenance_db'
PRODUCTION_DATABASE_NAME = 'production_db'
PRODUCTION_WORKGROUP_NAME_BASE = 'production-workgroup'
REGULATORY_METRIC_NAMESPACE = 'AWS/Bedrock/Agents'
REGULATORY_METRIC_NAME = 'InvocationCount'

###
# SSM
SSM_PRODUCTION_DATABASE = 'production-database'
SSM_PRODUCTION_WORKGROUP = 'production-workgroup'

###
# cdk-nag suppressions per unit
NAG_SUPPRESSIONS = {
    AUTH_UNIT: [
        {"id": "AwsSolutions-COG2", "reason": "MFA is left to the application owner for the sample deployment."},
        {"id": "AwsSolutions-COG3", "reason": "Advanced security mode is a paid feature and optional for the sample deployment."},
    ],
    DATA_UNIT: [
        {"id": "AwsSolutions-IAM5", "reason": "Bedrock model-family and ListAgents grants have no narrower addressable resource."},
        {"id": "AwsSolutions-ASC3", "reason": "Request logging is left to the application owner for the sample deployment."},
    ],
    STORAGE_UNIT: [
        {"id": "AwsSolutions-IAM4", "reason": "BucketDeployment creates internal Lambda function with CDK-managed policies."},
        {"id": "AwsSolutions-IAM5", "reason": "BucketDeployment needs object-level wildcards on the destination bucket."},
        {"id": "AwsSolutions-L1", "reason": "BucketDeployment creates internal Lambda function with CDK-managed runtime version."},
        {"id": "AwsSolutions-S1", "reason": "The access log bucket is the log destination and does not log to itself."},
    ],
    FUNCTIONS_UNIT: [
        {"id": "AwsSolutions-IAM4", "reason": "AWSLambdaBasicExecutionRole is required for Lambda CloudWatch logging."},
        {"id": "AwsSolutions-IAM5", "reason": "Foundation model and agent alias ARNs are not enumerable at provisioning time."},
        {"id": "AwsSolutions-L1", "reason": "Lambda runtime version is acceptable for sample code."},
    ],
    NETWORKING_UNIT: [
        {"id": "AwsSolutions-IAM4", "reason": "Default security group restriction custom resource uses a CDK-managed Lambda role."},
        {"id": "AwsSolutions-L1", "reason": "Default security group restriction custom resource runtime is managed by CDK."},
    ],
    MAINTENANCE_AGENT_UNIT: [
        {"id": "AwsSolutions-IAM5", "reason": "Agent reads every object under the sample data prefix."},
    ],
    REGULATORY_AGENT_UNIT: [
        {"id": "AwsSolutions-IAM5", "reason": "Agent reads every object under the sample data prefix."},
    ],
    PETROPHYSICS_AGENT_UNIT: [
        {"id": "AwsSolutions-IAM5", "reason": "Agent reads every object under the sample data prefix."},
    ],
    PRODUCTION_AGENT_UNIT: [
        {"id": "AwsSolutions-IAM5", "reason": "Agent reads every object under the sample data prefix."},
    ],
    CONFIGURATOR_UNIT: [
        {"id": "AwsSolutions-IAM4", "reason": "Custom resource requires AWS managed policy for Lambda execution."},
        {"id": "AwsSolutions-IAM5", "reason": "Athena result objects and Glue tables are created at query time."},
        {"id": "AwsSolutions-L1", "reason": "Custom resource Lambda runtime is managed by CDK."},
    ],
}
