# Builds Lambda components of A4E
import aws_cdk as cdk
import aws_cdk.aws_lambda as _lambda
import config
import sys
sys.path.append(config.BASE_DIR + '/utils')
import utils

# pre sign-up hook that filters email domains
def buildPreSignUp(self, execution_role, log_group):

    func_name = utils.returnName(config.PRE_SIGN_UP_NAME_BASE)

    lambdaPreSignUp = _lambda.Function(
        self, func_name,
        runtime=_lambda.Runtime.PYTHON_3_12,
        code=_lambda.Code.from_asset(config.PRE_SIGN_UP_PATH),
        function_name=func_name,
        role=execution_role,
        timeout=cdk.Duration.seconds(config.PRE_SIGN_UP_TIMEOUT),
        architecture=_lambda.Architecture.X86_64,
        memory_size=config.PRE_SIGN_UP_MEMORY,
        description=config.PRE_SIGN_UP_DESC,
        handler=config.PRE_SIGN_UP_HANDLER_FILE + '.' + config.PRE_SIGN_UP_HANDLER_FUNC,
        retry_attempts=config.PRE_SIGN_UP_RETRIES,
        log_group=log_group,
        environment={
            "ALLOWED_EMAIL_DOMAINS": config.ALLOWED_EMAIL_DOMAINS
        }
    )

    lambdaPreSignUp.node.add_dependency(log_group) # add dependency
    lambdaPreSignUp.node.add_dependency(execution_role) # add dependency

    return lambdaPreSignUp
