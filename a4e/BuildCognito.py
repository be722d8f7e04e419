"""
A4E Cognito Components Builder

User directory for the application. Sign-in is by email; the pre sign-up hook that
filters email domains is attached later by the configurator.
"""

import aws_cdk as cdk
import aws_cdk.aws_cognito as cognito
import sys
sys.path.append('..')
import config
sys.path.append(config.BASE_DIR + '/utils')
import utils

def buildUserPool(self):
    user_pool = cognito.UserPool(self, utils.returnName(config.USER_POOL_NAME_BASE),
        user_pool_name=utils.returnName(config.USER_POOL_NAME_BASE),
        self_sign_up_enabled=True,
        sign_in_aliases=cognito.SignInAliases(email=True),
        auto_verify=cognito.AutoVerifiedAttrs(email=True),
        password_policy=cognito.PasswordPolicy(
            min_length=8,
            require_lowercase=True,
            require_uppercase=True,
            require_digits=True,
            require_symbols=True
        ),
        account_recovery=cognito.AccountRecovery.EMAIL_ONLY,
        removal_policy=cdk.RemovalPolicy.DESTROY
    )

    user_pool.add_client("web-client",
        auth_flows=cognito.AuthFlow(user_srp=True),
        prevent_user_existence_errors=True
    )
    return user_pool
