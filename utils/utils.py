"""
A4E Resource Naming Utilities

Builds resource names with the project/environment prefix from config.KEY so
that several environments can share one account and region.

Naming Convention:
The naming convention follows the pattern: {config.KEY}-{type}
Where:
- config.KEY = "a4e-{environment}" (e.g., "a4e-dev")
- type = Resource-specific identifier from config.py constants

Example Usage:
- S3 Buckets: utils.returnName(config.BUCKET_NAME_BASE)
  Result: "a4e-dev-storage"
- Lambda Functions: utils.returnName(config.PRE_SIGN_UP_NAME_BASE)
  Result: "a4e-dev-preSignUp"
"""

import sys

sys.path.append('..')
import config

def returnName(type):
    return config.KEY + '-' + type

def functionRoleHandle(function_name):
    return config.HANDLE_FUNCTION_ROLE_PREFIX + function_name

def functionHandle(function_name):
    return config.HANDLE_FUNCTION_PREFIX + function_name
