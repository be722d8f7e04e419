"""
Test configuration for A4E tests

This file puts the project root, the Lambda handler directories and the tools on
sys.path, and provides the fixtures shared by the handler and tool tests.
"""

import os
import sys
import pytest

# Add project paths to sys.path for imports
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)
sys.path.insert(0, os.path.join(project_root, 'lambda', 'preSignUp'))
sys.path.insert(0, os.path.join(project_root, 'tools'))

# Common test fixtures
@pytest.fixture
def mock_aws_credentials():
    """Mock AWS credentials for testing"""
    env_vars = {
        'AWS_ACCESS_KEY_ID': 'testing',
        'AWS_SECRET_ACCESS_KEY': 'testing',
        'AWS_SECURITY_TOKEN': 'testing',
        'AWS_SESSION_TOKEN': 'testing',
        'AWS_DEFAULT_REGION': 'us-east-1',
    }
    saved = {key: os.environ.get(key) for key in env_vars}
    os.environ.update(env_vars)

    yield env_vars

    # Cleanup
    for key, value in saved.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value

@pytest.fixture
def allowed_email_domains():
    """Restrict sign-ups to two domains for the pre sign-up handler"""
    os.environ['ALLOWED_EMAIL_DOMAINS'] = 'example.com, Energy.example.org'
    yield ['example.com', 'energy.example.org']
    os.environ.pop('ALLOWED_EMAIL_DOMAINS', None)

def sign_up_event(email):
    """Cognito pre sign-up trigger event"""
    return {
        'version': '1',
        'triggerSource': 'PreSignUp_SignUp',
        'userName': 'test-user',
        'request': {'userAttributes': {'email': email}},
        'response': {'autoConfirmUser': False, 'autoVerifyEmail': False},
    }

@pytest.fixture
def make_sign_up_event():
    return sign_up_event
