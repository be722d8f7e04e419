#!/usr/bin/env python3
"""
Agents for Energy (A4E) CDK Application

Entry point for deploying the A4E backend: a single root stack whose nested
units are composed by a4e.orchestrator.Composition.

Architecture Overview:
1. Foundation units: Cognito user pool, AppSync GraphQL API with Bedrock HTTP data
   sources, storage bucket, function execution roles, shared VPC
2. Sample data upload gate: no agent deploys before the upload into the bucket
3. Agent units: maintenance, regulatory, petrophysics and production Bedrock agents
4. Configurator: Athena query resolver, Cognito pre sign-up trigger, SSM parameters

Environment Configuration:
- Account: CDK_DEFAULT_ACCOUNT
- Region: CDK_DEFAULT_REGION (defaults to us-east-1)
- Environment name: A4E_ENVIRONMENT (defaults to dev)
- Stack name: A4E_STACK_NAME (defaults to A4EBackend)
- Allowed sign-up email domains: A4E_ALLOWED_EMAIL_DOMAINS (comma separated)

Security and Compliance:
- CDK NAG AwsSolutionsChecks on the whole app
- Per-unit suppressions from config.NAG_SUPPRESSIONS

Usage:
- Synthesize templates: cdk synth
- Deploy: cdk deploy
- Read outputs after deploy: python tools/get_outputs.py
"""

import logging

import aws_cdk as cdk

from cdk_nag import AwsSolutionsChecks

import config
from a4e.a4e_stack import A4EBackendStack
from a4e.errors import CompositionError
from a4e.units import UnitState

logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')

app = cdk.App()

# Define environment
env = cdk.Environment(
    account=config.ACCOUNT,
    region=config.REGION
)

backend_stack = A4EBackendStack(app, config.STACK_NAME, env=env, description='Agents for Energy (A4E) backend')

if backend_stack.root_unit.state is UnitState.FAILED:
    failed = [unit.name for unit in backend_stack.composition.units if unit.state is UnitState.FAILED]
    raise CompositionError(f"{config.STACK_NAME} did not compose: {', '.join(failed)} failed")

cdk.Aspects.of(app).add(AwsSolutionsChecks())
app.synth()
