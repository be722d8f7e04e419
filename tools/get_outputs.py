#!/usr/bin/env python3
"""
A4E Stack Outputs Tool

Reads the outputs of the deployed A4E root stack from CloudFormation and writes
them as JSON, so the front end and test scripts can pick up the GraphQL API id and
the agent/alias ids without opening the console.

Outputs Read:
- api_id: AppSync GraphQL API id
- root_stack_name: name of the root stack
- <agent>AgentId / <agent>AgentAliasId for maintenance, regulatory,
  petrophysics and production

Usage:
    python tools/get_outputs.py                          # print outputs of A4EBackend
    python tools/get_outputs.py --stack-name MyStack     # another root stack
    python tools/get_outputs.py --output outputs.json    # write to a file
    python tools/get_outputs.py --include-ssm            # add the production SSM parameters
"""

import argparse
import json
import os
import sys

import boto3

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
import config

def get_stack_outputs(stack_name, cfn=None):
    """Return the root stack outputs as a key -> value dict

    CloudFormation strips non-alphanumerics from output ids (api_id -> apiid), so
    the key is read back from the output description where it is present.
    """
    cfn = cfn or boto3.client('cloudformation')
    response = cfn.describe_stacks(StackName=stack_name)
    stacks = response.get('Stacks', [])
    if not stacks:
        raise ValueError(f"stack {stack_name} not found")
    return {
        output.get('Description') or output['OutputKey']: output['OutputValue']
        for output in stacks[0].get('Outputs', [])
    }

def get_ssm_parameters(names, ssm=None):
    """Return the values of the given SSM parameters, skipping missing ones"""
    ssm = ssm or boto3.client('ssm')
    response = ssm.get_parameters(Names=names)
    return {parameter['Name']: parameter['Value'] for parameter in response.get('Parameters', [])}

def main(argv=None):
    parser = argparse.ArgumentParser(description='Print the outputs of the A4E root stack as JSON')
    parser.add_argument('--stack-name', default=config.STACK_NAME, help='Root stack name')
    parser.add_argument('--output', help='Write the JSON to this file instead of stdout')
    parser.add_argument('--include-ssm', action='store_true', help='Include the production SSM parameters')

    args = parser.parse_args(argv)

    outputs = get_stack_outputs(args.stack_name)
    if args.include_ssm:
        outputs.update(get_ssm_parameters([
            config.KEY + '-' + config.SSM_PRODUCTION_DATABASE,
            config.KEY + '-' + config.SSM_PRODUCTION_WORKGROUP,
        ]))

    document = json.dumps(outputs, indent=2, sort_keys=True)
    if args.output:
        with open(args.output, 'w') as f:
            f.write(document + '\n')
        print(f"Wrote {len(outputs)} outputs to {args.output}")
    else:
        print(document)
    return outputs

if __name__ == "__main__":
    main()
