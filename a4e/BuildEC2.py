"""
A4E EC2 and VPC Components Builder

This module creates the shared networking foundation for A4E: one VPC that every
agent unit receives from the resource registry, plus the per-agent security groups
created inside it.

Components Created:
- VPC (10.0.0.0/16) across up to 3 Availability Zones
- Public and private-with-egress /24 subnets
- VPC Flow Logs for all traffic into CloudWatch Logs
- Security group per agent, all outbound allowed, no inbound rules

Usage:
- buildVPC is called once, by the networking unit
- buildAgentSecurityGroup is called by each agent builder with the shared VPC
"""

import aws_cdk as cdk
import aws_cdk.aws_ec2 as ec2
import sys
sys.path.append('..')
import config

def buildVPC(self):
    vpc = ec2.Vpc(self, config.VPC_NAME,
        ip_addresses=ec2.IpAddresses.cidr(config.VPC_CIDR),
        max_azs=config.VPC_MAX_AZS,
        enable_dns_hostnames=True,
        enable_dns_support=True,
        subnet_configuration=[
            ec2.SubnetConfiguration(
                cidr_mask=config.VPC_SUBNET_CIDR_MASK,
                name="public",
                subnet_type=ec2.SubnetType.PUBLIC
            ),
            ec2.SubnetConfiguration(
                cidr_mask=config.VPC_SUBNET_CIDR_MASK,
                name="private-with-egress",
                subnet_type=ec2.SubnetType.PRIVATE_WITH_EGRESS
            )
        ],
        # Enable VPC Flow Logs
        flow_logs={
            config.VPC_FLOW_LOG_NAME: ec2.FlowLogOptions(
                destination=ec2.FlowLogDestination.to_cloud_watch_logs(),
                traffic_type=ec2.FlowLogTrafficType.ALL
            )
        }
    )

    # Delete the VPC when the stack is deleted
    vpc.apply_removal_policy(cdk.RemovalPolicy.DESTROY)
    return vpc

def buildAgentSecurityGroup(self, vpc, agent_name):
    sg = ec2.SecurityGroup(self, f"{agent_name}-agent-sg",
        vpc=vpc,
        description=f"{agent_name} agent workloads",
        allow_all_outbound=True
    )

    cdk.Tags.of(sg).add("Name", f"{config.KEY}-{agent_name}-agent-sg")
    return sg
