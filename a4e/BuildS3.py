"""
A4E S3 Storage Components Builder

This module creates the application's storage bucket and the upload of the
sample data that the agents are built on top of.

Key Features:
- Server-side encryption with S3-managed keys
- Versioning enabled for data protection
- Block public access and SSL enforcement
- Lifecycle transition to infrequent access
- Access logging to a dedicated bucket
- Auto-delete on stack removal for development environments

Data Deployment:
- deploySampleData uploads config.SAMPLE_DATA_PATH under config.SAMPLE_DATA_PREFIX.
  It is the producer task of the asset-upload readiness gate, so no agent unit
  deploys before the upload has finished.
"""

import os

import aws_cdk as cdk
import aws_cdk.aws_s3 as s3
import aws_cdk.aws_s3_deployment as s3deploy
import config

def deploySampleData(self, bucket, sourceDir=None):
    sourceDir = sourceDir or config.SAMPLE_DATA_PATH
    if not os.path.isdir(sourceDir):
        raise FileNotFoundError(f"sample data directory not found: {sourceDir}")

    return s3deploy.BucketDeployment(self, 'SampleDataDeployment',
        sources=[s3deploy.Source.asset(sourceDir)],
        destination_key_prefix=config.SAMPLE_DATA_PREFIX,
        destination_bucket=bucket,
        prune=False
    )

def buildS3Bucket(self):
    lifecycleRaw = s3.LifecycleRule(
        enabled=True,
        id=config.KEY + '-' + config.LCDAYS_POLICY,
        transitions=[
            s3.Transition(storage_class=s3.StorageClass.INFREQUENT_ACCESS,
                transition_after=cdk.Duration.days(config.LCDAYS)
            )
        ]
    )

    access_logs_bucket = s3.Bucket(self, f"{config.BUCKET_NAME_BASE}-access-logs", **_privateBucketProps())

    # agents read sample-data/, Athena writes athena_results/
    bucket = s3.Bucket(self, config.BUCKET_NAME_BASE,
        versioned=True,
        lifecycle_rules=[lifecycleRaw],
        server_access_logs_bucket=access_logs_bucket,
        server_access_logs_prefix=f"{config.BUCKET_NAME_BASE}-access-logs/",
        **_privateBucketProps()
    )

    return bucket

def _privateBucketProps():
    return dict(
        public_read_access=False,
        block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
        encryption=s3.BucketEncryption.S3_MANAGED,
        enforce_ssl=True,
        auto_delete_objects=True,
        removal_policy=cdk.RemovalPolicy.DESTROY
    )
