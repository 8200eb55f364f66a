#!/usr/bin/env python3
"""CDK app entry point for the S3 upload dispatcher."""
import os
import aws_cdk as cdk

from dispatcher_stack import DispatcherStack


app = cdk.App()

# Get configuration from context or environment
container_image = app.node.try_get_context('container_image') or os.environ.get('CONTAINER_IMAGE', 'hello-world')
container_name = app.node.try_get_context('container_name') or os.environ.get('CONTAINER_NAME', 'task')
api_timeout = app.node.try_get_context('api_timeout_seconds') or os.environ.get('API_TIMEOUT_SECONDS', '60')

# Validate required configuration
if not container_image:
    raise ValueError("container_image is required. Set via context or CONTAINER_IMAGE environment variable.")
if not container_name:
    raise ValueError("container_name is required. Set via context or CONTAINER_NAME environment variable.")
if not str(api_timeout).isdigit() or int(api_timeout) <= 0:
    raise ValueError("api_timeout_seconds must be a positive integer. Set via context or API_TIMEOUT_SECONDS environment variable.")

DispatcherStack(app, 'DispatcherStack',
    container_image=container_image,
    container_name=container_name,
    api_timeout_seconds=int(api_timeout),
    env=cdk.Environment(
        account=os.environ.get('CDK_DEFAULT_ACCOUNT'),
        region=os.environ.get('CDK_DEFAULT_REGION')
    )
)

app.synth()
