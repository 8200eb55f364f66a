"""Main CDK stack for the S3 upload dispatcher."""
from aws_cdk import Stack, RemovalPolicy
from aws_cdk import aws_s3 as s3
from constructs import Construct

from launch_constructs import TaskCluster, DispatcherLambda


class DispatcherStack(Stack):
    """CDK stack that runs a Fargate task whenever an object lands in the upload bucket."""

    def __init__(
        self,
        scope: Construct,
        id: str,
        container_image: str,
        container_name: str,
        api_timeout_seconds: int,
        **kwargs
    ):
        """Initialize the dispatcher stack.

        Args:
            scope: CDK scope.
            id: Stack ID.
            container_image: Registry image for the launched task.
            container_name: Name of the task's container.
            api_timeout_seconds: Bound on the dispatcher's RunTask call.
            **kwargs: Additional stack properties.
        """
        super().__init__(scope, id, **kwargs)

        # 1. Network, cluster and task definition
        task_cluster = TaskCluster(self, 'TaskCluster',
            container_image=container_image,
            container_name=container_name
        )

        # 2. Upload bucket
        self.bucket = s3.Bucket(self, 'UploadBucket',
            block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
            enforce_ssl=True,
            removal_policy=RemovalPolicy.RETAIN
        )

        # 3. Dispatcher Lambda subscribed to the bucket
        DispatcherLambda(self, 'Dispatcher',
            bucket=self.bucket,
            cluster=task_cluster.cluster,
            task_definition=task_cluster.task_definition,
            container_name=container_name,
            subnet_ids=task_cluster.subnet_ids,
            api_timeout_seconds=api_timeout_seconds
        )
