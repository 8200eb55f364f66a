"""Dispatcher Lambda construct for launching tasks on S3 uploads."""
from aws_cdk import (
    aws_ecs as ecs,
    aws_iam as iam,
    aws_lambda as lambda_,
    aws_s3 as s3,
    aws_s3_notifications as s3n,
    Duration,
    IgnoreMode
)
from constructs import Construct


class DispatcherLambda(Construct):
    """Creates the Lambda that runs one Fargate task per uploaded object."""

    def __init__(
        self,
        scope: Construct,
        id: str,
        bucket: s3.IBucket,
        cluster: ecs.ICluster,
        task_definition: ecs.TaskDefinition,
        container_name: str,
        subnet_ids: list[str],
        api_timeout_seconds: int = 60
    ):
        """Initialize the Dispatcher Lambda construct.

        Args:
            scope: CDK scope.
            id: Construct ID.
            bucket: Bucket whose object-created events trigger dispatch.
            cluster: ECS cluster to run tasks on.
            task_definition: Task definition to launch.
            container_name: Container that receives the object key override.
            subnet_ids: Subnets for the task's network configuration.
            api_timeout_seconds: Bound on the RunTask call.
        """
        super().__init__(scope, id)

        # Lambda function
        self.function = lambda_.Function(self, 'DispatcherFunction',
            runtime=lambda_.Runtime.PYTHON_3_12,
            handler='dispatch_lambda.handler.handler',
            code=lambda_.Code.from_asset('..',
                # Bundle only the dispatch_lambda package, imported by package name
                ignore_mode=IgnoreMode.GIT,
                exclude=['/*', '!/dispatch_lambda/', '__pycache__/', '*.pyc']
            ),
            timeout=Duration.seconds(api_timeout_seconds + 30),
            memory_size=128,
            environment={
                'CLUSTER_ARN': cluster.cluster_arn,
                'TASK_DEFINITION_ARN': task_definition.task_definition_arn,
                'CONTAINER_NAME': container_name,
                'SUBNETS': ','.join(subnet_ids),
                'S3_BUCKET': bucket.bucket_name,
                'API_TIMEOUT_SECONDS': str(api_timeout_seconds)
            }
        )

        # Grant permission to run exactly this task definition on exactly this cluster
        self.function.add_to_role_policy(iam.PolicyStatement(
            actions=['ecs:RunTask'],
            resources=[task_definition.task_definition_arn],
            conditions={
                'ArnEquals': {
                    'ecs:cluster': cluster.cluster_arn
                }
            }
        ))

        # Grant permissions to pass the task's execution and runtime roles
        self.function.add_to_role_policy(iam.PolicyStatement(
            actions=['iam:PassRole'],
            resources=[task_definition.obtain_execution_role().role_arn]
        ))
        self.function.add_to_role_policy(iam.PolicyStatement(
            actions=['iam:PassRole'],
            resources=[task_definition.task_role.role_arn]
        ))

        # S3 event source
        bucket.add_event_notification(
            s3.EventType.OBJECT_CREATED,
            s3n.LambdaDestination(self.function)
        )
