"""VPC, ECS cluster and Fargate task definition for the upload processing task."""
from aws_cdk import (
    aws_ec2 as ec2,
    aws_ecs as ecs,
    aws_logs as logs,
    RemovalPolicy
)
from constructs import Construct


class TaskCluster(Construct):
    """Creates the network, cluster and task definition the dispatcher launches into."""

    def __init__(
        self,
        scope: Construct,
        id: str,
        container_image: str,
        container_name: str,
        memory_limit_mib: int = 512,
        cpu: int = 256
    ):
        """Initialize the task cluster construct.

        Args:
            scope: CDK scope.
            id: Construct ID.
            container_image: Registry image for the task container.
            container_name: Name of the container within the task definition.
            memory_limit_mib: Task memory in MiB.
            cpu: Task CPU units.
        """
        super().__init__(scope, id)

        # No NAT gateways: tasks run in public subnets with a public IP
        self.vpc = ec2.Vpc(self, 'TaskVpc',
            max_azs=2,
            nat_gateways=0,
            subnet_configuration=[
                ec2.SubnetConfiguration(
                    name='public',
                    subnet_type=ec2.SubnetType.PUBLIC
                )
            ]
        )

        self.cluster = ecs.Cluster(self, 'EcsCluster',
            vpc=self.vpc,
            enable_fargate_capacity_providers=True
        )

        self.task_definition = ecs.FargateTaskDefinition(self, 'TaskDefinition',
            memory_limit_mib=memory_limit_mib,
            cpu=cpu
        )

        log_group = logs.LogGroup(self, 'TaskLogs',
            retention=logs.RetentionDays.TWO_WEEKS,
            removal_policy=RemovalPolicy.DESTROY
        )

        self.container = self.task_definition.add_container(container_name,
            container_name=container_name,
            image=ecs.ContainerImage.from_registry(container_image),
            logging=ecs.LogDrivers.aws_logs(
                stream_prefix=container_name,
                log_group=log_group
            )
        )

    @property
    def subnet_ids(self) -> list[str]:
        """Subnets of the cluster's own VPC that tasks are launched into."""
        return [subnet.subnet_id for subnet in self.vpc.public_subnets]
