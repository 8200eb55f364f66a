"""CDK constructs for the S3 upload dispatcher."""
from .task_cluster import TaskCluster
from .dispatcher_lambda import DispatcherLambda

__all__ = [
    'TaskCluster',
    'DispatcherLambda',
]
