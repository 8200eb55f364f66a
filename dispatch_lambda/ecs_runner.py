"""ECS task runner for launching the upload processing task."""
from dataclasses import dataclass
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    ReadTimeoutError,
)

from dispatch_lambda.errors import ErrorKind, classify_error_code

STARTED_BY = 's3-dispatcher'


@dataclass(frozen=True)
class TaskLaunchResult:
    """Outcome of one dispatch: task ARNs on success, a classified error otherwise."""

    bucket: str
    key: str
    task_arns: tuple[str, ...] = ()
    kind: Optional[ErrorKind] = None
    error_code: Optional[str] = None
    message: str = ''

    @property
    def outcome(self) -> str:
        if self.kind is None:
            return 'SUCCEEDED'
        if self.kind is ErrorKind.EMPTY_LAUNCH:
            return 'EMPTY_LAUNCH'
        return 'FAILED'

    @property
    def succeeded(self) -> bool:
        """RunTask accepted the request, even if it started no tasks."""
        return self.outcome != 'FAILED'

    def to_record(self) -> dict:
        """Structured log record for this outcome."""
        return {
            'outcome': self.outcome,
            'kind': self.kind.value if self.kind else None,
            'errorCode': self.error_code,
            'message': self.message,
            'bucket': self.bucket,
            'key': self.key,
            'taskArns': list(self.task_arns),
        }


def create_ecs_client(config):
    """Create the ECS client used for every dispatch in this process.

    SDK retries are disabled so each invocation submits at most once. The
    connect and read timeouts together never exceed the configured API timeout.

    Args:
        config: LaunchConfiguration supplying api_timeout_seconds.

    Returns:
        The boto3 ECS client.
    """
    return boto3.client('ecs', config=Config(
        connect_timeout=config.connect_timeout_seconds,
        read_timeout=config.read_timeout_seconds,
        retries={'total_max_attempts': 1},
    ))


def build_run_task_request(config, event) -> dict:
    """Build the RunTask keyword arguments for an uploaded object.

    Args:
        config: LaunchConfiguration with cluster, task definition and subnets.
        event: DispatchEvent identifying the uploaded object.

    Returns:
        dict: Keyword arguments for ecs.run_task.
    """
    return {
        'cluster': config.cluster_arn,
        'taskDefinition': config.task_definition_arn,
        'launchType': 'FARGATE',
        'count': 1,
        'startedBy': STARTED_BY,
        'networkConfiguration': {
            'awsvpcConfiguration': {
                'subnets': list(config.subnets),
                # No NAT gateway: the task needs a public IP to pull its image
                'assignPublicIp': 'ENABLED'
            }
        },
        'overrides': {
            'containerOverrides': [{
                'name': config.container_name,
                'environment': [
                    {'name': 'S3_BUCKET', 'value': event.bucket},
                    {'name': 'S3_KEY', 'value': event.key}
                ]
            }]
        }
    }


def _launch_failures(response: dict) -> str:
    failures = response.get('failures', [])
    if not failures:
        return 'RunTask returned no tasks and no failures'
    return '; '.join(
        f"{f.get('arn', 'unknown')}: {f.get('reason', 'unknown')}"
        + (f" ({f['detail']})" if f.get('detail') else '')
        for f in failures
    )


def dispatch(event, config, client) -> TaskLaunchResult:
    """Launch the configured Fargate task for one uploaded object.

    Exactly one RunTask call is made. Errors are classified and returned,
    never retried here; redelivery is left to the notification source.

    Args:
        event: DispatchEvent identifying the uploaded object.
        config: LaunchConfiguration to build the request from.
        client: boto3 ECS client.

    Returns:
        TaskLaunchResult: The classified outcome.
    """
    request = build_run_task_request(config, event)

    try:
        response = client.run_task(**request)
    except ClientError as e:
        error = e.response.get('Error', {})
        code = error.get('Code', '')
        return TaskLaunchResult(
            bucket=event.bucket,
            key=event.key,
            kind=classify_error_code(code),
            error_code=code,
            message=error.get('Message') or str(e),
        )
    except (ConnectTimeoutError, ReadTimeoutError) as e:
        return TaskLaunchResult(
            bucket=event.bucket,
            key=event.key,
            kind=ErrorKind.TIMEOUT,
            error_code=type(e).__name__,
            message=str(e),
        )
    except BotoCoreError as e:
        return TaskLaunchResult(
            bucket=event.bucket,
            key=event.key,
            kind=ErrorKind.UNCLASSIFIED,
            error_code=type(e).__name__,
            message=str(e),
        )

    task_arns = tuple(task['taskArn'] for task in response.get('tasks', []))
    if not task_arns:
        return TaskLaunchResult(
            bucket=event.bucket,
            key=event.key,
            kind=ErrorKind.EMPTY_LAUNCH,
            message=_launch_failures(response),
        )

    return TaskLaunchResult(bucket=event.bucket, key=event.key, task_arns=task_arns)
