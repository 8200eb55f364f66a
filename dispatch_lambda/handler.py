"""Dispatch Lambda handler for S3 upload notifications."""
import json

from dispatch_lambda.config_loader import load_config
from dispatch_lambda.ecs_runner import TaskLaunchResult, create_ecs_client, dispatch
from dispatch_lambda.errors import DispatchFailedError, ErrorKind
from dispatch_lambda.s3_events import is_test_event, parse_s3_event

# Load config at cold start (module level); a bad environment fails the import
config = load_config()
ecs = create_ecs_client(config)

# Time kept back after the last RunTask call to log its outcome
DEADLINE_MARGIN_SECONDS = 5


def _has_time_for_dispatch(context) -> bool:
    """Whether a full RunTask call still fits before Lambda stops the invocation."""
    if context is None:
        return True
    remaining = context.get_remaining_time_in_millis() / 1000
    return remaining >= config.api_timeout_seconds + DEADLINE_MARGIN_SECONDS


def handler(event, context):
    """Launch one Fargate task per uploaded object in the S3 notification.

    Args:
        event: S3 event notification.
        context: Lambda context object.

    Returns:
        dict: Status code and one outcome record per dispatched object.

    Raises:
        DispatchFailedError: If any dispatch failed in a way that redelivery could fix.
    """
    if is_test_event(event):
        print("Received s3:TestEvent, nothing to dispatch")
        return {'statusCode': 200, 'results': []}

    results = []
    for dispatch_event in parse_s3_event(event):
        if dispatch_event.bucket != config.bucket:
            print(f"Object s3://{dispatch_event.bucket}/{dispatch_event.key} "
                  f"is outside configured bucket {config.bucket}")

        if _has_time_for_dispatch(context):
            result = dispatch(dispatch_event, config, ecs)
        else:
            result = TaskLaunchResult(
                bucket=dispatch_event.bucket,
                key=dispatch_event.key,
                kind=ErrorKind.TIMEOUT,
                message='Not submitted: invocation deadline is closer than the API timeout',
            )
        print(json.dumps(result.to_record()))
        results.append(result)

    # Redelivery replays every record, so records that already launched
    # launch again; repeated dispatch is not deduplicated.
    if any(not r.succeeded and r.kind.retryable for r in results):
        raise DispatchFailedError(results)  # Let Lambda retry the notification

    # EmptyLaunch counts as succeeded: an anomaly, not a failure
    status = 200 if all(r.succeeded for r in results) else 500
    return {'statusCode': status, 'results': [r.to_record() for r in results]}
