"""Pytest configuration and fixtures."""
import sys
import os
import pytest

# Add the repository root to Python path so the Lambda package imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from dispatch_lambda.config_loader import LaunchConfiguration, invalidate_cache
from dispatch_lambda.s3_events import DispatchEvent


@pytest.fixture(autouse=True)
def reset_environment():
    """Reset environment variables and the config cache between tests."""
    original_env = os.environ.copy()
    invalidate_cache()
    yield
    invalidate_cache()
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def launch_environment():
    """Return environment variables describing a valid launch configuration."""
    return {
        'CLUSTER_ARN': 'arn:aws:ecs:us-east-1:123456789012:cluster/uploads-cluster',
        'TASK_DEFINITION_ARN': 'arn:aws:ecs:us-east-1:123456789012:task-definition/processor:3',
        'CONTAINER_NAME': 'processor',
        'SUBNETS': 'subnet-a,subnet-b',
        'S3_BUCKET': 'uploads',
    }


@pytest.fixture
def launch_config():
    """Return the configuration from the worked example."""
    return LaunchConfiguration(
        cluster_arn='C1',
        task_definition_arn='T1',
        container_name='processor',
        subnets=('subnet-a', 'subnet-b'),
        bucket='uploads',
    )


@pytest.fixture
def dispatch_event():
    """Return an upload of in.csv to the uploads bucket."""
    return DispatchEvent(
        bucket='uploads',
        key='in.csv',
        event_time='2024-01-15T10:00:00.000Z',
        event_name='ObjectCreated:Put',
    )


@pytest.fixture
def make_s3_record():
    """Return a builder for single S3 notification records."""
    def _make(bucket, key, event_name='ObjectCreated:Put'):
        return {
            'eventVersion': '2.1',
            'eventSource': 'aws:s3',
            'awsRegion': 'us-east-1',
            'eventTime': '2024-01-15T10:00:00.000Z',
            'eventName': event_name,
            's3': {
                's3SchemaVersion': '1.0',
                'configurationId': 'dispatch',
                'bucket': {
                    'name': bucket,
                    'arn': f'arn:aws:s3:::{bucket}'
                },
                'object': {
                    'key': key,
                    'size': 1024,
                    'sequencer': '0055AED6DCD90281E5'
                }
            }
        }
    return _make


@pytest.fixture
def s3_event(make_s3_record):
    """Return a sample S3 ObjectCreated notification."""
    return {'Records': [make_s3_record('uploads', 'in.csv')]}
