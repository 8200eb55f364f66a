"""Launch configuration loaded from the environment, cached for warm starts."""
import os
from dataclasses import dataclass

from dispatch_lambda.errors import ConfigurationError

DEFAULT_API_TIMEOUT_SECONDS = 60
MAX_CONNECT_TIMEOUT_SECONDS = 10

REQUIRED_VARIABLES = (
    'CLUSTER_ARN',
    'TASK_DEFINITION_ARN',
    'CONTAINER_NAME',
    'SUBNETS',
    'S3_BUCKET',
)

# Module-level cache - persists across warm invocations
_cached_config = None


@dataclass(frozen=True)
class LaunchConfiguration:
    """Static values every dispatch is built from."""

    cluster_arn: str
    task_definition_arn: str
    container_name: str
    subnets: tuple[str, ...]
    bucket: str
    api_timeout_seconds: int = DEFAULT_API_TIMEOUT_SECONDS

    def __post_init__(self):
        for field in ('cluster_arn', 'task_definition_arn', 'container_name', 'bucket'):
            if not getattr(self, field):
                raise ConfigurationError(f"{field} must not be empty")
        if not self.subnets:
            raise ConfigurationError("at least one subnet is required")
        for subnet in self.subnets:
            if not subnet.startswith('subnet-'):
                raise ConfigurationError(f"invalid subnet id: {subnet!r}")
        if self.api_timeout_seconds <= 0:
            raise ConfigurationError("api_timeout_seconds must be positive")

    @property
    def connect_timeout_seconds(self) -> float:
        return min(MAX_CONNECT_TIMEOUT_SECONDS, self.api_timeout_seconds / 2)

    @property
    def read_timeout_seconds(self) -> float:
        """Whatever the connect phase leaves of the API timeout."""
        return self.api_timeout_seconds - self.connect_timeout_seconds


def parse_subnets(value: str) -> tuple:
    """Split a comma-separated subnet list into an ordered, de-duplicated tuple.

    Args:
        value: Raw SUBNETS value, e.g. 'subnet-a, subnet-b'.

    Returns:
        tuple: Subnet ids in their original order.
    """
    subnets = [s.strip() for s in value.split(',') if s.strip()]
    return tuple(dict.fromkeys(subnets))


def config_from_environ(environ) -> LaunchConfiguration:
    """Build and validate a LaunchConfiguration from an environment mapping.

    Raises:
        ConfigurationError: If a variable is missing or a value is invalid.
    """
    missing = [name for name in REQUIRED_VARIABLES if not environ.get(name, '').strip()]
    if missing:
        raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

    raw_timeout = environ.get('API_TIMEOUT_SECONDS', str(DEFAULT_API_TIMEOUT_SECONDS))
    try:
        api_timeout = int(raw_timeout)
    except ValueError:
        raise ConfigurationError(f"API_TIMEOUT_SECONDS must be an integer, got {raw_timeout!r}")

    return LaunchConfiguration(
        cluster_arn=environ['CLUSTER_ARN'].strip(),
        task_definition_arn=environ['TASK_DEFINITION_ARN'].strip(),
        container_name=environ['CONTAINER_NAME'].strip(),
        subnets=parse_subnets(environ['SUBNETS']),
        bucket=environ['S3_BUCKET'].strip(),
        api_timeout_seconds=api_timeout,
    )


def load_config() -> LaunchConfiguration:
    """Load the launch configuration at cold start, cache for warm starts.

    Returns:
        LaunchConfiguration: The validated configuration.

    Raises:
        ConfigurationError: If the environment does not describe a usable configuration.
    """
    global _cached_config

    if _cached_config is not None:
        return _cached_config

    _cached_config = config_from_environ(os.environ)
    print(f"Loaded launch configuration for cluster {_cached_config.cluster_arn} "
          f"({len(_cached_config.subnets)} subnets)")
    return _cached_config


def invalidate_cache():
    """Invalidate the cached config. Useful for testing."""
    global _cached_config
    _cached_config = None
