"""Error kinds for ECS RunTask failures and configuration errors."""
from enum import Enum


class ConfigurationError(ValueError):
    """Raised at cold start when the launch configuration is unusable."""


class DispatchFailedError(Exception):
    """Raised by the handler so Lambda redelivers the S3 notification.

    Args:
        results: The TaskLaunchResult objects of the failed invocation.
    """

    def __init__(self, results):
        self.results = results
        failed = [r for r in results if not r.succeeded]
        kinds = ', '.join(r.kind.value for r in failed)
        super().__init__(f"{len(failed)} of {len(results)} dispatches failed: {kinds}")


class ErrorKind(Enum):
    """Classified outcome of a failed task launch."""

    SERVER_FAULT = 'ServerFault'
    CLIENT_FAULT = 'ClientFault'
    INVALID_PARAMETER = 'InvalidParameter'
    CLUSTER_NOT_FOUND = 'ClusterNotFound'
    UNSUPPORTED_FEATURE = 'UnsupportedFeature'
    PLATFORM_UNKNOWN = 'PlatformUnknown'
    PLATFORM_INCOMPATIBLE = 'PlatformIncompatible'
    ACCESS_DENIED = 'AccessDenied'
    BLOCKED = 'Blocked'
    TIMEOUT = 'Timeout'
    EMPTY_LAUNCH = 'EmptyLaunch'
    UNCLASSIFIED = 'Unclassified'

    @property
    def retryable(self) -> bool:
        """Whether redelivering the same notification could succeed."""
        return self in _RETRYABLE


_RETRYABLE = frozenset({
    ErrorKind.SERVER_FAULT,
    ErrorKind.TIMEOUT,
    ErrorKind.UNCLASSIFIED,
})

# ECS API error codes, as returned in ClientError.response['Error']['Code']
_ERROR_CODES = {
    'ServerException': ErrorKind.SERVER_FAULT,
    'ClientException': ErrorKind.CLIENT_FAULT,
    'InvalidParameterException': ErrorKind.INVALID_PARAMETER,
    'ClusterNotFoundException': ErrorKind.CLUSTER_NOT_FOUND,
    'UnsupportedFeatureException': ErrorKind.UNSUPPORTED_FEATURE,
    'PlatformUnknownException': ErrorKind.PLATFORM_UNKNOWN,
    'PlatformTaskDefinitionIncompatibilityException': ErrorKind.PLATFORM_INCOMPATIBLE,
    'AccessDeniedException': ErrorKind.ACCESS_DENIED,
    'BlockedException': ErrorKind.BLOCKED,
}


def classify_error_code(code: str) -> ErrorKind:
    """Map a raw ECS error code to an ErrorKind.

    Args:
        code: Error code from the ECS API response.

    Returns:
        ErrorKind: The mapped kind, or UNCLASSIFIED for unknown codes.
    """
    return _ERROR_CODES.get(code, ErrorKind.UNCLASSIFIED)
