"""External service integrations.

Key modules:
    - api: Async HTTP client for the vibecheck API
    - errors: Error taxonomy surfaced to the CLI
"""

from vibecheck_cli.integrations.errors import (
    ApiError,
    AuthenticationError,
    ConflictError,
    JobFailedError,
    JobStateError,
    NetworkError,
    NotFoundError,
    PaymentRequiredError,
    ServerError,
    SuiteFileError,
    VibeCheckError,
)
from vibecheck_cli.integrations.api import ApiClient, DEFAULT_UA

__all__ = [
    # api
    "ApiClient",
    "DEFAULT_UA",
    # errors
    "ApiError",
    "AuthenticationError",
    "ConflictError",
    "JobFailedError",
    "JobStateError",
    "NetworkError",
    "NotFoundError",
    "PaymentRequiredError",
    "ServerError",
    "SuiteFileError",
    "VibeCheckError",
]
