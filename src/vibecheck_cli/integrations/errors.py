"""Error types raised while talking to the scoring service."""

from __future__ import annotations

SITE_URL = "https://vibescheck.io"


class VibeCheckError(Exception):
	"""Base class for every failure surfaced to the CLI.

	``hint`` carries an optional remediation line shown under the message.
	"""

	hint: str | None = None

	def __init__(self, message: str, hint: str | None = None) -> None:
		super().__init__(message)
		if hint is not None:
			self.hint = hint

	@property
	def message(self) -> str:
		return str(self)


class NetworkError(VibeCheckError):
	"""Raised when no response reached the client."""

	hint = "Check your internet connection or verify VIBECHECK_URL."

	def __init__(self, reason: str | None = None) -> None:
		msg = "Network error: Unable to connect to the vibecheck API"
		if reason:
			msg = f"{msg} ({reason})"
		super().__init__(msg)


class AuthenticationError(VibeCheckError):
	"""Raised for a missing key or a 401/403 response."""

	hint = f"Get or verify your API key at {SITE_URL}"

	def __init__(self, message: str = "Unauthorized: Invalid or missing API key"
	             ) -> None:
		super().__init__(message)


class PaymentRequiredError(VibeCheckError):
	"""Raised on a 402 response."""

	hint = f"Visit {SITE_URL} to add credits"

	def __init__(
	    self,
	    message: str = "Payment required: Your credits are running low",
	) -> None:
		super().__init__(message)


class NotFoundError(VibeCheckError):
	"""Raised on a 404 response."""

	def __init__(
	    self,
	    message: str = "Not Found: The requested resource does not exist",
	    hint: str | None = None,
	) -> None:
		super().__init__(message, hint)


class ConflictError(VibeCheckError):
	"""Raised on a 409 response, e.g. cancelling a run that already started."""


class ServerError(VibeCheckError):
	"""Raised on a 5xx response."""

	def __init__(
	    self,
	    message: str = "Server error: The vibecheck API encountered an error",
	) -> None:
		super().__init__(message)


class ApiError(VibeCheckError):
	"""Raised for any other non-2xx status or an ``error`` in a 2xx body."""

	def __init__(self, message: str, status_code: int | None = None) -> None:
		super().__init__(f"API Error: {message}")
		self.status_code = status_code


class JobStateError(VibeCheckError):
	"""Raised when a job moves backwards or its results shrink."""


class JobFailedError(VibeCheckError):
	"""Raised when a job ends in failed, error or cancelled."""

	def __init__(self, message: str, status: str) -> None:
		super().__init__(message)
		self.status = status


class SuiteFileError(VibeCheckError):
	"""Raised when an eval suite file cannot be read or is malformed."""


__all__ = [
    "SITE_URL",
    "VibeCheckError",
    "NetworkError",
    "AuthenticationError",
    "PaymentRequiredError",
    "NotFoundError",
    "ConflictError",
    "ServerError",
    "ApiError",
    "JobStateError",
    "JobFailedError",
    "SuiteFileError",
]
