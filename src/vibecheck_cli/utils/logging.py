"""
Logging configuration module.

Provides centralized logging setup for the application with
configurable log levels, consistent formatting, and API key masking.
"""

from __future__ import annotations

import logging
import re

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Bearer tokens, e.g. "Authorization: Bearer vc_live_abc123"
_BEARER_RE = re.compile(r"(Bearer\s+)[A-Za-z0-9._~+/=-]+", re.IGNORECASE)
# Key/value renderings, e.g. "X-API-KEY: abc", "api_key=abc", "'VIBECHECK_API_KEY': 'abc'"
_KEY_VALUE_RE = re.compile(
    r"((?:x-api-key|api[_-]?key|vibecheck_api_key)['\"]?\s*[:=]\s*['\"]?)"
    r"[^\s'\",}]+",
    re.IGNORECASE,
)


def sanitize_text(text: str) -> str:
	"""Mask API keys in text.

	Replaces bearer tokens and ``api_key=``/``X-API-KEY:`` values
	with ``***``.

	Parameters:
		text: Raw text that may contain credentials.

	Returns:
		Text with credentials replaced by ``***``.
	"""
	text = _BEARER_RE.sub(r"\1***", text)
	return _KEY_VALUE_RE.sub(r"\1***", text)


def mask_key(key: str | None, keep: int = 8) -> str:
	"""Show only the first ``keep`` characters of a key."""
	if not key:
		return "not set"
	return f"{key[:keep]}..."


class ApiKeyFilter(logging.Filter):
	"""Logging filter that redacts credentials from log records.

	Applied to the root logger so every handler benefits from
	key masking without call-site awareness.
	"""

	def filter(self, record: logging.LogRecord) -> bool:
		"""Sanitize the log record message and args."""
		if isinstance(record.msg, str):
			record.msg = sanitize_text(record.msg)
		if record.args:
			if isinstance(record.args, dict):
				record.args = {
				    k: sanitize_text(v) if isinstance(v, str) else v
				    for k, v in record.args.items()
				}
			elif isinstance(record.args, tuple):
				record.args = tuple(
				    sanitize_text(a) if isinstance(a, str) else a
				    for a in record.args)
		return True


def configure_logging(level: str = "warning") -> None:
	"""
	Configure basic logging with level, format, and key sanitization.

	Installs an ``ApiKeyFilter`` on the root logger and on each
	root handler so API keys never reach log output.

	Parameters:
		level: Log level string (e.g., "info", "debug", "warning").
	"""
	lvl = logging._nameToLevel.get(level.upper(), logging.WARNING)
	logging.basicConfig(level=lvl, format=LOG_FORMAT)
	root = logging.getLogger()
	root.setLevel(lvl)
	# Avoid adding duplicate filters on repeated calls
	if not any(isinstance(f, ApiKeyFilter) for f in root.filters):
		root.addFilter(ApiKeyFilter())
	for handler in root.handlers:
		if not any(isinstance(f, ApiKeyFilter) for f in handler.filters):
			handler.addFilter(ApiKeyFilter())


def get_logger(name: str) -> logging.Logger:
	"""
	Get a logger for the specified module.

	Parameters:
		name: The logger name, typically __name__.

	Returns:
		Configured logger instance.
	"""
	return logging.getLogger(name)


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_key",
    "sanitize_text",
    "ApiKeyFilter",
]
