"""Tests for the logging module: API key sanitization."""

from __future__ import annotations

import logging

from vibecheck_cli.utils.logging import (
	ApiKeyFilter,
	configure_logging,
	mask_key,
	sanitize_text,
)


class TestSanitizeText:
	"""Tests for sanitize_text()."""

	def test_masks_bearer_token(self) -> None:
		"""Bearer token in an Authorization header is replaced with ***."""
		text = "headers: Authorization: Bearer vc_live_abc123"
		result = sanitize_text(text)
		assert "vc_live_abc123" not in result
		assert "Bearer ***" in result

	def test_masks_key_value_pairs(self) -> None:
		"""api_key=, X-API-KEY: and dict renderings are masked."""
		for text in (
			"api_key=secret1 sent",
			"X-API-KEY: secret1",
			"{'VIBECHECK_API_KEY': 'secret1', 'url': 'x'}",
		):
			result = sanitize_text(text)
			assert "secret1" not in result
			assert "***" in result

	def test_no_change_without_key(self) -> None:
		"""Plain text passes through unchanged."""
		text = "GET http://localhost:3000/api/runs -> 200"
		assert sanitize_text(text) == text

	def test_empty_string(self) -> None:
		assert sanitize_text("") == ""


def test_mask_key() -> None:
	assert mask_key(None) == "not set"
	assert mask_key("vc_live_abcdef123") == "vc_live_..."


class TestApiKeyFilter:
	"""Tests for the ApiKeyFilter logging.Filter."""

	def _make_record(
		self,
		msg: str,
		args: tuple | dict | None = None,
	) -> logging.LogRecord:
		"""Create a minimal LogRecord for testing."""
		return logging.LogRecord(
			name="test",
			level=logging.WARNING,
			pathname="test.py",
			lineno=1,
			msg=msg,
			args=args,
			exc_info=None,
		)

	def test_sanitizes_msg(self) -> None:
		f = ApiKeyFilter()
		record = self._make_record("sending Bearer vc_secret")
		f.filter(record)
		assert "vc_secret" not in record.msg

	def test_sanitizes_tuple_args(self) -> None:
		f = ApiKeyFilter()
		record = self._make_record("headers %s", ("Bearer vc_secret",))
		f.filter(record)
		assert isinstance(record.args, tuple)
		assert "vc_secret" not in record.args[0]

	def test_sanitizes_dict_args(self) -> None:
		f = ApiKeyFilter()
		record = self._make_record("%(h)s failed")
		record.args = {"h": "api_key=vc_secret"}
		f.filter(record)
		assert "vc_secret" not in record.args["h"]

	def test_non_string_args_unchanged(self) -> None:
		f = ApiKeyFilter()
		record = self._make_record("status=%d", (401,))
		f.filter(record)
		assert record.args == (401,)

	def test_always_returns_true(self) -> None:
		"""Filter never suppresses records."""
		f = ApiKeyFilter()
		assert f.filter(self._make_record("any message")) is True


class TestConfigureLoggingFilter:
	"""Tests that configure_logging installs the filter."""

	def test_no_duplicate_on_repeated_calls(self) -> None:
		root = logging.getLogger()
		root.filters = [
			f for f in root.filters
			if not isinstance(f, ApiKeyFilter)
		]
		configure_logging("info")
		configure_logging("debug")
		count = sum(
			1 for f in root.filters
			if isinstance(f, ApiKeyFilter)
		)
		assert count == 1
		assert root.level == logging.DEBUG
		configure_logging("warning")
