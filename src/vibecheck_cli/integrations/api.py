"""
Scoring service API client.

Provides an async httpx-based client for submitting eval suites,
querying job status, listing and fetching runs, and cancelling runs.
Every failure is translated into the VibeCheckError hierarchy.
"""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from vibecheck_cli.integrations.errors import (
    ApiError,
    AuthenticationError,
    ConflictError,
    NetworkError,
    NotFoundError,
    PaymentRequiredError,
    ServerError,
)
from vibecheck_cli.models.job import StatusResponse, error_text
from vibecheck_cli.models.run_record import RunRecord, RunsPage
from vibecheck_cli.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_UA = "vibecheck-cli"


def _body(response: httpx.Response) -> Any:
	try:
		return response.json()
	except ValueError:
		return None


def _wrap_error(response: httpx.Response) -> Exception:
	"""Map a non-2xx response onto the error taxonomy."""
	status = response.status_code
	data = _body(response)
	body_msg = error_text(data.get("error")) if isinstance(data,
	                                                        dict) else None
	if status in (401, 403):
		if status == 403:
			return AuthenticationError("Forbidden: Access denied")
		return AuthenticationError()
	if status == 402:
		return PaymentRequiredError(body_msg) if body_msg else PaymentRequiredError()
	if status == 404:
		return NotFoundError(body_msg) if body_msg else NotFoundError()
	if status == 409:
		return ConflictError(body_msg or "Conflict")
	if status >= 500:
		return ServerError()
	if body_msg:
		return ApiError(body_msg, status_code=status)
	return ApiError(f"HTTP {status}", status_code=status)


def _payload_error(what: str, exc: ValidationError) -> str:
	first = exc.errors()[0]
	loc = ".".join(str(p) for p in first["loc"])
	if loc:
		return f"unexpected {what} payload: {loc}: {first['msg']}"
	return f"unexpected {what} payload: {first['msg']}"


def _check_body(data: Any, job_status: bool = False) -> dict[str, Any]:
	"""Reject 2xx bodies that carry an ``error`` field.

	Status payloads that also carry a ``status`` are passed through, since
	there the error describes the job's terminal state rather than the call.
	"""
	if not isinstance(data, dict):
		raise ApiError("unexpected response body")
	if job_status and data.get("status"):
		return data
	msg = error_text(data.get("error"))
	if msg:
		raise ApiError(msg)
	return data


class ApiClient:
	"""Thin async client for the vibecheck HTTP API.

	Use as an async context manager, or pass an existing
	``httpx.AsyncClient`` (tests inject one built on MockTransport).
	"""

	def __init__(
	    self,
	    base_url: str,
	    api_key: str | None,
	    timeout: float = 30,
	    client: httpx.AsyncClient | None = None,
	) -> None:
		self.base_url = base_url.rstrip("/")
		self.api_key = api_key
		self._client = client or httpx.AsyncClient(timeout=timeout)
		self._owns_client = client is None

	async def __aenter__(self) -> "ApiClient":
		return self

	async def __aexit__(self, exc_type, exc, tb) -> None:
		await self.aclose()

	async def aclose(self) -> None:
		if self._owns_client:
			await self._client.aclose()

	def _headers(self) -> dict[str, str]:
		if not self.api_key:
			raise AuthenticationError(
			    "VIBECHECK_API_KEY environment variable is required")
		return {
		    "Content-Type": "application/json",
		    "Authorization": f"Bearer {self.api_key}",
		    "User-Agent": DEFAULT_UA,
		}

	async def _request(
	    self,
	    method: str,
	    path: str,
	    params: dict[str, str] | None = None,
	    payload: Any = None,
	    job_status: bool = False,
	) -> dict[str, Any]:
		url = f"{self.base_url}{path}"
		headers = self._headers()
		logger.debug("%s %s params=%s", method, url, params)
		try:
			response = await self._client.request(method, url, params=params,
			                                      json=payload,
			                                      headers=headers)
		except httpx.TransportError as exc:
			raise NetworkError(str(exc) or type(exc).__name__) from exc
		logger.debug("%s %s -> %d", method, url, response.status_code)
		if response.is_error:
			raise _wrap_error(response)
		data = _body(response)
		if logger.isEnabledFor(logging.DEBUG):
			logger.debug("response body: %s", json.dumps(data)[:2000])
		return _check_body(data, job_status=job_status)

	async def submit_run(self, eval_suite: dict[str, Any],
	                     yaml_content: str | None = None) -> str:
		"""Submit a suite and return the job identifier."""
		data = await self._request("POST", "/api/eval/run", payload={
		    "evalSuite": eval_suite,
		    "yamlContent": yaml_content,
		})
		run_id = data.get("runId")
		if not run_id:
			raise ApiError("response did not include a runId")
		return str(run_id)

	async def get_status(self, run_id: str) -> StatusResponse:
		"""Fetch the current status and results of a job."""
		data = await self._request(
		    "GET",
		    f"/api/eval/status/{quote(run_id, safe='')}",
		    job_status=True,
		)
		try:
			return StatusResponse.model_validate(data)
		except ValidationError as exc:
			raise ApiError(_payload_error("status", exc)) from exc

	async def list_runs(self, params: dict[str, str] | None = None) -> RunsPage:
		"""Fetch one page of the runs listing."""
		data = await self._request("GET", "/api/runs", params=params)
		try:
			return RunsPage.model_validate(data)
		except ValidationError as exc:
			raise ApiError(_payload_error("runs listing", exc)) from exc

	async def get_run(self, run_id: str) -> RunRecord:
		"""Fetch one run with its item results."""
		data = await self._request("GET", f"/api/runs/{quote(run_id, safe='')}")
		run = data.get("run")
		if not isinstance(run, dict):
			raise ApiError("response did not include a run")
		try:
			return RunRecord.model_validate(run)
		except ValidationError as exc:
			raise ApiError(_payload_error("run", exc)) from exc

	async def cancel_run(self, run_id: str) -> None:
		"""Cancel a queued run."""
		await self._request("POST",
		                    f"/api/runs/{quote(run_id, safe='')}/cancel",
		                    payload={})


__all__ = ["ApiClient", "DEFAULT_UA"]
