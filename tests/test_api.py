"""Tests for the HTTP client using httpx.MockTransport."""

import json

import httpx
import pytest

from vibecheck_cli.integrations.api import ApiClient
from vibecheck_cli.integrations.errors import (
    ApiError,
    AuthenticationError,
    ConflictError,
    NetworkError,
    NotFoundError,
    PaymentRequiredError,
    ServerError,
)
from vibecheck_cli.models.job import JobStatus


def _client(handler, api_key: str | None = "vc_test_key") -> ApiClient:
	transport = httpx.MockTransport(handler)
	return ApiClient("http://api.test/", api_key,
	                 client=httpx.AsyncClient(transport=transport))


@pytest.mark.asyncio
async def test_submit_run_sends_bearer_and_payload():
	seen = {}

	def handler(request: httpx.Request) -> httpx.Response:
		seen["url"] = str(request.url)
		seen["auth"] = request.headers.get("authorization")
		seen["body"] = json.loads(request.content)
		return httpx.Response(200, json={"runId": "run-1"})

	api = _client(handler)
	run_id = await api.submit_run({"metadata": {"name": "s"}}, "yaml: 1")
	assert run_id == "run-1"
	assert seen["url"] == "http://api.test/api/eval/run"
	assert seen["auth"] == "Bearer vc_test_key"
	assert seen["body"]["evalSuite"] == {"metadata": {"name": "s"}}
	assert seen["body"]["yamlContent"] == "yaml: 1"


@pytest.mark.asyncio
async def test_missing_key_fails_before_request():
	calls = []

	def handler(request):
		calls.append(request)
		return httpx.Response(200, json={})

	with pytest.raises(AuthenticationError):
		await _client(handler, api_key=None).get_status("r1")
	assert calls == []


@pytest.mark.asyncio
async def test_status_error_field_passed_to_caller():

	def handler(request):
		return httpx.Response(200, json={
		    "status": "failed",
		    "error": {"message": "boom"},
		})

	resp = await _client(handler).get_status("r1")
	assert resp.status is JobStatus.FAILED
	assert resp.error_message == "boom"


@pytest.mark.asyncio
async def test_error_in_2xx_body_without_status_raises():

	def handler(request):
		return httpx.Response(200, json={"error": "quota exceeded"})

	with pytest.raises(ApiError) as exc_info:
		await _client(handler).get_run("r1")
	assert str(exc_info.value) == "API Error: quota exceeded"


@pytest.mark.asyncio
async def test_malformed_status_payload_is_api_error():

	def handler(request):
		return httpx.Response(200, json={"status": "paused"})

	with pytest.raises(ApiError):
		await _client(handler).get_status("r1")


@pytest.mark.parametrize("code,body,exc_type,message", [
    (401, {}, AuthenticationError, "Unauthorized: Invalid or missing API key"),
    (403, {}, AuthenticationError, "Forbidden: Access denied"),
    (402, {"error": "Out of credits"}, PaymentRequiredError, "Out of credits"),
    (404, {}, NotFoundError, "Not Found: The requested resource does not exist"),
    (409, {"error": {"message": "not queued"}}, ConflictError, "not queued"),
    (500, {}, ServerError,
     "Server error: The vibecheck API encountered an error"),
    (422, {"error": "bad filter"}, ApiError, "API Error: bad filter"),
    (418, None, ApiError, "API Error: HTTP 418"),
])
@pytest.mark.asyncio
async def test_http_error_mapping(code, body, exc_type, message):

	def handler(request):
		if body is None:
			return httpx.Response(code, text="teapot")
		return httpx.Response(code, json=body)

	with pytest.raises(exc_type) as exc_info:
		await _client(handler).list_runs()
	assert str(exc_info.value) == message


@pytest.mark.asyncio
async def test_transport_failure_is_network_error():

	def handler(request):
		raise httpx.ConnectError("connection refused", request=request)

	with pytest.raises(NetworkError) as exc_info:
		await _client(handler).get_status("r1")
	assert exc_info.value.hint


@pytest.mark.asyncio
async def test_list_runs_params_and_parsing():
	seen = {}

	def handler(request):
		seen["params"] = dict(request.url.params)
		return httpx.Response(200, json={
		    "runs": [{
		        "id": "a",
		        "suite_name": "s",
		        "model": "m",
		        "status": "completed",
		        "results_count": "3",
		        "evals_passed": "2",
		        "success_percentage": "66.67",
		        "total_cost": "0.0015",
		        "duration_seconds": "NaN",
		    }],
		    "pagination": {"total": 1, "hasMore": False},
		})

	page = await _client(handler).list_runs({"status": "completed",
	                                         "limit": "10"})
	assert seen["params"] == {"status": "completed", "limit": "10"}
	run = page.runs[0]
	assert run.results_count == 3
	assert run.success_percentage == pytest.approx(66.67)
	assert run.duration_seconds is None
	assert page.pagination.has_more is False


@pytest.mark.asyncio
async def test_cancel_run_posts_to_cancel_endpoint():
	seen = {}

	def handler(request):
		seen["method"] = request.method
		seen["path"] = request.url.path
		return httpx.Response(200, json={"success": True})

	await _client(handler).cancel_run("run-1")
	assert seen["method"] == "POST"
	assert seen["path"] == "/api/runs/run-1/cancel"


@pytest.mark.asyncio
async def test_owned_client_closed_on_exit():
	async with ApiClient("http://api.test", "k") as api:
		inner = api._client
	assert inner.is_closed


@pytest.mark.asyncio
async def test_malformed_listing_row_is_api_error():

	def handler(request):
		return httpx.Response(200, json={
		    "runs": [{
		        "suite_name": "x"
		    }],
		    "pagination": {"total": 1, "hasMore": False},
		})

	with pytest.raises(ApiError) as exc_info:
		await _client(handler).list_runs()
	assert "runs.0.id" in str(exc_info.value)


@pytest.mark.asyncio
async def test_malformed_run_detail_is_api_error():

	def handler(request):
		return httpx.Response(200, json={"run": {"suite_name": "x"}})

	with pytest.raises(ApiError) as exc_info:
		await _client(handler).get_run("r1")
	assert "id" in str(exc_info.value)
