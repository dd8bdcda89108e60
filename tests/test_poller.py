"""Tests for the job poll loop."""

import pytest

from vibecheck_cli.core.poller import JobPoller, poll_job
from vibecheck_cli.integrations.errors import (
    ApiError,
    JobFailedError,
    JobStateError,
)
from vibecheck_cli.models.job import JobStatus, StatusResponse


def _items(n: int, passed: bool = True) -> list[dict]:
	return [{"name": f"eval-{i}", "passed": passed} for i in range(n)]


class FakeSource:
	"""Replays scripted status payloads, one per call."""

	def __init__(self, payloads: list[dict]):
		self.payloads = list(payloads)
		self.calls = 0

	async def get_status(self, run_id: str) -> StatusResponse:
		payload = self.payloads[min(self.calls, len(self.payloads) - 1)]
		self.calls += 1
		return StatusResponse.model_validate(payload)


class RecordingObserver:

	def __init__(self):
		self.events = []

	def on_header(self, response):
		self.events.append(("header", response.suite_name))

	def on_items(self, items, start_index):
		self.events.append(("items", start_index, [i.name for i in items]))

	def on_notice(self, status, message, detail):
		self.events.append(("notice", status, message, detail))

	def on_summary(self, summary):
		self.events.append(("summary", summary.pass_rate_text))

	def on_failure(self, status, message):
		self.events.append(("failure", status, message))


class FakeSleep:

	def __init__(self):
		self.delays = []

	async def __call__(self, delay: float) -> None:
		self.delays.append(delay)


@pytest.mark.asyncio
async def test_growing_results_streamed_once():
	source = FakeSource([
	    {"status": "running", "results": [], "suiteName": "s"},
	    {"status": "running", "results": _items(2), "suiteName": "s"},
	    {"status": "running", "results": _items(2), "suiteName": "s"},
	    {"status": "completed", "results": _items(5), "suiteName": "s",
	     "totalTimeMs": 1000},
	])
	observer = RecordingObserver()
	sleep = FakeSleep()
	outcome = await poll_job(source, "r1", observer, interval_seconds=0.5,
	                         sleep=sleep)
	assert source.calls == 4
	assert sleep.delays == [0.5, 0.5, 0.5]
	assert observer.events == [
	    ("header", "s"),
	    ("items", 0, ["eval-0", "eval-1"]),
	    ("items", 2, ["eval-2", "eval-3", "eval-4"]),
	    ("summary", "5/5 (100.0%)"),
	]
	assert outcome.status is JobStatus.COMPLETED
	assert outcome.exit_code == 0
	assert len(outcome.results) == 5


@pytest.mark.asyncio
async def test_header_waits_for_suite_name():
	source = FakeSource([
	    {"status": "queued"},
	    {"status": "running", "suiteName": "later"},
	    {"status": "completed", "suiteName": "later"},
	])
	observer = RecordingObserver()
	await poll_job(source, "r1", observer, sleep=FakeSleep())
	headers = [e for e in observer.events if e[0] == "header"]
	assert headers == [("header", "later")]


@pytest.mark.asyncio
async def test_queued_results_not_flushed():
	source = FakeSource([
	    {"status": "queued", "results": _items(1)},
	    {"status": "completed", "results": _items(1)},
	])
	observer = RecordingObserver()
	await poll_job(source, "r1", observer, sleep=FakeSleep())
	assert observer.events[0] == ("items", 0, ["eval-0"])
	assert observer.events[1][0] == "summary"


@pytest.mark.asyncio
async def test_failed_job_reports_error_message():
	source = FakeSource([
	    {"status": "failed", "error": {"message": "boom"}},
	])
	observer = RecordingObserver()
	outcome = await poll_job(source, "r1", observer, sleep=FakeSleep())
	assert observer.events == [("failure", JobStatus.FAILED, "boom")]
	assert outcome.summary is None
	assert outcome.error_message == "boom"
	assert outcome.exit_code == 1
	with pytest.raises(JobFailedError) as exc_info:
		outcome.raise_for_status()
	assert str(exc_info.value) == "boom"


@pytest.mark.parametrize("status,message", [
    ("failed", "All evaluations failed due to execution errors"),
    ("error", "Vibe check failed"),
    ("cancelled", "Run was cancelled"),
])
@pytest.mark.asyncio
async def test_failure_fallback_messages(status, message):
	observer = RecordingObserver()
	await poll_job(FakeSource([{"status": status}]), "r1", observer,
	               sleep=FakeSleep())
	assert observer.events == [("failure", JobStatus(status), message)]


@pytest.mark.asyncio
async def test_partial_failure_notice_then_summary():
	source = FakeSource([{
	    "status": "partial_failure",
	    "results": _items(1),
	    "error": "1 eval could not run",
	}])
	observer = RecordingObserver()
	outcome = await poll_job(source, "r1", observer, sleep=FakeSleep())
	kinds = [e[0] for e in observer.events]
	assert kinds == ["items", "notice", "summary"]
	notice = observer.events[1]
	assert notice[2] == "Warning: Some evaluations failed to execute"
	assert notice[3] == "1 eval could not run"
	assert outcome.summary is not None


@pytest.mark.asyncio
async def test_timed_out_notice():
	observer = RecordingObserver()
	outcome = await poll_job(
	    FakeSource([{"status": "timed_out", "results": _items(2, False)}]),
	    "r1", observer, sleep=FakeSleep())
	assert ("notice", JobStatus.TIMED_OUT, "Evaluation suite timed out",
	        None) in observer.events
	assert outcome.summary.score is None
	assert outcome.exit_code == 1


@pytest.mark.asyncio
async def test_low_pass_rate_exits_non_zero():
	results = _items(1) + _items(2, passed=False)
	observer = RecordingObserver()
	outcome = await poll_job(
	    FakeSource([{"status": "completed", "results": results}]), "r1",
	    observer, sleep=FakeSleep())
	assert outcome.summary.tier == "bad"
	assert outcome.exit_code == 1


@pytest.mark.asyncio
async def test_backward_transition_rejected():
	source = FakeSource([{"status": "running"}, {"status": "queued"}])
	with pytest.raises(JobStateError):
		await poll_job(source, "r1", RecordingObserver(), sleep=FakeSleep())


@pytest.mark.asyncio
async def test_shrinking_results_rejected():
	source = FakeSource([
	    {"status": "running", "results": _items(3)},
	    {"status": "running", "results": _items(1)},
	])
	with pytest.raises(JobStateError):
		await poll_job(source, "r1", RecordingObserver(), sleep=FakeSleep())


@pytest.mark.asyncio
async def test_error_on_running_status_is_api_error():
	source = FakeSource([{"status": "running", "error": "bad key"}])
	with pytest.raises(ApiError):
		await poll_job(source, "r1", RecordingObserver(), sleep=FakeSleep())


@pytest.mark.asyncio
async def test_step_after_terminal_rejected():
	poller = JobPoller(FakeSource([{"status": "completed"}]),
	                   RecordingObserver(), sleep=FakeSleep())
	assert await poller.step("r1") is not None
	with pytest.raises(JobStateError):
		await poller.step("r1")


@pytest.mark.asyncio
async def test_transport_errors_propagate():

	class BrokenSource:

		async def get_status(self, run_id):
			raise ApiError("nope")

	with pytest.raises(ApiError):
		await poll_job(BrokenSource(), "r1", RecordingObserver(),
		               sleep=FakeSleep())
