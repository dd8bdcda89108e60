import pytest

from vibecheck_cli.models.job import (
    JobStatus,
    StatusResponse,
    can_transition,
    error_text,
    is_terminal,
)


def test_terminal_statuses():
	assert not is_terminal(JobStatus.QUEUED)
	assert not is_terminal(JobStatus.RUNNING)
	for status in ("completed", "failed", "partial_failure", "timed_out",
	               "error", "cancelled"):
		assert is_terminal(JobStatus(status))


@pytest.mark.parametrize("old,new,ok", [
    (None, JobStatus.RUNNING, True),
    (JobStatus.QUEUED, JobStatus.QUEUED, True),
    (JobStatus.QUEUED, JobStatus.RUNNING, True),
    (JobStatus.QUEUED, JobStatus.COMPLETED, True),
    (JobStatus.RUNNING, JobStatus.FAILED, True),
    (JobStatus.RUNNING, JobStatus.QUEUED, False),
    (JobStatus.COMPLETED, JobStatus.RUNNING, False),
    (JobStatus.COMPLETED, JobStatus.FAILED, False),
])
def test_can_transition(old, new, ok):
	assert can_transition(old, new) is ok


def test_error_text_variants():
	assert error_text(None) is None
	assert error_text("") is None
	assert error_text("boom") == "boom"
	assert error_text({"message": "boom"}) == "boom"
	assert error_text({"code": 7}) == '{"code": 7}'


def test_status_response_camel_case():
	resp = StatusResponse.model_validate({
	    "status": "running",
	    "results": None,
	    "suiteName": "smoke",
	    "model": "m",
	    "isUpdate": True,
	    "totalTimeMs": 1200,
	    "totalCost": 0.002,
	    "error": {"message": "x"},
	})
	assert resp.results == []
	assert resp.suite_name == "smoke"
	assert resp.has_header
	assert resp.is_update is True
	assert resp.total_time_ms == 1200
	assert resp.error_message == "x"


def test_status_response_unknown_status_rejected():
	with pytest.raises(ValueError):
		StatusResponse.model_validate({"status": "paused"})
