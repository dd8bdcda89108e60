"""
Job status models.

Defines the job lifecycle states, the forward-only transition rule,
and the StatusResponse payload returned by the status endpoint.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .item_result import ItemResult


class JobStatus(str, Enum):
	"""
	Lifecycle states for a submitted job.

	QUEUED: Accepted, not yet started.
	RUNNING: Executing; results may still arrive.
	COMPLETED: Finished normally.
	FAILED: Every item failed to execute.
	PARTIAL_FAILURE: Some items failed to execute.
	TIMED_OUT: The service exceeded its execution budget.
	ERROR: The service hit an internal error.
	CANCELLED: Stopped by an explicit cancel call.
	"""

	QUEUED = "queued"
	RUNNING = "running"
	COMPLETED = "completed"
	FAILED = "failed"
	PARTIAL_FAILURE = "partial_failure"
	TIMED_OUT = "timed_out"
	ERROR = "error"
	CANCELLED = "cancelled"


NON_TERMINAL_STATUSES = frozenset({JobStatus.QUEUED, JobStatus.RUNNING})
TERMINAL_STATUSES = frozenset(set(JobStatus) - NON_TERMINAL_STATUSES)

# Terminal statuses that still produce a pass-rate summary.
SUMMARY_STATUSES = frozenset({
    JobStatus.COMPLETED,
    JobStatus.PARTIAL_FAILURE,
    JobStatus.TIMED_OUT,
})

# Statuses whose cost accounting is complete enough for score comparison.
SCORE_ELIGIBLE_STATUSES = frozenset({
    JobStatus.COMPLETED,
    JobStatus.PARTIAL_FAILURE,
})

_RANK = {
    JobStatus.QUEUED: 0,
    JobStatus.RUNNING: 1,
}


def is_terminal(status: JobStatus) -> bool:
	return status in TERMINAL_STATUSES


def can_transition(old: JobStatus | None, new: JobStatus) -> bool:
	"""Return True when moving from ``old`` to ``new`` is a forward step.

	Repeating the same status is allowed. Nothing leaves a terminal
	status, and ``running`` never returns to ``queued``.
	"""
	if old is None or old == new:
		return True
	if is_terminal(old):
		return False
	return _RANK.get(new, 2) >= _RANK[old]


def error_text(error: Any) -> str | None:
	"""Normalize an ``error`` field that may be a string or an object.

	Objects prefer their ``message`` key and otherwise fall back to
	their JSON rendering. Empty values yield None.
	"""
	if error is None or error == "":
		return None
	if isinstance(error, str):
		return error
	if isinstance(error, dict):
		msg = error.get("message")
		if msg:
			return str(msg)
		return json.dumps(error)
	return str(error)


class StatusResponse(BaseModel):
	"""Payload of ``GET /api/eval/status/{id}``."""

	model_config = ConfigDict(populate_by_name=True)

	status: JobStatus
	results: list[ItemResult] = Field(default_factory=list)
	is_update: bool | None = Field(
	    default=None,
	    validation_alias=AliasChoices("isUpdate", "is_update"),
	)
	suite_name: str | None = Field(
	    default=None,
	    validation_alias=AliasChoices("suiteName", "suite_name"),
	)
	model: str | None = None
	system_prompt: str | None = Field(
	    default=None,
	    validation_alias=AliasChoices("systemPrompt", "system_prompt"),
	)
	total_time_ms: float | None = Field(
	    default=None,
	    validation_alias=AliasChoices("totalTimeMs", "total_time_ms"),
	)
	total_cost: float | None = Field(
	    default=None,
	    validation_alias=AliasChoices("totalCost", "total_cost"),
	)
	error: Any = None

	@field_validator("results", mode="before")
	@classmethod
	def none_as_empty(cls, v: Any) -> Any:
		return [] if v is None else v

	@property
	def error_message(self) -> str | None:
		return error_text(self.error)

	@property
	def has_header(self) -> bool:
		return bool(self.suite_name)


__all__ = [
    "JobStatus",
    "NON_TERMINAL_STATUSES",
    "TERMINAL_STATUSES",
    "SUMMARY_STATUSES",
    "SCORE_ELIGIBLE_STATUSES",
    "is_terminal",
    "can_transition",
    "error_text",
    "StatusResponse",
]
