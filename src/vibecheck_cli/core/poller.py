"""
Job poll loop.

Drives repeated status queries for one submitted job until the service
reports a terminal status, feeding newly arrived results and the final
summary to a PollObserver. The loop is sequential: each request resolves
before the interval sleep, and the sleep completes before the next
request. Nothing here retries; transport and HTTP failures propagate.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

from pydantic import BaseModel, Field

from vibecheck_cli.core.accumulator import unseen_suffix
from vibecheck_cli.core.scoring import DEFAULT_TIER_POLICY, TierPolicy
from vibecheck_cli.integrations.errors import (
    ApiError,
    JobFailedError,
    JobStateError,
)
from vibecheck_cli.models.item_result import ItemResult
from vibecheck_cli.models.job import (
    JobStatus,
    StatusResponse,
    SUMMARY_STATUSES,
    can_transition,
    is_terminal,
)
from vibecheck_cli.models.summary import SummaryData, build_summary_data
from vibecheck_cli.utils.logging import get_logger
from vibecheck_cli.utils.protocols import PollObserver, StatusSource

logger = get_logger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 1.0

FAILURE_FALLBACKS = {
    JobStatus.FAILED: "All evaluations failed due to execution errors",
    JobStatus.ERROR: "Vibe check failed",
    JobStatus.CANCELLED: "Run was cancelled",
}

NOTICES = {
    JobStatus.PARTIAL_FAILURE: "Warning: Some evaluations failed to execute",
    JobStatus.TIMED_OUT: "Evaluation suite timed out",
}

SleepFn = Callable[[float], Awaitable[None]]


@dataclass
class PollState:
	"""Everything the loop remembers between ticks."""

	seen_count: int = 0
	header_shown: bool = False
	status: JobStatus | None = None

	@property
	def terminal(self) -> bool:
		return self.status is not None and is_terminal(self.status)


class JobOutcome(BaseModel):
	"""Result of polling a job to a terminal status."""

	run_id: str
	status: JobStatus
	results: list[ItemResult] = Field(default_factory=list)
	summary: SummaryData | None = None
	error_message: str | None = None
	suite_name: str | None = None
	yaml_content: str | None = None

	@property
	def succeeded(self) -> bool:
		"""True when a summary exists and its pass rate is acceptable."""
		return self.summary is not None and self.summary.acceptable

	@property
	def exit_code(self) -> int:
		return 0 if self.succeeded else 1

	def raise_for_status(self) -> None:
		"""Raise JobFailedError for jobs that ended without a summary."""
		if self.summary is None:
			raise JobFailedError(
			    self.error_message or FAILURE_FALLBACKS.get(
			        self.status, "Evaluation failed"), self.status.value)


class JobPoller:
	"""Explicit state machine over one job's status responses.

	Parameters:
		source: Status source, normally an ApiClient.
		observer: Receives header, items, notices, summary or failure.
		interval_seconds: Delay between ticks.
		tier_policy: Pass-rate tier boundaries for the summary.
		sleep: Awaitable delay; tests pass a fake.
	"""

	def __init__(
	    self,
	    source: StatusSource,
	    observer: PollObserver,
	    interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
	    tier_policy: TierPolicy | None = None,
	    sleep: SleepFn = asyncio.sleep,
	) -> None:
		self.source = source
		self.observer = observer
		self.interval_seconds = interval_seconds
		self.tier_policy = tier_policy or DEFAULT_TIER_POLICY
		self.sleep = sleep
		self.state = PollState()

	def _flush(self, results: list[ItemResult]) -> None:
		start = self.state.seen_count
		new, self.state.seen_count = unseen_suffix(results, start)
		if new:
			self.observer.on_items(new, start)

	def _advance(self, status: JobStatus) -> None:
		if not can_transition(self.state.status, status):
			logger.warning("job moved backwards: %s -> %s", self.state.status,
			               status)
			raise JobStateError(
			    f"job status moved backwards from {self.state.status.value} "
			    f"to {status.value}")
		self.state.status = status

	async def step(self, run_id: str) -> JobOutcome | None:
		"""Issue one status query and react to it.

		Returns the JobOutcome once a terminal status is seen, else None.
		"""
		if self.state.terminal:
			raise JobStateError(f"job {run_id} already reached a terminal status")

		response = await self.source.get_status(run_id)
		logger.debug("tick %s: status=%s results=%d", run_id,
		             response.status.value, len(response.results))
		self._advance(response.status)

		if not self.state.header_shown and response.has_header:
			self.observer.on_header(response)
			self.state.header_shown = True

		if not is_terminal(response.status):
			if response.error_message:
				raise ApiError(response.error_message)
			if response.status is JobStatus.RUNNING:
				self._flush(response.results)
			return None

		logger.info("job %s finished with status %s", run_id,
		            response.status.value)
		return self._finish(run_id, response)

	def _finish(self, run_id: str, response: StatusResponse) -> JobOutcome:
		status = response.status
		outcome = JobOutcome(
		    run_id=run_id,
		    status=status,
		    results=response.results,
		    error_message=response.error_message,
		    suite_name=response.suite_name,
		)
		if status not in SUMMARY_STATUSES:
			message = response.error_message or FAILURE_FALLBACKS[status]
			outcome.error_message = message
			self.observer.on_failure(status, message)
			return outcome

		self._flush(response.results)
		if status in NOTICES:
			self.observer.on_notice(status, NOTICES[status],
			                        response.error_message)
		summary = build_summary_data(
		    response.results,
		    status=status,
		    total_time_ms=response.total_time_ms,
		    total_cost=response.total_cost,
		    tier_policy=self.tier_policy,
		)
		outcome.summary = summary
		self.observer.on_summary(summary)
		return outcome

	async def run(self, run_id: str) -> JobOutcome:
		"""Poll until the job reaches a terminal status."""
		while True:
			outcome = await self.step(run_id)
			if outcome is not None:
				return outcome
			await self.sleep(self.interval_seconds)


async def poll_job(
    source: StatusSource,
    run_id: str,
    observer: PollObserver,
    interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
    tier_policy: TierPolicy | None = None,
    sleep: SleepFn = asyncio.sleep,
) -> JobOutcome:
	"""Convenience wrapper: build a JobPoller and run it."""
	poller = JobPoller(source, observer, interval_seconds=interval_seconds,
	                   tier_policy=tier_policy, sleep=sleep)
	return await poller.run(run_id)


__all__ = [
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "FAILURE_FALLBACKS",
    "NOTICES",
    "PollState",
    "JobOutcome",
    "JobPoller",
    "poll_job",
]
