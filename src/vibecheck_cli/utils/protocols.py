"""
Protocol definitions for dependency injection.

Defines the status and listing sources consumed by the poll loop and
export collector, and the observer the poll loop reports to, so each
can be replaced with a fake in tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence

if TYPE_CHECKING:
	from vibecheck_cli.models.item_result import ItemResult
	from vibecheck_cli.models.job import JobStatus, StatusResponse
	from vibecheck_cli.models.run_record import RunsPage
	from vibecheck_cli.models.summary import SummaryData


class StatusSource(Protocol):
	"""Anything that can report a job's current status."""

	async def get_status(self, run_id: str) -> "StatusResponse":
		"""Fetch the current status payload for a job."""
		...


class RunsSource(Protocol):
	"""Anything that can return one page of the runs listing."""

	async def list_runs(self, params: dict[str, str] | None = None
	                    ) -> "RunsPage":
		"""Fetch one page of runs for the given query parameters."""
		...


class PollObserver(Protocol):
	"""
	Receives poll loop events in display order.

	Implementations render to the terminal, record for tests, or both.
	"""

	def on_header(self, response: "StatusResponse") -> None:
		"""Suite name, model and update flag, shown once per job."""
		...

	def on_items(self, items: Sequence["ItemResult"],
	             start_index: int) -> None:
		"""Newly arrived item results, starting at ``start_index``."""
		...

	def on_notice(self, status: "JobStatus", message: str,
	              detail: str | None) -> None:
		"""Cautionary notice for partial_failure or timed_out."""
		...

	def on_summary(self, summary: "SummaryData") -> None:
		"""Final aggregate for jobs that produce one."""
		...

	def on_failure(self, status: "JobStatus", message: str) -> None:
		"""Terminal failure with no summary."""
		...


__all__ = ["StatusSource", "RunsSource", "PollObserver"]
