"""
Summary data model for rendering.

Pure data extraction for the final evaluation summary, separating the
aggregation rules from Rich rendering.
"""

from __future__ import annotations

from typing import Sequence

from pydantic import BaseModel, Field

from .item_result import ItemResult
from .job import JobStatus


class ItemLine(BaseModel):
	"""One row of the per-item tally."""

	name: str
	passed: bool
	checks_passed: int = 0
	checks_failed: int = 0
	execution_time_ms: float | None = None

	@property
	def bar(self) -> str:
		"""Fail marks, a separator, then pass marks: ``--|+++``."""
		return "-" * self.checks_failed + "|" + "+" * self.checks_passed


class SummaryData(BaseModel):
	"""All data needed to render the final summary.

	Populated by `build_summary_data()` and consumed by the renderer
	and the run log writer.
	"""

	status: JobStatus = JobStatus.COMPLETED
	items: list[ItemLine] = Field(default_factory=list)
	passed_items: int = 0
	total_items: int = 0
	pass_rate: float = 0.0
	tier: str = "bad"
	acceptable: bool = False
	total_time_ms: float | None = None
	total_cost: float | None = None
	score: float | None = None

	@property
	def all_passed(self) -> bool:
		return self.passed_items == self.total_items

	@property
	def pass_rate_text(self) -> str:
		return f"{self.passed_items}/{self.total_items} ({self.pass_rate:.1f}%)"

	@property
	def total_time_seconds(self) -> float | None:
		if not self.total_time_ms:
			return None
		return self.total_time_ms / 1000


def sum_item_costs(results: Sequence[ItemResult]) -> float | None:
	"""Add up per-item costs; None when no item reports one."""
	costs = [r.cost for r in results if r.cost is not None]
	if not costs:
		return None
	return sum(costs)


def build_summary_data(
    results: Sequence[ItemResult],
    status: JobStatus = JobStatus.COMPLETED,
    total_time_ms: float | None = None,
    total_cost: float | None = None,
    tier_policy: "TierPolicy | None" = None,
) -> SummaryData:
	"""Extract display data from a job's item results.

	Item pass/fail comes from each item's own flag; the per-item bar
	comes from the whole-tree check count. The score is rounded the
	same way the pass rate is displayed before being computed, and is
	left unset for statuses whose cost figures are not comparable.

	Parameters:
		results: Item results in service order.
		status: Terminal status of the job.
		total_time_ms: Total elapsed time reported by the service.
		total_cost: Total cost; summed from items when not supplied.
		tier_policy: Tier boundaries; defaults to the lenient policy.

	Returns:
		Populated SummaryData model.
	"""
	from vibecheck_cli.core.scoring import (DEFAULT_TIER_POLICY,
	                                        item_pass_counts, pass_rate,
	                                        score_for_status)

	policy = tier_policy or DEFAULT_TIER_POLICY
	passed, total = item_pass_counts(results)
	rate = pass_rate(passed, total)
	cost = total_cost if total_cost is not None else sum_item_costs(results)
	duration = total_time_ms / 1000 if total_time_ms else None

	data = SummaryData(
	    status=status,
	    passed_items=passed,
	    total_items=total,
	    pass_rate=rate,
	    tier=policy.tier_for(rate).value,
	    acceptable=policy.is_acceptable(rate),
	    total_time_ms=total_time_ms,
	    total_cost=cost,
	    score=score_for_status(status, round(rate, 1), cost, duration),
	)
	for res in results:
		tally = res.tally()
		data.items.append(
		    ItemLine(
		        name=res.display_name,
		        passed=res.passed,
		        checks_passed=tally.passed,
		        checks_failed=tally.failed,
		        execution_time_ms=res.execution_time_ms,
		    ))
	return data


__all__ = ["ItemLine", "SummaryData", "build_summary_data", "sum_item_costs"]
