"""
Rendering for the runs listing and single-run detail.
"""

from __future__ import annotations

from typing import Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from vibecheck_cli.core.export import SortKey, run_score
from vibecheck_cli.core.scoring import (
    DEFAULT_TIER_POLICY,
    SCORE_FORMULA,
    TierPolicy,
    format_score,
)
from vibecheck_cli.evals.formatting import truncate_text
from vibecheck_cli.models.job import SUMMARY_STATUSES, JobStatus
from vibecheck_cli.models.run_record import Pagination, RunRecord
from vibecheck_cli.models.summary import SummaryData, build_summary_data
from vibecheck_cli.ui.tui import (
    TIER_STYLES,
    check_lines,
    summary_lines,
    summary_table,
)


def status_style(status: str) -> str:
	if status == "completed":
		return "green"
	if status in ("failed", "error", "cancelled"):
		return "red"
	return "yellow"


def pass_fail_text(run: RunRecord,
                   policy: TierPolicy = DEFAULT_TIER_POLICY) -> Text:
	"""``passed/total (pct%)`` colored by tier; ``N/A`` with no results."""
	if not run.results_count:
		return Text("N/A", style="white")
	pct = run.success_percentage or 0.0
	label = f"{run.evals_passed or 0}/{run.results_count} ({pct:.0f}%)"
	return Text(label, style=TIER_STYLES[policy.tier_for(pct).value])


def runs_table(runs: Sequence[RunRecord],
               policy: TierPolicy = DEFAULT_TIER_POLICY) -> Table:
	"""Build the listing table in the order given."""
	table = Table(box=box.ROUNDED, expand=True, show_header=True)
	table.add_column("ID", style="cyan", no_wrap=True)
	table.add_column("Suite Name")
	table.add_column("Model")
	table.add_column("Status")
	table.add_column("Pass/Fail")
	table.add_column("Time", justify="right")
	table.add_column("Cost", justify="right")
	table.add_column("Score", justify="right")
	for run in runs:
		time = (f"{run.duration_seconds:.1f}s"
		        if run.duration_seconds is not None else "N/A")
		cost = f"${run.total_cost:.4f}" if run.total_cost is not None else "N/A"
		table.add_row(
		    run.id,
		    run.suite_name,
		    truncate_text(run.model or "N/A", 45),
		    Text(run.status, style=status_style(run.status)),
		    pass_fail_text(run, policy),
		    Text(time, style="dim"),
		    cost,
		    format_score(run_score(run)),
		)
	return table


def pagination_line(pagination: Pagination, offset: int, count: int) -> str:
	return f"Showing {offset + 1}-{offset + count} of {pagination.total} runs"


def print_runs(
    console: Console,
    runs: Sequence[RunRecord],
    pagination: Pagination | None = None,
    offset: int = 0,
    sort_key: SortKey | str | None = None,
    policy: TierPolicy = DEFAULT_TIER_POLICY,
) -> None:
	"""
	Print the runs table with its legend and paging hints.

	Parameters:
		console: Target console.
		runs: Rows, already sorted.
		pagination: Paging info for the page shown, if any.
		offset: Offset the page was fetched at.
		sort_key: Client-side sort applied to the rows.
		policy: Tier boundaries used to color pass rates.
	"""
	if not runs:
		console.print(Text("No runs found", style="yellow"))
		return
	console.print(runs_table(runs, policy))
	console.print(Text(f"Score formula: {SCORE_FORMULA}", style="dim"))
	if sort_key is not None:
		console.print(Text(f"Sorted by: {SortKey(sort_key).value}",
		                   style="dim"))
	if pagination is not None:
		console.print(Text(pagination_line(pagination, offset, len(runs)),
		                   style="dim"))
		if pagination.has_more:
			console.print(
			    Text("Use --limit and --offset to paginate", style="dim"))


def run_summary(run: RunRecord,
                policy: TierPolicy = DEFAULT_TIER_POLICY) -> SummaryData | None:
	"""Summary of a stored run; None without results or a summary status."""
	try:
		status = JobStatus(run.status)
	except ValueError:
		return None
	if not run.results or status not in SUMMARY_STATUSES:
		return None
	total_time_ms = (run.duration_seconds * 1000
	                 if run.duration_seconds is not None else None)
	return build_summary_data(run.results, status=status,
	                          total_time_ms=total_time_ms,
	                          total_cost=run.total_cost, tier_policy=policy)


def print_run_detail(console: Console, run: RunRecord,
                     policy: TierPolicy = DEFAULT_TIER_POLICY) -> None:
	"""Print one run's fields, each item with its checks, then the summary."""
	table = Table(title="Run Details", box=box.ROUNDED, show_header=False,
	              expand=True, title_style="bold cyan")
	table.add_column("Field", style="bold")
	table.add_column("Value")
	table.add_row("ID", run.id)
	table.add_row("Suite Name", run.suite_name)
	table.add_row("Model", run.model or "N/A")
	table.add_row("Status", Text(run.status, style=status_style(run.status)))
	table.add_row("Started", run.created_at or "N/A")
	if run.completed_at:
		table.add_row("Completed", run.completed_at)
	if run.duration_seconds is not None:
		table.add_row("Duration", f"{run.duration_seconds:.2f}s")
	if run.results_count is not None:
		passed = (f"{run.evals_passed}/{run.results_count}"
		          if run.evals_passed is not None else "N/A")
		pct = (f"{run.success_percentage:.1f}%"
		       if run.success_percentage is not None else "N/A")
		table.add_row("Results", f"{passed} passed ({pct})")
	if run.total_cost is not None:
		table.add_row("Cost", f"${run.total_cost:.4f}")
	table.add_row("Score", format_score(run_score(run)))
	console.print(table)

	if not run.results:
		return
	console.print(Text("\nEvaluation Results\n", style="bold"))
	for result in run.results:
		name = result.name or truncate_text(result.prompt, 60)
		console.print(Text(f"{name}:", style="bold"))
		console.print(Text.assemble(("Prompt: ", "blue"), result.prompt))
		console.print(Text(f"Response: {result.response}", style="dim"))
		for line in check_lines(result.check_results, result.response):
			console.print(line)
		console.print()

	summary = run_summary(run, policy)
	if summary is not None:
		console.print(summary_table(summary))
		for line in summary_lines(summary):
			console.print(line)


__all__ = [
    "runs_table",
    "pass_fail_text",
    "pagination_line",
    "print_runs",
    "print_run_detail",
    "run_summary",
    "status_style",
]
