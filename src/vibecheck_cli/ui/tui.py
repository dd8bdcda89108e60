"""
Terminal UI for a watched run.

Provides a Rich-based renderer that implements the poll observer
interface: it prints the job header once, each newly arrived item with
its check lines, cautionary notices, and the final summary or failure.
"""

from __future__ import annotations

from typing import Sequence

from rich import box
from rich.console import Console
from rich.status import Status
from rich.table import Table
from rich.text import Text

from vibecheck_cli.evals.formatting import format_check_detail, truncate_text
from vibecheck_cli.models.check_result import CheckResult
from vibecheck_cli.models.item_result import ItemResult
from vibecheck_cli.models.job import JobStatus, StatusResponse
from vibecheck_cli.models.summary import SummaryData

TIER_STYLES = {"good": "green", "sketchy": "yellow", "bad": "red"}

ALL_PASSED_MESSAGE = "All evals ran successfully"
SOME_FAILED_MESSAGE = "Some evals failed"

_INDENT = "  "


def check_line(check: CheckResult, response: str = "",
               depth: int = 0) -> Text:
	"""Render one check as ``PASS  type  detail`` with optional highlight."""
	detail = format_check_detail(check, response)
	text = Text(_INDENT * (depth + 1))
	if check.passed:
		text.append("PASS", style="bold green")
	else:
		text.append("FAIL", style="bold red")
	text.append(f"  {check.type or 'check'}", style="cyan")
	if detail.text:
		text.append("  ")
		if detail.highlight and detail.highlight in detail.text:
			before, _, after = detail.text.partition(detail.highlight)
			text.append(before, style="dim")
			text.append(detail.highlight, style="bold yellow")
			text.append(after, style="dim")
		else:
			text.append(detail.text, style="dim")
	return text


def check_lines(checks: Sequence[CheckResult], response: str = "",
                depth: int = 0) -> list[Text]:
	"""Flatten a check tree into indented lines, parents before children."""
	lines: list[Text] = []
	for check in checks:
		lines.append(check_line(check, response, depth))
		lines.extend(check_lines(check.children, response, depth + 1))
	return lines


def render_item(item: ItemResult, index: int) -> list[Text]:
	"""Render one item: a numbered title line followed by its checks."""
	title = Text(f"{index + 1}. ", style="bold")
	title.append(truncate_text(item.display_name or "(unnamed)", 80),
	             style="bold")
	if item.execution_time_ms is not None:
		title.append(f"  {item.execution_time_ms / 1000:.2f}s", style="dim")
	return [title, *check_lines(item.check_results, item.response)]


def summary_table(summary: SummaryData) -> Table:
	"""Per-item tally table: name, ``--|+++`` bar and time."""
	table = Table(box=box.ROUNDED, expand=True, show_header=True)
	table.add_column("Eval")
	table.add_column("Checks")
	table.add_column("Time", justify="right")
	for line in summary.items:
		bar = Text()
		bar.append("-" * line.checks_failed, style="red")
		bar.append("|")
		bar.append("+" * line.checks_passed, style="green")
		time = (f"{line.execution_time_ms / 1000:.2f}s"
		        if line.execution_time_ms is not None else "-")
		name_style = "green" if line.passed else "red"
		table.add_row(Text(truncate_text(line.name, 60), style=name_style),
		              bar, time)
	return table


def summary_lines(summary: SummaryData) -> list[Text]:
	"""Totals below the table; the closing line is colored by tier."""
	style = TIER_STYLES.get(summary.tier, "red")
	lines = [
	    Text.assemble(("Success Pct: ", "bold"),
	                  (summary.pass_rate_text, style)),
	]
	if summary.total_time_seconds is not None:
		lines.append(
		    Text.assemble(("Total Time: ", "bold"),
		                  f"{summary.total_time_seconds:.2f}s"))
	if summary.total_cost is not None:
		lines.append(
		    Text.assemble(("Total Cost: ", "bold"),
		                  f"${summary.total_cost:.4f}"))
	if summary.score is not None:
		lines.append(
		    Text.assemble(("Price/Performance: ", "bold"),
		                  f"{summary.score:.2f}"))
	closing = ALL_PASSED_MESSAGE if summary.all_passed else SOME_FAILED_MESSAGE
	lines.append(Text(closing, style=f"bold {style}"))
	return lines


class RunRenderer:
	"""
	Rich renderer for one watched run.

	Shows a spinner while the job is in flight and prints results as
	they arrive. Usable as a context manager; methods also work without
	entering it, which is how tests drive it.
	"""

	def __init__(self, console: Console | None = None,
	             spinner: bool = True) -> None:
		self.console = console or Console()
		self.spinner = spinner
		self.status: Status | None = None
		self.items_shown = 0

	def __enter__(self):
		"""Start the waiting spinner."""
		if self.spinner:
			self.status = self.console.status("Waiting for results...")
			self.status.start()
		return self

	def __exit__(self, exc_type, exc, tb):
		"""Stop the spinner."""
		self.finalize()

	def finalize(self) -> None:
		if self.status:
			self.status.stop()
			self.status = None

	def on_header(self, response: StatusResponse) -> None:
		title = Text("Suite: ", style="bold")
		title.append(response.suite_name or "", style="magenta")
		if response.is_update:
			title.append("  (updated)", style="dim")
		self.console.print(title)
		if response.model:
			self.console.print(Text.assemble(("Model: ", "bold"),
			                                 (response.model, "cyan")))
		if response.system_prompt:
			self.console.print(
			    Text.assemble(("System prompt: ", "bold"),
			                  (truncate_text(response.system_prompt, 80),
			                   "dim")))
		self.console.print()

	def on_items(self, items: Sequence[ItemResult], start_index: int) -> None:
		for offset, item in enumerate(items):
			for line in render_item(item, start_index + offset):
				self.console.print(line)
		self.items_shown = start_index + len(items)

	def on_notice(self, status: JobStatus, message: str,
	              detail: str | None) -> None:
		self.console.print(Text(message, style="bold yellow"))
		if detail:
			self.console.print(Text(detail, style="yellow"))

	def on_summary(self, summary: SummaryData) -> None:
		self.finalize()
		self.console.print()
		if summary.items:
			self.console.print(summary_table(summary))
		for line in summary_lines(summary):
			self.console.print(line)

	def on_failure(self, status: JobStatus, message: str) -> None:
		self.finalize()
		self.console.print(Text(message, style="bold red"))


__all__ = [
    "RunRenderer",
    "check_line",
    "check_lines",
    "render_item",
    "summary_table",
    "summary_lines",
    "TIER_STYLES",
    "ALL_PASSED_MESSAGE",
    "SOME_FAILED_MESSAGE",
]
