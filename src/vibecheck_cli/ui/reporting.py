"""
Run log rendering and persistence.

After a watched run ends, a plain-text log is written to the output
directory: the suite YAML, a per-item execution log and the summary
block shown on screen.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from vibecheck_cli.evals.formatting import truncate_text
from vibecheck_cli.models.item_result import ItemResult
from vibecheck_cli.models.summary import SummaryData
from vibecheck_cli.ui.tui import ALL_PASSED_MESSAGE, SOME_FAILED_MESSAGE
from vibecheck_cli.utils.paths import run_log_path

RULE = "=" * 80
THIN_RULE = "-" * 80


def _section(title: str) -> list[str]:
	return [RULE, title, RULE, ""]


def render_execution_log(results: Sequence[ItemResult]) -> list[str]:
	"""One block per item: name, PASS/FAIL, whole-tree check count, time."""
	lines: list[str] = []
	for index, result in enumerate(results):
		tally = result.tally()
		lines.append(f"Eval {index + 1}: {truncate_text(result.display_name, 50)}")
		lines.append(f"  Status: {'PASS' if result.passed else 'FAIL'}")
		lines.append(f"  Checks: {tally.passed}/{tally.total} passed")
		if result.execution_time_ms:
			lines.append(f"  Time: {result.execution_time_ms / 1000:.1f}s")
		lines.append("")
	return lines


def render_summary_text(summary: SummaryData) -> list[str]:
	"""Plain-text counterpart of the on-screen summary."""
	names = [truncate_text(item.name, 100) for item in summary.items]
	width = max([len(n) for n in names] + [20])
	lines: list[str] = []
	for name, item in zip(names, summary.items):
		mark = "PASS" if item.passed else "FAIL"
		time = (f" in {item.execution_time_ms / 1000:.1f}s"
		        if item.execution_time_ms else "")
		lines.append(f"{name.ljust(width)}  {item.bar}  {mark}{time}")
	lines += ["", THIN_RULE, f"Success Pct: {summary.pass_rate_text}"]
	if summary.total_time_seconds is not None:
		lines.append(f"Total Time: {summary.total_time_seconds:.2f}s")
	if summary.total_cost is not None:
		lines.append(f"Total Cost: ${summary.total_cost:.4f}")
	if summary.score is not None:
		lines.append(f"Price/Performance: {summary.score:.2f}")
	lines += [THIN_RULE, ""]
	lines.append(ALL_PASSED_MESSAGE if summary.all_passed else SOME_FAILED_MESSAGE)
	return lines


def render_run_log(
    run_id: str,
    results: Sequence[ItemResult],
    summary: SummaryData | None = None,
    yaml_content: str | None = None,
    error_message: str | None = None,
    timestamp: datetime | None = None,
) -> str:
	"""
	Render the full run log.

	Parameters:
		run_id: Job identifier.
		results: Item results in service order.
		summary: Final summary; absent for failed jobs.
		yaml_content: Original suite YAML, when the run was submitted here.
		error_message: Failure message for jobs without a summary.
		timestamp: Log timestamp; defaults to now (UTC).

	Returns:
		Log text.
	"""
	ts = (timestamp or datetime.now(timezone.utc)).isoformat()
	lines = _section("VIBECHECK RUN OUTPUT")
	lines += [f"Run ID: {run_id}", f"Timestamp: {ts}", ""]
	if yaml_content:
		lines += _section("EVALUATION YAML")
		lines += [yaml_content.rstrip("\n"), ""]
	lines += _section("EXECUTION LOG")
	lines += render_execution_log(results)
	lines += _section("SUMMARY")
	if summary is not None:
		lines += render_summary_text(summary)
	else:
		lines.append(error_message or "No summary available")
	lines.append("")
	return "\n".join(lines)


def save_run_log(path: Path | str, content: str) -> None:
	"""
	Persist log content to disk, ensuring parent directories.

	Parameters:
		path: Destination file path.
		content: Log text to write.
	"""
	Path(path).parent.mkdir(parents=True, exist_ok=True)
	Path(path).write_text(content, encoding="utf-8")


def write_run_output(
    output_dir: Path | str,
    run_id: str,
    results: Sequence[ItemResult],
    summary: SummaryData | None = None,
    yaml_content: str | None = None,
    error_message: str | None = None,
) -> Path:
	"""Render and save the run log as ``<output_dir>/<run_id>.txt``."""
	path = run_log_path(output_dir, run_id)
	save_run_log(
	    path,
	    render_run_log(run_id, results, summary=summary,
	                   yaml_content=yaml_content, error_message=error_message))
	return path


__all__ = [
    "render_execution_log",
    "render_summary_text",
    "render_run_log",
    "save_run_log",
    "write_run_output",
]
