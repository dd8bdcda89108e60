from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.text import Text
from typer.main import get_command

from vibecheck_cli.core import runner
from vibecheck_cli.core.export import DEFAULT_CSV_PATH, SortKey
from vibecheck_cli.core.poller import JobOutcome
from vibecheck_cli.core.scoring import get_tier_policy
from vibecheck_cli.integrations.errors import JobFailedError, VibeCheckError
from vibecheck_cli.models.config import Config, load_env
from vibecheck_cli.models.filters import RunsFilters
from vibecheck_cli.models.run_params import RunParams
from vibecheck_cli.ui.runs_table import print_run_detail, print_runs
from vibecheck_cli.ui.tui import RunRenderer
from vibecheck_cli.utils.logging import configure_logging

cli = typer.Typer(add_completion=False, no_args_is_help=True)
runs_cli = typer.Typer(add_completion=False, no_args_is_help=True,
                       help="List and inspect past runs")
cli.add_typer(runs_cli, name="runs")

console = Console()
err_console = Console(stderr=True)


@cli.callback()
def root() -> None:
	"""
	Root callback for the vibe CLI.

	Sets up the Typer application with no-args-is-help behavior.
	"""
	return None


def _fail(exc: Exception) -> typer.Exit:
	"""Print an error (and hint, if any) and return the exit to raise."""
	if isinstance(exc, ValidationError):
		first = exc.errors()[0]
		err_console.print(Text(f"Invalid option: {first['msg']}", style="red"))
		return typer.Exit(code=2)
	err_console.print(Text(str(exc), style="bold red"))
	hint = getattr(exc, "hint", None)
	if hint:
		err_console.print(Text(hint, style="dim"))
	return typer.Exit(code=1)


def load_config(params: RunParams) -> Config:
	"""Load environment, build Config, apply CLI overrides, set up logging."""
	load_env()
	config = Config()
	config.apply_overrides(params)
	configure_logging(config.log_level)
	return config


def _finish(outcome: JobOutcome, log_path: Path | None) -> None:
	if log_path is not None:
		console.print(Text(f"Output saved to: {log_path}", style="dim"))
	try:
		outcome.raise_for_status()
	except JobFailedError as exc:
		# The renderer has already printed the failure message.
		err_console.print(
		    Text(f"Run {outcome.run_id} ended with status {exc.status}",
		         style="dim"))
		raise typer.Exit(code=1) from exc
	if outcome.exit_code:
		raise typer.Exit(code=outcome.exit_code)


def run_impl(
    file: str,
    interval_ms: int | None = None,
    tiers: str | None = None,
    output_dir: str | None = None,
    save: bool | None = None,
    debug: bool | None = None,
) -> None:
	"""
	Submit an eval suite and watch it until it finishes.

	Exits non-zero unless the job produced a summary whose pass rate
	lands in the top tier.

	Parameters:
		file: Path to the eval suite YAML.
		interval_ms: Poll interval override.
		tiers: Tier policy override (lenient or strict).
		output_dir: Run log directory override.
		save: Whether to write the run log.
		debug: Enable debug logging.
	"""
	try:
		params = RunParams(file=file, interval_ms=interval_ms, tiers=tiers,
		                   output_dir=output_dir, save_output=save,
		                   debug=debug)
		config = load_config(params)
		with RunRenderer(console=console) as renderer:
			outcome, log_path = asyncio.run(
			    runner.submit_and_watch(config, params, renderer))
	except (VibeCheckError, ValidationError) as exc:
		raise _fail(exc) from exc
	_finish(outcome, log_path)


def watch_impl(
    run_id: str,
    interval_ms: int | None = None,
    tiers: str | None = None,
    output_dir: str | None = None,
    save: bool | None = None,
    debug: bool | None = None,
) -> None:
	"""Watch an already submitted job until it finishes."""
	try:
		params = RunParams(run_id=run_id, interval_ms=interval_ms,
		                   tiers=tiers, output_dir=output_dir,
		                   save_output=save, debug=debug)
		config = load_config(params)
		with RunRenderer(console=console) as renderer:
			outcome, log_path = asyncio.run(
			    runner.watch_run(config, run_id, renderer))
	except (VibeCheckError, ValidationError) as exc:
		raise _fail(exc) from exc
	_finish(outcome, log_path)


def list_impl(
    filters: RunsFilters,
    limit: int = 50,
    offset: int = 0,
    sort_by: str = SortKey.CREATED.value,
    csv: bool = False,
    csv_path: str = DEFAULT_CSV_PATH,
    debug: bool | None = None,
    tiers: str | None = None,
) -> None:
	"""
	Show one page of runs, or export every matching run to CSV.

	Parameters:
		filters: Listing filters.
		limit: Page size for the table view.
		offset: Page offset for the table view.
		sort_by: Client-side sort key.
		csv: Export all pages instead of printing a table.
		csv_path: Destination of the CSV export.
		debug: Enable debug logging.
		tiers: Tier policy used to color pass rates.
	"""
	try:
		sort_key = SortKey(sort_by)
	except ValueError as exc:
		choices = ", ".join(k.value for k in SortKey)
		raise typer.BadParameter(f"--sort-by must be one of: {choices}") from exc
	try:
		config = load_config(RunParams(tiers=tiers, debug=debug))
		policy = get_tier_policy(config.pass_rate_tiers)
		if csv:
			path, count = asyncio.run(
			    runner.export_all_runs(config, filters, sort_key=sort_key,
			                           path=csv_path))
			console.print(
			    Text(f"Exported {count} runs to {path}", style="green"))
			return
		page = asyncio.run(
		    runner.list_runs(config, filters, limit=limit, offset=offset,
		                     sort_key=sort_key))
	except (VibeCheckError, ValidationError) as exc:
		raise _fail(exc) from exc
	print_runs(console, page.runs, page.pagination, offset=offset,
	           sort_key=sort_key, policy=policy)


def get_impl(run_id: str, debug: bool | None = None,
             tiers: str | None = None) -> None:
	"""Show one run with its item results, check lines and summary."""
	try:
		config = load_config(RunParams(run_id=run_id, tiers=tiers, debug=debug))
		policy = get_tier_policy(config.pass_rate_tiers)
		run = asyncio.run(runner.get_run(config, run_id))
	except (VibeCheckError, ValidationError) as exc:
		raise _fail(exc) from exc
	print_run_detail(console, run, policy=policy)


def stop_impl(run_id: str, debug: bool | None = None) -> None:
	"""Cancel a queued run."""
	try:
		config = load_config(RunParams(run_id=run_id, debug=debug))
		asyncio.run(runner.stop_run(config, run_id))
	except (VibeCheckError, ValidationError) as exc:
		raise _fail(exc) from exc
	console.print(Text(f'Run "{run_id}" cancelled', style="green"))


_INTERVAL_OPT = typer.Option(None, "--interval-ms",
                             help="Poll interval in milliseconds")
_TIERS_OPT = typer.Option(None, "--tiers",
                          help="Pass-rate tiers: lenient or strict")
_OUTPUT_DIR_OPT = typer.Option(None, "--output-dir",
                               help="Directory for the run log")
_SAVE_OPT = typer.Option(None, "--save/--no-save",
                         help="Write the run log after the run")
_DEBUG_OPT = typer.Option(False, "--debug", help="Enable debug logging")


@cli.command()
def run(
    file: str,
    interval_ms: int = _INTERVAL_OPT,
    tiers: str = _TIERS_OPT,
    output_dir: str = _OUTPUT_DIR_OPT,
    save: bool = _SAVE_OPT,
    debug: bool = _DEBUG_OPT,
) -> None:
	"""
	Submit an eval suite YAML file and stream its results.
	"""
	run_impl(file, interval_ms, tiers, output_dir, save, debug)


@cli.command()
def watch(
    run_id: str,
    interval_ms: int = _INTERVAL_OPT,
    tiers: str = _TIERS_OPT,
    output_dir: str = _OUTPUT_DIR_OPT,
    save: bool = _SAVE_OPT,
    debug: bool = _DEBUG_OPT,
) -> None:
	"""
	Stream results of an already submitted run.
	"""
	watch_impl(run_id, interval_ms, tiers, output_dir, save, debug)


@cli.command()
def stop(run_id: str, debug: bool = _DEBUG_OPT) -> None:
	"""
	Cancel a queued run.
	"""
	stop_impl(run_id, debug)


@runs_cli.command("list")
def list_command(
    limit: int = typer.Option(50, "--limit", help="Rows per page"),
    offset: int = typer.Option(0, "--offset", help="Rows to skip"),
    status: Optional[str] = typer.Option(
        None, "--status", help="Status, or comma-separated statuses"),
    status_ne: Optional[str] = typer.Option(None, "--status-ne",
                                            help="Exclude a status"),
    model: Optional[str] = typer.Option(None, "--model",
                                        help="Exact model name"),
    model_like: Optional[str] = typer.Option(None, "--model-like",
                                             help="Model name pattern"),
    suite: Optional[str] = typer.Option(None, "--suite", help="Suite name"),
    min_cost: Optional[float] = typer.Option(None, "--min-cost"),
    max_cost: Optional[float] = typer.Option(None, "--max-cost"),
    min_success: Optional[float] = typer.Option(None, "--min-success"),
    max_success: Optional[float] = typer.Option(None, "--max-success"),
    date_from: Optional[str] = typer.Option(None, "--date-from",
                                            help="Created on/after date"),
    date_to: Optional[str] = typer.Option(None, "--date-to",
                                          help="Created on/before date"),
    completed_from: Optional[str] = typer.Option(None, "--completed-from"),
    completed_to: Optional[str] = typer.Option(None, "--completed-to"),
    min_duration: Optional[float] = typer.Option(None, "--min-duration"),
    max_duration: Optional[float] = typer.Option(None, "--max-duration"),
    sort_by: str = typer.Option(
        SortKey.CREATED.value, "--sort-by",
        help="created, success, cost, time or price-performance"),
    csv: bool = typer.Option(False, "--csv",
                             help="Export all matching runs to CSV"),
    csv_path: str = typer.Option(DEFAULT_CSV_PATH, "--csv-path",
                                 help="CSV destination"),
    debug: bool = _DEBUG_OPT,
    tiers: str = _TIERS_OPT,
) -> None:
	"""
	List runs, optionally filtered, sorted or exported to CSV.
	"""
	filters = RunsFilters(
	    status=status,
	    status_ne=status_ne,
	    model=model,
	    model_like=model_like,
	    suite=suite,
	    min_cost=min_cost,
	    max_cost=max_cost,
	    min_success=min_success,
	    max_success=max_success,
	    date_from=date_from,
	    date_to=date_to,
	    completed_from=completed_from,
	    completed_to=completed_to,
	    min_duration=min_duration,
	    max_duration=max_duration,
	)
	list_impl(filters, limit, offset, sort_by, csv, csv_path, debug, tiers)


@runs_cli.command("get")
def get_run_command(run_id: str, debug: bool = _DEBUG_OPT,
                    tiers: str = _TIERS_OPT) -> None:
	"""
	Show one run with its results.
	"""
	get_impl(run_id, debug, tiers)


def entrypoint(argv=None, *, standalone_mode: bool = True):
	"""
	Typer entrypoint that defaults to `run` when appropriate.

	Allows calling 'vibe suite.yaml' without explicitly specifying the
	'run' subcommand.

	Parameters:
		argv: Command-line arguments. Defaults to sys.argv[1:].
		standalone_mode: If True, Click handles exit codes.

	Returns:
		Result of the Click application main invocation.
	"""
	args = sys.argv[1:] if argv is None else list(argv)

	_click_app = get_command(cli)
	commands = getattr(_click_app, "commands", {}).keys()
	# `run` is a real command; only a bare file argument gets it prepended
	if args and not args[0].startswith("-") and args[0] not in commands:
		args = ["run"] + args
	return _click_app.main(
	    args=args,
	    prog_name="vibe",
	    standalone_mode=standalone_mode,
	)


if __name__ == "__main__":
	entrypoint()
