"""User interface components.

This subpackage provides terminal rendering and run log output.

Key modules:
    - tui: Rich renderer for a watched run
    - runs_table: Runs listing and run detail rendering
    - reporting: Run log rendering and persistence
"""

from vibecheck_cli.ui.tui import RunRenderer
from vibecheck_cli.ui.runs_table import print_run_detail, print_runs
from vibecheck_cli.ui.reporting import render_run_log, write_run_output

__all__ = [
    "RunRenderer",
    "print_runs",
    "print_run_detail",
    "render_run_log",
    "write_run_output",
]
