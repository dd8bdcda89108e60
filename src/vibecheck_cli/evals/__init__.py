"""
Check result presentation.

Turns raw check messages into short display details per check type.
"""

from vibecheck_cli.evals.formatting import (
    CheckDetail,
    format_check_detail,
    truncate_text,
)

__all__ = ["CheckDetail", "format_check_detail", "truncate_text"]
