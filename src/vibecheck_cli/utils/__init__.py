"""Shared utility functions.

Key modules:
    - paths: Path safety for run log files
    - logging: Logging configuration and key masking
    - protocols: Protocol definitions for dependency injection
"""

from .paths import ensure_within, run_log_path
from .logging import configure_logging, get_logger, mask_key, sanitize_text
from .protocols import PollObserver, RunsSource, StatusSource

__all__ = [
    # paths
    "ensure_within",
    "run_log_path",
    # logging
    "configure_logging",
    "get_logger",
    "mask_key",
    "sanitize_text",
    # protocols
    "PollObserver",
    "RunsSource",
    "StatusSource",
]
