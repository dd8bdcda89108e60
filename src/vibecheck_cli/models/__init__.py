"""
vibecheck models.

This subpackage contains Pydantic models for configuration, job status
payloads, item and check results, listing rows and filters, and the
final summary.

Key models:
    - Config: Application configuration loaded from environment
    - RunParams: CLI overrides for a watched run
    - StatusResponse: One status poll payload
    - ItemResult / CheckResult: Per-prompt outcome and its check tree
    - RunRecord: One row of the runs listing
    - SummaryData: Final aggregate for display
"""

from .check_result import CheckResult, CheckTally, count_all, count_checks
from .item_result import ItemResult
from .job import JobStatus, StatusResponse, can_transition, is_terminal
from .run_record import Pagination, RunRecord, RunsPage
from .filters import RunsFilters, normalize_date
from .config import Config, load_env
from .run_params import RunParams
from .summary import ItemLine, SummaryData, build_summary_data

__all__ = [
    "CheckResult",
    "CheckTally",
    "count_all",
    "count_checks",
    "ItemResult",
    "JobStatus",
    "StatusResponse",
    "can_transition",
    "is_terminal",
    "Pagination",
    "RunRecord",
    "RunsPage",
    "RunsFilters",
    "normalize_date",
    "Config",
    "load_env",
    "RunParams",
    "ItemLine",
    "SummaryData",
    "build_summary_data",
]
