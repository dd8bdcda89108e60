"""Core client logic.

This subpackage contains the poll loop, result accumulation, scoring
and the paginated export collector. Command orchestration lives in
``core.runner`` and is imported directly by the CLI.

Key modules:
    - accumulator: Track which results have already been shown
    - poller: Job poll loop via poll_job()
    - scoring: Pass-rate tiers and price/performance score
    - export: Paginated collection, sorting and CSV output
"""

from vibecheck_cli.core.accumulator import ResultAccumulator, unseen_suffix
from vibecheck_cli.core.scoring import (
    Tier,
    TierPolicy,
    get_tier_policy,
    pass_rate,
    price_performance_score,
    score_for_status,
)
from vibecheck_cli.core.poller import JobOutcome, JobPoller, poll_job
from vibecheck_cli.core.export import (
    SortKey,
    collect_all,
    export_runs,
    sort_runs,
)

__all__ = [
    # accumulator
    "ResultAccumulator",
    "unseen_suffix",
    # scoring
    "Tier",
    "TierPolicy",
    "get_tier_policy",
    "pass_rate",
    "price_performance_score",
    "score_for_status",
    # poller
    "JobOutcome",
    "JobPoller",
    "poll_job",
    # export
    "SortKey",
    "collect_all",
    "export_runs",
    "sort_runs",
]
