"""
Paginated export collector.

Walks the runs listing page by page until the service reports no more
pages, sorts the combined set once, and serializes it to CSV. A failure
on any page aborts the whole collection so no truncated file is written.
"""

from __future__ import annotations

import csv
import io
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, Sequence

from vibecheck_cli.core.scoring import format_score, score_for_status
from vibecheck_cli.integrations.errors import ApiError
from vibecheck_cli.models.filters import RunsFilters
from vibecheck_cli.models.run_record import RunRecord
from vibecheck_cli.utils.logging import get_logger
from vibecheck_cli.utils.protocols import RunsSource

logger = get_logger(__name__)

CSV_HEADER = [
    "id",
    "suite_name",
    "model",
    "status",
    "evals_passed",
    "total_evals",
    "success_percentage",
    "duration_seconds",
    "cost_usd",
    "score",
    "created_at",
]

DEFAULT_CSV_PATH = "eval-runs.csv"

PageFetcher = Callable[[int, int], Awaitable[tuple[list[RunRecord], bool]]]


class SortKey(str, Enum):
	"""Client-side sort orders for the runs listing."""

	CREATED = "created"
	SUCCESS = "success"
	COST = "cost"
	TIME = "time"
	SCORE = "price-performance"


def run_score(run: RunRecord) -> float | None:
	"""Composite score for a listing row, None when not applicable."""
	return score_for_status(run.status, run.success_percentage,
	                        run.total_cost, run.duration_seconds)


def _sort_value(run: RunRecord, key: SortKey) -> float | str | None:
	if key is SortKey.CREATED:
		return run.created_at or None
	if key is SortKey.SUCCESS:
		return run.success_percentage
	if key is SortKey.COST:
		return run.total_cost
	if key is SortKey.TIME:
		return run.duration_seconds
	return run_score(run)


# Newest, most successful and best-scoring first; cheapest and fastest first.
_DESCENDING = {SortKey.CREATED, SortKey.SUCCESS, SortKey.SCORE}


def sort_runs(runs: Sequence[RunRecord],
              key: SortKey | str = SortKey.CREATED) -> list[RunRecord]:
	"""Stable sort; rows lacking a value for ``key`` go last in input order."""
	key = SortKey(key)
	ranked: list[RunRecord] = []
	missing: list[RunRecord] = []
	for run in runs:
		(missing if _sort_value(run, key) is None else ranked).append(run)
	ranked.sort(key=lambda r: _sort_value(r, key),
	            reverse=key in _DESCENDING)
	return ranked + missing


async def collect_all(
    fetch_page: PageFetcher,
    limit: int = 100,
    offset: int = 0,
) -> list[RunRecord]:
	"""Fetch pages sequentially while ``has_more`` is set.

	Offsets advance by the number of rows actually returned. An empty
	page that still claims more rows is treated as an API error rather
	than looping forever.
	"""
	collected: list[RunRecord] = []
	while True:
		rows, has_more = await fetch_page(limit, offset)
		logger.debug("export page offset=%d rows=%d has_more=%s", offset,
		             len(rows), has_more)
		collected.extend(rows)
		if not has_more:
			return collected
		if not rows:
			raise ApiError(
			    f"listing reported more rows after offset {offset} "
			    "but returned an empty page")
		offset += len(rows)


def listing_fetcher(source: RunsSource,
                    filters: RunsFilters | None = None) -> PageFetcher:
	"""Adapt an ApiClient-like source to the ``(limit, offset)`` fetcher."""
	filters = filters or RunsFilters()

	async def fetch(limit: int, offset: int) -> tuple[list[RunRecord], bool]:
		page = await source.list_runs(filters.to_query_params(limit, offset))
		return page.runs, page.pagination.has_more

	return fetch


async def collect_sorted(
    fetch_page: PageFetcher,
    sort_key: SortKey | str = SortKey.CREATED,
    limit: int = 100,
    offset: int = 0,
) -> list[RunRecord]:
	"""Collect every page, then sort the complete set once."""
	runs = await collect_all(fetch_page, limit=limit, offset=offset)
	return sort_runs(runs, sort_key)


def _fmt(v: float | int | None) -> str:
	"""Plain decimal text with every digit kept; no exponent notation."""
	if v is None:
		return ""
	if isinstance(v, float):
		return format(Decimal(repr(v)), "f")
	return str(v)


def csv_row(run: RunRecord) -> list[str]:
	score = run_score(run)
	return [
	    run.id,
	    run.suite_name,
	    run.model,
	    run.status,
	    _fmt(run.evals_passed),
	    _fmt(run.results_count),
	    _fmt(run.success_percentage),
	    _fmt(run.duration_seconds),
	    _fmt(run.total_cost),
	    "" if score is None else format_score(score),
	    run.created_at or "",
	]


def render_csv(runs: Sequence[RunRecord]) -> str:
	"""Serialize runs with the fixed header; fields are quoted as needed."""
	buf = io.StringIO()
	writer = csv.writer(buf, lineterminator="\n")
	writer.writerow(CSV_HEADER)
	for run in runs:
		writer.writerow(csv_row(run))
	return buf.getvalue()


def write_csv(path: Path | str, runs: Sequence[RunRecord]) -> Path:
	"""Write the CSV in one call and return its path."""
	path = Path(path)
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(render_csv(runs), encoding="utf-8")
	return path


async def export_runs(
    source: RunsSource,
    path: Path | str = DEFAULT_CSV_PATH,
    filters: RunsFilters | None = None,
    sort_key: SortKey | str = SortKey.CREATED,
    page_size: int = 100,
) -> tuple[Path, int]:
	"""Collect, sort and write all runs matching ``filters``.

	Returns:
		The written path and the number of rows exported.
	"""
	runs = await collect_sorted(listing_fetcher(source, filters),
	                            sort_key=sort_key, limit=page_size)
	written = write_csv(path, runs)
	logger.info("exported %d runs to %s", len(runs), written)
	return written, len(runs)


__all__ = [
    "CSV_HEADER",
    "DEFAULT_CSV_PATH",
    "SortKey",
    "run_score",
    "sort_runs",
    "collect_all",
    "collect_sorted",
    "listing_fetcher",
    "csv_row",
    "render_csv",
    "write_csv",
    "export_runs",
]
