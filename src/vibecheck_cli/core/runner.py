"""
Command orchestration.

Glues configuration, the API client, the poll loop, the export
collector and run log persistence together for each CLI command.
Every function accepts an optional pre-built client so tests can
inject one backed by a mock transport.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from vibecheck_cli.core.export import (
    DEFAULT_CSV_PATH,
    SortKey,
    export_runs,
    sort_runs,
)
from vibecheck_cli.core.poller import JobOutcome, SleepFn, poll_job
from vibecheck_cli.core.scoring import get_tier_policy
from vibecheck_cli.integrations.api import ApiClient
from vibecheck_cli.integrations.errors import ConflictError, NotFoundError
from vibecheck_cli.loaders.suite import load_suite
from vibecheck_cli.models.config import Config
from vibecheck_cli.models.filters import RunsFilters
from vibecheck_cli.models.run_params import RunParams
from vibecheck_cli.models.run_record import RunRecord, RunsPage
from vibecheck_cli.ui.reporting import write_run_output
from vibecheck_cli.utils.logging import get_logger, mask_key
from vibecheck_cli.utils.protocols import PollObserver

logger = get_logger(__name__)


def create_api_client(config: Config) -> ApiClient:
	"""Build an ApiClient from configuration."""
	logger.debug("api client url=%s key=%s", config.api_url,
	             mask_key(config.api_key))
	return ApiClient(config.api_url, config.api_key,
	                 timeout=config.request_timeout_seconds)


@asynccontextmanager
async def _client_scope(config: Config,
                        client: ApiClient | None) -> AsyncIterator[ApiClient]:
	# Injected clients are owned by the caller and left open.
	if client is not None:
		yield client
		return
	async with create_api_client(config) as owned:
		yield owned


def _persist(config: Config, outcome: JobOutcome) -> Path | None:
	if not config.save_output:
		return None
	path = write_run_output(
	    config.output_path,
	    outcome.run_id,
	    outcome.results,
	    summary=outcome.summary,
	    yaml_content=outcome.yaml_content,
	    error_message=outcome.error_message,
	)
	logger.info("run log written to %s", path)
	return path


async def watch_run(
    config: Config,
    run_id: str,
    observer: PollObserver,
    yaml_content: str | None = None,
    client: ApiClient | None = None,
    sleep: SleepFn = asyncio.sleep,
) -> tuple[JobOutcome, Path | None]:
	"""
	Poll an existing job to completion and save its run log.

	Parameters:
		config: Application configuration.
		run_id: Job identifier.
		observer: Receives poll events.
		yaml_content: Suite YAML to embed in the run log.
		client: Optional pre-built API client.
		sleep: Awaitable delay between polls.

	Returns:
		The job outcome and the run log path (None when saving is off).
	"""
	policy = get_tier_policy(config.pass_rate_tiers)
	logger.info("watching run %s (interval=%sms, tiers=%s)", run_id,
	            config.poll_interval_ms, policy.name)
	async with _client_scope(config, client) as api:
		outcome = await poll_job(
		    api,
		    run_id,
		    observer,
		    interval_seconds=config.poll_interval_seconds,
		    tier_policy=policy,
		    sleep=sleep,
		)
	outcome.yaml_content = yaml_content
	return outcome, _persist(config, outcome)


async def submit_and_watch(
    config: Config,
    run_params: RunParams,
    observer: PollObserver,
    client: ApiClient | None = None,
    sleep: SleepFn = asyncio.sleep,
) -> tuple[JobOutcome, Path | None]:
	"""
	Load a suite file, submit it, and watch the resulting job.

	Parameters:
		config: Application configuration.
		run_params: Validated parameters; ``file`` is required.
		observer: Receives poll events.
		client: Optional pre-built API client.
		sleep: Awaitable delay between polls.

	Returns:
		The job outcome and the run log path.
	"""
	if not run_params.file:
		raise ValueError("run_params.file is required")
	suite, yaml_text = load_suite(run_params.file)
	async with _client_scope(config, client) as api:
		run_id = await api.submit_run(suite, yaml_text)
		logger.info("submitted %s as run %s", run_params.file, run_id)
		return await watch_run(config, run_id, observer,
		                       yaml_content=yaml_text, client=api,
		                       sleep=sleep)


async def list_runs(
    config: Config,
    filters: RunsFilters | None = None,
    limit: int = 50,
    offset: int = 0,
    sort_key: SortKey | str = SortKey.CREATED,
    client: ApiClient | None = None,
) -> RunsPage:
	"""Fetch one page of runs and sort it client-side."""
	filters = filters or RunsFilters()
	async with _client_scope(config, client) as api:
		page = await api.list_runs(filters.to_query_params(limit, offset))
	page.runs = sort_runs(page.runs, sort_key)
	return page


async def export_all_runs(
    config: Config,
    filters: RunsFilters | None = None,
    sort_key: SortKey | str = SortKey.CREATED,
    path: Path | str = DEFAULT_CSV_PATH,
    client: ApiClient | None = None,
) -> tuple[Path, int]:
	"""Collect every matching run across pages and write them as CSV."""
	async with _client_scope(config, client) as api:
		return await export_runs(api, path, filters=filters,
		                         sort_key=sort_key,
		                         page_size=config.export_page_size)


async def get_run(config: Config, run_id: str,
                  client: ApiClient | None = None) -> RunRecord:
	"""Fetch one run with its item results."""
	async with _client_scope(config, client) as api:
		return await api.get_run(run_id)


async def stop_run(config: Config, run_id: str,
                   client: ApiClient | None = None) -> None:
	"""
	Cancel a queued run.

	Raises:
		NotFoundError: The run does not exist for this key.
		ConflictError: The run is no longer queued.
	"""
	async with _client_scope(config, client) as api:
		try:
			await api.cancel_run(run_id)
		except NotFoundError as exc:
			raise NotFoundError(
			    f'Run "{run_id}" not found',
			    hint=("The run may not exist or may not belong to your "
			          "organization.")) from exc
		except ConflictError as exc:
			raise ConflictError(
			    f'Run "{run_id}" cannot be cancelled',
			    hint=("Only queued runs can be cancelled. This run may "
			          "already be completed, running, or cancelled.")) from exc
	logger.info("run %s cancelled", run_id)


__all__ = [
    "create_api_client",
    "watch_run",
    "submit_and_watch",
    "list_runs",
    "export_all_runs",
    "get_run",
    "stop_run",
]
