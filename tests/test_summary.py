"""Tests for SummaryData model and build_summary_data extraction."""

import pytest

from vibecheck_cli.core.scoring import STRICT_TIERS
from vibecheck_cli.models.item_result import ItemResult
from vibecheck_cli.models.job import JobStatus
from vibecheck_cli.models.summary import (
    ItemLine,
    build_summary_data,
    sum_item_costs,
)


def _item(name: str, passed: bool, checks: list[bool] | None = None,
          cost: float | None = None) -> ItemResult:
	"""Helper to build an ItemResult with flat checks."""
	return ItemResult.model_validate({
	    "name": name,
	    "passed": passed,
	    "cost": cost,
	    "checkResults": [{
	        "type": "match",
	        "passed": p
	    } for p in (checks or [])],
	})


def test_summary_worked_example():
	results = [
	    _item("a", True, [True]),
	    _item("b", True, [True, True]),
	    _item("c", False, [False, True]),
	]
	data = build_summary_data(results, status=JobStatus.COMPLETED,
	                          total_time_ms=2500, total_cost=0.000150)
	assert data.passed_items == 2
	assert data.total_items == 3
	assert data.pass_rate_text == "2/3 (66.7%)"
	assert data.tier == "sketchy"
	assert data.acceptable is False
	assert data.all_passed is False
	assert data.score == pytest.approx(166.75)
	assert data.total_time_seconds == pytest.approx(2.5)


def test_item_flag_decides_pass_not_checks():
	"""An item passing overall counts as passed even if a check failed."""
	data = build_summary_data([_item("a", True, [False])])
	assert data.passed_items == 1
	assert data.items[0].checks_failed == 1


def test_empty_results_zero_rate():
	data = build_summary_data([])
	assert data.pass_rate == 0.0
	assert data.pass_rate_text == "0/0 (0.0%)"
	assert data.tier == "bad"


def test_timed_out_has_no_score():
	data = build_summary_data([_item("a", True)], status=JobStatus.TIMED_OUT,
	                          total_time_ms=1000, total_cost=0.01)
	assert data.score is None
	assert data.tier == "good"


def test_strict_policy_changes_tier():
	results = [_item(str(i), i < 9) for i in range(10)]
	data = build_summary_data(results, tier_policy=STRICT_TIERS)
	assert data.pass_rate == pytest.approx(90.0)
	assert data.tier == "sketchy"
	assert not data.acceptable


def test_cost_summed_from_items_when_total_missing():
	results = [_item("a", True, cost=0.001), _item("b", True, cost=0.002)]
	assert sum_item_costs(results) == pytest.approx(0.003)
	data = build_summary_data(results, total_time_ms=1000)
	assert data.total_cost == pytest.approx(0.003)
	assert data.score is not None


def test_no_costs_means_no_score():
	assert sum_item_costs([_item("a", True)]) is None
	data = build_summary_data([_item("a", True)], total_time_ms=1000)
	assert data.score is None


def test_item_line_bar():
	line = ItemLine(name="x", passed=False, checks_passed=3, checks_failed=2)
	assert line.bar == "--|+++"
	assert ItemLine(name="y", passed=True).bar == "|"
