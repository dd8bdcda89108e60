import pytest

from vibecheck_cli.core.scoring import (
    LENIENT_TIERS,
    STRICT_TIERS,
    Tier,
    format_pass_rate,
    format_score,
    get_tier_policy,
    pass_rate,
    price_performance_score,
    score_for_status,
)
from vibecheck_cli.models.job import JobStatus


def test_pass_rate_zero_total_is_zero():
	assert pass_rate(0, 0) == 0.0
	assert format_pass_rate(0, 0) == "0/0 (0.0%)"


def test_pass_rate_format_one_decimal():
	assert format_pass_rate(2, 3) == "2/3 (66.7%)"


@pytest.mark.parametrize("rate,tier", [
    (100.0, Tier.GOOD),
    (80.0, Tier.GOOD),
    (79.9, Tier.SKETCHY),
    (50.0, Tier.SKETCHY),
    (49.9, Tier.BAD),
    (0.0, Tier.BAD),
])
def test_lenient_tier_boundaries(rate, tier):
	assert LENIENT_TIERS.tier_for(rate) is tier


@pytest.mark.parametrize("rate,tier", [
    (100.0, Tier.GOOD),
    (99.9, Tier.SKETCHY),
    (80.0, Tier.SKETCHY),
    (79.9, Tier.BAD),
])
def test_strict_tier_boundaries(rate, tier):
	assert STRICT_TIERS.tier_for(rate) is tier


def test_only_top_tier_is_acceptable():
	assert LENIENT_TIERS.is_acceptable(85.0)
	assert not LENIENT_TIERS.is_acceptable(66.7)


def test_get_tier_policy():
	assert get_tier_policy(None) is LENIENT_TIERS
	assert get_tier_policy("STRICT") is STRICT_TIERS
	with pytest.raises(ValueError):
		get_tier_policy("loose")


def test_score_matches_worked_example():
	assert price_performance_score(66.7, 0.000150,
	                               2.5) == pytest.approx(166.75)


def test_score_missing_duration_counts_as_zero():
	assert price_performance_score(50.0, 0.001) == pytest.approx(50.0)


@pytest.mark.parametrize("success,cost", [
    (50.0, None),
    (50.0, 0.0),
    (50.0, -1.0),
    (None, 0.01),
    (101.0, 0.01),
    (-1.0, 0.01),
])
def test_score_not_applicable(success, cost):
	assert price_performance_score(success, cost, 1.0) is None


def test_score_gated_on_status():
	assert score_for_status("completed", 100.0, 0.001, 0) is not None
	assert score_for_status(JobStatus.PARTIAL_FAILURE, 100.0, 0.001,
	                        0) is not None
	assert score_for_status("timed_out", 100.0, 0.001, 0) is None
	assert score_for_status("failed", 100.0, 0.001, 0) is None
	assert score_for_status("bogus", 100.0, 0.001, 0) is None


def test_format_score():
	assert format_score(None) == "N/A"
	assert format_score(166.749) == "166.75"
