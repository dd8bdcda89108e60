"""
Pass-rate tiering and price/performance scoring.

Pure functions shared by the live summary and the runs listing. Tier
boundaries live in named policies rather than inline numbers; the
active policy is chosen by ``Config.pass_rate_tiers``.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

from pydantic import BaseModel, ConfigDict

from vibecheck_cli.models.item_result import ItemResult
from vibecheck_cli.models.job import JobStatus, SCORE_ELIGIBLE_STATUSES

# Weight applied to total cost (USD) in the score denominator.
COST_WEIGHT = 1000.0
# Weight applied to duration (seconds) in the score denominator.
LATENCY_WEIGHT = 0.1

SCORE_FORMULA = "score = success% / (cost_usd * 1000 + duration_s * 0.1)"


class Tier(str, Enum):
	"""Qualitative bucket for a pass rate."""

	GOOD = "good"
	SKETCHY = "sketchy"
	BAD = "bad"


class TierPolicy(BaseModel):
	"""Inclusive lower bounds (in percent) for the top and middle tiers."""

	model_config = ConfigDict(frozen=True)

	name: str
	good: float
	sketchy: float

	def tier_for(self, pass_rate: float) -> Tier:
		if pass_rate >= self.good:
			return Tier.GOOD
		if pass_rate >= self.sketchy:
			return Tier.SKETCHY
		return Tier.BAD

	def is_acceptable(self, pass_rate: float) -> bool:
		"""Return True when the rate reaches the top tier."""
		return self.tier_for(pass_rate) is Tier.GOOD


LENIENT_TIERS = TierPolicy(name="lenient", good=80.0, sketchy=50.0)
STRICT_TIERS = TierPolicy(name="strict", good=100.0, sketchy=80.0)

TIER_POLICIES: dict[str, TierPolicy] = {
    LENIENT_TIERS.name: LENIENT_TIERS,
    STRICT_TIERS.name: STRICT_TIERS,
}

DEFAULT_TIER_POLICY = LENIENT_TIERS


def get_tier_policy(name: str | None) -> TierPolicy:
	"""Look up a tier policy by name, defaulting to the lenient one."""
	if not name:
		return DEFAULT_TIER_POLICY
	try:
		return TIER_POLICIES[name.lower()]
	except KeyError:
		raise ValueError(f"unknown tier policy '{name}'; expected one of: "
		                 f"{', '.join(sorted(TIER_POLICIES))}") from None


def pass_rate(passed: int, total: int) -> float:
	"""Return ``100 * passed / total``; ``0/0`` is defined as 0.0."""
	if total <= 0:
		return 0.0
	return passed / total * 100


def item_pass_counts(results: Sequence[ItemResult]) -> tuple[int, int]:
	"""Return ``(passed_items, total_items)`` from each item's own flag."""
	passed = sum(1 for r in results if r.passed)
	return passed, len(results)


def format_pass_rate(passed: int, total: int) -> str:
	"""Render ``p/t (x.x%)``."""
	return f"{passed}/{total} ({pass_rate(passed, total):.1f}%)"


def price_performance_score(
    success_percentage: float | None,
    total_cost: float | None,
    duration_seconds: float | None = None,
) -> float | None:
	"""Composite price/performance/latency score; higher is better.

	Returns None when cost is missing or not positive, or when the
	success percentage is missing or outside ``[0, 100]``. A missing
	duration counts as zero.
	"""
	if total_cost is None or total_cost <= 0:
		return None
	if success_percentage is None or not 0 <= success_percentage <= 100:
		return None
	duration = duration_seconds or 0.0
	return success_percentage / (total_cost * COST_WEIGHT +
	                             duration * LATENCY_WEIGHT)


def is_score_eligible(status: JobStatus | str | None) -> bool:
	"""Return True for statuses whose cost figures can be compared."""
	try:
		return JobStatus(status) in SCORE_ELIGIBLE_STATUSES
	except ValueError:
		return False


def score_for_status(
    status: JobStatus | str | None,
    success_percentage: float | None,
    total_cost: float | None,
    duration_seconds: float | None = None,
) -> float | None:
	"""Score gated on status eligibility; None reads as "not applicable"."""
	if not is_score_eligible(status):
		return None
	return price_performance_score(success_percentage, total_cost,
	                               duration_seconds)


def format_score(score: float | None) -> str:
	return "N/A" if score is None else f"{score:.2f}"


__all__ = [
    "COST_WEIGHT",
    "LATENCY_WEIGHT",
    "SCORE_FORMULA",
    "Tier",
    "TierPolicy",
    "LENIENT_TIERS",
    "STRICT_TIERS",
    "TIER_POLICIES",
    "DEFAULT_TIER_POLICY",
    "get_tier_policy",
    "pass_rate",
    "item_pass_counts",
    "format_pass_rate",
    "price_performance_score",
    "is_score_eligible",
    "score_for_status",
    "format_score",
]
