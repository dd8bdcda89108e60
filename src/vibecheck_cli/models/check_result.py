"""
Check result tree.

Defines the recursive CheckResult model returned by the scoring service
for each evaluated prompt, and the structural pass/fail tally used by
the summary renderer.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CheckNode(Protocol):
	"""Anything exposing a pass flag and a list of child nodes."""

	passed: bool
	children: Sequence["CheckNode"]


class CheckResult(BaseModel):
	"""Outcome of a single (possibly composite) check.

	Combinator checks such as ``or`` carry their operands in ``children``;
	leaf checks have an empty child list.
	"""

	model_config = ConfigDict(frozen=True, populate_by_name=True)

	type: str = Field("", description="Check type tag, e.g. match, or")
	passed: bool = Field(False, description="Verdict asserted by the service")
	message: str = Field("", description="Human-readable explanation")
	children: tuple["CheckResult", ...] = Field(
	    default_factory=tuple,
	    description="Operand results for combinator checks",
	)

	@field_validator("children", mode="before")
	@classmethod
	def none_as_empty(cls, v: Any) -> Any:
		return () if v is None else v

	@field_validator("message", "type", mode="before")
	@classmethod
	def none_as_blank(cls, v: Any) -> Any:
		return "" if v is None else v

	@property
	def is_composite(self) -> bool:
		return bool(self.children)


class CheckTally(BaseModel):
	"""Passed/failed counts over one or more check trees."""

	model_config = ConfigDict(frozen=True)

	passed: int = 0
	failed: int = 0

	@property
	def total(self) -> int:
		return self.passed + self.failed

	def __add__(self, other: "CheckTally") -> "CheckTally":
		return CheckTally(passed=self.passed + other.passed,
		                  failed=self.failed + other.failed)


def count_checks(node: CheckNode) -> CheckTally:
	"""Count a node's own verdict plus every descendant's verdict.

	A combinator is counted once for itself and again for each child,
	so composite checks weigh more in the tally. Only ``passed`` and
	``children`` are consulted; the check type is never inspected.
	"""
	tally = CheckTally(passed=1, failed=0) if node.passed else CheckTally(
	    passed=0, failed=1)
	for child in node.children:
		tally = tally + count_checks(child)
	return tally


def count_all(nodes: Sequence[CheckNode]) -> CheckTally:
	"""Sum ``count_checks`` over a list of top-level checks."""
	tally = CheckTally()
	for node in nodes:
		tally = tally + count_checks(node)
	return tally


__all__ = ["CheckNode", "CheckResult", "CheckTally", "count_checks", "count_all"]
