"""
Item result model.

Defines ItemResult, the outcome of evaluating one prompt within a job.
Accepts both the camelCase keys of the status endpoint and the
snake_case keys of the run-detail endpoint.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .check_result import CheckResult, CheckTally, count_all


class ItemResult(BaseModel):
	"""Outcome of one evaluated prompt."""

	model_config = ConfigDict(frozen=True, populate_by_name=True)

	name: str = Field(
	    "",
	    validation_alias=AliasChoices("name", "evalName", "eval_name"),
	    description="Human label for the eval",
	)
	prompt: str = Field("", description="Prompt text sent to the model")
	response: str = Field("", description="Raw model response")
	check_results: tuple[CheckResult, ...] = Field(
	    default_factory=tuple,
	    validation_alias=AliasChoices("checkResults", "check_results",
	                                  "conditionalResults"),
	    description="Top-level checks for this item",
	)
	passed: bool = Field(False, description="Overall verdict from the service")
	execution_time_ms: float | None = Field(
	    default=None,
	    validation_alias=AliasChoices("executionTimeMs", "execution_time_ms"),
	)
	cost: float | None = Field(default=None, description="Monetary cost")

	@field_validator("name", "prompt", "response", mode="before")
	@classmethod
	def none_as_blank(cls, v: Any) -> Any:
		return "" if v is None else v

	@field_validator("check_results", mode="before")
	@classmethod
	def none_as_empty(cls, v: Any) -> Any:
		return () if v is None else v

	@property
	def display_name(self) -> str:
		"""Return the eval name, or the prompt when the name is blank."""
		return self.name or self.prompt

	def tally(self) -> CheckTally:
		"""Whole-tree passed/failed count across this item's checks."""
		return count_all(self.check_results)


__all__ = ["ItemResult"]
