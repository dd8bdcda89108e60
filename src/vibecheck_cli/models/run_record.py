"""
Run listing models.

Defines the run-summary record and pagination envelope returned by the
runs listing endpoint. The service sends numeric columns as strings, so
numbers are coerced leniently and unparsable values become None.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .item_result import ItemResult


def _to_float(v: Any) -> float | None:
	if v is None or v == "":
		return None
	try:
		f = float(v)
	except (TypeError, ValueError):
		return None
	if f != f:  # NaN
		return None
	return f


class RunRecord(BaseModel):
	"""One row of the runs listing."""

	model_config = ConfigDict(populate_by_name=True)

	id: str
	suite_name: str = Field("", validation_alias=AliasChoices(
	    "suite_name", "suiteName"))
	model: str = ""
	status: str = ""
	results_count: int | None = Field(
	    default=None,
	    validation_alias=AliasChoices("results_count", "total_evals"),
	)
	evals_passed: int | None = None
	success_percentage: float | None = None
	duration_seconds: float | None = None
	total_cost: float | None = Field(
	    default=None,
	    validation_alias=AliasChoices("total_cost", "cost_usd"),
	)
	created_at: str | None = None
	completed_at: str | None = None
	results: list[ItemResult] = Field(default_factory=list)

	@field_validator("suite_name", "model", "status", mode="before")
	@classmethod
	def none_as_blank(cls, v: Any) -> Any:
		return "" if v is None else v

	@field_validator("results_count", "evals_passed", mode="before")
	@classmethod
	def coerce_int(cls, v: Any) -> int | None:
		f = _to_float(v)
		return None if f is None else int(f)

	@field_validator("success_percentage", "duration_seconds", "total_cost",
	                 mode="before")
	@classmethod
	def coerce_float(cls, v: Any) -> float | None:
		return _to_float(v)

	@field_validator("results", mode="before")
	@classmethod
	def none_as_empty(cls, v: Any) -> Any:
		return [] if v is None else v


class Pagination(BaseModel):
	"""Pagination envelope of the runs listing."""

	model_config = ConfigDict(populate_by_name=True)

	total: int = 0
	has_more: bool = Field(False,
	                       validation_alias=AliasChoices("hasMore", "has_more"))


class RunsPage(BaseModel):
	"""Payload of ``GET /api/runs``."""

	runs: list[RunRecord] = Field(default_factory=list)
	pagination: Pagination = Field(default_factory=Pagination)

	@field_validator("runs", mode="before")
	@classmethod
	def none_as_empty(cls, v: Any) -> Any:
		return [] if v is None else v

	@field_validator("pagination", mode="before")
	@classmethod
	def none_as_default(cls, v: Any) -> Any:
		return {} if v is None else v


__all__ = ["RunRecord", "Pagination", "RunsPage"]
