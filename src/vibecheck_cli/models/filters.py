"""
Runs listing filters.

Maps the user-facing filter options of ``runs list`` onto the query
parameter syntax of the listing endpoint (``field__gte`` and friends).
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


def normalize_date(value: str, end_of_day: bool = False) -> str:
	"""Expand a bare ``YYYY-MM-DD`` date to a full ISO timestamp.

	Values that already carry a time component are returned unchanged.
	"From" bounds start at midnight, "to" bounds end at 23:59:59.
	"""
	if "T" in value:
		return value
	return f"{value}T23:59:59Z" if end_of_day else f"{value}T00:00:00Z"


def _num(v: float) -> str:
	# 5.0 -> "5", 0.5 -> "0.5"
	return f"{v:g}"


class RunsFilters(BaseModel):
	"""Optional filters for the runs listing."""

	status: Optional[str] = None
	status_ne: Optional[str] = None
	model: Optional[str] = None
	model_like: Optional[str] = None
	suite: Optional[str] = Field(default=None,
	                             description="Maps to suite_name")
	min_cost: Optional[float] = None
	max_cost: Optional[float] = None
	min_success: Optional[float] = None
	max_success: Optional[float] = None
	date_from: Optional[str] = None
	date_to: Optional[str] = None
	completed_from: Optional[str] = None
	completed_to: Optional[str] = None
	min_duration: Optional[float] = None
	max_duration: Optional[float] = None

	def to_query_params(self, limit: int | None = None,
	                    offset: int | None = None) -> dict[str, str]:
		"""Build the query parameter mapping for ``GET /api/runs``.

		A comma-separated ``status`` is passed through unchanged and
		interpreted by the service as an IN filter.
		"""
		params: dict[str, str] = {}
		if self.status:
			params["status"] = self.status
		if self.status_ne:
			params["status__ne"] = self.status_ne
		if self.model:
			params["model"] = self.model
		if self.model_like:
			params["model__like"] = self.model_like
		if self.suite:
			params["suite_name"] = self.suite

		ranges = [
		    ("total_cost", self.min_cost, self.max_cost),
		    ("success_percentage", self.min_success, self.max_success),
		    ("duration_seconds", self.min_duration, self.max_duration),
		]
		for column, low, high in ranges:
			if low is not None:
				params[f"{column}__gte"] = _num(low)
			if high is not None:
				params[f"{column}__lte"] = _num(high)

		dates = [
		    ("created_at", self.date_from, self.date_to),
		    ("completed_at", self.completed_from, self.completed_to),
		]
		for column, start, end in dates:
			if start:
				params[f"{column}__gte"] = normalize_date(start)
			if end:
				params[f"{column}__lte"] = normalize_date(end, end_of_day=True)

		if limit is not None:
			params["limit"] = str(limit)
		if offset is not None:
			params["offset"] = str(offset)
		return params


__all__ = ["RunsFilters", "normalize_date"]
