"""
Run parameters model.

Defines validated parameters for the ``run`` and ``watch`` commands and
provides a sanitized run-id slug for safe filesystem paths.
"""

from __future__ import annotations

import re
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator
from pydantic_core.core_schema import ValidationInfo

RUN_ID_RE = re.compile(r"^[A-Za-z0-9_.-]+$")
SAFE_SLUG_RE = re.compile(r"[^A-Za-z0-9_.-]+")


class RunParams(BaseModel):
	"""Validated CLI overrides for a watched run."""

	file: Optional[str] = Field(default=None,
	                            description="Eval suite YAML path")
	run_id: Optional[str] = Field(default=None,
	                              description="Existing job identifier")
	interval_ms: Optional[int] = Field(default=None,
	                                   description="Poll interval override")
	tiers: Optional[Literal["lenient", "strict"]] = Field(
	    default=None, description="Pass-rate tier policy override")
	output_dir: Optional[str] = Field(default=None,
	                                  description="Run log directory override")
	save_output: Optional[bool] = Field(default=None,
	                                   description="Write the run log")
	debug: Optional[bool] = Field(default=None,
	                              description="Enable debug logging")

	@field_validator('run_id')
	@classmethod
	def validate_run_id(cls, v: Optional[str]) -> Optional[str]:
		if v is not None and not RUN_ID_RE.match(v):
			raise ValueError("run_id must be alnum/_.- only")
		return v

	@field_validator('interval_ms')
	@classmethod
	def validate_positive(cls, v: Optional[int],
	                      info: ValidationInfo) -> Optional[int]:
		if v is None:
			return v
		if v <= 0:
			raise ValueError(f"{info.field_name} must be > 0")
		return v

	@staticmethod
	def slugify(v: str) -> str:
		slug = SAFE_SLUG_RE.sub('_', v).strip('_')
		return slug or "default"


__all__ = ["RunParams"]
