from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_core.core_schema import ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

USER_CONFIG_DIR = Path.home() / ".vibecheck"
USER_ENV_FILE = USER_CONFIG_DIR / ".env"


def load_env(env_file: str | Path | None = None,
             user_env_file: str | Path | None = USER_ENV_FILE) -> None:
	"""Load environment variables from `.env` files if present.

	The local file is read first, then the per-user credential file.
	Variables already set in the process environment always win.
	"""
	env_path = Path(env_file) if env_file else Path(".env")
	if env_path.exists():
		load_dotenv(env_path)
	if user_env_file and Path(user_env_file).exists():
		load_dotenv(user_env_file)


class Config(BaseSettings):
	"""Runtime configuration loaded from environment variables."""

	model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

	api_key: str | None = Field(
	    default=None,
	    alias="VIBECHECK_API_KEY",
	    description="API key sent as a bearer token",
	)
	api_url: str = Field(
	    "http://localhost:3000",
	    alias="VIBECHECK_URL",
	    description="Base URL of the scoring service",
	)
	poll_interval_ms: int = Field(
	    1000,
	    alias="POLL_INTERVAL_MS",
	    description="Delay between status polls in milliseconds",
	)
	request_timeout_seconds: float = Field(
	    30,
	    alias="REQUEST_TIMEOUT_SECONDS",
	    description="Timeout for a single HTTP request",
	)
	pass_rate_tiers: Literal["lenient", "strict"] = Field(
	    "lenient",
	    alias="PASS_RATE_TIERS",
	    description="Tier policy: lenient (>=80/>=50) or strict (100/>=80)",
	)
	output_dir: str = Field(
	    str(USER_CONFIG_DIR / "runs"),
	    alias="VIBECHECK_OUTPUT_DIR",
	    description="Directory for per-run output logs",
	)
	save_output: bool = Field(
	    True,
	    alias="SAVE_OUTPUT",
	    description="Write a run log after each watched run",
	)
	export_page_size: int = Field(
	    100,
	    alias="EXPORT_PAGE_SIZE",
	    description="Page size used when exporting all runs",
	)
	log_level: str = Field("warning", alias="LOG_LEVEL",
	                       description="Log level")

	@field_validator("api_url", mode="before")
	@classmethod
	def strip_trailing_slash(cls, v: Any) -> Any:
		if isinstance(v, str):
			return v.rstrip("/")
		return v

	@field_validator("pass_rate_tiers", mode="before")
	@classmethod
	def lower_tiers(cls, v: Any) -> Any:
		if isinstance(v, str):
			return v.strip().lower()
		return v

	@field_validator("poll_interval_ms", "request_timeout_seconds",
	                 "export_page_size")
	@classmethod
	def validate_positive(cls, v: Any, info: "ValidationInfo") -> Any:
		if v is None:
			return v
		if v <= 0:
			raise ValueError(f"{info.field_name} must be > 0")
		return v

	@property
	def output_path(self) -> Path:
		"""Return output_dir as an expanded Path."""
		return Path(self.output_dir).expanduser()

	@property
	def poll_interval_seconds(self) -> float:
		return self.poll_interval_ms / 1000

	def apply_overrides(self, run_params: "RunParams") -> None:
		"""Apply CLI overrides from RunParams onto this config.

		Only non-None fields in run_params are applied, preserving
		environment-based defaults for anything the user didn't explicitly set.

		Parameters:
			run_params: Validated run parameters with optional overrides.
		"""
		_OVERRIDES: list[tuple[str, str]] = [
			("interval_ms", "poll_interval_ms"),
			("tiers", "pass_rate_tiers"),
			("output_dir", "output_dir"),
			("save_output", "save_output"),
		]
		for param_field, config_field in _OVERRIDES:
			value = getattr(run_params, param_field)
			if value is not None:
				setattr(self, config_field, value)
		if run_params.debug:
			self.log_level = "debug"


__all__ = ["Config", "load_env", "USER_CONFIG_DIR", "USER_ENV_FILE"]
