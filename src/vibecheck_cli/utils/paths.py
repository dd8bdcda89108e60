"""
Path safety utilities.

Keeps run log files inside the configured output directory even when a
run identifier contains path separators or traversal segments.
"""

from __future__ import annotations

from pathlib import Path

from vibecheck_cli.models.run_params import RunParams


def ensure_within(base: Path, path: Path) -> Path:
	"""
	Ensure a path is within the specified base directory.

	Parameters:
		base: The allowed base directory.
		path: The path to validate.

	Returns:
		The original path if valid.

	Raises:
		ValueError: If path escapes the base directory.
	"""
	resolved_base = base.resolve()
	resolved_path = path.resolve()
	if resolved_path == resolved_base or resolved_path.is_relative_to(
	    resolved_base):
		return path
	raise ValueError(f"Path {resolved_path} escapes base {resolved_base}")


def run_log_path(output_dir: Path | str, run_id: str) -> Path:
	"""Return ``<output_dir>/<slug>.txt`` for a run, validated to stay inside."""
	base = Path(output_dir).expanduser()
	return ensure_within(base, base / f"{RunParams.slugify(run_id)}.txt")


__all__ = ["ensure_within", "run_log_path"]
