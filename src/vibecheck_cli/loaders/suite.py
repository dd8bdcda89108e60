"""
Eval suite loading.

Reads an eval suite YAML file and returns both the parsed mapping and
the raw text, since the service stores the original YAML alongside
the structured suite.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from vibecheck_cli.integrations.errors import SuiteFileError

REQUIRED_KEYS = ("metadata", "evals")


def parse_suite(text: str, source: str = "<string>") -> dict[str, Any]:
	"""
	Parse eval suite YAML text.

	Parameters:
		text: Raw YAML content.
		source: Name used in error messages.

	Returns:
		The suite mapping.

	Raises:
		SuiteFileError: If the YAML is invalid or lacks required keys.
	"""
	try:
		suite = yaml.safe_load(text)
	except yaml.YAMLError as exc:
		raise SuiteFileError(f"Invalid YAML in {source}: {exc}") from exc
	if not isinstance(suite, dict):
		raise SuiteFileError(f"{source} must contain a YAML mapping")
	missing = [k for k in REQUIRED_KEYS if k not in suite]
	if missing:
		raise SuiteFileError(
		    f"{source} is missing required section(s): {', '.join(missing)}")
	if not isinstance(suite["evals"], list) or not suite["evals"]:
		raise SuiteFileError(f"{source} must define at least one eval")
	return suite


def load_suite(path: Path | str) -> tuple[dict[str, Any], str]:
	"""
	Load an eval suite from disk.

	Parameters:
		path: Path to the YAML file.

	Returns:
		Tuple of (suite mapping, raw YAML text).

	Raises:
		SuiteFileError: If the file is missing, unreadable or malformed.
	"""
	p = Path(path)
	if not p.is_file():
		raise SuiteFileError(f"File not found: {p}")
	try:
		text = p.read_text(encoding="utf-8")
	except OSError as exc:
		raise SuiteFileError(f"Could not read {p}: {exc}") from exc
	return parse_suite(text, source=str(p)), text


__all__ = ["load_suite", "parse_suite", "REQUIRED_KEYS"]
