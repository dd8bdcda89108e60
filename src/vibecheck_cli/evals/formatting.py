"""
Presentation helpers for check results.

Each check type gets a short human-readable detail derived from its
message (a matched snippet, a similarity percentage, a token count).
Formatting never affects counting, and any message that does not parse
falls back to a truncated copy of the raw text.
"""

from __future__ import annotations

import re

from pydantic import BaseModel

from vibecheck_cli.models.check_result import CheckResult

# Check type tags, current and legacy schema.
MATCH_TYPES = frozenset({"match", "not_match", "string_contains"})
SEMANTIC_TYPES = frozenset({"semantic", "semantic_similarity"})
TOKEN_TYPES = frozenset({"min_tokens", "max_tokens", "token_length"})
JUDGE_TYPES = frozenset({"llm_judge"})

# 'contains "foo"', 'found "foo"', 'Pattern "*foo*" found'
QUOTED_TARGET_RES = [
    re.compile(r"contains?\s+['\"](.+?)['\"]", re.IGNORECASE),
    re.compile(r"found\s+['\"](.+?)['\"]", re.IGNORECASE),
    re.compile(r"pattern\s+['\"](.+?)['\"]", re.IGNORECASE),
]
SIMILARITY_RE = re.compile(r"similarity[:\s]+(\d+(?:\.\d+)?)", re.IGNORECASE)
TOKEN_COUNT_RE = re.compile(r"(\d+)\s+tokens?", re.IGNORECASE)
TOKEN_COUNT_ALT_RE = re.compile(r"token count[:\s]+(\d+)", re.IGNORECASE)
MIN_RE = re.compile(r"min[:\s]+(\d+)", re.IGNORECASE)
MAX_RE = re.compile(r"max[:\s]+(\d+)", re.IGNORECASE)

SNIPPET_CONTEXT = 10


class CheckDetail(BaseModel):
	"""Display text for one check, with an optional highlighted span."""

	text: str
	highlight: str | None = None


def truncate_text(text: str, max_length: int) -> str:
	"""Cut ``text`` to ``max_length`` characters, ending in ``...``."""
	if len(text) <= max_length:
		return text
	return text[:max(0, max_length - 3)] + "..."


def _quoted_target(message: str) -> str | None:
	for pattern in QUOTED_TARGET_RES:
		m = pattern.search(message)
		if m:
			return m.group(1)
	return None


def _format_match(message: str, response: str) -> CheckDetail:
	target = _quoted_target(message)
	if not target:
		return CheckDetail(text=truncate_text(message, 60))
	needle = target.strip("*")
	index = response.lower().find(needle.lower()) if needle else -1
	if index == -1:
		return CheckDetail(text=truncate_text(target, 50))
	start = max(0, index - SNIPPET_CONTEXT)
	end = min(len(response), index + len(needle) + SNIPPET_CONTEXT)
	return CheckDetail(
	    text=truncate_text(response[start:end], 50),
	    highlight=response[index:index + len(needle)],
	)


def _format_similarity(message: str) -> CheckDetail:
	m = SIMILARITY_RE.search(message)
	if not m:
		return CheckDetail(text=truncate_text(message, 60))
	similarity = float(m.group(1))
	percent = similarity * 100 if similarity <= 1 else similarity
	return CheckDetail(text=f"{percent:.0f}%")


def _format_tokens(message: str) -> CheckDetail:
	m = TOKEN_COUNT_ALT_RE.search(message) or TOKEN_COUNT_RE.search(message)
	if not m:
		return CheckDetail(text=truncate_text(message, 60))
	count = m.group(1)
	low = MIN_RE.search(message)
	high = MAX_RE.search(message)
	bounds = []
	if low:
		bounds.append(f"min: {low.group(1)}")
	if high:
		bounds.append(f"max: {high.group(1)}")
	if bounds:
		return CheckDetail(text=f"Token count {count} ({', '.join(bounds)})")
	return CheckDetail(text=f"Token count {count}")


def format_check_detail(check: CheckResult, response: str = "") -> CheckDetail:
	"""Build the display detail for a check from its type and message."""
	message = check.message or ""
	kind = check.type
	if kind in MATCH_TYPES:
		return _format_match(message, response or "")
	if kind in SEMANTIC_TYPES:
		return _format_similarity(message)
	if kind in JUDGE_TYPES:
		return CheckDetail(
		    text="PASS" if check.passed else truncate_text(message, 80))
	if kind in TOKEN_TYPES:
		return _format_tokens(message)
	return CheckDetail(text=truncate_text(message, 60))


__all__ = [
    "CheckDetail",
    "truncate_text",
    "format_check_detail",
    "MATCH_TYPES",
    "SEMANTIC_TYPES",
    "TOKEN_TYPES",
    "JUDGE_TYPES",
]
