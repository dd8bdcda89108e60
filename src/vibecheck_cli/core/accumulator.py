"""
Incremental result emission.

Tracks how much of a job's item-result sequence has already been shown
and hands back only the unseen suffix on each poll tick.
"""

from __future__ import annotations

from typing import Generic, Sequence, TypeVar

from vibecheck_cli.integrations.errors import JobStateError

T = TypeVar("T")


def unseen_suffix(items: Sequence[T], seen: int) -> tuple[list[T], int]:
	"""Return ``(items[seen:], len(items))``.

	Raises JobStateError when the sequence is shorter than what has
	already been seen, since results never disappear once returned.
	"""
	if seen < 0:
		raise ValueError("seen count must be >= 0")
	if len(items) < seen:
		raise JobStateError(
		    f"result sequence shrank from {seen} to {len(items)} items")
	return list(items[seen:]), len(items)


class ResultAccumulator(Generic[T]):
	"""Holds the seen-count for one job's result sequence."""

	def __init__(self) -> None:
		self.seen = 0

	def take_new(self, items: Sequence[T]) -> list[T]:
		"""Return items not returned by an earlier call and advance."""
		new, self.seen = unseen_suffix(items, self.seen)
		return new


__all__ = ["ResultAccumulator", "unseen_suffix"]
