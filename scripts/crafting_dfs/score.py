from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering
from typing import Any, Tuple


@total_ordering
@dataclass(frozen=True, eq=False)
class Score:
	"""
	Rank of a crafting state.

	Higher quality wins; with equal quality the shorter rotation wins.
	Quality only counts once the item is finished (progress reached the
	recipe difficulty) and is capped at the recipe's maximum quality.
	"""

	quality: int
	steps: int

	@classmethod
	def from_state(cls, state: Any) -> Score:
		recipe = state.recipe
		if state.progress >= recipe.difficulty:
			quality = min(state.quality, recipe.quality)
		else:
			quality = 0
		return cls(quality=quality, steps=state.step)

	def sort_key(self) -> Tuple[int, int]:
		return self.quality, -self.steps

	def __eq__(self, other: object) -> bool:
		if not isinstance(other, Score):
			return NotImplemented
		return self.sort_key() == other.sort_key()

	def __lt__(self, other: Score) -> bool:
		if not isinstance(other, Score):
			return NotImplemented
		return self.sort_key() < other.sort_key()

	def __hash__(self) -> int:
		return hash(self.sort_key())
