from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Action(Enum):
	"""
	Crafting skills known to the simulator.

	Declaration order is the canonical order used to build action catalogs.
	"""

	MUSCLE_MEMORY = "muscle_memory"
	REFLECT = "reflect"
	TRAINED_EYE = "trained_eye"
	BASIC_SYNTHESIS = "basic_synthesis"
	RAPID_SYNTHESIS = "rapid_synthesis"
	BRAND_OF_THE_ELEMENTS = "brand_of_the_elements"
	CAREFUL_SYNTHESIS = "careful_synthesis"
	FOCUSED_SYNTHESIS = "focused_synthesis"
	GROUNDWORK = "groundwork"
	INTENSIVE_SYNTHESIS = "intensive_synthesis"
	DELICATE_SYNTHESIS = "delicate_synthesis"
	BASIC_TOUCH = "basic_touch"
	HASTY_TOUCH = "hasty_touch"
	STANDARD_TOUCH = "standard_touch"
	BYREGOTS_BLESSING = "byregots_blessing"
	PRECISE_TOUCH = "precise_touch"
	PATIENT_TOUCH = "patient_touch"
	PRUDENT_TOUCH = "prudent_touch"
	FOCUSED_TOUCH = "focused_touch"
	PREPARATORY_TOUCH = "preparatory_touch"
	TRICKS_OF_THE_TRADE = "tricks_of_the_trade"
	MASTERS_MEND = "masters_mend"
	WASTE_NOT = "waste_not"
	WASTE_NOT_II = "waste_not_ii"
	MANIPULATION = "manipulation"
	INNER_QUIET = "inner_quiet"
	VENERATION = "veneration"
	GREAT_STRIDES = "great_strides"
	INNOVATION = "innovation"
	NAME_OF_THE_ELEMENTS = "name_of_the_elements"
	OBSERVE = "observe"
	FINAL_APPRAISAL = "final_appraisal"

	@classmethod
	def from_string(cls, value: str) -> Action:
		"""
		Accepts the value slug, the member name or the spaced English name,
		case-insensitively ("groundwork", "WASTE_NOT_II", "Waste Not II").
		"""
		key = value.strip().lower().replace("'", "").replace("-", "_").replace(" ", "_")
		for action in cls:
			if action.value == key:
				return action
		raise ValueError(f"Unknown action: {value}")


class Condition:
	NORMAL = 0
	GOOD = 1
	EXCELLENT = 2
	POOR = 3


@dataclass(frozen=True)
class Attributes:
	level: int
	craftsmanship: int
	control: int
	craft_points: int

	def __post_init__(self) -> None:
		if self.level <= 0:
			raise ValueError("player level must be positive")
		for name in ("craftsmanship", "control", "craft_points"):
			if getattr(self, name) < 0:
				raise ValueError(f"{name} must be non-negative")


@dataclass(frozen=True)
class Recipe:
	"""
	Target thresholds of a craft.

	- difficulty: progress needed to finish the item.
	- quality: maximum quality; anything above it is wasted.
	- conditions_flag: bit mask of the conditions the recipe can roll.
	"""

	rlv: int
	job_level: int
	difficulty: int
	quality: int
	durability: int
	conditions_flag: int = 15

	def __post_init__(self) -> None:
		for name in ("rlv", "job_level", "difficulty", "quality", "conditions_flag"):
			if getattr(self, name) < 0:
				raise ValueError(f"recipe {name} must be non-negative")
		if self.durability <= 0:
			raise ValueError("recipe durability must be positive")


class CraftingEngine(ABC):
	"""
	Mechanics consumed by the search: a legality predicate and a pure
	transition that returns a fresh state and leaves its input untouched.
	"""

	@abstractmethod
	def is_action_allowed(self, state: Any, action: Action) -> bool:
		pass

	@abstractmethod
	def apply_action(self, state: Any, action: Action) -> Any:
		pass
