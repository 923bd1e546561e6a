from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Optional, Tuple

from .constants import INNER_QUIET_MAX_STACKS
from .models import Action, Attributes, Condition, CraftingEngine, Recipe

# Multiplier applied to base progress/quality when the player is below the
# recipe's job level.
LEVEL_PENALTY: float = 0.8

REFLECT_INNER_QUIET_STACKS: int = 3
MASTERS_MEND_RESTORE: int = 30
MANIPULATION_RESTORE: int = 5
TRICKS_OF_THE_TRADE_RESTORE: int = 20
TRAINED_EYE_LEVEL_GAP: int = 10


@dataclass(frozen=True)
class ActionInfo:
	"""
	Static data of one action. Efficiencies are percentages of the base
	progress/quality; 0 means the action does not touch that bar.
	"""

	level: int
	craft_points: int
	durability: int = 0
	progress: int = 0
	quality: int = 0


ACTION_INFO: Dict[Action, ActionInfo] = {
	Action.BASIC_SYNTHESIS: ActionInfo(1, 0, 10, progress=100),
	Action.BASIC_TOUCH: ActionInfo(5, 18, 10, quality=100),
	Action.MASTERS_MEND: ActionInfo(7, 88),
	Action.HASTY_TOUCH: ActionInfo(9, 0, 10, quality=100),
	Action.RAPID_SYNTHESIS: ActionInfo(9, 0, 10, progress=250),
	Action.INNER_QUIET: ActionInfo(11, 18),
	Action.OBSERVE: ActionInfo(13, 7),
	Action.TRICKS_OF_THE_TRADE: ActionInfo(13, 0),
	Action.WASTE_NOT: ActionInfo(15, 56),
	Action.VENERATION: ActionInfo(15, 18),
	Action.STANDARD_TOUCH: ActionInfo(18, 32, 10, quality=125),
	Action.GREAT_STRIDES: ActionInfo(21, 32),
	Action.INNOVATION: ActionInfo(26, 18),
	Action.NAME_OF_THE_ELEMENTS: ActionInfo(37, 30),
	Action.BRAND_OF_THE_ELEMENTS: ActionInfo(37, 6, 10, progress=100),
	Action.FINAL_APPRAISAL: ActionInfo(42, 1),
	Action.WASTE_NOT_II: ActionInfo(47, 98),
	Action.BYREGOTS_BLESSING: ActionInfo(50, 24, 10, quality=100),
	Action.PRECISE_TOUCH: ActionInfo(53, 18, 10, quality=150),
	Action.MUSCLE_MEMORY: ActionInfo(54, 6, 10, progress=300),
	Action.CAREFUL_SYNTHESIS: ActionInfo(62, 7, 10, progress=150),
	Action.PATIENT_TOUCH: ActionInfo(64, 6, 10, quality=100),
	Action.MANIPULATION: ActionInfo(65, 96),
	Action.PRUDENT_TOUCH: ActionInfo(66, 25, 5, quality=100),
	Action.FOCUSED_SYNTHESIS: ActionInfo(67, 5, 10, progress=200),
	Action.FOCUSED_TOUCH: ActionInfo(68, 18, 10, quality=150),
	Action.REFLECT: ActionInfo(69, 24, 10, quality=100),
	Action.PREPARATORY_TOUCH: ActionInfo(71, 40, 20, quality=200),
	Action.GROUNDWORK: ActionInfo(72, 18, 20, progress=300),
	Action.DELICATE_SYNTHESIS: ActionInfo(76, 32, 10, progress=100, quality=100),
	Action.INTENSIVE_SYNTHESIS: ActionInfo(78, 6, 10, progress=300),
	Action.TRAINED_EYE: ActionInfo(80, 250, 10),
}

FIRST_STEP_ONLY = frozenset({Action.MUSCLE_MEMORY, Action.REFLECT, Action.TRAINED_EYE})
GOOD_CONDITION_ONLY = frozenset({Action.PRECISE_TOUCH, Action.INTENSIVE_SYNTHESIS, Action.TRICKS_OF_THE_TRADE})
AFTER_OBSERVE_ONLY = frozenset({Action.FOCUSED_SYNTHESIS, Action.FOCUSED_TOUCH})

# action -> (buff attribute, duration in steps)
BUFF_DURATIONS: Dict[Action, Tuple[str, int]] = {
	Action.MUSCLE_MEMORY: ("muscle_memory", 5),
	Action.WASTE_NOT: ("waste_not", 4),
	Action.WASTE_NOT_II: ("waste_not", 8),
	Action.MANIPULATION: ("manipulation", 8),
	Action.VENERATION: ("veneration", 4),
	Action.GREAT_STRIDES: ("great_strides", 3),
	Action.INNOVATION: ("innovation", 4),
	Action.NAME_OF_THE_ELEMENTS: ("name_of_the_elements", 3),
	Action.FINAL_APPRAISAL: ("final_appraisal", 5),
}

TIMED_BUFFS: Tuple[str, ...] = tuple(sorted({name for name, _ in BUFF_DURATIONS.values()}))


@dataclass
class Buffs:
	"""
	Active effects. Timed buffs hold their remaining steps (0 = inactive);
	inner_quiet holds its stack count (0 = inactive).
	"""

	inner_quiet: int = 0
	muscle_memory: int = 0
	waste_not: int = 0
	manipulation: int = 0
	veneration: int = 0
	great_strides: int = 0
	innovation: int = 0
	name_of_the_elements: int = 0
	final_appraisal: int = 0
	name_of_the_elements_used: bool = False

	def tick(self) -> None:
		for name in TIMED_BUFFS:
			remaining = getattr(self, name)
			if remaining > 0:
				setattr(self, name, remaining - 1)


@dataclass
class CraftState:
	attributes: Attributes
	recipe: Recipe
	step: int = 0
	progress: int = 0
	quality: int = 0
	durability: int = 0
	craft_points: int = 0
	condition: int = Condition.NORMAL
	buffs: Buffs = field(default_factory=Buffs)
	last_action: Optional[Action] = None

	@classmethod
	def new(cls, attributes: Attributes, recipe: Recipe) -> CraftState:
		return cls(
			attributes=attributes,
			recipe=recipe,
			durability=recipe.durability,
			craft_points=attributes.craft_points,
		)

	def copy(self) -> CraftState:
		return replace(self, buffs=replace(self.buffs))

	@property
	def is_finished(self) -> bool:
		return self.progress >= self.recipe.difficulty or self.durability <= 0

	def __str__(self) -> str:
		return (
			f"Step: {self.step}, Progress: {self.progress}/{self.recipe.difficulty}, "
			f"Quality: {self.quality}/{self.recipe.quality}, "
			f"Durability: {self.durability}/{self.recipe.durability}, "
			f"CP: {self.craft_points}/{self.attributes.craft_points}"
		)


def _level_modifier(state: CraftState) -> float:
	if state.attributes.level < state.recipe.job_level:
		return LEVEL_PENALTY
	return 1.0


def base_progress(state: CraftState) -> int:
	base = state.attributes.craftsmanship * 21 // 100 + 2
	return int(base * _level_modifier(state))


def effective_control(state: CraftState) -> int:
	"""
	Control including Inner Quiet: +20% per stack above the first.
	"""
	bonus_stacks = max(state.buffs.inner_quiet - 1, 0)
	return state.attributes.control * (5 + bonus_stacks) // 5


def base_quality(state: CraftState) -> int:
	base = effective_control(state) * 35 // 100 + 35
	return int(base * _level_modifier(state))


def craft_point_cost(state: CraftState, action: Action) -> int:
	if action is Action.STANDARD_TOUCH and state.last_action is Action.BASIC_TOUCH:
		return ACTION_INFO[Action.BASIC_TOUCH].craft_points
	return ACTION_INFO[action].craft_points


def durability_cost(state: CraftState, action: Action) -> int:
	cost = ACTION_INFO[action].durability
	if state.buffs.waste_not > 0:
		return (cost + 1) // 2
	return cost


def progress_efficiency(state: CraftState, action: Action) -> int:
	efficiency = ACTION_INFO[action].progress
	level = state.attributes.level
	if action is Action.BASIC_SYNTHESIS and level >= 31:
		efficiency = 120
	elif action is Action.RAPID_SYNTHESIS and level >= 63:
		efficiency = 500
	elif action is Action.BRAND_OF_THE_ELEMENTS and state.buffs.name_of_the_elements > 0 and state.recipe.difficulty > 0:
		remaining = state.recipe.difficulty - state.progress
		# 2% per percent of progress still missing, rounded up
		efficiency += 2 * (-(-remaining * 100 // state.recipe.difficulty))
	elif action is Action.GROUNDWORK and state.durability < durability_cost(state, action):
		efficiency //= 2
	return efficiency


def quality_efficiency(state: CraftState, action: Action) -> int:
	efficiency = ACTION_INFO[action].quality
	if action is Action.BYREGOTS_BLESSING:
		efficiency += 20 * max(state.buffs.inner_quiet - 1, 0)
	return efficiency


def check_action(state: CraftState, action: Action) -> Optional[str]:
	"""
	Return why `action` cannot be used in `state`, or None when it can.
	"""
	if state.is_finished:
		return "the craft is already finished"
	info = ACTION_INFO[action]
	buffs = state.buffs
	if state.attributes.level < info.level:
		return f"requires level {info.level}"
	if state.craft_points < craft_point_cost(state, action):
		return "not enough craft points"
	if action in FIRST_STEP_ONLY and state.step != 0:
		return "only usable on the first step"
	if action is Action.TRAINED_EYE and state.attributes.level < state.recipe.job_level + TRAINED_EYE_LEVEL_GAP:
		return "recipe level is too high"
	if action in GOOD_CONDITION_ONLY and state.condition not in (Condition.GOOD, Condition.EXCELLENT):
		return "requires Good or Excellent condition"
	if action in AFTER_OBSERVE_ONLY and state.last_action is not Action.OBSERVE:
		return "requires Observe on the previous step"
	if action is Action.INNER_QUIET and buffs.inner_quiet > 0:
		return "Inner Quiet is already active"
	if action is Action.BYREGOTS_BLESSING and buffs.inner_quiet == 0:
		return "requires Inner Quiet"
	if action is Action.PRUDENT_TOUCH and buffs.waste_not > 0:
		return "cannot be used under Waste Not"
	if action is Action.NAME_OF_THE_ELEMENTS and buffs.name_of_the_elements_used:
		return "already used in this craft"
	return None


def is_action_allowed(state: CraftState, action: Action) -> bool:
	return check_action(state, action) is None


def apply_action(state: CraftState, action: Action) -> CraftState:
	"""
	Return the state after casting `action`; `state` itself is left untouched.

	Gains are computed from the buffs active before the action. Pre-existing
	timed buffs then tick down, and buffs granted by the action start ticking
	on the following step. Legality is not checked here.
	"""
	new_state = state.copy()
	buffs = new_state.buffs
	recipe = state.recipe

	new_state.craft_points -= craft_point_cost(state, action)

	efficiency = progress_efficiency(state, action)
	if efficiency > 0:
		multiplier = 100
		if state.buffs.veneration > 0:
			multiplier += 50
		if state.buffs.muscle_memory > 0:
			multiplier += 100
		progress = state.progress + base_progress(state) * efficiency * multiplier // 10000
		if state.buffs.final_appraisal > 0 and progress >= recipe.difficulty:
			progress = recipe.difficulty - 1
			buffs.final_appraisal = 0
		new_state.progress = progress
		buffs.muscle_memory = 0

	efficiency = quality_efficiency(state, action)
	if efficiency > 0:
		multiplier = 100
		if state.buffs.innovation > 0:
			multiplier += 50
		if state.buffs.great_strides > 0:
			multiplier += 100
		quality = state.quality + base_quality(state) * efficiency * multiplier // 10000
		new_state.quality = min(quality, recipe.quality)
		buffs.great_strides = 0
		if action is Action.BYREGOTS_BLESSING:
			buffs.inner_quiet = 0
		elif buffs.inner_quiet > 0:
			if action is Action.PATIENT_TOUCH:
				stacks = buffs.inner_quiet * 2
			elif action is Action.PREPARATORY_TOUCH:
				stacks = buffs.inner_quiet + 2
			else:
				stacks = buffs.inner_quiet + 1
			buffs.inner_quiet = min(stacks, INNER_QUIET_MAX_STACKS)

	if action is Action.TRAINED_EYE:
		new_state.quality = recipe.quality
	elif action is Action.REFLECT:
		buffs.inner_quiet = REFLECT_INNER_QUIET_STACKS
	elif action is Action.INNER_QUIET:
		buffs.inner_quiet = 1
	elif action is Action.TRICKS_OF_THE_TRADE:
		new_state.craft_points = min(
			new_state.craft_points + TRICKS_OF_THE_TRADE_RESTORE,
			state.attributes.craft_points,
		)
	elif action is Action.NAME_OF_THE_ELEMENTS:
		buffs.name_of_the_elements_used = True

	new_state.durability -= durability_cost(state, action)
	if action is Action.MASTERS_MEND:
		new_state.durability = min(new_state.durability + MASTERS_MEND_RESTORE, recipe.durability)
	if state.buffs.manipulation > 0 and not new_state.is_finished:
		new_state.durability = min(new_state.durability + MANIPULATION_RESTORE, recipe.durability)

	buffs.tick()
	if action in BUFF_DURATIONS:
		name, duration = BUFF_DURATIONS[action]
		setattr(buffs, name, duration)

	new_state.step += 1
	new_state.last_action = action
	return new_state


def simulate_rotation(
	attributes: Attributes,
	recipe: Recipe,
	rotation: Iterable[Action],
) -> CraftState:
	"""
	Replay a rotation from a fresh craft. Raises ValueError on the first
	action that is not allowed.
	"""
	state = CraftState.new(attributes, recipe)
	for index, action in enumerate(rotation):
		reason = check_action(state, action)
		if reason is not None:
			raise ValueError(f"{action.value} at step {index + 1} is not allowed: {reason}")
		state = apply_action(state, action)
	return state


class CraftingSimulator(CraftingEngine):
	"""
	Engine handed to the search: legality check plus pure transition.
	"""

	def is_action_allowed(self, state: CraftState, action: Action) -> bool:
		return is_action_allowed(state, action)

	def apply_action(self, state: CraftState, action: Action) -> CraftState:
		return apply_action(state, action)
