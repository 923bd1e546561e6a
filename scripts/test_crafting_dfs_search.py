from __future__ import annotations

import itertools
from dataclasses import dataclass, replace
from typing import Dict, Tuple

import pytest

from crafting_dfs.constants import DEFAULT_ACTION_CATALOG
from crafting_dfs.models import Action, Attributes, CraftingEngine, Recipe
from crafting_dfs.score import Score
from crafting_dfs.search import (
	SearchConfig,
	SearchContext,
	_visit,
	dfs_search,
	run_search,
)
from crafting_dfs.simulator import CraftState, CraftingSimulator

SYNTH = Action.BASIC_SYNTHESIS
TOUCH = Action.BASIC_TOUCH


@dataclass(frozen=True)
class ToyRecipe:
	difficulty: int
	quality: int


@dataclass(frozen=True)
class ToyState:
	recipe: ToyRecipe
	progress: int = 0
	quality: int = 0
	step: int = 0


class ToyEngine(CraftingEngine):
	"""
	Each action adds fixed (progress, quality). Actions are legal until the
	item is finished, unless `always_legal` is set.
	"""

	def __init__(self, effects: Dict[Action, Tuple[int, int]], always_legal: bool = False):
		self.effects = effects
		self.always_legal = always_legal

	def is_action_allowed(self, state, action):
		if action not in self.effects:
			return False
		return self.always_legal or state.progress < state.recipe.difficulty

	def apply_action(self, state, action):
		progress, quality = self.effects[action]
		return replace(
			state,
			progress=state.progress + progress,
			quality=state.quality + quality,
			step=state.step + 1,
		)


class ExplodingEngine(ToyEngine):
	def apply_action(self, state, action):
		if state.step >= 1:
			raise RuntimeError("boom")
		return super().apply_action(state, action)


TOY_EFFECTS = {SYNTH: (2, 0), TOUCH: (0, 3)}


def _brute_force_best(state, engine, catalog, max_depth):
	best = Score.from_state(state)
	for length in range(1, max_depth + 1):
		for sequence in itertools.product(catalog, repeat=length):
			current = state
			for action in sequence:
				if not engine.is_action_allowed(current, action):
					break
				current = engine.apply_action(current, action)
			else:
				best = max(best, Score.from_state(current))
	return best


@pytest.fixture
def toy_state():
	return ToyState(recipe=ToyRecipe(difficulty=4, quality=9))


@pytest.fixture
def craft_state():
	attributes = Attributes(level=80, craftsmanship=2000, control=2000, craft_points=500)
	recipe = Recipe(rlv=430, job_level=80, difficulty=1000, quality=2000, durability=40)
	return CraftState.new(attributes, recipe)


def test_depth_zero_returns_baseline(toy_state):
	rotation, score = dfs_search(toy_state, 0, catalog=(SYNTH, TOUCH), engine=ToyEngine(TOY_EFFECTS))

	assert rotation == []
	assert score == Score.from_state(toy_state)


def test_first_discovered_best_rotation(toy_state):
	engine = ToyEngine(TOY_EFFECTS)

	rotation, score = dfs_search(toy_state, 4, catalog=(SYNTH, TOUCH), engine=engine)
	assert rotation == [SYNTH, TOUCH, TOUCH, SYNTH]
	assert score == Score(quality=6, steps=4)

	rotation, score = dfs_search(toy_state, 4, catalog=(TOUCH, SYNTH), engine=engine)
	assert rotation == [TOUCH, TOUCH, SYNTH, SYNTH]
	assert score == Score(quality=6, steps=4)

	rotation, score = dfs_search(toy_state, 5, catalog=(SYNTH, TOUCH), engine=engine)
	assert rotation == [SYNTH, TOUCH, TOUCH, TOUCH, SYNTH]
	assert score == Score(quality=9, steps=5)


@pytest.mark.parametrize("max_depth", [0, 1, 2, 3, 4, 5, 6])
def test_search_is_exhaustive_and_within_depth(toy_state, max_depth):
	engine = ToyEngine(TOY_EFFECTS)
	catalog = (SYNTH, TOUCH)

	rotation, score = dfs_search(toy_state, max_depth, catalog=catalog, engine=engine)

	assert score == _brute_force_best(toy_state, engine, catalog, max_depth)
	assert len(rotation) <= max_depth


def test_pruning_skips_subtrees_but_keeps_score():
	state = ToyState(recipe=ToyRecipe(difficulty=4, quality=3))
	engine = ToyEngine(TOY_EFFECTS)

	pruned = run_search(state, 5, catalog=(SYNTH, TOUCH), engine=engine, prune=True)
	full = run_search(state, 5, catalog=(SYNTH, TOUCH), engine=engine, prune=False)

	assert pruned.best_score == full.best_score == Score(quality=3, steps=3)
	assert pruned.best_rotation == full.best_rotation == [SYNTH, TOUCH, SYNTH]
	assert pruned.nodes_visited < full.nodes_visited


def test_quality_without_progress_never_counts():
	state = ToyState(recipe=ToyRecipe(difficulty=10, quality=100))
	engine = ToyEngine({TOUCH: (0, 7)}, always_legal=True)

	for max_depth in range(5):
		rotation, score = dfs_search(state, max_depth, catalog=(TOUCH,), engine=engine)
		assert rotation == []
		assert score == Score(quality=0, steps=0)


def test_recipe_already_satisfied(craft_state):
	recipe = Recipe(rlv=1, job_level=1, difficulty=0, quality=0, durability=40)
	state = CraftState.new(craft_state.attributes, recipe)

	rotation, score = dfs_search(state, 4)

	assert rotation == []
	assert score == Score(quality=0, steps=0)


def test_stack_is_empty_after_search(craft_state):
	ctx = run_search(craft_state, 2)

	assert ctx.stack == []
	assert ctx.nodes_visited > 1


def test_stack_unwinds_on_error(toy_state):
	ctx = SearchContext.for_root(toy_state, 3, (SYNTH, TOUCH), ExplodingEngine(TOY_EFFECTS), prune=True)

	with pytest.raises(RuntimeError):
		_visit(ctx, toy_state, 0)

	assert ctx.stack == []


def test_real_craft_best_rotation(craft_state):
	rotation, score = dfs_search(craft_state, 2)

	assert rotation == [Action.PREPARATORY_TOUCH, Action.GROUNDWORK]
	assert score == Score(quality=1470, steps=2)


def test_real_craft_exhaustive_deterministic_and_pruning_sound(craft_state):
	engine = CraftingSimulator()

	first = dfs_search(craft_state, 3, engine=engine)
	second = dfs_search(craft_state, 3, engine=engine)
	unpruned = dfs_search(craft_state, 3, engine=engine, prune=False)

	assert first == second
	assert first[1] == unpruned[1]
	assert first[1] == _brute_force_best(craft_state, engine, DEFAULT_ACTION_CATALOG, 3)
	assert len(first[0]) <= 3


def test_search_does_not_mutate_initial_state(craft_state):
	snapshot = craft_state.copy()

	dfs_search(craft_state, 2)

	assert craft_state == snapshot


def test_search_config_validation():
	with pytest.raises(ValueError):
		SearchConfig(max_depth=-1)
	with pytest.raises(ValueError):
		SearchConfig(workers=0)
	with pytest.raises(ValueError):
		SearchConfig(catalog=())

	config = SearchConfig(catalog=[SYNTH, TOUCH])
	assert config.catalog == (SYNTH, TOUCH)
