from __future__ import annotations

from dataclasses import dataclass

import pytest

from crafting_dfs.catalog import build_action_catalog, parse_actions
from crafting_dfs.constants import DEFAULT_ACTION_CATALOG, EXCLUDED_ACTIONS, rlv_to_job_level
from crafting_dfs.models import Action
from crafting_dfs.score import Score


@dataclass
class _Recipe:
	difficulty: int
	quality: int


@dataclass
class _State:
	recipe: _Recipe
	progress: int
	quality: int
	step: int


def test_score_order():
	assert Score(10, 5) > Score(9, 1)
	assert Score(10, 4) > Score(10, 5)
	assert Score(10, 5) == Score(10, 5)
	assert not Score(10, 5) > Score(10, 5)
	assert max([Score(3, 3), Score(5, 7), Score(5, 6), Score(0, 0)]) == Score(5, 6)
	assert sorted([Score(5, 6), Score(0, 0), Score(5, 7)]) == [Score(0, 0), Score(5, 7), Score(5, 6)]


def test_score_from_state_gates_on_progress():
	recipe = _Recipe(difficulty=100, quality=500)

	assert Score.from_state(_State(recipe, progress=99, quality=400, step=3)) == Score(0, 3)
	assert Score.from_state(_State(recipe, progress=100, quality=400, step=3)) == Score(400, 3)
	assert Score.from_state(_State(recipe, progress=150, quality=900, step=4)) == Score(500, 4)


def test_default_catalog():
	assert len(DEFAULT_ACTION_CATALOG) == 24
	assert DEFAULT_ACTION_CATALOG[:3] == (Action.MUSCLE_MEMORY, Action.REFLECT, Action.BASIC_SYNTHESIS)
	assert DEFAULT_ACTION_CATALOG[-1] is Action.FINAL_APPRAISAL
	assert not set(EXCLUDED_ACTIONS) & set(DEFAULT_ACTION_CATALOG)
	assert set(EXCLUDED_ACTIONS) | set(DEFAULT_ACTION_CATALOG) == set(Action)


def test_build_action_catalog():
	assert build_action_catalog() == DEFAULT_ACTION_CATALOG

	catalog = build_action_catalog(include=[Action.TRAINED_EYE], exclude=[Action.OBSERVE])
	assert catalog[2] is Action.TRAINED_EYE
	assert Action.OBSERVE not in catalog
	assert len(catalog) == 24

	assert Action.HASTY_TOUCH not in build_action_catalog(include=[Action.HASTY_TOUCH], exclude=[Action.HASTY_TOUCH])


def test_parse_actions():
	assert parse_actions(["groundwork,Waste Not II", "Byregot's Blessing"]) == [
		Action.GROUNDWORK,
		Action.WASTE_NOT_II,
		Action.BYREGOTS_BLESSING,
	]
	assert Action.from_string("MASTERS_MEND") is Action.MASTERS_MEND

	with pytest.raises(ValueError):
		parse_actions(["not an action"])


@pytest.mark.parametrize(
	"rlv, expected",
	[
		(1, 1),
		(49, 49),
		(50, 50),
		(114, 50),
		(115, 51),
		(149, 59),
		(150, 60),
		(287, 68),
		(288, 69),
		(289, 69),
		(290, 70),
		(381, 71),
		(429, 79),
		(430, 80),
		(517, 80),
	],
)
def test_rlv_to_job_level(rlv, expected):
	assert rlv_to_job_level(rlv) == expected
