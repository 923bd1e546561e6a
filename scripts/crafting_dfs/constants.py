from __future__ import annotations

from typing import List, Tuple, TypeAlias

import numpy as np

from .models import Action

RECIPE_LEVEL: TypeAlias = int
JOB_LEVEL: TypeAlias = int
Rotation: TypeAlias = List[Action]
ActionCatalog: TypeAlias = Tuple[Action, ...]

DEFAULT_PLAYER_LEVEL: int = 80
DEFAULT_CONDITIONS_FLAG: int = 15
DEFAULT_SEARCH_DEPTH: int = 6
MACRO_MAX_LINES: int = 15

# Inner Quiet cannot stack past this.
INNER_QUIET_MAX_STACKS: int = 11

# Recipe levels below 50 map 1:1 onto job levels. From 50 on, the job level is
# 50 plus the number of thresholds that the recipe level has reached.
JOB_LEVEL_FLOOR: JOB_LEVEL = 50
RLV_THRESHOLDS: np.ndarray = np.array(
	[
		115, 124, 130, 133, 136, 139, 142, 145, 148, 150,
		255, 265, 270, 273, 276, 279, 282, 285, 288, 290,
		381, 395, 400, 403, 406, 409, 412, 415, 418, 430,
	],
	dtype=int,
)


def rlv_to_job_level(rlv: RECIPE_LEVEL) -> JOB_LEVEL:
	"""
	Default job level of a recipe, used when the player does not know it.

	>>> rlv_to_job_level(40), rlv_to_job_level(289), rlv_to_job_level(450)
	(40, 69, 80)
	"""
	if rlv < JOB_LEVEL_FLOOR:
		return rlv
	return JOB_LEVEL_FLOOR + int(np.searchsorted(RLV_THRESHOLDS, rlv, side="right"))


# Actions left out of the default catalog to keep the branching factor down.
# Re-enable any of them with catalog.build_action_catalog(include=...).
EXCLUDED_ACTIONS: ActionCatalog = (
	Action.TRAINED_EYE,
	Action.RAPID_SYNTHESIS,
	Action.FOCUSED_SYNTHESIS,
	Action.INTENSIVE_SYNTHESIS,
	Action.HASTY_TOUCH,
	Action.PRECISE_TOUCH,
	Action.PATIENT_TOUCH,
	Action.FOCUSED_TOUCH,
)

DEFAULT_ACTION_CATALOG: ActionCatalog = tuple(
	action for action in Action if action not in EXCLUDED_ACTIONS
)
