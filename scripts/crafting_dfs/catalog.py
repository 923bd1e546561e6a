from __future__ import annotations

from typing import Iterable, List

from .constants import ActionCatalog, DEFAULT_ACTION_CATALOG
from .models import Action


def build_action_catalog(
	include: Iterable[Action] = (),
	exclude: Iterable[Action] = (),
) -> ActionCatalog:
	"""
	Start from DEFAULT_ACTION_CATALOG, add `include` and drop `exclude`.

	The result always follows the canonical Action order, so re-enabled
	actions land where they were declared rather than at the end. An action
	listed in both wins the exclusion.
	"""
	include_set = set(include)
	exclude_set = set(exclude)
	return tuple(
		action
		for action in Action
		if (action in DEFAULT_ACTION_CATALOG or action in include_set)
		and action not in exclude_set
	)


def parse_actions(values: Iterable[str]) -> List[Action]:
	"""
	Parse user-provided action names; comma separated entries are split.
	"""
	actions: List[Action] = []
	for value in values:
		for part in value.split(","):
			if part.strip():
				actions.append(Action.from_string(part))
	return actions
