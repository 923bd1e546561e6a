from __future__ import annotations

"""
Package initializer for the crafting rotation search.

Exposes the submodules and the high-level entry points. For anything else,
import from the specific submodule (e.g. `crafting_dfs.simulator`).
"""

from . import models, constants, catalog, score, simulator, search, export
from .models import Action, Attributes, Recipe
from .score import Score
from .search import SearchConfig, dfs_search, parallel_dfs_search
from .simulator import CraftState, CraftingSimulator

__all__ = [
	"models",
	"constants",
	"catalog",
	"score",
	"simulator",
	"search",
	"export",
	"Action",
	"Attributes",
	"Recipe",
	"Score",
	"SearchConfig",
	"CraftState",
	"CraftingSimulator",
	"dfs_search",
	"parallel_dfs_search",
]
