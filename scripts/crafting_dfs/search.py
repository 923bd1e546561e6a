from __future__ import annotations

from dataclasses import dataclass, field
from multiprocessing import Pool
from typing import Any, List, Optional, Sequence, Tuple

from tqdm import tqdm

from .constants import ActionCatalog, DEFAULT_ACTION_CATALOG, DEFAULT_SEARCH_DEPTH, Rotation
from .models import Action, CraftingEngine
from .score import Score
from .simulator import CraftingSimulator


@dataclass
class SearchConfig:
	max_depth: int = DEFAULT_SEARCH_DEPTH
	catalog: ActionCatalog = DEFAULT_ACTION_CATALOG
	prune: bool = True
	workers: int = 1
	show_progress: bool = False

	def __post_init__(self) -> None:
		if self.max_depth < 0:
			raise ValueError("search depth must be non-negative")
		if self.workers < 1:
			raise ValueError("workers must be at least 1")
		self.catalog = tuple(self.catalog)
		if not self.catalog:
			raise ValueError("action catalog must not be empty")


@dataclass
class SearchContext:
	"""
	Mutable state of one top-level search call.

	- best_rotation / best_score: incumbent, replaced only on strict improvement.
	- stack: actions from the root to the node being visited.
	"""

	best_rotation: Rotation
	best_score: Score
	max_depth: int
	catalog: ActionCatalog
	engine: CraftingEngine
	prune: bool = True
	show_progress: bool = False
	stack: Rotation = field(default_factory=list)
	nodes_visited: int = 0

	@classmethod
	def for_root(
		cls,
		state: Any,
		max_depth: int,
		catalog: Sequence[Action],
		engine: Optional[CraftingEngine],
		prune: bool,
		show_progress: bool = False,
	) -> SearchContext:
		return cls(
			best_rotation=[],
			best_score=Score.from_state(state),
			max_depth=max_depth,
			catalog=tuple(catalog),
			engine=engine if engine is not None else CraftingSimulator(),
			prune=prune,
			show_progress=show_progress,
		)


def _should_prune(ctx: SearchContext, state: Any, depth: int) -> bool:
	best = ctx.best_score
	# Shorter wins ties, so nothing below a max-quality incumbent's depth can beat it.
	if ctx.prune and best.quality >= state.recipe.quality and depth >= best.steps:
		return True
	# Children would exceed the depth budget.
	return depth >= ctx.max_depth


def _visit(ctx: SearchContext, state: Any, depth: int) -> None:
	ctx.nodes_visited += 1
	score = Score.from_state(state)
	if score > ctx.best_score:
		ctx.best_score = score
		ctx.best_rotation = list(ctx.stack)

	if _should_prune(ctx, state, depth):
		return

	actions = ctx.catalog
	if depth == 0 and ctx.show_progress:
		actions = tqdm(actions, desc="Searching")

	for action in actions:
		if not ctx.engine.is_action_allowed(state, action):
			continue
		successor = ctx.engine.apply_action(state, action)
		ctx.stack.append(action)
		try:
			_visit(ctx, successor, depth + 1)
		finally:
			ctx.stack.pop()


def run_search(
	state: Any,
	max_depth: int,
	catalog: Sequence[Action] = DEFAULT_ACTION_CATALOG,
	engine: Optional[CraftingEngine] = None,
	prune: bool = True,
	show_progress: bool = False,
) -> SearchContext:
	"""
	Branch-and-bound depth-first search for the best rotation of at most
	`max_depth` actions starting at `state`.

	Returns the finished SearchContext; its stack is empty again and
	nodes_visited tells how much of the tree was explored.
	"""
	ctx = SearchContext.for_root(state, max_depth, catalog, engine, prune, show_progress)
	_visit(ctx, state, 0)
	return ctx


def dfs_search(
	state: Any,
	max_depth: int,
	catalog: Sequence[Action] = DEFAULT_ACTION_CATALOG,
	engine: Optional[CraftingEngine] = None,
	prune: bool = True,
	show_progress: bool = False,
) -> Tuple[Rotation, Score]:
	ctx = run_search(state, max_depth, catalog, engine, prune, show_progress)
	return ctx.best_rotation, ctx.best_score


def _search_branch(task: Tuple[Any, Action, SearchContext]) -> Tuple[Rotation, Score, int]:
	"""
	Pool worker: explore one root branch with a private context.
	"""
	successor, action, ctx = task
	ctx.stack = [action]
	_visit(ctx, successor, 1)
	return ctx.best_rotation, ctx.best_score, ctx.nodes_visited


def run_parallel_search(
	state: Any,
	max_depth: int,
	workers: int,
	catalog: Sequence[Action] = DEFAULT_ACTION_CATALOG,
	engine: Optional[CraftingEngine] = None,
	prune: bool = True,
	show_progress: bool = False,
) -> SearchContext:
	"""
	Same result as run_search, with the root's branches spread over a
	process pool.

	Each branch starts from the root baseline with its own context. Results
	are merged in catalog order and only strict improvements replace the
	incumbent, so the first-found best rotation wins exactly as in the
	sequential search.
	"""
	if workers <= 1:
		return run_search(state, max_depth, catalog, engine, prune, show_progress)

	ctx = SearchContext.for_root(state, max_depth, catalog, engine, prune)
	ctx.nodes_visited = 1
	if _should_prune(ctx, state, 0):
		return ctx

	tasks: List[Tuple[Any, Action, SearchContext]] = []
	for action in ctx.catalog:
		if not ctx.engine.is_action_allowed(state, action):
			continue
		branch_ctx = SearchContext.for_root(state, max_depth, ctx.catalog, ctx.engine, prune)
		tasks.append((ctx.engine.apply_action(state, action), action, branch_ctx))
	if not tasks:
		return ctx

	with Pool(processes=min(workers, len(tasks))) as pool:
		results = pool.imap(_search_branch, tasks)
		if show_progress:
			results = tqdm(results, total=len(tasks), desc="Searching")
		for rotation, score, nodes_visited in results:
			ctx.nodes_visited += nodes_visited
			if score > ctx.best_score:
				ctx.best_score = score
				ctx.best_rotation = rotation
	return ctx


def parallel_dfs_search(
	state: Any,
	max_depth: int,
	workers: int,
	catalog: Sequence[Action] = DEFAULT_ACTION_CATALOG,
	engine: Optional[CraftingEngine] = None,
	prune: bool = True,
	show_progress: bool = False,
) -> Tuple[Rotation, Score]:
	ctx = run_parallel_search(state, max_depth, workers, catalog, engine, prune, show_progress)
	return ctx.best_rotation, ctx.best_score


def search_with_config(
	state: Any,
	config: SearchConfig,
	engine: Optional[CraftingEngine] = None,
) -> SearchContext:
	return run_parallel_search(
		state,
		max_depth=config.max_depth,
		workers=config.workers,
		catalog=config.catalog,
		engine=engine,
		prune=config.prune,
		show_progress=config.show_progress,
	)
