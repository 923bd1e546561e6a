"""Command line front end: collect the craft setup, run the search, print a macro."""

from __future__ import annotations

import argparse
import sys
import time
from typing import Callable, Optional, Sequence, Tuple

from .catalog import build_action_catalog, parse_actions
from .constants import (
	DEFAULT_CONDITIONS_FLAG,
	DEFAULT_PLAYER_LEVEL,
	DEFAULT_SEARCH_DEPTH,
	EXCLUDED_ACTIONS,
	rlv_to_job_level,
)
from .export import format_summary, to_macro
from .models import Attributes, Recipe
from .search import SearchConfig, SearchContext, search_with_config
from .simulator import CraftState, simulate_rotation

InputFunc = Callable[[str], str]


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(
		prog="crafting-dfs",
		description=(
			"Depth-first search for the crafting rotation with the highest quality. "
			"Values that are not given on the command line are asked for interactively."
		),
	)
	player = parser.add_argument_group("player")
	player.add_argument("--level", type=int, default=None, help=f"Player level (default {DEFAULT_PLAYER_LEVEL}).")
	player.add_argument("--craftsmanship", type=int, default=None)
	player.add_argument("--control", type=int, default=None)
	player.add_argument("--craft-points", type=int, default=None)

	recipe = parser.add_argument_group("recipe")
	recipe.add_argument("--rlv", type=int, default=None, help="Recipe level.")
	recipe.add_argument(
		"--job-level",
		type=int,
		default=None,
		help="Recipe job level. Defaults to the value derived from the recipe level.",
	)
	recipe.add_argument("--difficulty", type=int, default=None, help="Progress needed to finish.")
	recipe.add_argument("--quality", type=int, default=None, help="Maximum quality.")
	recipe.add_argument("--durability", type=int, default=None)
	recipe.add_argument(
		"--conditions-flag",
		type=int,
		default=None,
		help=f"Bit mask of possible conditions (default {DEFAULT_CONDITIONS_FLAG}).",
	)

	search = parser.add_argument_group("search")
	search.add_argument("--depth", type=int, default=None, help=f"Search depth limit (default {DEFAULT_SEARCH_DEPTH}).")
	search.add_argument("--workers", type=int, default=1, help="Processes used to explore the first-step branches.")
	search.add_argument(
		"--include",
		nargs="+",
		default=[],
		metavar="ACTION",
		help=(
			"Re-enable actions left out of the default catalog: "
			+ ", ".join(action.value for action in EXCLUDED_ACTIONS)
		),
	)
	search.add_argument("--exclude", nargs="+", default=[], metavar="ACTION", help="Remove actions from the catalog.")
	search.add_argument("--no-prune", action="store_true", help="Disable branch-and-bound pruning.")
	search.add_argument("--progress", action="store_true", help="Show a progress bar.")

	output = parser.add_argument_group("output")
	output.add_argument("--lang", choices=["en", "zh"], default="en", help="Macro language.")
	output.add_argument("--no-wait", action="store_true", help="Leave out <wait.N> from macro lines.")
	return parser


def prompt_int(label: str, default: Optional[int] = None, input_func: InputFunc = input) -> int:
	suffix = f" [{default}]" if default is not None else ""
	while True:
		raw = input_func(f"{label}{suffix}: ").strip()
		if not raw and default is not None:
			return default
		try:
			return int(raw)
		except ValueError:
			print("Please enter a whole number.")


def collect_inputs(
	args: argparse.Namespace,
	input_func: InputFunc = input,
) -> Tuple[Attributes, Recipe, int, bool]:
	"""
	Build attributes, recipe and depth from the parsed arguments, prompting
	for whatever is missing. The last element tells whether anything was
	prompted.
	"""
	prompted = False

	def value(current: Optional[int], label: str, default: Optional[int] = None) -> int:
		nonlocal prompted
		if current is not None:
			return current
		prompted = True
		return prompt_int(label, default, input_func)

	attributes = Attributes(
		level=value(args.level, "Player level", DEFAULT_PLAYER_LEVEL),
		craftsmanship=value(args.craftsmanship, "Craftsmanship"),
		control=value(args.control, "Control"),
		craft_points=value(args.craft_points, "Craft points"),
	)
	rlv = value(args.rlv, "Recipe level")
	recipe = Recipe(
		rlv=rlv,
		job_level=value(args.job_level, "Recipe job level", rlv_to_job_level(rlv)),
		difficulty=value(args.difficulty, "Recipe difficulty"),
		quality=value(args.quality, "Recipe quality"),
		durability=value(args.durability, "Recipe durability"),
		conditions_flag=value(args.conditions_flag, "Conditions flag", DEFAULT_CONDITIONS_FLAG),
	)
	depth = value(args.depth, "Search depth", DEFAULT_SEARCH_DEPTH)
	return attributes, recipe, depth, prompted


def run_once(
	attributes: Attributes,
	recipe: Recipe,
	config: SearchConfig,
	language: str = "en",
	wait: bool = True,
) -> SearchContext:
	state = CraftState.new(attributes, recipe)
	print("Running depth-first search, please wait...", flush=True)
	start = time.perf_counter()
	ctx = search_with_config(state, config)
	elapsed = time.perf_counter() - start

	print(to_macro(ctx.best_rotation, language=language, wait=wait) + format_summary(ctx.best_score, language))
	final_state = simulate_rotation(attributes, recipe, ctx.best_rotation)
	print(final_state)
	print(f"Explored {ctx.nodes_visited} nodes in {elapsed:.2f}s")
	return ctx


def main(argv: Optional[Sequence[str]] = None, input_func: InputFunc = input) -> int:
	parser = build_parser()
	args = parser.parse_args(argv)

	try:
		catalog = build_action_catalog(
			include=parse_actions(args.include),
			exclude=parse_actions(args.exclude),
		)
	except ValueError as e:
		parser.error(str(e))

	while True:
		try:
			attributes, recipe, depth, prompted = collect_inputs(args, input_func)
			config = SearchConfig(
				max_depth=depth,
				catalog=catalog,
				prune=not args.no_prune,
				workers=args.workers,
				show_progress=args.progress,
			)
		except ValueError as e:
			parser.error(str(e))

		run_once(attributes, recipe, config, language=args.lang, wait=not args.no_wait)

		if not prompted:
			return 0
		answer = input_func("Search again? [y/N]: ").strip().lower()
		if answer not in ("y", "yes"):
			return 0


if __name__ == "__main__":
	sys.exit(main())
