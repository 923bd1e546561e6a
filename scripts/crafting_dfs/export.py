from __future__ import annotations

from typing import Dict, Iterable, List

from .constants import MACRO_MAX_LINES
from .models import Action
from .score import Score

ACTION_NAMES_EN: Dict[Action, str] = {
	Action.MUSCLE_MEMORY: "Muscle Memory",
	Action.REFLECT: "Reflect",
	Action.TRAINED_EYE: "Trained Eye",
	Action.BASIC_SYNTHESIS: "Basic Synthesis",
	Action.RAPID_SYNTHESIS: "Rapid Synthesis",
	Action.BRAND_OF_THE_ELEMENTS: "Brand of the Elements",
	Action.CAREFUL_SYNTHESIS: "Careful Synthesis",
	Action.FOCUSED_SYNTHESIS: "Focused Synthesis",
	Action.GROUNDWORK: "Groundwork",
	Action.INTENSIVE_SYNTHESIS: "Intensive Synthesis",
	Action.DELICATE_SYNTHESIS: "Delicate Synthesis",
	Action.BASIC_TOUCH: "Basic Touch",
	Action.HASTY_TOUCH: "Hasty Touch",
	Action.STANDARD_TOUCH: "Standard Touch",
	Action.BYREGOTS_BLESSING: "Byregot's Blessing",
	Action.PRECISE_TOUCH: "Precise Touch",
	Action.PATIENT_TOUCH: "Patient Touch",
	Action.PRUDENT_TOUCH: "Prudent Touch",
	Action.FOCUSED_TOUCH: "Focused Touch",
	Action.PREPARATORY_TOUCH: "Preparatory Touch",
	Action.TRICKS_OF_THE_TRADE: "Tricks of the Trade",
	Action.MASTERS_MEND: "Master's Mend",
	Action.WASTE_NOT: "Waste Not",
	Action.WASTE_NOT_II: "Waste Not II",
	Action.MANIPULATION: "Manipulation",
	Action.INNER_QUIET: "Inner Quiet",
	Action.VENERATION: "Veneration",
	Action.GREAT_STRIDES: "Great Strides",
	Action.INNOVATION: "Innovation",
	Action.NAME_OF_THE_ELEMENTS: "Name of the Elements",
	Action.OBSERVE: "Observe",
	Action.FINAL_APPRAISAL: "Final Appraisal",
}

ACTION_NAMES_ZH: Dict[Action, str] = {
	Action.MUSCLE_MEMORY: "坚信",
	Action.REFLECT: "闲静",
	Action.TRAINED_EYE: "工匠的神速技巧",
	Action.BASIC_SYNTHESIS: "制作",
	Action.RAPID_SYNTHESIS: "高速制作",
	Action.BRAND_OF_THE_ELEMENTS: "元素之印记",
	Action.CAREFUL_SYNTHESIS: "模范制作",
	Action.FOCUSED_SYNTHESIS: "注视制作",
	Action.GROUNDWORK: "坯料制作",
	Action.INTENSIVE_SYNTHESIS: "集中制作",
	Action.DELICATE_SYNTHESIS: "精密制作",
	Action.BASIC_TOUCH: "加工",
	Action.HASTY_TOUCH: "仓促",
	Action.STANDARD_TOUCH: "中级加工",
	Action.BYREGOTS_BLESSING: "比尔格的祝福",
	Action.PRECISE_TOUCH: "集中加工",
	Action.PATIENT_TOUCH: "专心加工",
	Action.PRUDENT_TOUCH: "俭约加工",
	Action.FOCUSED_TOUCH: "注视加工",
	Action.PREPARATORY_TOUCH: "坯料加工",
	Action.TRICKS_OF_THE_TRADE: "秘诀",
	Action.MASTERS_MEND: "精修",
	Action.WASTE_NOT: "俭约",
	Action.WASTE_NOT_II: "长期俭约",
	Action.MANIPULATION: "掌握",
	Action.INNER_QUIET: "内静",
	Action.VENERATION: "崇敬",
	Action.GREAT_STRIDES: "阔步",
	Action.INNOVATION: "改革",
	Action.NAME_OF_THE_ELEMENTS: "元素之美名",
	Action.OBSERVE: "观察",
	Action.FINAL_APPRAISAL: "最终确认",
}

ACTION_NAMES: Dict[str, Dict[Action, str]] = {
	"en": ACTION_NAMES_EN,
	"zh": ACTION_NAMES_ZH,
}

# Actions that only apply a buff or restore a resource; the game recovers faster after them.
SHORT_WAIT_ACTIONS = frozenset({
	Action.INNER_QUIET,
	Action.TRICKS_OF_THE_TRADE,
	Action.MASTERS_MEND,
	Action.WASTE_NOT,
	Action.WASTE_NOT_II,
	Action.MANIPULATION,
	Action.VENERATION,
	Action.GREAT_STRIDES,
	Action.INNOVATION,
	Action.NAME_OF_THE_ELEMENTS,
	Action.FINAL_APPRAISAL,
})


def action_name(action: Action, language: str = "en") -> str:
	names = ACTION_NAMES.get(language)
	if names is None:
		raise ValueError(f"Unsupported macro language: {language}")
	return names[action]


def macro_line(action: Action, language: str = "en", wait: bool = True) -> str:
	line = f'/ac "{action_name(action, language)}"'
	if wait:
		seconds = 2 if action in SHORT_WAIT_ACTIONS else 3
		line += f" <wait.{seconds}>"
	return line


def to_macro_blocks(
	rotation: Iterable[Action],
	language: str = "en",
	wait: bool = True,
	max_lines: int = MACRO_MAX_LINES,
) -> List[List[str]]:
	"""
	Render a rotation as in-game macros, split so that no macro exceeds
	`max_lines` lines.
	"""
	if max_lines <= 0:
		raise ValueError("max_lines must be positive")
	lines = [macro_line(action, language, wait) for action in rotation]
	return [lines[i:i + max_lines] for i in range(0, len(lines), max_lines)]


def to_macro(rotation: Iterable[Action], language: str = "en", wait: bool = True) -> str:
	"""
	Macro text with blocks separated by a blank line; every line ends with
	a newline so a summary can be appended directly.
	"""
	blocks = to_macro_blocks(rotation, language, wait)
	return "\n".join("".join(f"{line}\n" for line in block) for block in blocks)


def to_chinese_macro(rotation: Iterable[Action]) -> str:
	return to_macro(rotation, language="zh")


def format_summary(score: Score, language: str = "en") -> str:
	if language == "zh":
		return f"# 品质：{score.quality}，步数：{score.steps}"
	return f"# quality: {score.quality}, steps: {score.steps}"
