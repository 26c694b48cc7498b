"""
Grading helpers for quiz items.

Provides:
- Answer matching under a configurable policy
- Per-option marks for the post-reveal quiz display
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class AnswerMatchPolicy(str, Enum):
    EXACT = "exact"                         # byte-for-byte
    CASE_INSENSITIVE = "case_insensitive"   # casefold + strip


class OptionMark(str, Enum):
    NEUTRAL = "neutral"
    CORRECT = "correct"
    INCORRECT = "incorrect"   # chosen, but wrong


@dataclass(frozen=True)
class OptionView:
    """One quiz option as it should be displayed."""
    text: str
    mark: OptionMark
    selected: bool


def answers_match(
    given: Optional[str],
    expected: Optional[str],
    policy: AnswerMatchPolicy = AnswerMatchPolicy.EXACT,
) -> bool:
    """Compare a chosen option with the expected answer."""
    if given is None or expected is None:
        return False
    if policy == AnswerMatchPolicy.CASE_INSENSITIVE:
        return given.strip().casefold() == expected.strip().casefold()
    return given == expected


def count_matches(
    options: list[str],
    expected: Optional[str],
    policy: AnswerMatchPolicy = AnswerMatchPolicy.EXACT,
) -> int:
    """Number of options matching the expected answer."""
    return sum(1 for opt in options if answers_match(opt, expected, policy))


def mark_options(
    options: list[str],
    correct_answer: Optional[str],
    selected: Optional[str],
    revealed: bool,
    graded: bool = True,
    policy: AnswerMatchPolicy = AnswerMatchPolicy.EXACT,
) -> list[OptionView]:
    """
    Tag each option for display.

    Before reveal every option is neutral. After reveal the correct option is
    marked correct and a wrong selection is marked incorrect. Ungraded items
    only carry the selection flag.
    """
    views = []
    for opt in options:
        is_selected = revealed and selected is not None and opt == selected
        mark = OptionMark.NEUTRAL
        if revealed and graded:
            if answers_match(opt, correct_answer, policy):
                mark = OptionMark.CORRECT
            elif is_selected:
                mark = OptionMark.INCORRECT
        views.append(OptionView(text=opt, mark=mark, selected=is_selected))
    return views
