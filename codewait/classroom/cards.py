"""
Lesson cards - One display variant per lesson type.

Every LessonItem shares one loose shape with mostly-optional fields. Cards
narrow it to exactly the fields a lesson type needs:
- QuizCard: question, options, correct answer, graded flag
- VocabularyCard: headword, definition, derivatives, examples, image seed
- GrammarFixCard: flawed sentence and its correction
- ReadingCard: passage, question, answer

Strict builders raise MalformedItemError; build_card falls back to a
lenient card so one bad item never aborts a session.
"""

import logging
from typing import Callable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict

from codewait.schemas import LessonItem, LessonType

from .grading import AnswerMatchPolicy, count_matches

logger = logging.getLogger(__name__)


class MalformedItemError(ValueError):
    """A lesson item lacks fields its lesson type requires."""


# -----------------------------------------------------------------------------
# Card types
# -----------------------------------------------------------------------------

class CardBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: str
    item_id: str
    explanation: str


class QuizCard(CardBase):
    kind: Literal["quiz"] = "quiz"
    question: str
    options: list[str] = []
    correct_answer: Optional[str] = None
    graded: bool = True


class VocabularyCard(CardBase):
    kind: Literal["vocabulary"] = "vocabulary"
    headword: str
    definition: str
    derivatives: list[str] = []
    examples: list[str] = []
    term: Optional[str] = None
    visual_prompt: Optional[str] = None

    @property
    def wants_image(self) -> bool:
        """Illustrations need both a term and a visual prompt."""
        return bool(self.term and self.visual_prompt)


class GrammarFixCard(CardBase):
    kind: Literal["grammar_fix"] = "grammar_fix"
    flawed_sentence: str
    correction: str


class ReadingCard(CardBase):
    kind: Literal["tech_reading"] = "tech_reading"
    passage: str
    question: str
    answer: str


LessonCard = Union[QuizCard, VocabularyCard, GrammarFixCard, ReadingCard]


# -----------------------------------------------------------------------------
# Builders
# -----------------------------------------------------------------------------

def _build_quiz(item: LessonItem, strict: bool, policy: AnswerMatchPolicy) -> QuizCard:
    options = list(item.options or [])
    graded = True
    if len(options) < 2:
        if strict:
            raise MalformedItemError(f"Quiz item {item.id} has {len(options)} option(s)")
        graded = False
    matches = count_matches(options, item.correct_answer, policy)
    if matches != 1:
        if strict:
            raise MalformedItemError(
                f"Quiz item {item.id}: correct answer matches {matches} options"
            )
        graded = False
    return QuizCard(
        item_id=item.id,
        explanation=item.explanation,
        question=item.question,
        options=options,
        correct_answer=item.correct_answer,
        graded=graded,
    )


def _build_vocabulary(item: LessonItem, strict: bool, policy: AnswerMatchPolicy) -> VocabularyCard:
    headword = item.display_term
    if strict and not headword:
        raise MalformedItemError(f"Vocabulary item {item.id} has neither term nor question")
    if strict and not item.correct_answer:
        raise MalformedItemError(f"Vocabulary item {item.id} has no definition")
    if item.examples:
        examples = list(item.examples)
    elif item.context:
        examples = [item.context]
    else:
        examples = []
    return VocabularyCard(
        item_id=item.id,
        explanation=item.explanation,
        headword=headword or "(untitled term)",
        definition=item.correct_answer or "",
        derivatives=list(item.derivatives),
        examples=examples,
        term=item.term,
        visual_prompt=item.visual_prompt,
    )


def _build_grammar_fix(item: LessonItem, strict: bool, policy: AnswerMatchPolicy) -> GrammarFixCard:
    if strict and not item.correct_answer:
        raise MalformedItemError(f"Grammar item {item.id} has no corrected sentence")
    return GrammarFixCard(
        item_id=item.id,
        explanation=item.explanation,
        flawed_sentence=item.context or item.question,
        correction=item.correct_answer or "",
    )


def _build_reading(item: LessonItem, strict: bool, policy: AnswerMatchPolicy) -> ReadingCard:
    if strict and not item.correct_answer:
        raise MalformedItemError(f"Reading item {item.id} has no answer")
    return ReadingCard(
        item_id=item.id,
        explanation=item.explanation,
        passage=item.context or "",
        question=item.question,
        answer=item.correct_answer or "",
    )


_BUILDERS: dict[LessonType, Callable[[LessonItem, bool, AnswerMatchPolicy], CardBase]] = {
    LessonType.QUIZ: _build_quiz,
    LessonType.VOCABULARY: _build_vocabulary,
    LessonType.GRAMMAR_FIX: _build_grammar_fix,
    LessonType.TECH_READING: _build_reading,
}


def build_card(
    item: LessonItem,
    lesson_type: LessonType,
    policy: AnswerMatchPolicy = AnswerMatchPolicy.EXACT,
) -> LessonCard:
    """
    Build the display card for an item.

    Args:
        item: Validated lesson item
        lesson_type: Lesson type the item was generated for
        policy: Answer matching policy used for quiz consistency checks

    Returns:
        A card; malformed items get a lenient fallback card
    """
    builder = _BUILDERS[LessonType(lesson_type)]
    try:
        return builder(item, True, policy)
    except MalformedItemError as e:
        logger.warning(f"Malformed item, using fallback display: {e}")
        return builder(item, False, policy)
