"""
CodeWait Classroom - Runtime components for running a lesson session.

This module provides:
- SessionController: application state machine and lesson generation
- LessonPlayer: per-item navigation, reveal and scoring
- Lesson cards: per-lesson-type display variants
- Grading helpers
"""

from .grading import (
    AnswerMatchPolicy,
    OptionMark,
    OptionView,
    answers_match,
    mark_options,
)

from .cards import (
    MalformedItemError,
    QuizCard,
    VocabularyCard,
    GrammarFixCard,
    ReadingCard,
    LessonCard,
    build_card,
)

from .state_machine import (
    SessionEvent,
    InvalidTransition,
    TRANSITIONS,
    can_transition,
    transition,
)

from .player import (
    LessonPlayer,
    ImageSlot,
    ImageStatus,
)

from .controller import (
    SessionController,
    GENERATION_ERROR_MESSAGE,
)

__all__ = [
    # Grading
    "AnswerMatchPolicy",
    "OptionMark",
    "OptionView",
    "answers_match",
    "mark_options",
    # Cards
    "MalformedItemError",
    "QuizCard",
    "VocabularyCard",
    "GrammarFixCard",
    "ReadingCard",
    "LessonCard",
    "build_card",
    # State machine
    "SessionEvent",
    "InvalidTransition",
    "TRANSITIONS",
    "can_transition",
    "transition",
    # Player
    "LessonPlayer",
    "ImageSlot",
    "ImageStatus",
    # Controller
    "SessionController",
    "GENERATION_ERROR_MESSAGE",
]
