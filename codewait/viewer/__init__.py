"""
CodeWait Viewer - Rendering components for lesson display.

This module provides:
- Lesson card rendering per lesson type
- Session summary and quiz score rendering
- Focus-area input reconciliation
"""

from .lesson import (
    get_lesson_css,
    render_explanation,
    render_answer_box,
    render_option,
    render_quiz_card,
    render_image_slot,
    render_vocabulary_card,
    render_grammar_fix_card,
    render_reading_card,
    render_card,
    render_player,
    render_position,
)

from .summary import (
    get_summary_css,
    calculate_quiz_score,
    render_quiz_score,
    render_summary,
)

from .topic_input import (
    TOPIC_CHOICE_KEY,
    CUSTOM_TOPIC_KEY,
    apply_topic_choice,
    apply_custom_topic,
)

__all__ = [
    # Lesson rendering
    "get_lesson_css",
    "render_explanation",
    "render_answer_box",
    "render_option",
    "render_quiz_card",
    "render_image_slot",
    "render_vocabulary_card",
    "render_grammar_fix_card",
    "render_reading_card",
    "render_card",
    "render_player",
    "render_position",
    # Summary
    "get_summary_css",
    "calculate_quiz_score",
    "render_quiz_score",
    "render_summary",
    # Topic input
    "TOPIC_CHOICE_KEY",
    "CUSTOM_TOPIC_KEY",
    "apply_topic_choice",
    "apply_custom_topic",
]
