"""
CodeWait Schemas - Pydantic models for the micro-learning tool.

This module exports all schema classes for:
- Lesson: lesson types, generated items, lessons, user selection
- Progress: application state and per-lesson session progress
"""

# Lesson schemas
from .lesson import (
    LessonType,
    Difficulty,
    LessonItem,
    Lesson,
    UserSelection,
    DURATION_CHOICES,
    TOPIC_SUGGESTIONS,
    DIFFICULTY_LABELS,
)

# Progress schemas
from .progress import (
    AppState,
    SessionProgress,
)

__all__ = [
    # Lesson
    'LessonType',
    'Difficulty',
    'LessonItem',
    'Lesson',
    'UserSelection',
    'DURATION_CHOICES',
    'TOPIC_SUGGESTIONS',
    'DIFFICULTY_LABELS',
    # Progress
    'AppState',
    'SessionProgress',
]
