"""
CodeWait Generation - Collaborators backed by the Gemini API.

This module provides:
- GeminiClient: thin SDK wrapper
- LessonGenerator: UserSelection -> Lesson (raises GenerationFailure)
- ImageGenerator: (term, visual_prompt) -> data URI or None
"""

from .gemini_client import GeminiClient

from .lesson_generator import (
    GenerationFailure,
    LessonGenerator,
    build_lesson,
    build_response_schema,
    extract_json_from_response,
    normalize_item,
    validate_and_fix_lesson,
)

from .image_generator import (
    ImageGenerator,
    to_data_uri,
)

__all__ = [
    "GeminiClient",
    "GenerationFailure",
    "LessonGenerator",
    "build_lesson",
    "build_response_schema",
    "extract_json_from_response",
    "normalize_item",
    "validate_and_fix_lesson",
    "ImageGenerator",
    "to_data_uri",
]
