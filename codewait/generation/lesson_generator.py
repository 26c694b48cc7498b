"""
Lesson generator - Request structured lesson content and validate it.

The backend's JSON is untrusted input:
- The top-level shape (topic + non-empty items) is required; anything else
  is a GenerationFailure and no partial lesson is accepted
- Individual items are normalized; items that are not objects are dropped
- Per-type consistency (quiz options vs. answer) is left to the lesson
  cards, which fall back to a plain display for malformed items
"""

import json
import logging
import re
from typing import Any, Optional

from google.genai import types as genai_types
from pydantic import ValidationError

from codewait.schemas import Lesson, LessonItem, LessonType, UserSelection
from codewait.utils.prompt_loader import format_prompt, load_prompt

from .gemini_client import GeminiClient

logger = logging.getLogger(__name__)

LIST_FIELDS = ("options", "derivatives", "examples")
OPTIONAL_TEXT_FIELDS = ("correctAnswer", "context", "term", "visualPrompt")


class GenerationFailure(Exception):
    """Lesson content could not be produced (backend error or invalid payload)."""


# -----------------------------------------------------------------------------
# Response schema (mirrors the lesson wire format)
# -----------------------------------------------------------------------------

def _string(description: str | None = None) -> genai_types.Schema:
    return genai_types.Schema(type=genai_types.Type.STRING, description=description)


def _string_list(description: str) -> genai_types.Schema:
    return genai_types.Schema(
        type=genai_types.Type.ARRAY,
        items=_string(),
        description=description,
    )


def build_response_schema() -> genai_types.Schema:
    """Schema passed to the model so the output follows the lesson contract."""
    item = genai_types.Schema(
        type=genai_types.Type.OBJECT,
        properties={
            "id": _string(),
            "question": _string("The question, word to define, or sentence to fix"),
            "options": _string_list("Options for quiz, empty otherwise"),
            "correctAnswer": _string("The correct option, corrected sentence, or definition"),
            "explanation": _string("Why this is correct or how to use the word"),
            "context": _string("Example sentence or reading passage"),
            "term": _string("The specific word if vocabulary"),
            "derivatives": _string_list("Related word forms"),
            "examples": _string_list("Multiple example sentences"),
            "visualPrompt": _string("Prompt for image generation"),
        },
        required=["id", "question", "explanation"],
    )
    return genai_types.Schema(
        type=genai_types.Type.OBJECT,
        properties={
            "topic": _string("A catchy title for this micro-lesson"),
            "items": genai_types.Schema(type=genai_types.Type.ARRAY, items=item),
        },
        required=["topic", "items"],
    )


# -----------------------------------------------------------------------------
# LLM Response Parsing and Validation
# -----------------------------------------------------------------------------

def extract_json_from_response(text: str) -> dict:
    """Extract a JSON object from LLM response, handling markdown code blocks."""
    if not text or not text.strip():
        raise ValueError("Empty response text")

    # Try to find JSON in code blocks first
    code_block_pattern = r'```(?:json)?\s*([\s\S]*?)```'
    for match in re.findall(code_block_pattern, text):
        try:
            return json.loads(match.strip())
        except json.JSONDecodeError:
            continue

    text = text.strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    # Fall back to the outermost braces
    first = text.find("{")
    last = text.rfind("}")
    if first != -1 and last > first:
        try:
            return json.loads(text[first:last + 1])
        except json.JSONDecodeError as e:
            raise ValueError(f"Could not extract JSON from response: {e}\n\nResponse:\n{text[:500]}...")

    raise ValueError(f"No JSON object in response:\n{text[:500]}...")


def _clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _clean_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    cleaned = (_clean_text(v) for v in value)
    return [v for v in cleaned if v]


def normalize_item(raw: Any, position: int, seen_ids: set[str]) -> Optional[dict]:
    """
    Normalize one item from the backend.

    Returns None for items that are not JSON objects. Missing or duplicate
    ids are replaced with item_<position>.
    """
    if not isinstance(raw, dict):
        logger.warning(f"Skipping non-object item at position {position}: {raw!r}")
        return None

    item_id = _clean_text(raw.get("id"))
    if not item_id or item_id in seen_ids:
        item_id = f"item_{position}"
        while item_id in seen_ids:
            item_id = f"{item_id}_dup"
    seen_ids.add(item_id)

    fixed = {
        "id": item_id,
        "question": _clean_text(raw.get("question")) or "",
        "explanation": _clean_text(raw.get("explanation")) or "",
    }
    for key in OPTIONAL_TEXT_FIELDS:
        fixed[key] = _clean_text(raw.get(key))
    for key in LIST_FIELDS:
        fixed[key] = _clean_list(raw.get(key))
    if not fixed["options"]:
        fixed["options"] = None
    return fixed


def validate_and_fix_lesson(payload: Any) -> dict:
    """
    Validate the top-level shape and normalize items.

    Raises:
        GenerationFailure: If the payload is not a usable lesson
    """
    if not isinstance(payload, dict):
        raise GenerationFailure(f"Expected a JSON object, got {type(payload).__name__}")

    topic = _clean_text(payload.get("topic"))
    if not topic:
        raise GenerationFailure("Lesson has no topic")

    raw_items = payload.get("items")
    if not isinstance(raw_items, list) or not raw_items:
        raise GenerationFailure("Lesson has no items")

    seen_ids: set[str] = set()
    items = []
    for position, raw in enumerate(raw_items, 1):
        item = normalize_item(raw, position, seen_ids)
        if item is not None:
            items.append(item)

    if not items:
        raise GenerationFailure("Lesson has no usable items")

    return {"topic": topic, "items": items}


def build_lesson(payload: Any) -> Lesson:
    """Build a Lesson from a parsed backend payload."""
    fixed = validate_and_fix_lesson(payload)
    try:
        return Lesson(
            topic=fixed["topic"],
            items=[LessonItem.model_validate(item) for item in fixed["items"]],
        )
    except ValidationError as e:
        raise GenerationFailure(f"Lesson failed validation: {e}") from e


# -----------------------------------------------------------------------------
# Lesson Generation
# -----------------------------------------------------------------------------

class LessonGenerator:
    """Content-generation collaborator: UserSelection -> Lesson."""

    def __init__(self, client: GeminiClient, prompt_config: Optional[dict] = None):
        self.client = client
        self.prompt_config = prompt_config or load_prompt("generate_lesson")
        self.response_schema = build_response_schema()

    def build_prompt(self, selection: UserSelection) -> tuple[str, str]:
        """Return (system prompt, user prompt) for a selection."""
        lesson_type = LessonType(selection.lesson_type)
        guidance = self.prompt_config.get("type_guidance", {}).get(lesson_type.value, "")
        user_prompt = format_prompt(
            self.prompt_config.get("user_template", ""),
            duration=selection.duration,
            lesson_type=lesson_type.value,
            topic_focus=selection.topic_focus,
            difficulty=selection.difficulty.value,
            type_guidance=guidance.strip(),
        )
        return self.prompt_config.get("system", ""), user_prompt

    def __call__(self, selection: UserSelection) -> Lesson:
        """
        Generate a lesson.

        Raises:
            GenerationFailure: On backend error, empty or invalid response
        """
        system_prompt, user_prompt = self.build_prompt(selection)
        try:
            response_text = self.client.generate_json(
                system_prompt, user_prompt, response_schema=self.response_schema
            )
            payload = extract_json_from_response(response_text)
        except GenerationFailure:
            raise
        except Exception as e:
            raise GenerationFailure(f"Lesson request failed: {e}") from e

        lesson = build_lesson(payload)
        logger.info(f"Generated lesson '{lesson.topic}' with {lesson.item_count} items")
        return lesson
