"""
Lesson content schemas for CodeWait.

Defines Pydantic models for generated lesson content including:
- Lesson types and difficulty levels
- Lesson items as returned by the generation backend
- The lesson itself (topic + ordered items)
- The user's session configuration
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LessonType(str, Enum):
    VOCABULARY = "Vocabulary"
    GRAMMAR_FIX = "Grammar Fix"
    TECH_READING = "Tech Reading"
    QUIZ = "Quick Quiz"


class Difficulty(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


DURATION_CHOICES = (1, 3, 5)

TOPIC_SUGGESTIONS = [
    "Software Engineering",
    "Web Development",
    "Cloud Computing",
    "Data Science",
    "Business English",
    "Casual Conversation",
]

# Button labels shown in the configuration view
DIFFICULTY_LABELS = {
    Difficulty.BEGINNER: "Simple",
    Difficulty.INTERMEDIATE: "Medium",
    Difficulty.ADVANCED: "Hard",
}


# -----------------------------------------------------------------------------
# Generated content
# -----------------------------------------------------------------------------

class LessonItem(BaseModel):
    """
    One question/prompt unit of a lesson.

    Field names follow the backend's camelCase wire format through aliases;
    attributes are snake_case. Which optional fields are populated depends
    on the lesson type.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., min_length=1)
    question: str
    explanation: str
    correct_answer: Optional[str] = Field(default=None, alias="correctAnswer")
    options: Optional[tuple[str, ...]] = None    # quiz only
    context: Optional[str] = None                # example sentence or passage
    term: Optional[str] = None                   # vocabulary headword
    derivatives: tuple[str, ...] = ()
    examples: tuple[str, ...] = ()
    visual_prompt: Optional[str] = Field(default=None, alias="visualPrompt")

    @property
    def display_term(self) -> str:
        """Headword for vocabulary display, falling back to the question."""
        return self.term or self.question


class Lesson(BaseModel):
    """A generated lesson. Immutable once built (items are stored as a tuple)."""
    model_config = ConfigDict(frozen=True)

    topic: str
    items: tuple[LessonItem, ...] = Field(..., min_length=1)

    @field_validator('items')
    @classmethod
    def item_ids_unique(cls, v):
        ids = [item.id for item in v]
        if len(ids) != len(set(ids)):
            raise ValueError('Lesson item ids must be unique')
        return v

    @property
    def item_count(self) -> int:
        return len(self.items)


# -----------------------------------------------------------------------------
# User configuration
# -----------------------------------------------------------------------------

class UserSelection(BaseModel):
    """What the learner asked for. Duration is advisory only."""
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    duration: int = Field(default=3, gt=0)  # minutes
    lesson_type: LessonType = Field(default=LessonType.VOCABULARY, alias="lessonType")
    topic_focus: str = Field(default="Software Engineering", alias="topicFocus", min_length=1)
    difficulty: Difficulty = Difficulty.INTERMEDIATE

    @field_validator('topic_focus')
    @classmethod
    def topic_not_blank(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Topic focus must not be blank')
        return v

    def to_request(self) -> dict:
        """Serialize to the generation request shape."""
        return self.model_dump(by_alias=True, mode="json")
