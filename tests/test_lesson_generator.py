"""
Lesson generation tests: response parsing, payload validation and the
LessonGenerator collaborator (with a fake client, no network).
"""

import json

import pytest

from codewait.generation import (
    GenerationFailure,
    LessonGenerator,
    build_lesson,
    build_response_schema,
    extract_json_from_response,
    normalize_item,
    validate_and_fix_lesson,
)
from codewait.schemas import Difficulty, LessonType, UserSelection
from codewait.utils import load_prompt


VALID_PAYLOAD = {
    "topic": "Cloud Words",
    "items": [
        {
            "id": "1",
            "question": "What is elasticity?",
            "options": ["Scaling with demand", "A rubber band"],
            "correctAnswer": "Scaling with demand",
            "explanation": "Elastic systems grow and shrink.",
        },
        {
            "id": "2",
            "question": "What is a region?",
            "options": ["A data center area", "A CSS rule"],
            "correctAnswer": "A data center area",
            "explanation": "Providers group data centers by region.",
        },
    ],
}


class FakeClient:
    """Stands in for GeminiClient.generate_json."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def generate_json(self, system_prompt, user_prompt, response_schema=None):
        self.calls.append((system_prompt, user_prompt, response_schema))
        if self.error is not None:
            raise self.error
        return self.response


class TestExtractJson:

    def test_plain_json(self):
        assert extract_json_from_response('{"topic": "x"}') == {"topic": "x"}

    def test_code_block(self):
        text = 'Here you go:\n```json\n{"topic": "x"}\n```\nEnjoy'
        assert extract_json_from_response(text) == {"topic": "x"}

    def test_surrounding_prose(self):
        assert extract_json_from_response('Sure! {"topic": "x"} Done.') == {"topic": "x"}

    @pytest.mark.parametrize("text", ["", "   ", "no json here", "{broken"])
    def test_unparseable(self, text):
        with pytest.raises(ValueError):
            extract_json_from_response(text)


class TestValidateAndFix:

    def test_valid_payload(self):
        fixed = validate_and_fix_lesson(VALID_PAYLOAD)
        assert fixed["topic"] == "Cloud Words"
        assert [i["id"] for i in fixed["items"]] == ["1", "2"]

    @pytest.mark.parametrize("payload", [
        [],
        "lesson",
        {"items": VALID_PAYLOAD["items"]},
        {"topic": "  ", "items": VALID_PAYLOAD["items"]},
        {"topic": "t"},
        {"topic": "t", "items": []},
        {"topic": "t", "items": "nope"},
        {"topic": "t", "items": ["a", 3, None]},
    ])
    def test_unusable_payloads(self, payload):
        with pytest.raises(GenerationFailure):
            validate_and_fix_lesson(payload)

    def test_missing_and_duplicate_ids(self):
        payload = {"topic": "t", "items": [
            {"id": "a", "question": "q1", "explanation": "e"},
            {"id": "a", "question": "q2", "explanation": "e"},
            {"question": "q3", "explanation": "e"},
        ]}
        ids = [i["id"] for i in validate_and_fix_lesson(payload)["items"]]
        assert ids[0] == "a"
        assert len(set(ids)) == 3

    def test_non_object_items_dropped(self):
        payload = {"topic": "t", "items": ["junk", {"id": "1", "question": "q", "explanation": "e"}]}
        items = validate_and_fix_lesson(payload)["items"]
        assert len(items) == 1


class TestNormalizeItem:

    def test_cleans_fields(self):
        raw = {
            "id": 7,
            "question": "  q  ",
            "options": ["a", "", None, " b "],
            "derivatives": "not a list",
            "term": "",
        }
        item = normalize_item(raw, 1, set())
        assert item["id"] == "7"
        assert item["question"] == "q"
        assert item["explanation"] == ""
        assert item["options"] == ["a", "b"]
        assert item["derivatives"] == []
        assert item["term"] is None

    def test_empty_options_become_none(self):
        item = normalize_item({"id": "1", "options": []}, 1, set())
        assert item["options"] is None

    def test_non_dict(self):
        assert normalize_item("text", 1, set()) is None


class TestBuildLesson:

    def test_builds_items_with_aliases(self):
        lesson = build_lesson(VALID_PAYLOAD)
        assert lesson.item_count == 2
        assert lesson.items[0].correct_answer == "Scaling with demand"

    def test_response_schema_requires_topic_and_items(self):
        schema = build_response_schema()
        assert schema.required == ["topic", "items"]
        assert "correctAnswer" in schema.properties["items"].items.properties


class TestLessonGenerator:

    @pytest.fixture
    def selection(self):
        return UserSelection(
            duration=3,
            lesson_type=LessonType.QUIZ,
            topic_focus="Cloud Computing",
            difficulty=Difficulty.INTERMEDIATE,
        )

    def test_prompt_includes_selection(self, selection):
        generator = LessonGenerator(FakeClient())
        system_prompt, user_prompt = generator.build_prompt(selection)
        assert "English tutor" in system_prompt
        assert "approx 3 minutes" in user_prompt
        assert "Quick Quiz" in user_prompt
        assert "Cloud Computing" in user_prompt
        assert "Intermediate" in user_prompt

    def test_type_guidance_for_every_lesson_type(self):
        guidance = load_prompt("generate_lesson")["type_guidance"]
        assert set(guidance) == {t.value for t in LessonType}

    def test_unknown_template(self):
        with pytest.raises(FileNotFoundError):
            load_prompt("no_such_prompt")

    def test_generates_lesson(self, selection):
        client = FakeClient(response=json.dumps(VALID_PAYLOAD))
        lesson = LessonGenerator(client)(selection)
        assert lesson.topic == "Cloud Words"
        assert len(client.calls) == 1
        assert client.calls[0][2] is not None

    def test_backend_error_is_generation_failure(self, selection):
        client = FakeClient(error=RuntimeError("503 UNAVAILABLE"))
        with pytest.raises(GenerationFailure):
            LessonGenerator(client)(selection)

    @pytest.mark.parametrize("response", [None, "", "not json", '{"topic": "t", "items": []}'])
    def test_bad_response_is_generation_failure(self, selection, response):
        with pytest.raises(GenerationFailure):
            LessonGenerator(FakeClient(response=response))(selection)
