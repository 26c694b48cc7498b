"""
LessonPlayer tests.

Covers navigation, reveal, quiz scoring and illustration requests.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from codewait.classroom import (
    AnswerMatchPolicy,
    ImageStatus,
    LessonPlayer,
    OptionMark,
    QuizCard,
    VocabularyCard,
)
from codewait.schemas import Lesson, LessonItem, LessonType

from conftest import ManualExecutor, make_quiz_lesson, make_vocabulary_lesson


def reading_lesson(n: int) -> Lesson:
    return Lesson(
        topic="Reading",
        items=[
            LessonItem(id=f"r{i}", question="What does it do?", explanation="e",
                       context="The service retries on 503.", correct_answer="Retries")
            for i in range(n)
        ],
    )


class TestQuizScoring:

    def test_correct_selection_scores(self, quiz_lesson):
        player = LessonPlayer(quiz_lesson, LessonType.QUIZ)
        assert player.select_option("B") is True
        assert player.revealed is True
        assert player.score == 1
        assert player.progress.selected_option == "B"

    def test_wrong_selection_marks_both_options(self, quiz_lesson):
        player = LessonPlayer(quiz_lesson, LessonType.QUIZ)
        player.select_option("A")
        assert player.revealed is True
        assert player.score == 0

        views = {v.text: v for v in player.option_views()}
        assert views["A"].mark == OptionMark.INCORRECT
        assert views["A"].selected is True
        assert views["B"].mark == OptionMark.CORRECT
        assert views["B"].selected is False
        assert views["C"].mark == OptionMark.NEUTRAL

    def test_options_unmarked_before_reveal(self, quiz_lesson):
        player = LessonPlayer(quiz_lesson, LessonType.QUIZ)
        assert all(v.mark == OptionMark.NEUTRAL and not v.selected for v in player.option_views())

    def test_second_selection_is_noop(self, quiz_lesson):
        player = LessonPlayer(quiz_lesson, LessonType.QUIZ)
        player.select_option("B")
        assert player.select_option("B") is False
        assert player.select_option("A") is False
        assert player.score == 1
        assert player.progress.selected_option == "B"

    def test_unknown_option_ignored(self, quiz_lesson):
        player = LessonPlayer(quiz_lesson, LessonType.QUIZ)
        assert player.select_option("Z") is False
        assert player.revealed is False

    def test_reveal_not_used_for_quiz(self, quiz_lesson):
        player = LessonPlayer(quiz_lesson, LessonType.QUIZ)
        assert player.reveal() is False
        assert player.revealed is False

    def test_match_is_case_sensitive_by_default(self):
        lesson = Lesson(topic="t", items=[
            LessonItem(id="1", question="q", explanation="e", options=["yes", "no"], correct_answer="Yes"),
        ])
        player = LessonPlayer(lesson, LessonType.QUIZ)
        # "Yes" matches no option exactly, so the item is ungraded
        assert isinstance(player.current_card, QuizCard)
        assert player.current_card.graded is False
        player.select_option("yes")
        assert player.score == 0

    def test_case_insensitive_policy(self):
        lesson = Lesson(topic="t", items=[
            LessonItem(id="1", question="q", explanation="e", options=["yes", "no"], correct_answer="Yes"),
        ])
        player = LessonPlayer(lesson, LessonType.QUIZ, match_policy=AnswerMatchPolicy.CASE_INSENSITIVE)
        player.select_option("yes")
        assert player.score == 1


class TestMalformedQuizItems:

    def test_missing_options_does_not_crash(self):
        lesson = Lesson(topic="t", items=[
            LessonItem(id="1", question="Name a VCS", explanation="e", correct_answer="git"),
        ])
        player = LessonPlayer(lesson, LessonType.QUIZ)
        card = player.current_card
        assert isinstance(card, QuizCard)
        assert card.graded is False
        # nothing to select, so reveal is the way forward
        assert player.can_reveal() is True
        assert player.reveal() is True
        assert player.advance() is True
        assert player.completed is True
        assert player.score == 0

    def test_answer_not_among_options_is_ungraded(self):
        lesson = Lesson(topic="t", items=[
            LessonItem(id="1", question="q", explanation="e", options=["A", "B"], correct_answer="C"),
        ])
        player = LessonPlayer(lesson, LessonType.QUIZ)
        assert player.select_option("A") is True
        assert player.score == 0
        assert all(v.mark == OptionMark.NEUTRAL for v in player.option_views())

    def test_graded_count(self):
        lesson = Lesson(topic="t", items=[
            LessonItem(id="1", question="q", explanation="e", options=["A", "B"], correct_answer="A"),
            LessonItem(id="2", question="q", explanation="e", options=["A", "B"], correct_answer="Z"),
        ])
        assert LessonPlayer(lesson, LessonType.QUIZ).graded_count == 1


class TestNavigation:

    def test_advance_requires_reveal(self):
        player = LessonPlayer(reading_lesson(2), LessonType.TECH_READING)
        assert player.advance() is False
        assert player.current_index == 0

    def test_advance_moves_one_and_resets(self, quiz_lesson):
        player = LessonPlayer(quiz_lesson, LessonType.QUIZ)
        player.select_option("A")
        assert player.advance() is True
        assert player.current_index == 1
        assert player.revealed is False
        assert player.progress.selected_option is None

    def test_completion_fires_once_on_last_item(self):
        calls = []
        player = LessonPlayer(reading_lesson(2), LessonType.TECH_READING, on_complete=lambda: calls.append(1))
        player.reveal()
        player.advance()
        player.reveal()
        assert player.is_last_item
        assert player.advance() is True
        assert calls == [1]
        assert player.current_index == 1

        assert player.advance() is False
        assert player.reveal() is False
        assert calls == [1]
        assert player.current_index == 1

    @pytest.mark.parametrize("n", [1, 5])
    def test_n_items_take_n_steps(self, n):
        calls = []
        player = LessonPlayer(reading_lesson(n), LessonType.TECH_READING, on_complete=lambda: calls.append(1))
        steps = 0
        while not player.completed:
            assert player.reveal() is True
            player.advance()
            steps += 1
        assert steps == n
        assert calls == [1]

    def test_reveal_twice_is_noop(self):
        player = LessonPlayer(reading_lesson(1), LessonType.TECH_READING)
        assert player.reveal() is True
        assert player.reveal() is False

    def test_quit_from_any_position(self):
        quits = []
        player = LessonPlayer(reading_lesson(3), LessonType.TECH_READING, on_quit=lambda: quits.append(1))
        player.reveal()
        player.advance()
        player.quit()
        assert quits == [1]
        assert player.completed is True
        assert player.reveal() is False

    def test_position(self, quiz_lesson):
        player = LessonPlayer(quiz_lesson, LessonType.QUIZ)
        assert player.get_position() == (1, 3)

    def test_lesson_is_not_mutated(self, quiz_lesson):
        before = quiz_lesson.model_dump()
        player = LessonPlayer(quiz_lesson, LessonType.QUIZ)
        player.select_option("A")
        player.advance()
        assert quiz_lesson.model_dump() == before


class TestIllustrations:

    def test_no_request_without_visual_prompt(self, manual_executor):
        fetched = []
        lesson = make_vocabulary_lesson(with_prompt=False)
        player = LessonPlayer(lesson, LessonType.VOCABULARY,
                              image_fetcher=lambda t, p: fetched.append(t),
                              executor=manual_executor)
        assert manual_executor.submitted == 0
        assert player.image is None

    def test_no_request_for_other_lesson_types(self, manual_executor):
        lesson = make_vocabulary_lesson()
        LessonPlayer(lesson, LessonType.GRAMMAR_FIX, image_fetcher=lambda t, p: "x",
                     executor=manual_executor)
        assert manual_executor.submitted == 0

    def test_one_request_per_item_entry(self, manual_executor, vocabulary_lesson):
        player = LessonPlayer(vocabulary_lesson, LessonType.VOCABULARY,
                              image_fetcher=lambda t, p: "data:image/png;base64,AAA",
                              executor=manual_executor)
        assert manual_executor.submitted == 1
        assert manual_executor.args(0) == ("term1", "a rocket leaving a pipeline")
        assert player.image.status == ImageStatus.LOADING

        manual_executor.run(0)
        assert player.image.status == ImageStatus.READY
        assert player.image.data_uri == "data:image/png;base64,AAA"
        assert player.image.item_id == "v1"

        player.reveal()
        player.advance()
        assert manual_executor.submitted == 2
        assert manual_executor.args(1)[0] == "term2"

    def test_stale_result_discarded_after_navigation(self, manual_executor, vocabulary_lesson):
        player = LessonPlayer(vocabulary_lesson, LessonType.VOCABULARY,
                              image_fetcher=lambda t, p: f"data:image/png;base64,{t}",
                              executor=manual_executor)
        player.reveal()
        player.advance()
        second = player.image
        assert second.item_id == "v2"

        # the first item's request resolves late
        manual_executor.run(0)
        assert player.image == second
        assert player.image.status == ImageStatus.LOADING

        manual_executor.run(1)
        assert player.image.data_uri == "data:image/png;base64,term2"

    def test_overlapping_requests_resolved_out_of_order(self, manual_executor):
        lesson = make_vocabulary_lesson(n=3)
        player = LessonPlayer(lesson, LessonType.VOCABULARY,
                              image_fetcher=lambda t, p: f"img-{t}",
                              executor=manual_executor)
        for _ in range(2):
            player.reveal()
            player.advance()
        assert manual_executor.submitted == 3

        manual_executor.run(2)
        manual_executor.run(1)
        manual_executor.run(0)
        assert player.image.item_id == "v3"
        assert player.image.data_uri == "img-term3"

    def test_failure_degrades_to_placeholder(self, manual_executor, vocabulary_lesson):
        player = LessonPlayer(vocabulary_lesson, LessonType.VOCABULARY,
                              image_fetcher=lambda t, p: None,
                              executor=manual_executor)
        manual_executor.fail(0, RuntimeError("quota"))
        assert player.image.status == ImageStatus.FAILED
        assert player.image.data_uri is None
        # navigation is unaffected
        assert player.reveal() is True
        assert player.advance() is True

    def test_none_result_is_failed(self, manual_executor, vocabulary_lesson):
        player = LessonPlayer(vocabulary_lesson, LessonType.VOCABULARY,
                              image_fetcher=lambda t, p: None,
                              executor=manual_executor)
        manual_executor.run(0)
        assert player.image.status == ImageStatus.FAILED

    def test_result_after_quit_is_discarded(self, manual_executor, vocabulary_lesson):
        player = LessonPlayer(vocabulary_lesson, LessonType.VOCABULARY,
                              image_fetcher=lambda t, p: "img",
                              executor=manual_executor)
        player.quit()
        manual_executor.run(0)
        assert player.image is None

    def test_reveal_not_blocked_while_loading(self, manual_executor, vocabulary_lesson):
        player = LessonPlayer(vocabulary_lesson, LessonType.VOCABULARY,
                              image_fetcher=lambda t, p: "img",
                              executor=manual_executor)
        assert player.image.status == ImageStatus.LOADING
        assert player.reveal() is True
        assert isinstance(player.current_card, VocabularyCard)


class TestImagePoolLifetime:

    def test_own_pool_closed_on_quit(self, vocabulary_lesson):
        player = LessonPlayer(vocabulary_lesson, LessonType.VOCABULARY, image_fetcher=lambda t, p: None)
        player.quit()
        with pytest.raises(RuntimeError):
            player._executor.submit(print)

    def test_own_pool_closed_on_completion(self):
        player = LessonPlayer(reading_lesson(1), LessonType.TECH_READING, image_fetcher=lambda t, p: None)
        player.reveal()
        assert player.advance() is True
        with pytest.raises(RuntimeError):
            player._executor.submit(print)

    def test_close_is_idempotent(self, vocabulary_lesson):
        player = LessonPlayer(vocabulary_lesson, LessonType.VOCABULARY, image_fetcher=lambda t, p: None)
        player.close()
        player.close()
        assert player.completed is True
        assert player.image is None

    def test_injected_executor_left_open(self, vocabulary_lesson):
        executor = ThreadPoolExecutor(max_workers=1)
        try:
            player = LessonPlayer(vocabulary_lesson, LessonType.VOCABULARY,
                                  image_fetcher=lambda t, p: None, executor=executor)
            player.quit()
            assert executor.submit(lambda: 42).result(timeout=5) == 42
        finally:
            executor.shutdown(wait=True)
