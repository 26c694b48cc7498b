"""
Shared fixtures for CodeWait tests.

Executors are replaced with deterministic stand-ins so request ordering is
controlled by the test, not by thread scheduling.
"""

from concurrent.futures import Executor, Future

import pytest

from codewait.schemas import Lesson, LessonItem


class ManualExecutor(Executor):
    """Queues submissions; the test decides when and how each resolves."""

    def __init__(self):
        self.calls = []  # (fn, args, kwargs, future)

    def submit(self, fn, /, *args, **kwargs):
        future = Future()
        self.calls.append((fn, args, kwargs, future))
        return future

    @property
    def submitted(self) -> int:
        return len(self.calls)

    def args(self, index: int) -> tuple:
        return self.calls[index][1]

    def run(self, index: int = 0):
        """Run the queued callable and resolve its future with the outcome."""
        fn, args, kwargs, future = self.calls[index]
        try:
            result = fn(*args, **kwargs)
        except Exception as e:
            future.set_exception(e)
        else:
            future.set_result(result)

    def resolve(self, index: int, result):
        self.calls[index][3].set_result(result)

    def fail(self, index: int, exc: Exception):
        self.calls[index][3].set_exception(exc)


class ImmediateExecutor(Executor):
    """Runs every submission inline."""

    def submit(self, fn, /, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


def make_quiz_lesson(n: int = 3, topic: str = "Cloud Quiz") -> Lesson:
    return Lesson(
        topic=topic,
        items=[
            LessonItem(
                id=f"q{i}",
                question=f"Question {i}?",
                explanation=f"Because {i}.",
                options=["A", "B", "C"],
                correct_answer="B",
            )
            for i in range(1, n + 1)
        ],
    )


def make_vocabulary_lesson(n: int = 2, with_prompt: bool = True) -> Lesson:
    return Lesson(
        topic="Words for Deploys",
        items=[
            LessonItem(
                id=f"v{i}",
                question=f"Define term {i}",
                explanation="Used in release notes.",
                term=f"term{i}",
                correct_answer=f"definition {i}",
                derivatives=[f"term{i}ed (adj)"],
                examples=[f"We term{i} the service."],
                visual_prompt="a rocket leaving a pipeline" if with_prompt else None,
            )
            for i in range(1, n + 1)
        ],
    )


@pytest.fixture
def manual_executor():
    return ManualExecutor()


@pytest.fixture
def immediate_executor():
    return ImmediateExecutor()


@pytest.fixture
def quiz_lesson():
    return make_quiz_lesson()


@pytest.fixture
def vocabulary_lesson():
    return make_vocabulary_lesson()
