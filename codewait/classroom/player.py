"""
LessonPlayer - Per-item navigation, answer reveal, scoring and illustrations.

Provides:
- Quiz option selection with exact-match scoring
- Answer reveal for vocabulary, grammar and reading items
- Advance to the next item, signalling completion after the last one
- Vocabulary illustrations fetched in the background, one token per request
"""

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Callable, Optional

from codewait.schemas import Lesson, LessonItem, LessonType, SessionProgress

from .cards import LessonCard, QuizCard, VocabularyCard, build_card
from .grading import AnswerMatchPolicy, OptionView, answers_match, mark_options

logger = logging.getLogger(__name__)

# (term, visual_prompt) -> data URI or None
ImageFetcher = Callable[[str, str], Optional[str]]


class ImageStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class ImageSlot:
    """Illustration state for the currently displayed item."""
    item_id: str
    token: int
    status: ImageStatus
    data_uri: Optional[str] = None


class LessonPlayer:
    """
    Drive one lesson from the first item to completion.

    Session progress lives here and nowhere else; a new player is created
    for every lesson, so progress is reset by construction.
    """

    def __init__(
        self,
        lesson: Lesson,
        lesson_type: LessonType,
        on_complete: Optional[Callable[[], object]] = None,
        on_quit: Optional[Callable[[], object]] = None,
        image_fetcher: Optional[ImageFetcher] = None,
        executor: Optional[Executor] = None,
        match_policy: AnswerMatchPolicy = AnswerMatchPolicy.EXACT,
    ):
        """
        Initialize player.

        Args:
            lesson: Lesson to play (not copied, never mutated)
            lesson_type: Lesson type, selects the card variant
            on_complete: Called once after the last item is acknowledged
            on_quit: Called when the learner quits early
            image_fetcher: Image collaborator; None disables illustrations
            executor: Executor for image requests (default: small thread pool)
            match_policy: Quiz answer matching policy
        """
        self.lesson = lesson
        self.lesson_type = LessonType(lesson_type)
        self.match_policy = match_policy
        self.cards: list[LessonCard] = [
            build_card(item, self.lesson_type, match_policy) for item in lesson.items
        ]
        self.progress = SessionProgress()
        self.completed = False
        self.image: Optional[ImageSlot] = None

        self._on_complete = on_complete
        self._on_quit = on_quit
        self._image_fetcher = image_fetcher
        # A pool created here is owned by the player and closed with it
        self._owns_executor = image_fetcher is not None and executor is None
        if self._owns_executor:
            executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="codewait-img")
        self._executor = executor
        self._image_token = 0
        self._lock = threading.RLock()

        self._enter_item()

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def item_count(self) -> int:
        return len(self.cards)

    @property
    def current_index(self) -> int:
        return self.progress.current_index

    @property
    def current_card(self) -> LessonCard:
        return self.cards[self.progress.current_index]

    @property
    def current_item(self) -> LessonItem:
        return self.lesson.items[self.progress.current_index]

    @property
    def revealed(self) -> bool:
        return self.progress.revealed

    @property
    def score(self) -> int:
        return self.progress.score

    @property
    def is_last_item(self) -> bool:
        return self.progress.current_index == self.item_count - 1

    @property
    def graded_count(self) -> int:
        """Number of items that can contribute to the score."""
        return sum(1 for c in self.cards if isinstance(c, QuizCard) and c.graded)

    def get_position(self) -> tuple[int, int]:
        """Current position as (1-based index, total)."""
        return (self.progress.current_index + 1, self.item_count)

    def can_reveal(self) -> bool:
        """Whether reveal() applies to the current item."""
        if self.completed or self.progress.revealed:
            return False
        card = self.current_card
        # Quiz items reveal through selection, unless there is nothing to select
        return not isinstance(card, QuizCard) or not card.options

    def option_views(self) -> list[OptionView]:
        """Options of the current quiz item, tagged for display."""
        card = self.current_card
        if not isinstance(card, QuizCard):
            return []
        return mark_options(
            card.options,
            card.correct_answer,
            self.progress.selected_option,
            self.progress.revealed,
            graded=card.graded,
            policy=self.match_policy,
        )

    # -------------------------------------------------------------------------
    # Learner actions
    # -------------------------------------------------------------------------

    def select_option(self, option: str) -> bool:
        """
        Answer the current quiz item.

        Returns True if the selection was recorded, False if ignored
        (not a quiz item, already revealed, or not one of the options).
        """
        with self._lock:
            card = self.current_card
            if self.completed or not isinstance(card, QuizCard):
                return False
            if self.progress.revealed:
                logger.debug(f"Ignoring selection on revealed item {card.item_id}")
                return False
            if option not in card.options:
                logger.warning(f"Ignoring unknown option for item {card.item_id}: {option!r}")
                return False

            self.progress.selected_option = option
            self.progress.revealed = True
            if card.graded and answers_match(option, card.correct_answer, self.match_policy):
                self.progress.score += 1
            return True

    def reveal(self) -> bool:
        """Show the answer of a non-quiz item. Returns False if ignored."""
        with self._lock:
            if not self.can_reveal():
                return False
            self.progress.revealed = True
            return True

    def advance(self) -> bool:
        """
        Move past the current (revealed) item.

        On the last item this signals completion exactly once and the index
        stays put. Returns False if ignored.
        """
        with self._lock:
            if self.completed or not self.progress.revealed:
                return False

            if self.is_last_item:
                self.close()
                notify = self._on_complete
            else:
                self.progress.current_index += 1
                self.progress.revealed = False
                self.progress.selected_option = None
                self._enter_item()
                notify = None

        if notify is not None:
            logger.info(f"Lesson complete: {self.lesson.topic} (score {self.progress.score})")
            notify()
        return True

    def quit(self) -> None:
        """Leave the lesson early, regardless of position."""
        self.close()
        if self._on_quit is not None:
            self._on_quit()

    def close(self) -> None:
        """
        Stop the lesson: later actions are ignored and any in-flight
        illustration is discarded. Safe to call more than once.
        """
        with self._lock:
            self.completed = True
            self._invalidate_image()
            if self._owns_executor:
                self._executor.shutdown(wait=False)
                self._owns_executor = False

    # -------------------------------------------------------------------------
    # Illustrations
    # -------------------------------------------------------------------------

    def _invalidate_image(self):
        self._image_token += 1
        self.image = None

    def _enter_item(self):
        """Issue an illustration request for the item just entered, if any."""
        self._invalidate_image()
        card = self.current_card
        if self._image_fetcher is None:
            return
        if not isinstance(card, VocabularyCard) or not card.wants_image:
            return

        token = self._image_token
        self.image = ImageSlot(item_id=card.item_id, token=token, status=ImageStatus.LOADING)
        logger.debug(f"Requesting illustration for {card.term!r} (token {token})")
        future = self._executor.submit(self._image_fetcher, card.term, card.visual_prompt)
        future.add_done_callback(partial(self._on_image_done, token, card.item_id))

    def _on_image_done(self, token: int, item_id: str, future: Future):
        try:
            data_uri = future.result()
        except Exception as e:
            logger.warning(f"Illustration request failed for item {item_id}: {e}")
            data_uri = None

        with self._lock:
            if token != self._image_token:
                logger.debug(f"Discarding stale illustration for item {item_id} (token {token})")
                return
            status = ImageStatus.READY if data_uri else ImageStatus.FAILED
            self.image = ImageSlot(item_id=item_id, token=token, status=status, data_uri=data_uri)
