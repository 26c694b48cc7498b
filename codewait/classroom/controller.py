"""
SessionController - Top-level application state and lesson generation.

Owns:
- The application state (idle, generating, learning, summary, error)
- The user's selection, editable only while idle
- The generated lesson and its LessonPlayer
- The request epoch used to drop stale generation responses
"""

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from functools import partial
from typing import Callable, Optional

from codewait.schemas import AppState, Lesson, UserSelection

from .player import LessonPlayer
from .state_machine import SessionEvent, can_transition, transition

logger = logging.getLogger(__name__)

GENERATION_ERROR_MESSAGE = "AI backend is busy. Please try again."

LessonSource = Callable[[UserSelection], Lesson]
PlayerFactory = Callable[..., LessonPlayer]


class SessionController:
    """
    Drive the session state machine.

    Every generation request is tagged with the epoch current at issuance.
    reset() and start() both advance the epoch, so a response that arrives
    after the learner moved on is discarded instead of overwriting state.
    """

    def __init__(
        self,
        generate_lesson: LessonSource,
        executor: Optional[Executor] = None,
        player_factory: PlayerFactory = LessonPlayer,
        selection: Optional[UserSelection] = None,
    ):
        """
        Initialize controller.

        Args:
            generate_lesson: Content-generation collaborator
            executor: Executor for generation requests (default: one worker thread)
            player_factory: Builds the LessonPlayer for a generated lesson
            selection: Initial selection (default: UserSelection defaults)
        """
        self._generate_lesson = generate_lesson
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="codewait-gen")
        self._player_factory = player_factory
        self._cond = threading.Condition(threading.RLock())
        self._epoch = 0

        self.state = AppState.IDLE
        self.selection = selection or UserSelection()
        self.lesson: Optional[Lesson] = None
        self.player: Optional[LessonPlayer] = None
        self.error_message = ""

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def is_generating(self) -> bool:
        return self.state == AppState.GENERATING

    def _discard_player(self):
        if self.player is not None:
            self.player.close()
        self.player = None

    def _apply(self, event: SessionEvent):
        previous = self.state
        self.state = transition(previous, event)
        logger.info(f"State {previous.value} -> {self.state.value} ({event.value})")
        self._cond.notify_all()

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def update_selection(self, **changes) -> bool:
        """
        Edit the selection (field names or wire aliases).

        Returns False if not idle. Raises pydantic.ValidationError on
        invalid values.
        """
        with self._cond:
            if self.state != AppState.IDLE:
                logger.info(f"Ignoring selection change in state {self.state.value}")
                return False
            aliases = {f.alias: name for name, f in UserSelection.model_fields.items() if f.alias}
            data = self.selection.model_dump()
            data.update({aliases.get(key, key): value for key, value in changes.items()})
            self.selection = UserSelection.model_validate(data)
            return True

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    def start(self) -> Optional[int]:
        """
        Request a new lesson with the current selection.

        Valid from idle and from the summary view ("start again").
        Returns the request epoch, or None if ignored (e.g. already generating).
        """
        with self._cond:
            if not can_transition(self.state, SessionEvent.START):
                logger.info(f"Ignoring start in state {self.state.value}")
                return None
            self._epoch += 1
            epoch = self._epoch
            selection = self.selection
            self.error_message = ""
            self.lesson = None
            self._discard_player()
            self._apply(SessionEvent.START)

        logger.info(
            f"Generating {selection.lesson_type.value} lesson on '{selection.topic_focus}' "
            f"({selection.difficulty.value}, ~{selection.duration} min) [epoch {epoch}]"
        )
        future = self._executor.submit(self._generate_lesson, selection)
        future.add_done_callback(partial(self._on_generation_done, epoch))
        return epoch

    def _on_generation_done(self, epoch: int, future: Future):
        try:
            lesson = future.result()
        except Exception as e:
            logger.error(f"Lesson generation failed [epoch {epoch}]: {e}")
            self.resolve_failure(epoch)
            return

        if not isinstance(lesson, Lesson):
            logger.error(f"Generator returned {type(lesson).__name__}, expected Lesson")
            self.resolve_failure(epoch)
            return
        self.resolve_success(epoch, lesson)

    def resolve_success(self, epoch: int, lesson: Lesson) -> bool:
        """Accept a generated lesson if it answers the current request."""
        with self._cond:
            if epoch != self._epoch or self.state != AppState.GENERATING:
                logger.info(f"Discarding stale lesson [epoch {epoch}, current {self._epoch}]")
                return False
            self.lesson = lesson
            self.player = self._player_factory(
                lesson,
                self.selection.lesson_type,
                on_complete=self.complete,
                on_quit=self.reset,
            )
            self._apply(SessionEvent.SUCCESS)
            return True

    def resolve_failure(self, epoch: int, message: str = GENERATION_ERROR_MESSAGE) -> bool:
        """Move to the error state if the failure answers the current request."""
        with self._cond:
            if epoch != self._epoch or self.state != AppState.GENERATING:
                logger.info(f"Discarding stale failure [epoch {epoch}, current {self._epoch}]")
                return False
            self.error_message = message or GENERATION_ERROR_MESSAGE
            self._apply(SessionEvent.FAILURE)
            return True

    def wait_for_generation(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the in-flight request resolves.

        Returns True once the controller has left the generating state,
        False on timeout.
        """
        with self._cond:
            return self._cond.wait_for(lambda: self.state != AppState.GENERATING, timeout)

    # -------------------------------------------------------------------------
    # Lesson lifecycle
    # -------------------------------------------------------------------------

    def complete(self) -> bool:
        """Learning -> summary. Called by the player after the last item."""
        with self._cond:
            if not can_transition(self.state, SessionEvent.COMPLETE):
                logger.info(f"Ignoring complete in state {self.state.value}")
                return False
            self._apply(SessionEvent.COMPLETE)
            return True

    def reset(self) -> bool:
        """Return to configuration, discarding the lesson and progress."""
        with self._cond:
            if not can_transition(self.state, SessionEvent.RESET):
                logger.info(f"Ignoring reset in state {self.state.value}")
                return False
            self._epoch += 1
            self.lesson = None
            self._discard_player()
            self.error_message = ""
            self._apply(SessionEvent.RESET)
            return True
