"""
CodeWait English - Micro-lessons for developers waiting on builds and deploys.

Streamlit application: pick a duration, lesson type, topic and difficulty,
get a generated lesson, and work through it item by item.

Usage:
    streamlit run app.py
"""

import logging
from functools import partial

import streamlit as st

from codewait.classroom import ImageStatus, LessonPlayer, QuizCard, SessionController
from codewait.config import Settings, configure_logging
from codewait.generation import GeminiClient, ImageGenerator, LessonGenerator
from codewait.schemas import (
    AppState,
    DIFFICULTY_LABELS,
    DURATION_CHOICES,
    Difficulty,
    LessonType,
    TOPIC_SUGGESTIONS,
)
from codewait.viewer import (
    CUSTOM_TOPIC_KEY,
    TOPIC_CHOICE_KEY,
    apply_custom_topic,
    apply_topic_choice,
    calculate_quiz_score,
    get_lesson_css,
    get_summary_css,
    render_player,
    render_position,
    render_summary,
)

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------

IMAGE_POLL_SECONDS = 1.0
GENERATION_POLL_SECONDS = 2.0

REVEAL_LABELS = {
    LessonType.VOCABULARY: "Reveal Definition",
    LessonType.GRAMMAR_FIX: "Show Correction",
    LessonType.TECH_READING: "Show Answer",
    LessonType.QUIZ: "Show Answer",
}

st.set_page_config(
    page_title="CodeWait English",
    page_icon="⌛",
    layout="wide",
    initial_sidebar_state="collapsed",
)


# -----------------------------------------------------------------------------
# Session State Initialization
# -----------------------------------------------------------------------------

def build_controller(settings: Settings) -> SessionController:
    """Wire the Gemini collaborators into a SessionController."""
    client = GeminiClient(
        api_key=settings.gemini_api_key,
        model=settings.text_model,
        image_model=settings.image_model,
        temperature=settings.temperature,
        max_retries=settings.max_retries,
    )
    image_fetcher = ImageGenerator(client) if settings.images_enabled else None
    player_factory = partial(
        LessonPlayer,
        image_fetcher=image_fetcher,
        match_policy=settings.answer_match_policy,
    )
    return SessionController(LessonGenerator(client), player_factory=player_factory)


def init_session_state():
    """Initialize session state variables."""
    if "settings" not in st.session_state:
        settings = Settings.from_env()
        configure_logging(settings.log_level)
        st.session_state.settings = settings

    if "controller" not in st.session_state:
        try:
            st.session_state.controller = build_controller(st.session_state.settings)
            st.session_state.setup_error = None
        except ValueError as e:
            logger.error(f"Could not initialize Gemini client: {e}")
            st.session_state.controller = None
            st.session_state.setup_error = str(e)


# -----------------------------------------------------------------------------
# Header
# -----------------------------------------------------------------------------

def render_header():
    st.markdown("## ⌛ CodeWait<span style='color:#3fb950;font-weight:300'>English</span>",
                unsafe_allow_html=True)
    st.divider()


# -----------------------------------------------------------------------------
# Idle: Configuration Dashboard
# -----------------------------------------------------------------------------

def render_idle_view(controller: SessionController):
    """Render the configuration view."""
    selection = controller.selection

    st.markdown("<h2 style='text-align:center'>Compiling? Deploying?</h2>", unsafe_allow_html=True)
    st.markdown("<p style='text-align:center;color:#8b949e'>Turn that 5-minute wait into a skill upgrade.</p>",
                unsafe_allow_html=True)

    col_config, col_info = st.columns(2)

    with col_config:
        st.caption("AVAILABLE TIME")
        duration_cols = st.columns(len(DURATION_CHOICES))
        for col, minutes in zip(duration_cols, DURATION_CHOICES):
            with col:
                if st.button(
                    f"{minutes} MIN",
                    key=f"duration_{minutes}",
                    type="primary" if selection.duration == minutes else "secondary",
                    use_container_width=True,
                ):
                    controller.update_selection(duration=minutes)
                    st.rerun()

        st.caption("TRAINING MODE")
        lesson_types = list(LessonType)
        chosen_type = st.radio(
            "Training mode",
            lesson_types,
            index=lesson_types.index(selection.lesson_type),
            format_func=lambda t: t.value,
            horizontal=True,
            label_visibility="collapsed",
        )
        if chosen_type != selection.lesson_type:
            controller.update_selection(lesson_type=chosen_type)

        st.caption("FOCUS AREA")
        topics = list(TOPIC_SUGGESTIONS)
        st.selectbox(
            "Focus area",
            topics,
            index=topics.index(selection.topic_focus) if selection.topic_focus in topics else 0,
            key=TOPIC_CHOICE_KEY,
            on_change=apply_topic_choice,
            args=(controller, st.session_state),
            label_visibility="collapsed",
        )
        st.text_input(
            "Or type your own focus area",
            key=CUSTOM_TOPIC_KEY,
            on_change=apply_custom_topic,
            args=(controller, st.session_state),
            placeholder="e.g., Kubernetes, code review",
        )
        st.caption(f"Focus in effect: **{selection.topic_focus}**")

        if st.button("Start Session ▶", type="primary", use_container_width=True):
            controller.start()
            st.rerun()

    with col_info:
        st.markdown("#### Why \"CodeWait\"?")
        st.markdown(
            "Context switching destroys flow. Instead of checking social media while waiting "
            "for a build, keep your \"engineering brain\" active by learning technical English "
            "terms and concepts."
        )

        st.markdown("#### Difficulty Level")
        difficulty_cols = st.columns(len(Difficulty))
        for col, level in zip(difficulty_cols, Difficulty):
            with col:
                if st.button(
                    DIFFICULTY_LABELS[level],
                    key=f"difficulty_{level.name}",
                    type="primary" if selection.difficulty == level else "secondary",
                    use_container_width=True,
                ):
                    controller.update_selection(difficulty=level)
                    st.rerun()


# -----------------------------------------------------------------------------
# Generating / Error
# -----------------------------------------------------------------------------

def render_generating_view(controller: SessionController):
    """Block on the in-flight request, then rerun into the next view."""
    settings = st.session_state.settings
    st.subheader("Generating Lesson...")
    if st.button("Cancel"):
        controller.reset()
        st.rerun()
    with st.spinner(f"Fetching context for {controller.selection.topic_focus}..."):
        controller.wait_for_generation(settings.generation_timeout or GENERATION_POLL_SECONDS)
    st.rerun()


def render_error_view(controller: SessionController):
    st.error(controller.error_message or "Something went wrong")
    if st.button("Try Again"):
        controller.reset()
        st.rerun()


# -----------------------------------------------------------------------------
# Learning
# -----------------------------------------------------------------------------

@st.fragment(run_every=IMAGE_POLL_SECONDS)
def watch_illustration():
    """Poll while an illustration loads; rerun the page once it settles."""
    controller = st.session_state.controller
    player = controller.player if controller else None
    if player is None or player.image is None or player.image.status != ImageStatus.LOADING:
        st.rerun()


def render_learning_view(controller: SessionController):
    """Render the current lesson item and its actions."""
    player = controller.player
    if player is None:
        st.error("No lesson loaded.")
        return

    if st.button("← Quit Lesson"):
        player.quit()
        st.rerun()

    current, total = player.get_position()
    st.markdown(f"### {controller.lesson.topic}")
    st.markdown(render_position(current, total), unsafe_allow_html=True)
    st.progress(current / total)

    card = player.current_card
    quiz_buttons = isinstance(card, QuizCard) and bool(card.options) and not player.revealed

    st.markdown(get_lesson_css(), unsafe_allow_html=True)
    st.markdown(render_player(player, include_options=not quiz_buttons), unsafe_allow_html=True)

    if player.image is not None and player.image.status == ImageStatus.LOADING:
        watch_illustration()

    if quiz_buttons:
        for i, option in enumerate(card.options):
            if st.button(option, key=f"option_{card.item_id}_{i}", use_container_width=True):
                player.select_option(option)
                st.rerun()
    elif player.can_reveal():
        if st.button(REVEAL_LABELS[player.lesson_type], use_container_width=True):
            player.reveal()
            st.rerun()

    if player.revealed:
        label = "Finish" if player.is_last_item else "Next →"
        if st.button(label, type="primary"):
            player.advance()
            st.rerun()


# -----------------------------------------------------------------------------
# Summary
# -----------------------------------------------------------------------------

def render_summary_view(controller: SessionController):
    """Render the end-of-session summary."""
    selection = controller.selection
    player = controller.player

    st.markdown("<h2 style='text-align:center'>Session Complete!</h2>", unsafe_allow_html=True)
    st.markdown("<p style='text-align:center;color:#8b949e'>You've productively used your wait time.</p>",
                unsafe_allow_html=True)

    score_info = None
    if player is not None and player.graded_count:
        score_info = calculate_quiz_score(player.score, player.graded_count)

    st.markdown(get_summary_css(), unsafe_allow_html=True)
    st.markdown(
        render_summary(
            controller.lesson.topic if controller.lesson else "",
            selection.topic_focus,
            selection.duration,
            score_info,
        ),
        unsafe_allow_html=True,
    )

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Home", use_container_width=True):
            controller.reset()
            st.rerun()
    with col2:
        if st.button("Start Another", type="primary", use_container_width=True):
            controller.start()
            st.rerun()


# -----------------------------------------------------------------------------
# Main App
# -----------------------------------------------------------------------------

VIEWS = {
    AppState.IDLE: render_idle_view,
    AppState.GENERATING: render_generating_view,
    AppState.LEARNING: render_learning_view,
    AppState.SUMMARY: render_summary_view,
    AppState.ERROR: render_error_view,
}


def main():
    """Main application entry point."""
    init_session_state()
    render_header()

    controller = st.session_state.controller
    if controller is None:
        st.error(st.session_state.setup_error)
        st.code("""
# Configure the Gemini API key:
echo "GEMINI_API_KEY=your-key" >> .env
streamlit run app.py
        """)
        return

    VIEWS[controller.state](controller)


if __name__ == "__main__":
    main()
