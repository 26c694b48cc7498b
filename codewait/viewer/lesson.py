"""
Lesson renderer - HTML for one lesson card at a time.

Features:
- One render path per lesson type, dispatched on the card variant
- Pre-reveal and post-reveal content per lesson type
- Quiz options tagged correct/incorrect/selected after reveal
- Vocabulary illustration slot with loading and placeholder states
"""

import html
from typing import Optional

from codewait.classroom import (
    GrammarFixCard,
    ImageSlot,
    ImageStatus,
    LessonCard,
    OptionMark,
    OptionView,
    QuizCard,
    ReadingCard,
    VocabularyCard,
)


def get_lesson_css() -> str:
    """Get CSS styles for lesson cards."""
    return """
    <style>
    .card-container {
        background: #161b22;
        border: 1px solid #30363d;
        border-radius: 12px;
        padding: 1.5em;
        margin: 1em 0;
        color: #e6edf3;
    }
    .card-kind {
        font-size: 0.8em;
        letter-spacing: 0.08em;
        text-transform: uppercase;
        color: #8b949e;
        margin-bottom: 0.6em;
    }
    .card-question {
        font-size: 1.2em;
        line-height: 1.6;
        margin-bottom: 1em;
    }
    .card-headword {
        font-size: 2em;
        font-weight: 700;
        color: #ffffff;
    }
    .card-derivatives {
        color: #8b949e;
        margin-top: 0.3em;
    }
    .card-passage {
        background: #0d1117;
        border-left: 3px solid #2f81f7;
        padding: 0.8em 1em;
        border-radius: 0 8px 8px 0;
        font-family: "JetBrains Mono", monospace;
        font-size: 0.95em;
        margin-bottom: 1em;
    }
    .card-flawed {
        color: #ffa198;
        text-decoration: underline wavy #f85149;
    }
    .card-answer {
        background: rgba(46, 160, 67, 0.12);
        border: 1px solid #2ea043;
        border-radius: 8px;
        padding: 1em;
        margin-top: 1em;
    }
    .card-answer-label {
        font-weight: 600;
        color: #3fb950;
        margin-bottom: 0.4em;
    }
    .card-explanation {
        color: #c9d1d9;
        margin-top: 0.8em;
        line-height: 1.6;
    }
    .card-examples li {
        font-style: italic;
        margin: 0.3em 0;
    }
    .quiz-option {
        border: 1px solid #30363d;
        border-radius: 8px;
        padding: 0.6em 1em;
        margin: 0.4em 0;
    }
    .quiz-option-correct {
        border-color: #2ea043;
        background: rgba(46, 160, 67, 0.15);
    }
    .quiz-option-incorrect {
        border-color: #f85149;
        background: rgba(248, 81, 73, 0.15);
    }
    .quiz-option-selected {
        font-weight: 600;
    }
    .card-image {
        width: 100%;
        max-width: 320px;
        border-radius: 8px;
        margin-top: 1em;
    }
    .card-image-placeholder {
        width: 100%;
        max-width: 320px;
        height: 180px;
        border: 1px dashed #30363d;
        border-radius: 8px;
        display: flex;
        align-items: center;
        justify-content: center;
        color: #8b949e;
        margin-top: 1em;
    }
    </style>
    """


OPTION_ICONS = {
    OptionMark.CORRECT: "✓",
    OptionMark.INCORRECT: "✗",
    OptionMark.NEUTRAL: "",
}


def _text(value: str) -> str:
    return html.escape(value).replace('\n', '<br>')


def render_explanation(explanation: str) -> str:
    if not explanation:
        return ""
    return f'<div class="card-explanation">{_text(explanation)}</div>'


def render_answer_box(label: str, answer: str) -> str:
    """Green box with the revealed answer. Empty answers render nothing."""
    if not answer:
        return ""
    return (
        '<div class="card-answer">'
        f'<div class="card-answer-label">{html.escape(label)}</div>'
        f'<div>{_text(answer)}</div>'
        '</div>'
    )


def render_option(view: OptionView) -> str:
    classes = ["quiz-option"]
    if view.mark != OptionMark.NEUTRAL:
        classes.append(f"quiz-option-{view.mark.value}")
    if view.selected:
        classes.append("quiz-option-selected")
    icon = OPTION_ICONS[view.mark]
    suffix = f' <span class="quiz-option-icon">{icon}</span>' if icon else ""
    return f'<div class="{" ".join(classes)}">{html.escape(view.text)}{suffix}</div>'


def render_quiz_card(
    card: QuizCard,
    revealed: bool,
    options: list[OptionView],
    include_options: bool = True,
) -> str:
    """
    Render a quiz item.

    Args:
        card: QuizCard
        revealed: Whether an option has been chosen
        options: Option views from the player (already tagged)
        include_options: Render options as HTML (the UI may draw buttons instead)
    """
    parts = ['<div class="card-container card-quiz">']
    parts.append('<div class="card-kind">Quick Quiz</div>')
    parts.append(f'<div class="card-question">{_text(card.question)}</div>')

    if include_options:
        for view in options:
            parts.append(render_option(view))

    if revealed:
        if not card.graded and card.correct_answer:
            parts.append(render_answer_box("Answer", card.correct_answer))
        parts.append(render_explanation(card.explanation))

    parts.append('</div>')
    return ''.join(parts)


def render_image_slot(image: Optional[ImageSlot], alt: str) -> str:
    """Illustration, or a placeholder while loading / when unavailable."""
    if image is not None and image.status == ImageStatus.READY and image.data_uri:
        return f'<img class="card-image" src="{html.escape(image.data_uri, quote=True)}" alt="{html.escape(alt, quote=True)}">'
    if image is not None and image.status == ImageStatus.LOADING:
        return '<div class="card-image-placeholder">Generating illustration…</div>'
    return '<div class="card-image-placeholder">{ }</div>'


def render_vocabulary_card(
    card: VocabularyCard,
    revealed: bool,
    image: Optional[ImageSlot] = None,
) -> str:
    """Render a vocabulary item: headword first, definition and usage after reveal."""
    parts = ['<div class="card-container card-vocabulary">']
    parts.append('<div class="card-kind">Vocabulary</div>')
    parts.append(f'<div class="card-headword">{html.escape(card.headword)}</div>')

    if card.derivatives:
        parts.append(f'<div class="card-derivatives">{html.escape(" · ".join(card.derivatives))}</div>')

    if card.wants_image:
        parts.append(render_image_slot(image, card.headword))

    if revealed:
        parts.append(render_answer_box("Definition", card.definition))
        if card.examples:
            parts.append('<ul class="card-examples">')
            for example in card.examples:
                parts.append(f'<li>{html.escape(example)}</li>')
            parts.append('</ul>')
        parts.append(render_explanation(card.explanation))

    parts.append('</div>')
    return ''.join(parts)


def render_grammar_fix_card(card: GrammarFixCard, revealed: bool) -> str:
    """Render a grammar item: the flawed sentence, then its correction."""
    parts = ['<div class="card-container card-grammar">']
    parts.append('<div class="card-kind">Grammar Fix</div>')
    parts.append(f'<div class="card-question card-flawed">{_text(card.flawed_sentence)}</div>')

    if revealed:
        parts.append(render_answer_box("Corrected", card.correction))
        parts.append(render_explanation(card.explanation))

    parts.append('</div>')
    return ''.join(parts)


def render_reading_card(card: ReadingCard, revealed: bool) -> str:
    """Render a reading item: passage and question, then the answer."""
    parts = ['<div class="card-container card-reading">']
    parts.append('<div class="card-kind">Tech Reading</div>')
    if card.passage:
        parts.append(f'<div class="card-passage">{_text(card.passage)}</div>')
    parts.append(f'<div class="card-question">{_text(card.question)}</div>')

    if revealed:
        parts.append(render_answer_box("Answer", card.answer))
        parts.append(render_explanation(card.explanation))

    parts.append('</div>')
    return ''.join(parts)


def render_card(
    card: LessonCard,
    revealed: bool,
    options: Optional[list[OptionView]] = None,
    image: Optional[ImageSlot] = None,
    include_options: bool = True,
) -> str:
    """Render any lesson card."""
    if isinstance(card, QuizCard):
        return render_quiz_card(card, revealed, options or [], include_options)
    elif isinstance(card, VocabularyCard):
        return render_vocabulary_card(card, revealed, image)
    elif isinstance(card, GrammarFixCard):
        return render_grammar_fix_card(card, revealed)
    elif isinstance(card, ReadingCard):
        return render_reading_card(card, revealed)
    else:
        return f"<p>Unknown card type: {html.escape(type(card).__name__)}</p>"


def render_player(player, include_options: bool = True) -> str:
    """Render the current item of a LessonPlayer."""
    return render_card(
        player.current_card,
        player.revealed,
        options=player.option_views(),
        image=player.image,
        include_options=include_options,
    )


def render_position(current: int, total: int) -> str:
    """Position label, e.g. 'Item 2 of 5'."""
    return f'<div class="card-kind">Item {current} of {total}</div>'
