"""
Summary renderer - Session summary and quiz score display.
"""

import html
from typing import Optional


def get_summary_css() -> str:
    """Get CSS styles for the summary view."""
    return """
    <style>
    .summary-box {
        background: rgba(110, 118, 129, 0.1);
        border: 1px solid #30363d;
        border-radius: 12px;
        padding: 1.5em;
        margin: 1em auto;
        max-width: 32em;
    }
    .summary-row {
        display: flex;
        justify-content: space-between;
        margin: 0.5em 0;
        color: #c9d1d9;
    }
    .summary-value {
        font-family: "JetBrains Mono", monospace;
        color: #ffffff;
    }
    .quiz-score-value {
        font-size: 2em;
        font-weight: 700;
        color: #3fb950;
        text-align: center;
    }
    .quiz-score-label {
        color: #8b949e;
        font-size: 0.9em;
        text-align: center;
    }
    </style>
    """


def calculate_quiz_score(correct_count: int, total: int) -> dict:
    """
    Calculate quiz score.

    Args:
        correct_count: Number answered correctly
        total: Number of graded questions

    Returns:
        Dict with score info
    """
    if total == 0:
        return {"score": 1.0, "percent": 100, "correct": 0, "total": 0}

    score = correct_count / total
    return {
        "score": round(score, 2),
        "percent": round(score * 100),
        "correct": correct_count,
        "total": total,
    }


def render_quiz_score(score_info: dict) -> str:
    """Render quiz score display."""
    return f"""
    <div class="quiz-score-value">{score_info['percent']}%</div>
    <div class="quiz-score-label">{score_info['correct']} of {score_info['total']} correct</div>
    """


def render_summary(
    lesson_title: str,
    topic_focus: str,
    duration: int,
    score_info: Optional[dict] = None,
) -> str:
    """Render the end-of-session summary box."""
    parts = ['<div class="summary-box">']
    parts.append(
        '<div class="summary-row"><span>Lesson</span>'
        f'<span class="summary-value">{html.escape(lesson_title)}</span></div>'
    )
    parts.append(
        '<div class="summary-row"><span>Topic Covered</span>'
        f'<span class="summary-value">{html.escape(topic_focus)}</span></div>'
    )
    parts.append(
        '<div class="summary-row"><span>Duration</span>'
        f'<span class="summary-value">~{int(duration)} min</span></div>'
    )
    if score_info is not None:
        parts.append(render_quiz_score(score_info))
    parts.append('</div>')
    return ''.join(parts)
