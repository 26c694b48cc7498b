"""
Focus-area input: a suggestions dropdown plus a free-text box.

Whichever widget the learner touched last decides the topic. Picking from
the dropdown clears the free-text box so a stale custom topic can't
silently override it.
"""

from typing import MutableMapping

from codewait.schemas import TOPIC_SUGGESTIONS

TOPIC_CHOICE_KEY = "topic_choice"
CUSTOM_TOPIC_KEY = "custom_topic"


def apply_topic_choice(controller, state: MutableMapping) -> None:
    """Dropdown changed: its value wins and the custom text is cleared."""
    state[CUSTOM_TOPIC_KEY] = ""
    controller.update_selection(topic_focus=state[TOPIC_CHOICE_KEY])


def apply_custom_topic(controller, state: MutableMapping) -> None:
    """Custom text changed: non-blank text wins, blank falls back to the dropdown."""
    custom = (state.get(CUSTOM_TOPIC_KEY) or "").strip()
    topic = custom or state.get(TOPIC_CHOICE_KEY) or TOPIC_SUGGESTIONS[0]
    controller.update_selection(topic_focus=topic)
