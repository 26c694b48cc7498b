"""
Image generator - Illustrations for vocabulary terms.

Never raises: any failure resolves to None and the viewer shows a
placeholder instead.
"""

import base64
import logging
from typing import Optional

from codewait.utils.prompt_loader import format_prompt, load_prompt

from .gemini_client import GeminiClient

logger = logging.getLogger(__name__)


def to_data_uri(mime_type: str, data: bytes | str) -> str:
    """Encode image data as a data URI. str data is taken as base64 already."""
    if isinstance(data, bytes):
        data = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{data}"


class ImageGenerator:
    """Image-generation collaborator: (term, visual_prompt) -> data URI or None."""

    def __init__(self, client: GeminiClient, prompt_config: Optional[dict] = None):
        self.client = client
        self.prompt_config = prompt_config or load_prompt("generate_image")

    def build_prompt(self, term: str, visual_prompt: str) -> str:
        return format_prompt(
            self.prompt_config["user_template"],
            term=term,
            visual_prompt=visual_prompt,
        ).strip()

    def __call__(self, term: str, visual_prompt: str) -> Optional[str]:
        try:
            result = self.client.generate_image(self.build_prompt(term, visual_prompt))
        except Exception as e:
            logger.warning(f"Image generation failed for {term!r}: {e}")
            return None

        if not result:
            logger.info(f"No image returned for {term!r}")
            return None
        mime_type, data = result
        return to_data_uri(mime_type, data)
