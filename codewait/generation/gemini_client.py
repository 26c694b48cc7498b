"""
Gemini API client wrapper (google-genai SDK).

Two calls are used:
- JSON text generation constrained by a response schema
- Image generation returning the first inline image part
"""

import logging
import os
import time
from typing import Any, Optional

from google import genai
from google.genai import types as genai_types

from codewait.config import DEFAULT_IMAGE_MODEL, DEFAULT_MAX_RETRIES, DEFAULT_TEMPERATURE, DEFAULT_TEXT_MODEL

logger = logging.getLogger(__name__)

DEFAULT_RETRY_SLEEP = 1.0


class GeminiClient:
    """Wrapper for Gemini API with retries."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_TEXT_MODEL,
        image_model: str = DEFAULT_IMAGE_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_sleep: float = DEFAULT_RETRY_SLEEP,
        client: Any = None,
    ):
        self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
        if client is None:
            if not self.api_key:
                raise ValueError("GEMINI_API_KEY not set. Check your .env file.")
            client = genai.Client(api_key=self.api_key)

        self.client = client
        self.model_name = model
        self.image_model_name = image_model
        self.temperature = temperature
        self.max_retries = max(1, max_retries)
        self.retry_sleep = retry_sleep

    def generate_json(
        self,
        system_prompt: str,
        user_prompt: str,
        response_schema: genai_types.Schema | None = None,
    ) -> str:
        """Generate JSON text; raises the last error after all attempts fail."""
        config = genai_types.GenerateContentConfig(
            system_instruction=system_prompt or None,
            temperature=self.temperature,
            response_mime_type="application/json",
            response_schema=response_schema,
        )

        for attempt in range(self.max_retries):
            try:
                response = self.client.models.generate_content(
                    model=self.model_name,
                    contents=user_prompt,
                    config=config,
                )

                if response.text is None:
                    if response.candidates and len(response.candidates) > 0:
                        candidate = response.candidates[0]
                        if candidate.content and candidate.content.parts:
                            text = candidate.content.parts[0].text
                            if text:
                                return text
                    raise ValueError("Empty response from API")

                return response.text

            except Exception as e:
                logger.warning(f"API call failed (attempt {attempt + 1}/{self.max_retries}): {e}")
                if attempt < self.max_retries - 1:
                    time.sleep(self.retry_sleep * (attempt + 1))
                else:
                    raise

    def generate_image(self, prompt: str) -> Optional[tuple[str, bytes]]:
        """
        Generate an image.

        Returns:
            (mime_type, raw bytes) of the first inline image part, or None
            if the response carries no image
        """
        response = self.client.models.generate_content(
            model=self.image_model_name,
            contents=prompt,
        )

        if not response.candidates:
            return None
        content = response.candidates[0].content
        for part in (content.parts if content and content.parts else []):
            inline = part.inline_data
            if inline is not None and inline.data:
                return inline.mime_type or "image/png", inline.data
        return None
