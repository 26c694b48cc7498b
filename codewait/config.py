"""
Runtime configuration for CodeWait.

Settings come from the environment, after loading an optional .env file
from the project root (python-dotenv).
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from codewait.classroom.grading import AnswerMatchPolicy

PROJECT_ROOT = Path(__file__).parent.parent

DEFAULT_TEXT_MODEL = "gemini-2.5-flash"
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_RETRIES = 1

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


def _parse_number(name: str, value: str, cast):
    try:
        return cast(value)
    except ValueError:
        raise ValueError(f"{name} must be a {cast.__name__}, got {value!r}") from None


@dataclass(frozen=True)
class Settings:
    gemini_api_key: Optional[str] = None
    text_model: str = DEFAULT_TEXT_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    max_retries: int = DEFAULT_MAX_RETRIES
    generation_timeout: Optional[float] = None   # seconds per UI poll; None uses the app default
    images_enabled: bool = True
    answer_match_policy: AnswerMatchPolicy = AnswerMatchPolicy.EXACT
    log_level: str = "INFO"

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        dotenv_path: Optional[Path] = None,
    ) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            env: Mapping to read instead of os.environ (no .env loading then)
            dotenv_path: .env file to load (default: PROJECT_ROOT/.env)

        Raises:
            ValueError: If a variable holds an invalid value
        """
        if env is None:
            load_dotenv(dotenv_path or PROJECT_ROOT / ".env")
            env = os.environ

        timeout = env.get("CODEWAIT_GENERATION_TIMEOUT")
        policy = env.get("CODEWAIT_ANSWER_MATCH", AnswerMatchPolicy.EXACT.value)
        try:
            match_policy = AnswerMatchPolicy(policy.strip().lower())
        except ValueError:
            allowed = ", ".join(p.value for p in AnswerMatchPolicy)
            raise ValueError(f"CODEWAIT_ANSWER_MATCH must be one of: {allowed}") from None

        max_retries = _parse_number("CODEWAIT_MAX_RETRIES", env.get("CODEWAIT_MAX_RETRIES", str(DEFAULT_MAX_RETRIES)), int)
        if max_retries < 1:
            raise ValueError("CODEWAIT_MAX_RETRIES must be at least 1")

        log_level = env.get("CODEWAIT_LOG_LEVEL", "INFO").strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"CODEWAIT_LOG_LEVEL is not a logging level: {log_level!r}")

        return cls(
            gemini_api_key=env.get("GEMINI_API_KEY") or None,
            text_model=env.get("CODEWAIT_TEXT_MODEL", DEFAULT_TEXT_MODEL),
            image_model=env.get("CODEWAIT_IMAGE_MODEL", DEFAULT_IMAGE_MODEL),
            temperature=_parse_number("CODEWAIT_TEMPERATURE", env.get("CODEWAIT_TEMPERATURE", str(DEFAULT_TEMPERATURE)), float),
            max_retries=max_retries,
            generation_timeout=_parse_number("CODEWAIT_GENERATION_TIMEOUT", timeout, float) if timeout else None,
            images_enabled=_parse_bool("CODEWAIT_IMAGES", env.get("CODEWAIT_IMAGES", "true")),
            answer_match_policy=match_policy,
            log_level=log_level,
        )


def configure_logging(level: str = "INFO"):
    """Set up root logging once (later calls are no-ops, as with basicConfig)."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
