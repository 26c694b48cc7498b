"""
Prompt templates for the Gemini collaborators.

Templates are YAML files under codewait/prompts/ with a `user_template`
string, an optional `system` instruction and, for lessons, per-lesson-type
`type_guidance`.
"""

from pathlib import Path
from typing import Any

import yaml


PROMPTS_DIR = Path(__file__).parent.parent / "prompts"

REQUIRED_KEYS = ("user_template",)


def load_prompt(name: str) -> dict[str, Any]:
    """
    Load a prompt template by name (without .yaml).

    Raises:
        FileNotFoundError: If the template doesn't exist
        ValueError: If the file is not a mapping or lacks user_template
        yaml.YAMLError: If YAML parsing fails
    """
    file_path = PROMPTS_DIR / f"{name}.yaml"
    if not file_path.exists():
        raise FileNotFoundError(f"Prompt template not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f)

    if not isinstance(config, dict):
        raise ValueError(f"Prompt template {name} must be a mapping")
    missing = [key for key in REQUIRED_KEYS if not config.get(key)]
    if missing:
        raise ValueError(f"Prompt template {name} is missing: {', '.join(missing)}")
    return config


def format_prompt(template: str, **kwargs) -> str:
    """Fill {placeholders} in a template; a missing value raises KeyError."""
    return template.format(**kwargs)
