"""Extraction collaborators."""

from .base import PERSONA_SYSTEM_PROMPT, PersonaExtractor, build_user_message, parse_json_object

__all__ = ["PERSONA_SYSTEM_PROMPT", "PersonaExtractor", "build_user_message", "parse_json_object"]
