"""Endpoint registry.

Each endpoint module exposes ``build_handler(context)`` returning a platform
handler for its function name.
"""

from persona_studio.api.dependencies import AppContext
from persona_studio.api.pipeline import PlatformHandler

from . import chat, get_persona, list_personas, process_persona, save_persona

ENDPOINTS = (process_persona, save_persona, get_persona, list_personas, chat)


def build_handlers(context: AppContext) -> dict[str, PlatformHandler]:
    """Platform handlers keyed by function name."""
    return {module.FUNCTION_NAME: module.build_handler(context) for module in ENDPOINTS}
