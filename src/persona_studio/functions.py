"""Serverless entry points.

One synchronous handler per function, suitable as an AWS Lambda handler
(``persona_studio.functions.process_persona`` and so on). The dependency
context is built once per process and reused across warm invocations.
"""

import asyncio
from collections.abc import Callable
from typing import Any

from persona_studio.api.dependencies import AppContext
from persona_studio.api.endpoints import build_handlers
from persona_studio.core.logging import setup_logging

_context = AppContext.from_env()
setup_logging(_context.settings.log_level)
_handlers = build_handlers(_context)


def make_sync_handler(name: str) -> Callable[[dict[str, Any], Any], dict[str, Any]]:
    handler = _handlers[name]

    def invoke(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
        return asyncio.run(handler(event, context))

    invoke.__name__ = name.replace("-", "_")
    return invoke


process_persona = make_sync_handler("process-persona")
save_persona = make_sync_handler("save-persona")
get_persona = make_sync_handler("get-persona")
list_personas = make_sync_handler("list-personas")
chat = make_sync_handler("chat")
