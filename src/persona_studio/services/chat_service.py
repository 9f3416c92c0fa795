"""Chat endpoint orchestration."""

import math
import secrets
import time
from typing import Any

from persona_studio.core.logging import get_logger
from persona_studio.domain.models import ChatRequest, ChatResponse, ChatResponseMetadata
from persona_studio.domain.models.utils import epoch_ms
from persona_studio.domain.validation import validate_input
from persona_studio.infrastructure.repositories import PersonaRepository

from .mock_responder import MockResponder

logger = get_logger(__name__)


def new_conversation_id() -> str:
    return f"conv_{secrets.token_urlsafe(9)}"


def new_message_id() -> str:
    return f"msg_{epoch_ms()}_{secrets.token_urlsafe(6)}"


def estimate_tokens(text: str) -> int:
    """Rough token count: four characters per token."""
    return math.ceil(len(text) / 4)


class ChatService:
    def __init__(self, repository: PersonaRepository, responder: MockResponder):
        self.repository = repository
        self.responder = responder

    async def _persona_name(self, persona_id: str) -> str | None:
        """Name of the persona for context. Chat goes on without it."""
        try:
            raw = await self.repository.get_raw(persona_id)
        except Exception as e:
            logger.info("Could not load persona for context", persona_id=persona_id, error=e)
            return None
        name = raw.get("name")
        logger.info("Persona loaded for context", persona_name=name)
        return name if isinstance(name, str) else None

    async def chat(self, raw_body: Any) -> ChatResponse:
        started = time.perf_counter()
        request = validate_input(ChatRequest, raw_body)
        history = request.recent_history()
        logger.info(
            "Chat input validated",
            message_length=len(request.message),
            persona_id=request.persona_id,
            history_length=len(history),
        )

        persona_name = await self._persona_name(request.persona_id)
        conversation_id = request.conversation_id or new_conversation_id()
        message_id = new_message_id()
        reply = self.responder.respond(request.message, persona_name)

        processing_time_ms = round((time.perf_counter() - started) * 1000, 3)
        logger.info(
            "Mock response generated successfully",
            conversation_id=conversation_id,
            message_id=message_id,
            response_length=len(reply),
            processing_time_ms=processing_time_ms,
        )
        return ChatResponse(
            success=True,
            response=reply,
            conversation_id=conversation_id,
            message_id=message_id,
            metadata=ChatResponseMetadata(
                tokens_used=estimate_tokens(reply),
                processing_time_ms=processing_time_ms,
                agents_involved=[self.responder.agent_name],
            ),
        )
