"""Endpoint orchestration services."""

from .chat_service import ChatService
from .mock_responder import MockResponder
from .persona_service import ExtractionOutcome, ExtractionRejected, PersonaExtracted, PersonaService

__all__ = [
    "ChatService",
    "ExtractionOutcome",
    "ExtractionRejected",
    "MockResponder",
    "PersonaExtracted",
    "PersonaService",
]
