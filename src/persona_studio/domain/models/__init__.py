"""Contract models for Persona Studio."""

from .base import PERSONA_ID_PATTERN, ContractModel, PersonaId, is_valid_persona_id
from .chat import (
    ChatHistoryEntry,
    ChatMessage,
    ChatMessageMetadata,
    ChatRequest,
    ChatResponse,
    ChatResponseMetadata,
    ChatRole,
)
from .pagination import Pagination
from .persona import (
    GetPersonaQuery,
    GetPersonaResponse,
    ListPersonasResponse,
    Persona,
    PersonaInput,
    PersonaMetadata,
    PersonaSummary,
    ProcessPersonaResponse,
    RawData,
    SavePersonaPayload,
    SavePersonaResponse,
    is_usable_extraction,
    normalize_extraction,
)

__all__ = [
    "PERSONA_ID_PATTERN",
    # Chat
    "ChatHistoryEntry",
    "ChatMessage",
    "ChatMessageMetadata",
    "ChatRequest",
    "ChatResponse",
    "ChatResponseMetadata",
    "ChatRole",
    # Base
    "ContractModel",
    # Persona
    "GetPersonaQuery",
    "GetPersonaResponse",
    "ListPersonasResponse",
    # Pagination
    "Pagination",
    "Persona",
    "PersonaId",
    "PersonaInput",
    "PersonaMetadata",
    "PersonaSummary",
    "ProcessPersonaResponse",
    "RawData",
    "SavePersonaPayload",
    "SavePersonaResponse",
    "is_usable_extraction",
    "normalize_extraction",
    "is_valid_persona_id",
]
