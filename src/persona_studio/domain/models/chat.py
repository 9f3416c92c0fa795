"""Chat contracts."""

from enum import Enum
from typing import Annotated

from pydantic import AfterValidator, Field, StrictStr
from pydantic_core import PydanticCustomError

from .base import ContractModel, PersonaId, max_items

MAX_MESSAGE_LENGTH = 4000
MAX_HISTORY = 10


class ChatRole(str, Enum):
    USER = "user"
    AGENT = "agent"


def _check_message(value: str) -> str:
    if len(value) < 1:
        raise PydanticCustomError("message_empty", "Message cannot be empty")
    if len(value) > MAX_MESSAGE_LENGTH:
        raise PydanticCustomError("message_too_long", "Message cannot exceed 4000 characters")
    return value


class ChatHistoryEntry(ContractModel):
    role: ChatRole
    content: StrictStr


class ChatRequest(ContractModel):
    message: Annotated[StrictStr, AfterValidator(_check_message)]
    persona_id: PersonaId
    conversation_id: StrictStr | None = None
    history: Annotated[list[ChatHistoryEntry], max_items(MAX_HISTORY, "Maximum 10 history entries allowed")] = Field(
        default_factory=list
    )

    def recent_history(self) -> list[ChatHistoryEntry]:
        return self.history[-MAX_HISTORY:]


class ChatMessageMetadata(ContractModel):
    tokens_used: int | None = None
    processing_time_ms: float | None = None


class ChatMessage(ContractModel):
    """One turn of a conversation."""

    id: StrictStr
    role: ChatRole
    content: StrictStr
    timestamp: StrictStr
    metadata: ChatMessageMetadata | None = None


class ChatResponseMetadata(ContractModel):
    tokens_used: int
    processing_time_ms: float
    agents_involved: list[str] = Field(default_factory=list)


class ChatResponse(ContractModel):
    success: bool
    response: str | None = None
    conversation_id: str | None = None
    message_id: str | None = None
    error: str | None = None
    metadata: ChatResponseMetadata | None = None
