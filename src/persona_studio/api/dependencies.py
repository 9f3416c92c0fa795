"""API dependencies.

``AppContext`` is built once per process and handed to every endpoint
builder. Collaborator clients inside it are created lazily on first use and
reused afterwards.
"""

from functools import cached_property

from persona_studio.core.config import Settings, get_settings
from persona_studio.core.logging import get_logger
from persona_studio.infrastructure.extraction import PersonaExtractor
from persona_studio.infrastructure.extraction.anthropic_extractor import AnthropicPersonaExtractor
from persona_studio.infrastructure.repositories import PersonaRepository
from persona_studio.infrastructure.storage import BlobStorage, InMemoryBlobStorage
from persona_studio.infrastructure.storage.supabase import SupabaseBlobStorage
from persona_studio.services import ChatService, MockResponder, PersonaService

logger = get_logger(__name__)


class AppContext:
    """Process-lifetime dependencies shared by all handlers."""

    def __init__(
        self,
        settings: Settings,
        storage: BlobStorage | None = None,
        extractor: PersonaExtractor | None = None,
        responder: MockResponder | None = None,
    ):
        self.settings = settings
        self._storage = storage
        self._extractor = extractor
        self._responder = responder

    @classmethod
    def from_env(cls) -> "AppContext":
        return cls(get_settings())

    @cached_property
    def storage(self) -> BlobStorage:
        if self._storage is not None:
            return self._storage
        if self.settings.storage_backend == "memory":
            logger.warning("Using in-memory persona storage; saved personas are lost on restart")
            return InMemoryBlobStorage(bucket=self.settings.personas_bucket)
        return SupabaseBlobStorage(self.settings)

    @cached_property
    def extractor(self) -> PersonaExtractor:
        if self._extractor is not None:
            return self._extractor
        return AnthropicPersonaExtractor(self.settings)

    @cached_property
    def responder(self) -> MockResponder:
        return self._responder or MockResponder()

    @cached_property
    def repository(self) -> PersonaRepository:
        return PersonaRepository(self.storage)

    @cached_property
    def persona_service(self) -> PersonaService:
        return PersonaService(self.repository, self.extractor)

    @cached_property
    def chat_service(self) -> ChatService:
        return ChatService(self.repository, self.responder)
