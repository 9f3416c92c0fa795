"""
Pytest configuration and fixtures for Persona Studio tests.
"""

import random

import pytest
from helpers import FakeExtractor

from persona_studio.api.dependencies import AppContext
from persona_studio.api.endpoints import build_handlers
from persona_studio.core.config import Settings
from persona_studio.core.logging import clear_log_context, setup_logging
from persona_studio.infrastructure.storage import InMemoryBlobStorage
from persona_studio.services import MockResponder


@pytest.fixture(autouse=True)
def _logging():
    setup_logging("debug")
    yield
    clear_log_context()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        storage_backend="memory",
        anthropic_api_key="",
        supabase_url="",
        supabase_service_role_key="",
        log_level="debug",
    )


@pytest.fixture
def storage() -> InMemoryBlobStorage:
    return InMemoryBlobStorage()


@pytest.fixture
def extractor() -> FakeExtractor:
    return FakeExtractor()


@pytest.fixture
def context(settings: Settings, storage: InMemoryBlobStorage, extractor: FakeExtractor) -> AppContext:
    return AppContext(
        settings,
        storage=storage,
        extractor=extractor,
        responder=MockResponder(rng=random.Random(7)),
    )


@pytest.fixture
def handlers(context: AppContext):
    return build_handlers(context)
