"""
Tests for the extraction and storage collaborators and the error handling decorator.
"""

import inspect
import json
from types import SimpleNamespace

import anthropic
import httpx
import pytest

from persona_studio.core import ApplicationError, ConfigurationError, ErrorCode, ExtractionError, StorageError
from persona_studio.core.decorators import with_error_handling
from persona_studio.infrastructure.extraction.anthropic_extractor import (
    AnthropicPersonaExtractor,
    translate_anthropic_error,
)
from persona_studio.infrastructure.extraction.base import (
    NO_INFORMATION,
    PERSONA_SYSTEM_PROMPT,
    build_user_message,
    parse_json_object,
)
from persona_studio.infrastructure.storage.supabase import SupabaseBlobStorage, translate_storage_error

ANTHROPIC_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def api_status_error(error_class, status: int):
    return error_class(f"status {status}", response=httpx.Response(status, request=ANTHROPIC_REQUEST), body=None)


class FakeMessages:
    def __init__(self, reply: str | None = None, error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        content = [] if self.reply is None else [SimpleNamespace(type="text", text=self.reply)]
        return SimpleNamespace(content=content)


def fake_anthropic(reply: str | None = None, error: Exception | None = None) -> SimpleNamespace:
    return SimpleNamespace(messages=FakeMessages(reply, error))


class FakeBucket:
    """Just enough of supabase's bucket proxy for the storage adapter."""

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.listed: list[tuple] = []
        self.fail_with: Exception | None = None

    def upload(self, path, file, file_options):
        if self.fail_with is not None:
            raise self.fail_with
        if file_options["upsert"] == "false" and path in self.objects:
            raise Exception({"statusCode": "409", "error": "Duplicate", "message": "The resource already exists"})
        self.objects[path] = file
        return SimpleNamespace(path=path, full_path=f"personas/{path}")

    def download(self, path):
        if self.fail_with is not None:
            raise self.fail_with
        if path not in self.objects:
            raise Exception({"statusCode": 404, "error": "not_found", "message": "Object not found"})
        return self.objects[path]

    def list(self, path=None, options=None):
        self.listed.append((path, options))
        return [{"name": name, "created_at": f"2024-05-0{index + 1}T00:00:00Z"} for index, name in enumerate(self.objects)]

    def remove(self, paths):
        for path in paths:
            self.objects.pop(path, None)
        return []


@pytest.fixture
def bucket() -> FakeBucket:
    return FakeBucket()


@pytest.fixture
def supabase_storage(settings, bucket) -> SupabaseBlobStorage:
    client = SimpleNamespace(storage=SimpleNamespace(from_=lambda name: bucket))
    return SupabaseBlobStorage(settings, client=client)


# Prompt material


def test_build_user_message():
    message = build_user_message(["Jane codes.", "Jane hikes."], ["https://example.com/jane"])

    assert message == (
        "Text blocks about the person:\n1. Jane codes.\n\n2. Jane hikes.\n\n"
        "Links provided:\nhttps://example.com/jane"
    )


def test_build_user_message_empty():
    assert build_user_message([], []) == NO_INFORMATION


def test_parse_json_object():
    assert parse_json_object('Sure! ```json\n{"name": "Jane", "traits": []}\n``` Done.') == {
        "name": "Jane",
        "traits": [],
    }

    with pytest.raises(ValueError):
        parse_json_object("no json here")
    with pytest.raises(ValueError):
        parse_json_object("{not valid}")


# Anthropic extractor


@pytest.mark.asyncio
async def test_extract_calls_messages_api(settings):
    client = fake_anthropic(json.dumps({"name": "Jane", "traits": ["calm"]}))
    extractor = AnthropicPersonaExtractor(settings, client=client)

    result = await extractor.extract(["Jane is calm."], [])

    assert result == {"name": "Jane", "traits": ["calm"]}
    (call,) = client.messages.calls
    assert call["model"] == settings.anthropic_model
    assert call["max_tokens"] == 2000
    assert call["temperature"] == 0.3
    assert call["system"] == PERSONA_SYSTEM_PROMPT
    assert call["messages"] == [{"role": "user", "content": "Text blocks about the person:\n1. Jane is calm."}]


@pytest.mark.asyncio
async def test_extract_empty_reply(settings):
    extractor = AnthropicPersonaExtractor(settings, client=fake_anthropic(None))

    with pytest.raises(ExtractionError) as exc_info:
        await extractor.extract(["text"], [])

    assert exc_info.value.message == "No response content from extraction model"


@pytest.mark.asyncio
async def test_extract_unparseable_reply(settings):
    extractor = AnthropicPersonaExtractor(settings, client=fake_anthropic("I cannot help with that."))

    with pytest.raises(ExtractionError) as exc_info:
        await extractor.extract(["text"], [])

    assert exc_info.value.message == "Failed to parse persona data from extraction response"
    assert isinstance(exc_info.value.__cause__, ValueError)


@pytest.mark.asyncio
async def test_extract_translates_api_errors(settings):
    original = api_status_error(anthropic.RateLimitError, 429)
    extractor = AnthropicPersonaExtractor(settings, client=fake_anthropic(error=original))

    with pytest.raises(ExtractionError) as exc_info:
        await extractor.extract(["text"], [])

    assert exc_info.value.status_code == 429
    assert exc_info.value.__cause__ is original


@pytest.mark.asyncio
async def test_extract_without_api_key(settings):
    extractor = AnthropicPersonaExtractor(settings)

    with pytest.raises(ConfigurationError) as exc_info:
        await extractor.extract(["text"], [])

    assert exc_info.value.message == "Missing required environment variables: ANTHROPIC_API_KEY"
    assert exc_info.value.code is ErrorCode.SERVER_ERROR


@pytest.mark.parametrize(
    ("error", "status"),
    [
        (api_status_error(anthropic.AuthenticationError, 401), 401),
        (api_status_error(anthropic.RateLimitError, 429), 429),
        (api_status_error(anthropic.APIStatusError, 529), 503),
        (anthropic.APIConnectionError(request=ANTHROPIC_REQUEST), 503),
        (api_status_error(anthropic.BadRequestError, 400), 500),
    ],
)
def test_translate_anthropic_error(error, status):
    translated = translate_anthropic_error(error)

    assert translated.code is ErrorCode.EXTRACTION_ERROR
    assert translated.status_code == status


# Supabase storage


@pytest.mark.asyncio
async def test_supabase_put_get_delete(supabase_storage, bucket):
    stored = await supabase_storage.put("persona_abcdefghijkl.json", b'{"a": 1}')

    assert stored.path == "persona_abcdefghijkl.json"
    assert stored.size == 8
    assert await supabase_storage.get("persona_abcdefghijkl.json") == b'{"a": 1}'

    await supabase_storage.delete("persona_abcdefghijkl.json")
    assert bucket.objects == {}


@pytest.mark.asyncio
async def test_supabase_missing_object_is_none(supabase_storage):
    assert await supabase_storage.get("persona_neverSaved01.json") is None


@pytest.mark.asyncio
async def test_supabase_duplicate_is_409(supabase_storage):
    await supabase_storage.put("persona_abcdefghijkl.json", b"{}")

    with pytest.raises(StorageError) as exc_info:
        await supabase_storage.put("persona_abcdefghijkl.json", b"{}")

    assert exc_info.value.status_code == 409
    assert exc_info.value.message == "Supabase storage error: The resource already exists"


@pytest.mark.asyncio
async def test_supabase_list_options(supabase_storage, bucket):
    await supabase_storage.put("persona_abcdefghijkl.json", b"{}")

    entries = await supabase_storage.list(limit=5, offset=10)

    assert [entry.name for entry in entries] == ["persona_abcdefghijkl.json"]
    assert entries[0].created_at == "2024-05-01T00:00:00Z"
    assert bucket.listed == [
        (None, {"limit": 5, "offset": 10, "sortBy": {"column": "created_at", "order": "desc"}}),
    ]


@pytest.mark.asyncio
async def test_supabase_failures_become_storage_errors(supabase_storage, bucket):
    bucket.fail_with = RuntimeError("connection reset by peer")

    with pytest.raises(StorageError) as exc_info:
        await supabase_storage.get("persona_abcdefghijkl.json")

    assert exc_info.value.status_code == 500
    assert exc_info.value.code is ErrorCode.STORAGE_ERROR
    assert "connection reset by peer" in exc_info.value.message


@pytest.mark.asyncio
async def test_supabase_requires_configuration(settings):
    storage = SupabaseBlobStorage(settings)

    with pytest.raises(ConfigurationError) as exc_info:
        await storage.get("persona_abcdefghijkl.json")

    assert "SUPABASE_URL" in exc_info.value.message
    assert "SUPABASE_SERVICE_ROLE_KEY" in exc_info.value.message


def test_translate_storage_error_status():
    assert translate_storage_error(Exception({"statusCode": 403, "message": "denied"})).status_code == 403
    assert translate_storage_error(Exception("plain failure")).status_code == 500


# Error handling decorator


def test_decorator_translates_sync_errors():
    @with_error_handling(translate=lambda e: ApplicationError(f"wrapped: {e}", status_code=502))
    def flaky(value: int) -> int:
        raise ValueError(f"bad {value}")

    with pytest.raises(ApplicationError) as exc_info:
        flaky(3)

    assert exc_info.value.message == "wrapped: bad 3"
    assert isinstance(exc_info.value.__cause__, ValueError)
    assert flaky.__name__ == "flaky"
    assert list(inspect.signature(flaky).parameters) == ["value"]


@pytest.mark.asyncio
async def test_decorator_passes_application_errors_through():
    original = StorageError("already typed")

    @with_error_handling(translate=lambda e: ApplicationError("should not be used"))
    async def typed():
        raise original

    with pytest.raises(StorageError) as exc_info:
        await typed()

    assert exc_info.value is original


@pytest.mark.asyncio
async def test_decorator_can_swallow():
    @with_error_handling(reraise=False)
    async def broken():
        raise RuntimeError("ignored")

    assert await broken() is None
