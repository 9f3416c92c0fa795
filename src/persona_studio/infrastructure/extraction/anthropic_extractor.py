"""Persona extraction through the Anthropic Messages API."""

import time
from typing import Any

import anthropic

from persona_studio.core.base import AIServiceErrorDetails, ErrorLevel
from persona_studio.core.config import Settings
from persona_studio.core.decorators import with_error_handling
from persona_studio.core.errors import ExtractionError
from persona_studio.core.logging import get_logger

from .base import PERSONA_SYSTEM_PROMPT, build_user_message, parse_json_object

logger = get_logger(__name__)


def translate_anthropic_error(error: Exception) -> ExtractionError:
    """Typed ExtractionError for a failed Anthropic call."""
    if isinstance(error, anthropic.AuthenticationError):
        return ExtractionError("Anthropic API key is invalid or expired", status_code=401)
    if isinstance(error, anthropic.RateLimitError):
        return ExtractionError("Anthropic rate limit exceeded. Please try again later.", status_code=429)
    if isinstance(error, anthropic.APIConnectionError) or (
        isinstance(error, anthropic.APIStatusError) and error.status_code in (503, 529)
    ):
        return ExtractionError(
            "Anthropic service is temporarily unavailable. Please try again later.", status_code=503
        )
    return ExtractionError(f"Anthropic API error: {error}")


class AnthropicPersonaExtractor:
    """Extracts persona fields with a single Messages API call."""

    def __init__(self, settings: Settings, client: anthropic.AsyncAnthropic | None = None):
        self.settings = settings
        self.model = settings.anthropic_model
        self.temperature = settings.extraction_temperature
        self.max_tokens = settings.extraction_max_tokens
        self._client = client

    @property
    def client(self) -> anthropic.AsyncAnthropic:
        """API client, created on first use.

        Raises:
            ConfigurationError: If no Anthropic API key is configured
        """
        if self._client is None:
            self.settings.require("anthropic_api_key")
            self._client = anthropic.AsyncAnthropic(api_key=self.settings.anthropic_api_key)
        return self._client

    def _details(self, operation: str, latency_ms: float | None = None) -> AIServiceErrorDetails:
        return AIServiceErrorDetails(
            source="AnthropicPersonaExtractor",
            operation=operation,
            service_name="anthropic",
            model_name=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            latency_ms=latency_ms,
        )

    @with_error_handling(error_level=ErrorLevel.ERROR, translate=translate_anthropic_error)
    async def extract(self, text_blocks: list[str], links: list[str]) -> dict[str, Any]:
        logger.info("Persona extraction started", text_block_count=len(text_blocks), link_count=len(links))
        started = time.perf_counter()

        message = await self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            system=PERSONA_SYSTEM_PROMPT,
            messages=[{"role": "user", "content": build_user_message(text_blocks, links)}],
        )
        latency_ms = round((time.perf_counter() - started) * 1000, 1)

        content = "".join(block.text for block in message.content if getattr(block, "type", None) == "text")
        if not content:
            raise ExtractionError(
                "No response content from extraction model",
                details=self._details("extract", latency_ms),
            )

        try:
            result = parse_json_object(content)
        except ValueError as e:
            logger.error(
                "Failed to parse extraction response as JSON",
                error=e,
                response_preview=content[:500],
            )
            raise ExtractionError(
                "Failed to parse persona data from extraction response",
                details=self._details("parse_response", latency_ms),
            ) from e

        logger.info(
            "Persona extraction completed",
            name=result.get("name"),
            traits=len(result.get("traits") or []),
            interests=len(result.get("interests") or []),
            latency_ms=latency_ms,
        )
        return result
