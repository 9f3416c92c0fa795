"""POST /functions/process-persona: extract a persona from raw text and links."""

from persona_studio.api.adapter import NormalizedRequest, NormalizedResponse
from persona_studio.api.dependencies import AppContext
from persona_studio.api.pipeline import PlatformHandler, create_handler, json_response, parse_json_body, require_method
from persona_studio.services import ExtractionRejected, PersonaExtracted

FUNCTION_NAME = "process-persona"


def build_handler(context: AppContext) -> PlatformHandler:
    async def process_persona(request: NormalizedRequest) -> NormalizedResponse:
        """Extract a structured persona from ``{textBlocks, links}``."""
        require_method(request, "POST")
        body = parse_json_body(request)
        outcome = await context.persona_service.process(body)

        match outcome:
            case PersonaExtracted(persona=persona):
                return json_response({"success": True, "persona": persona.to_payload()})
            case ExtractionRejected(reason=reason):
                # Unusable extraction is reported in the body, not as an HTTP error
                return json_response({"success": False, "error": reason})

    return create_handler(process_persona, FUNCTION_NAME)
