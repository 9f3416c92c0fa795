"""POST /functions/save-persona: persist a persona under a new id."""

from persona_studio.api.adapter import NormalizedRequest, NormalizedResponse
from persona_studio.api.dependencies import AppContext
from persona_studio.api.pipeline import PlatformHandler, create_handler, json_response, parse_json_body, require_method

FUNCTION_NAME = "save-persona"


def build_handler(context: AppContext) -> PlatformHandler:
    async def save_persona(request: NormalizedRequest) -> NormalizedResponse:
        """Store ``{persona}`` and answer with the generated id."""
        require_method(request, "POST")
        body = parse_json_body(request)
        return json_response(await context.persona_service.save(body))

    return create_handler(save_persona, FUNCTION_NAME)
