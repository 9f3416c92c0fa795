"""GET /functions/get-persona?persona_id=...: fetch one saved persona."""

from persona_studio.api.adapter import NormalizedRequest, NormalizedResponse
from persona_studio.api.dependencies import AppContext
from persona_studio.api.pipeline import PlatformHandler, create_handler, get_query_param, json_response

FUNCTION_NAME = "get-persona"


def build_handler(context: AppContext) -> PlatformHandler:
    async def get_persona(request: NormalizedRequest) -> NormalizedResponse:
        query = {"persona_id": get_query_param(request, "persona_id")}
        return json_response(await context.persona_service.get(query))

    return create_handler(get_persona, FUNCTION_NAME)
