"""GET /functions/list-personas?limit=&offset=: page through saved personas."""

from persona_studio.api.adapter import NormalizedRequest, NormalizedResponse
from persona_studio.api.dependencies import AppContext
from persona_studio.api.pipeline import PlatformHandler, create_handler, get_query_params, json_response

FUNCTION_NAME = "list-personas"


def build_handler(context: AppContext) -> PlatformHandler:
    async def list_personas(request: NormalizedRequest) -> NormalizedResponse:
        return json_response(await context.persona_service.list(get_query_params(request)))

    return create_handler(list_personas, FUNCTION_NAME)
