"""POST /functions/chat: one chat turn against a persona."""

from persona_studio.api.adapter import NormalizedRequest, NormalizedResponse
from persona_studio.api.dependencies import AppContext
from persona_studio.api.pipeline import PlatformHandler, create_handler, json_response, parse_json_body, require_method

FUNCTION_NAME = "chat"


def build_handler(context: AppContext) -> PlatformHandler:
    async def chat(request: NormalizedRequest) -> NormalizedResponse:
        require_method(request, "POST")
        result = await context.chat_service.chat(parse_json_body(request))
        return json_response(result.model_dump(mode="json", exclude_none=True))

    return create_handler(chat, FUNCTION_NAME)
