"""FastAPI bridge serving the platform handlers over plain HTTP.

Each incoming request is turned into the serverless event shape, passed to the
same handler a function deployment would run, and the reply is sent back as is.
"""

import base64

from fastapi import FastAPI, Request, Response

from persona_studio.api.dependencies import AppContext
from persona_studio.api.endpoints import build_handlers
from persona_studio.api.pipeline import error_response
from persona_studio.core.errors import NotFoundError
from persona_studio.core.logging import get_logger

logger = get_logger(__name__)

FUNCTION_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]


async def request_to_event(request: Request) -> dict:
    """Serverless event for a Starlette request."""
    raw = await request.body()
    try:
        body, encoded = raw.decode("utf-8"), False
    except UnicodeDecodeError:
        body, encoded = base64.b64encode(raw).decode("ascii"), True
    return {
        "httpMethod": request.method,
        "path": request.url.path,
        "rawQuery": request.url.query,
        "headers": dict(request.headers),
        "body": body or None,
        "isBase64Encoded": encoded,
    }


def create_app(context: AppContext | None = None) -> FastAPI:
    """Build the HTTP app around one process-wide ``AppContext``."""
    context = context or AppContext.from_env()
    handlers = build_handlers(context)

    app = FastAPI(
        title="Persona Studio API",
        description="Persona extraction, storage and mock chat functions",
        version="0.1.0",
    )
    app.state.context = context

    @app.get("/health", operation_id="health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    async def invoke(name: str, request: Request) -> Response:
        handler = handlers.get(name)
        if handler is None:
            logger.info("Unknown function requested", function=name)
            reply = error_response(NotFoundError(f"Unknown function: {name}"))
            return Response(content=reply.body, status_code=reply.status, headers=reply.headers)

        result = await handler(await request_to_event(request))
        return Response(content=result["body"], status_code=result["statusCode"], headers=result["headers"])

    # Netlify-style prefix as well, so existing clients work unchanged
    app.add_api_route("/functions/{name}", invoke, methods=FUNCTION_METHODS, operation_id="invoke_function")
    app.add_api_route("/.netlify/functions/{name}", invoke, methods=FUNCTION_METHODS, include_in_schema=False)

    logger.info("Persona Studio app created", functions=sorted(handlers))
    return app
