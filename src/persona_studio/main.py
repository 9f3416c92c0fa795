"""Persona Studio FastAPI application.

Serves every persona function under ``/functions/{name}`` for local
development and container deployments.
"""

import logfire
import uvicorn

from persona_studio.api.dependencies import AppContext
from persona_studio.api.server import create_app
from persona_studio.core.logging import get_logger, setup_logging

context = AppContext.from_env()
settings = context.settings

# Only ships data when a token is configured
logfire.configure(
    service_name="persona-studio",
    token=settings.logfire_token,
    environment=settings.environment,
    send_to_logfire="if-token-present",
    console=False,
)
setup_logging(settings.log_level, use_logfire=True)
logger = get_logger(__name__)

app = create_app(context)

# Enable FastAPI instrumentation for request tracing
logfire.instrument_fastapi(app)


if __name__ == "__main__":
    """Development server entry point."""
    logger.info("Starting Persona Studio development server", host=settings.host, port=settings.port)

    uvicorn.run(
        "persona_studio.main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
        log_level=settings.log_level,
    )
