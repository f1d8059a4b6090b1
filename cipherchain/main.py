import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cipherchain import __version__
from cipherchain.api.v1.router import api_router
from cipherchain.core.config import Settings, get_settings
from cipherchain.core.logging import configure_logging

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the API for the given settings, or the environment's."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        configure_logging(settings.log_level, settings.log_file)
        logger.info(
            "%s %s started (%s, %d workers, %.1fs timeout)",
            settings.app_name,
            __version__,
            settings.app_env,
            settings.worker_count,
            settings.worker_timeout_seconds,
        )
        yield

    app = FastAPI(
        title=settings.app_name,
        description="Encrypt and decrypt text with chains of Caesar, Playfair and Vigenère ciphers.",
        version=__version__,
        debug=settings.debug,
        openapi_url=f"{settings.api_v1_prefix}/openapi.json",
        docs_url=f"{settings.api_v1_prefix}/docs",
        redoc_url=None,
        lifespan=lifespan,
    )

    # Browser clients are only expected against a development server
    if settings.is_development:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    app.include_router(api_router, prefix=settings.api_v1_prefix)
    return app


app = create_app()


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "cipherchain.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    run()
