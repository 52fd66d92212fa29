from __future__ import annotations

from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mediatags.common.logging import get_logger
from mediatags.common.settings import get_settings
from mediatags.domain.errors import TagServiceError
from mediatags.services.api.routers import health, media_tags, tags

cfg = get_settings()
dev = cfg.app_env.lower() == "development"
logger = get_logger(__name__, cfg.log_level)


def create_app() -> FastAPI:
    app = FastAPI(
        title="mediatags API",
        version="0.1.0",
        docs_url=f"{cfg.api.prefix}/docs",
        openapi_url=f"{cfg.api.prefix}/openapi.json",
    )

    allow_origins = ["*"] if dev else cfg.api.cors_allow_origins
    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_methods=cfg.api.cors_allow_methods,
        allow_headers=cfg.api.cors_allow_headers,
        allow_credentials=cfg.api.cors_allow_credentials,
    )

    @app.exception_handler(TagServiceError)
    async def _service_failure(request: Request, exc: TagServiceError) -> JSONResponse:
        logger.error("%s %s failed: %s (cause: %r)", request.method, request.url.path, exc, exc.__cause__)
        return JSONResponse(status_code=HTTPStatus.SERVICE_UNAVAILABLE, content={"detail": str(exc)})

    # Routers
    app.include_router(health.router)
    app.include_router(tags.router)
    app.include_router(media_tags.router)
    return app


app = create_app()
