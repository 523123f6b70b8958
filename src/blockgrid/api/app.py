"""
BlockGrid HTTP application.

`create_app` assembles the service: CORS for the editor frontend, JSON error
responses for domain failures, the `/tasks` and `/layout` routers and a
`/health` probe. Tests build a fresh app per module through the same factory.

Error responses
---------------
Every handled failure returns ``{"error": <label>, "detail": <message>}``:

=========================  ======  ======================
exception                  status  label
=========================  ======  ======================
``ConflictError``          409     Conflict
``NotFoundError``          404     Not Found
``TypeMismatchError``      422     Type Mismatch
``IndexOutOfRangeError``   400     Index Out Of Range
other ``ValueError``       400     Bad Request
anything else              500     Internal Server Error
=========================  ======  ======================
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Final

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blockgrid import __version__
from blockgrid.api.routers import layout, tasks
from blockgrid.core.errors import (
    BlockGridError,
    ConflictError,
    IndexOutOfRangeError,
    NotFoundError,
    TypeMismatchError,
)
from blockgrid.core.settings import get_logger, load_settings
from blockgrid.storage.memory import TaskStore

logger = get_logger(__name__)

_DOMAIN_ERRORS: Final[dict[type[BlockGridError], tuple[int, str]]] = {
    ConflictError: (status.HTTP_409_CONFLICT, "Conflict"),
    NotFoundError: (status.HTTP_404_NOT_FOUND, "Not Found"),
    TypeMismatchError: (422, "Type Mismatch"),
    IndexOutOfRangeError: (status.HTTP_400_BAD_REQUEST, "Index Out Of Range"),
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create the task store singleton before the first request."""
    logger.info("BlockGrid API %s starting (%s)", __version__, load_settings().environment)
    TaskStore.get_instance()
    yield
    logger.info("BlockGrid API stopped")


def _error(status_code: int, error: str, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "detail": str(exc)})


async def _domain_error_handler(request: Request, exc: Exception) -> JSONResponse:
    status_code, label = _DOMAIN_ERRORS.get(
        type(exc), (status.HTTP_400_BAD_REQUEST, "Bad Request")
    )
    logger.info("%s %s -> %d: %s", request.method, request.url.path, status_code, exc)
    return _error(status_code, label, exc)


def create_app() -> FastAPI:
    """
    Build the BlockGrid ASGI application.

    Returns
    -------
    FastAPI
        Application with middleware, error handlers and routers installed.
    """
    app = FastAPI(
        title="BlockGrid API",
        description="Task content blocks: grid layout and reconciliation",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=load_settings().cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for error_type in _DOMAIN_ERRORS:
        app.add_exception_handler(error_type, _domain_error_handler)

    @app.exception_handler(ValueError)
    async def bad_request_handler(request: Request, exc: ValueError) -> JSONResponse:
        """Other input errors raised below the routers."""
        return _error(status.HTTP_400_BAD_REQUEST, "Bad Request", exc)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal Server Error",
                "detail": str(exc),
                "path": request.url.path,
            },
        )

    app.include_router(tasks.router)
    app.include_router(layout.router)

    @app.get("/health", tags=["System"])
    async def health() -> dict[str, str]:
        """Liveness probe with the running version and environment."""
        return {
            "status": "ok",
            "environment": load_settings().environment,
            "version": __version__,
        }

    return app


__all__ = ["create_app"]
