"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from fotogifty.api.checkout import router as checkout_router
from fotogifty.api.orders import router as orders_router
from fotogifty.api.webhooks import router as webhooks_router
from fotogifty.app_logging import configure_logging
from fotogifty.containers import AppContainer
from fotogifty.errors import FotogiftyError

# Error kind to HTTP status; unknown kinds answer 500.
ERROR_STATUS_CODES: dict[str, int] = {
    "validation": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
    "consistency": status.HTTP_409_CONFLICT,
    "unauthorized": status.HTTP_403_FORBIDDEN,
    "gateway": status.HTTP_502_BAD_GATEWAY,
    "signature": status.HTTP_400_BAD_REQUEST,
    "reconcile": status.HTTP_400_BAD_REQUEST,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Fotogifty orders", lifespan=lifespan)
    app.state.container = container

    app.include_router(checkout_router)
    app.include_router(webhooks_router)
    app.include_router(orders_router)

    @app.exception_handler(FotogiftyError)
    async def fotogifty_error_handler(
        request: Request, exc: FotogiftyError
    ) -> JSONResponse:
        """Map domain errors to structured JSON responses."""
        status_code = ERROR_STATUS_CODES.get(
            exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        logger.warning(
            "%s %s failed with %s: %s",
            request.method,
            request.url.path,
            exc.code,
            exc.message,
        )
        return JSONResponse(
            status_code=status_code,
            content={
                "success": False,
                "error": exc.code,
                "kind": exc.kind,
                "message": exc.message,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report malformed bodies with the validation error code."""
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "success": False,
                "error": "VALIDATION_ERROR",
                "kind": "validation",
                "message": "Request body is invalid",
                "details": [
                    {"loc": list(error["loc"]), "msg": error["msg"]}
                    for error in exc.errors()
                ],
            },
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
