"""FastAPI application entrypoint. No business logic; only wiring, middleware and error handlers."""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from waternet import __version__
from waternet.api import router as api_router
from waternet.core.config import Settings, get_settings
from waternet.core.logging import configure_logging
from waternet.services.tokens import TokenService

logger = logging.getLogger(__name__)


def _register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Schema, bounds and shape violations are client errors (400), not 422."""
        # Submitted values are not echoed back; they may not be JSON-serializable (inf, nan).
        errors = jsonable_encoder(
            [{k: v for k, v in error.items() if k != "input"} for error in exc.errors()]
        )
        logger.info("Validation failed: %s %s errors=%d", request.method, request.url.path, len(errors))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Validation failed", "errors": errors},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Log the traceback; only expose the error text when DEBUG is on."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        content: dict[str, str] = {"detail": "Internal server error"}
        if settings.DEBUG:
            content["error"] = str(exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def create_app(
    settings: Settings | None = None,
    token_service: TokenService | None = None,
) -> FastAPI:
    """
    Build the application. Each app owns one TokenService, and with it one
    refresh-token revocation set that lives exactly as long as the app.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="WaterNet API",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.token_service = token_service or TokenService.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_exception_handlers(app, settings)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "WaterNet API"}

    return app


app = create_app()
