"""FastAPI application setup for WeatherDash."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import router as api_router
from .context import AppContext, build_context
from .errors import WeatherDashError
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="weatherdash/main")


async def handle_weatherdash_error(request: Request, exc: WeatherDashError) -> JSONResponse:
    """Map the error taxonomy onto `{"error": message}` with its status code."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed bodies as 400 in the same shape as every other error."""
    errors = exc.errors()
    detail = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        detail = f"Invalid {field}: {first.get('msg')}" if field else f"Invalid request: {first.get('msg')}"
    return JSONResponse(status_code=400, content={"error": detail})


def create_app(context: AppContext | None = None) -> FastAPI:
    """Build the app around `context`, or around one built from settings."""
    context = context or build_context()

    app = FastAPI(title="WeatherDash")
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=context.settings.cors_origins,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )
    app.add_exception_handler(WeatherDashError, handle_weatherdash_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)

    # API routes
    app.include_router(api_router, prefix="/api")
    return app
