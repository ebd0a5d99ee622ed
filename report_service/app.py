"""
Report Service - FastAPI application for inspection report PDFs.

Serves the entry page and static assets, exposes the PDF generation and
listing API, and converts every failure into a JSON error body.
"""

import logging
import traceback
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import ReportSettings, get_settings, validate_config_on_startup
from .exceptions import ReportServiceError
from .models import ErrorResponse
from .renderer import ReportRenderer
from .routes import reports_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)


def _format_stack(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def error_response(
    status_code: int,
    error: str,
    message: str,
    settings: ReportSettings,
    exc: Optional[BaseException] = None,
) -> JSONResponse:
    """Build the JSON error body; stack traces only in development."""
    stack = _format_stack(exc) if settings.is_development and exc is not None else None
    body = ErrorResponse(error=error, message=message, stack=stack)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def register_error_handlers(app: FastAPI, settings: ReportSettings) -> None:
    """Attach the JSON error handlers to the application."""

    @app.exception_handler(ReportServiceError)
    async def report_service_error_handler(request: Request, exc: ReportServiceError):
        if exc.status_code >= 500:
            logger.error(f"❌ {exc.error}: {exc.message}")
        else:
            logger.warning(f"{exc.error}: {exc.message}")
        # Stack traces only accompany server-side failures
        trace_source = exc if exc.status_code >= 500 else None
        return error_response(exc.status_code, exc.error, exc.message, settings, trace_source)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # Unknown paths and unsupported methods are both "no such route"
        if exc.status_code in (404, 405):
            return error_response(
                404,
                "Not Found",
                f"Cannot {request.method} {request.url.path}",
                settings,
            )
        return error_response(exc.status_code, "HTTP Error", str(exc.detail), settings)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Server Error: {exc}", exc_info=exc)
        return error_response(500, "Internal Server Error", str(exc), settings)


def create_app(settings: Optional[ReportSettings] = None) -> FastAPI:
    """
    Build the report service application.

    Args:
        settings: Explicit configuration; loaded from the environment when omitted

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="Report Service",
        version=__version__,
        description="Inspection report to PDF generation using Playwright/Chromium"
    )
    app.state.settings = settings
    app.state.renderer = ReportRenderer(settings)

    if settings.cors_origins_list:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins_list,
            allow_methods=["*"],
            allow_headers=["Content-Type"],
        )

    register_error_handlers(app, settings)

    @app.on_event("startup")
    async def prepare_service():
        validate_config_on_startup(settings)

    @app.get("/", include_in_schema=False)
    async def index():
        """Serve the application entry page."""
        entry_page = settings.static_dir / "app.html"
        if not entry_page.is_file():
            raise HTTPException(status_code=404)
        return FileResponse(entry_page, media_type="text/html")

    app.include_router(reports_router)

    if not settings.is_serverless:
        if not settings.output_dir.exists():
            settings.output_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"📁 Created output directory {settings.output_dir}")
        app.mount(
            "/pdfs",
            StaticFiles(directory=settings.output_dir),
            name="pdfs",
        )

    # Must stay last: catches every path the routes above do not
    app.mount(
        "/",
        StaticFiles(directory=settings.static_dir, check_dir=False),
        name="static",
    )

    return app


app = create_app()
