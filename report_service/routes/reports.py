"""
Report API Routes.

Provides the PDF generation endpoint and the listing of previously
generated PDFs. Settings and the renderer are taken from ``app.state``,
where the application factory placed them.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Request, Response

from ..config import ReportSettings
from ..delivery import deliver_pdf
from ..exceptions import (
    InvalidReportError,
    PayloadTooLargeError,
    RenderError,
    ReportServiceError,
)
from ..models import HealthResponse, PDFListResponse
from ..pdf_helpers import (
    build_report_filename,
    list_pdf_files,
    remove_scratch_file,
    validate_report,
    write_scratch_file,
)
from ..renderer import ReportRenderer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["reports"])


def get_report_settings(request: Request) -> ReportSettings:
    return request.app.state.settings


def get_renderer(request: Request) -> ReportRenderer:
    return request.app.state.renderer


def is_json_content_type(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


async def read_report_payload(request: Request, settings: ReportSettings) -> Any:
    """
    Read and decode the JSON request body.

    Bodies sent with a non-JSON content type are ignored and read as
    no payload at all.

    Raises:
        PayloadTooLargeError: body exceeds ``max_body_bytes``
        InvalidReportError: body is not valid JSON
    """
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > settings.max_body_bytes:
        raise PayloadTooLargeError(
            f"Report payload exceeds {settings.max_body_bytes} bytes"
        )

    body = await request.body()
    if len(body) > settings.max_body_bytes:
        raise PayloadTooLargeError(
            f"Report payload exceeds {settings.max_body_bytes} bytes"
        )
    if not body.strip() or not is_json_content_type(request.headers.get("content-type", "")):
        return None

    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidReportError(f"Request body is not valid JSON: {e}") from e


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: ReportSettings = Depends(get_report_settings),
) -> HealthResponse:
    """Liveness check for load balancers and the entry page."""
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc),
        service=settings.service_name,
    )


@router.post("/generate-pdf")
async def generate_pdf(
    request: Request,
    settings: ReportSettings = Depends(get_report_settings),
    renderer: ReportRenderer = Depends(get_renderer),
) -> Response:
    """
    Render a canonical inspection report to PDF.

    The payload must be a JSON object with a ``rooms`` field. In
    serverless mode the PDF is returned from memory; in local mode it is
    saved to the output directory and served as a download.

    Raises:
        InvalidReportError: 400 for missing ``rooms`` or malformed JSON
        PayloadTooLargeError: 413 for oversize bodies
        RendererBusyError: 503 when every browser slot is in use
        RenderError: 500 for any rendering failure
    """
    logger.info("📄 PDF generation request received")

    report = validate_report(await read_report_payload(request, settings))
    renderer.ensure_capacity()

    scratch_path = None
    try:
        scratch_path = write_scratch_file(report, settings.scratch_dir)
        pdf_bytes = await renderer.render(report)
        filename = build_report_filename(report.get("clientName"))
        logger.info(f"✅ PDF generated successfully: {filename}")
        return deliver_pdf(pdf_bytes, filename, settings)
    except ReportServiceError:
        raise
    except Exception as e:
        logger.error(f"❌ PDF Generation Error: {e}")
        raise RenderError(str(e) or e.__class__.__name__) from e
    finally:
        remove_scratch_file(scratch_path)


@router.get("/pdfs", response_model=PDFListResponse)
async def list_pdfs(
    settings: ReportSettings = Depends(get_report_settings),
) -> PDFListResponse:
    """List generated PDFs, most recently modified first."""
    return PDFListResponse(pdfs=list_pdf_files(settings.output_dir))
