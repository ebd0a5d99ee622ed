"""
Artifact delivery for rendered PDFs.

Serverless deployments only have ephemeral storage, so the PDF is sent
straight from memory. Local deployments persist it to the output
directory (which doubles as the listing index) and serve it as a download.
"""

import logging
from pathlib import Path

from fastapi import Response
from fastapi.responses import FileResponse

from .config import ReportSettings
from .exceptions import DeliveryError

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"


def attachment_header(filename: str) -> str:
    return f'attachment; filename="{filename}"'


def persist_pdf(pdf_bytes: bytes, filename: str, output_dir: Path) -> Path:
    """
    Write a rendered PDF to the output directory.

    Raises:
        DeliveryError: the file could not be written
    """
    pdf_path = Path(output_dir) / filename
    try:
        pdf_path.parent.mkdir(parents=True, exist_ok=True)
        pdf_path.write_bytes(pdf_bytes)
    except OSError as e:
        logger.error(f"❌ Failed to save PDF {filename}: {e}")
        raise DeliveryError(f"Could not save PDF: {e}") from e
    return pdf_path


def deliver_pdf(pdf_bytes: bytes, filename: str, settings: ReportSettings) -> Response:
    """
    Build the HTTP response for a rendered PDF.

    Args:
        pdf_bytes: Rendered PDF
        filename: Download filename
        settings: Service settings (decides stream vs. persist)

    Returns:
        In-memory attachment response (serverless) or file download (local)
    """
    if settings.is_serverless:
        logger.info(f"📤 Sending PDF to client from memory: {filename}")
        return Response(
            content=pdf_bytes,
            media_type=PDF_MEDIA_TYPE,
            headers={
                "Content-Disposition": attachment_header(filename),
                "Content-Length": str(len(pdf_bytes)),
            },
        )

    pdf_path = persist_pdf(pdf_bytes, filename, settings.output_dir)
    logger.info(f"📤 Sending saved PDF to client: {pdf_path}")
    return FileResponse(
        pdf_path,
        filename=filename,
        media_type=PDF_MEDIA_TYPE,
    )
