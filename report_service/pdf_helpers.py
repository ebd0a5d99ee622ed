"""
Helper functions for report PDF bookkeeping.

These functions validate incoming report payloads, build filesystem-safe
PDF filenames, manage the transient report JSON written next to each
render, and list previously generated PDFs from disk.
"""

import json
import logging
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional, Union

from .exceptions import InvalidReportError
from .models import PDFListEntry

logger = logging.getLogger(__name__)

FILENAME_PREFIX = "inspection"
DEFAULT_CLIENT_TOKEN = "report"
SCRATCH_PREFIX = "report-data"


def sanitize_client_name(name: Any) -> str:
    """
    Sanitize a client name for use in a PDF filename.

    Every run of characters outside ``[A-Za-z0-9]`` becomes a single
    hyphen, the result is lower-cased and stripped of leading/trailing
    hyphens. Applying it twice gives the same result as applying it once.

    Args:
        name: Raw client name (any value; non-strings are converted)

    Returns:
        Lowercase token of letters, digits and hyphens, or ``"report"``
        when nothing usable remains

    Example:
        >>> sanitize_client_name("Acme Corp!")
        "acme-corp"
    """
    if name is None:
        return DEFAULT_CLIENT_TOKEN
    cleaned = re.sub(r"[^a-z0-9]+", "-", str(name).lower()).strip("-")
    return cleaned or DEFAULT_CLIENT_TOKEN


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """Format a moment as a 14-digit UTC timestamp (YYYYMMDDHHMMSS)."""
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y%m%d%H%M%S")


def build_report_filename(client_name: Any = None, moment: Optional[datetime] = None) -> str:
    """
    Build the PDF filename for a report.

    Args:
        client_name: ``clientName`` from the report payload, if any
        moment: Generation time (defaults to now)

    Returns:
        ``inspection-<client>-<timestamp>.pdf``
    """
    client_token = sanitize_client_name(client_name)
    return f"{FILENAME_PREFIX}-{client_token}-{format_timestamp(moment)}.pdf"


def _is_missing(value: Any) -> bool:
    # JSON truthiness: empty arrays/objects still count as present
    if value is None:
        return True
    if isinstance(value, (list, dict)):
        return False
    return not value


def validate_report(payload: Any) -> dict:
    """
    Validate the canonical report structure.

    Only the presence of ``rooms`` is enforced; the template is
    responsible for everything else.

    Raises:
        InvalidReportError: payload is not an object or has no rooms
    """
    if not isinstance(payload, dict) or _is_missing(payload.get("rooms")):
        raise InvalidReportError("Report data is missing required fields")
    return payload


def write_scratch_file(report: dict, scratch_dir: Union[str, Path]) -> Path:
    """
    Write the report JSON to a per-request scratch file.

    The file is only a debugging artifact; rendering receives the data
    in-process.

    Returns:
        Path of the written file
    """
    scratch_dir = Path(scratch_dir)
    scratch_dir.mkdir(parents=True, exist_ok=True)
    scratch_path = scratch_dir / f"{SCRATCH_PREFIX}-{uuid.uuid4().hex}.json"
    scratch_path.write_text(json.dumps(report, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info(f"💾 Saved report JSON to {scratch_path.name}")
    return scratch_path


def remove_scratch_file(scratch_path: Optional[Path]) -> None:
    """Delete a scratch file. Failures are logged, never raised."""
    if scratch_path is None:
        return
    try:
        if scratch_path.exists():
            scratch_path.unlink()
            logger.info("🗑️ Cleaned up temporary JSON file")
    except OSError as e:
        logger.warning(f"⚠️ Cleanup warning: {e}")


def list_pdf_files(output_dir: Union[str, Path], public_prefix: str = "/pdfs") -> List[PDFListEntry]:
    """
    List generated PDFs in a directory, most recently modified first.

    The directory is the index: nothing is cached between calls.

    Args:
        output_dir: Directory holding generated PDFs
        public_prefix: URL prefix the directory is served under

    Returns:
        One entry per ``*.pdf`` file; empty when the directory is missing
    """
    output_dir = Path(output_dir)
    if not output_dir.is_dir():
        return []

    found = []
    for candidate in output_dir.iterdir():
        if not candidate.name.endswith(".pdf") or not candidate.is_file():
            continue
        stat = candidate.stat()
        found.append((stat.st_mtime, candidate.name, stat.st_size))

    found.sort(key=lambda item: (item[0], item[1]), reverse=True)

    prefix = public_prefix.rstrip("/")
    return [
        PDFListEntry(
            name=name,
            path=f"{prefix}/{name}",
            size=size,
            created=datetime.fromtimestamp(mtime, tz=timezone.utc),
        )
        for mtime, name, size in found
    ]
