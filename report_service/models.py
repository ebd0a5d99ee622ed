"""
Pydantic models for the report service API responses.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    timestamp: datetime
    service: str


class PDFListEntry(BaseModel):
    """A generated PDF found in the output directory."""

    name: str = Field(..., description="File name on disk")
    path: str = Field(..., description="Public URL path of the file")
    size: int = Field(..., description="File size in bytes")
    created: datetime = Field(..., description="Last modification time (UTC)")


class PDFListResponse(BaseModel):
    """Listing of generated PDFs, most recent first."""

    pdfs: List[PDFListEntry] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """JSON body returned for every error."""

    error: str
    message: str
    stack: Optional[str] = None
