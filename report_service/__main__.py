"""
Run the report service with uvicorn.

Usage:
    python -m report_service
"""

import logging

import uvicorn

from .app import app
from .config import get_settings

logger = logging.getLogger("report_service")


def main() -> None:
    settings = get_settings()
    base_url = f"http://localhost:{settings.port}"

    logger.info("===========================================")
    logger.info("🚀 Inspection Report Service Started")
    logger.info("===========================================")
    logger.info(f"📱 App:         {base_url}")
    logger.info(f"🔌 API Health:  {base_url}/api/health")
    logger.info(f"📄 PDF API:     {base_url}/api/generate-pdf")
    logger.info(f"📁 PDFs List:   {base_url}/api/pdfs")
    logger.info("===========================================")

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
