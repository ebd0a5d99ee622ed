"""
Report renderer - turns report JSON into PDF bytes with Playwright/Chromium.

Each render launches its own Chromium instance, injects the report as
``window.__REPORT_DATA__`` before any page script runs, loads the HTML
report template from disk and prints it to an A4 PDF. Browser instances
are scoped to an async context manager so they are closed on every exit
path, and a semaphore bounds how many run at once.
"""

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from .config import ReportSettings
from .exceptions import RenderError, RendererBusyError

logger = logging.getLogger(__name__)

REPORT_DATA_GLOBAL = "__REPORT_DATA__"
REPORT_READY_GLOBAL = "__REPORT_READY__"

PDF_MARGIN = {
    "top": "10mm",
    "right": "10mm",
    "bottom": "10mm",
    "left": "10mm",
}


def build_init_script(report: dict) -> str:
    """Build the init script that exposes the report to the template."""
    return f"window.{REPORT_DATA_GLOBAL} = {json.dumps(report, ensure_ascii=False)};"


class ReportRenderer:
    """Renders inspection reports to PDF through the HTML template."""

    def __init__(self, settings: ReportSettings):
        self.settings = settings
        self._semaphore = asyncio.Semaphore(settings.max_concurrent_renders)
        self._active = 0

    @property
    def max_concurrent(self) -> int:
        return self.settings.max_concurrent_renders

    @property
    def active_renders(self) -> int:
        return self._active

    def ensure_capacity(self) -> None:
        """
        Reject early when every browser slot is taken.

        Raises:
            RendererBusyError: no slot is free
        """
        if self._semaphore.locked():
            logger.warning("Renderer overloaded, rejecting request")
            raise RendererBusyError(
                "Service overloaded. Too many concurrent PDF operations."
            )

    @asynccontextmanager
    async def browser_session(self) -> AsyncIterator:
        """
        Launch Chromium for a single render and always close it.

        Yields:
            Playwright Browser instance
        """
        # Import here to avoid loading Playwright on startup
        from playwright.async_api import async_playwright

        async with async_playwright() as p:
            logger.info("🌐 Launching browser...")
            browser = await p.chromium.launch(
                headless=self.settings.headless,
                args=self.settings.browser_args_list,
            )
            try:
                yield browser
            finally:
                await browser.close()
                logger.debug("Browser closed")

    async def render(self, report: dict) -> bytes:
        """
        Render a report to PDF.

        Args:
            report: Canonical report JSON (already validated)

        Returns:
            PDF binary data

        Raises:
            RendererBusyError: all browser slots are in use
            RenderError: browser launch, page setup or PDF export failed
        """
        self.ensure_capacity()

        async with self._semaphore:
            self._active += 1
            try:
                return await self._render(report)
            except RenderError:
                raise
            except Exception as e:
                logger.error(f"❌ PDF rendering failed: {e}")
                raise RenderError(str(e) or e.__class__.__name__) from e
            finally:
                self._active -= 1

    async def _render(self, report: dict) -> bytes:
        from playwright.async_api import Error as PlaywrightError

        async with self.browser_session() as browser:
            page = await browser.new_page()

            await page.add_init_script(script=build_init_script(report))

            logger.info("📖 Loading report template...")
            try:
                await page.goto(
                    self.settings.template_url,
                    wait_until="networkidle",
                    timeout=self.settings.navigation_timeout_ms,
                )
            except PlaywrightError as e:
                # The template may still finish loading; export what is there
                logger.warning(f"⚠️ Navigation warning (non-critical): {e}")

            await self._wait_until_ready(page)

            logger.info("📄 Generating PDF...")
            pdf_bytes = await page.pdf(
                format="A4",
                print_background=True,
                margin=PDF_MARGIN,
                prefer_css_page_size=True,
            )

        logger.info(f"✅ PDF rendered ({len(pdf_bytes)} bytes)")
        return pdf_bytes

    async def _wait_until_ready(self, page) -> None:
        """
        Wait for the template to finish drawing its charts.

        Prefers the page-side ``window.__REPORT_READY__`` flag; falls back
        to the fixed settle delay when the flag is disabled or never set.
        """
        from playwright.async_api import Error as PlaywrightError

        # A zero timeout would make Playwright wait forever
        if self.settings.wait_for_ready_flag and self.settings.ready_timeout_ms > 0:
            try:
                await page.wait_for_function(
                    f"window.{REPORT_READY_GLOBAL} === true",
                    timeout=self.settings.ready_timeout_ms,
                )
                return
            except PlaywrightError as e:
                logger.warning(
                    f"Readiness flag not set ({e}); "
                    f"falling back to {self.settings.settle_delay_ms}ms settle delay"
                )

        await page.wait_for_timeout(self.settings.settle_delay_ms)
