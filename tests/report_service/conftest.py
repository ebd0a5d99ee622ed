"""
Pytest fixtures for report service tests.
"""

import os
from types import SimpleNamespace
from unittest.mock import patch, MagicMock, AsyncMock

# Keep the ambient environment from switching modes before the app module loads
os.environ.pop("VERCEL", None)
os.environ.pop("DEPLOYMENT_MODE", None)

import pytest
from fastapi.testclient import TestClient

FAKE_PDF = b"%PDF-1.4 fake inspection report"


@pytest.fixture
def make_settings(tmp_path):
    """Build ReportSettings rooted in a temporary directory."""
    from report_service.config import ReportSettings

    def _make(**overrides):
        values = {
            "base_dir": tmp_path,
            "deployment_mode": "local",
            "node_env": "production",
            "settle_delay_ms": 0,
            "ready_timeout_ms": 100,
        }
        values.update(overrides)
        return ReportSettings(**values)

    return _make


@pytest.fixture
def local_settings(make_settings):
    return make_settings()


@pytest.fixture
def serverless_settings(make_settings, tmp_path):
    return make_settings(deployment_mode="serverless", scratch_dir=tmp_path / "tmp")


@pytest.fixture
def local_client(local_settings):
    """Test client for a local-mode app (PDFs persisted to disk)."""
    from report_service.app import create_app
    return TestClient(create_app(local_settings))


@pytest.fixture
def serverless_client(serverless_settings):
    """Test client for a serverless-mode app (PDFs streamed from memory)."""
    from report_service.app import create_app
    return TestClient(create_app(serverless_settings))


@pytest.fixture
def mock_playwright():
    """
    Patch async_playwright with a fake Chromium.

    Exposes the launch mock, browser and page so tests can inspect the
    calls made by the renderer.
    """
    mock_browser = AsyncMock()
    mock_page = AsyncMock()
    mock_page.pdf = AsyncMock(return_value=FAKE_PDF)
    mock_browser.new_page = AsyncMock(return_value=mock_page)
    launch = AsyncMock(return_value=mock_browser)

    with patch("playwright.async_api.async_playwright") as mock_async_playwright:
        mock_async_playwright.return_value.__aenter__ = AsyncMock(
            return_value=MagicMock(chromium=MagicMock(launch=launch))
        )
        mock_async_playwright.return_value.__aexit__ = AsyncMock(return_value=False)
        yield SimpleNamespace(
            async_playwright=mock_async_playwright,
            launch=launch,
            browser=mock_browser,
            page=mock_page,
            pdf_bytes=FAKE_PDF,
        )
