"""
Report Service Configuration Module

Centralized configuration management with Pydantic validation.
The deployment mode (local vs. serverless) and every path the service
touches are resolved once here and injected into the application,
instead of being checked ad hoc inside request handlers.
"""

import logging
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_STATIC_DIR = PACKAGE_DIR / "static"
TEMPLATE_FILENAME = "report-generator.html"

DEPLOYMENT_MODES = {"local", "serverless"}


class ReportSettings(BaseSettings):
    """
    Report service configuration with validation.

    All settings can be overridden via environment variables. Derived
    paths (scratch, output, template) are filled in after validation
    based on the resolved deployment mode.
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # === Deployment ===
    vercel: Optional[str] = Field(
        default=None,
        description="Set by the serverless platform; presence selects serverless mode"
    )
    deployment_mode: Optional[str] = Field(
        default=None,
        description="'local' or 'serverless'. Derived from VERCEL when unset"
    )
    node_env: str = Field(
        default="production",
        description="'development' includes stack traces in error responses"
    )

    # === Server ===
    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=3000, ge=1, le=65535, description="Listening port")
    service_name: str = Field(
        default="Trinetra Inspection API",
        description="Service name reported by the health endpoint"
    )
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins"
    )
    max_body_bytes: int = Field(
        default=50 * 1024 * 1024,
        ge=1024,
        description="Maximum accepted report payload size in bytes"
    )

    # === Filesystem ===
    base_dir: Path = Field(
        default_factory=Path.cwd,
        description="Project root used for local-mode scratch files"
    )
    scratch_dir: Optional[Path] = Field(
        default=None,
        description="Directory for transient report JSON files"
    )
    output_dir: Optional[Path] = Field(
        default=None,
        description="Directory where generated PDFs are persisted and listed from"
    )
    static_dir: Path = Field(
        default=DEFAULT_STATIC_DIR,
        description="Directory holding the entry page and static assets"
    )
    template_path: Optional[Path] = Field(
        default=None,
        description="HTML report template rendered by the browser"
    )

    # === Rendering ===
    max_concurrent_renders: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum simultaneous browser instances (1-50)"
    )
    navigation_timeout_ms: int = Field(
        default=30000,
        ge=1000,
        description="Template navigation timeout in milliseconds"
    )
    settle_delay_ms: int = Field(
        default=2000,
        ge=0,
        description="Fixed delay before export when no readiness flag is seen"
    )
    wait_for_ready_flag: bool = Field(
        default=True,
        description="Wait for window.__REPORT_READY__ before exporting"
    )
    ready_timeout_ms: int = Field(
        default=10000,
        ge=0,
        description="How long to wait for the readiness flag (0 skips the wait)"
    )
    headless: bool = Field(
        default=True,
        validation_alias="PLAYWRIGHT_HEADLESS",
        description="Launch Chromium headless"
    )
    browser_args: str = Field(
        default="--no-sandbox,--disable-setuid-sandbox",
        description="Comma-separated Chromium launch arguments"
    )

    @field_validator("deployment_mode")
    @classmethod
    def validate_deployment_mode(cls, v: Optional[str]) -> Optional[str]:
        """Validate deployment mode is a known value."""
        if v is None or not v.strip():
            return None
        v_lower = v.strip().lower()
        if v_lower not in DEPLOYMENT_MODES:
            raise ValueError(
                f"deployment_mode must be one of: {', '.join(sorted(DEPLOYMENT_MODES))}"
            )
        return v_lower

    @field_validator("node_env")
    @classmethod
    def normalize_node_env(cls, v: str) -> str:
        return v.strip().lower()

    @model_validator(mode="after")
    def resolve_paths(self) -> "ReportSettings":
        """Fill in mode-dependent defaults."""
        if self.deployment_mode is None:
            self.deployment_mode = "serverless" if self.vercel else "local"

        if self.scratch_dir is None:
            if self.deployment_mode == "serverless":
                self.scratch_dir = Path(tempfile.gettempdir())
            else:
                self.scratch_dir = self.base_dir

        if self.output_dir is None:
            self.output_dir = self.base_dir / "pdfs"

        if self.template_path is None:
            self.template_path = self.static_dir / TEMPLATE_FILENAME

        return self

    @property
    def is_serverless(self) -> bool:
        return self.deployment_mode == "serverless"

    @property
    def is_development(self) -> bool:
        return self.node_env == "development"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into a list."""
        if not self.cors_origins:
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def browser_args_list(self) -> List[str]:
        """Parse Chromium launch arguments into a list."""
        return [arg.strip() for arg in self.browser_args.split(",") if arg.strip()]

    @property
    def template_url(self) -> str:
        """file:// URL of the report template."""
        return self.template_path.resolve().as_uri()


@lru_cache()
def get_settings() -> ReportSettings:
    """
    Get cached settings instance.

    Settings are loaded once from the environment and cached.
    """
    return ReportSettings()


def validate_config_on_startup(settings: ReportSettings) -> None:
    """
    Log the effective configuration and warn about missing files.

    Missing templates are not fatal: the service can still answer
    health and listing requests.
    """
    logger.info(f"Configuration loaded: deployment_mode={settings.deployment_mode}")
    logger.info(f"  scratch_dir={settings.scratch_dir}")
    logger.info(f"  output_dir={settings.output_dir}")
    logger.info(f"  template_path={settings.template_path}")
    logger.info(f"  max_concurrent_renders={settings.max_concurrent_renders}")
    logger.info(f"  development={settings.is_development}")

    if not settings.template_path.is_file():
        logger.warning(f"Report template not found: {settings.template_path}")
    if not (settings.static_dir / "app.html").is_file():
        logger.warning(f"Entry page not found in {settings.static_dir}")
