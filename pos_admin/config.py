"""
POS Admin - Configuration Management
====================================
Centralized configuration with environment variable support and validation.

Usage:
    from pos_admin.config import settings

    base_url = settings.api_url
    timeout = settings.api_timeout_seconds
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from pos_admin.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Application settings with environment variable overrides."""

    # Backend
    api_url: str = "http://localhost:3000"
    api_timeout_seconds: float = 15.0

    # Auth
    session_max_age_seconds: int = 60 * 60 * 24 * 7  # 7 days
    allowed_roles: set[str] = field(default_factory=lambda: {"ADMIN"})

    # Display
    site_name: str = "Admin POS"
    site_tagline: str = "Manajemen Point of Sale"
    currency_symbol: str = "Rp"
    best_sellers_limit: int = 5
    transactions_preview_limit: int = 10

    # Feature flags
    debug_mode: bool = False

    def __post_init__(self):
        """Load overrides from environment variables."""
        self._load_env_overrides()

    def _load_env_overrides(self):
        """Load configuration from environment variables."""
        if api_url := os.environ.get("POS_API_URL", "").strip():
            self.api_url = api_url.rstrip("/")
        if timeout := os.environ.get("POS_API_TIMEOUT"):
            self.api_timeout_seconds = float(timeout)

        if max_age := os.environ.get("POS_SESSION_MAX_AGE"):
            self.session_max_age_seconds = int(max_age)
        if roles := os.environ.get("POS_ALLOWED_ROLES", "").strip():
            self.allowed_roles = {r.strip().upper() for r in roles.split(",") if r.strip()}
            unknown = self.allowed_roles - ROLES
            if unknown:
                logger.warning("Ignoring unknown roles in POS_ALLOWED_ROLES: %s", ", ".join(sorted(unknown)))
                self.allowed_roles &= ROLES
            if not self.allowed_roles:
                raise ConfigurationError(
                    "POS_ALLOWED_ROLES leaves no role that may sign in",
                    setting_name="POS_ALLOWED_ROLES",
                )

        if symbol := os.environ.get("POS_CURRENCY_SYMBOL"):
            self.currency_symbol = symbol

        if os.environ.get("DEBUG", "").lower() in ("1", "true"):
            self.debug_mode = True


# Singleton instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
        if _settings.debug_mode:
            logger.info("Settings loaded with debug mode enabled")
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from environment."""
    global _settings
    _settings = Settings()
    return _settings


ROLES = frozenset(
    {
        "ADMIN",
        "KASIR",
    }
)

REPORT_KINDS = ("daily", "weekly", "monthly", "custom")

# (page key, label, icon)
NAV_ITEMS = (
    ("dashboard", "Dasbor", "📊"),
    ("products", "Produk", "📦"),
    ("categories", "Kategori", "🗂️"),
    ("users", "Pengguna", "👥"),
    ("reports", "Laporan", "📄"),
)

CHART_COLORS = ("#7c7fff", "#0ea5e9", "#10B981", "#F59E0B", "#F43F5E")


# Convenience alias
settings = get_settings()
