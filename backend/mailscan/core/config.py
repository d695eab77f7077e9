# Name: config.py
# Description: Application configuration and environment variable management
# Date: 2026-10-02

import logging
import os
from typing import Optional
from functools import lru_cache

logger = logging.getLogger(__name__)


# =============================================================================
# API VERSION - Single source of truth
# =============================================================================
# Versioning policy (Semantic Versioning):
#   - MAJOR: Breaking changes to request/response schemas
#   - MINOR: New features, new optional fields (backward compatible)
#   - PATCH: Bug fixes, documentation updates
#
# Version history:
#   1.0.0 - Rule-based scan with entity aggregation
#   1.1.0 - urlscan.io enrichment under a fixed deadline

API_VERSION = "1.1.0"

URLSCAN_VISIBILITIES = ("public", "unlisted", "private")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _at_least(name: str, value, minimum):
    if minimum is not None and value < minimum:
        logger.warning(f"[Config] {name}={value} is below the minimum, using {minimum}")
        return minimum
    return value


def _env_int(name: str, default: int, minimum: Optional[int] = None) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return _at_least(name, int(value), minimum)
    except ValueError:
        logger.warning(f"[Config] {name}={value!r} is not an integer, using {default}")
        return default


def _env_float(name: str, default: float, minimum: Optional[float] = None) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return _at_least(name, float(value), minimum)
    except ValueError:
        logger.warning(f"[Config] {name}={value!r} is not a number, using {default}")
        return default


class Settings:
    """
    Application settings loaded from environment variables.

    Attributes:
        environment: Current environment (development, production)
        log_level: Root log level name
        urlscan_api_key: urlscan.io API key used for link enrichment
        urlscan_visibility: Visibility of submitted scans (public, unlisted, private)
        urlscan_max_links: Maximum number of links submitted per email
        urlscan_poll_attempts: Result fetch attempts per submitted link (at least 1)
        urlscan_poll_delay_ms: Delay between result fetch attempts
        enrichment_timeout_ms: Deadline for the whole enrichment step
        suspicious_threshold / dangerous_threshold: Verdict boundaries
        high_severity_floor: Minimum score when any HIGH signal exists
        summary_top_signals: Labels named in the summary (at least 1)
        duplicate_weight_factor / max_aggregated_weight: Aggregation policy

    Numeric values below their minimum are raised to it with a warning.
    """

    def __init__(self):
        # Environment
        self.environment: str = os.getenv("ENVIRONMENT", "development")
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

        # urlscan.io enrichment
        self.urlscan_api_key: Optional[str] = os.getenv("URLSCAN_API_KEY")
        self._urlscan_enabled: bool = _env_bool("ENABLE_URLSCAN", True)
        self.urlscan_base_url: str = os.getenv("URLSCAN_BASE_URL", "https://urlscan.io/api/v1").rstrip("/")
        visibility = os.getenv("URLSCAN_VISIBILITY", "public").strip().lower()
        if visibility not in URLSCAN_VISIBILITIES:
            logger.warning(f"[Config] Unknown URLSCAN_VISIBILITY={visibility!r}, using 'public'")
            visibility = "public"
        self.urlscan_visibility: str = visibility
        self.urlscan_request_timeout_ms: int = _env_int("URLSCAN_REQUEST_TIMEOUT_MS", 12000, minimum=1)
        self.urlscan_max_links: int = _env_int("URLSCAN_MAX_LINKS", 3, minimum=0)
        self.urlscan_poll_attempts: int = _env_int("URLSCAN_POLL_ATTEMPTS", 1, minimum=1)
        self.urlscan_poll_delay_ms: int = _env_int("URLSCAN_POLL_DELAY_MS", 0, minimum=0)
        self.urlscan_report_unavailable: bool = _env_bool("URLSCAN_REPORT_UNAVAILABLE", False)
        self.urlscan_weight_malicious: float = _env_float("URLSCAN_WEIGHT_MALICIOUS", 45, minimum=0)
        self.urlscan_weight_suspicious: float = _env_float("URLSCAN_WEIGHT_SUSPICIOUS", 20, minimum=0)
        self.enrichment_timeout_ms: int = _env_int("ENRICHMENT_TIMEOUT_MS", 2000, minimum=0)

        # Scoring policy
        self.suspicious_threshold: int = _env_int("SUSPICIOUS_THRESHOLD", 25)
        self.dangerous_threshold: int = _env_int("DANGEROUS_THRESHOLD", 60)
        self.high_severity_floor: int = _env_int("HIGH_SEVERITY_SCORE_FLOOR", 40, minimum=0)
        self.summary_top_signals: int = _env_int("SUMMARY_TOP_SIGNALS", 3, minimum=1)

        # Aggregation policy
        self.duplicate_weight_factor: float = _env_float("DUPLICATE_WEIGHT_FACTOR", 0.5, minimum=0)
        self.max_aggregated_weight: float = _env_float("MAX_AGGREGATED_WEIGHT", 40, minimum=0)

    @property
    def is_urlscan_enabled(self) -> bool:
        """Check if urlscan.io is configured AND not explicitly disabled."""
        return bool(self.urlscan_api_key) and self._urlscan_enabled

    @property
    def enrichment_timeout(self) -> float:
        """Enrichment deadline in seconds."""
        return max(self.enrichment_timeout_ms, 0) / 1000

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to avoid re-reading environment variables on every call.
    Call ``get_settings.cache_clear()`` after changing the environment.
    """
    return Settings()


# Global settings instance for easy import
settings = get_settings()
