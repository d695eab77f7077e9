"""
Pytest fixtures for mailscan tests.

Every test starts from a clean environment so a developer's .env (for
example a real URLSCAN_API_KEY) never leaks into scans under test.
"""

from __future__ import annotations

import pytest

from mailscan.core.config import get_settings
from mailscan.models.scan import EmailPayload, Severity, Signal

_SCAN_ENV_VARS = (
    "ENVIRONMENT",
    "LOG_LEVEL",
    "ENABLE_URLSCAN",
    "URLSCAN_API_KEY",
    "URLSCAN_VISIBILITY",
    "URLSCAN_BASE_URL",
    "URLSCAN_MAX_LINKS",
    "URLSCAN_POLL_ATTEMPTS",
    "URLSCAN_POLL_DELAY_MS",
    "URLSCAN_REPORT_UNAVAILABLE",
    "URLSCAN_REQUEST_TIMEOUT_MS",
    "URLSCAN_WEIGHT_MALICIOUS",
    "URLSCAN_WEIGHT_SUSPICIOUS",
    "ENRICHMENT_TIMEOUT_MS",
    "SUSPICIOUS_THRESHOLD",
    "DANGEROUS_THRESHOLD",
    "HIGH_SEVERITY_SCORE_FLOOR",
    "DUPLICATE_WEIGHT_FACTOR",
    "MAX_AGGREGATED_WEIGHT",
    "SUMMARY_TOP_SIGNALS",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Drop scan-related env vars and rebuild cached settings around each test."""
    for name in _SCAN_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_payload():
    """Build an EmailPayload from wire-format (camelCase) fields."""

    def _make(**fields) -> EmailPayload:
        if "from_" in fields:
            fields["from"] = fields.pop("from_")
        return EmailPayload.model_validate(fields)

    return _make


@pytest.fixture
def make_signal():
    """Build a Signal with short defaults."""

    def _make(id: str = "RULE", weight: float = 10, severity: str = "LOW", **evidence) -> Signal:
        return Signal(
            id=id,
            label=f"{id} label",
            severity=Severity(severity),
            weight=weight,
            evidence=evidence,
        )

    return _make
