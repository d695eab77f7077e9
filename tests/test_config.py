"""
Tests for environment-driven settings (core.config).
"""

from __future__ import annotations

import pytest

from mailscan.core.config import Settings, get_settings
from mailscan.models.scan import Verdict
from mailscan.services.scoring import build_summary


def test_defaults():
    settings = Settings()

    assert settings.is_urlscan_enabled is False
    assert settings.urlscan_poll_attempts == 1
    assert settings.summary_top_signals == 3
    assert settings.enrichment_timeout == 2.0


def test_unparseable_numbers_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("URLSCAN_MAX_LINKS", "many")
    monkeypatch.setenv("DUPLICATE_WEIGHT_FACTOR", "half")

    settings = Settings()

    assert settings.urlscan_max_links == 3
    assert settings.duplicate_weight_factor == 0.5


@pytest.mark.parametrize(
    ("name", "attribute", "raw", "expected"),
    [
        ("URLSCAN_POLL_ATTEMPTS", "urlscan_poll_attempts", "0", 1),
        ("SUMMARY_TOP_SIGNALS", "summary_top_signals", "0", 1),
        ("URLSCAN_WEIGHT_MALICIOUS", "urlscan_weight_malicious", "-5", 0),
        ("URLSCAN_WEIGHT_SUSPICIOUS", "urlscan_weight_suspicious", "-1.5", 0),
        ("URLSCAN_MAX_LINKS", "urlscan_max_links", "-2", 0),
        ("URLSCAN_POLL_DELAY_MS", "urlscan_poll_delay_ms", "-100", 0),
    ],
)
def test_values_below_minimum_are_raised(monkeypatch, name, attribute, raw, expected):
    monkeypatch.setenv(name, raw)

    assert getattr(Settings(), attribute) == expected


def test_unknown_visibility_falls_back_to_public(monkeypatch):
    monkeypatch.setenv("URLSCAN_VISIBILITY", "secret")

    assert Settings().urlscan_visibility == "public"


def test_summary_names_one_label_when_configured_for_zero(monkeypatch, make_signal):
    monkeypatch.setenv("SUMMARY_TOP_SIGNALS", "0")
    get_settings.cache_clear()

    limit = get_settings().summary_top_signals

    assert build_summary(Verdict.SAFE, [make_signal("A", 5), make_signal("B", 3)], limit) == "SAFE based on: A label"
