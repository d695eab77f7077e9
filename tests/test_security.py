"""
Tests for log masking helpers (core.security).
"""

from __future__ import annotations

from mailscan.core.security import (
    mask_email,
    mask_token,
    mask_url,
    safe_log_email,
    safe_log_url,
)


def test_mask_email():
    assert mask_email("john.doe@example.com") == "j***@e***.com"
    assert mask_email("not-an-address") == "not-an-address"
    assert mask_email("") == ""


def test_mask_token():
    assert mask_token("1a2b3c4d-5e6f") == "1a2b..."
    assert mask_token("abc") == "a***"
    assert mask_token(None) == "<unset>"


def test_mask_url_drops_query_and_fragment():
    assert mask_url("https://x.test/login?u=bob@corp.com#top") == "https://x.test/login?..."
    assert mask_url("https://x.test/login") == "https://x.test/login"
    assert mask_url("http://[::1") == "[UNPARSEABLE_URL]"


def test_safe_logging_masks_only_in_production(monkeypatch):
    from mailscan.core.config import get_settings

    link = "https://x.test/reset?token=abc"
    assert safe_log_url(link) == link
    assert safe_log_email("bob@corp.test") == "bob@corp.test"

    monkeypatch.setenv("ENVIRONMENT", "production")
    get_settings.cache_clear()

    assert safe_log_url(link) == "https://x.test/reset?..."
    assert safe_log_email("bob@corp.test") == "b***@c***.test"
