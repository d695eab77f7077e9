# Name: __init__.py
# Description: Core module exports
# Date: 2026-10-02

from mailscan.core.config import settings, get_settings, Settings, API_VERSION
from mailscan.core.security import (
    mask_email,
    mask_token,
    mask_url,
    safe_log_email,
    safe_log_url,
)

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "API_VERSION",
    "mask_email",
    "mask_token",
    "mask_url",
    "safe_log_email",
    "safe_log_url",
]
