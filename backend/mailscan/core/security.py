# Name: security.py
# Description: Masking helpers so scan logs never carry raw PII or secrets
# Date: 2026-10-02

from typing import Any, Optional
from urllib.parse import urlsplit

from mailscan.core.config import get_settings


# =============================================================================
# MASKING FUNCTIONS
# =============================================================================

def mask_email(email: str) -> str:
    """
    Mask an email address for safe logging.

    Example: "john.doe@example.com" -> "j***@e***.com"
    """
    if not email or '@' not in email:
        return email

    local, domain = email.rsplit('@', 1)
    domain_parts = domain.rsplit('.', 1)

    masked_local = local[0] + '***' if local else '***'
    masked_domain = domain_parts[0][0] + '***' if domain_parts[0] else '***'
    tld = domain_parts[1] if len(domain_parts) > 1 else 'com'

    return f"{masked_local}@{masked_domain}.{tld}"


def mask_token(token: Optional[str], visible_chars: int = 4) -> str:
    """
    Mask an API key for safe logging.

    Example: "1a2b3c4d-5e6f..." -> "1a2b..."
    """
    if not token:
        return "<unset>"

    if len(token) <= visible_chars:
        return token[:1] + '***'

    return token[:visible_chars] + '...'


def mask_url(url: str) -> str:
    """
    Drop query string and fragment from a URL.

    Phishing links often embed the recipient address or a one-time token
    in the query, so only scheme, host and path are kept.

    Example: "https://x.test/login?u=bob@corp.com" -> "https://x.test/login?..."
    """
    if not url:
        return url
    try:
        parts = urlsplit(url)
    except ValueError:
        return "[UNPARSEABLE_URL]"

    if not parts.scheme or not parts.netloc:
        return url[:40]

    masked = f"{parts.scheme}://{parts.netloc}{parts.path}"
    if parts.query or parts.fragment:
        masked += "?..."
    return masked


# =============================================================================
# SAFE LOGGING HELPERS
# =============================================================================

def safe_log_email(email: Any) -> str:
    """Get a safe-to-log version of a sender/reply-to header value."""
    email = str(email or "")
    if get_settings().is_production:
        return mask_email(email)
    return email


def safe_log_url(url: Any) -> str:
    """Get a safe-to-log version of a link."""
    url = str(url or "")
    if get_settings().is_production:
        return mask_url(url)
    return url
