# Name: sender.py
# Description: Sender heuristics over the From / Reply-To headers
# Date: 2026-10-03

import re

from mailscan.models.scan import EmailPayload, Severity, Signal


# =============================================================================
# CONFIGURATION
# =============================================================================

FREE_PROVIDERS = frozenset({
    "gmail.com", "yahoo.com", "outlook.com", "hotmail.com", "icloud.com",
})

WEIGHT_FREE_PROVIDER = 8
WEIGHT_REPLYTO_MISMATCH = 18
WEIGHT_SUSPICIOUS_LOCALPART = 6

# Local parts like "support8812734" are typical of throwaway accounts
LOCALPART_DIGIT_THRESHOLD = 6

_ANGLE_ADDRESS = re.compile(r'<([^>]+@[^>]+)>')
_BARE_ADDRESS = re.compile(r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}')


# =============================================================================
# ADDRESS PARSING
# =============================================================================

def extract_email_address(raw: str) -> str:
    """
    Extract a lower-cased address from a raw header value.

    Supports "Name <user@example.com>" and bare "user@example.com".

    Args:
        raw: Raw header value

    Returns:
        The address, or an empty string when none is found
    """
    if not raw:
        return ""

    match = _ANGLE_ADDRESS.search(raw)
    if match:
        return match.group(1).strip().lower()

    match = _BARE_ADDRESS.search(raw)
    return match.group(0).strip().lower() if match else ""


def get_domain(address: str) -> str:
    """Return the domain part of an address, or '' if there is none."""
    if not address or "@" not in address:
        return ""
    return address.rsplit("@", 1)[1].lower()


# =============================================================================
# CHECKS
# =============================================================================

def sender_checks(payload: EmailPayload) -> list[Signal]:
    """
    Run sender heuristics and return risk signals.

    Args:
        payload: Normalized email payload

    Returns:
        Signals for free-mail senders, Reply-To domain mismatch and
        digit-heavy local parts (may be empty)
    """
    signals: list[Signal] = []

    from_addr = extract_email_address(payload.from_address)
    reply_to_addr = extract_email_address(payload.reply_to)

    from_domain = get_domain(from_addr)
    reply_to_domain = get_domain(reply_to_addr)

    if from_domain and from_domain in FREE_PROVIDERS:
        signals.append(Signal(
            id="SENDER_FREE_PROVIDER",
            label="Sender uses a free email provider",
            severity=Severity.LOW,
            weight=WEIGHT_FREE_PROVIDER,
            evidence={"fromDomain": from_domain},
        ))

    if from_domain and reply_to_domain and from_domain != reply_to_domain:
        signals.append(Signal(
            id="REPLYTO_MISMATCH",
            label="Reply-To domain differs from From domain",
            severity=Severity.MEDIUM,
            weight=WEIGHT_REPLYTO_MISMATCH,
            evidence={"fromDomain": from_domain, "replyToDomain": reply_to_domain},
        ))

    if from_addr:
        local = from_addr.split("@", 1)[0]
        digit_count = sum(ch.isdigit() for ch in local)

        if digit_count >= LOCALPART_DIGIT_THRESHOLD:
            signals.append(Signal(
                id="SENDER_SUSPICIOUS_LOCALPART",
                label="Sender local-part contains many digits",
                severity=Severity.LOW,
                weight=WEIGHT_SUSPICIOUS_LOCALPART,
                evidence={"local": local},
            ))

    return signals
