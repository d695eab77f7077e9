# Name: content.py
# Description: Keyword heuristics over the subject line and body text
# Date: 2026-10-03
#
# Matching is plain case-insensitive substring search. Each keyword group
# emits at most one signal, listing the phrases that matched.

from mailscan.models.scan import EmailPayload, Severity, Signal


MAX_MATCHES_EVIDENCE = 10

WEIGHT_URGENCY = 15
WEIGHT_CREDENTIALS = 25
WEIGHT_MONEY = 12
WEIGHT_THREAT = 15

KEYWORD_GROUPS = (
    {
        "id": "KEYWORDS_URGENCY",
        "label": "Urgency / pressure language",
        "severity": Severity.MEDIUM,
        "weight": WEIGHT_URGENCY,
        "words": ("urgent", "immediately", "act now", "within 24 hours", "verify now", "asap"),
    },
    {
        "id": "KEYWORDS_CREDENTIALS",
        "label": "Credential / verification keywords",
        "severity": Severity.HIGH,
        "weight": WEIGHT_CREDENTIALS,
        "words": ("password", "login", "one-time code", "otp", "verification code", "credentials"),
    },
    {
        "id": "KEYWORDS_MONEY",
        "label": "Payment / invoice keywords",
        "severity": Severity.MEDIUM,
        "weight": WEIGHT_MONEY,
        "words": ("invoice", "payment", "wire", "transfer", "refund"),
    },
    {
        "id": "KEYWORDS_THREAT",
        "label": "Threat / account suspension language",
        "severity": Severity.MEDIUM,
        "weight": WEIGHT_THREAT,
        "words": ("account will be closed", "suspended", "locked", "disabled"),
    },
)


def find_matches(text: str, phrases) -> list[str]:
    """Return the phrases (in list order) that occur in an already lower-cased text."""
    return [phrase for phrase in phrases if phrase.lower() in text]


def content_checks(payload: EmailPayload) -> list[Signal]:
    """
    Scan subject and body for phishing language.

    Args:
        payload: Normalized email payload

    Returns:
        One signal per keyword group with at least one match
    """
    text = f"{payload.subject}\n{payload.body_text}".lower()
    if not text.strip():
        return []

    signals: list[Signal] = []
    for group in KEYWORD_GROUPS:
        matches = find_matches(text, group["words"])
        if matches:
            signals.append(Signal(
                id=group["id"],
                label=group["label"],
                severity=group["severity"],
                weight=group["weight"],
                evidence={"matches": matches[:MAX_MATCHES_EVIDENCE]},
            ))

    return signals
