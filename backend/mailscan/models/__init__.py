# Name: __init__.py
# Description: Export all models for convenient importing

from mailscan.models.scan import (
    Attachment,
    EmailPayload,
    ReputationVerdict,
    ScanResult,
    Severity,
    Signal,
    Verdict,
)

__all__ = [
    "Attachment",
    "EmailPayload",
    "ReputationVerdict",
    "ScanResult",
    "Severity",
    "Signal",
    "Verdict",
]
