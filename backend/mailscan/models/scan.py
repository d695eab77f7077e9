# Name: scan.py
# Description: Pydantic models for the scan API and the signal pipeline
# Date: 2026-10-02

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# ENUMERATIONS
# =============================================================================

class Severity(str, Enum):
    """Signal severity, totally ordered LOW < MEDIUM < HIGH."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.LOW: 1, Severity.MEDIUM: 2, Severity.HIGH: 3}


class Verdict(str, Enum):
    """Final classification derived from the clamped score."""

    SAFE = "SAFE"
    SUSPICIOUS = "SUSPICIOUS"
    DANGEROUS = "DANGEROUS"


# =============================================================================
# INPUT PAYLOAD
# =============================================================================

def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


class Attachment(BaseModel):
    """
    Attachment metadata. Content is never inspected.

    Attributes:
        filename: File name as shown to the recipient
        mime_type: Declared MIME type (aliased from 'mimeType')
        size_bytes: Declared size (aliased from 'sizeBytes')
    """
    model_config = ConfigDict(populate_by_name=True)

    filename: str = ""
    mime_type: str = Field(default="", alias="mimeType")
    size_bytes: int = Field(default=0, alias="sizeBytes")

    @field_validator("filename", "mime_type", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("size_bytes", mode="before")
    @classmethod
    def _coerce_size(cls, value: Any) -> int:
        if isinstance(value, bool):
            return 0
        try:
            return max(int(value), 0)
        except (TypeError, ValueError):
            return 0


class EmailPayload(BaseModel):
    """
    Normalized email handed to the evaluators.

    Every field is optional on the wire. Missing or wrong-typed values are
    coerced to empty strings/lists so evaluators never fail on shape.

    Attributes:
        message_id: Client-side message identifier (aliased from 'messageId')
        from_address: Raw From header (aliased from 'from')
        reply_to: Raw Reply-To header (aliased from 'replyTo')
        subject: Subject line
        body_text: Plain text body (aliased from 'bodyText')
        links: URLs extracted from the message, in document order
        attachments: Attachment metadata, in message order
    """
    model_config = ConfigDict(populate_by_name=True)

    message_id: str = Field(default="", alias="messageId")
    from_address: str = Field(default="", alias="from")
    reply_to: str = Field(default="", alias="replyTo")
    subject: str = ""
    body_text: str = Field(default="", alias="bodyText")
    links: list[str] = Field(default_factory=list)
    attachments: list[Attachment] = Field(default_factory=list)

    @field_validator("message_id", "from_address", "reply_to", "subject", "body_text", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("links", mode="before")
    @classmethod
    def _coerce_links(cls, value: Any) -> list[str]:
        if not isinstance(value, (list, tuple)):
            return []
        return [str(link) for link in value if link is not None]

    @field_validator("attachments", mode="before")
    @classmethod
    def _coerce_attachments(cls, value: Any) -> list:
        if not isinstance(value, (list, tuple)):
            return []
        return [item for item in value if isinstance(item, (dict, Attachment))]


# =============================================================================
# SIGNALS AND RESULTS
# =============================================================================

class Signal(BaseModel):
    """
    One unit of evidence produced by an evaluator.

    Signals are frozen: the aggregator builds new values instead of
    changing what an evaluator returned.

    Attributes:
        id: Stable identifier of the detection rule (e.g. 'LINK_SHORTENER')
        label: Human-readable explanation
        severity: LOW, MEDIUM or HIGH
        weight: Non-negative raw score contribution
        evidence: Structured details. 'link' and 'ip' identify the entity the
            signal is about; 'sources' is added by aggregation.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    severity: Severity
    weight: float = Field(default=0.0, ge=0)
    evidence: dict[str, Any] = Field(default_factory=dict)


class ScanResult(BaseModel):
    """
    Response payload from an email scan.

    Attributes:
        score: Integer risk score (0 - 100)
        verdict: SAFE, SUSPICIOUS or DANGEROUS
        summary: Human-readable summary naming the top indicators
        signals: Aggregated signals, one per entity
    """
    score: int = Field(ge=0, le=100)
    verdict: Verdict
    summary: str
    signals: list[Signal]


class ReputationVerdict(BaseModel):
    """
    Overall verdict returned by the reputation service for one URL.

    Attributes:
        malicious: Service flagged the URL as malicious
        score: Service score, positive values indicate suspicion
        categories: Threat categories (e.g. 'phishing')
        tags: Free-form tags attached by the service
    """
    malicious: bool = False
    score: float = 0.0
    categories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    @field_validator("malicious", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        return bool(value)

    @field_validator("score", mode="before")
    @classmethod
    def _coerce_score(cls, value: Any) -> float:
        if isinstance(value, bool):
            return float(value)
        try:
            return float(value or 0)
        except (TypeError, ValueError):
            return 0.0

    @field_validator("categories", "tags", mode="before")
    @classmethod
    def _coerce_labels(cls, value: Any) -> list[str]:
        if not isinstance(value, (list, tuple)):
            return []
        return [str(item) for item in value if item is not None]
