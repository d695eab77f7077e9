# Name: __init__.py
# Description: Export the scoring building blocks for convenient importing
# Date: 2026-10-06
#
# The orchestrator (scan_service) and evaluator plumbing import the checks
# package, which itself imports urlscan_client from here; import those two
# modules directly to keep this package free of import cycles.

from mailscan.services.aggregator import (
    aggregate_signals,
    entity_key,
    max_severity,
)
from mailscan.services.scoring import (
    apply_severity_floor,
    build_summary,
    clamp_score,
    determine_verdict,
    score_signals,
)
from mailscan.services.urlscan_client import UrlscanClient, UrlscanError

__all__ = [
    # Aggregation
    "aggregate_signals",
    "entity_key",
    "max_severity",
    # Scoring
    "apply_severity_floor",
    "build_summary",
    "clamp_score",
    "determine_verdict",
    "score_signals",
    # urlscan.io
    "UrlscanClient",
    "UrlscanError",
]
