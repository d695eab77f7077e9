# Name: __init__.py
# Description: Export all evaluator checks for convenient importing
# Date: 2026-10-03

from mailscan.checks.sender import sender_checks
from mailscan.checks.content import content_checks
from mailscan.checks.links import link_checks
from mailscan.checks.attachments import attachment_checks
from mailscan.checks.urlscan import UrlscanEvaluator, classify_verdict, poll_for_verdict

__all__ = [
    # Rule checks
    "sender_checks",
    "content_checks",
    "link_checks",
    "attachment_checks",
    # Enrichment
    "UrlscanEvaluator",
    "classify_verdict",
    "poll_for_verdict",
]
