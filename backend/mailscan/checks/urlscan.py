# Name: urlscan.py
# Description: External reputation checks for extracted links via urlscan.io
# Date: 2026-10-04
#
# Submits a small subset of links, polls briefly for a verdict and maps the
# verdict onto the same Signal schema the rule checks use. Links that cannot
# be submitted or whose result is not ready in time produce no signal.

import asyncio
import logging
import time
from typing import Optional

from mailscan.core.config import Settings, get_settings
from mailscan.core.security import safe_log_url
from mailscan.models.scan import EmailPayload, ReputationVerdict, Severity, Signal
from mailscan.services.urlscan_client import UrlscanClient, UrlscanError

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

MAX_LINKS_TO_CHECK = 3

POLL_ATTEMPTS = 1
POLL_DELAY_MS = 0

WEIGHT_URLSCAN_MALICIOUS = 45
WEIGHT_URLSCAN_SUSPICIOUS = 20

# A service score at or above this value counts as suspicious
SCORE_SUSPICIOUS_THRESHOLD = 1


# =============================================================================
# VERDICT CLASSIFICATION
# =============================================================================

def classify_verdict(
    url: str,
    scan_id: str,
    verdict: ReputationVerdict,
    malicious_weight: float = WEIGHT_URLSCAN_MALICIOUS,
    suspicious_weight: float = WEIGHT_URLSCAN_SUSPICIOUS,
) -> Signal:
    """
    Map a urlscan.io verdict to exactly one signal.

    Outcomes:
        - malicious flag set                  → URLSCAN_MALICIOUS (HIGH)
        - score ≥ 1 or categories present     → URLSCAN_SUSPICIOUS (MEDIUM)
        - otherwise                           → URLSCAN_CLEAN (LOW, weight 0)

    The clean signal adds nothing to the score but records that the link
    was checked. Every outcome carries ``evidence.link`` so it aggregates
    with rule signals about the same URL.

    Args:
        url: The checked URL, exactly as it appeared in the payload
        scan_id: urlscan.io scan identifier
        verdict: Overall verdict from the result document

    Returns:
        The signal for this link
    """
    if verdict.malicious:
        return Signal(
            id="URLSCAN_MALICIOUS",
            label="urlscan: URL flagged as malicious",
            severity=Severity.HIGH,
            weight=malicious_weight,
            evidence={
                "link": url,
                "uuid": scan_id,
                "score": verdict.score,
                "categories": list(verdict.categories),
                "tags": list(verdict.tags),
            },
        )

    if verdict.score >= SCORE_SUSPICIOUS_THRESHOLD or verdict.categories:
        return Signal(
            id="URLSCAN_SUSPICIOUS",
            label="urlscan: URL has suspicious indicators",
            severity=Severity.MEDIUM,
            weight=suspicious_weight,
            evidence={
                "link": url,
                "uuid": scan_id,
                "score": verdict.score,
                "categories": list(verdict.categories),
                "tags": list(verdict.tags),
            },
        )

    return Signal(
        id="URLSCAN_CLEAN",
        label="urlscan: no malicious verdicts",
        severity=Severity.LOW,
        weight=0,
        evidence={"link": url, "uuid": scan_id, "score": verdict.score},
    )


def unavailable_signal(url: str, reason: str) -> Signal:
    """Zero-weight marker for a link whose reputation could not be read."""
    return Signal(
        id="ENRICHMENT_UNAVAILABLE",
        label="urlscan: reputation not available",
        severity=Severity.LOW,
        weight=0,
        evidence={"link": url, "reason": reason},
    )


# =============================================================================
# POLLING
# =============================================================================

async def poll_for_verdict(
    client: UrlscanClient,
    scan_id: str,
    attempts: int = POLL_ATTEMPTS,
    delay_ms: int = POLL_DELAY_MS,
) -> Optional[ReputationVerdict]:
    """
    Poll for a scan verdict with a small, bounded number of attempts.

    A "not ready" answer and a failed request both use up one attempt.

    Args:
        client: urlscan.io client
        scan_id: Identifier returned by submit
        attempts: Maximum number of fetches (at least one is always made)
        delay_ms: Sleep between fetches (not after the last one)

    Returns:
        The verdict, or None if none was available in time
    """
    attempts = max(attempts, 1)
    for attempt in range(1, attempts + 1):
        try:
            verdict = await client.fetch_verdict(scan_id)
            if verdict is not None:
                return verdict
            logger.debug(f"[urlscan] {scan_id}: not ready (attempt {attempt}/{attempts})")
        except UrlscanError as e:
            logger.debug(f"[urlscan] {scan_id}: fetch failed (attempt {attempt}/{attempts}): {e}")

        if attempt < attempts and delay_ms > 0:
            await asyncio.sleep(delay_ms / 1000)

    return None


# =============================================================================
# EVALUATOR
# =============================================================================

class UrlscanEvaluator:
    """
    Asynchronous evaluator backed by urlscan.io.

    Checks at most ``max_links`` links, in payload order, concurrently.
    Results are collected into a list local to each call, so a call that
    outlives its deadline cannot affect a finished scan.
    """

    name = "urlscan"

    def __init__(
        self,
        client: UrlscanClient,
        max_links: int = MAX_LINKS_TO_CHECK,
        poll_attempts: int = POLL_ATTEMPTS,
        poll_delay_ms: int = POLL_DELAY_MS,
        malicious_weight: float = WEIGHT_URLSCAN_MALICIOUS,
        suspicious_weight: float = WEIGHT_URLSCAN_SUSPICIOUS,
        report_unavailable: bool = False,
    ):
        self.client = client
        self.max_links = max_links
        self.poll_attempts = poll_attempts
        self.poll_delay_ms = poll_delay_ms
        self.malicious_weight = malicious_weight
        self.suspicious_weight = suspicious_weight
        self.report_unavailable = report_unavailable

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        client: Optional[UrlscanClient] = None,
    ) -> "UrlscanEvaluator":
        settings = settings or get_settings()
        return cls(
            client=client or UrlscanClient.from_settings(settings),
            max_links=settings.urlscan_max_links,
            poll_attempts=settings.urlscan_poll_attempts,
            poll_delay_ms=settings.urlscan_poll_delay_ms,
            malicious_weight=settings.urlscan_weight_malicious,
            suspicious_weight=settings.urlscan_weight_suspicious,
            report_unavailable=settings.urlscan_report_unavailable,
        )

    async def check_link(self, url: str) -> Optional[Signal]:
        """
        Submit one link and turn its verdict into a signal.

        Any failure is confined to this link: other links checked in the
        same scan keep their signals.

        Returns:
            A signal, or None when the link was skipped
        """
        try:
            return await self._check_link(url)
        except Exception as e:
            logger.warning(f"[urlscan] Check FAILED for {safe_log_url(url)}: {e!r} - skipping link")
            return unavailable_signal(url, "check_failed") if self.report_unavailable else None

    async def _check_link(self, url: str) -> Optional[Signal]:
        try:
            scan_id = await self.client.submit(url)
        except UrlscanError as e:
            logger.warning(f"[urlscan] Submit skipped for {safe_log_url(url)}: {e}")
            return unavailable_signal(url, "submit_failed") if self.report_unavailable else None

        verdict = await poll_for_verdict(
            self.client,
            scan_id,
            attempts=self.poll_attempts,
            delay_ms=self.poll_delay_ms,
        )
        if verdict is None:
            logger.info(f"[urlscan] No verdict yet for {safe_log_url(url)} ({scan_id})")
            return unavailable_signal(url, "not_ready") if self.report_unavailable else None

        return classify_verdict(
            url,
            scan_id,
            verdict,
            malicious_weight=self.malicious_weight,
            suspicious_weight=self.suspicious_weight,
        )

    async def evaluate(self, payload: EmailPayload) -> list[Signal]:
        """
        Run reputation checks on the first links of the payload.

        Args:
            payload: Normalized email payload

        Returns:
            At most one signal per checked link, in link order
        """
        to_check = payload.links[:max(self.max_links, 0)]
        if not to_check:
            return []

        start = time.perf_counter()
        results = await asyncio.gather(*(self.check_link(url) for url in to_check))
        signals = [signal for signal in results if signal is not None]

        elapsed = (time.perf_counter() - start) * 1000
        logger.info(
            f"[urlscan] Checked {len(to_check)} link(s), "
            f"{len(signals)} signal(s) ({elapsed:.0f}ms)"
        )
        return signals
