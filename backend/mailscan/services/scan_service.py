# Name: scan_service.py
# Description: Email scan orchestration: evaluators, aggregation and scoring
# Date: 2026-10-06

import logging
import time
from typing import Optional, Sequence

from mailscan.core.config import Settings, get_settings
from mailscan.core.security import safe_log_email
from mailscan.models.scan import EmailPayload, ScanResult
from mailscan.services.aggregator import aggregate_signals
from mailscan.services.evaluators import (
    Evaluator,
    build_default_evaluators,
    collect_signals,
    describe_evaluators,
)
from mailscan.services.scoring import score_signals

# Configure logging
logger = logging.getLogger(__name__)


# =============================================================================
# MAIN ORCHESTRATOR
# =============================================================================

async def scan_email(
    payload: EmailPayload,
    evaluators: Optional[Sequence[Evaluator]] = None,
    settings: Optional[Settings] = None,
) -> ScanResult:
    """
    Scan one email and return its risk assessment.

    This is the main orchestrator function that:
    1. Runs every evaluator (rules inline, enrichment under its deadline)
    2. Aggregates the raw signals per entity
    3. Scores the aggregated signals and maps the score to a verdict
    4. Returns the complete result

    Evaluator failures and enrichment timeouts never reach the caller; a
    result is always produced, even for an empty payload.

    Args:
        payload: Normalized email payload
        evaluators: Evaluators to run; defaults to build_default_evaluators()
        settings: Settings for aggregation/scoring constants

    Returns:
        ScanResult with score, verdict, summary and aggregated signals
    """
    settings = settings or get_settings()
    if evaluators is None:
        evaluators = build_default_evaluators(settings)

    tag = payload.message_id or "-"

    # -------------------------------------------------------------------------
    # STEP 1: Evaluators
    # -------------------------------------------------------------------------
    logger.info(
        f"[Scan {tag}] STEP 1/3: Running evaluators ({describe_evaluators(evaluators)}) "
        f"from={safe_log_email(payload.from_address)} links={len(payload.links)} "
        f"attachments={len(payload.attachments)}"
    )
    scan_start = time.perf_counter()
    raw_signals = await collect_signals(payload, evaluators)
    eval_elapsed = (time.perf_counter() - scan_start) * 1000
    logger.info(f"[Scan {tag}] Evaluators: {len(raw_signals)} raw signals ({eval_elapsed:.0f}ms)")

    # -------------------------------------------------------------------------
    # STEP 2: Aggregation
    # -------------------------------------------------------------------------
    logger.debug(f"[Scan {tag}] STEP 2/3: Aggregating by entity...")
    aggregated = aggregate_signals(
        raw_signals,
        duplicate_factor=settings.duplicate_weight_factor,
        max_weight=settings.max_aggregated_weight,
    )
    if len(aggregated) < len(raw_signals):
        logger.debug(
            f"[Scan {tag}] Merged {len(raw_signals)} signals into {len(aggregated)} entities"
        )

    # -------------------------------------------------------------------------
    # STEP 3: Scoring
    # -------------------------------------------------------------------------
    logger.debug(f"[Scan {tag}] STEP 3/3: Scoring...")
    result = score_signals(
        aggregated,
        floor=settings.high_severity_floor,
        suspicious_threshold=settings.suspicious_threshold,
        dangerous_threshold=settings.dangerous_threshold,
        summary_limit=settings.summary_top_signals,
    )

    total_elapsed = (time.perf_counter() - scan_start) * 1000
    logger.info(
        f"[Scan {tag}] COMPLETE: {len(aggregated)} signals, "
        f"score={result.score}, verdict={result.verdict.value} ({total_elapsed:.0f}ms)"
    )

    return result
