# Name: scoring.py
# Description: Risk scoring and verdict mapping for aggregated signals
# Date: 2026-10-05
#
# This module provides deterministic, framework-agnostic scoring functions
# that convert aggregated signals into a bounded score, a verdict and a
# short summary. Each call is a pure function of its input.

import math

from mailscan.models.scan import ScanResult, Severity, Signal, Verdict


# =============================================================================
# SCORE BOUNDS AND FLOOR
# =============================================================================

SCORE_MIN = 0
SCORE_MAX = 100

# Minimum score whenever at least one HIGH-severity signal survives
# aggregation. Dampened duplicates or small rule weights must not make a
# confirmed high-severity finding look harmless.
HIGH_SEVERITY_SCORE_FLOOR = 40


def raw_score(signals: list[Signal]) -> float:
    """Sum of aggregated signal weights."""
    return sum(signal.weight for signal in signals)


def has_high_severity(signals: list[Signal]) -> bool:
    return any(signal.severity is Severity.HIGH for signal in signals)


def apply_severity_floor(
    score: float,
    signals: list[Signal],
    floor: float = HIGH_SEVERITY_SCORE_FLOOR,
) -> float:
    """
    Raise the score to the floor if any signal is HIGH severity.

    Examples:
        >>> apply_severity_floor(12, [Signal(id="X", label="x", severity="HIGH", weight=1)])
        40
        >>> apply_severity_floor(12, [])
        12
    """
    if has_high_severity(signals):
        return max(score, floor)
    return score


def clamp_score(score: float, low: int = SCORE_MIN, high: int = SCORE_MAX) -> int:
    """
    Clamp a score into [low, high] and round it half-up to an integer.

    Examples:
        >>> clamp_score(22.5)
        23
        >>> clamp_score(180)
        100
        >>> clamp_score(-3)
        0
    """
    bounded = max(low, min(high, score))
    return int(math.floor(bounded + 0.5))


# =============================================================================
# VERDICT CLASSIFICATION
# =============================================================================

SUSPICIOUS_THRESHOLD = 25
DANGEROUS_THRESHOLD = 60


def determine_verdict(
    score: int,
    suspicious_threshold: int = SUSPICIOUS_THRESHOLD,
    dangerous_threshold: int = DANGEROUS_THRESHOLD,
) -> Verdict:
    """
    Classify a final score into a verdict.

    Thresholds:
        - score < 25          → SAFE
        - 25 ≤ score < 60     → SUSPICIOUS
        - score ≥ 60          → DANGEROUS

    Args:
        score: Final, clamped score (0 - 100)

    Returns:
        The verdict for the score

    Examples:
        >>> determine_verdict(24)
        <Verdict.SAFE: 'SAFE'>
        >>> determine_verdict(60)
        <Verdict.DANGEROUS: 'DANGEROUS'>
    """
    if score >= dangerous_threshold:
        return Verdict.DANGEROUS
    if score >= suspicious_threshold:
        return Verdict.SUSPICIOUS
    return Verdict.SAFE


# =============================================================================
# SUMMARY
# =============================================================================

NO_INDICATORS_SUMMARY = "No suspicious indicators found."

SUMMARY_TOP_SIGNALS_LIMIT = 3


def build_summary(
    verdict: Verdict,
    signals: list[Signal],
    limit: int = SUMMARY_TOP_SIGNALS_LIMIT,
) -> str:
    """
    Build a one-line explanation naming the heaviest signals.

    Signals are ranked by weight, highest first; ties keep aggregation
    order (sorted() is stable). The input list is not reordered.

    Args:
        verdict: The computed verdict
        signals: Aggregated signals
        limit: Number of labels to mention; values below 1 name one label

    Returns:
        "<VERDICT> based on: <label>; <label>; <label>", or the fixed
        no-indicators sentence for an empty list
    """
    if not signals:
        return NO_INDICATORS_SUMMARY

    top = sorted(signals, key=lambda s: -s.weight)[:max(limit, 1)]
    reasons = "; ".join(signal.label for signal in top)
    return f"{verdict.value} based on: {reasons}"


# =============================================================================
# SCORE PIPELINE
# =============================================================================

def score_signals(
    signals: list[Signal],
    floor: float = HIGH_SEVERITY_SCORE_FLOOR,
    suspicious_threshold: int = SUSPICIOUS_THRESHOLD,
    dangerous_threshold: int = DANGEROUS_THRESHOLD,
    summary_limit: int = SUMMARY_TOP_SIGNALS_LIMIT,
) -> ScanResult:
    """
    Turn aggregated signals into a ScanResult.

    Steps, in order:
        1. Sum weights
        2. Apply the HIGH-severity floor
        3. Clamp to [0, 100] (the floor is subject to the ceiling too)
        4. Map the score to a verdict
        5. Build the summary

    Args:
        signals: Output of aggregate_signals()

    Returns:
        ScanResult carrying the same aggregated signals
    """
    score = clamp_score(apply_severity_floor(raw_score(signals), signals, floor))
    verdict = determine_verdict(score, suspicious_threshold, dangerous_threshold)
    summary = build_summary(verdict, signals, summary_limit)

    return ScanResult(
        score=score,
        verdict=verdict,
        summary=summary,
        signals=list(signals),
    )
