# Name: aggregator.py
# Description: Entity-based signal aggregation
# Date: 2026-10-05
#
# Several rules often fire on the same physical thing (one phishing link can
# be a shortener, plain HTTP and flagged by urlscan at once). Summing those
# weights would let a single link dominate the score, so signals are merged
# per entity: weight grows by a fraction of each duplicate and is capped,
# severity escalates to the highest contributor, and evidence.sources keeps
# the ids of every contributing signal.

from typing import Iterable

from mailscan.models.scan import Severity, Signal


# =============================================================================
# AGGREGATION POLICY
# =============================================================================

# Each duplicate adds this fraction of its own weight
DUPLICATE_WEIGHT_FACTOR = 0.5

# Ceiling for merged weight per entity
MAX_AGGREGATED_WEIGHT = 40


def entity_key(signal: Signal) -> str:
    """
    Compute the aggregation identity of a signal.

    Priority:
        1. evidence.link → "link:<url>" (exact string, no normalization)
        2. evidence.ip   → "ip:<address>"
        3. fallback      → "id:<rule id>"

    Examples:
        >>> entity_key(Signal(id="LINK_SHORTENER", label="x", severity="MEDIUM",
        ...                   evidence={"link": "http://bit.ly/a"}))
        'link:http://bit.ly/a'
    """
    link = signal.evidence.get("link")
    if link:
        return f"link:{link}"

    ip = signal.evidence.get("ip")
    if ip:
        return f"ip:{ip}"

    return f"id:{signal.id}"


def max_severity(a: Severity, b: Severity) -> Severity:
    """Return the higher of two severities (first one wins on ties)."""
    return b if b.rank > a.rank else a


class _Accumulator:
    """Mutable merge state for one entity. Never leaves this module."""

    __slots__ = ("base", "weight", "severity", "sources")

    def __init__(self, signal: Signal):
        self.base = signal
        self.weight = signal.weight
        self.severity = signal.severity
        self.sources = [signal.id]

    def merge(self, signal: Signal, duplicate_factor: float, max_weight: float) -> None:
        # A single signal heavier than the cap keeps its weight; merging
        # never lowers an entity's weight.
        ceiling = max(max_weight, self.weight)
        self.weight = min(self.weight + signal.weight * duplicate_factor, ceiling)
        self.severity = max_severity(self.severity, signal.severity)
        self.sources.append(signal.id)

    def to_signal(self) -> Signal:
        evidence = dict(self.base.evidence)
        evidence["sources"] = list(self.sources)
        return Signal(
            id=self.base.id,
            label=self.base.label,
            severity=self.severity,
            weight=self.weight,
            evidence=evidence,
        )


def aggregate_signals(
    signals: Iterable[Signal],
    duplicate_factor: float = DUPLICATE_WEIGHT_FACTOR,
    max_weight: float = MAX_AGGREGATED_WEIGHT,
) -> list[Signal]:
    """
    Merge signals that describe the same entity.

    The first signal seen for a key becomes the base record: its id, label
    and evidence (other than 'sources') are kept. For every later signal
    with the same key:

        - weight   ← min(weight + incoming.weight × duplicate_factor,
                         max(cap, weight))
        - severity ← max(severity, incoming.severity)
        - sources  ← sources + [incoming.id]   (duplicates preserved)

    The ceiling is the cap, or the current weight when that is already
    higher: a lone signal above the cap keeps its weight, and merging never
    lowers an entity's weight.

    Input signals are not modified; new Signal values are returned.

    Args:
        signals: Raw signals from all evaluators
        duplicate_factor: Fraction of a duplicate's weight that is added
        max_weight: Per-entity weight ceiling for merged signals

    Returns:
        One signal per entity key, in first-seen order
    """
    accumulators: dict[str, _Accumulator] = {}

    for signal in signals:
        key = entity_key(signal)
        existing = accumulators.get(key)

        if existing is None:
            accumulators[key] = _Accumulator(signal)
        else:
            existing.merge(signal, duplicate_factor, max_weight)

    return [acc.to_signal() for acc in accumulators.values()]
