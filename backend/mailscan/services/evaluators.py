# Name: evaluators.py
# Description: Evaluator capability, deadline wrapper and signal collection
# Date: 2026-10-06
#
# Every check, synchronous rule or network-backed enrichment, is an object
# with a name and an evaluate(payload) method returning a list of signals or
# an awaitable of one. The scan service only sees this interface, so tests
# can swap any evaluator for a fake.

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Optional, Protocol, Sequence, Union

from mailscan.checks.attachments import attachment_checks
from mailscan.checks.content import content_checks
from mailscan.checks.links import link_checks
from mailscan.checks.sender import sender_checks
from mailscan.checks.urlscan import UrlscanEvaluator
from mailscan.core.config import Settings, get_settings
from mailscan.models.scan import EmailPayload, Signal

logger = logging.getLogger(__name__)

EvaluationResult = Union[list[Signal], Awaitable[list[Signal]]]


class Evaluator(Protocol):
    """Anything that maps a payload to signals, now or eventually."""

    name: str

    def evaluate(self, payload: EmailPayload) -> EvaluationResult:
        ...


class RuleEvaluator:
    """Adapter turning a pure check function into an Evaluator."""

    def __init__(self, name: str, check: Callable[[EmailPayload], list[Signal]]):
        self.name = name
        self.check = check

    def __repr__(self) -> str:
        return f"RuleEvaluator({self.name!r})"

    def evaluate(self, payload: EmailPayload) -> list[Signal]:
        return list(self.check(payload))


# =============================================================================
# DEADLINE
# =============================================================================

def _discard_outcome(task: asyncio.Task) -> None:
    """Consume the result of an abandoned task so asyncio does not warn about it."""
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.debug(f"[Evaluator] Abandoned task finished with error: {error!r}")


class TimeBoundEvaluator:
    """
    Run an asynchronous evaluator under a single deadline.

    The wrapped evaluation races the deadline. If the deadline wins, the
    evaluation task is cancelled and left behind: it is never awaited, its
    late result is discarded, and this evaluator returns an empty list.

    Args:
        inner: The evaluator to bound (usually network-backed)
        timeout: Deadline in seconds for the whole evaluation
    """

    def __init__(self, inner: Evaluator, timeout: float):
        self.inner = inner
        self.timeout = timeout
        self.name = inner.name

    def __repr__(self) -> str:
        return f"TimeBoundEvaluator({self.inner!r}, timeout={self.timeout})"

    async def evaluate(self, payload: EmailPayload) -> list[Signal]:
        outcome = self.inner.evaluate(payload)
        if not inspect.isawaitable(outcome):
            return list(outcome)

        task = asyncio.ensure_future(outcome)
        done, _ = await asyncio.wait({task}, timeout=self.timeout)

        if task not in done:
            task.add_done_callback(_discard_outcome)
            task.cancel()
            logger.info(
                f"[Evaluator] {self.name}: deadline of {self.timeout * 1000:.0f}ms "
                f"elapsed, continuing without it"
            )
            return []

        return list(task.result())


# =============================================================================
# COLLECTION
# =============================================================================

def _signals_from(name: str, outcome) -> list[Signal]:
    """Materialize an evaluator result, dropping anything that is not a Signal."""
    items = list(outcome)
    signals = [item for item in items if isinstance(item, Signal)]
    if len(signals) < len(items):
        logger.warning(f"[Evaluator] {name}: ignored {len(items) - len(signals)} non-signal item(s)")
    return signals


async def collect_signals(
    payload: EmailPayload,
    evaluators: Sequence[Evaluator],
) -> list[Signal]:
    """
    Run all evaluators and concatenate their signals.

    Asynchronous evaluators are scheduled first so their I/O overlaps with
    the synchronous rule checks. A failing evaluator (raised exception or
    failed awaitable) contributes zero signals; the scan carries on.

    Args:
        payload: Normalized email payload
        evaluators: Evaluators in the order their signals should appear

    Returns:
        Raw signals in evaluator order
    """
    results: list[list[Signal]] = [[] for _ in evaluators]
    pending: list[tuple[int, Evaluator, asyncio.Future]] = []

    for index, evaluator in enumerate(evaluators):
        name = getattr(evaluator, "name", repr(evaluator))
        try:
            outcome = evaluator.evaluate(payload)
            if inspect.isawaitable(outcome):
                pending.append((index, evaluator, asyncio.ensure_future(outcome)))
            else:
                results[index] = _signals_from(name, outcome)
        except Exception as e:
            logger.warning(f"[Evaluator] {name} FAILED: {e!r} - treating as no signals")

    for index, evaluator, future in pending:
        name = getattr(evaluator, "name", repr(evaluator))
        try:
            results[index] = _signals_from(name, await future)
        except Exception as e:
            logger.warning(f"[Evaluator] {name} FAILED: {e!r} - treating as no signals")

    return [signal for signals in results for signal in signals]


# =============================================================================
# DEFAULT SET
# =============================================================================

def build_default_evaluators(settings: Optional[Settings] = None) -> list[Evaluator]:
    """
    Build the standard evaluator list.

    Order: sender, content, link, attachment rules, then urlscan.io
    enrichment under the configured deadline when urlscan is enabled.

    Args:
        settings: Settings to read enrichment configuration from

    Returns:
        Ordered list of evaluators
    """
    settings = settings or get_settings()

    evaluators: list[Evaluator] = [
        RuleEvaluator("sender", sender_checks),
        RuleEvaluator("content", content_checks),
        RuleEvaluator("links", link_checks),
        RuleEvaluator("attachments", attachment_checks),
    ]

    if settings.is_urlscan_enabled:
        evaluators.append(
            TimeBoundEvaluator(
                UrlscanEvaluator.from_settings(settings),
                timeout=settings.enrichment_timeout,
            )
        )

    return evaluators


def describe_evaluators(evaluators: Sequence[Evaluator]) -> str:
    return ", ".join(getattr(e, "name", repr(e)) for e in evaluators)
