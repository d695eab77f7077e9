# Name: scan_router.py
# Description: Router for the email scan endpoint
# Date: 2026-10-07

import logging
import time

from fastapi import APIRouter

from mailscan.models.scan import EmailPayload, ScanResult
from mailscan.services.scan_service import scan_email

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="",
    tags=["scan"],
)


@router.post("/scan", response_model=ScanResult)
async def scan_endpoint(payload: EmailPayload) -> ScanResult:
    """
    Scan a single email for phishing and malware indicators.

    Accepts the normalized message (sender headers, subject, body text,
    extracted links and attachment metadata) and returns the score,
    verdict, summary and aggregated signals. Missing or wrong-typed fields
    are treated as empty.
    """
    # Log request entry
    start_time = time.perf_counter()
    logger.info(
        f"[REQUEST] message={payload.message_id or '-'} "
        f"links={len(payload.links)} attachments={len(payload.attachments)}"
    )

    # Process request
    result = await scan_email(payload)

    # Log response
    elapsed_ms = (time.perf_counter() - start_time) * 1000
    logger.info(
        f"[RESPONSE] message={payload.message_id or '-'} "
        f"verdict={result.verdict.value} score={result.score} "
        f"signals={len(result.signals)} elapsed={elapsed_ms:.0f}ms"
    )

    return result
