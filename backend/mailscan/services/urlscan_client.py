# Name: urlscan_client.py
# Description: urlscan.io API wrapper for submitting URLs and reading verdicts
# Date: 2026-10-04
#
# This module only talks to urlscan.io. It does not make security decisions
# or build signals; see mailscan.checks.urlscan for that.

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from mailscan.core.config import Settings, get_settings
from mailscan.core.security import mask_token, safe_log_url
from mailscan.models.scan import ReputationVerdict

logger = logging.getLogger(__name__)


class UrlscanError(Exception):
    """Raised when urlscan.io cannot be reached or returns an unusable answer."""


class UrlscanClient:
    """
    Minimal async client for the urlscan.io v1 API.

    A fresh ``httpx.AsyncClient`` is opened per call so an abandoned
    enrichment task never shares a connection pool with a later scan.

    Args:
        api_key: urlscan.io API key (submit and result both require it)
        visibility: Scan visibility ("public", "unlisted" or "private")
        base_url: API root, e.g. "https://urlscan.io/api/v1"
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport, used to stub the API in tests
    """

    def __init__(
        self,
        api_key: Optional[str],
        visibility: str = "public",
        base_url: str = "https://urlscan.io/api/v1",
        timeout: float = 12.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.visibility = visibility
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "UrlscanClient":
        settings = settings or get_settings()
        return cls(
            api_key=settings.urlscan_api_key,
            visibility=settings.urlscan_visibility,
            base_url=settings.urlscan_base_url,
            timeout=settings.urlscan_request_timeout_ms / 1000,
        )

    def __repr__(self) -> str:
        return f"UrlscanClient(base_url={self.base_url!r}, api_key={mask_token(self.api_key)!r})"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    def _require_key(self) -> str:
        if not self.api_key:
            raise UrlscanError("URLSCAN_API_KEY is not configured")
        return self.api_key

    # =========================================================================
    # SUBMIT
    # =========================================================================

    async def submit(self, url: str) -> str:
        """
        Submit a URL for scanning.

        Args:
            url: The URL to scan

        Returns:
            The scan identifier (uuid)

        Raises:
            UrlscanError: missing key, transport failure, non-2xx status or
                a response without a scan identifier
        """
        api_key = self._require_key()

        async with self._client() as client:
            try:
                response = await client.post(
                    f"{self.base_url}/scan/",
                    json={"url": url, "visibility": self.visibility},
                    headers={"API-Key": api_key},
                )
            except httpx.HTTPError as e:
                raise UrlscanError(f"submit failed: {e}") from e

        if response.status_code // 100 != 2:
            raise UrlscanError(f"submit returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise UrlscanError("submit returned invalid JSON") from e

        scan_id = _scan_id_from(data)
        if not scan_id:
            raise UrlscanError("submit response has no scan id")

        logger.debug(f"[urlscan] Submitted {safe_log_url(url)} -> {scan_id}")
        return scan_id

    # =========================================================================
    # RESULT
    # =========================================================================

    async def fetch_verdict(self, scan_id: str) -> Optional[ReputationVerdict]:
        """
        Fetch the overall verdict for a submitted scan.

        Args:
            scan_id: Identifier returned by submit()

        Returns:
            ReputationVerdict, or None while the scan is still running

        Raises:
            UrlscanError: missing key, transport failure, unexpected status
                or a result document of the wrong shape
        """
        api_key = self._require_key()

        async with self._client() as client:
            try:
                response = await client.get(
                    f"{self.base_url}/result/{scan_id}/",
                    headers={"API-Key": api_key},
                )
            except httpx.HTTPError as e:
                raise UrlscanError(f"result fetch failed: {e}") from e

        # urlscan.io answers 404 until the scan has finished
        if response.status_code == 404:
            return None

        if response.status_code != 200:
            raise UrlscanError(f"result returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise UrlscanError("result returned invalid JSON") from e

        if not isinstance(data, dict):
            raise UrlscanError("result is not a JSON object")

        # Finished scans can still lack verdicts while processing completes
        verdicts = data.get("verdicts")
        if verdicts is None:
            return None
        if not isinstance(verdicts, dict):
            raise UrlscanError(f"result has malformed verdicts ({type(verdicts).__name__})")

        overall = verdicts.get("overall")
        if overall is None:
            return None
        if not isinstance(overall, dict):
            raise UrlscanError(f"result has malformed overall verdict ({type(overall).__name__})")

        try:
            return ReputationVerdict.model_validate(overall)
        except ValidationError as e:
            raise UrlscanError(f"result verdict could not be parsed: {e.error_count()} error(s)") from e


def _scan_id_from(data) -> str:
    """
    Read the scan id from a submit response.

    Usually "uuid"; some responses only carry the "api" result URL, whose
    last path segment is the id.
    """
    if not isinstance(data, dict):
        return ""
    if data.get("uuid"):
        return str(data["uuid"])
    api_url = data.get("api")
    if api_url:
        return str(api_url).rstrip("/").rsplit("/", 1)[-1]
    return ""
