"""
app/connectors/summary_connector.py

Pulls the raw row summary (``GET /api/hmis/summary``) from a remote HMIS
backend.

Fetch policy
------------
- Transport failures (timeouts, refused connections), ``429`` and ``5xx``
  responses, and bodies that are not JSON at all (gateway error pages) are
  transient: the fetch is repeated with exponential backoff, honouring a
  numeric ``Retry-After`` header when the server sends one.
- Any other error status, or JSON that is not an array, means the remote is
  not serving a row summary; the fetch fails at once.
- Array entries that are not objects are dropped; rows are otherwise
  returned unchanged for downstream normalisation.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

import requests

from app.config import ExternalHTTPSettings
from app.domain.hmis_record import RawRow

logger = logging.getLogger(__name__)

TRANSIENT_STATUS_CODES = frozenset({429, 500, 502, 503, 504})
MAX_RETRY_AFTER_SECONDS = 60.0


class ConnectorRequestError(RuntimeError):
    """
    Raised when the remote summary cannot be fetched or is not a row array.
    """


class _TransientFetchError(Exception):
    def __init__(self, reason: str, *, retry_after: float | None = None) -> None:
        super().__init__(reason)
        self.retry_after = retry_after


def _retry_after_seconds(response: requests.Response) -> float | None:
    header = response.headers.get("Retry-After")
    if not header:
        return None
    try:
        seconds = float(header)
    except ValueError:
        return None
    return min(max(seconds, 0.0), MAX_RETRY_AFTER_SECONDS)


class HMISSummaryConnector:
    """
    Fetches the JSON array of raw rows served by another HMIS instance.
    """

    source = "hmis_summary"

    def __init__(
        self,
        *,
        url: str,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._url = url
        self._session = session or requests.Session()
        self._timeout_seconds = http_settings.timeout_seconds
        self._max_retries = http_settings.max_retries
        self._backoff_initial_seconds = http_settings.backoff_initial_seconds
        self._backoff_multiplier = http_settings.backoff_multiplier
        self._sleep = sleep

    @property
    def url(self) -> str:
        return self._url

    def close(self) -> None:
        self._session.close()

    def fetch_rows(self) -> list[RawRow]:
        payload = self._fetch_payload()
        if not isinstance(payload, list):
            logger.error(
                "Summary payload is not a row array url=%s type=%s",
                self._url,
                type(payload).__name__,
            )
            raise ConnectorRequestError(
                f"Summary at {self._url} returned a JSON {type(payload).__name__}, not a row array."
            )

        rows = [row for row in payload if isinstance(row, dict)]
        logger.info(
            "Summary fetched url=%s rows=%d skipped=%d",
            self._url,
            len(rows),
            len(payload) - len(rows),
        )
        return rows

    # ------------------------------------------------------------------
    # Fetch with backoff
    # ------------------------------------------------------------------

    def backoff_seconds(self, retry_number: int) -> float:
        """
        Delay before the ``retry_number``-th retry (1-based).
        """

        return self._backoff_initial_seconds * (self._backoff_multiplier ** (retry_number - 1))

    def _fetch_payload(self) -> Any:
        attempts = self._max_retries + 1
        failure: _TransientFetchError | None = None
        for attempt in range(1, attempts + 1):
            try:
                return self._fetch_once()
            except _TransientFetchError as exc:
                failure = exc

            if attempt == attempts:
                break
            wait_seconds = failure.retry_after
            if wait_seconds is None:
                wait_seconds = self.backoff_seconds(attempt)
            logger.warning(
                "Summary fetch failed url=%s attempt=%d/%d reason=%s; retrying in %.2fs",
                self._url,
                attempt,
                attempts,
                failure,
                wait_seconds,
            )
            self._sleep(wait_seconds)

        logger.error("Summary fetch gave up url=%s attempts=%d reason=%s", self._url, attempts, failure)
        raise ConnectorRequestError(
            f"Summary at {self._url} unavailable after {attempts} attempts: {failure}"
        ) from failure

    def _fetch_once(self) -> Any:
        try:
            response = self._session.request(
                method="GET",
                url=self._url,
                headers={"Accept": "application/json"},
                timeout=self._timeout_seconds,
            )
        except (requests.Timeout, requests.ConnectionError) as exc:
            raise _TransientFetchError(f"{type(exc).__name__}: {exc}") from exc

        status = response.status_code
        if status in TRANSIENT_STATUS_CODES:
            raise _TransientFetchError(f"HTTP {status}", retry_after=_retry_after_seconds(response))
        if status >= 400:
            logger.error("Summary fetch rejected url=%s status=%d", self._url, status)
            raise ConnectorRequestError(f"Summary at {self._url} answered HTTP {status}.")

        try:
            return response.json()
        except ValueError as exc:
            raise _TransientFetchError("response body is not JSON") from exc
