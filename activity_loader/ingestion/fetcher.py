"""
Activity Fetcher

Fetches one activity source and parses its JSON body.

PRINCIPLES:
===========
1. Failed fetches are first-class results
2. One attempt per call - no retries
3. Body must be a JSON array; non-object entries are dropped
"""

from __future__ import annotations
from typing import List, Optional
from datetime import datetime, timezone
import json
import logging

import httpx

from .contracts import (
    ActivitySource, ActivityRecord, SourceAttempt, FetchStatus
)


logger = logging.getLogger(__name__)


class PayloadError(ValueError):
    """Response body is not decodable JSON."""


class PayloadShapeError(PayloadError):
    """Response body is valid JSON but not an array."""


def parse_activities(raw_bytes: bytes) -> List[ActivityRecord]:
    """
    Decode a response body into records.

    Entries that are not objects are skipped with a warning.
    """
    try:
        payload = json.loads(raw_bytes)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise PayloadError(f"Invalid JSON: {e}") from e

    if not isinstance(payload, list):
        raise PayloadShapeError(f"Expected JSON array, got {type(payload).__name__}")

    records = []
    for index, entry in enumerate(payload):
        if not isinstance(entry, dict):
            logger.warning("Skipping entry %d: %s, expected object", index, type(entry).__name__)
            continue
        records.append(ActivityRecord.from_mapping(entry))
    return records


class ActivityFetcher:
    """
    Fetches activity sources over HTTP.

    GUARANTEES:
    ===========
    1. `fetch` never raises for transport, HTTP or payload failures
    2. Relative source URLs are joined onto `base_url`
    3. A fresh client per fetch; nothing is cached between calls
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = 30.0,
        user_agent: str = "ActivityLoader/1.0",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url or ""
        self._timeout = timeout
        self._user_agent = user_agent
        self._transport = transport

    async def fetch(self, source: ActivitySource) -> SourceAttempt:
        """Fetch a source once and classify the outcome."""
        attempted_at = _now()

        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(
                    source.url,
                    headers={'User-Agent': self._user_agent},
                    follow_redirects=True,
                )
                raw_bytes = await response.aread()

        except httpx.TimeoutException as e:
            return self._failure(source, attempted_at, FetchStatus.TIMEOUT, f"Request timed out: {e}")

        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return self._failure(source, attempted_at, FetchStatus.NETWORK_ERROR, f"{type(e).__name__}: {e}")

        completed_at = _now()

        if not response.is_success:
            return SourceAttempt(
                source_id=source.source_id,
                url=source.url,
                status=FetchStatus.HTTP_ERROR,
                attempted_at=attempted_at,
                completed_at=completed_at,
                http_status=response.status_code,
                error_message=f"HTTP {response.status_code}",
            )

        try:
            records = parse_activities(raw_bytes)
        except PayloadError as e:
            status = FetchStatus.INVALID_PAYLOAD if isinstance(e, PayloadShapeError) else FetchStatus.PARSE_ERROR
            return SourceAttempt(
                source_id=source.source_id,
                url=source.url,
                status=status,
                attempted_at=attempted_at,
                completed_at=completed_at,
                http_status=response.status_code,
                error_message=str(e),
            )

        logger.debug("Fetched %d records from %s", len(records), source.source_id)
        return SourceAttempt(
            source_id=source.source_id,
            url=source.url,
            status=FetchStatus.SUCCESS,
            attempted_at=attempted_at,
            completed_at=completed_at,
            records=tuple(records),
            http_status=response.status_code,
        )

    def _failure(
        self,
        source: ActivitySource,
        attempted_at: datetime,
        status: FetchStatus,
        message: str
    ) -> SourceAttempt:
        return SourceAttempt(
            source_id=source.source_id,
            url=source.url,
            status=status,
            attempted_at=attempted_at,
            completed_at=_now(),
            error_message=message,
        )


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)
