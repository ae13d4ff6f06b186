"""
Source Resolver

Tries activity sources in priority order and keeps the first usable result.

FALLBACK POLICY:
================
1. Sources are attempted strictly one after another, never concurrently
2. The first attempt with at least one record wins; later sources are skipped
3. Failure of a non-last source is logged and superseded by the next source
4. Transport failure of the last source -> NETWORK_ERROR
5. Nothing usable anywhere -> EMPTY_DATA
"""

from __future__ import annotations
from typing import List, Sequence
import logging

from ..errors import ErrorCode
from .contracts import ActivitySource, ResolveOutcome, SourceAttempt
from .fetcher import ActivityFetcher


logger = logging.getLogger(__name__)


class SourceResolver:
    """Resolves activity records from an ordered list of sources."""

    def __init__(self, sources: Sequence[ActivitySource], fetcher: ActivityFetcher):
        self._sources = tuple(sources)
        self._fetcher = fetcher

    async def resolve(self) -> ResolveOutcome:
        """
        Resolve records. Never raises for source failures.

        Returns an outcome carrying either records or an error code.
        """
        if not self._sources or any(not s.url for s in self._sources):
            return ResolveOutcome.failed(
                ErrorCode.CONFIG_NOT_SET,
                "No activity sources configured" if not self._sources
                else "Activity source URL is not set",
            )

        attempts: List[SourceAttempt] = []
        last_index = len(self._sources) - 1

        for index, source in enumerate(self._sources):
            attempt = await self._fetcher.fetch(source)
            attempts.append(attempt)

            if attempt.usable:
                logger.info(
                    "Loaded %d activities from %s in %.0f ms",
                    len(attempt.records), source.source_id, attempt.duration_ms,
                )
                return ResolveOutcome.resolved(attempt, tuple(attempts))

            if index < last_index:
                logger.warning(
                    "Source %s unusable after %.0f ms (%s), trying next source",
                    source.source_id, attempt.duration_ms, _describe(attempt),
                )
                continue

            if attempt.is_transport_failure:
                return ResolveOutcome.failed(
                    ErrorCode.NETWORK_ERROR,
                    f"Fetch failed for {source.source_id}: {attempt.error_message}",
                    tuple(attempts),
                )

        return ResolveOutcome.failed(
            ErrorCode.EMPTY_DATA,
            "No source returned activities ("
            + ", ".join(f"{a.source_id}: {_describe(a)}" for a in attempts) + ")",
            tuple(attempts),
        )


def _describe(attempt: SourceAttempt) -> str:
    if attempt.success:
        return "empty"
    return attempt.error_message or attempt.status.value
