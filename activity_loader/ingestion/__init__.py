"""
Activity Ingestion Layer

RESPONSIBILITY: Acquire activity records from the first usable source
OUTPUTS: ResolveOutcome (records or an error code, never an exception)

WHAT THIS LAYER MUST NOT DO:
============================
- Touch the page
- Retry a source
- Query sources concurrently
"""

from .contracts import (
    SourceKind, FetchStatus, ActivitySource, ActivityRecord,
    SourceAttempt, ResolveOutcome,
)
from .fetcher import ActivityFetcher, PayloadError, PayloadShapeError, parse_activities
from .resolver import SourceResolver

__all__ = [
    'SourceKind', 'FetchStatus', 'ActivitySource', 'ActivityRecord',
    'SourceAttempt', 'ResolveOutcome',
    'ActivityFetcher', 'PayloadError', 'PayloadShapeError', 'parse_activities',
    'SourceResolver',
]
