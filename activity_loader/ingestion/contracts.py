"""
Activity Ingestion Contracts

Immutable data structures for the activity acquisition pipeline.

BOUNDARY: Ingestion Layer
All activity data enters through these contracts.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple, Union
from datetime import date, datetime
from enum import Enum

from ..errors import ErrorCode


DateValue = Union[str, date, datetime, None]


# =============================================================================
# ENUMS
# =============================================================================

class SourceKind(Enum):
    """Role of a data source."""
    STATIC_SNAPSHOT = "static"      # Pre-generated file, fast
    LIVE_FALLBACK = "live"          # Spreadsheet-backed API, fresh but slow


class FetchStatus(Enum):
    """Status of a fetch attempt."""
    SUCCESS = "success"
    TIMEOUT = "timeout"
    HTTP_ERROR = "http_error"
    PARSE_ERROR = "parse_error"            # Body is not decodable JSON
    INVALID_PAYLOAD = "invalid_payload"    # Valid JSON, but not an array
    NETWORK_ERROR = "network_error"


# Statuses where the request (or decoding its body) raised.
TRANSPORT_FAILURES = frozenset({
    FetchStatus.TIMEOUT,
    FetchStatus.PARSE_ERROR,
    FetchStatus.NETWORK_ERROR,
})


# =============================================================================
# SOURCE CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class ActivitySource:
    """A single data source for activity records."""
    source_id: str
    name: str
    url: str
    kind: SourceKind

    def __hash__(self):
        return hash(self.source_id)


# =============================================================================
# RECORD CONTRACTS
# =============================================================================

@dataclass(frozen=True)
class ActivityRecord:
    """
    One activity entry.

    No identifier: records are never deduplicated.
    A record without a date is kept and rendered with an empty date label.
    """
    date: DateValue
    title: str
    content: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'ActivityRecord':
        """Build from a decoded JSON object, tolerating missing fields."""
        raw_date = data.get('date')
        if raw_date is not None and not isinstance(raw_date, (str, date)):
            raw_date = str(raw_date)
        return cls(
            date=raw_date if raw_date != '' else None,
            title=_as_text(data.get('title')),
            content=_as_text(data.get('content')),
        )


def _as_text(value: Any) -> str:
    if value is None:
        return ''
    return value if isinstance(value, str) else str(value)


# =============================================================================
# ATTEMPT CONTRACTS
# =============================================================================

@dataclass(frozen=True)
class SourceAttempt:
    """
    Tagged outcome of querying one source.

    SUCCESS carries records; every other status is an unavailable source
    whose reason is `error_message`. Failed fetches are results, not
    exceptions.
    """
    source_id: str
    url: str
    status: FetchStatus
    attempted_at: datetime
    completed_at: datetime
    records: Tuple[ActivityRecord, ...] = field(default_factory=tuple)
    http_status: Optional[int] = None
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == FetchStatus.SUCCESS

    @property
    def usable(self) -> bool:
        """Empty-but-ok counts as unusable."""
        return self.success and len(self.records) > 0

    @property
    def is_transport_failure(self) -> bool:
        return self.status in TRANSPORT_FAILURES

    @property
    def duration_ms(self) -> float:
        return (self.completed_at - self.attempted_at).total_seconds() * 1000


@dataclass(frozen=True)
class ResolveOutcome:
    """
    Result of resolving across all sources.

    Either `records` is non-empty and `error_code` is None,
    or `error_code` is set and `records` is empty.
    """
    records: Tuple[ActivityRecord, ...]
    error_code: Optional[ErrorCode]
    attempts: Tuple[SourceAttempt, ...]
    source_id: Optional[str] = None
    diagnostic: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error_code is None

    @classmethod
    def resolved(cls, attempt: SourceAttempt, attempts: Tuple[SourceAttempt, ...]) -> 'ResolveOutcome':
        return cls(
            records=attempt.records,
            error_code=None,
            attempts=attempts,
            source_id=attempt.source_id,
        )

    @classmethod
    def failed(
        cls,
        error_code: ErrorCode,
        diagnostic: str,
        attempts: Tuple[SourceAttempt, ...] = ()
    ) -> 'ResolveOutcome':
        return cls(
            records=(),
            error_code=error_code,
            attempts=attempts,
            diagnostic=diagnostic,
        )
