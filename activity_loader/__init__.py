"""
Activity Loader Package

Loads activity records from a static snapshot with a live fallback,
renders them newest-first into a page container, and manages the
show-more / collapse control.

DIRECTION OF DEPENDENCY:
========================
loader → frontend → ingestion → errors
"""

from .errors import ErrorCode, LoaderError, ConfigError
from .config import LoaderConfig
from .ingestion import (
    ActivityRecord, ActivitySource, ActivityFetcher, SourceResolver,
    SourceAttempt, ResolveOutcome, FetchStatus, SourceKind,
)
from .frontend import Document, Element, DisclosureController, DisclosureState
from .loader import ActivityLoader, LoadReport, create_loader, create_resolver

__version__ = "1.0.0"

__all__ = [
    'ErrorCode', 'LoaderError', 'ConfigError',
    'LoaderConfig',
    'ActivityRecord', 'ActivitySource', 'ActivityFetcher', 'SourceResolver',
    'SourceAttempt', 'ResolveOutcome', 'FetchStatus', 'SourceKind',
    'Document', 'Element', 'DisclosureController', 'DisclosureState',
    'ActivityLoader', 'LoadReport', 'create_loader', 'create_resolver',
]
