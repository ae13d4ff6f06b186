"""
Loader Configuration

Loads data source and page settings from config/activity_loader.json.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Tuple
from pathlib import Path
import json
import os

from .errors import ConfigError
from .ingestion.contracts import ActivitySource, SourceKind


CONFIG_ENV_VAR = "ACTIVITY_LOADER_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / 'config' / 'activity_loader.json'

STATIC_JSON_URL = 'data/activities.json'
FALLBACK_API_URL = (
    'https://script.google.com/macros/s/'
    'AKfycbwTgLX_4AYsiQwVuROAEEG0Y5bxrqsUYJJ8lpP7c6KO4c52oXesF5r66FmBKfA2GfUJNw/exec'
)

DEFAULT_VISIBLE_THRESHOLD = 5
DEFAULT_TIMEOUT_SECONDS = 30.0

CONTAINER_SELECTOR = '.activity-container'
LOAD_MORE_ID = 'load-more-container'
COLLAPSE_ID = 'collapse-container'


def default_sources() -> Tuple[ActivitySource, ...]:
    return (
        ActivitySource(
            source_id='static_snapshot',
            name='Static JSON snapshot',
            url=STATIC_JSON_URL,
            kind=SourceKind.STATIC_SNAPSHOT,
        ),
        ActivitySource(
            source_id='spreadsheet_api',
            name='Spreadsheet API',
            url=FALLBACK_API_URL,
            kind=SourceKind.LIVE_FALLBACK,
        ),
    )


@dataclass(frozen=True)
class LoaderConfig:
    """
    Configuration for one page context.

    Sources are listed in priority order.
    `timeout_seconds=None` disables the request timeout.
    """
    sources: Tuple[ActivitySource, ...] = field(default_factory=default_sources)
    base_url: Optional[str] = None
    timeout_seconds: Optional[float] = DEFAULT_TIMEOUT_SECONDS
    visible_threshold: int = DEFAULT_VISIBLE_THRESHOLD
    container_selector: str = CONTAINER_SELECTOR
    load_more_id: str = LOAD_MORE_ID
    collapse_id: str = COLLAPSE_ID
    user_agent: str = "ActivityLoader/1.0"

    def __post_init__(self):
        if self.visible_threshold < 0:
            raise ConfigError(f"visible_threshold must be >= 0, got {self.visible_threshold}")

    @property
    def is_complete(self) -> bool:
        """True when every source has a URL to request."""
        return bool(self.sources) and all(s.url for s in self.sources)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'LoaderConfig':
        """
        Load config from JSON.

        Resolution order: explicit path, $ACTIVITY_LOADER_CONFIG,
        config/activity_loader.json. Missing default file means defaults.
        """
        explicit = config_path is not None
        if config_path is None and os.environ.get(CONFIG_ENV_VAR):
            config_path = Path(os.environ[CONFIG_ENV_VAR])
            explicit = True
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if explicit:
                raise ConfigError(f"Config file not found: {config_path}")
            return cls()

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot read config {config_path}: {e}") from e

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'LoaderConfig':
        if not isinstance(data, dict):
            raise ConfigError("Config root must be a JSON object")

        kwargs = {}

        if 'sources' in data:
            sources = []
            for source_data in data['sources']:
                try:
                    kind = SourceKind(source_data.get('kind', SourceKind.LIVE_FALLBACK.value))
                except ValueError as e:
                    raise ConfigError(f"Unknown source kind: {source_data.get('kind')}") from e
                try:
                    source_id = source_data['id']
                except KeyError as e:
                    raise ConfigError("Every source needs an 'id'") from e
                sources.append(ActivitySource(
                    source_id=source_id,
                    name=source_data.get('name', source_id),
                    url=source_data.get('url') or '',
                    kind=kind,
                ))
            kwargs['sources'] = tuple(sources)

        page = data.get('page', {})
        for key, attr in (
            ('container_selector', 'container_selector'),
            ('load_more_id', 'load_more_id'),
            ('collapse_id', 'collapse_id'),
        ):
            if key in page:
                kwargs[attr] = page[key]

        for key in ('base_url', 'timeout_seconds', 'visible_threshold', 'user_agent'):
            if key in data:
                kwargs[key] = data[key]

        return cls(**kwargs)
