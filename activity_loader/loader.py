"""
Activity Loader

Entry point tying ingestion, presentation and disclosure together.

USAGE:
======
```python
page = Document.from_markup(markup)
loader = create_loader(page, LoaderConfig.load())
report = asyncio.run(loader.initialize())
```

`reload()` may be called again at any time (e.g. from a refresh button).
Calls are not serialized: if two overlap, the one finishing last wins.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple
import logging

from .config import LoaderConfig
from .errors import ErrorCode, LoaderError
from .ingestion import ActivityFetcher, SourceResolver
from .frontend.dom import Document, Element
from .frontend.presentation import ActivityRenderer, build_items
from .frontend.disclosure import DisclosureController, DisclosureState


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadReport:
    """What a single load did to the page."""
    error_code: Optional[ErrorCode]
    item_count: int = 0
    source_id: Optional[str] = None
    disclosure_state: Optional[DisclosureState] = None

    @property
    def success(self) -> bool:
        return self.error_code is None


class ActivityLoader:
    """
    One loader per page context.

    Dependencies are injected so the pipeline runs without a live page
    or network.
    """

    def __init__(
        self,
        page: Document,
        resolver: SourceResolver,
        config: Optional[LoaderConfig] = None,
        renderer: Optional[ActivityRenderer] = None,
    ):
        self._page = page
        self._resolver = resolver
        self._config = config or LoaderConfig()
        self._renderer = renderer or ActivityRenderer()
        self._disclosure: Optional[DisclosureController] = None
        self._load_more: Optional[Element] = None
        self._collapse: Optional[Element] = None

    @property
    def disclosure(self) -> Optional[DisclosureController]:
        return self._disclosure

    async def initialize(self) -> LoadReport:
        """First load for this page context."""
        return await self.reload()

    async def reload(self) -> LoadReport:
        """Fetch, render and wire disclosure. Never raises for source failures."""
        container = self._page.query_selector(self._config.container_selector)
        if container is None:
            LoaderError(
                ErrorCode.CONTAINER_NOT_FOUND,
                f"{self._config.container_selector} not found",
            ).log()
            return LoadReport(error_code=ErrorCode.CONTAINER_NOT_FOUND)

        affordances = self._locate_affordances()
        self._renderer.render_loading(container)

        outcome = await self._resolver.resolve()

        if not outcome.success:
            LoaderError(outcome.error_code, outcome.diagnostic or '').log()
            self._release_disclosure()
            self._renderer.render_error(container, outcome.error_code, affordances)
            return LoadReport(error_code=outcome.error_code, source_id=outcome.source_id)

        items = build_items(outcome.records, self._config.visible_threshold)
        elements = self._renderer.render_items(container, items, affordances)

        self._release_disclosure()
        self._disclosure = DisclosureController(
            elements,
            load_more=self._load_more,
            collapse=self._collapse,
            visible_threshold=self._config.visible_threshold,
        )
        state = self._disclosure.attach()

        return LoadReport(
            error_code=None,
            item_count=len(elements),
            source_id=outcome.source_id,
            disclosure_state=state,
        )

    def _locate_affordances(self) -> Tuple[Optional[Element], Optional[Element]]:
        # Earlier references stand in while an overlapping reload has them detached.
        self._load_more = self._page.get_element_by_id(self._config.load_more_id) or self._load_more
        self._collapse = self._page.get_element_by_id(self._config.collapse_id) or self._collapse
        return self._load_more, self._collapse

    def _release_disclosure(self) -> None:
        if self._disclosure is not None:
            self._disclosure.detach()
            self._disclosure = None


def create_resolver(config: LoaderConfig) -> SourceResolver:
    """Wire an HTTP fetcher and resolver from config."""
    fetcher = ActivityFetcher(
        base_url=config.base_url,
        timeout=config.timeout_seconds,
        user_agent=config.user_agent,
    )
    return SourceResolver(config.sources, fetcher)


def create_loader(page: Document, config: Optional[LoaderConfig] = None) -> ActivityLoader:
    config = config or LoaderConfig()
    return ActivityLoader(page, create_resolver(config), config)
