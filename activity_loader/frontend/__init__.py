"""
Frontend Layer

Responsibility:
Render resolved activities into the page and manage progressive disclosure.

PRINCIPLES:
1. Source text is never interpreted as markup
2. No fetching - records arrive from the ingestion layer
3. Toggles stay the container's last children
"""

from .dom import Document, Element, RawText, ScrollRequest
from .presentation import (
    ActivityRenderer, RenderedItem, build_items, format_date, parse_date,
    sort_records, ITEM_CLASS, HIDDEN_CLASS,
)
from .disclosure import DisclosureController, DisclosureState

__all__ = [
    'Document', 'Element', 'RawText', 'ScrollRequest',
    'ActivityRenderer', 'RenderedItem', 'build_items', 'format_date', 'parse_date',
    'sort_records', 'ITEM_CLASS', 'HIDDEN_CLASS',
    'DisclosureController', 'DisclosureState',
]
