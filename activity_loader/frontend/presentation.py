"""
Presentation Builder

Deterministic transformation of activity records into renderable items.
Input: ActivityRecord sequence -> Output: RenderedItem tuple (sorted, escaped)

ORDERING:
=========
Most recent date first. `sorted` is stable, so records with equal dates keep
their source order. Missing or unparseable dates sort last, in source order.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple
from datetime import date, datetime, timezone, tzinfo
from email.utils import parsedate_to_datetime
import re

from ..errors import ErrorCode, USER_ERROR_MESSAGE, USER_ERROR_CODE_LABEL
from ..ingestion.contracts import ActivityRecord, DateValue
from .dom import Element


ITEM_CLASS = 'activity-item'
HIDDEN_CLASS = 'hidden-activity'
LOADING_MESSAGE = 'Loading...'

_SLASH_OR_DOT_DATE = re.compile(r'^(\d{4})[/.](\d{1,2})[/.](\d{1,2})$')


# =============================================================================
# DATES
# =============================================================================

def parse_date(value: DateValue) -> Optional[datetime]:
    """
    Parse a record date into a naive UTC datetime.

    Returns None for missing or unparseable values.
    """
    if value is None or value == '':
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        parsed = _parse_date_text(value.strip())
        if parsed is None:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _parse_date_text(text: str) -> Optional[datetime]:
    # ISO 8601
    try:
        return datetime.fromisoformat(re.sub(r'[Zz]$', '+00:00', text))
    except ValueError:
        pass

    # RFC 2822
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        pass

    # 2025/01/31, 2025.01.31
    match = _SLASH_OR_DOT_DATE.match(text)
    if match:
        try:
            return datetime(*(int(part) for part in match.groups()))
        except ValueError:
            return None

    return None


def format_date(value: DateValue, tz: Optional[tzinfo] = None) -> str:
    """
    Format as YYYY.MM.DD; raw text if unparseable, '' if missing.

    Offset-aware values are converted to `tz` first (local time when None).
    Naive values are labelled as written.
    """
    if value is None or value == '':
        return ''

    if isinstance(value, str):
        parsed = _parse_date_text(value.strip())
        if parsed is None:
            return value
    elif isinstance(value, date):
        parsed = value
    else:
        return str(value)

    if isinstance(parsed, datetime) and parsed.tzinfo is not None:
        parsed = parsed.astimezone(tz)
    return parsed.strftime('%Y.%m.%d')


def sort_records(records: Iterable[ActivityRecord]) -> Tuple[ActivityRecord, ...]:
    """Sort by date descending; undated records last. Stable."""
    keyed = [(parse_date(r.date), r) for r in records]
    dated = [pair for pair in keyed if pair[0] is not None]
    undated = [r for parsed, r in keyed if parsed is None]
    dated = sorted(dated, key=lambda pair: pair[0], reverse=True)
    return tuple(r for _, r in dated) + tuple(undated)


# =============================================================================
# RENDERED ITEMS
# =============================================================================

@dataclass(frozen=True)
class RenderedItem:
    """An activity ready for rendering. Text fields are unescaped source text."""
    position: int
    date_label: str
    title: str
    content: str
    visible: bool

    def to_element(self) -> Element:
        item = Element('div', class_name=ITEM_CLASS)
        if not self.visible:
            item.add_class(HIDDEN_CLASS)

        item.append_child(Element('span', class_name='activity-date', text=self.date_label))
        body = item.append_child(Element('div', class_name='activity-content'))
        body.append_child(Element('h4', text=self.title))
        body.append_child(Element('p', text=self.content))
        return item


def build_items(
    records: Iterable[ActivityRecord],
    visible_threshold: int = 5,
    tz: Optional[tzinfo] = None
) -> Tuple[RenderedItem, ...]:
    """Sort records and mark items at or beyond the threshold hidden."""
    return tuple(
        RenderedItem(
            position=position,
            date_label=format_date(record.date, tz),
            title=record.title,
            content=record.content,
            visible=position < visible_threshold,
        )
        for position, record in enumerate(sort_records(records))
    )


# =============================================================================
# RENDERER
# =============================================================================

class ActivityRenderer:
    """
    Writes loading, item and error views into the container.

    Toggle affordances are re-appended after every render so they stay
    the container's last children.
    """

    def render_loading(self, container: Element) -> None:
        container.clear()
        loading = container.append_child(Element('div', class_name='activity-loading'))
        loading.append_child(Element('p', text=LOADING_MESSAGE))

    def render_items(
        self,
        container: Element,
        items: Sequence[RenderedItem],
        affordances: Sequence[Optional[Element]] = ()
    ) -> Tuple[Element, ...]:
        """Replace container content with item elements. Returns them in order."""
        container.clear()
        elements = tuple(container.append_child(item.to_element()) for item in items)
        self._append_affordances(container, affordances)
        return elements

    def render_error(
        self,
        container: Element,
        error_code: ErrorCode,
        affordances: Sequence[Optional[Element]] = ()
    ) -> None:
        """Generic message plus code only. Diagnostics belong in the log."""
        container.clear()
        error = container.append_child(Element('div', class_name='activity-error'))
        error.append_child(Element('p', text=USER_ERROR_MESSAGE))
        error.append_child(Element(
            'p', class_name='activity-error-code',
            text=f"{USER_ERROR_CODE_LABEL}: {error_code.code}",
        ))
        self._append_affordances(container, affordances)

    def _append_affordances(self, container: Element, affordances: Sequence[Optional[Element]]) -> None:
        for affordance in affordances:
            if affordance is not None:
                container.append_child(affordance)
