"""
Disclosure Controller

Show-more / collapse state machine over rendered activity items.

STATES:
=======
SUPPRESSED - items fit under the threshold; both toggles hidden, terminal
COLLAPSED  - items past the threshold hidden; "show more" visible
EXPANDED   - all items visible; "collapse" visible

TRANSITIONS:
============
COLLAPSED --show more--> EXPANDED
EXPANDED  --collapse-->  COLLAPSED (then scroll "show more" back into view)
"""

from __future__ import annotations
from enum import Enum
from typing import Optional, Sequence
import logging

from .dom import Element
from .presentation import HIDDEN_CLASS


logger = logging.getLogger(__name__)


class DisclosureState(Enum):
    SUPPRESSED = "suppressed"
    COLLAPSED = "collapsed"
    EXPANDED = "expanded"


class DisclosureController:
    """
    Owns visibility of items and toggles, not the elements themselves.

    Missing toggles disable the feature silently: `state` stays None.
    """

    def __init__(
        self,
        items: Sequence[Element],
        load_more: Optional[Element],
        collapse: Optional[Element],
        visible_threshold: int = 5,
    ):
        self._items = tuple(items)
        self._load_more = load_more
        self._collapse = collapse
        self._threshold = visible_threshold
        self._state: Optional[DisclosureState] = None
        self._attached = False

    @property
    def state(self) -> Optional[DisclosureState]:
        return self._state

    @property
    def visible_threshold(self) -> int:
        return self._threshold

    def attach(self) -> Optional[DisclosureState]:
        """Apply the initial state and wire click listeners."""
        if self._load_more is None or self._collapse is None:
            logger.debug("Toggle affordances missing, disclosure disabled")
            return None

        if len(self._items) <= self._threshold:
            self._load_more.display = 'none'
            self._collapse.display = 'none'
            self._state = DisclosureState.SUPPRESSED
            return self._state

        self._apply(expanded=False)
        self._load_more.add_event_listener('click', self._on_show_more)
        self._collapse.add_event_listener('click', self._on_collapse)
        self._attached = True
        return self._state

    def detach(self) -> None:
        """Remove listeners; used before the items are re-rendered."""
        if not self._attached:
            return
        self._load_more.remove_event_listener('click', self._on_show_more)
        self._collapse.remove_event_listener('click', self._on_collapse)
        self._attached = False

    def show_more(self) -> DisclosureState:
        if self._state == DisclosureState.COLLAPSED:
            self._apply(expanded=True)
        return self._state

    def collapse(self) -> DisclosureState:
        if self._state == DisclosureState.EXPANDED:
            self._apply(expanded=False)
            self._load_more.scroll_into_view(behavior='smooth', block='center')
        return self._state

    def _on_show_more(self, _element: Element) -> None:
        self.show_more()

    def _on_collapse(self, _element: Element) -> None:
        self.collapse()

    def _apply(self, expanded: bool) -> None:
        for index, item in enumerate(self._items):
            if index < self._threshold:
                continue
            if expanded:
                item.remove_class(HIDDEN_CLASS)
            else:
                item.add_class(HIDDEN_CLASS)

        self._load_more.display = 'none' if expanded else 'block'
        self._collapse.display = 'block' if expanded else 'none'
        self._state = DisclosureState.EXPANDED if expanded else DisclosureState.COLLAPSED
