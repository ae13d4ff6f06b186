"""
Disclosure State Machine Tests

SUPPRESSED (<= threshold), COLLAPSED <-> EXPANDED (> threshold).
Missing toggles disable the feature without error.
"""

import pytest

from activity_loader.frontend import (
    DisclosureController, DisclosureState, Element, HIDDEN_CLASS, ScrollRequest,
)


def make_items(count, threshold=5):
    items = []
    for i in range(count):
        item = Element("div", class_name="activity-item")
        if i >= threshold:
            item.add_class(HIDDEN_CLASS)
        items.append(item)
    return items


def hidden_flags(items):
    return [item.has_class(HIDDEN_CLASS) for item in items]


@pytest.fixture
def load_more():
    return Element("div", element_id="load-more-container")


@pytest.fixture
def collapse():
    return Element("div", element_id="collapse-container")


class TestSuppressed:

    @pytest.mark.parametrize("count", [0, 1, 5])
    def test_toggles_hidden_at_or_below_threshold(self, load_more, collapse, count):
        controller = DisclosureController(make_items(count), load_more, collapse, visible_threshold=5)

        assert controller.attach() == DisclosureState.SUPPRESSED
        assert load_more.display == "none"
        assert collapse.display == "none"

    def test_no_transitions_from_suppressed(self, load_more, collapse):
        controller = DisclosureController(make_items(3), load_more, collapse)
        controller.attach()

        load_more.click()
        collapse.click()

        assert controller.show_more() == DisclosureState.SUPPRESSED
        assert controller.state == DisclosureState.SUPPRESSED
        assert load_more.display == "none"
        assert collapse.display == "none"
        assert load_more.listener_count("click") == 0


class TestCollapsedExpanded:

    @pytest.fixture
    def wired(self, load_more, collapse):
        items = make_items(7)
        controller = DisclosureController(items, load_more, collapse, visible_threshold=5)
        controller.attach()
        return controller, items

    def test_initial_state_collapsed(self, wired, load_more, collapse):
        controller, items = wired

        assert controller.state == DisclosureState.COLLAPSED
        assert hidden_flags(items) == [False] * 5 + [True] * 2
        assert load_more.display == "block"
        assert collapse.display == "none"

    def test_show_more_click_expands(self, wired, load_more, collapse):
        controller, items = wired
        load_more.click()

        assert controller.state == DisclosureState.EXPANDED
        assert hidden_flags(items) == [False] * 7
        assert load_more.display == "none"
        assert collapse.display == "block"

    def test_collapse_click_rehides_and_scrolls(self, wired, load_more, collapse):
        controller, items = wired
        load_more.click()
        collapse.click()

        assert controller.state == DisclosureState.COLLAPSED
        assert hidden_flags(items) == [False] * 5 + [True] * 2
        assert load_more.display == "block"
        assert collapse.display == "none"
        assert load_more.scroll_requests == [ScrollRequest(behavior="smooth", block="center")]

    def test_collapse_while_collapsed_is_noop(self, wired, load_more):
        controller, _ = wired
        controller.collapse()

        assert controller.state == DisclosureState.COLLAPSED
        assert load_more.scroll_requests == []

    def test_detach_removes_listeners(self, wired, load_more, collapse):
        controller, _ = wired
        controller.detach()
        load_more.click()

        assert controller.state == DisclosureState.COLLAPSED
        assert load_more.listener_count("click") == 0
        assert collapse.listener_count("click") == 0


class TestMissingToggles:

    @pytest.mark.parametrize("present", ["load_more", "collapse", None])
    def test_feature_disabled(self, load_more, collapse, present):
        items = make_items(8)
        controller = DisclosureController(
            items,
            load_more if present == "load_more" else None,
            collapse if present == "collapse" else None,
        )

        assert controller.attach() is None
        assert controller.state is None
        assert controller.show_more() is None
        assert hidden_flags(items) == [False] * 5 + [True] * 3
