"""Tests for SelectionTracker."""

import pytest

from coinboard.client.selection import SelectionTracker
from coinboard.errors import NotFound


class TestSelectionTracker:
    """Unit tests for the comparison selection state machine."""

    def test_toggle_adds_then_removes(self, listing):
        tracker = SelectionTracker(listing)
        assert tracker.toggle(1) is True
        assert 1 in tracker
        assert tracker.toggle(1) is False
        assert 1 not in tracker

    def test_toggle_is_its_own_inverse(self, listing):
        tracker = SelectionTracker(listing)
        tracker.toggle(1027)
        before = set(tracker.members())

        tracker.toggle(74)
        tracker.toggle(74)
        assert set(tracker.members()) == before

        tracker.toggle(1027)
        tracker.toggle(1027)
        assert set(tracker.members()) == before

    def test_toggle_unknown_id_raises(self, listing):
        tracker = SelectionTracker(listing)
        with pytest.raises(NotFound):
            tracker.toggle(999)
        assert len(tracker) == 0

    def test_members_follow_listing_order(self, listing):
        """Order comes from the listing, not from insertion."""
        tracker = SelectionTracker(listing)
        tracker.toggle(74)
        tracker.toggle(1)
        tracker.toggle(1027)
        assert tracker.members() == [1, 1027, 74]

    def test_render_tags_in_listing_order(self, listing):
        tracker = SelectionTracker(listing)
        tracker.toggle(74)
        tracker.toggle(1)

        tags = tracker.render()
        assert [tag.asset_id for tag in tags] == [1, 74]
        assert tags[0].name == "Bitcoin"
        assert tags[0].logo == "https://logo/1.png"

    def test_tag_remove_equals_toggle(self, listing):
        tracker = SelectionTracker(listing)
        tracker.toggle(1)
        tracker.toggle(1027)

        tag = tracker.render()[0]
        assert tag.on_remove() is False
        assert tracker.members() == [1027]

    def test_render_empty(self, listing):
        assert SelectionTracker(listing).render() == []

    def test_toggle_notifies_with_chart_request(self, listing):
        tracker = SelectionTracker(listing)
        changes = []
        tracker.subscribe(changes.append)

        tracker.toggle(1)
        tracker.toggle(1)

        assert [(c.kind, c.asset_id, c.selected, c.needs_chart) for c in changes] == [
            ("toggle", 1, True, True),
            ("toggle", 1, False, True),
        ]

    def test_set_window_with_selection_requests_chart(self, listing):
        tracker = SelectionTracker(listing)
        tracker.toggle(1)
        changes = []
        tracker.subscribe(changes.append)

        tracker.set_window(7)

        assert tracker.window == 7
        assert changes[-1].kind == "window"
        assert changes[-1].window == 7
        assert changes[-1].needs_chart is True

    def test_set_window_empty_selection_no_chart(self, listing):
        tracker = SelectionTracker(listing)
        changes = []
        tracker.subscribe(changes.append)

        tracker.set_window(90)

        assert tracker.window == 90
        assert changes[-1].needs_chart is False

    @pytest.mark.parametrize("days", [0, 2, 15, 365])
    def test_set_window_rejects_unsupported(self, listing, days):
        tracker = SelectionTracker(listing)
        with pytest.raises(ValueError):
            tracker.set_window(days)
        assert tracker.window == 30

    def test_default_window(self, listing):
        assert SelectionTracker(listing).window == 30

    def test_prune_drops_vanished_ids(self, listing, quotes):
        tracker = SelectionTracker(listing)
        tracker.toggle(1)
        tracker.toggle(74)
        changes = []
        tracker.subscribe(changes.append)

        listing.replace([q for q in quotes if q.id != 74])
        removed = tracker.prune()

        assert removed == [74]
        assert tracker.members() == [1]
        assert changes[-1].kind == "prune"
        assert changes[-1].removed == (74,)
        assert changes[-1].needs_chart is True

    def test_prune_noop_is_silent(self, listing):
        tracker = SelectionTracker(listing)
        tracker.toggle(1)
        changes = []
        tracker.subscribe(changes.append)

        assert tracker.prune() == []
        assert changes == []

    def test_unsubscribe(self, listing):
        tracker = SelectionTracker(listing)
        changes = []
        unsubscribe = tracker.subscribe(changes.append)
        unsubscribe()

        tracker.toggle(1)
        assert changes == []
