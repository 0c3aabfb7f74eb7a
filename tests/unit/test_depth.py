"""Unit tests for painter's-order depth sorting and wall occlusion."""

import pytest

from room_fit.core.view.depth import (
    attachment_depth,
    attachment_is_occluded,
    item_depth,
    occluded_attachment_ids,
    sort_items_by_depth,
)
from room_fit.schemas.layout import AttachmentKind, FurnitureItem, LayoutState, Room, WallAttachment, WallSide


class TestItemDepth:
    """Tests for item ranking."""

    @pytest.mark.parametrize(
        "angle,expected",
        [(0, ["bed", "desk"]), (90, ["bed", "desk"]), (180, ["desk", "bed"]), (270, ["desk", "bed"])],
    )
    def test_draw_order_follows_view_angle(self, furnished_layout: LayoutState, angle: int, expected: list[str]) -> None:
        """The farther item (lower rotated x + y) is drawn first."""
        ordered = sort_items_by_depth(furnished_layout.items, angle, furnished_layout.room)
        assert [item.id for item in ordered] == expected

    def test_depth_is_rotated_origin_sum(self, furnished_layout: LayoutState) -> None:
        """At 180 degrees the bed origin (10, 10) rotates to (98, 122)."""
        bed = furnished_layout.find_item("bed")
        assert item_depth(bed, 180, furnished_layout.room) == 220

    def test_equal_depth_keeps_insertion_order(self, square_room: Room) -> None:
        """Ties are broken by list order."""
        first = FurnitureItem(id="first", kind="box", width=5, height=5, x=0, y=10)
        second = FurnitureItem(id="second", kind="box", width=5, height=5, x=10, y=0)

        assert [item.id for item in sort_items_by_depth([first, second], 0, square_room)] == ["first", "second"]
        assert [item.id for item in sort_items_by_depth([second, first], 0, square_room)] == ["second", "first"]

    def test_sort_does_not_mutate_input(self, furnished_layout: LayoutState) -> None:
        """A new list is returned."""
        items = list(furnished_layout.items)
        sort_items_by_depth(items, 180, furnished_layout.room)
        assert [item.id for item in items] == ["bed", "desk"]


class TestOcclusion:
    """Tests for dimming wall attachments hidden behind furniture."""

    def test_attachment_depth_uses_wall_anchor(self, furnished_layout: LayoutState) -> None:
        """A back-wall window at x=30 anchors at (30, 132)."""
        window = furnished_layout.find_attachment("window")
        assert attachment_depth(window, 0, furnished_layout.room) == 162

    def test_back_window_is_clear_from_the_front(self, furnished_layout: LayoutState) -> None:
        """Nothing stands in front of the far wall at 0 degrees."""
        window = furnished_layout.find_attachment("window")
        assert not attachment_is_occluded(window, furnished_layout.items, 0, furnished_layout.room)

    def test_back_window_is_hidden_after_half_turn(self, furnished_layout: LayoutState) -> None:
        """At 180 degrees the back wall becomes the near wall and the bed stands in front of it."""
        window = furnished_layout.find_attachment("window")
        assert attachment_is_occluded(window, furnished_layout.items, 180, furnished_layout.room)

    def test_buffer_is_strict(self, square_room: Room) -> None:
        """An item exactly `buffer` inches in front does not dim the attachment."""
        window = WallAttachment(id="w", kind=AttachmentKind.WINDOW, side=WallSide.FRONT, x=20, y=30, width=10, height=10)
        at_buffer = FurnitureItem(id="a", kind="box", width=5, height=5, x=20, y=10)
        past_buffer = FurnitureItem(id="b", kind="box", width=5, height=5, x=20, y=11)

        assert not attachment_is_occluded(window, [at_buffer], 0, square_room)
        assert attachment_is_occluded(window, [past_buffer], 0, square_room)
        assert not attachment_is_occluded(window, [past_buffer], 0, square_room, buffer=20)

    def test_occluded_ids_collects_every_hidden_attachment(self, furnished_layout: LayoutState) -> None:
        """The desk hides the left-wall door; the back window stays clear."""
        hidden = occluded_attachment_ids(furnished_layout.attachments, furnished_layout.items, 0, furnished_layout.room)
        assert "door" in hidden
        assert "window" not in hidden

    def test_empty_room_hides_nothing(self, furnished_layout: LayoutState) -> None:
        """No items, nothing dimmed."""
        assert occluded_attachment_ids(furnished_layout.attachments, [], 90, furnished_layout.room) == set()
