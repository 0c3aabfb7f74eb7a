"""Unit tests for the render plan builder."""

import pytest

from room_fit.core.view.scene import RenderPlan, build_render_plan
from room_fit.core.view.transform import ProjectionMode
from room_fit.schemas.layout import LayoutState


def coords(quad) -> list[tuple[float, float]]:
    return [(point.x, point.y) for point in quad]


class TestFloorAndWalls:
    """Tests for the room shell."""

    def test_floor_of_square_room(self, two_item_layout: LayoutState) -> None:
        """The 100 x 100 floor becomes a 2:1 diamond at 5 px per inch."""
        plan = build_render_plan(two_item_layout, 0)
        assert coords(plan.floor) == [(0, 0), (500, 250), (0, 500), (-500, 250)]

    def test_floor_uses_rotated_dimensions(self, furnished_layout: LayoutState) -> None:
        """At 90 degrees the 108 x 132 room is drawn 132 wide."""
        plan = build_render_plan(furnished_layout, 90)
        assert coords(plan.floor)[1] == (660, 330)

    def test_back_walls_rise_from_far_corner(self, two_item_layout: LayoutState) -> None:
        """Both back walls meet at the far corner and reach wall height."""
        plan = build_render_plan(two_item_layout, 0, wall_height=96)
        assert len(plan.back_walls) == 2
        for wall in plan.back_walls:
            assert (0, 0) in coords(wall)
            assert (0, -480) in coords(wall)

    def test_plan_is_serializable(self, furnished_layout: LayoutState) -> None:
        """The plan round-trips through JSON."""
        plan = build_render_plan(furnished_layout, 270)
        assert RenderPlan.model_validate_json(plan.model_dump_json()) == plan


class TestItems:
    """Tests for extruded furniture."""

    def test_items_are_back_to_front(self, furnished_layout: LayoutState) -> None:
        """Draw order follows depth for the view angle."""
        plan = build_render_plan(furnished_layout, 180)
        assert [item.id for item in plan.items] == ["desk", "bed"]
        assert plan.items[0].depth < plan.items[1].depth

    def test_extrusion_and_near_corner(self, two_item_layout: LayoutState) -> None:
        """A 10 x 10 item at the origin: the near corner is (10, 10), lifted by the default extent."""
        item = build_render_plan(two_item_layout, 0, default_vertical_extent=20).items[0]

        assert item.id == "a"
        assert item.near_corner_index == 2
        assert coords(item.base)[2] == (0, 50)
        assert coords(item.top)[2] == (0, -50)

    def test_explicit_vertical_extent_wins(self, furnished_layout: LayoutState) -> None:
        """The bed's own 20 in extent is used, not the default."""
        bed = next(item for item in build_render_plan(furnished_layout, 0, default_vertical_extent=50).items if item.id == "bed")
        offsets = [base.y - top.y for base, top in zip(bed.base, bed.top)]
        assert offsets == pytest.approx([100] * 4)

    def test_isometric_items_have_two_side_faces(self, furnished_layout: LayoutState) -> None:
        """Only the two faces meeting the near corner are drawn."""
        for item in build_render_plan(furnished_layout, 90).items:
            assert len(item.side_faces) == 2

    def test_orthographic_items_are_flat(self, furnished_layout: LayoutState) -> None:
        """From above there are no side faces and top equals base."""
        plan = build_render_plan(furnished_layout, 0, projection=ProjectionMode.ORTHOGRAPHIC)
        for item in plan.items:
            assert item.side_faces == []
            assert item.top == item.base

    def test_flags(self, furnished_layout: LayoutState) -> None:
        """Invalid and selected flags are carried per item."""
        plan = build_render_plan(furnished_layout, 0, invalid_ids={"desk"})
        flags = {item.id: (item.invalid, item.selected) for item in plan.items}
        assert flags == {"bed": (False, True), "desk": (True, False)}


class TestAttachments:
    """Tests for wall attachments."""

    def test_every_attachment_is_drawn(self, furnished_layout: LayoutState) -> None:
        """Attachments keep their stored order."""
        plan = build_render_plan(furnished_layout, 0)
        assert [attachment.id for attachment in plan.attachments] == ["window", "door", "shelf"]

    def test_only_shelves_have_a_front_face(self, furnished_layout: LayoutState) -> None:
        """Shelves stick out of the wall; windows and doors are flat."""
        faces = {attachment.id: attachment.front_face for attachment in build_render_plan(furnished_layout, 0).attachments}
        assert faces["shelf"] is not None
        assert faces["window"] is None and faces["door"] is None

    def test_window_face_spans_its_size(self, furnished_layout: LayoutState) -> None:
        """A back-wall window at x=30, y=36 spans 36 wide and 48 high."""
        window = build_render_plan(furnished_layout, 0).attachments[0]
        # bottom-left corner (30, 132, 36)
        assert coords(window.face)[0] == (-510, 225)
        # top-right corner (66, 132, 84)
        assert coords(window.face)[2] == (-330, 75)

    def test_hidden_attachment_is_dimmed(self, furnished_layout: LayoutState) -> None:
        """The desk stands well in front of the left-wall door."""
        dimmed = {attachment.id: attachment.dimmed for attachment in build_render_plan(furnished_layout, 0).attachments}
        assert dimmed == {"window": False, "door": True, "shelf": False}
