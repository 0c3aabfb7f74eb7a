from __future__ import annotations

import logging
from typing import Any, Mapping

from room_fit.core import layout_commands
from room_fit.core.codec import decode_layout_or_default, encode_layout
from room_fit.core.drag.controller import DragController, DragUpdate
from room_fit.core.geometry.geometry_service import GeometryService
from room_fit.core.settings import Settings
from room_fit.core.view.scene import RenderPlan, build_render_plan
from room_fit.core.view.transform import ProjectionMode, next_view_angle
from room_fit.schemas.layout import (
    AttachmentKind,
    FurnitureItem,
    LayoutState,
    Room,
    ViewAngle,
    WallAttachment,
    WallSide,
)
from room_fit.schemas.presets import FurniturePreset

logger = logging.getLogger(__name__)


def demo_layout() -> LayoutState:
    """NYC bedroom, 9' x 11': a queen bed and a desk turned sideways."""
    return LayoutState(
        room=Room(width=108, height=132),
        items=[
            FurnitureItem(id="demo-bed", kind="bed", width=60, height=80, x=10, y=10, rotation=0),
            FurnitureItem(id="demo-desk", kind="desk", width=24, height=48, x=80, y=10, rotation=90),
        ],
    )


class Application:
    """
    One editing session: the layout, the view angle, the advisory invalid-id
    set and any drags in progress.

    Every edit goes through a layout command and is followed by a validity pass.
    """

    def __init__(self, settings: Settings, layout: LayoutState | None = None, view_angle: ViewAngle = 0) -> None:
        self.settings = settings
        self.geometry_service = GeometryService()
        self.drag_controller = DragController(
            grid_size=settings.grid_size,
            snap_threshold=settings.snap_threshold,
            pixels_per_unit=settings.pixels_per_unit,
            projection=self.projection,
            wall_height=settings.wall_height,
            geometry_service=self.geometry_service,
        )
        self.view_angle: ViewAngle = view_angle
        self.layout: LayoutState = layout or LayoutState(
            room=Room(width=settings.default_room_width, height=settings.default_room_height)
        )
        self.invalid_ids: set[str] = set()
        self._revalidate()

    @classmethod
    def from_transport(cls, settings: Settings, encoded: str | None) -> "Application":
        layout = decode_layout_or_default(
            encoded, width=settings.default_room_width, height=settings.default_room_height
        )
        return cls(settings=settings, layout=layout)

    @property
    def projection(self) -> ProjectionMode:
        return ProjectionMode(self.settings.projection)

    @property
    def has_invalid_items(self) -> bool:
        return bool(self.invalid_ids)

    def to_transport(self) -> str:
        return encode_layout(self.layout)

    # -------------------------
    # View
    # -------------------------
    def rotate_view(self, *, clockwise: bool = True) -> ViewAngle:
        self.view_angle = next_view_angle(self.view_angle, clockwise=clockwise)
        logger.debug("View angle is now %d", self.view_angle)
        return self.view_angle

    def render_plan(self) -> RenderPlan:
        return build_render_plan(
            self.layout,
            self.view_angle,
            pixels_per_unit=self.settings.pixels_per_unit,
            projection=self.projection,
            invalid_ids=self.invalid_ids,
            wall_height=self.settings.wall_height,
            default_vertical_extent=self.settings.default_vertical_extent,
            occlusion_buffer=self.settings.occlusion_buffer,
        )

    # -------------------------
    # Commands
    # -------------------------
    def add_item(self, preset: FurniturePreset) -> LayoutState:
        return self._apply(layout_commands.add_item(self.layout, preset))

    def move_item(self, item_id: str, x: float, y: float) -> LayoutState:
        return self._apply(layout_commands.move_item(self.layout, item_id, x, y))

    def rotate_item(self, item_id: str) -> LayoutState:
        return self._apply(layout_commands.rotate_item(self.layout, item_id))

    def update_item(self, item_id: str, updates: Mapping[str, Any]) -> LayoutState:
        return self._apply(layout_commands.update_item(self.layout, item_id, updates))

    def delete_item(self, item_id: str) -> LayoutState:
        self.drag_controller.cancel_drag(item_id)
        return self._apply(layout_commands.delete_item(self.layout, item_id))

    def duplicate_item(self, item_id: str) -> LayoutState:
        return self._apply(layout_commands.duplicate_item(self.layout, item_id, self.settings.duplicate_offset))

    def reset_items(self) -> LayoutState:
        for item in self.layout.items:
            self.drag_controller.cancel_drag(item.id)
        return self._apply(layout_commands.reset_items(self.layout))

    def resize_room(self, updates: Mapping[str, Any]) -> LayoutState:
        return self._apply(layout_commands.resize_room(self.layout, updates))

    def add_attachment(self, kind: AttachmentKind, side: WallSide) -> LayoutState:
        attachment = layout_commands.create_attachment(self.layout, kind, side)
        return self._apply(
            layout_commands.add_attachment(self.layout, attachment, wall_height=self.settings.wall_height)
        )

    def insert_attachment(self, attachment: WallAttachment) -> LayoutState:
        return self._apply(
            layout_commands.add_attachment(self.layout, attachment, wall_height=self.settings.wall_height)
        )

    def update_attachment(self, attachment_id: str, updates: Mapping[str, Any]) -> LayoutState:
        return self._apply(
            layout_commands.update_attachment(
                self.layout, attachment_id, updates, wall_height=self.settings.wall_height
            )
        )

    def delete_attachment(self, attachment_id: str) -> LayoutState:
        self.drag_controller.cancel_drag(attachment_id)
        return self._apply(layout_commands.delete_attachment(self.layout, attachment_id))

    def select(self, item_id: str | None) -> LayoutState:
        return self._apply(layout_commands.select(self.layout, item_id))

    def select_attachment(self, attachment_id: str | None) -> LayoutState:
        return self._apply(layout_commands.select_attachment(self.layout, attachment_id))

    # -------------------------
    # Drag sessions
    # -------------------------
    def begin_drag(self, target_id: str) -> bool:
        session = self.drag_controller.begin_drag(self.layout, target_id, self.view_angle)
        if session is None:
            return False
        if self.layout.find_item(target_id) is not None:
            self.select(target_id)
        else:
            self.select_attachment(target_id)
        return True

    def update_drag(self, target_id: str, screen_delta: tuple[float, float] | None) -> DragUpdate | None:
        """Live feedback only: the layout is not touched until `commit_drag`."""
        return self.drag_controller.update_drag(self.layout, target_id, screen_delta)

    def commit_drag(self, target_id: str) -> LayoutState:
        return self._apply(self.drag_controller.commit_drag(self.layout, target_id))

    def cancel_drag(self, target_id: str) -> None:
        self.drag_controller.cancel_drag(target_id)

    # -------------------------
    # Internals
    # -------------------------
    def _apply(self, layout: LayoutState) -> LayoutState:
        if layout is not self.layout:
            self.layout = layout
            self._revalidate()
        return self.layout

    def _revalidate(self) -> None:
        self.invalid_ids = self.geometry_service.compute_invalid_ids(self.layout.room, self.layout.items)
        if self.invalid_ids:
            logger.debug("Invalid items: %s", ", ".join(sorted(self.invalid_ids)))
