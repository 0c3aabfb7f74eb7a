from __future__ import annotations

from typing import Iterable

from pydantic import Field

from room_fit.core.view.depth import item_depth, occluded_attachment_ids, sort_items_by_depth
from room_fit.core.view.transform import (
    ProjectionMode,
    project_to_screen,
    rotate_room_point,
    rotated_room_dimensions,
    wall_inward_normal,
    wall_to_world,
)
from room_fit.schemas.base import StrictModel
from room_fit.schemas.geometry import Point2D, ScreenPoint
from room_fit.schemas.layout import (
    AttachmentKind,
    FurnitureItem,
    LayoutState,
    ViewAngle,
    WallAttachment,
)

DEFAULT_SHELF_DEPTH = 12.0

# ---------------------------------------------------------------------
# Render plan
# ---------------------------------------------------------------------

Quad = list[ScreenPoint]


class ItemRender(StrictModel):
    """
    Screen geometry for one extruded item.

    base/top list the footprint corners in the same order; the two visible side
    faces are the ones meeting the corner nearest the viewer.
    """
    id: str
    kind: str
    color: str | None = None
    depth: float
    invalid: bool = False
    selected: bool = False
    base: Quad
    top: Quad
    near_corner_index: int = Field(ge=0, le=3)
    side_faces: list[Quad] = Field(default_factory=list)


class AttachmentRender(StrictModel):
    id: str
    kind: AttachmentKind
    dimmed: bool = False
    selected: bool = False
    face: Quad
    front_face: Quad | None = None


class RenderPlan(StrictModel):
    """Everything a renderer needs to draw one frame, back to front."""
    view_angle: ViewAngle
    projection: ProjectionMode
    pixels_per_unit: float
    floor: Quad
    back_walls: list[Quad]
    attachments: list[AttachmentRender]
    items: list[ItemRender]


# ---------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------

def build_render_plan(
    state: LayoutState,
    view_angle: ViewAngle,
    *,
    pixels_per_unit: float = 5.0,
    projection: ProjectionMode = ProjectionMode.ISOMETRIC,
    invalid_ids: Iterable[str] = (),
    wall_height: float = 96.0,
    default_vertical_extent: float = 20.0,
    occlusion_buffer: float = 10.0,
) -> RenderPlan:
    room = state.room
    rotated = rotated_room_dimensions(room.width, room.height, view_angle)
    invalid = set(invalid_ids)

    def to_screen(x: float, y: float, z: float = 0.0) -> ScreenPoint:
        return project_to_screen(x, y, z, pixels_per_unit, projection)

    floor = [to_screen(0, 0), to_screen(rotated.width, 0), to_screen(rotated.width, rotated.height), to_screen(0, rotated.height)]

    # After rotation the far corner is always (0, 0): the back walls run along x = 0 and y = 0.
    back_walls = [
        [to_screen(0, rotated.height), to_screen(0, 0), to_screen(0, 0, wall_height), to_screen(0, rotated.height, wall_height)],
        [to_screen(0, 0), to_screen(rotated.width, 0), to_screen(rotated.width, 0, wall_height), to_screen(0, 0, wall_height)],
    ]

    dimmed_ids = occluded_attachment_ids(state.attachments, state.items, view_angle, room, occlusion_buffer)
    attachments = [
        _render_attachment(attachment, state, view_angle, to_screen, attachment.id in dimmed_ids)
        for attachment in state.attachments
    ]

    items = [
        _render_item(item, state, view_angle, to_screen, projection, item.id in invalid, default_vertical_extent)
        for item in sort_items_by_depth(state.items, view_angle, room)
    ]

    return RenderPlan(
        view_angle=view_angle,
        projection=projection,
        pixels_per_unit=pixels_per_unit,
        floor=floor,
        back_walls=back_walls,
        attachments=attachments,
        items=items,
    )


def _render_item(
    item: FurnitureItem,
    state: LayoutState,
    view_angle: ViewAngle,
    to_screen,
    projection: ProjectionMode,
    invalid: bool,
    default_vertical_extent: float,
) -> ItemRender:
    room = state.room
    rect = item.rect()
    extrusion = item.vertical_extent or default_vertical_extent

    room_corners = [
        (rect.x, rect.y),
        (rect.max_x, rect.y),
        (rect.max_x, rect.max_y),
        (rect.x, rect.max_y),
    ]
    corners: list[Point2D] = [rotate_room_point(x, y, view_angle, room.width, room.height) for x, y in room_corners]

    base = [to_screen(corner.x, corner.y) for corner in corners]
    top = [to_screen(corner.x, corner.y, extrusion) for corner in corners]

    # Nearest corner to the viewer has the largest x + y in rotated space.
    near_index = max(range(4), key=lambda index: corners[index].x + corners[index].y)
    previous_index = (near_index - 1) % 4
    next_index = (near_index + 1) % 4

    side_faces: list[Quad] = []
    if projection == ProjectionMode.ISOMETRIC:
        side_faces = [
            [top[near_index], top[next_index], base[next_index], base[near_index]],
            [top[previous_index], top[near_index], base[near_index], base[previous_index]],
        ]

    return ItemRender(
        id=item.id,
        kind=item.kind,
        color=item.color,
        depth=item_depth(item, view_angle, room),
        invalid=invalid,
        selected=state.selected_item_id == item.id,
        base=base,
        top=top,
        near_corner_index=near_index,
        side_faces=side_faces,
    )


def _render_attachment(
    attachment: WallAttachment,
    state: LayoutState,
    view_angle: ViewAngle,
    to_screen,
    dimmed: bool,
) -> AttachmentRender:
    room = state.room
    start = wall_to_world(attachment.side, attachment.x, attachment.y, view_angle, room.width, room.height)
    end = wall_to_world(attachment.side, attachment.x + attachment.width, attachment.y, view_angle, room.width, room.height)

    corners = [
        (start.x, start.y, start.z),
        (end.x, end.y, end.z),
        (end.x, end.y, end.z + attachment.height),
        (start.x, start.y, start.z + attachment.height),
    ]
    face = [to_screen(x, y, z) for x, y, z in corners]

    front_face: Quad | None = None
    if attachment.kind == AttachmentKind.SHELF:
        shelf_depth = attachment.outward_offset or DEFAULT_SHELF_DEPTH
        normal = wall_inward_normal(attachment.side, view_angle)
        front_face = [to_screen(x + normal.x * shelf_depth, y + normal.y * shelf_depth, z) for x, y, z in corners]

    return AttachmentRender(
        id=attachment.id,
        kind=attachment.kind,
        dimmed=dimmed,
        selected=state.selected_attachment_id == attachment.id,
        face=face,
        front_face=front_face,
    )
