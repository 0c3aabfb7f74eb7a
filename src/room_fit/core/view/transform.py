"""
Room space <-> rotated room space <-> screen space.

Rotated room space is room space turned by a multiple of 90 degrees about the
room's own corner, so that after every rotation the far corner of the view
sits at (0, 0) and the room occupies [0, W'] x [0, H'] with (W', H') the
rotated dimensions.

Screen space is the 2:1 isometric (or flat, top-down) projection of rotated
room space, in pixels.
"""
from __future__ import annotations

import math
from enum import Enum

from room_fit.schemas.geometry import Dimensions, Point2D, Point3D, ScreenPoint
from room_fit.schemas.layout import ViewAngle, WallSide

VIEW_ANGLES: tuple[ViewAngle, ...] = (0, 90, 180, 270)


class ProjectionMode(str, Enum):
    """How rotated room space is flattened onto the screen."""
    ISOMETRIC = "isometric"
    ORTHOGRAPHIC = "orthographic"


# -------------------------
# Quadrant rotation
# -------------------------
def rotate_room_point(x: float, y: float, view_angle: ViewAngle, room_width: float, room_height: float) -> Point2D:
    """
    Rotate a room-space point into rotated room space.

    room_width/room_height are always the *unrotated* room dimensions.
    """
    match view_angle:
        case 0:
            return Point2D(x=x, y=y)
        case 90:
            return Point2D(x=room_height - y, y=x)
        case 180:
            return Point2D(x=room_width - x, y=room_height - y)
        case 270:
            return Point2D(x=y, y=room_width - x)
        case _:
            raise ValueError(f"Unsupported view angle: {view_angle!r}")


def unrotate_room_point(x: float, y: float, view_angle: ViewAngle, room_width: float, room_height: float) -> Point2D:
    """Inverse of `rotate_room_point`."""
    match view_angle:
        case 0:
            return Point2D(x=x, y=y)
        case 90:
            return Point2D(x=y, y=room_height - x)
        case 180:
            return Point2D(x=room_width - x, y=room_height - y)
        case 270:
            return Point2D(x=room_width - y, y=x)
        case _:
            raise ValueError(f"Unsupported view angle: {view_angle!r}")


def rotate_delta(dx: float, dy: float, view_angle: ViewAngle) -> Point2D:
    """Rotate a displacement (or direction); translation terms drop out."""
    match view_angle:
        case 0:
            return Point2D(x=dx, y=dy)
        case 90:
            return Point2D(x=-dy, y=dx)
        case 180:
            return Point2D(x=-dx, y=-dy)
        case 270:
            return Point2D(x=dy, y=-dx)
        case _:
            raise ValueError(f"Unsupported view angle: {view_angle!r}")


def unrotate_delta(dx: float, dy: float, view_angle: ViewAngle) -> Point2D:
    """Transpose of `rotate_delta`: rotated-space displacement back to room space."""
    match view_angle:
        case 0:
            return Point2D(x=dx, y=dy)
        case 90:
            return Point2D(x=dy, y=-dx)
        case 180:
            return Point2D(x=-dx, y=-dy)
        case 270:
            return Point2D(x=-dy, y=dx)
        case _:
            raise ValueError(f"Unsupported view angle: {view_angle!r}")


def rotated_room_dimensions(width: float, height: float, view_angle: ViewAngle) -> Dimensions:
    if view_angle in (90, 270):
        return Dimensions(width=height, height=width)
    return Dimensions(width=width, height=height)


def next_view_angle(view_angle: ViewAngle, *, clockwise: bool = True) -> ViewAngle:
    step = 1 if clockwise else -1
    return VIEW_ANGLES[(VIEW_ANGLES.index(view_angle) + step) % len(VIEW_ANGLES)]


# -------------------------
# Projection
# -------------------------
def project_to_screen(
    x: float,
    y: float,
    z: float,
    ppu: float,
    mode: ProjectionMode = ProjectionMode.ISOMETRIC,
) -> ScreenPoint:
    """
    Project a rotated-room-space point (grid X, grid Y, elevation) to pixels.

    Isometric 2:1: screenX = (x - y) * ppu, screenY = (x + y) * ppu / 2 - z * ppu.
    Orthographic: top-down, elevation is not visible.
    """
    if mode == ProjectionMode.ORTHOGRAPHIC:
        return ScreenPoint(x=x * ppu, y=y * ppu)
    return ScreenPoint(x=(x - y) * ppu, y=((x + y) * ppu) / 2 - z * ppu)


def unproject_ground_delta(
    sx: float,
    sy: float,
    ppu: float,
    mode: ProjectionMode = ProjectionMode.ISOMETRIC,
) -> Point2D:
    """
    Screen displacement -> rotated-room-space displacement on the floor (z = 0).

    `ppu` must be a positive, finite scale; anything else raises ValueError.
    Settings and DragController reject such a scale before it gets here.
    """
    _require_positive_scale(ppu)
    if mode == ProjectionMode.ORTHOGRAPHIC:
        return Point2D(x=sx / ppu, y=sy / ppu)
    return Point2D(x=(sx + 2 * sy) / (2 * ppu), y=(2 * sy - sx) / (2 * ppu))


def project_ground_delta(
    dx: float,
    dy: float,
    ppu: float,
    mode: ProjectionMode = ProjectionMode.ISOMETRIC,
) -> ScreenPoint:
    """Forward counterpart of `unproject_ground_delta` (projection is linear)."""
    return project_to_screen(dx, dy, 0.0, ppu, mode)


# -------------------------
# Walls
# -------------------------
def wall_to_world(
    side: WallSide,
    along_wall_offset: float,
    elevation: float,
    view_angle: ViewAngle,
    room_width: float,
    room_height: float,
) -> Point3D:
    """
    Map a point on a wall to rotated room space (planar part rotated, elevation unchanged).
    """
    match side:
        case WallSide.FRONT:
            world_x, world_y = along_wall_offset, 0.0
        case WallSide.BACK:
            world_x, world_y = along_wall_offset, room_height
        case WallSide.LEFT:
            world_x, world_y = 0.0, along_wall_offset
        case WallSide.RIGHT:
            world_x, world_y = room_width, along_wall_offset
        case _:
            raise ValueError(f"Unsupported wall side: {side!r}")

    rotated = rotate_room_point(world_x, world_y, view_angle, room_width, room_height)
    return Point3D(x=rotated.x, y=rotated.y, z=elevation)


def wall_tangent(side: WallSide, view_angle: ViewAngle) -> Point2D:
    """Rotated unit direction in which the along-wall offset grows."""
    if side.runs_along_width:
        return rotate_delta(1.0, 0.0, view_angle)
    return rotate_delta(0.0, 1.0, view_angle)


def wall_inward_normal(side: WallSide, view_angle: ViewAngle) -> Point2D:
    """Rotated unit normal pointing from the wall into the room."""
    match side:
        case WallSide.FRONT:
            normal_x, normal_y = 0.0, 1.0
        case WallSide.BACK:
            normal_x, normal_y = 0.0, -1.0
        case WallSide.LEFT:
            normal_x, normal_y = 1.0, 0.0
        case WallSide.RIGHT:
            normal_x, normal_y = -1.0, 0.0
        case _:
            raise ValueError(f"Unsupported wall side: {side!r}")
    return rotate_delta(normal_x, normal_y, view_angle)


def unproject_wall_delta(
    sx: float,
    sy: float,
    side: WallSide,
    view_angle: ViewAngle,
    ppu: float,
    mode: ProjectionMode = ProjectionMode.ISOMETRIC,
) -> tuple[float, float]:
    """
    Screen displacement -> (along-wall delta, elevation delta) in the wall's plane.

    The wall tangent is axis-aligned in rotated space, so its isometric image is
    never vertical and the along-wall delta is recovered from sx alone. The
    orthographic view cannot see elevation, which is reported as 0.

    Raises ValueError for a non-positive or non-finite `ppu`, as
    `unproject_ground_delta` does.
    """
    _require_positive_scale(ppu)
    tangent = wall_tangent(side, view_angle)

    if mode == ProjectionMode.ORTHOGRAPHIC:
        ground = unproject_ground_delta(sx, sy, ppu, mode)
        return (ground.x * tangent.x + ground.y * tangent.y, 0.0)

    along = sx / ((tangent.x - tangent.y) * ppu)
    elevation = along * (tangent.x + tangent.y) / 2 - sy / ppu
    return (along, elevation)


def project_wall_delta(
    along: float,
    elevation: float,
    side: WallSide,
    view_angle: ViewAngle,
    ppu: float,
    mode: ProjectionMode = ProjectionMode.ISOMETRIC,
) -> ScreenPoint:
    """Forward counterpart of `unproject_wall_delta`."""
    tangent = wall_tangent(side, view_angle)
    return project_to_screen(along * tangent.x, along * tangent.y, elevation, ppu, mode)


def _require_positive_scale(ppu: float) -> None:
    if not math.isfinite(ppu) or ppu <= 0:
        raise ValueError(f"pixels-per-unit must be a positive number, got {ppu!r}")
