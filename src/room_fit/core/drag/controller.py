from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum

from room_fit.core import layout_commands
from room_fit.core.geometry.geometry_service import GeometryService
from room_fit.core.view.transform import (
    ProjectionMode,
    project_ground_delta,
    project_to_screen,
    project_wall_delta,
    rotate_delta,
    rotate_room_point,
    unproject_ground_delta,
    unproject_wall_delta,
    unrotate_delta,
    wall_to_world,
)
from room_fit.schemas.geometry import Point2D, ScreenPoint
from room_fit.schemas.layout import AttachmentKind, LayoutState, ViewAngle

logger = logging.getLogger(__name__)

GRID_SIZE = 6.0
SNAP_THRESHOLD = 2.0


def snap_coordinate(value: float, grid_size: float = GRID_SIZE, threshold: float = SNAP_THRESHOLD) -> float:
    """
    Snap to the nearest multiple of `grid_size` when strictly closer than
    `threshold`; otherwise round to a whole unit. Halves round up.
    """
    if grid_size > 0:
        nearest = math.floor(value / grid_size + 0.5) * grid_size
        if abs(value - nearest) < threshold:
            return float(nearest)
    return float(math.floor(value + 0.5))


class DragTargetKind(str, Enum):
    ITEM = "item"
    ATTACHMENT = "attachment"


@dataclass
class DragSession:
    """
    One pointer gesture on one item or attachment.

    `origin` is the stored position when the drag began: (x, y) for an item,
    (along-wall offset, elevation) for an attachment. `anchor` is where the
    object was drawn at that moment.
    """
    target_id: str
    target_kind: DragTargetKind
    view_angle: ViewAngle
    origin: Point2D
    anchor: ScreenPoint
    position: Point2D | None = None


@dataclass(frozen=True)
class DragUpdate:
    """Result of one drag-move sample."""
    target_id: str
    snapped_position: Point2D
    screen_offset: ScreenPoint
    screen_position: ScreenPoint
    hypothetical_invalid_ids: frozenset[str]


@dataclass
class DragController:
    """
    Turns screen-space pointer displacements into snapped room positions.

    Several gestures may run at once on different targets; a target already
    being dragged cannot be picked up a second time.
    """
    grid_size: float = GRID_SIZE
    snap_threshold: float = SNAP_THRESHOLD
    pixels_per_unit: float = 5.0
    projection: ProjectionMode = ProjectionMode.ISOMETRIC
    wall_height: float | None = None
    geometry_service: GeometryService = field(default_factory=GeometryService)
    sessions: dict[str, DragSession] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not math.isfinite(self.pixels_per_unit) or self.pixels_per_unit <= 0:
            raise ValueError(f"pixels_per_unit must be positive, got {self.pixels_per_unit!r}")

    # -------------------------
    # Gesture lifecycle
    # -------------------------
    def begin_drag(self, state: LayoutState, target_id: str, view_angle: ViewAngle) -> DragSession | None:
        if target_id in self.sessions:
            logger.warning("begin_drag: %r is already being dragged", target_id)
            return None

        session = self._create_session(state, target_id, view_angle)
        if session is None:
            logger.warning("begin_drag: no item or attachment with id %r", target_id)
            return None

        self.sessions[target_id] = session
        logger.debug("begin_drag: %s %s from (%g, %g)", session.target_kind.value, target_id, session.origin.x, session.origin.y)
        return session

    def update_drag(self, state: LayoutState, target_id: str, screen_delta: tuple[float, float] | None) -> DragUpdate | None:
        """
        Process one drag-move sample; `screen_delta` is the pointer displacement
        in pixels since the drag began. Returns None when there is no active
        drag for the target or the sample is unusable (None or non-finite).
        """
        session = self.sessions.get(target_id)
        if session is None or screen_delta is None:
            return None

        screen_x, screen_y = screen_delta
        if not (math.isfinite(screen_x) and math.isfinite(screen_y)):
            return None

        if session.target_kind == DragTargetKind.ITEM:
            return self._update_item_drag(state, session, screen_x, screen_y)
        return self._update_attachment_drag(state, session, screen_x, screen_y)

    def commit_drag(self, state: LayoutState, target_id: str) -> LayoutState:
        """End the gesture and write the last snapped position into the layout."""
        session = self.sessions.pop(target_id, None)
        if session is None or session.position is None:
            return state

        logger.debug("commit_drag: %s -> (%g, %g)", target_id, session.position.x, session.position.y)
        if session.target_kind == DragTargetKind.ITEM:
            return layout_commands.move_item(state, target_id, session.position.x, session.position.y)
        return layout_commands.update_attachment(
            state,
            target_id,
            {"x": session.position.x, "y": session.position.y},
            wall_height=self.wall_height,
        )

    def cancel_drag(self, target_id: str) -> None:
        if self.sessions.pop(target_id, None) is not None:
            logger.debug("cancel_drag: %s", target_id)

    def is_dragging(self, target_id: str) -> bool:
        return target_id in self.sessions

    # -------------------------
    # Per-kind math
    # -------------------------
    def _update_item_drag(self, state: LayoutState, session: DragSession, screen_x: float, screen_y: float) -> DragUpdate | None:
        item = state.find_item(session.target_id)
        if item is None:
            return None

        ground_delta = unproject_ground_delta(screen_x, screen_y, self.pixels_per_unit, self.projection)
        room_delta = unrotate_delta(ground_delta.x, ground_delta.y, session.view_angle)

        snapped = Point2D(
            x=snap_coordinate(session.origin.x + room_delta.x, self.grid_size, self.snap_threshold),
            y=snap_coordinate(session.origin.y + room_delta.y, self.grid_size, self.snap_threshold),
        )
        session.position = snapped

        snapped_ground_delta = rotate_delta(snapped.x - session.origin.x, snapped.y - session.origin.y, session.view_angle)
        screen_offset = project_ground_delta(
            snapped_ground_delta.x, snapped_ground_delta.y, self.pixels_per_unit, self.projection
        )
        invalid_ids = self.geometry_service.compute_invalid_ids(
            state.room, state.items, item.id, item.rect_at(snapped.x, snapped.y)
        )
        return self._build_update(session, snapped, screen_offset, invalid_ids)

    def _update_attachment_drag(
        self, state: LayoutState, session: DragSession, screen_x: float, screen_y: float
    ) -> DragUpdate | None:
        attachment = state.find_attachment(session.target_id)
        if attachment is None:
            return None

        along_delta, elevation_delta = unproject_wall_delta(
            screen_x, screen_y, attachment.side, session.view_angle, self.pixels_per_unit, self.projection
        )
        if attachment.kind == AttachmentKind.DOOR:
            elevation = 0.0
        elif self.projection == ProjectionMode.ORTHOGRAPHIC:
            # elevation is not visible from above
            elevation = session.origin.y
        else:
            elevation = snap_coordinate(session.origin.y + elevation_delta, self.grid_size, self.snap_threshold)

        candidate = attachment.model_copy(
            update={
                "x": snap_coordinate(session.origin.x + along_delta, self.grid_size, self.snap_threshold),
                "y": elevation,
            }
        )
        placed = layout_commands.clamp_attachment(candidate, state.room, wall_height=self.wall_height)
        snapped = Point2D(x=placed.x, y=placed.y)
        session.position = snapped

        screen_offset = project_wall_delta(
            snapped.x - session.origin.x,
            snapped.y - session.origin.y,
            attachment.side,
            session.view_angle,
            self.pixels_per_unit,
            self.projection,
        )
        invalid_ids = self.geometry_service.compute_invalid_ids(state.room, state.items)
        return self._build_update(session, snapped, screen_offset, invalid_ids)

    # -------------------------
    # Helpers
    # -------------------------
    def _create_session(self, state: LayoutState, target_id: str, view_angle: ViewAngle) -> DragSession | None:
        room = state.room

        item = state.find_item(target_id)
        if item is not None:
            rotated = rotate_room_point(item.x, item.y, view_angle, room.width, room.height)
            return DragSession(
                target_id=target_id,
                target_kind=DragTargetKind.ITEM,
                view_angle=view_angle,
                origin=Point2D(x=item.x, y=item.y),
                anchor=project_to_screen(rotated.x, rotated.y, 0.0, self.pixels_per_unit, self.projection),
            )

        attachment = state.find_attachment(target_id)
        if attachment is not None:
            anchor = wall_to_world(attachment.side, attachment.x, attachment.y, view_angle, room.width, room.height)
            return DragSession(
                target_id=target_id,
                target_kind=DragTargetKind.ATTACHMENT,
                view_angle=view_angle,
                origin=Point2D(x=attachment.x, y=attachment.y),
                anchor=project_to_screen(anchor.x, anchor.y, anchor.z, self.pixels_per_unit, self.projection),
            )

        return None

    @staticmethod
    def _build_update(
        session: DragSession, snapped: Point2D, screen_offset: ScreenPoint, invalid_ids: set[str]
    ) -> DragUpdate:
        return DragUpdate(
            target_id=session.target_id,
            snapped_position=snapped,
            screen_offset=screen_offset,
            screen_position=ScreenPoint(x=session.anchor.x + screen_offset.x, y=session.anchor.y + screen_offset.y),
            hypothetical_invalid_ids=frozenset(invalid_ids),
        )
