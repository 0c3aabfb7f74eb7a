"""
Discrete edit commands over a LayoutState.

Every command is a pure function returning a new LayoutState. Commands never
enforce validity (that is computed separately) and never raise for expected
conditions: an unknown id or an update that would produce a malformed object
returns the state unchanged.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from room_fit.schemas.layout import (
    AttachmentKind,
    FurnitureItem,
    LayoutState,
    Room,
    WallAttachment,
    WallSide,
)
from room_fit.schemas.presets import ATTACHMENT_PRESETS, FurniturePreset
from room_fit.utilities.utilities import Utilities

logger = logging.getLogger(__name__)

DUPLICATE_OFFSET = 5.0

ModelT = TypeVar("ModelT", bound=BaseModel)


# -------------------------
# Furniture
# -------------------------
def add_item(state: LayoutState, preset: FurniturePreset, *, item_id: str | None = None) -> LayoutState:
    """Add a preset centered in the room and select it."""
    taken_ids = state.all_ids()
    if item_id is None:
        item_id = Utilities.make_id(preset.kind, taken_ids)
    elif item_id in taken_ids:
        logger.warning("add_item: id %r already in use", item_id)
        return state

    item = FurnitureItem(
        id=item_id,
        kind=preset.kind,
        width=preset.width,
        height=preset.height,
        x=state.room.width / 2 - preset.width / 2,
        y=state.room.height / 2 - preset.height / 2,
        rotation=0,
        vertical_extent=preset.vertical_extent,
        color=preset.color,
    )
    logger.debug("add_item: %s at (%g, %g)", item.id, item.x, item.y)
    return state.model_copy(
        update={"items": [*state.items, item], "selected_item_id": item.id, "selected_attachment_id": None}
    )


def move_item(state: LayoutState, item_id: str, x: float, y: float) -> LayoutState:
    if not (math.isfinite(x) and math.isfinite(y)):
        logger.warning("move_item: ignoring non-finite position (%r, %r) for %r", x, y, item_id)
        return state
    return _replace_item(state, item_id, lambda item: item.model_copy(update={"x": float(x), "y": float(y)}))


def rotate_item(state: LayoutState, item_id: str) -> LayoutState:
    """Toggle an item between 0 and 90 degrees (anything else returns to 0)."""
    return _replace_item(
        state,
        item_id,
        lambda item: item.model_copy(update={"rotation": 90 if item.rotation == 0 else 0}),
    )


def update_item(state: LayoutState, item_id: str, updates: Mapping[str, Any]) -> LayoutState:
    """Resize, recolor or otherwise edit an item; the id itself cannot change."""
    item = state.find_item(item_id)
    if item is None:
        return state

    updated = _validated_merge(item, {key: value for key, value in updates.items() if key != "id"})
    if updated is None:
        return state
    return _replace_item(state, item_id, lambda _: updated)


def delete_item(state: LayoutState, item_id: str) -> LayoutState:
    if state.find_item(item_id) is None:
        return state
    return state.model_copy(
        update={
            "items": [item for item in state.items if item.id != item_id],
            "selected_item_id": None if state.selected_item_id == item_id else state.selected_item_id,
        }
    )


def duplicate_item(state: LayoutState, item_id: str, offset: float = DUPLICATE_OFFSET) -> LayoutState:
    """Clone an item shifted by (offset, offset) and select the clone."""
    item = state.find_item(item_id)
    if item is None:
        return state

    clone = item.model_copy(
        update={
            "id": Utilities.make_id(item.kind, state.all_ids()),
            "x": item.x + offset,
            "y": item.y + offset,
        }
    )
    return state.model_copy(
        update={"items": [*state.items, clone], "selected_item_id": clone.id, "selected_attachment_id": None}
    )


def reset_items(state: LayoutState) -> LayoutState:
    """Remove all furniture; the room and its wall fixtures stay."""
    return state.model_copy(update={"items": [], "selected_item_id": None})


# -------------------------
# Room
# -------------------------
def resize_room(state: LayoutState, updates: Mapping[str, Any]) -> LayoutState:
    """
    Change the room's width and/or height.

    Non-positive sizes are rejected. Items that end up outside are not moved;
    the validity check reports them. Wall fixtures are pulled back onto
    their (possibly shorter) walls.
    """
    room = _validated_merge(state.room, updates)
    if room is None:
        return state
    logger.debug("resize_room: %g x %g", room.width, room.height)
    return state.model_copy(
        update={"room": room, "attachments": [clamp_attachment(a, room) for a in state.attachments]}
    )


# -------------------------
# Wall attachments
# -------------------------
def create_attachment(
    state: LayoutState,
    kind: AttachmentKind,
    side: WallSide,
    *,
    attachment_id: str | None = None,
) -> WallAttachment:
    """Build a preset-sized attachment centered on `side` (not yet added)."""
    preset = ATTACHMENT_PRESETS[kind]
    wall_length = state.room.wall_length(side)
    return clamp_attachment(
        WallAttachment(
            id=attachment_id or Utilities.make_id(kind.value, state.all_ids()),
            kind=kind,
            side=side,
            x=max(0.0, wall_length / 2 - preset.width / 2),
            y=preset.elevation,
            width=preset.width,
            height=preset.height,
            outward_offset=preset.outward_offset,
        ),
        state.room,
    )


def add_attachment(
    state: LayoutState,
    attachment: WallAttachment,
    *,
    wall_height: float | None = None,
) -> LayoutState:
    if attachment.id in state.all_ids():
        logger.warning("add_attachment: id %r already in use", attachment.id)
        return state

    attachment = clamp_attachment(attachment, state.room, wall_height=wall_height)
    return state.model_copy(
        update={
            "attachments": [*state.attachments, attachment],
            "selected_attachment_id": attachment.id,
            "selected_item_id": None,
        }
    )


def update_attachment(
    state: LayoutState,
    attachment_id: str,
    updates: Mapping[str, Any],
    *,
    wall_height: float | None = None,
) -> LayoutState:
    """
    Merge `updates` into an attachment, then clamp it onto its wall.

    A door's elevation stays 0 whatever the update says.
    """
    attachment = state.find_attachment(attachment_id)
    if attachment is None:
        return state

    changes = {key: value for key, value in updates.items() if key != "id"}
    # negative offsets clamp to the start of the wall / the floor
    for key in ("x", "y"):
        if isinstance(changes.get(key), (int, float)) and changes[key] < 0:
            changes[key] = 0.0

    merged = _validated_merge(attachment, changes)
    if merged is None:
        return state

    clamped = clamp_attachment(merged, state.room, wall_height=wall_height)
    return state.model_copy(
        update={"attachments": [clamped if a.id == attachment_id else a for a in state.attachments]}
    )


def delete_attachment(state: LayoutState, attachment_id: str) -> LayoutState:
    if state.find_attachment(attachment_id) is None:
        return state
    return state.model_copy(
        update={
            "attachments": [a for a in state.attachments if a.id != attachment_id],
            "selected_attachment_id": (
                None if state.selected_attachment_id == attachment_id else state.selected_attachment_id
            ),
        }
    )


def clamp_attachment(attachment: WallAttachment, room: Room, *, wall_height: float | None = None) -> WallAttachment:
    """
    Keep the attachment on its wall: x in [0, wallLength - width], y >= 0
    (and y <= wall_height - height when a wall height is given).
    """
    max_x = max(0.0, room.wall_length(attachment.side) - attachment.width)
    x = _clamp(attachment.x, 0.0, max_x)

    y = max(0.0, attachment.y)
    if wall_height is not None:
        y = _clamp(y, 0.0, max(0.0, wall_height - attachment.height))
    if attachment.kind == AttachmentKind.DOOR:
        y = 0.0

    if x == attachment.x and y == attachment.y:
        return attachment
    return attachment.model_copy(update={"x": x, "y": y})


# -------------------------
# Selection
# -------------------------
def select(state: LayoutState, item_id: str | None) -> LayoutState:
    """Select an item (or clear with None); always clears the attachment selection."""
    if item_id is not None and state.find_item(item_id) is None:
        return state
    return state.model_copy(update={"selected_item_id": item_id, "selected_attachment_id": None})


def select_attachment(state: LayoutState, attachment_id: str | None) -> LayoutState:
    if attachment_id is not None and state.find_attachment(attachment_id) is None:
        return state
    return state.model_copy(update={"selected_attachment_id": attachment_id, "selected_item_id": None})


# -------------------------
# Helpers
# -------------------------
def _replace_item(state: LayoutState, item_id: str, replace) -> LayoutState:
    if state.find_item(item_id) is None:
        return state
    return state.model_copy(
        update={"items": [replace(item) if item.id == item_id else item for item in state.items]}
    )


def _validated_merge(model: ModelT, updates: Mapping[str, Any]) -> ModelT | None:
    try:
        return type(model).model_validate({**model.model_dump(), **updates})
    except ValidationError as error:
        logger.warning("Rejected update to %s: %s", type(model).__name__, error.errors(include_url=False))
        return None


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))
