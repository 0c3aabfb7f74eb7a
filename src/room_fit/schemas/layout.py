from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import Field, model_validator

from .base import StrictModel
from .geometry import Rect

# ---------------------------------------------------------------------
# Helper types
# ---------------------------------------------------------------------

QuarterTurn = Literal[0, 90, 180, 270]
"""Rotation in degrees, restricted to multiples of 90."""

ViewAngle = QuarterTurn
"""Display rotation of the whole room, independent of any item's own rotation."""

ItemId = Annotated[
    str,
    Field(
        min_length=1,
        max_length=64,
        description="Stable identifier, unique within a layout.",
    ),
]

Inches = Annotated[float, Field(gt=0, description="Positive length in inches.")]


class WallSide(str, Enum):
    """
    Which wall of the rectangular room a fixture hangs on:

    - front: the y = 0 wall
    - back: the y = room.height wall
    - left: the x = 0 wall
    - right: the x = room.width wall
    """
    FRONT = "front"
    BACK = "back"
    LEFT = "left"
    RIGHT = "right"

    @property
    def runs_along_width(self) -> bool:
        return self in (WallSide.FRONT, WallSide.BACK)


class AttachmentKind(str, Enum):
    """Category of a wall-mounted fixture."""
    WINDOW = "window"
    DOOR = "door"
    SHELF = "shelf"


# ---------------------------------------------------------------------
# Room
# ---------------------------------------------------------------------

class Room(StrictModel):
    """The room envelope: an axis-aligned rectangle with its origin at one corner."""
    width: Inches = Field(description="Extent along X in inches.")
    height: Inches = Field(description="Extent along Y in inches (depth of the floor plan).")

    def wall_length(self, side: WallSide) -> float:
        return self.width if side.runs_along_width else self.height


# ---------------------------------------------------------------------
# Furniture
# ---------------------------------------------------------------------

class FurnitureItem(StrictModel):
    """
    A placed piece of furniture.

    Important:
    - (x, y) is the unrotated top-left corner in room space.
    - width/height are the footprint before the item's own rotation.
    - rotation 90/270 swaps the effective footprint.
    """
    id: ItemId
    kind: str = Field(min_length=1, description="Furniture category, e.g. 'bed' or 'desk'.")
    width: Inches = Field(description="Footprint along local X before rotation.")
    height: Inches = Field(description="Footprint along local Y before rotation.")
    x: float = Field(default=0.0, description="Top-left X in inches.")
    y: float = Field(default=0.0, description="Top-left Y in inches.")
    rotation: QuarterTurn = 0
    vertical_extent: Inches | None = Field(default=None, description="Render height in inches.")
    color: str | None = Field(default=None, description="Hex color, e.g. '#1e293b'.")
    image_ref: str | None = Field(default=None, description="Opaque reference to a raster texture.")
    procedural_ref: str | None = Field(default=None, description="Opaque reference to a generated model.")

    @property
    def is_rotated(self) -> bool:
        return self.rotation in (90, 270)

    @property
    def effective_width(self) -> float:
        return self.height if self.is_rotated else self.width

    @property
    def effective_height(self) -> float:
        return self.width if self.is_rotated else self.height

    def rect(self) -> Rect:
        return self.rect_at(self.x, self.y)

    def rect_at(self, x: float, y: float) -> Rect:
        """Effective rectangle as if the item stood at (x, y)."""
        return Rect(x=x, y=y, width=self.effective_width, height=self.effective_height)


# ---------------------------------------------------------------------
# Wall attachments
# ---------------------------------------------------------------------

class WallAttachment(StrictModel):
    """
    A window, door or shelf anchored to one wall.

    x is the offset along the wall, y the height of its bottom edge off the floor.
    Doors always stand on the floor (y == 0).
    """
    id: ItemId
    kind: AttachmentKind
    side: WallSide
    x: float = Field(default=0.0, ge=0, description="Offset along the wall in inches.")
    y: float = Field(default=0.0, ge=0, description="Elevation off the floor in inches.")
    width: Inches = Field(description="Extent along the wall.")
    height: Inches = Field(description="Vertical extent.")
    outward_offset: float | None = Field(
        default=None,
        ge=0,
        description="How far the fixture sticks out into the room (shelves).",
    )

    @model_validator(mode="before")
    @classmethod
    def door_stands_on_floor(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("kind") in (AttachmentKind.DOOR, AttachmentKind.DOOR.value):
            return {**data, "y": 0.0}
        return data


# ---------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------

class LayoutState(StrictModel):
    """
    Everything a layout consists of: the room, its furniture, its wall fixtures
    and the current selection. At most one of the two selection fields is set.
    """
    room: Room
    items: list[FurnitureItem] = Field(default_factory=list)
    attachments: list[WallAttachment] = Field(default_factory=list)
    selected_item_id: str | None = None
    selected_attachment_id: str | None = None

    @model_validator(mode="before")
    @classmethod
    def selection_is_consistent(cls, data: Any) -> Any:
        """
        Drop selections that point at nothing; when both are set the item
        selection wins.
        """
        if not isinstance(data, dict):
            return data

        item_ids = _entry_ids(data.get("items"))
        attachment_ids = _entry_ids(data.get("attachments"))

        # non-string values are left for field validation to reject
        selected_item_id = data.get("selected_item_id")
        if isinstance(selected_item_id, str) and selected_item_id not in item_ids:
            selected_item_id = None
        selected_attachment_id = data.get("selected_attachment_id")
        if isinstance(selected_attachment_id, str) and (
            selected_item_id is not None or selected_attachment_id not in attachment_ids
        ):
            selected_attachment_id = None

        return {**data, "selected_item_id": selected_item_id, "selected_attachment_id": selected_attachment_id}

    @model_validator(mode="after")
    def ids_are_unique(self) -> "LayoutState":
        seen_ids: set[str] = set()
        for entry in [*self.items, *self.attachments]:
            if entry.id in seen_ids:
                raise ValueError(f"Duplicate id in layout: {entry.id!r}")
            seen_ids.add(entry.id)
        return self

    def find_item(self, item_id: str) -> FurnitureItem | None:
        return next((item for item in self.items if item.id == item_id), None)

    def find_attachment(self, attachment_id: str) -> WallAttachment | None:
        return next((a for a in self.attachments if a.id == attachment_id), None)

    def all_ids(self) -> set[str]:
        return {item.id for item in self.items} | {a.id for a in self.attachments}


def _entry_ids(entries: Any) -> set[str]:
    if not isinstance(entries, (list, tuple)):
        return set()
    entry_ids: set[str] = set()
    for entry in entries:
        entry_id = entry.get("id") if isinstance(entry, dict) else getattr(entry, "id", None)
        if isinstance(entry_id, str):
            entry_ids.add(entry_id)
    return entry_ids
