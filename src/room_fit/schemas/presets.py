from __future__ import annotations

from pydantic import Field

from .base import StrictModel
from .layout import AttachmentKind, Inches


class FurniturePreset(StrictModel):
    """A catalogue entry that `add_item` turns into a FurnitureItem."""
    id: str = Field(min_length=1)
    label: str = Field(min_length=1, description="Human-readable name.")
    kind: str = Field(min_length=1)
    width: Inches
    height: Inches
    vertical_extent: Inches | None = Field(default=None, description="Visual height in inches.")
    color: str | None = None


class AttachmentPreset(StrictModel):
    """Default size and elevation for a new wall fixture."""
    kind: AttachmentKind
    width: Inches
    height: Inches
    elevation: float = Field(default=0.0, ge=0)
    outward_offset: float | None = Field(default=None, ge=0)


_NAVY = "#1e293b"
_SLATE = "#334155"
_SLATE_LIGHT = "#475569"
_GREY = "#94a3b8"
_STORAGE_GREY = "#64748b"

FURNITURE_PRESETS: list[FurniturePreset] = [
    FurniturePreset(id="twin-bed", label="Twin Bed", kind="bed", width=38, height=75, vertical_extent=20, color=_NAVY),
    FurniturePreset(id="full-bed", label="Full Bed", kind="bed", width=54, height=75, vertical_extent=20, color=_NAVY),
    FurniturePreset(id="queen-bed", label="Queen Bed", kind="bed", width=60, height=80, vertical_extent=20, color=_NAVY),
    FurniturePreset(id="king-bed", label="King Bed", kind="bed", width=76, height=80, vertical_extent=20, color=_NAVY),
    FurniturePreset(id="desk-small", label="Small Desk", kind="desk", width=24, height=48, vertical_extent=30, color=_SLATE),
    FurniturePreset(id="desk-large", label="Large Desk", kind="desk", width=30, height=60, vertical_extent=30, color=_SLATE),
    FurniturePreset(id="couch-loveseat", label="Loveseat", kind="couch", width=36, height=60, vertical_extent=24, color=_SLATE_LIGHT),
    FurniturePreset(id="couch-3seater", label="3-Seat Couch", kind="couch", width=36, height=84, vertical_extent=24, color=_SLATE_LIGHT),
    FurniturePreset(id="nightstand", label="Nightstand", kind="table", width=18, height=18, vertical_extent=24, color=_GREY),
    FurniturePreset(id="dresser", label="Dresser", kind="storage", width=20, height=60, vertical_extent=40, color=_STORAGE_GREY),
    FurniturePreset(id="bed", label="Bed", kind="bed", width=60, height=80, vertical_extent=20, color=_NAVY),
    FurniturePreset(id="desk", label="Desk", kind="desk", width=24, height=48, vertical_extent=30, color=_SLATE),
    FurniturePreset(id="couch", label="Couch", kind="couch", width=36, height=60, vertical_extent=24, color=_SLATE_LIGHT),
    FurniturePreset(id="table", label="Table", kind="table", width=18, height=18, vertical_extent=24, color=_GREY),
    FurniturePreset(id="storage", label="Storage", kind="storage", width=20, height=60, vertical_extent=40, color=_STORAGE_GREY),
    FurniturePreset(id="chair", label="Chair", kind="chair", width=18, height=18, vertical_extent=24, color=_GREY),
    FurniturePreset(id="lamp", label="Lamp", kind="lamp", width=18, height=18, vertical_extent=24, color=_GREY),
    FurniturePreset(id="plant", label="Plant", kind="plant", width=18, height=18, vertical_extent=24, color=_GREY),
]

ATTACHMENT_PRESETS: dict[AttachmentKind, AttachmentPreset] = {
    AttachmentKind.WINDOW: AttachmentPreset(kind=AttachmentKind.WINDOW, width=36, height=48, elevation=36),
    AttachmentKind.DOOR: AttachmentPreset(kind=AttachmentKind.DOOR, width=32, height=80),
    AttachmentKind.SHELF: AttachmentPreset(kind=AttachmentKind.SHELF, width=36, height=2, elevation=48, outward_offset=12),
}


def find_furniture_preset(preset_id: str) -> FurniturePreset | None:
    return next((preset for preset in FURNITURE_PRESETS if preset.id == preset_id), None)
