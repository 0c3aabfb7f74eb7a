from __future__ import annotations
from dataclasses import dataclass
from shapely.geometry import Polygon, box

from room_fit.schemas.geometry import Rect
from room_fit.schemas.layout import FurnitureItem, Room


@dataclass(frozen=True)
class ShapelyGeometryAdapter:
    """
    Converts our Pydantic layout objects into Shapely geometry.
    """

    def create_room_polygon(self, room: Room) -> Polygon:
        """Room floor in room coordinates (inches), origin at (0, 0)."""
        return box(0.0, 0.0, room.width, room.height)

    def create_rect_polygon(self, rect: Rect) -> Polygon:
        return box(rect.x, rect.y, rect.max_x, rect.max_y)

    def create_item_polygon(self, item: FurnitureItem) -> Polygon:
        """
        Item footprint in room coordinates (inches).

        The footprint is anchored at the item's top-left corner, so a 90/270
        rotation only swaps the extents; no shapely rotation is involved.
        """
        return self.create_rect_polygon(item.rect())

    def rect_is_inside_room(self, room_polygon: Polygon, rect_polygon: Polygon) -> bool:
        """
        True if the rectangle is fully inside (or on) the room boundary.
        Uses 'covers' so touching the boundary is allowed.
        """
        return room_polygon.covers(rect_polygon)

    def rects_overlap(self, a: Polygon, b: Polygon) -> bool:
        """
        Overlap = intersects AND NOT touches: shared edges or corners do not count.
        """
        return a.intersects(b) and not a.touches(b)
