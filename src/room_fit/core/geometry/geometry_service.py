from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from shapely.geometry import Polygon

from room_fit.core.geometry.shapely_adapter import ShapelyGeometryAdapter
from room_fit.schemas.geometry import Rect
from room_fit.schemas.layout import FurnitureItem, Room

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeometryService:
    """
    Bounds and pairwise overlap checks over axis-aligned item rectangles.

    Results are advisory: nothing here blocks an edit.
    """
    geometry: ShapelyGeometryAdapter = field(default_factory=ShapelyGeometryAdapter)

    # -------------------------
    # Validation entrypoints
    # -------------------------
    def compute_invalid_ids(
        self,
        room: Room,
        items: Iterable[FurnitureItem],
        moving_id: str | None = None,
        moving_rect: Rect | None = None,
    ) -> set[str]:
        """
        Ids of items that leave the room or overlap another item.

        When `moving_id` and `moving_rect` are given, that item is evaluated at
        `moving_rect` instead of its stored position (live drag feedback).
        """
        item_polygons = self._create_item_polygons(items, moving_id, moving_rect)
        room_polygon = self.geometry.create_room_polygon(room)

        invalid_ids: set[str] = set()

        for item_id, item_polygon in item_polygons:
            if not self.geometry.rect_is_inside_room(room_polygon, item_polygon):
                invalid_ids.add(item_id)

        for i in range(len(item_polygons)):
            id_a, polygon_a = item_polygons[i]
            for j in range(i + 1, len(item_polygons)):
                id_b, polygon_b = item_polygons[j]
                if self.geometry.rects_overlap(polygon_a, polygon_b):
                    invalid_ids.add(id_a)
                    invalid_ids.add(id_b)

        return invalid_ids

    def describe_issues(self, room: Room, items: Iterable[FurnitureItem]) -> list[str]:
        """Human-readable list of every bounds and overlap problem, for reports."""
        item_list = list(items)
        item_polygons = self._create_item_polygons(item_list, None, None)
        room_polygon = self.geometry.create_room_polygon(room)

        issues: list[str] = []
        issues += self._collect_bounds_issues(room, room_polygon, item_list, item_polygons)
        issues += self._collect_overlap_issues(item_polygons)
        return issues

    # -------------------------
    # Issues
    # -------------------------
    def _collect_bounds_issues(
        self,
        room: Room,
        room_polygon: Polygon,
        items: list[FurnitureItem],
        item_polygons: list[tuple[str, Polygon]],
    ) -> list[str]:
        issues: list[str] = []

        for item, (item_id, item_polygon) in zip(items, item_polygons):
            if self.geometry.rect_is_inside_room(room_polygon, item_polygon):
                continue

            min_x, min_y, max_x, max_y = item_polygon.bounds
            issues.append(
                f"Item '{item_id}' ({item.kind}) spans x=[{min_x:g}, {max_x:g}], y=[{min_y:g}, {max_y:g}] "
                f"outside the {room.width:g} x {room.height:g} room."
            )

        return issues

    def _collect_overlap_issues(self, item_polygons: list[tuple[str, Polygon]]) -> list[str]:
        issues: list[str] = []

        for i in range(len(item_polygons)):
            id_a, polygon_a = item_polygons[i]
            for j in range(i + 1, len(item_polygons)):
                id_b, polygon_b = item_polygons[j]
                if not self.geometry.rects_overlap(polygon_a, polygon_b):
                    continue

                overlap_area = polygon_a.intersection(polygon_b).area
                issues.append(f"Items '{id_a}' and '{id_b}' overlap by {overlap_area:g} sq in.")

        return issues

    # -------------------------
    # Helpers
    # -------------------------
    def _create_item_polygons(
        self,
        items: Iterable[FurnitureItem],
        moving_id: str | None,
        moving_rect: Rect | None,
    ) -> list[tuple[str, Polygon]]:
        if moving_rect is not None and moving_rect.is_degenerate:
            logger.warning("Ignoring degenerate hypothetical rect for %r: %s", moving_id, moving_rect)
            moving_rect = None

        item_polygons: list[tuple[str, Polygon]] = []
        for item in items:
            if moving_rect is not None and item.id == moving_id:
                item_polygons.append((item.id, self.geometry.create_rect_polygon(moving_rect)))
            else:
                item_polygons.append((item.id, self.geometry.create_item_polygon(item)))
        return item_polygons


def compute_invalid_ids(
    room: Room,
    items: Iterable[FurnitureItem],
    moving_id: str | None = None,
    moving_rect: Rect | None = None,
) -> set[str]:
    return _default_service.compute_invalid_ids(room, items, moving_id, moving_rect)


_default_service = GeometryService()
