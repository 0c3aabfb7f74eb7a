from __future__ import annotations

from typing import Iterable

from room_fit.core.view.transform import rotate_room_point, wall_to_world
from room_fit.schemas.layout import FurnitureItem, Room, ViewAngle, WallAttachment


def item_depth(item: FurnitureItem, view_angle: ViewAngle, room: Room) -> float:
    """Painter's rank: rotatedX + rotatedY of the item's origin. Lower = farther."""
    rotated = rotate_room_point(item.x, item.y, view_angle, room.width, room.height)
    return rotated.x + rotated.y


def attachment_depth(attachment: WallAttachment, view_angle: ViewAngle, room: Room) -> float:
    anchor = wall_to_world(attachment.side, attachment.x, attachment.y, view_angle, room.width, room.height)
    return anchor.x + anchor.y


def sort_items_by_depth(items: Iterable[FurnitureItem], view_angle: ViewAngle, room: Room) -> list[FurnitureItem]:
    """Back-to-front draw order. `sorted` is stable, so equal ranks keep insertion order."""
    return sorted(items, key=lambda item: item_depth(item, view_angle, room))


def attachment_is_occluded(
    attachment: WallAttachment,
    items: Iterable[FurnitureItem],
    view_angle: ViewAngle,
    room: Room,
    buffer: float = 10.0,
) -> bool:
    """True when some item sits more than `buffer` inches in front of the attachment."""
    threshold = attachment_depth(attachment, view_angle, room) + buffer
    return any(item_depth(item, view_angle, room) > threshold for item in items)


def occluded_attachment_ids(
    attachments: Iterable[WallAttachment],
    items: Iterable[FurnitureItem],
    view_angle: ViewAngle,
    room: Room,
    buffer: float = 10.0,
) -> set[str]:
    item_list = list(items)
    return {
        attachment.id
        for attachment in attachments
        if attachment_is_occluded(attachment, item_list, view_angle, room, buffer)
    }
