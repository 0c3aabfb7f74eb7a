from room_fit.core.geometry.shapely_adapter import ShapelyGeometryAdapter
from room_fit.core.geometry.geometry_service import GeometryService
from room_fit.core.view.transform import VIEW_ANGLES, project_to_screen, rotate_room_point
from room_fit.schemas.layout import FurnitureItem, LayoutState, Room


def main() -> None:
    layout = LayoutState(
        room=Room(width=108, height=132),
        items=[
            FurnitureItem(id="bed_1", kind="bed", width=60, height=80, x=10, y=10),
            FurnitureItem(id="desk_1", kind="desk", width=24, height=48, x=80, y=10, rotation=90),
        ],
    )

    adapter = ShapelyGeometryAdapter()
    service = GeometryService(geometry=adapter)

    # Schema test: can serialize cleanly
    print("Schema OK. JSON length:", len(layout.model_dump_json(indent=2)))

    # Geometry tests
    room_polygon = adapter.create_room_polygon(layout.room)
    print("Room area:", room_polygon.area)

    for item in layout.items:
        inside = adapter.rect_is_inside_room(room_polygon, adapter.create_item_polygon(item))
        print(f"{item.id} inside room:", inside)

    print("Invalid ids:", sorted(service.compute_invalid_ids(layout.room, layout.items)))
    for issue in service.describe_issues(layout.room, layout.items):
        print(" -", issue)

    # View tests: where the bed's origin lands for each view angle
    bed = layout.items[0]
    for angle in VIEW_ANGLES:
        rotated = rotate_room_point(bed.x, bed.y, angle, layout.room.width, layout.room.height)
        screen = project_to_screen(rotated.x, rotated.y, 0.0, 5.0)
        print(f"{angle:>3} deg: room ({bed.x:g}, {bed.y:g}) -> screen ({screen.x:g}, {screen.y:g})")


if __name__ == "__main__":
    main()
