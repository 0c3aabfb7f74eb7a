"""Pytest configuration and shared fixtures for room-fit tests."""

from __future__ import annotations

import pytest

from room_fit.core.settings import Settings
from room_fit.schemas.layout import (
    AttachmentKind,
    FurnitureItem,
    LayoutState,
    Room,
    WallAttachment,
    WallSide,
)


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: tests that drive the whole session or the CLI")


# =============================================================================
# Layout fixtures
# =============================================================================


@pytest.fixture
def square_room() -> Room:
    """A 100 x 100 inch room."""
    return Room(width=100, height=100)


@pytest.fixture
def two_item_layout(square_room: Room) -> LayoutState:
    """Two 10 x 10 items well apart inside a 100 x 100 room."""
    return LayoutState(
        room=square_room,
        items=[
            FurnitureItem(id="a", kind="table", width=10, height=10, x=0, y=0),
            FurnitureItem(id="b", kind="table", width=10, height=10, x=30, y=0),
        ],
    )


@pytest.fixture
def furnished_layout() -> LayoutState:
    """A non-square room with furniture, every attachment kind and a selection."""
    return LayoutState(
        room=Room(width=108, height=132),
        items=[
            FurnitureItem(
                id="bed",
                kind="bed",
                width=60,
                height=80,
                x=10,
                y=10,
                vertical_extent=20,
                color="#1e293b",
                image_ref="images/bed.png",
            ),
            FurnitureItem(id="desk", kind="desk", width=24, height=48, x=80, y=10, rotation=90, procedural_ref="gen-7"),
        ],
        attachments=[
            WallAttachment(id="window", kind=AttachmentKind.WINDOW, side=WallSide.BACK, x=30, y=36, width=36, height=48),
            WallAttachment(id="door", kind=AttachmentKind.DOOR, side=WallSide.LEFT, x=12, width=32, height=80),
            WallAttachment(
                id="shelf",
                kind=AttachmentKind.SHELF,
                side=WallSide.RIGHT,
                x=40,
                y=48,
                width=36,
                height=2,
                outward_offset=12,
            ),
        ],
        selected_item_id="bed",
    )


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Settings:
    """Default settings, isolated from any .env file in the working directory."""
    monkeypatch.chdir(tmp_path)
    return Settings()
