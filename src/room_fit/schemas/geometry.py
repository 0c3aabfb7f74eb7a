from __future__ import annotations

from pydantic import Field

from .base import StrictModel


class Point2D(StrictModel):
    """2D point in inches, in room space or rotated room space."""
    x: float = Field(description="X coordinate in inches.")
    y: float = Field(description="Y coordinate in inches.")


class Point3D(StrictModel):
    """Grid X, grid Y and vertical elevation, all in inches."""
    x: float = Field(description="Grid X in inches.")
    y: float = Field(description="Grid Y in inches.")
    z: float = Field(default=0.0, description="Elevation above the floor in inches.")


class ScreenPoint(StrictModel):
    """Projected 2D point in pixels."""
    x: float
    y: float


class Rect(StrictModel):
    """
    Axis-aligned rectangle in room space.

    (x, y) is the min corner; width/height extend along +x/+y.
    """
    x: float = Field(description="Min X in inches.")
    y: float = Field(description="Min Y in inches.")
    width: float = Field(ge=0, description="Extent along X in inches.")
    height: float = Field(ge=0, description="Extent along Y in inches.")

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0


class Dimensions(StrictModel):
    """Width/height pair, e.g. the room size after a view rotation."""
    width: float
    height: float
