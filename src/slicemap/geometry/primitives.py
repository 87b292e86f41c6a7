"""Geometry primitives for slicemap.

This module provides immutable Pydantic models for representing points,
quads, sizes, and bounding boxes in composition space. All coordinates
follow the convention where (0, 0) is the top-left corner, x grows
rightward and y grows downward. Composition coordinates may be negative
(a region can sit partly off-canvas), so only extents are constrained.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Self

from pydantic import BaseModel, Field, model_validator


class Point(BaseModel, frozen=True):
    """A 2D point in composition coordinates.

    Attributes:
        x: Horizontal position.
        y: Vertical position.
    """

    x: float = Field(..., description="X coordinate")
    y: float = Field(..., description="Y coordinate")


class Quad(BaseModel, frozen=True):
    """An ordered sequence of corner points for one region.

    A Quad is only a container: it may hold any number of points, including
    none, and makes no promise about winding order. Whether it is usable
    for geometry is decided by ``QuadValidator``.

    Attributes:
        points: Corner points in the order the descriptor listed them.
    """

    points: tuple[Point, ...] = ()

    @property
    def vertex_count(self) -> int:
        """Return the number of points in the quad."""
        return len(self.points)

    @property
    def is_empty(self) -> bool:
        """Return True if the quad has no points at all."""
        return not self.points

    @property
    def min_x(self) -> float:
        return min(p.x for p in self.points)

    @property
    def max_x(self) -> float:
        return max(p.x for p in self.points)

    @property
    def min_y(self) -> float:
        return min(p.y for p in self.points)

    @property
    def max_y(self) -> float:
        return max(p.y for p in self.points)

    @property
    def width(self) -> float:
        """Horizontal extent over all points (0.0 for an empty quad)."""
        if not self.points:
            return 0.0
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        """Vertical extent over all points (0.0 for an empty quad)."""
        if not self.points:
            return 0.0
        return self.max_y - self.min_y

    @classmethod
    def from_tuples(cls, coords: Sequence[tuple[float, float]]) -> Self:
        """Create a Quad from a sequence of (x, y) tuples."""
        return cls(points=tuple(Point(x=x, y=y) for x, y in coords))


class Size(BaseModel, frozen=True):
    """A 2D size representing width and height.

    Both dimensions are non-negative. A size with a zero dimension is
    *degenerate*: it is a legal result of inference over an empty
    composition but can never be used as a scale source.

    Attributes:
        width: Horizontal extent in pixels.
        height: Vertical extent in pixels.
    """

    width: int = Field(..., ge=0, description="Width in pixels")
    height: int = Field(..., ge=0, description="Height in pixels")

    @property
    def is_degenerate(self) -> bool:
        """Return True if either dimension is zero."""
        return self.width == 0 or self.height == 0

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


class BoundingBox(BaseModel, frozen=True):
    """An axis-aligned integer box in composition or output pixels.

    The box is defined as:
    - Top-left: (x, y)
    - Bottom-right: (x + width, y + height) [exclusive]

    Attributes:
        x: Left edge X coordinate.
        y: Top edge Y coordinate.
        width: Horizontal extent in pixels (> 0).
        height: Vertical extent in pixels (> 0).
    """

    x: int = Field(..., description="Left edge X coordinate")
    y: int = Field(..., description="Top edge Y coordinate")
    width: int = Field(..., gt=0, description="Width in pixels")
    height: int = Field(..., gt=0, description="Height in pixels")

    @property
    def right(self) -> int:
        """Return the X coordinate of the right edge (exclusive)."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Return the Y coordinate of the bottom edge (exclusive)."""
        return self.y + self.height

    def to_tuple(self) -> tuple[int, int, int, int]:
        """Convert to (x, y, width, height) tuple."""
        return (self.x, self.y, self.width, self.height)

    @model_validator(mode="after")
    def _validate_dimensions(self) -> Self:
        """Ensure width and height remain positive after validation."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError("BoundingBox dimensions must be positive")
        return self
