"""Quad validation utilities for slicemap.

This module decides whether a Quad read from a descriptor can be used for
geometry, and converts usable quads into integer bounding boxes.

Extents are always derived from the min/max over *all* points rather than
from fixed corner positions, because exported descriptors do not enumerate
corners in a canonical winding order across tool versions.
"""

from __future__ import annotations

import math
from enum import Enum

from slicemap.geometry.primitives import BoundingBox, Quad
from slicemap.geometry.transforms import round_half_away

MIN_QUAD_VERTICES = 4


class QuadFailure(str, Enum):
    """Reason a quad cannot be used for geometry."""

    TOO_FEW_VERTICES = "TooFewVertices"
    DEGENERATE_EXTENT = "DegenerateExtent"


class InvalidQuadError(Exception):
    """Raised when a quad fails validation.

    Attributes:
        quad: The quad that was validated.
        failure: Which check failed.
        message: Description of the validation failure.
    """

    def __init__(self, message: str, *, quad: Quad, failure: QuadFailure) -> None:
        self.quad = quad
        self.failure = failure
        self.message = message
        super().__init__(f"{message} ({failure.value}, vertices={quad.vertex_count})")


class QuadValidator:
    """Validator for quads extracted from a composition descriptor.

    The validator is stateless and operates purely on the inputs provided
    to each method, so one instance can be shared freely.
    """

    def __init__(self, min_vertices: int = MIN_QUAD_VERTICES) -> None:
        self.min_vertices = min_vertices

    def check(self, quad: Quad) -> QuadFailure | None:
        """Classify a quad.

        Args:
            quad: The quad to classify.

        Returns:
            None if the quad is valid, otherwise the first failing check.
        """
        if quad.vertex_count < self.min_vertices:
            return QuadFailure.TOO_FEW_VERTICES
        width, height = quad.width, quad.height
        if not (math.isfinite(width) and math.isfinite(height)):
            return QuadFailure.DEGENERATE_EXTENT
        if width <= 0 or height <= 0:
            return QuadFailure.DEGENERATE_EXTENT
        return None

    def validate(self, quad: Quad, *, strict: bool = True) -> bool:
        """Validate that a quad is usable for geometry.

        Checks that:
        1. the quad has at least ``min_vertices`` points
        2. its width and height over all points are both finite and > 0

        Args:
            quad: The quad to validate.
            strict: If True, raise InvalidQuadError on failure.
                If False, return False instead.

        Returns:
            True if the quad is valid.

        Raises:
            InvalidQuadError: If strict=True and the quad is invalid.
        """
        failure = self.check(quad)
        if failure is None:
            return True
        if strict:
            message = self._describe(quad, failure)
            raise InvalidQuadError(message, quad=quad, failure=failure)
        return False

    def to_bounding_box(self, quad: Quad) -> BoundingBox:
        """Convert a valid quad to an integer axis-aligned bounding box.

        Origin and extents are each rounded half away from zero. A quad whose
        extent rounds down to zero pixels is degenerate as well.

        Args:
            quad: The quad to convert.

        Returns:
            BoundingBox with x=min(x), y=min(y) and the rounded extents.

        Raises:
            InvalidQuadError: If the quad is invalid or rounds to zero size.

        Example:
            >>> quad = Quad.from_tuples([(0, 0), (100.4, 0), (100.4, 50), (0, 50)])
            >>> QuadValidator().to_bounding_box(quad).to_tuple()
            (0, 0, 100, 50)
        """
        self.validate(quad)
        width = round_half_away(quad.width)
        height = round_half_away(quad.height)
        if width <= 0 or height <= 0:
            failure = QuadFailure.DEGENERATE_EXTENT
            raise InvalidQuadError(
                f"Extent rounds to {width}x{height} pixels", quad=quad, failure=failure
            )
        return BoundingBox(
            x=round_half_away(quad.min_x),
            y=round_half_away(quad.min_y),
            width=width,
            height=height,
        )

    def _describe(self, quad: Quad, failure: QuadFailure) -> str:
        if failure is QuadFailure.TOO_FEW_VERTICES:
            return (
                f"Quad has {quad.vertex_count} vertices, "
                f"at least {self.min_vertices} are required"
            )
        extent = f"{quad.width:g}x{quad.height:g}"
        if not (math.isfinite(quad.width) and math.isfinite(quad.height)):
            return f"Quad extent {extent} is not finite"
        return f"Quad extent {extent} is not positive"
