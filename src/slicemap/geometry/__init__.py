"""Geometry module for slicemap.

This package provides coordinate primitives, quad validation, and the
scale transforms used to map a composition's internal canvas onto an
arbitrary output resolution.

Key Components:
    - Primitives: Point, Quad, Size, BoundingBox models
    - Validators: Quad classification and bounding-box conversion
    - Transforms: Per-axis scale factors and deterministic rounding

Example:
    from slicemap.geometry import Quad, QuadValidator

    quad = Quad.from_tuples([(0, 0), (1920, 0), (1920, 1080), (0, 1080)])
    box = QuadValidator().to_bounding_box(quad)  # Raises if invalid
"""

from slicemap.geometry.primitives import BoundingBox, Point, Quad, Size
from slicemap.geometry.transforms import (
    ScaleFactors,
    compute_scale,
    round_half_away,
    scale_box,
)
from slicemap.geometry.validators import (
    MIN_QUAD_VERTICES,
    InvalidQuadError,
    QuadFailure,
    QuadValidator,
)

__all__ = [
    "MIN_QUAD_VERTICES",
    "BoundingBox",
    "InvalidQuadError",
    "Point",
    "Quad",
    "QuadFailure",
    "QuadValidator",
    "ScaleFactors",
    "Size",
    "compute_scale",
    "round_half_away",
    "scale_box",
]
