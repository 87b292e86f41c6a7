"""Scale and rounding transforms for slicemap.

Coordinate Systems:
    - Internal: the authoring canvas the descriptor's output quads live in
    - Target: the output resolution a collaborator renders at

Transform Direction Conventions:
    - internal -> target: multiply by the per-axis scale factor

Rounding is half away from zero everywhere (2.5 -> 3, -2.5 -> -3), so
pixel placement does not depend on Python's banker's rounding.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, Field

from slicemap.geometry.primitives import BoundingBox, Size


class ScaleFactors(BaseModel, frozen=True):
    """Independent per-axis scale factors from internal to target pixels.

    Aspect ratio is never enforced: anisotropic scaling between an authoring
    canvas and an arbitrary output resolution is expected.

    Attributes:
        x: Horizontal factor (target width / internal width).
        y: Vertical factor (target height / internal height).
    """

    x: float = Field(1.0, gt=0, allow_inf_nan=False)
    y: float = Field(1.0, gt=0, allow_inf_nan=False)

    @property
    def is_identity(self) -> bool:
        return self.x == 1.0 and self.y == 1.0

    @classmethod
    def identity(cls) -> ScaleFactors:
        return cls(x=1.0, y=1.0)


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero.

    Args:
        value: A finite float.

    Returns:
        The rounded integer.

    Raises:
        ValueError: If value is NaN or infinite.
    """
    if not math.isfinite(value):
        raise ValueError(f"Cannot round non-finite value {value!r}")
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def compute_scale(internal: Size, target: Size) -> ScaleFactors | None:
    """Compute scale factors from the internal resolution to a target.

    Args:
        internal: Inferred (or declared) authoring canvas size.
        target: Output resolution to scale to.

    Returns:
        ScaleFactors, or None when the internal size is degenerate or the
        ratio is not a finite positive number. Callers substitute identity.
    """
    if internal.is_degenerate or target.is_degenerate:
        return None
    scale_x = target.width / internal.width
    scale_y = target.height / internal.height
    if not (math.isfinite(scale_x) and math.isfinite(scale_y)):
        return None
    return ScaleFactors(x=scale_x, y=scale_y)


def scale_box(box: BoundingBox, scale: ScaleFactors) -> tuple[int, int, int, int]:
    """Scale a bounding box and round each component.

    The result is returned as a plain tuple because a box can collapse to a
    zero extent after scaling, which a BoundingBox cannot represent.

    Args:
        box: Box in internal pixels.
        scale: Per-axis factors.

    Returns:
        (x, y, width, height) in target pixels.
    """
    return (
        round_half_away(box.x * scale.x),
        round_half_away(box.y * scale.y),
        round_half_away(box.width * scale.x),
        round_half_away(box.height * scale.y),
    )
