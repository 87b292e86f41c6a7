"""Slice resolution and internal-resolution inference.

Each region is resolved independently into either a bounding box or a
drop diagnostic, so one malformed region never affects its siblings.
Functions here hold no shared mutable state; results can be computed in
any order and are keyed back to source order by the caller.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from slicemap.composition.types import (
    CompositionDescriptor,
    DropReason,
    RegionRecord,
    SliceDiagnostic,
    ViewMode,
)
from slicemap.geometry.primitives import BoundingBox, Size
from slicemap.geometry.validators import InvalidQuadError, QuadValidator

_default_validator = QuadValidator()


@dataclass(frozen=True)
class SliceResolution:
    """Outcome of resolving one region: a box or a diagnostic, never both."""

    record: RegionRecord
    box: BoundingBox | None = None
    diagnostic: SliceDiagnostic | None = None

    @property
    def ok(self) -> bool:
        return self.box is not None


def resolve_slice(
    record: RegionRecord,
    view_mode: ViewMode,
    validator: QuadValidator | None = None,
) -> SliceResolution:
    """Resolve one region's box in the requested view.

    Only the quad selected by ``view_mode`` is validated; the other quad
    may be malformed without affecting the result.

    Args:
        record: Region read from the descriptor.
        view_mode: Selects the input or output quad.
        validator: Quad validator to use (a shared default if None).

    Returns:
        SliceResolution with the unscaled box, or with a diagnostic naming
        the slice and why its active quad is unusable.
    """
    validator = validator or _default_validator
    quad = record.quad_for(view_mode)
    try:
        box = validator.to_bounding_box(quad)
    except InvalidQuadError as e:
        diagnostic = SliceDiagnostic(
            slice_id=record.unique_id,
            slice_name=record.name,
            reason=DropReason.from_quad_failure(e.failure),
            detail=f"{view_mode.value} quad: {e.message}",
        )
        return SliceResolution(record=record, diagnostic=diagnostic)
    return SliceResolution(record=record, box=box)


def infer_internal_resolution(boxes: Iterable[BoundingBox]) -> Size:
    """Compute the extent covering every box, measured from the origin.

    Args:
        boxes: Valid output-view boxes.

    Returns:
        Size(max right edge, max bottom edge). Size(0, 0) when there are no
        boxes, or when every box lies left of / above the origin.

    Example:
        >>> boxes = [BoundingBox(x=0, y=0, width=1920, height=1080),
        ...          BoundingBox(x=1920, y=0, width=1920, height=1080)]
        >>> str(infer_internal_resolution(boxes))
        '3840x1080'
    """
    width = 0
    height = 0
    for box in boxes:
        width = max(width, box.right)
        height = max(height, box.bottom)
    return Size(width=width, height=height)


def infer_from_descriptor(
    descriptor: CompositionDescriptor,
    validator: QuadValidator | None = None,
) -> Size:
    """Infer the authoring canvas of a descriptor.

    Always reads the output quads: the output side defines the authoring
    canvas regardless of which view a caller is resolving.
    """
    resolutions = (
        resolve_slice(record, ViewMode.OUTPUT, validator)
        for record in descriptor.slices
    )
    return infer_internal_resolution(r.box for r in resolutions if r.box is not None)
