"""Apply scale factors to resolved slices and emit final Slice records."""

from __future__ import annotations

from collections.abc import Iterable

from slicemap.composition.resolver import SliceResolution
from slicemap.composition.types import DropReason, Slice, SliceDiagnostic
from slicemap.geometry.primitives import BoundingBox
from slicemap.geometry.transforms import ScaleFactors, scale_box


def assemble(
    resolutions: Iterable[SliceResolution],
    scale: ScaleFactors,
) -> tuple[list[Slice], list[SliceDiagnostic]]:
    """Scale every successfully resolved slice into target pixels.

    Input order is preserved. Slices that failed resolution contribute their
    diagnostic; slices whose scaled extent rounds to zero are dropped with
    ``CollapsedAfterScaling`` rather than emitted as empty render targets, and
    slices whose scaled coordinates overflow are dropped with ``ScaleOverflow``.

    Args:
        resolutions: Per-region results in source order.
        scale: Factors from internal to target pixels.

    Returns:
        (slices, diagnostics), both in source order.
    """
    slices: list[Slice] = []
    diagnostics: list[SliceDiagnostic] = []

    for resolution in resolutions:
        record = resolution.record
        if resolution.box is None:
            if resolution.diagnostic is not None:
                diagnostics.append(resolution.diagnostic)
            continue

        try:
            x, y, width, height = scale_box(resolution.box, scale)
        except (ValueError, OverflowError) as e:
            diagnostics.append(
                SliceDiagnostic(
                    slice_id=record.unique_id,
                    slice_name=record.name,
                    reason=DropReason.SCALE_OVERFLOW,
                    detail=f"Scaled box is not representable: {e}",
                )
            )
            continue

        if width == 0 or height == 0:
            diagnostics.append(
                SliceDiagnostic(
                    slice_id=record.unique_id,
                    slice_name=record.name,
                    reason=DropReason.COLLAPSED_AFTER_SCALING,
                    detail=(
                        f"{resolution.box.width}x{resolution.box.height} "
                        f"scaled by ({scale.x:g}, {scale.y:g}) is {width}x{height}"
                    ),
                )
            )
            continue

        slices.append(
            Slice(
                id=record.unique_id,
                name=record.name,
                input_quad=record.input_quad,
                output_quad=record.output_quad,
                resolved_box=BoundingBox(x=x, y=y, width=width, height=height),
            )
        )

    return slices, diagnostics
