"""The resolution pipeline.

``resolve`` is a pure function of its arguments::

    descriptor -> resolve_slice (per region, active view)
               -> infer_internal_resolution (output view, all regions)
               -> compute_scale
               -> assemble
               -> ResolvedComposition

Re-running it with another view mode or target size always produces a
fresh result from the same immutable descriptor. ``resolve_cached`` adds
memoization for callers that re-resolve on every UI change.
"""

from __future__ import annotations

import functools

from slicemap.composition.assembler import assemble
from slicemap.composition.constants import FALLBACK_SIZE
from slicemap.composition.resolver import (
    SliceResolution,
    infer_internal_resolution,
    resolve_slice,
)
from slicemap.composition.types import (
    CompositionDescriptor,
    CompositionIssue,
    ResolvedComposition,
    ViewMode,
)
from slicemap.geometry.primitives import BoundingBox, Size
from slicemap.geometry.transforms import ScaleFactors, compute_scale
from slicemap.geometry.validators import QuadValidator
from slicemap.utils.logging import get_logger

logger = get_logger(__name__)


def resolve(
    descriptor: CompositionDescriptor,
    view_mode: ViewMode = ViewMode.OUTPUT,
    target_size: Size | None = None,
    *,
    fallback_size: Size = FALLBACK_SIZE,
    validator: QuadValidator | None = None,
) -> ResolvedComposition:
    """Resolve a descriptor into scaled integer slice boxes.

    The scale source is always the internal resolution inferred from the
    output quads. The scale target is, in order of preference, the explicit
    ``target_size``, the descriptor's declared output size, or the internal
    resolution itself (identity).

    Args:
        descriptor: Parsed composition.
        view_mode: Which quad of each region produces its box.
        target_size: Output resolution to scale to, or None.
        fallback_size: Output size used when nothing else is known.
        validator: Quad validator to use (a shared default if None).

    Returns:
        ResolvedComposition with surviving slices in source order and one
        diagnostic per dropped region. Never contains non-finite numbers.

    Raises:
        ValueError: If ``target_size`` has a zero dimension.
    """
    if target_size is not None and target_size.is_degenerate:
        raise ValueError(f"Target size must be positive, got {target_size}")

    log = logger.bind(composition=descriptor.name, view_mode=view_mode.value)
    issues: list[CompositionIssue] = []
    if not descriptor.slices:
        issues.append(CompositionIssue.NO_REGIONS_FOUND)
        log.warning("No regions found")

    active: list[SliceResolution] = []
    output_boxes: list[BoundingBox] = []
    for record in descriptor.slices:
        output = resolve_slice(record, ViewMode.OUTPUT, validator)
        if output.box is not None:
            output_boxes.append(output.box)
        if view_mode is ViewMode.OUTPUT:
            active.append(output)
        else:
            active.append(resolve_slice(record, view_mode, validator))

    internal = infer_internal_resolution(output_boxes)
    requested = target_size or descriptor.declared_output_size

    scale: ScaleFactors | None = None
    if internal.is_degenerate:
        output_size = requested or fallback_size
    else:
        output_size = requested or internal
        scale = compute_scale(internal, output_size)

    if scale is None:
        issues.append(CompositionIssue.DEGENERATE_INTERNAL_RESOLUTION)
        log.warning(
            "Internal resolution is degenerate, using identity scale",
            internal=str(internal),
        )
        scale = ScaleFactors.identity()

    slices, dropped = assemble(active, scale)
    diagnostics = [*descriptor.rejected, *dropped]

    for diagnostic in dropped:
        log.warning(
            "Slice dropped",
            slice_id=diagnostic.slice_id,
            reason=diagnostic.reason.value,
            detail=diagnostic.detail,
        )

    result = ResolvedComposition(
        name=descriptor.name,
        view_mode=view_mode,
        output_size=output_size,
        internal_resolution=internal,
        scale=scale,
        slices=tuple(slices),
        diagnostics=tuple(diagnostics),
        issues=tuple(issues),
        total_regions=descriptor.total_regions,
    )
    log.info(
        result.summary(),
        internal=str(internal),
        output=str(output_size),
        scale_x=scale.x,
        scale_y=scale.y,
    )
    return result


@functools.lru_cache(maxsize=64)
def resolve_cached(
    descriptor: CompositionDescriptor,
    view_mode: ViewMode = ViewMode.OUTPUT,
    target_size: Size | None = None,
    fallback_size: Size = FALLBACK_SIZE,
) -> ResolvedComposition:
    """Memoized ``resolve`` keyed by its (hashable) arguments.

    Results are immutable, so sharing one instance between callers is safe.
    Use ``resolve_cached.cache_clear()`` to drop cached results.
    """
    return resolve(descriptor, view_mode, target_size, fallback_size=fallback_size)
