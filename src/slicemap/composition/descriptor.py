"""Parse the logical composition mapping into a CompositionDescriptor.

The mapping has this shape, independent of how it was serialized::

    {
        "name": str,
        "version": {"name": str, "major": int, "minor": int, "micro": int},
        "declaredOutputSize": {"width": int, "height": int},   # optional
        "screen": {
            "regions": [
                {
                    "uniqueId": str,
                    "params": [{"name": "Name", "value": str}, ...],
                    "outputQuad": {"vertices": [{"x": .., "y": ..}, ...]},
                    "inputQuad": {"vertices": [...]},
                },
                ...
            ]
        },
    }

Any repeated element may instead be a single object, and numbers may be
strings. Only a missing root or screen container is fatal.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from slicemap.composition.constants import (
    DEFAULT_COMPOSITION_NAME,
    DEFAULT_SLICE_NAME,
    DEFAULT_VERSION,
    DEFAULT_VERSION_NAME,
    NAME_PARAM,
)
from slicemap.composition.exceptions import MissingRootStructureError
from slicemap.composition.extraction import (
    as_list,
    coerce_int,
    extract_name,
    extract_quad,
)
from slicemap.composition.types import (
    CompositionDescriptor,
    DropReason,
    RegionRecord,
    SliceDiagnostic,
    VersionInfo,
)
from slicemap.geometry.primitives import Size
from slicemap.utils.logging import get_logger

logger = get_logger(__name__)


def parse_descriptor(raw: Any, source: str | None = None) -> CompositionDescriptor:
    """Build an immutable descriptor from the logical composition mapping.

    Args:
        raw: The decoded composition mapping.
        source: Optional origin (file name) used in error messages.

    Returns:
        CompositionDescriptor with regions in source order. Regions with a
        duplicate id or of the wrong shape are listed in ``rejected``.

    Raises:
        MissingRootStructureError: If the root is not a mapping or the
            screen container is absent.
    """
    if not isinstance(raw, Mapping):
        raise MissingRootStructureError(
            "Descriptor root is not a mapping", source, missing="composition"
        )

    screens = [s for s in as_list(raw.get("screen")) if isinstance(s, Mapping)]
    if not screens:
        raise MissingRootStructureError(
            "Descriptor has no screen container", source, missing="screen"
        )
    # Exports normally carry one screen; additional screens are ignored
    screen = screens[0]

    slices: list[RegionRecord] = []
    rejected: list[SliceDiagnostic] = []
    seen: set[str] = set()

    for index, region in enumerate(as_list(screen.get("regions"))):
        positional_id = f"slice_{index}"
        if not isinstance(region, Mapping):
            rejected.append(
                SliceDiagnostic(
                    slice_id=positional_id,
                    slice_name=DEFAULT_SLICE_NAME,
                    reason=DropReason.MALFORMED_REGION,
                    detail=f"Region entry is a {type(region).__name__}, not a record",
                )
            )
            continue

        record = _parse_region(region, positional_id)
        if record.unique_id in seen:
            rejected.append(
                SliceDiagnostic(
                    slice_id=record.unique_id,
                    slice_name=record.name,
                    reason=DropReason.DUPLICATE_ID,
                    detail=f"Region #{index} repeats an earlier id",
                )
            )
            continue

        seen.add(record.unique_id)
        slices.append(record)

    descriptor = CompositionDescriptor(
        name=_text(raw.get("name"), DEFAULT_COMPOSITION_NAME),
        version=_parse_version(raw.get("version")),
        declared_output_size=_parse_size(raw.get("declaredOutputSize")),
        slices=tuple(slices),
        rejected=tuple(rejected),
    )

    for diagnostic in descriptor.rejected:
        logger.warning(
            "Region rejected",
            slice_id=diagnostic.slice_id,
            reason=diagnostic.reason.value,
            detail=diagnostic.detail,
        )
    logger.debug(
        "Descriptor parsed",
        composition=descriptor.name,
        version=str(descriptor.version),
        regions=len(descriptor.slices),
        rejected=len(descriptor.rejected),
    )
    return descriptor


def _parse_region(region: Mapping[str, Any], positional_id: str) -> RegionRecord:
    unique_id = _text(region.get("uniqueId"), positional_id)
    return RegionRecord(
        unique_id=unique_id,
        name=extract_name(region.get("params"), NAME_PARAM, DEFAULT_SLICE_NAME),
        input_quad=extract_quad(region.get("inputQuad")),
        output_quad=extract_quad(region.get("outputQuad")),
    )


def _parse_version(raw: Any) -> VersionInfo:
    major, minor, micro = DEFAULT_VERSION
    if not isinstance(raw, Mapping):
        return VersionInfo(
            name=DEFAULT_VERSION_NAME, major=major, minor=minor, micro=micro
        )
    return VersionInfo(
        name=_text(raw.get("name"), DEFAULT_VERSION_NAME),
        major=coerce_int(raw.get("major"), major),
        minor=coerce_int(raw.get("minor"), minor),
        micro=coerce_int(raw.get("micro"), micro),
    )


def _parse_size(raw: Any) -> Size | None:
    """Return a declared size only when both dimensions are positive."""
    if not isinstance(raw, Mapping):
        return None
    width = coerce_int(raw.get("width"))
    height = coerce_int(raw.get("height"))
    if width <= 0 or height <= 0:
        return None
    return Size(width=width, height=height)


def _text(value: Any, default: str) -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default
