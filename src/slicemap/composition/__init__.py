"""Composition layer for slicemap.

This package turns a loosely-structured composition descriptor into an
ordered list of named slices with integer pixel boxes at any target
resolution.

Key Components:
    - parse_descriptor / parse_resolume_xml: build an immutable descriptor
    - resolve_slice: per-region quad selection and validation
    - infer_internal_resolution: authoring canvas from output quads
    - assemble: per-axis scaling into target pixels
    - resolve / resolve_cached: the whole pipeline as a pure function

Example:
    from slicemap.composition import ViewMode, parse_resolume_xml, resolve
    from slicemap.geometry import Size

    descriptor = parse_resolume_xml(xml_text)
    result = resolve(descriptor, ViewMode.OUTPUT, Size(width=3840, height=2160))
    print(result.summary())  # "3 of 4 regions loaded"
"""

from slicemap.composition.constants import (
    DEFAULT_SLICE_NAME,
    FALLBACK_SIZE,
    TARGET_PRESETS,
    parse_target,
)
from slicemap.composition.exceptions import (
    CompositionError,
    MissingRootStructureError,
)
from slicemap.composition.types import (
    CompositionDescriptor,
    CompositionIssue,
    DropReason,
    PartialFailureReport,
    RegionRecord,
    ResolvedComposition,
    Slice,
    SliceDiagnostic,
    VersionInfo,
    ViewMode,
)
from slicemap.composition.extraction import extract_quad  # noqa: I001
from slicemap.composition.descriptor import parse_descriptor
from slicemap.composition.resolver import (
    SliceResolution,
    infer_from_descriptor,
    infer_internal_resolution,
    resolve_slice,
)
from slicemap.composition.assembler import assemble
from slicemap.composition.pipeline import resolve, resolve_cached
from slicemap.composition.resolume import parse_resolume_xml, resolume_to_mapping

__all__ = [
    "DEFAULT_SLICE_NAME",
    "FALLBACK_SIZE",
    "TARGET_PRESETS",
    "CompositionDescriptor",
    "CompositionError",
    "CompositionIssue",
    "DropReason",
    "MissingRootStructureError",
    "PartialFailureReport",
    "RegionRecord",
    "ResolvedComposition",
    "Slice",
    "SliceDiagnostic",
    "SliceResolution",
    "VersionInfo",
    "ViewMode",
    "assemble",
    "extract_quad",
    "infer_from_descriptor",
    "infer_internal_resolution",
    "parse_descriptor",
    "parse_resolume_xml",
    "parse_target",
    "resolume_to_mapping",
    "resolve",
    "resolve_cached",
    "resolve_slice",
]
