"""slicemap: resolve video-mapping slice layouts into render regions."""

from slicemap.geometry import BoundingBox, Point, Quad, Size  # noqa: I001
from slicemap.composition import (
    CompositionDescriptor,
    CompositionError,
    MissingRootStructureError,
    ResolvedComposition,
    Slice,
    SliceDiagnostic,
    ViewMode,
    parse_descriptor,
    parse_resolume_xml,
    resolve,
    resolve_cached,
)

__version__ = "0.1.0"

__all__ = [
    "BoundingBox",
    "CompositionDescriptor",
    "CompositionError",
    "MissingRootStructureError",
    "Point",
    "Quad",
    "ResolvedComposition",
    "Size",
    "Slice",
    "SliceDiagnostic",
    "ViewMode",
    "__version__",
    "parse_descriptor",
    "parse_resolume_xml",
    "resolve",
    "resolve_cached",
]
