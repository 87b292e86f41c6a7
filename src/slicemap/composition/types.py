"""Type definitions for compositions and resolved slices.

A CompositionDescriptor is the parsed but unresolved import: it is created
once and never mutated. A ResolvedComposition is regenerated from the
descriptor for every view mode / target resolution combination.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from slicemap.geometry.primitives import BoundingBox, Quad, Size
from slicemap.geometry.transforms import ScaleFactors
from slicemap.geometry.validators import QuadFailure


class ViewMode(str, Enum):
    """Which of a region's two quads drives its resolved box."""

    INPUT = "input"  # Source-side rectangle (what is sampled)
    OUTPUT = "output"  # Destination-side rectangle (where it is shown)


class DropReason(str, Enum):
    """Why a region did not make it into the resolved slice list."""

    TOO_FEW_VERTICES = "TooFewVertices"
    DEGENERATE_EXTENT = "DegenerateExtent"
    COLLAPSED_AFTER_SCALING = "CollapsedAfterScaling"
    SCALE_OVERFLOW = "ScaleOverflow"
    DUPLICATE_ID = "DuplicateId"
    MALFORMED_REGION = "MalformedRegion"

    @classmethod
    def from_quad_failure(cls, failure: QuadFailure) -> DropReason:
        return cls(failure.value)


class CompositionIssue(str, Enum):
    """Recoverable conditions affecting the whole composition."""

    NO_REGIONS_FOUND = "NoRegionsFound"
    DEGENERATE_INTERNAL_RESOLUTION = "DegenerateInternalResolution"


class SliceDiagnostic(BaseModel, frozen=True):
    """One dropped region and the reason it was dropped.

    Attributes:
        slice_id: Unique id of the region (or a positional id if it had none).
        slice_name: Display name, useful when surfacing the drop to a user.
        reason: Machine-readable drop reason.
        detail: Human-readable explanation.
    """

    slice_id: str
    slice_name: str
    reason: DropReason
    detail: str = ""


class VersionInfo(BaseModel, frozen=True):
    """Version of the software that exported the descriptor."""

    name: str
    major: int = 0
    minor: int = 0
    micro: int = 0

    def __str__(self) -> str:
        return f"{self.name} {self.major}.{self.minor}.{self.micro}"


class RegionRecord(BaseModel, frozen=True):
    """A region as read from the descriptor, before any validation.

    Attributes:
        unique_id: Id unique within the descriptor.
        name: Display name (a placeholder when the descriptor has none).
        input_quad: Source-side corners, possibly empty or malformed.
        output_quad: Destination-side corners, possibly empty or malformed.
    """

    unique_id: str
    name: str
    input_quad: Quad = Quad()
    output_quad: Quad = Quad()

    def quad_for(self, view_mode: ViewMode) -> Quad:
        """Return the quad selected by a view mode."""
        if view_mode is ViewMode.INPUT:
            return self.input_quad
        return self.output_quad


class CompositionDescriptor(BaseModel, frozen=True):
    """Parsed, immutable composition import.

    Instances are hashable, so they can key a memoized resolution.

    Attributes:
        name: Composition name.
        version: Exporting software version.
        declared_output_size: Explicit virtual canvas size, if declared.
        slices: Region records in source order, ids unique.
        rejected: Regions refused while parsing (duplicate ids, malformed).
    """

    name: str
    version: VersionInfo
    declared_output_size: Size | None = None
    slices: tuple[RegionRecord, ...] = ()
    rejected: tuple[SliceDiagnostic, ...] = ()

    @property
    def total_regions(self) -> int:
        """Number of regions the source listed, accepted or not."""
        return len(self.slices) + len(self.rejected)


class Slice(BaseModel, frozen=True):
    """One resolved, renderable region.

    ``resolved_box`` is derived from the active view mode and target scale;
    the quads are carried along unchanged for collaborators that need them.
    """

    id: str
    name: str
    input_quad: Quad
    output_quad: Quad
    resolved_box: BoundingBox


class PartialFailureReport(BaseModel, frozen=True):
    """Summary of what resolution dropped, for surfacing to a user."""

    loaded: int
    total: int
    diagnostics: tuple[SliceDiagnostic, ...] = ()
    issues: tuple[CompositionIssue, ...] = ()

    def summary(self) -> str:
        """Return a "N of M regions loaded" line."""
        return f"{self.loaded} of {self.total} regions loaded"


class ResolvedComposition(BaseModel, frozen=True):
    """Final pipeline product for one (view mode, target size) pair.

    Attributes:
        name: Composition name.
        view_mode: View mode the boxes were resolved in.
        output_size: Canvas size the slice boxes are expressed in.
        internal_resolution: Inferred authoring canvas (may be degenerate).
        scale: Factors applied from internal to output pixels.
        slices: Surviving slices in source order.
        diagnostics: One entry per dropped region.
        issues: Recoverable composition-level conditions.
        total_regions: Number of regions the descriptor listed.
    """

    name: str
    view_mode: ViewMode
    output_size: Size
    internal_resolution: Size
    scale: ScaleFactors = Field(default_factory=ScaleFactors.identity)
    slices: tuple[Slice, ...] = ()
    diagnostics: tuple[SliceDiagnostic, ...] = ()
    issues: tuple[CompositionIssue, ...] = ()
    total_regions: int = 0

    @property
    def loaded_count(self) -> int:
        return len(self.slices)

    @property
    def is_partial(self) -> bool:
        """Return True if any region was dropped."""
        return bool(self.diagnostics)

    @property
    def report(self) -> PartialFailureReport:
        """Return the drop report for this resolution."""
        return PartialFailureReport(
            loaded=self.loaded_count,
            total=self.total_regions,
            diagnostics=self.diagnostics,
            issues=self.issues,
        )

    def summary(self) -> str:
        """Return a "N of M regions loaded" line."""
        return self.report.summary()

    def get(self, slice_id: str) -> Slice | None:
        """Look up a resolved slice by id."""
        for piece in self.slices:
            if piece.id == slice_id:
                return piece
        return None
