"""Unit tests for the resolve pipeline.

Covers the end-to-end scenarios:
- identity, downscaled and spanned compositions
- partial failure isolation and diagnostics
- degenerate internal resolution
- view-mode independence of inference
- memoization
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from slicemap.composition import (
    CompositionIssue,
    DropReason,
    ViewMode,
    parse_descriptor,
    resolve,
    resolve_cached,
)
from slicemap.geometry import BoundingBox, ScaleFactors, Size

RawFactory = Callable[..., dict[str, Any]]
RegionFactory = Callable[..., dict[str, Any]]

FULL_HD = ((0, 0), (1920, 0), (1920, 1080), (0, 1080))
RIGHT_HD = ((1920, 0), (3840, 0), (3840, 1080), (1920, 1080))


class TestScenarios:
    """Reference scenarios for a single composition."""

    def test_target_equal_to_internal(
        self, make_raw: RawFactory, make_region: RegionFactory
    ) -> None:
        descriptor = parse_descriptor(make_raw([make_region("1", output=FULL_HD)]))
        result = resolve(descriptor, ViewMode.OUTPUT, Size(width=1920, height=1080))
        assert result.slices[0].resolved_box == BoundingBox(
            x=0, y=0, width=1920, height=1080
        )
        assert result.scale.is_identity

    def test_half_resolution_target(
        self, make_raw: RawFactory, make_region: RegionFactory
    ) -> None:
        descriptor = parse_descriptor(make_raw([make_region("1", output=FULL_HD)]))
        result = resolve(descriptor, ViewMode.OUTPUT, Size(width=960, height=540))
        assert result.slices[0].resolved_box.to_tuple() == (0, 0, 960, 540)
        assert result.output_size == Size(width=960, height=540)

    def test_three_vertex_region_is_dropped(
        self, make_raw: RawFactory, make_region: RegionFactory
    ) -> None:
        raw = make_raw(
            [
                make_region("good", output=FULL_HD),
                make_region("bad", output=((0, 0), (10, 0), (10, 10))),
            ]
        )
        result = resolve(parse_descriptor(raw))
        assert [s.id for s in result.slices] == ["good"]
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].slice_id == "bad"
        assert result.diagnostics[0].reason is DropReason.TOO_FEW_VERTICES
        assert result.is_partial
        assert result.summary() == "1 of 2 regions loaded"

    def test_overlapping_regions_span_internal_resolution(
        self, make_raw: RawFactory, make_region: RegionFactory
    ) -> None:
        raw = make_raw(
            [
                make_region("a", output=((0, 0), (2400, 0), (2400, 1080), (0, 1080))),
                make_region(
                    "b", output=((1440, 0), (3840, 0), (3840, 1080), (1440, 1080))
                ),
            ]
        )
        result = resolve(parse_descriptor(raw))
        assert result.internal_resolution == Size(width=3840, height=1080)

    def test_all_invalid_uses_identity_scale(
        self, make_raw: RawFactory, make_region: RegionFactory
    ) -> None:
        raw = make_raw([make_region("a", output=((0, 0),))])
        target = Size(width=1280, height=720)
        result = resolve(parse_descriptor(raw), target_size=target)
        assert result.internal_resolution == Size(width=0, height=0)
        assert result.scale == ScaleFactors(x=1.0, y=1.0)
        assert CompositionIssue.DEGENERATE_INTERNAL_RESOLUTION in result.issues
        assert result.slices == ()
        assert result.output_size == Size(width=1280, height=720)


class TestTargetSelection:
    """Tests for how the scale target is chosen."""

    def test_no_target_is_identity(
        self, make_raw: RawFactory, make_region: RegionFactory
    ) -> None:
        raw = make_raw(
            [make_region("a", output=FULL_HD), make_region("b", output=RIGHT_HD)]
        )
        result = resolve(parse_descriptor(raw))
        assert result.output_size == Size(width=3840, height=1080)
        assert result.scale.is_identity
        assert result.slices[1].resolved_box.to_tuple() == (1920, 0, 1920, 1080)

    def test_declared_size_is_preferred_target(
        self, make_raw: RawFactory, make_region: RegionFactory
    ) -> None:
        raw = make_raw([make_region("a", output=FULL_HD)], declared=(3840, 2160))
        result = resolve(parse_descriptor(raw))
        assert result.internal_resolution == Size(width=1920, height=1080)
        assert result.output_size == Size(width=3840, height=2160)
        assert result.slices[0].resolved_box.to_tuple() == (0, 0, 3840, 2160)

    def test_explicit_target_beats_declared(
        self, make_raw: RawFactory, make_region: RegionFactory
    ) -> None:
        raw = make_raw([make_region("a", output=FULL_HD)], declared=(3840, 2160))
        target = Size(width=960, height=540)
        result = resolve(parse_descriptor(raw), target_size=target)
        assert result.slices[0].resolved_box.to_tuple() == (0, 0, 960, 540)

    def test_anisotropic_scaling(
        self, make_raw: RawFactory, make_region: RegionFactory
    ) -> None:
        raw = make_raw(
            [make_region("a", output=FULL_HD), make_region("b", output=RIGHT_HD)]
        )
        target = Size(width=1920, height=1080)
        result = resolve(parse_descriptor(raw), target_size=target)
        assert result.scale == ScaleFactors(x=0.5, y=1.0)
        assert result.slices[1].resolved_box.to_tuple() == (960, 0, 960, 1080)

    def test_empty_composition_uses_fallback(self, make_raw: RawFactory) -> None:
        result = resolve(parse_descriptor(make_raw([])))
        assert result.output_size == Size(width=1920, height=1080)
        assert CompositionIssue.NO_REGIONS_FOUND in result.issues
        assert result.summary() == "0 of 0 regions loaded"

    def test_custom_fallback(self, make_raw: RawFactory) -> None:
        fallback = Size(width=800, height=600)
        result = resolve(parse_descriptor(make_raw([])), fallback_size=fallback)
        assert result.output_size == fallback

    @pytest.mark.parametrize(
        "target", [Size(width=0, height=0), Size(width=10, height=0)]
    )
    def test_degenerate_target_rejected(
        self, make_raw: RawFactory, make_region: RegionFactory, target: Size
    ) -> None:
        descriptor = parse_descriptor(make_raw([make_region("a")]))
        with pytest.raises(ValueError, match="must be positive"):
            resolve(descriptor, target_size=target)


class TestViewModes:
    """Tests for input/output view resolution."""

    def test_input_view_scaled_by_output_canvas(
        self, make_raw: RawFactory, make_region: RegionFactory
    ) -> None:
        raw = make_raw(
            [
                make_region(
                    "a",
                    output=RIGHT_HD,
                    input=((0, 0), (960, 0), (960, 540), (0, 540)),
                )
            ]
        )
        descriptor = parse_descriptor(raw)
        result = resolve(descriptor, ViewMode.INPUT, Size(width=1920, height=540))
        assert result.internal_resolution == Size(width=3840, height=1080)
        assert result.slices[0].resolved_box.to_tuple() == (0, 0, 480, 270)

    def test_inference_ignores_view_mode(
        self, make_raw: RawFactory, make_region: RegionFactory
    ) -> None:
        raw = make_raw(
            [
                make_region(
                    "a", output=FULL_HD, input=((0, 0), (5, 0), (5, 5), (0, 5))
                ),
                make_region("b", output=RIGHT_HD, input=None),
            ]
        )
        descriptor = parse_descriptor(raw)
        as_input = resolve(descriptor, ViewMode.INPUT)
        as_output = resolve(descriptor, ViewMode.OUTPUT)
        assert as_input.internal_resolution == as_output.internal_resolution
        assert as_input.scale == as_output.scale

    def test_slice_dropped_only_in_broken_view(
        self, make_raw: RawFactory, make_region: RegionFactory
    ) -> None:
        raw = make_raw([make_region("a", output=FULL_HD, input=None)])
        descriptor = parse_descriptor(raw)
        assert len(resolve(descriptor, ViewMode.OUTPUT).slices) == 1
        as_input = resolve(descriptor, ViewMode.INPUT)
        assert as_input.slices == ()
        assert as_input.diagnostics[0].detail.startswith("input quad")


class TestExtremeCoordinates:
    """Huge but finite coordinates only ever drop their own slice."""

    def test_infinite_extent_drops_only_that_slice(
        self, make_raw: RawFactory, make_region: RegionFactory
    ) -> None:
        endless = ((-1e308, 0), (1e308, 0), (1e308, 1080), (-1e308, 1080))
        raw = make_raw(
            [
                make_region("good", output=FULL_HD),
                make_region("endless", output=endless),
            ]
        )
        result = resolve(parse_descriptor(raw), target_size=Size(width=960, height=540))
        assert [s.id for s in result.slices] == ["good"]
        assert result.slices[0].resolved_box.to_tuple() == (0, 0, 960, 540)
        assert result.diagnostics[0].slice_id == "endless"
        assert result.diagnostics[0].reason is DropReason.DEGENERATE_EXTENT

    def test_input_view_overflow_drops_only_that_slice(
        self, make_raw: RawFactory, make_region: RegionFactory
    ) -> None:
        square = ((0, 0), (100, 0), (100, 100), (0, 100))
        far = ((1e308, 0), (1.5e308, 0), (1.5e308, 100), (1e308, 100))
        raw = make_raw(
            [
                make_region("far", output=square, input=far),
                make_region(
                    "near", output=square, input=((0, 0), (50, 0), (50, 50), (0, 50))
                ),
            ]
        )
        result = resolve(
            parse_descriptor(raw), ViewMode.INPUT, Size(width=400, height=400)
        )
        assert [s.id for s in result.slices] == ["near"]
        assert result.slices[0].resolved_box.to_tuple() == (0, 0, 200, 200)
        assert result.diagnostics[0].slice_id == "far"
        assert result.diagnostics[0].reason is DropReason.SCALE_OVERFLOW
        assert result.summary() == "1 of 2 regions loaded"

class TestProperties:
    """Pipeline-wide invariants."""

    def test_idempotent(self, make_raw: RawFactory, make_region: RegionFactory) -> None:
        raw = make_raw(
            [make_region("a", output=FULL_HD), make_region("b", output=RIGHT_HD)]
        )
        descriptor = parse_descriptor(raw)
        target = Size(width=1280, height=720)
        assert resolve(descriptor, ViewMode.OUTPUT, target) == resolve(
            descriptor, ViewMode.OUTPUT, target
        )

    def test_order_preserved_and_boxes_positive(
        self, make_raw: RawFactory, make_region: RegionFactory
    ) -> None:
        regions = [
            make_region(
                str(i),
                output=((i * 10, 0), (i * 10 + 7, 0), (i * 10 + 7, 7), (i * 10, 7)),
            )
            for i in range(12)
        ]
        regions.insert(5, make_region("broken", output=None))
        descriptor = parse_descriptor(make_raw(regions))
        result = resolve(descriptor, target_size=Size(width=60, height=20))
        ids = [s.id for s in result.slices]
        assert ids == sorted(ids, key=int)
        assert all(
            s.resolved_box.width > 0 and s.resolved_box.height > 0
            for s in result.slices
        )
        assert result.total_regions == 13
        assert result.loaded_count + len(result.diagnostics) == 13

    def test_descriptor_rejections_are_reported(
        self, make_raw: RawFactory, make_region: RegionFactory
    ) -> None:
        raw = make_raw([make_region("a"), make_region("a"), "junk"])
        result = resolve(parse_descriptor(raw))
        reasons = [d.reason for d in result.diagnostics]
        assert reasons == [DropReason.DUPLICATE_ID, DropReason.MALFORMED_REGION]
        assert result.summary() == "1 of 3 regions loaded"

    def test_report(self, make_raw: RawFactory, make_region: RegionFactory) -> None:
        raw = make_raw([make_region("a"), make_region("b", output=None)])
        report = resolve(parse_descriptor(raw)).report
        assert (report.loaded, report.total) == (1, 2)
        assert report.diagnostics[0].slice_id == "b"

    def test_get_by_id(self, make_raw: RawFactory, make_region: RegionFactory) -> None:
        result = resolve(parse_descriptor(make_raw([make_region("a")])))
        assert result.get("a") is not None
        assert result.get("missing") is None


class TestResolveCached:
    """Tests for the memoized pipeline."""

    def test_returns_same_instance(
        self, make_raw: RawFactory, make_region: RegionFactory
    ) -> None:
        descriptor = parse_descriptor(make_raw([make_region("a")]))
        target = Size(width=960, height=540)
        first = resolve_cached(descriptor, ViewMode.OUTPUT, target)
        second = resolve_cached(descriptor, ViewMode.OUTPUT, target)
        assert first is second
        assert resolve_cached.cache_info().hits == 1

    def test_equal_descriptors_share_entry(
        self, make_raw: RawFactory, make_region: RegionFactory
    ) -> None:
        raw = make_raw([make_region("a")])
        first = resolve_cached(parse_descriptor(raw))
        second = resolve_cached(parse_descriptor(raw))
        assert first is second

    def test_different_parameters_resolve_again(
        self, make_raw: RawFactory, make_region: RegionFactory
    ) -> None:
        descriptor = parse_descriptor(make_raw([make_region("a")]))
        by_output = resolve_cached(descriptor, ViewMode.OUTPUT)
        by_input = resolve_cached(descriptor, ViewMode.INPUT)
        assert by_output is not by_input
        assert by_input.view_mode is ViewMode.INPUT
        assert resolve_cached.cache_info().misses == 2
