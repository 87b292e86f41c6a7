"""Shared pytest fixtures and configuration."""

from collections.abc import Callable, Iterator, Sequence
from typing import Any

import pytest

from slicemap.composition import resolve_cached
from slicemap.config import Settings
from slicemap.utils.logging import clear_correlation_context, configure_logging

Coords = Sequence[tuple[float, float]]
RegionFactory = Callable[..., dict[str, Any]]

FULL_HD = ((0, 0), (1920, 0), (1920, 1080), (0, 1080))


@pytest.fixture(autouse=True)
def reset_logging_context() -> Iterator[None]:
    """Reset correlation context and memoized results between tests."""
    clear_correlation_context()
    resolve_cached.cache_clear()
    yield
    clear_correlation_context()


@pytest.fixture
def test_settings() -> Settings:
    """Create a Settings instance with test-safe defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        LOG_LEVEL="DEBUG",
        LOG_FORMAT="console",
    )


@pytest.fixture
def configure_test_logging() -> Iterator[None]:
    """Configure logging for tests with console output."""
    configure_logging(level="DEBUG", log_format="console")
    yield


def _vertices(coords: Coords | None) -> dict[str, Any] | None:
    if coords is None:
        return None
    return {"vertices": [{"x": x, "y": y} for x, y in coords]}


@pytest.fixture
def make_region() -> RegionFactory:
    """Build one raw region record in the logical descriptor shape."""

    def _make(
        unique_id: str | None = "1",
        name: str | None = "Slice 1",
        output: Coords | None = FULL_HD,
        input: Coords | None = FULL_HD,  # noqa: A002
    ) -> dict[str, Any]:
        region: dict[str, Any] = {}
        if unique_id is not None:
            region["uniqueId"] = unique_id
        if name is not None:
            region["params"] = [{"name": "Name", "value": name}]
        if output is not None:
            region["outputQuad"] = _vertices(output)
        if input is not None:
            region["inputQuad"] = _vertices(input)
        return region

    return _make


@pytest.fixture
def make_raw() -> Callable[..., dict[str, Any]]:
    """Build a raw composition mapping around a list of regions."""

    def _make(
        regions: list[Any],
        declared: tuple[int, int] | None = None,
        name: str = "Test Setup",
    ) -> dict[str, Any]:
        raw: dict[str, Any] = {
            "name": name,
            "version": {"name": "Resolume Arena", "major": 7, "minor": 16, "micro": 0},
            "screen": {"regions": regions},
        }
        if declared is not None:
            raw["declaredOutputSize"] = {"width": declared[0], "height": declared[1]}
        return raw

    return _make


@pytest.fixture
def resolume_xml() -> str:
    """A small Arena export with two slices side by side and one broken slice."""
    return """<?xml version="1.0" encoding="utf-8"?>
<XmlState name="Stage Left">
  <versionInfo name="Resolume Arena" majorVersion="7" minorVersion="16"
               microVersion="2" revision="0"/>
  <ScreenSetup name="ScreenSetup">
    <CurrentCompositionTextureSize width="3840" height="1080"/>
    <screens>
      <Screen name="Screen 1" uniqueId="100">
        <layers>
          <Slice uniqueId="1001">
            <Params name="Common">
              <Param name="Name" T="STRING" default="Layer" value="Left"/>
            </Params>
            <InputRect orientation="0">
              <v x="0" y="0"/><v x="1920" y="0"/>
              <v x="1920" y="1080"/><v x="0" y="1080"/>
            </InputRect>
            <OutputRect orientation="0">
              <v x="0" y="0"/><v x="1920" y="0"/>
              <v x="1920" y="1080"/><v x="0" y="1080"/>
            </OutputRect>
          </Slice>
          <Slice uniqueId="1002">
            <Params name="Common">
              <Param name="Name" T="STRING" default="Layer" value="Right"/>
            </Params>
            <InputRect orientation="0">
              <v x="1920" y="0"/><v x="3840" y="0"/>
              <v x="3840" y="1080"/><v x="1920" y="1080"/>
            </InputRect>
            <OutputRect orientation="0">
              <v x="1920" y="0"/><v x="3840" y="0"/>
              <v x="3840" y="1080"/><v x="1920" y="1080"/>
            </OutputRect>
          </Slice>
          <Slice uniqueId="1003">
            <Params name="Common">
              <Param name="Name" T="STRING" default="Layer" value="Broken"/>
            </Params>
            <OutputRect orientation="0">
              <v x="0" y="0"/>
            </OutputRect>
          </Slice>
        </layers>
      </Screen>
    </screens>
  </ScreenSetup>
</XmlState>
"""
