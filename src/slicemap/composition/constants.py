"""Defaults and resolution presets for composition handling."""

from __future__ import annotations

import re

from slicemap.geometry.primitives import Size

DEFAULT_COMPOSITION_NAME = "Resolume Setup"
DEFAULT_SLICE_NAME = "Unnamed Slice"
DEFAULT_VERSION_NAME = "Resolume Arena"
DEFAULT_VERSION = (7, 0, 0)  # major, minor, micro

# Param holding a region's display name
NAME_PARAM = "Name"

# Canvas used when nothing else is known about the composition
FALLBACK_SIZE = Size(width=1920, height=1080)

# Export resolutions offered to users; "original" means no explicit target
TARGET_PRESETS: dict[str, Size | None] = {
    "original": None,
    "1080p": Size(width=1920, height=1080),
    "4k": Size(width=3840, height=2160),
    "8k": Size(width=7680, height=4320),
}

_DIMENSIONS_RE = re.compile(r"^\s*(\d+)\s*[xX×]\s*(\d+)\s*$")


def parse_target(value: str) -> Size | None:
    """Parse a target resolution string.

    Accepts a preset name (case-insensitive: ``original``, ``1080p``,
    ``4K``, ``8K``) or explicit dimensions such as ``1280x720``.

    Args:
        value: The string to parse.

    Returns:
        The target Size, or None for ``original``.

    Raises:
        ValueError: If the string is not a preset or has a zero dimension.

    Example:
        >>> parse_target("4K")
        Size(width=3840, height=2160)
        >>> str(parse_target("1280x720"))
        '1280x720'
    """
    key = value.strip().lower()
    if key in TARGET_PRESETS:
        return TARGET_PRESETS[key]

    match = _DIMENSIONS_RE.match(value)
    if match is None:
        presets = ", ".join(TARGET_PRESETS)
        raise ValueError(f"Unknown target {value!r}: use {presets} or WIDTHxHEIGHT")

    width, height = int(match.group(1)), int(match.group(2))
    if width == 0 or height == 0:
        raise ValueError(f"Target {value!r} must have positive dimensions")
    return Size(width=width, height=height)
