"""Vertex and quad extraction from loosely-structured region records.

Exported descriptors are inconsistent about repetition: a container that
holds one child may hold the child itself instead of a one-element list.
Every accessor here normalizes both shapes, and numeric fields that do not
parse become 0.0 instead of raising. Nothing is invented: an absent
container yields an empty result.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any

from slicemap.geometry.primitives import Point, Quad


def as_list(value: Any) -> list[Any]:
    """Normalize a single-or-repeated value to a list.

    Example:
        >>> as_list(None), as_list({"x": 1}), as_list([1, 2])
        ([], [{'x': 1}], [1, 2])
    """
    if value is None:
        return []
    if isinstance(value, list | tuple):
        return list(value)
    return [value]


def coerce_float(value: Any) -> float:
    """Convert a string or number to a finite float, 0.0 on failure."""
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        result = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        return 0.0
    return result if math.isfinite(result) else 0.0


def coerce_int(value: Any, default: int = 0) -> int:
    """Convert a string or number to an int, ``default`` on failure."""
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(float(value.strip() if isinstance(value, str) else value))
    except (TypeError, ValueError, OverflowError):
        return default


def extract_point(raw: Any) -> Point:
    """Extract one vertex.

    Accepts a mapping with ``x``/``y`` keys or an ``(x, y)`` pair. Missing
    or unparsable coordinates become 0.0.
    """
    if isinstance(raw, Mapping):
        return Point(x=coerce_float(raw.get("x")), y=coerce_float(raw.get("y")))
    if isinstance(raw, Sequence) and not isinstance(raw, str) and len(raw) == 2:
        return Point(x=coerce_float(raw[0]), y=coerce_float(raw[1]))
    return Point(x=0.0, y=0.0)


def extract_quad(container: Any) -> Quad:
    """Extract the ordered vertices of one rectangle.

    Args:
        container: ``{"vertices": [...]}``, ``{"vertices": {...}}`` for a
            single vertex, a bare vertex list, or None.

    Returns:
        A Quad holding every vertex found, in order. Empty when the
        container or its vertex list is absent.
    """
    if container is None:
        return Quad()
    if isinstance(container, Mapping):
        vertices = as_list(container.get("vertices"))
    else:
        vertices = as_list(container)
    return Quad(points=tuple(extract_point(v) for v in vertices))


def find_param(params: Any, name: str) -> Any | None:
    """Return the value of the first param called ``name``, or None."""
    for param in as_list(params):
        if isinstance(param, Mapping) and param.get("name") == name:
            return param.get("value")
    return None


def extract_name(params: Any, name: str, default: str) -> str:
    """Return a param's value as a non-empty string, else ``default``."""
    value = find_param(params, name)
    if value is None:
        return default
    text = str(value).strip()
    return text or default
