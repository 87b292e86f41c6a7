"""CLI module for slicemap.

Provides the command-line interface for resolving composition descriptors.
"""

from __future__ import annotations

from slicemap.cli.main import app

__all__ = ["app"]
