"""Shared utilities for slicemap."""
