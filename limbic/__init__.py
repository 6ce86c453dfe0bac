"""Limbic - deterministic psychological-memory analytics."""

__version__ = "0.1.0"
