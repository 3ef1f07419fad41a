"""Duplicate detection for geotagged civic issue reports."""

__version__ = "0.1.0"
