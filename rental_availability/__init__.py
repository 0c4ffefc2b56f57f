"""Listing availability and booking conflict resolution service."""

__version__ = "0.1.0"
