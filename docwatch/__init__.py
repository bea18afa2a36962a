"""Detect documentation that fell behind recent source changes."""

__version__ = "0.1.0"
