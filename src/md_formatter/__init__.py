"""Markdown formatter and academic linter."""

__version__ = "1.0.0"
