"""Core modules for Markdown formatting."""
from .formatter import FormatEngine, FormatResult, LintResult, format_content, lint_content

__all__ = [
    "FormatEngine",
    "FormatResult",
    "LintResult",
    "format_content",
    "lint_content",
]
