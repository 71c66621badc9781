"""Whitespace rules."""
from ..models import FormatRule, RuleCategory, RuleOptions
from ..text import is_blank, join_lines, scan, split_lines
from .common import lint_from_fix


def trailing_spaces(content: str, options: RuleOptions) -> str:
    """
    Strip trailing spaces and tabs from lines.

    Lines inside fenced code blocks are left alone.
    """
    lines, terminator = split_lines(content)
    fixed = [
        line if in_fence else line.rstrip(' \t')
        for _, line, in_fence in scan(lines)
    ]
    return join_lines(fixed, terminator)


def eof_newline(content: str, options: RuleOptions) -> str:
    """End the document with exactly one newline."""
    lines = content.split('\n')
    while lines and is_blank(lines[-1]):
        lines.pop()
    return '\n'.join(lines) + '\n'


def consecutive_blanks(content: str, options: RuleOptions) -> str:
    """
    Compress runs of blank lines to at most max_consecutive_blank_lines.

    A run within the limit is kept as is; a longer run becomes that many
    empty lines. Blank lines inside fences are not counted.
    """
    limit = options.max_consecutive_blank_lines
    lines, terminator = split_lines(content)
    result: list[str] = []
    run: list[str] = []

    def flush() -> None:
        result.extend(run if len(run) <= limit else [''] * limit)
        run.clear()

    for _, line, in_fence in scan(lines):
        if not in_fence and is_blank(line):
            run.append(line)
            continue
        flush()
        result.append(line)
    flush()

    return join_lines(result, terminator)


RULES = [
    FormatRule(
        id="trailing-spaces",
        category=RuleCategory.WHITESPACE,
        fix=trailing_spaces,
        lint=lint_from_fix("trailing-spaces", trailing_spaces, "Trailing whitespace"),
    ),
    FormatRule(
        id="eof-newline",
        category=RuleCategory.WHITESPACE,
        fix=eof_newline,
        lint=lint_from_fix("eof-newline", eof_newline, "File should end with a single newline"),
    ),
    FormatRule(
        id="consecutive-blanks",
        category=RuleCategory.WHITESPACE,
        fix=consecutive_blanks,
        lint=lint_from_fix(
            "consecutive-blanks", consecutive_blanks,
            lambda options: f"More than {options.max_consecutive_blank_lines} consecutive blank lines"
        ),
    ),
]
