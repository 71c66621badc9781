"""Heading rules."""
import re

from ..models import FormatRule, RuleCategory, RuleOptions
from ..text import is_blank, join_lines, scan, split_lines
from .common import lint_from_fix

# Marker, any run of spaces/tabs (possibly none), then heading text
HEADING_SPACE_RE = re.compile(r'^(#{1,6})[ \t]*([^\s#].*)$')
HEADING_LINE_RE = re.compile(r'^#{1,6}\s')


def heading_space(content: str, options: RuleOptions) -> str:
    """
    Put exactly one space between the # markers and the heading text.

    `#Title` and `#   Title` both become `# Title`.
    """
    lines, terminator = split_lines(content)
    fixed = []
    for _, line, in_fence in scan(lines):
        if not in_fence:
            line = HEADING_SPACE_RE.sub(r'\1 \2', line)
        fixed.append(line)
    return join_lines(fixed, terminator)


def heading_blank_lines(content: str, options: RuleOptions) -> str:
    """
    Surround headings with a fixed number of blank lines.

    heading_blank_lines_before and heading_blank_lines_after set the counts
    (one each by default). Nothing is added before a heading at the top of
    the document, and blank lines trailing the document are left for
    eof-newline.
    """
    before = options.heading_blank_lines_before
    after = options.heading_blank_lines_after
    lines, terminator = split_lines(content)
    flags = [in_fence for _, _, in_fence in scan(lines)]
    result: list[str] = []

    i = 0
    while i < len(lines):
        line = lines[i]
        if flags[i] or not HEADING_LINE_RE.match(line):
            result.append(line)
            i += 1
            continue

        while result and is_blank(result[-1]):
            result.pop()
        if result:
            result.extend([''] * before)
        result.append(line)

        j = i + 1
        while j < len(lines) and not flags[j] and is_blank(lines[j]):
            j += 1
        if j < len(lines):
            result.extend([''] * after)
        else:
            result.extend(lines[i + 1:j])
        i = j

    return join_lines(result, terminator)


RULES = [
    FormatRule(
        id="heading-space",
        category=RuleCategory.HEADING,
        fix=heading_space,
        lint=lint_from_fix(
            "heading-space", heading_space, "Heading markers should be followed by one space"
        ),
    ),
    FormatRule(
        id="heading-blank-lines",
        category=RuleCategory.HEADING,
        fix=heading_blank_lines,
        lint=lint_from_fix(
            "heading-blank-lines", heading_blank_lines,
            lambda options: (
                f"Headings should have {options.heading_blank_lines_before} blank line(s) before"
                f" and {options.heading_blank_lines_after} after"
            )
        ),
    ),
]
