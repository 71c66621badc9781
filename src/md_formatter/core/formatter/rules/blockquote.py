"""Blockquote rules."""
import re

from ..models import FormatRule, RuleCategory, RuleOptions
from ..text import join_lines, scan, split_lines
from .common import lint_from_fix

QUOTE_PREFIX_RE = re.compile(r'^((?:>[ \t]*)+)(.*)$')


def blockquote_space(content: str, options: RuleOptions) -> str:
    """
    Normalize blockquote markers.

    Nested markers are joined (`> > text` becomes `>> text`) and the
    marker run is followed by exactly one space. Empty quote lines keep
    just the markers.
    """
    lines, terminator = split_lines(content)
    fixed = []
    for _, line, in_fence in scan(lines):
        match = None if in_fence else QUOTE_PREFIX_RE.match(line)
        if match:
            markers = '>' * match.group(1).count('>')
            text = match.group(2)
            line = f"{markers} {text}" if text else markers
        fixed.append(line)
    return join_lines(fixed, terminator)


RULES = [
    FormatRule(
        id="blockquote-space",
        category=RuleCategory.BLOCKQUOTE,
        fix=blockquote_space,
        lint=lint_from_fix(
            "blockquote-space", blockquote_space, "Blockquote markers should be followed by one space"
        ),
    ),
]
