"""Writing quality rules (lint only)."""
from typing import Optional

from ..models import FormatRule, LintContext, LintResult, RuleCategory, RuleOptions, Severity
from ..text import is_blank, match_heading, scan


def heading_depth(
    content: str,
    options: RuleOptions,
    context: Optional[LintContext] = None
) -> list[LintResult]:
    """Flag headings nested deeper than max_heading_depth."""
    results = []
    for number, line, in_fence in scan(content.split('\n')):
        if in_fence:
            continue
        match = match_heading(line)
        if not match:
            continue
        depth = len(match.group(1))
        if depth > options.max_heading_depth:
            results.append(LintResult(
                id=f"heading-depth-{number}",
                rule_id="heading-depth",
                message_key="formatter_rule_heading_depth_desc",
                message=f"Heading depth {depth} exceeds limit of {options.max_heading_depth}",
                line=number,
            ))
    return results


def long_paragraph(
    content: str,
    options: RuleOptions,
    context: Optional[LintContext] = None
) -> list[LintResult]:
    """
    Flag paragraphs longer than max_paragraph_chars.

    A paragraph is a run of non-blank lines that are neither headings nor
    part of a fenced code block. Its length is that of the stripped lines
    joined by single spaces. The result spans every line of the paragraph.
    """
    results = []
    buffer: list[str] = []
    start = 0

    def flush(end: int) -> None:
        text = ' '.join(buffer).strip()
        if len(text) > options.max_paragraph_chars:
            results.append(LintResult(
                id=f"long-paragraph-{start}",
                rule_id="long-paragraph",
                message_key="formatter_rule_long_paragraph_desc",
                message=(
                    f"Paragraph is {len(text)} characters "
                    f"(max {options.max_paragraph_chars})"
                ),
                line=start,
                lines=list(range(start, end + 1)),
            ))
        buffer.clear()

    for number, line, in_fence in scan(content.split('\n')):
        if in_fence or is_blank(line) or match_heading(line):
            if buffer:
                flush(number - 1)
            continue
        if not buffer:
            start = number
        buffer.append(line.strip())

    if buffer:
        flush(start + len(buffer) - 1)

    return results


RULES = [
    FormatRule(
        id="heading-depth",
        category=RuleCategory.WRITING,
        enabled_by_default=False,
        lint=heading_depth,
        severity=Severity.INFO,
    ),
    FormatRule(
        id="long-paragraph",
        category=RuleCategory.WRITING,
        enabled_by_default=False,
        lint=long_paragraph,
        severity=Severity.INFO,
    ),
]
