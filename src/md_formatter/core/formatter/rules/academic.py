"""
Academic formatting rules (lint only).

Checks the conventions journals care about: numbered headings, figure and
table captions, citation and reference-list style, figure references and
the presence of an abstract and keywords. All rules are off by default and
are switched on by the journal presets.
"""
import re
from dataclasses import dataclass
from typing import Optional

from ..models import FormatRule, LintContext, LintResult, RuleCategory, RuleOptions
from ..text import is_blank, match_heading, scan
from .common import message_key
from .writing import heading_depth, long_paragraph

NUMBERED_HEADING_RE = re.compile(r'^(\d+(?:\.\d+)*)[.)]?\s+(.+)')
CAPTION_FORMAT_RE = re.compile(r'^([A-Za-z.]+)\s+1\s*([.:])?')

FIGURE_ALIASES = ("Figure", "Fig.", "Fig")
TABLE_ALIASES = ("Table", "Tab.", "Tab")

BRACKET_CITATION_RE = re.compile(r'\[\d+(?:\s*,\s*\d+|\s*-\s*\d+)?\]')
APA_CITATION_RE = re.compile(r'\([A-Z][A-Za-z.\s&-]+?,\s*\d{4}[a-z]?\)')

REFERENCES_HEADING_RE = re.compile(
    r'^(#{1,6})\s+(?:\d+(?:\.\d+)*[.)]?\s+)?(?:references|bibliography|参考文献)(?![A-Za-z])',
    re.IGNORECASE
)
NUMERIC_ENTRY_RE = re.compile(r'^\s*(?:[-*+]\s+)?\[(\d+)\]\s+\S')
BRACKET_ENTRY_RE = re.compile(r'^\s*(?:[-*+]\s+)?\[\d+\]')
APA_ENTRY_RE = re.compile(r'[A-Za-z].*\(\d{4}[a-z]?\)')

ABSTRACT_HEADING_RE = re.compile(
    r'^#{1,6}\s+[*_]*(?:abstract|摘要)(?![A-Za-z])', re.IGNORECASE
)
KEYWORDS_HEADING_RE = re.compile(
    r'^#{1,6}\s+[*_]*(?:keywords|key words|index terms|关键词)[*_]*\s*(?:[:：][*_]*\s*(.*))?$',
    re.IGNORECASE
)
KEYWORDS_LABEL_RE = re.compile(
    r'^[*_]*(?:keywords|key words|index terms|关键词)[*_]*\s*[:：][*_]*\s*(.*)$',
    re.IGNORECASE
)
KEYWORD_SPLIT_RE = re.compile(r'[,;，；]')
MAX_KEYWORDS = 12


def _result(rule_id: str, kind: str, line: int, message: str) -> LintResult:
    return LintResult(
        id=f"{rule_id}-{kind}-{line}",
        rule_id=rule_id,
        message_key=message_key(rule_id, kind),
        message=message,
        line=line,
    )


# ---------------------------------------------------------------------------
# heading-numbering
# ---------------------------------------------------------------------------


def heading_numbering(
    content: str,
    options: RuleOptions,
    context: Optional[LintContext] = None
) -> list[LintResult]:
    """
    Check that numbered headings form a consistent outline.

    Keeps the last number seen at each heading level. For a heading at
    level L the expected number extends the parent numbers with the next
    sibling value, or 1 for a first child. Reports the first of: a skipped
    parent level, a wrong parent prefix (when the group count matches L),
    a wrong sequence number, or a group count that differs from L. Once
    any heading is numbered, later un-numbered headings are reported as
    missing their number.
    """
    results = []
    stack: list[int] = []
    numbering_seen = False

    for number, line, in_fence in scan(content.split('\n')):
        if in_fence:
            continue
        heading = match_heading(line)
        if not heading:
            continue

        level = len(heading.group(1))
        numbered = NUMBERED_HEADING_RE.match(heading.group(2))
        if not numbered:
            if numbering_seen:
                results.append(_result(
                    "heading-numbering", "missing", number,
                    "Heading numbering is missing or malformed"
                ))
            continue

        numbering_seen = True
        numbers = [int(n) for n in numbered.group(1).split('.')]
        found = numbered.group(1)

        issue = None
        if len(stack) < level - 1:
            issue = ("hierarchy", "Heading numbering skipped a parent level")
        else:
            parents = stack[:level - 1]
            current = stack[level - 1] + 1 if len(stack) >= level else 1
            expected = '.'.join(str(n) for n in parents + [current])
            if len(numbers) == level and numbers[:-1] != parents:
                issue = ("prefix", f"Heading number prefix should be {expected}, found {found}")
            elif numbers[-1] != current:
                issue = ("sequence", f"Heading number should be {expected}, found {found}")
            elif len(numbers) != level:
                issue = (
                    "depth",
                    f"Heading number {found} has {len(numbers)} parts but the heading is level {level}"
                )

        if issue:
            results.append(_result("heading-numbering", issue[0], number, issue[1]))

        # Resync to the observed value so one mistake is reported once
        ancestors = stack[:level - 1]
        while len(ancestors) < level - 1:
            position = len(ancestors)
            ancestors.append(numbers[position] if len(numbers) == level else 0)
        stack = ancestors + [numbers[-1]]

    return results


# ---------------------------------------------------------------------------
# figure-caption-format / table-caption-format
# ---------------------------------------------------------------------------


@dataclass
class Caption:
    label: str
    number: int
    punctuation: str
    text: str


def parse_caption_format(fmt: Optional[str], fallback_label: str) -> tuple[str, str]:
    """
    Read the label and punctuation out of a format such as "Fig. 1." .

    A format without punctuation expects none; an unreadable format falls
    back to `<fallback_label> 1:`.
    """
    match = CAPTION_FORMAT_RE.match((fmt or '').strip())
    if not match:
        return fallback_label, ':'
    return match.group(1), match.group(2) or ''


def _labels(label: str, aliases: tuple[str, ...]) -> list[str]:
    unique = list(dict.fromkeys([label, *aliases]))
    return sorted(unique, key=len, reverse=True)


def _caption_re(labels: list[str]) -> re.Pattern:
    alternatives = '|'.join(re.escape(label) for label in labels)
    return re.compile(
        rf'^({alternatives})[ \t]+(\d+)([.:])?(?=[ \t]|$)[ \t]*(.*?)[ \t]*$',
        re.IGNORECASE
    )


def match_caption(line: str, pattern: re.Pattern) -> Optional[Caption]:
    match = pattern.match(line)
    if not match:
        return None
    return Caption(
        label=match.group(1),
        number=int(match.group(2)),
        punctuation=match.group(3) or '',
        text=match.group(4),
    )


def _check_captions(
    content: str,
    rule_id: str,
    noun: str,
    fmt: str,
    aliases: tuple[str, ...]
) -> list[LintResult]:
    label, punctuation = parse_caption_format(fmt, aliases[0])
    pattern = _caption_re(_labels(label, aliases))
    results = []
    last_number = 0

    for number, line, in_fence in scan(content.split('\n')):
        if in_fence:
            continue
        caption = match_caption(line, pattern)
        if not caption:
            continue

        if caption.label != label:
            issue = ("label", f"{noun} caption label should be '{label}'")
        elif caption.punctuation != punctuation:
            expected = f"'{punctuation}'" if punctuation else "no punctuation"
            issue = ("punctuation", f"{noun} caption should use {expected} after the number")
        elif caption.number != last_number + 1:
            issue = ("sequence", f"{noun} numbering should continue with {last_number + 1}")
        elif not caption.text:
            issue = ("empty", f"{noun} caption should include descriptive text")
        else:
            issue = None

        if issue:
            results.append(_result(rule_id, issue[0], number, issue[1]))

        last_number = caption.number

    return results


def figure_caption_format(
    content: str,
    options: RuleOptions,
    context: Optional[LintContext] = None
) -> list[LintResult]:
    """Check figure caption label, punctuation, numbering and text."""
    return _check_captions(
        content, "figure-caption-format", "Figure", options.figure_format, FIGURE_ALIASES
    )


def table_caption_format(
    content: str,
    options: RuleOptions,
    context: Optional[LintContext] = None
) -> list[LintResult]:
    """Check table caption label, punctuation, numbering and text."""
    return _check_captions(
        content, "table-caption-format", "Table", options.table_format, TABLE_ALIASES
    )


# ---------------------------------------------------------------------------
# section-depth / paragraph-length
# ---------------------------------------------------------------------------


def _relabel(results: list[LintResult], rule_id: str, message: str) -> list[LintResult]:
    for result in results:
        result.id = f"{rule_id}-{result.line}"
        result.rule_id = rule_id
        result.message_key = message_key(rule_id)
        result.message = message
    return results


def section_depth(
    content: str,
    options: RuleOptions,
    context: Optional[LintContext] = None
) -> list[LintResult]:
    """Flag sections nested deeper than the journal allows."""
    return _relabel(
        heading_depth(content, options, context), "section-depth", "Section depth exceeds limit"
    )


def paragraph_length(
    content: str,
    options: RuleOptions,
    context: Optional[LintContext] = None
) -> list[LintResult]:
    """Flag paragraphs too long for the configured academic style."""
    return _relabel(
        long_paragraph(content, options, context), "paragraph-length",
        "Paragraph is too long for the configured academic style"
    )


# ---------------------------------------------------------------------------
# citation-format
# ---------------------------------------------------------------------------


def citation_format(
    content: str,
    options: RuleOptions,
    context: Optional[LintContext] = None
) -> list[LintResult]:
    """
    Flag in-text citations that do not match the citation style.

    IEEE and ACM expect bracketed numbers, APA expects (Author, Year).
    """
    style = options.citation_style
    results = []

    for number, line, in_fence in scan(content.split('\n')):
        if in_fence:
            continue
        if style.is_numeric and APA_CITATION_RE.search(line):
            results.append(_result(
                "citation-format", "style", number,
                "Citations should use bracketed numeric style (e.g., [1])."
            ))
        elif not style.is_numeric and BRACKET_CITATION_RE.search(line):
            results.append(_result(
                "citation-format", "style_apa", number,
                "Citations should use APA author-year style (e.g., (Smith, 2024))."
            ))

    return results


# ---------------------------------------------------------------------------
# reference-list-format
# ---------------------------------------------------------------------------


def reference_list_format(
    content: str,
    options: RuleOptions,
    context: Optional[LintContext] = None
) -> list[LintResult]:
    """
    Check entries under a References / Bibliography heading.

    The section runs until a heading of the same or a shallower level.
    Numeric styles want `[n]` entries numbered 1, 2, 3... without gaps;
    after a gap the count resumes from the number found. APA wants
    author-year entries and no bracket numbers.
    """
    style = options.citation_style
    results = []
    section_level = 0
    expected = 1

    for number, line, in_fence in scan(content.split('\n')):
        if in_fence:
            continue

        references = REFERENCES_HEADING_RE.match(line)
        if references:
            section_level = len(references.group(1))
            expected = 1
            continue

        heading = match_heading(line)
        if heading:
            if section_level and len(heading.group(1)) <= section_level:
                section_level = 0
            continue

        if not section_level or is_blank(line):
            continue

        if style.is_numeric:
            entry = NUMERIC_ENTRY_RE.match(line)
            if not entry:
                results.append(_result(
                    "reference-list-format", "style_numeric", number,
                    "References should use bracketed numeric entries (e.g., [1])."
                ))
                continue
            found = int(entry.group(1))
            if found != expected:
                results.append(_result(
                    "reference-list-format", "sequence", number,
                    f"Reference numbering should continue with [{expected}]."
                ))
            expected = found + 1
        elif BRACKET_ENTRY_RE.match(line):
            results.append(_result(
                "reference-list-format", "style_apa", number,
                "APA reference entries should not be bracket-numbered."
            ))
        elif not APA_ENTRY_RE.search(line):
            results.append(_result(
                "reference-list-format", "pattern", number,
                "APA references should start with author and year (e.g., Smith, J. (2024))."
            ))

    return results


# ---------------------------------------------------------------------------
# figure-reference
# ---------------------------------------------------------------------------


def figure_reference(
    content: str,
    options: RuleOptions,
    context: Optional[LintContext] = None
) -> list[LintResult]:
    """
    Flag figure mentions with no matching caption or placed before it.

    Every `Figure N` / `Fig. N` mention is checked against the first
    caption numbered N.
    """
    label, _ = parse_caption_format(options.figure_format, FIGURE_ALIASES[0])
    labels = _labels(label, FIGURE_ALIASES)
    caption_pattern = _caption_re(labels)
    alternatives = '|'.join(re.escape(label) for label in labels)
    mention_pattern = re.compile(rf'(?<![\w.])({alternatives})\s+(\d+)\b', re.IGNORECASE)

    lines = content.split('\n')
    captions: dict[int, int] = {}
    caption_lines: set[int] = set()
    for number, line, in_fence in scan(lines):
        if in_fence:
            continue
        caption = match_caption(line, caption_pattern)
        if caption:
            captions.setdefault(caption.number, number)
            caption_lines.add(number)

    results = []
    for number, line, in_fence in scan(lines):
        if in_fence:
            continue
        for mention in mention_pattern.finditer(line):
            if number in caption_lines and mention.start() == 0:
                continue
            figure = int(mention.group(2))
            defined_at = captions.get(figure)
            if defined_at is None:
                kind, message = "missing", f"Figure {figure} is referenced but never defined."
            elif number < defined_at:
                kind, message = "order", f"Figure {figure} should be defined before it is referenced."
            else:
                continue
            results.append(LintResult(
                id=f"figure-reference-{kind}-{number}-{mention.start()}",
                rule_id="figure-reference",
                message_key=message_key("figure-reference", kind),
                message=message,
                line=number,
            ))

    return results


# ---------------------------------------------------------------------------
# abstract-format / keywords-format
# ---------------------------------------------------------------------------


def _section_body(lines: list[tuple[int, str, bool]], start: int) -> list[tuple[int, str]]:
    """Non-blank lines after index `start` up to the next heading."""
    body = []
    for number, line, in_fence in lines[start + 1:]:
        if not in_fence and match_heading(line):
            break
        if not is_blank(line):
            body.append((number, line))
    return body


def abstract_format(
    content: str,
    options: RuleOptions,
    context: Optional[LintContext] = None
) -> list[LintResult]:
    """Require an Abstract section with content."""
    lines = list(scan(content.split('\n')))
    for index, (number, line, in_fence) in enumerate(lines):
        if in_fence or not ABSTRACT_HEADING_RE.match(line):
            continue
        if _section_body(lines, index):
            return []
        return [_result("abstract-format", "empty", number, "Abstract section has no content.")]

    return [_result("abstract-format", "missing", 1, "Abstract section is missing.")]


def _check_keywords(text: str, line: int) -> list[LintResult]:
    parts = [part.strip() for part in KEYWORD_SPLIT_RE.split(text) if part.strip()]
    if not parts:
        return [_result(
            "keywords-format", "invalid", line,
            "Keywords should be a comma- or semicolon-separated list."
        )]
    if len(parts) > MAX_KEYWORDS:
        return [_result(
            "keywords-format", "count", line,
            f"Too many keywords ({len(parts)}); keep the list to {MAX_KEYWORDS} or fewer."
        )]
    return []


def keywords_format(
    content: str,
    options: RuleOptions,
    context: Optional[LintContext] = None
) -> list[LintResult]:
    """
    Require a keyword list of at most twelve items.

    Accepts a Keywords heading followed by the list, or a `Keywords:` line.
    """
    lines = list(scan(content.split('\n')))
    for index, (number, line, in_fence) in enumerate(lines):
        if in_fence:
            continue

        labelled = KEYWORDS_LABEL_RE.match(line)
        if labelled:
            if not labelled.group(1).strip():
                return [_result("keywords-format", "empty", number, "Keywords section has no content.")]
            return _check_keywords(labelled.group(1), number)

        heading = KEYWORDS_HEADING_RE.match(line)
        if not heading:
            continue
        if heading.group(1) and heading.group(1).strip():
            return _check_keywords(heading.group(1), number)
        body = _section_body(lines, index)
        if not body:
            return [_result("keywords-format", "empty", number, "Keywords section has no content.")]
        body_line, text = body[0]
        return _check_keywords(text.strip(), body_line)

    return [_result("keywords-format", "missing", 1, "Keywords section is missing.")]


RULES = [
    FormatRule(
        id="heading-numbering",
        category=RuleCategory.ACADEMIC,
        enabled_by_default=False,
        lint=heading_numbering,
    ),
    FormatRule(
        id="figure-caption-format",
        category=RuleCategory.ACADEMIC,
        enabled_by_default=False,
        lint=figure_caption_format,
    ),
    FormatRule(
        id="table-caption-format",
        category=RuleCategory.ACADEMIC,
        enabled_by_default=False,
        lint=table_caption_format,
    ),
    FormatRule(
        id="section-depth",
        category=RuleCategory.ACADEMIC,
        enabled_by_default=False,
        lint=section_depth,
    ),
    FormatRule(
        id="paragraph-length",
        category=RuleCategory.ACADEMIC,
        enabled_by_default=False,
        lint=paragraph_length,
    ),
    FormatRule(
        id="citation-format",
        category=RuleCategory.ACADEMIC,
        enabled_by_default=False,
        lint=citation_format,
    ),
    FormatRule(
        id="reference-list-format",
        category=RuleCategory.ACADEMIC,
        enabled_by_default=False,
        lint=reference_list_format,
    ),
    FormatRule(
        id="figure-reference",
        category=RuleCategory.ACADEMIC,
        enabled_by_default=False,
        lint=figure_reference,
    ),
    FormatRule(
        id="abstract-format",
        category=RuleCategory.ACADEMIC,
        enabled_by_default=False,
        lint=abstract_format,
    ),
    FormatRule(
        id="keywords-format",
        category=RuleCategory.ACADEMIC,
        enabled_by_default=False,
        lint=keywords_format,
    ),
]
