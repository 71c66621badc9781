"""List rules."""
import re

from ..models import FormatRule, RuleCategory, RuleOptions
from ..text import is_blank, join_lines, scan, split_lines
from .common import lint_from_fix

BULLET_RE = re.compile(r'^([ \t]*)[-*+]([ \t]+)')
THEMATIC_BREAK_RE = re.compile(r'^[ \t]*([-*+])(?:[ \t]*\1){2,}[ \t]*$')
LIST_ITEM_RE = re.compile(r'^([ \t]*)(?:[-*+]|\d+[.)])[ \t]+')


def list_marker_style(content: str, options: RuleOptions) -> str:
    """
    Use one marker (list_marker, `-` by default) for every bullet item.

    Thematic breaks such as `* * *` are not list items and stay as they are.
    """
    marker = options.list_marker
    lines, terminator = split_lines(content)
    fixed = []
    for _, line, in_fence in scan(lines):
        if not in_fence and not THEMATIC_BREAK_RE.match(line):
            line = BULLET_RE.sub(lambda m: m.group(1) + marker + m.group(2), line)
        fixed.append(line)
    return join_lines(fixed, terminator)


def list_indent(content: str, options: RuleOptions) -> str:
    """
    Indent nested list items by list_indent_size spaces per level.

    Nesting is inferred from the indentation actually observed: a deeper
    indent than the enclosing item opens a new level, an indent equal to an
    earlier item returns to that level. The outermost indent of a list is
    kept. A non-indented, non-list line ends the list.
    """
    step = options.list_indent_size
    lines, terminator = split_lines(content)
    fixed = []
    stack: list[int] = []

    for _, line, in_fence in scan(lines):
        if in_fence:
            stack = []
            fixed.append(line)
            continue

        match = None if THEMATIC_BREAK_RE.match(line) else LIST_ITEM_RE.match(line)
        if match:
            indent = match.group(1)
            width = len(indent.expandtabs(step))
            while stack and stack[-1] > width:
                stack.pop()
            if not stack or width > stack[-1]:
                stack.append(width)
            depth = len(stack) - 1
            line = ' ' * (stack[0] + depth * step) + line[len(indent):]
        elif not is_blank(line) and line[0] not in ' \t':
            stack = []

        fixed.append(line)

    return join_lines(fixed, terminator)


RULES = [
    FormatRule(
        id="list-marker-style",
        category=RuleCategory.LIST,
        fix=list_marker_style,
        lint=lint_from_fix(
            "list-marker-style", list_marker_style,
            lambda options: f"List items should use '{options.list_marker}' markers"
        ),
    ),
    FormatRule(
        id="list-indent",
        category=RuleCategory.LIST,
        fix=list_indent,
        lint=lint_from_fix(
            "list-indent", list_indent,
            lambda options: f"Nested list items should be indented by {options.list_indent_size} spaces"
        ),
    ),
]
