"""Code block rules."""
import re

from ..models import FormatRule, RuleCategory, RuleOptions
from ..text import FenceState, is_blank, join_lines, split_lines
from .common import lint_from_fix

# Plain delimiters: fence token, optional info string, nothing else
FENCE_OPEN_RE = re.compile(r'^(```|~~~)[ \t]*([^`~\s]*)[ \t]*$')
FENCE_CLOSE_RE = re.compile(r'^(```|~~~)[ \t]*$')


def _fence_blocks(lines: list[str]) -> list[tuple[int, int]]:
    """(opening index, closing index) of every closed fence block."""
    state = FenceState()
    blocks = []
    opened = 0
    for index, line in enumerate(lines):
        was_inside = state.inside
        state.feed(line)
        if not was_inside and state.inside:
            opened = index
        elif was_inside and not state.inside:
            blocks.append((opened, index))
    return blocks


def code_fence_style(content: str, options: RuleOptions) -> str:
    """
    Use one fence token (code_fence_style, backticks by default) for code blocks.

    A block is converted only when both delimiters are plain and its body
    holds no line starting with the target token, so block boundaries
    never move.
    """
    target = options.code_fence_style
    lines, terminator = split_lines(content)

    for opened, closed in _fence_blocks(lines):
        opener = FENCE_OPEN_RE.match(lines[opened])
        closer = FENCE_CLOSE_RE.match(lines[closed])
        if not opener or not closer or opener.group(1) == target:
            continue
        if any(line.startswith(target) for line in lines[opened + 1:closed]):
            continue
        lines[opened] = target + opener.group(2)
        lines[closed] = target

    return join_lines(lines, terminator)


def code_fence_spacing(content: str, options: RuleOptions) -> str:
    """
    Surround fenced code blocks with exactly one blank line.

    Nothing is added at the start or end of the document.
    """
    lines, terminator = split_lines(content)
    state = FenceState()
    result: list[str] = []

    i = 0
    while i < len(lines):
        line = lines[i]
        was_inside = state.inside
        state.feed(line)

        if not was_inside and state.inside:
            while result and is_blank(result[-1]):
                result.pop()
            if result:
                result.append('')
            result.append(line)
            i += 1
            continue

        if was_inside and not state.inside:
            result.append(line)
            j = i + 1
            while j < len(lines) and is_blank(lines[j]):
                j += 1
            if j < len(lines):
                result.append('')
            else:
                result.extend(lines[i + 1:j])
            i = j
            continue

        result.append(line)
        i += 1

    return join_lines(result, terminator)


RULES = [
    FormatRule(
        id="code-fence-style",
        category=RuleCategory.CODE_BLOCK,
        fix=code_fence_style,
        lint=lint_from_fix(
            "code-fence-style", code_fence_style,
            lambda options: f"Code fences should use {options.code_fence_style}"
        ),
    ),
    FormatRule(
        id="code-fence-spacing",
        category=RuleCategory.CODE_BLOCK,
        fix=code_fence_spacing,
        lint=lint_from_fix(
            "code-fence-spacing", code_fence_spacing,
            "Code blocks should be surrounded by one blank line"
        ),
    ),
]
