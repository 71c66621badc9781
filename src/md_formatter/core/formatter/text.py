"""Line scanning helpers shared by all rules."""
import re
from dataclasses import dataclass
from typing import Iterator, Optional

FENCE_RE = re.compile(r'^(```|~~~)')
HEADING_RE = re.compile(r'^(#{1,6})\s+(.*)$')


@dataclass
class FenceState:
    """
    Toggle parser for fenced code blocks.

    A line starting with ``` or ~~~ opens a fence when outside one, and
    closes it only when its token matches the one that opened it.
    """
    fence: Optional[str] = None

    @property
    def inside(self) -> bool:
        return self.fence is not None

    def feed(self, line: str) -> bool:
        """
        Advance the state by one line.

        Returns True when the line belongs to a fenced block, delimiter
        lines included.
        """
        match = FENCE_RE.match(line)
        if match:
            token = match.group(1)
            if self.fence is None:
                self.fence = token
                return True
            if self.fence == token:
                self.fence = None
                return True
        return self.fence is not None


def scan(lines: list[str]) -> Iterator[tuple[int, str, bool]]:
    """Yield (1-based line number, line, in_fence) for each line."""
    state = FenceState()
    for number, line in enumerate(lines, 1):
        yield number, line, state.feed(line)


def split_lines(content: str) -> tuple[list[str], str]:
    """
    Split content for line rewriting.

    The final newline is held apart so rules can add or drop lines
    without losing it. Returns (lines, terminator).
    """
    if content.endswith('\n'):
        return content[:-1].split('\n'), '\n'
    return content.split('\n'), ''


def join_lines(lines: list[str], terminator: str) -> str:
    return '\n'.join(lines) + terminator


def is_blank(line: str) -> bool:
    return not line.strip()


def match_heading(line: str) -> Optional[re.Match]:
    """Match an ATX heading; group(1) is the marker, group(2) the text."""
    return HEADING_RE.match(line)


def count_lines(content: str) -> int:
    """Number of addressable lines (an empty document has one)."""
    return len(content.split('\n'))
