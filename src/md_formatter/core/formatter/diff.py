"""Line-level diffing for diff-aware linting."""
from difflib import SequenceMatcher


def compute_changed_lines(previous: str, current: str) -> list[int]:
    """
    Lines of `current` (1-based) that differ from `previous`.

    Replaced and inserted lines count as changed. A pure deletion marks
    the line that now sits where the removed text used to be.
    """
    if previous == current:
        return []

    old_lines = previous.split('\n')
    new_lines = current.split('\n')
    matcher = SequenceMatcher(None, old_lines, new_lines, autojunk=False)

    changed: set[int] = set()
    for tag, _i1, _i2, j1, j2 in matcher.get_opcodes():
        if tag in ("replace", "insert"):
            changed.update(range(j1 + 1, j2 + 1))
        elif tag == "delete":
            changed.add(min(j1 + 1, len(new_lines)))

    return sorted(changed)


def lines_touched_by(before: str, after: str) -> list[int]:
    """
    Lines of `before` (1-based) that a rewrite to `after` touches.

    Used to report what a fix would change; insertions point at the
    line that follows them.
    """
    if before == after:
        return []

    old_lines = before.split('\n')
    new_lines = after.split('\n')
    matcher = SequenceMatcher(None, old_lines, new_lines, autojunk=False)

    touched: set[int] = set()
    for tag, i1, i2, _j1, _j2 in matcher.get_opcodes():
        if tag in ("replace", "delete"):
            touched.update(range(i1 + 1, i2 + 1))
        elif tag == "insert":
            touched.add(min(i1 + 1, len(old_lines)))

    return sorted(touched)
