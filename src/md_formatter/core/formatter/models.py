"""Data models for the formatter."""
from dataclasses import dataclass, field, fields
from enum import Enum
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class RuleCategory(Enum):
    """Rule categories, in registry order."""
    WHITESPACE = "whitespace"
    HEADING = "heading"
    LIST = "list"
    BLOCKQUOTE = "blockquote"
    CODE_BLOCK = "code-block"
    WRITING = "writing"
    ACADEMIC = "academic"


CATEGORY_ORDER = {category: index for index, category in enumerate(RuleCategory)}


class Severity(Enum):
    """Severity levels for lint results."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class CitationStyle(Enum):
    """Journal citation styles understood by the academic rules."""
    IEEE = "ieee"
    ACM = "acm"
    APA = "apa"

    @property
    def is_numeric(self) -> bool:
        return self in (CitationStyle.IEEE, CitationStyle.ACM)

    @classmethod
    def parse(cls, value) -> "CitationStyle":
        """Parse a style name, falling back to IEEE for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.warning(f"Unknown citation style: {value!r}, using ieee")
            return cls.IEEE


LIST_MARKERS = ("-", "*", "+")
FENCE_STYLES = ("```", "~~~")
COUNT_OPTIONS = (
    "max_consecutive_blank_lines",
    "list_indent_size",
    "heading_blank_lines_before",
    "heading_blank_lines_after",
)


class RuleKind(Enum):
    """Which capabilities a rule provides."""
    FIX_ONLY = "fix_only"
    LINT_ONLY = "lint_only"
    FIX_AND_LINT = "fix_and_lint"


@dataclass(frozen=True)
class RuleOptions:
    """Options consumed by specific rules. Absent values use rule defaults."""
    enabled_rules: Optional[frozenset] = None
    disabled_rules: frozenset = frozenset()
    max_heading_depth: int = 4
    max_paragraph_chars: int = 800
    figure_format: str = "Figure 1:"
    table_format: str = "Table 1:"
    citation_style: CitationStyle = CitationStyle.IEEE
    max_consecutive_blank_lines: int = 1
    list_marker: str = "-"
    list_indent_size: int = 4
    heading_blank_lines_before: int = 1
    heading_blank_lines_after: int = 1
    code_fence_style: str = "```"

    def __post_init__(self):
        # Accept plain iterables and strings from callers and config files
        if self.enabled_rules is not None and not isinstance(self.enabled_rules, frozenset):
            object.__setattr__(self, "enabled_rules", frozenset(self.enabled_rules))
        if not isinstance(self.disabled_rules, frozenset):
            object.__setattr__(self, "disabled_rules", frozenset(self.disabled_rules or ()))
        if not isinstance(self.citation_style, CitationStyle):
            object.__setattr__(self, "citation_style", CitationStyle.parse(self.citation_style))
        if self.list_marker not in LIST_MARKERS:
            raise ValueError(f"list_marker must be one of {LIST_MARKERS!r}, got {self.list_marker!r}")
        if self.code_fence_style not in FENCE_STYLES:
            raise ValueError(
                f"code_fence_style must be one of {FENCE_STYLES!r}, got {self.code_fence_style!r}"
            )
        for name in COUNT_OPTIONS:
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if self.list_indent_size < 1:
            raise ValueError("list_indent_size must be at least 1")

    @classmethod
    def from_dict(cls, data: dict) -> "RuleOptions":
        """Create from dictionary, ignoring unknown keys."""
        known_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in known_fields and v is not None}
        return cls(**filtered)

    def to_dict(self) -> dict:
        return {
            "enabled_rules": sorted(self.enabled_rules) if self.enabled_rules is not None else None,
            "disabled_rules": sorted(self.disabled_rules),
            "max_heading_depth": self.max_heading_depth,
            "max_paragraph_chars": self.max_paragraph_chars,
            "figure_format": self.figure_format,
            "table_format": self.table_format,
            "citation_style": self.citation_style.value,
            "max_consecutive_blank_lines": self.max_consecutive_blank_lines,
            "list_marker": self.list_marker,
            "list_indent_size": self.list_indent_size,
            "heading_blank_lines_before": self.heading_blank_lines_before,
            "heading_blank_lines_after": self.heading_blank_lines_after,
            "code_fence_style": self.code_fence_style,
        }


@dataclass(frozen=True)
class FormatEngineOptions(RuleOptions):
    """Rule options plus an optional preset name resolved at call time."""
    preset: Optional[str] = None

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["preset"] = self.preset
        return data


@dataclass
class LintResult:
    """A single issue reported by a lint rule."""
    id: str
    rule_id: str
    message_key: str
    message: str
    line: int
    lines: Optional[list[int]] = None
    severity: Severity = Severity.WARNING

    def line_refs(self) -> list[int]:
        """Every line number this result points at."""
        refs = [self.line]
        if self.lines:
            refs.extend(n for n in self.lines if n != self.line)
        return refs

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "rule_id": self.rule_id,
            "message_key": self.message_key,
            "message": self.message,
            "line": self.line,
            "severity": self.severity.value,
        }
        if self.lines:
            data["lines"] = list(self.lines)
        return data


@dataclass(frozen=True)
class LintContext:
    """Restricts lint output to a set of changed lines (empty means all)."""
    changed_lines: Optional[frozenset] = None

    def __post_init__(self):
        if self.changed_lines is not None and not isinstance(self.changed_lines, frozenset):
            object.__setattr__(self, "changed_lines", frozenset(self.changed_lines))

    @property
    def is_scoped(self) -> bool:
        return bool(self.changed_lines)

    def allows(self, result: LintResult) -> bool:
        if not self.is_scoped:
            return True
        return any(line in self.changed_lines for line in result.line_refs())

    @classmethod
    def from_diff(cls, previous: str, current: str) -> "LintContext":
        """Build a context from a line diff between two versions."""
        from .diff import compute_changed_lines
        return cls(changed_lines=frozenset(compute_changed_lines(previous, current)))


FixFn = Callable[[str, RuleOptions], str]
LintFn = Callable[[str, RuleOptions, Optional[LintContext]], list[LintResult]]


@dataclass(frozen=True)
class FormatRule:
    """A registered formatting rule with a fix, a lint, or both."""
    id: str
    category: RuleCategory
    enabled_by_default: bool = True
    fix: Optional[FixFn] = None
    lint: Optional[LintFn] = None
    severity: Severity = Severity.WARNING
    name: str = ""
    description: str = ""

    def __post_init__(self):
        if self.fix is None and self.lint is None:
            raise ValueError(f"Rule {self.id!r} must define fix, lint, or both")
        key = "formatter_rule_" + self.id.replace("-", "_")
        if not self.name:
            object.__setattr__(self, "name", key)
        if not self.description:
            object.__setattr__(self, "description", f"{key}_desc")

    @property
    def kind(self) -> RuleKind:
        if self.fix and self.lint:
            return RuleKind.FIX_AND_LINT
        return RuleKind.FIX_ONLY if self.fix else RuleKind.LINT_ONLY

    @property
    def summary(self) -> str:
        """First docstring line of the rule's main function."""
        func = self.fix or self.lint
        return (func.__doc__ or "No description").strip().split('\n')[0]


@dataclass
class FormatResult:
    """Outcome of one format invocation."""
    original: str
    formatted: str
    has_changes: bool = False
    applied_rules: list[str] = field(default_factory=list)
    lint_results: list[LintResult] = field(default_factory=list)
    changed_lines: list[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "formatted": self.formatted,
            "has_changes": self.has_changes,
            "applied_rules": list(self.applied_rules),
            "lint_results": [r.to_dict() for r in self.lint_results],
            "changed_lines": list(self.changed_lines),
        }
