"""Markdown formatter: fix rules, lint rules, presets and reports."""
from .diff import compute_changed_lines
from .engine import FormatEngine, format_content, lint_content
from .export import export_to_json, export_to_markdown, export_to_sarif
from .models import (
    CitationStyle,
    FormatEngineOptions,
    FormatResult,
    FormatRule,
    LintContext,
    LintResult,
    RuleCategory,
    RuleKind,
    RuleOptions,
    Severity,
)
from .presets import PRESETS, Preset, apply_preset, get_preset
from .registry import DuplicateRuleError, RuleRegistry, register_rule, register_rules, registry
from .rules import ALL_RULES, get_rule_stats, initialize_rules, reset_rules
from .snapshot import RuleState, Snapshot, SnapshotManager

__all__ = [
    "ALL_RULES",
    "CitationStyle",
    "DuplicateRuleError",
    "FormatEngine",
    "FormatEngineOptions",
    "FormatResult",
    "FormatRule",
    "LintContext",
    "LintResult",
    "PRESETS",
    "Preset",
    "RuleCategory",
    "RuleKind",
    "RuleOptions",
    "RuleRegistry",
    "RuleState",
    "Severity",
    "Snapshot",
    "SnapshotManager",
    "apply_preset",
    "compute_changed_lines",
    "export_to_json",
    "export_to_markdown",
    "export_to_sarif",
    "format_content",
    "get_preset",
    "get_rule_stats",
    "initialize_rules",
    "lint_content",
    "register_rule",
    "register_rules",
    "registry",
    "reset_rules",
]
