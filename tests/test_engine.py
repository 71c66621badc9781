"""Tests for the format engine."""
import logging

import pytest

from md_formatter.core.formatter import (
    ALL_RULES,
    FormatEngine,
    FormatEngineOptions,
    FormatRule,
    LintContext,
    LintResult,
    RuleCategory,
    RuleOptions,
    RuleRegistry,
    Severity,
    compute_changed_lines,
    format_content,
    lint_content,
)
from md_formatter.core.formatter.text import count_lines

ALL_RULE_IDS = frozenset(r.id for r in ALL_RULES)

PAPER = """# 1 Intro

See [1] and (Smith, 2020).

# 3 Method

Figure 1: Overview

As Figure 2 shows.

## References

[1] A. Author, Title.
[3] B. Author, Title.
"""


def test_format_applies_default_rules(engine):
    """Test a default run over messy content."""
    result = engine.format("#Title\n* item\n\n\n\ntext  ")

    assert result.formatted == "# Title\n\n- item\n\ntext\n"
    assert result.original == "#Title\n* item\n\n\n\ntext  "
    assert result.has_changes
    assert result.applied_rules == [
        "trailing-spaces",
        "eof-newline",
        "consecutive-blanks",
        "heading-space",
        "heading-blank-lines",
        "list-marker-style",
    ]
    assert result.lint_results == []


def test_format_without_changes(engine):
    """Test clean content passes through."""
    result = engine.format("# Title\n\nText.\n")

    assert not result.has_changes
    assert result.applied_rules == []
    assert result.changed_lines == []


def test_disabled_rules_are_skipped(engine):
    """Test disabled rules override the defaults."""
    result = engine.format("#Title\n", RuleOptions(disabled_rules={"heading-space"}))
    assert result.formatted == "#Title\n"


def test_unknown_rule_id_is_warned(engine, caplog):
    """Test an unknown enabled rule is logged, not raised."""
    with caplog.at_level(logging.WARNING):
        result = engine.format("a\n", RuleOptions(enabled_rules={"no-such-rule"}))

    assert result.formatted == "a\n"
    assert "Unknown rule: no-such-rule" in caplog.text


def test_lint_results_sorted_and_valid(engine):
    """Test every result points at a real line, in order."""
    results = engine.lint(PAPER, RuleOptions(enabled_rules=ALL_RULE_IDS))
    lines = [r.line for r in results]
    total = count_lines(PAPER)

    assert results
    assert lines == sorted(lines)
    for result in results:
        assert all(1 <= n <= total for n in result.line_refs())


def test_lint_results_have_unique_ids(engine):
    """Test result ids are unique within a run."""
    results = engine.lint(PAPER, RuleOptions(enabled_rules=ALL_RULE_IDS))
    ids = [r.id for r in results]
    assert len(ids) == len(set(ids))


def test_duplicate_ids_get_suffixes():
    """Test colliding ids from a rule are made unique."""
    def twice(content, options, context=None):
        return [
            LintResult(id="same", rule_id="twice", message_key="k", message="m", line=1)
            for _ in range(3)
        ]

    engine = FormatEngine(RuleRegistry([FormatRule(id="twice", category=RuleCategory.WRITING, lint=twice)]))
    results = engine.lint("x\n", RuleOptions(enabled_rules={"twice"}))

    assert [r.id for r in results] == ["same", "same-2", "same-3"]


def test_failing_rule_is_isolated(caplog):
    """Test that a rule raising does not stop the others."""
    def boom(content, options, context=None):
        raise RuntimeError("kaboom")

    def ok(content, options, context=None):
        return [LintResult(id="ok-1", rule_id="ok", message_key="k", message="m", line=1)]

    def bad_fix(content, options):
        raise RuntimeError("fix failed")

    engine = FormatEngine(RuleRegistry([
        FormatRule(id="boom", category=RuleCategory.WRITING, lint=boom, fix=bad_fix),
        FormatRule(id="ok", category=RuleCategory.WRITING, lint=ok),
    ]))

    with caplog.at_level(logging.ERROR):
        result = engine.format("text\n")

    assert result.formatted == "text\n"
    assert [r.rule_id for r in result.lint_results] == ["ok"]
    assert "Rule boom failed" in caplog.text


def test_severity_comes_from_rule(engine):
    """Test results carry their rule's severity."""
    options = RuleOptions(enabled_rules={"heading-depth", "citation-format"}, citation_style="apa")
    results = engine.lint("###### deep [1]\n", options)

    by_rule = {r.rule_id: r.severity for r in results}
    assert by_rule == {"heading-depth": Severity.INFO, "citation-format": Severity.WARNING}


def test_diff_aware_subset(engine):
    """Test a context keeps exactly the results touching changed lines."""
    options = RuleOptions(enabled_rules=ALL_RULE_IDS)
    full = engine.lint(PAPER, options)
    changed = {5, 14}
    scoped = engine.lint(PAPER, options, LintContext(changed_lines=changed))

    expected = [r for r in full if set(r.line_refs()) & changed]
    assert [(r.rule_id, r.line) for r in scoped] == [(r.rule_id, r.line) for r in expected]
    assert scoped
    assert len(scoped) < len(full)


def test_empty_context_means_whole_document(engine):
    """Test an empty changed-line set does not filter."""
    options = RuleOptions(enabled_rules=ALL_RULE_IDS)
    full = engine.lint(PAPER, options)

    for context in (LintContext(), LintContext(changed_lines=set())):
        assert len(engine.lint(PAPER, options, context)) == len(full)


def test_previous_content_scopes_lint(engine):
    """Test lint results are limited to lines edited since the previous version."""
    options = RuleOptions(enabled_rules={"citation-format"}, citation_style="apa")
    previous = "Intro [1].\n\nMiddle.\n\nEnd.\n"
    current = "Intro [1].\n\nMiddle [2].\n\nEnd.\n"

    unscoped = engine.format(current, options)
    scoped = engine.format(current, options, previous_content=previous)

    assert [r.line for r in unscoped.lint_results] == [1, 3]
    assert [r.line for r in scoped.lint_results] == [3]


def test_fence_exclusion(engine):
    """Test fenced heading, list and quote text yields no results."""
    content = "```\n#Heading\n* item\n  + nested\n> >quote\n# 1 Intro\n## 3 Jump\n```\n"
    options = RuleOptions(enabled_rules=ALL_RULE_IDS - {"abstract-format", "keywords-format"})

    assert engine.lint(content, options) == []
    assert engine.format(content).formatted == content


def test_preset_resolves_at_call_time(engine):
    """Test a named preset replaces the caller's rules and options."""
    options = FormatEngineOptions(preset="apa", enabled_rules={"heading-space"})
    results = engine.lint("See [1] for details.\n", options)

    assert "citation-format" in {r.rule_id for r in results}


def test_unknown_preset_falls_back(engine, caplog):
    """Test an unknown preset keeps the caller's options."""
    with caplog.at_level(logging.WARNING):
        result = engine.format("#Title\n", FormatEngineOptions(preset="chicago"))

    assert result.formatted == "# Title\n"
    assert "Unknown preset: chicago" in caplog.text


def test_rule_states(engine):
    """Test rule states reflect the enabled set."""
    states = {s.id: s.enabled for s in engine.rule_states(RuleOptions(disabled_rules={"eof-newline"}))}

    assert len(states) == len(ALL_RULES)
    assert states["trailing-spaces"] is True
    assert states["eof-newline"] is False
    assert states["heading-numbering"] is False


def test_module_functions_use_global_registry():
    """Test the convenience functions initialize the built-in rules."""
    assert format_content("#Title\n").formatted == "# Title\n"
    results = lint_content("See [1].\n", RuleOptions(enabled_rules={"citation-format"}, citation_style="apa"))
    assert [r.rule_id for r in results] == ["citation-format"]


@pytest.mark.parametrize("previous,current,expected", [
    ("a\nb\nc", "a\nb\nc", []),
    ("a\nb\nc", "a\nB\nc", [2]),
    ("a\nc", "a\nb\nc", [2]),
    ("a\nb\nc", "a\nc", [2]),
    ("a\nb", "a\nb\nc\nd", [3, 4]),
])
def test_compute_changed_lines(previous, current, expected):
    """Test line diffing."""
    assert compute_changed_lines(previous, current) == expected


def test_format_reports_changed_lines(engine):
    """Test changed lines of the formatted output."""
    result = engine.format("# Title\n\nbad  \nok\n")
    assert result.changed_lines == [3]
