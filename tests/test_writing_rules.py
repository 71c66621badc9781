"""Tests for writing quality rules."""
from md_formatter.core.formatter import RuleOptions
from md_formatter.core.formatter.rules.writing import heading_depth, long_paragraph


def test_heading_depth():
    """Test headings deeper than the limit are flagged."""
    results = heading_depth("# a\n#### ok\n##### deep\n", RuleOptions())

    assert len(results) == 1
    assert results[0].line == 3
    assert results[0].rule_id == "heading-depth"
    assert results[0].message == "Heading depth 5 exceeds limit of 4"


def test_heading_depth_respects_option_and_fences():
    """Test a custom limit and fenced headings."""
    content = "## two\n```\n### fenced\n```\n### three\n"
    results = heading_depth(content, RuleOptions(max_heading_depth=2))
    assert [r.line for r in results] == [5]


def test_long_paragraph_spans_all_lines():
    """Test that a long paragraph result covers every line."""
    content = "short\n\nthis line is long\nand continues here\n\n# H\n"
    results = long_paragraph(content, RuleOptions(max_paragraph_chars=20))

    assert len(results) == 1
    assert results[0].id == "long-paragraph-3"
    assert results[0].line == 3
    assert results[0].lines == [3, 4]


def test_long_paragraph_at_end_of_document():
    """Test a paragraph closed by the end of the document."""
    content = "# H\n" + "word " * 10
    results = long_paragraph(content, RuleOptions(max_paragraph_chars=20))
    assert [(r.line, r.lines) for r in results] == [(2, [2])]


def test_long_paragraph_ignores_code_blocks():
    """Test that fenced code is not counted as prose."""
    content = "```\n" + "x" * 100 + "\n```\n"
    assert long_paragraph(content, RuleOptions(max_paragraph_chars=20)) == []


def test_writing_rules_off_by_default(engine):
    """Test that writing rules only run when enabled."""
    content = "###### deep\n\n" + " ".join(["word"] * 300) + "\n"
    assert engine.lint(content) == []

    results = engine.lint(content, RuleOptions(enabled_rules={"heading-depth", "long-paragraph"}))
    assert {r.rule_id for r in results} == {"heading-depth", "long-paragraph"}
    assert all(r.severity.value == "info" for r in results)
