"""
Report exporters for format results.

- JSON: structured echo of the result, for scripts
- Markdown: human-readable report grouped by rule
- SARIF 2.1.0: static analysis log consumed by CI tooling
"""
from datetime import datetime, timezone
import json
from typing import Optional

from ... import __version__
from .models import FormatResult, LintResult, Severity
from .registry import RuleRegistry

SARIF_VERSION = "2.1.0"
SARIF_SCHEMA = "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/master/Schemata/sarif-schema-2.1.0.json"
TOOL_NAME = "md-formatter"

SARIF_LEVELS = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.INFO: "note",
}

SEVERITY_EMOJI = {
    Severity.ERROR: "❌",
    Severity.WARNING: "⚠️",
    Severity.INFO: "ℹ️",
}


def _timestamp(generated_at: Optional[str]) -> str:
    return generated_at or datetime.now(timezone.utc).isoformat()


def export_to_json(
    result: FormatResult,
    include_content: bool = True,
    generated_at: Optional[str] = None
) -> str:
    """
    Serialize a format result to JSON.

    The same result always gives the same document: no timestamp is added
    unless one is passed in.

    Args:
        result: The result to export
        include_content: Embed the original and formatted text
        generated_at: ISO timestamp to stamp (omitted when None)

    Returns:
        Indented JSON document
    """
    data = {}
    if generated_at is not None:
        data["generated_at"] = generated_at
    data.update({
        "applied_rules": list(result.applied_rules),
        "lint_results": [r.to_dict() for r in result.lint_results],
        "changed_lines": list(result.changed_lines),
        "has_changes": result.has_changes,
        "original_length": len(result.original),
        "formatted_length": len(result.formatted),
    })

    if include_content:
        data["original"] = result.original
        data["formatted"] = result.formatted

    return json.dumps(data, indent=2, ensure_ascii=False)


def _line_label(issue: LintResult) -> str:
    if issue.lines and len(issue.lines) > 1:
        return f"Lines {min(issue.lines)}-{max(issue.lines)}"
    return f"Line {issue.line}"


def export_to_markdown(result: FormatResult, generated_at: Optional[str] = None) -> str:
    """Render a format result as a Markdown report grouped by rule."""
    changed = ', '.join(str(n) for n in result.changed_lines) or "N/A"
    lines = [
        "# Markdown Formatter Report",
        "",
        f"**Generated:** {_timestamp(generated_at)}",
        f"**Applied rules:** {len(result.applied_rules)}",
        f"**Lint issues:** {len(result.lint_results)}",
        f"**Changed lines:** {changed}",
        "",
        "---",
        "",
    ]

    # Group by rule
    by_rule: dict[str, list[LintResult]] = {}
    for issue in result.lint_results:
        by_rule.setdefault(issue.rule_id, []).append(issue)

    if not by_rule:
        lines.append("No lint issues found.")
        lines.append("")

    for rule_id, issues in sorted(by_rule.items()):
        emoji = SEVERITY_EMOJI[issues[0].severity]
        noun = "issue" if len(issues) == 1 else "issues"
        lines.append(f"## {emoji} {rule_id} ({len(issues)} {noun})")
        lines.append("")

        for issue in issues:
            msg = issue.message[:120] + "..." if len(issue.message) > 120 else issue.message
            lines.append(f"- **{_line_label(issue)}**: {msg}")

        lines.append("")

    if result.applied_rules:
        lines.append("## Applied Rules")
        lines.append("")
        for rule_id in result.applied_rules:
            lines.append(f"- {rule_id}")
        lines.append("")

    return "\n".join(lines)


def export_to_sarif(
    result: FormatResult,
    file_uri: str = "document.md",
    registry: Optional[RuleRegistry] = None
) -> dict:
    """
    Build a SARIF 2.1.0 log for the lint results.

    One `tool.driver.rules` entry is emitted per distinct rule id, in order
    of first appearance. When a registry is given, rule names and
    descriptions come from it.
    """
    rules = []
    seen: set[str] = set()
    for issue in result.lint_results:
        if issue.rule_id in seen:
            continue
        seen.add(issue.rule_id)

        rule = registry.get(issue.rule_id) if registry is not None else None
        rules.append({
            "id": issue.rule_id,
            "name": rule.name if rule else issue.rule_id,
            "shortDescription": {"text": rule.summary if rule else issue.message},
            "defaultConfiguration": {"level": SARIF_LEVELS[rule.severity if rule else issue.severity]},
        })

    results = []
    for issue in result.lint_results:
        region = {"startLine": issue.line}
        if issue.lines and len(issue.lines) > 1:
            region["endLine"] = max(issue.lines)
        results.append({
            "ruleId": issue.rule_id,
            "level": SARIF_LEVELS[issue.severity],
            "message": {"text": issue.message},
            "locations": [{
                "physicalLocation": {
                    "artifactLocation": {"uri": file_uri},
                    "region": region,
                }
            }],
        })

    return {
        "version": SARIF_VERSION,
        "$schema": SARIF_SCHEMA,
        "runs": [{
            "tool": {
                "driver": {
                    "name": TOOL_NAME,
                    "version": __version__,
                    "rules": rules,
                }
            },
            "results": results,
        }],
    }
