"""CLI for md-formatter.

Formats and lints Markdown files from the terminal.
"""
import argparse
from datetime import datetime, timezone
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from md_formatter import __version__
from md_formatter.config import Config, REPORT_FORMATS
from md_formatter.core.formatter import (
    PRESETS,
    FormatResult,
    export_to_json,
    export_to_markdown,
    export_to_sarif,
    format_content,
    initialize_rules,
    lint_content,
    registry,
)


def main(argv: list[str] | None = None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="md-formatter",
        description="Format and lint Markdown documents, including academic papers"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # format command
    f = subparsers.add_parser("format", help="Apply fix rules to a Markdown file")
    f.add_argument("path", type=Path, help="Path to Markdown file")
    f.add_argument(
        "--write", action="store_true",
        help="Write the formatted content back to the file"
    )
    _add_rule_arguments(f)
    f.add_argument(
        "--previous", type=Path,
        help="Earlier version of the file; only lint issues on changed lines are reported"
    )
    f.add_argument(
        "--report", choices=["json", "markdown", "sarif"],
        help="Emit a report instead of the formatted content"
    )
    f.add_argument("-o", "--output", type=Path, help="Write the report to this file")

    # lint command
    lt = subparsers.add_parser("lint", help="Report issues without changing the file")
    lt.add_argument("path", type=Path, help="Path to Markdown file")
    _add_rule_arguments(lt)
    lt.add_argument(
        "--format", dest="output_format", choices=REPORT_FORMATS,
        help="Output format (default: from config, else text)"
    )

    # rules command
    subparsers.add_parser("rules", help="List available rules")

    # presets command
    subparsers.add_parser("presets", help="List available presets")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    if args.command == "format":
        format_command(args)
    elif args.command == "lint":
        lint_command(args)
    elif args.command == "rules":
        rules_command()
    elif args.command == "presets":
        presets_command()


def _add_rule_arguments(parser: argparse.ArgumentParser):
    parser.add_argument(
        "--preset", choices=sorted(PRESETS),
        help="Rule preset (overrides config)"
    )
    parser.add_argument(
        "--rules",
        help="Comma-separated rule ids to enable (overrides preset and config)"
    )
    parser.add_argument("--config", type=Path, help="Path to YAML config file")


def _fail(message: str):
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _read(path: Path) -> str:
    path = path.expanduser()
    if not path.is_file():
        _fail(f"File not found: {path}")
    return path.read_text(encoding="utf-8")


def _load_options(args):
    """Merge config file, environment and command line into engine options."""
    if args.config is not None and not args.config.expanduser().is_file():
        _fail(f"Config not found: {args.config}")

    config = Config.load(args.config)
    if args.preset:
        config.preset = args.preset
    if args.rules:
        config.preset = None
        config.enabled_rules = [r.strip() for r in args.rules.split(",") if r.strip()]
    try:
        return config, config.to_engine_options()
    except ValueError as e:
        _fail(f"Invalid config: {e}")


def _render_report(result: FormatResult, report_format: str, path: Path) -> str:
    if report_format == "json":
        return export_to_json(result, generated_at=datetime.now(timezone.utc).isoformat())
    if report_format == "markdown":
        return export_to_markdown(result)
    return json.dumps(export_to_sarif(result, file_uri=path.as_posix(), registry=registry), indent=2)


def format_command(args):
    """Execute the format command."""
    content = _read(args.path)
    previous = _read(args.previous) if args.previous else None
    _, options = _load_options(args)

    result = format_content(content, options, previous_content=previous)

    if args.write and result.has_changes:
        args.path.expanduser().write_text(result.formatted, encoding="utf-8")
        print(
            f"Formatted {args.path} ({len(result.applied_rules)} rules applied)",
            file=sys.stderr
        )

    if args.report:
        report = _render_report(result, args.report, args.path)
        if args.output:
            args.output.expanduser().write_text(report, encoding="utf-8")
            print(f"Report written to {args.output}", file=sys.stderr)
        else:
            sys.stdout.write(report + "\n")
    elif not args.write:
        sys.stdout.write(result.formatted)


def lint_command(args):
    """Execute the lint command. Exits with status 1 when issues are found."""
    content = _read(args.path)
    config, options = _load_options(args)
    output_format = args.output_format or config.report_format

    issues = lint_content(content, options)
    result = FormatResult(original=content, formatted=content, lint_results=issues)

    if output_format == "text":
        _print_issues(result)
    else:
        sys.stdout.write(_render_report(result, output_format, args.path) + "\n")

    if issues:
        sys.exit(1)


def _print_issues(result: FormatResult):
    console = Console()
    if not result.lint_results:
        console.print("[green]No issues found[/green]")
        return

    table = Table(title="Lint issues")
    table.add_column("Line", justify="right")
    table.add_column("Rule", style="cyan")
    table.add_column("Severity")
    table.add_column("Message")
    for issue in result.lint_results:
        table.add_row(str(issue.line), issue.rule_id, issue.severity.value, issue.message)

    console.print(table)
    console.print(f"{len(result.lint_results)} issues found")


def rules_command():
    """Execute the rules command."""
    initialize_rules()
    table = Table(title="Formatting rules")
    table.add_column("Rule", style="cyan")
    table.add_column("Category")
    table.add_column("Kind")
    table.add_column("Default")
    table.add_column("Description")
    for rule in registry.rules():
        table.add_row(
            rule.id,
            rule.category.value,
            rule.kind.value,
            "on" if rule.enabled_by_default else "off",
            rule.summary,
        )

    console = Console()
    console.print(table)
    stats = registry.stats()
    console.print(f"{stats['total']} rules ({stats['enabled']} enabled by default)")


def presets_command():
    """Execute the presets command."""
    table = Table(title="Presets")
    table.add_column("Preset", style="cyan")
    table.add_column("Rules", justify="right")
    table.add_column("Citation style")
    table.add_column("Description")
    for name, preset in PRESETS.items():
        table.add_row(
            name,
            str(len(preset.enabled_rule_ids)),
            preset.options.citation_style.value,
            preset.description,
        )
    Console().print(table)


if __name__ == "__main__":
    main()
