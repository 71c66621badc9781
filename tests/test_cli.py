"""Tests for the command line interface."""
import json

import pytest

from md_formatter.cli import main


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    """Run in an empty directory with a wide terminal."""
    for var in ("MD_FORMATTER_PRESET", "MD_FORMATTER_CITATION_STYLE", "MD_FORMATTER_REPORT_FORMAT"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("COLUMNS", "200")
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def messy(tmp_path):
    path = tmp_path / "doc.md"
    path.write_text("#Title\n* item\n\n\n\ntext  ", encoding="utf-8")
    return path


def test_format_prints_result(messy, capsys):
    """Test formatted content goes to stdout."""
    main(["format", str(messy)])

    assert capsys.readouterr().out == "# Title\n\n- item\n\ntext\n"
    assert messy.read_text() == "#Title\n* item\n\n\n\ntext  "


def test_format_write(messy, capsys):
    """Test --write rewrites the file in place."""
    main(["format", str(messy), "--write"])

    assert messy.read_text() == "# Title\n\n- item\n\ntext\n"
    assert "Formatted" in capsys.readouterr().err


def test_format_rules_selection(messy, capsys):
    """Test --rules limits the rules applied."""
    main(["format", str(messy), "--rules", "heading-space"])
    assert capsys.readouterr().out == "# Title\n* item\n\n\n\ntext  "


def test_format_json_report_to_file(messy, tmp_path):
    """Test writing a JSON report."""
    out = tmp_path / "report.json"
    main(["format", str(messy), "--report", "json", "-o", str(out)])

    data = json.loads(out.read_text())
    assert data["has_changes"] is True
    assert "heading-space" in data["applied_rules"]
    assert data["formatted"] == "# Title\n\n- item\n\ntext\n"
    assert "generated_at" in data


def test_format_missing_file(tmp_path, capsys):
    """Test a missing input file."""
    with pytest.raises(SystemExit) as exc_info:
        main(["format", str(tmp_path / "nope.md")])

    assert exc_info.value.code == 1
    assert "Error: File not found" in capsys.readouterr().err


def test_lint_clean_file(tmp_path, capsys):
    """Test linting a clean file exits normally."""
    path = tmp_path / "clean.md"
    path.write_text("# Title\n\nText.\n")

    main(["lint", str(path)])
    assert "No issues found" in capsys.readouterr().out


def test_lint_issues_exit_code(tmp_path, capsys):
    """Test linting exits 1 and reports issues as SARIF."""
    path = tmp_path / "paper.md"
    path.write_text("# Paper\n\nSee [1] for details.\n")

    with pytest.raises(SystemExit) as exc_info:
        main(["lint", str(path), "--preset", "apa", "--format", "sarif"])

    assert exc_info.value.code == 1
    log = json.loads(capsys.readouterr().out)
    rule_ids = {r["ruleId"] for r in log["runs"][0]["results"]}
    assert {"citation-format", "abstract-format", "keywords-format"} <= rule_ids


def test_lint_text_output(tmp_path, capsys):
    """Test the text table."""
    path = tmp_path / "paper.md"
    path.write_text("See [1] here.\n")

    with pytest.raises(SystemExit):
        main(["lint", str(path), "--rules", "citation-format", "--config", str(_apa_config(tmp_path))])

    out = capsys.readouterr().out
    assert "citation-format" in out
    assert "1 issues found" in out


def _apa_config(tmp_path):
    path = tmp_path / "apa.yaml"
    path.write_text("citation_style: apa\n")
    return path


def test_lint_missing_config(tmp_path, capsys):
    """Test an explicit config that does not exist."""
    path = tmp_path / "doc.md"
    path.write_text("text\n")

    with pytest.raises(SystemExit):
        main(["lint", str(path), "--config", str(tmp_path / "missing.yaml")])

    assert "Error: Config not found" in capsys.readouterr().err


def test_format_invalid_config_value(messy, tmp_path, capsys):
    """Test an out-of-range option in the config file."""
    config = tmp_path / "bad.yaml"
    config.write_text("list_marker: x\n")

    with pytest.raises(SystemExit) as exc_info:
        main(["format", str(messy), "--config", str(config)])

    assert exc_info.value.code == 1
    assert "Error: Invalid config" in capsys.readouterr().err


def test_format_uses_config_fix_options(messy, tmp_path, capsys):
    """Test fix rule options from the config file shape the output."""
    config = tmp_path / "star.yaml"
    config.write_text("list_marker: '*'\n")

    main(["format", str(messy), "--config", str(config)])

    assert capsys.readouterr().out == "# Title\n\n* item\n\ntext\n"


def test_rules_command(capsys):
    """Test listing rules."""
    main(["rules"])
    out = capsys.readouterr().out

    assert "trailing-spaces" in out
    assert "heading-numbering" in out
    assert "22 rules (10 enabled by default)" in out


def test_presets_command(capsys):
    """Test listing presets."""
    main(["presets"])
    out = capsys.readouterr().out

    for name in ("standard", "strict", "ieee", "acm", "apa"):
        assert name in out
