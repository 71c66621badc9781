"""Configuration management with YAML file and environment variable overrides."""
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
import logging
import os

import yaml

from md_formatter.core.formatter.models import FormatEngineOptions

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".md-formatter.yaml"
REPORT_FORMATS = ("text", "json", "markdown", "sarif")
RULE_LIST_KEYS = ("enabled_rules", "disabled_rules")


@dataclass
class Config:
    """Configuration for the md-formatter command line."""

    # Preset name (standard, github, writing, strict, ieee, acm, apa)
    preset: str | None = None

    # Explicit rule selection; None means the registry defaults
    enabled_rules: list[str] | None = None
    disabled_rules: list[str] = field(default_factory=list)

    # Writing limits
    max_heading_depth: int = 4
    max_paragraph_chars: int = 800

    # Academic conventions
    figure_format: str = "Figure 1:"
    table_format: str = "Table 1:"
    citation_style: str = "ieee"

    # Fix rule options
    max_consecutive_blank_lines: int = 1
    list_marker: str = "-"
    list_indent_size: int = 4
    heading_blank_lines_before: int = 1
    heading_blank_lines_after: int = 1
    code_fence_style: str = "```"

    # Output of `lint` when no --format is given
    report_format: str = "text"

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """
        Load config from YAML, then apply environment variable overrides.

        Args:
            path: Config file to read. Defaults to .md-formatter.yaml in the
                working directory when that file exists.

        Returns:
            Config with file and environment values applied
        """
        config = cls()

        if path is None:
            default = Path.cwd() / DEFAULT_CONFIG_FILE
            path = default if default.exists() else None

        if path is not None:
            config._apply_file(Path(path).expanduser())

        if val := os.environ.get("MD_FORMATTER_PRESET"):
            config.preset = val
        if val := os.environ.get("MD_FORMATTER_CITATION_STYLE"):
            config.citation_style = val.lower()
        if val := os.environ.get("MD_FORMATTER_MAX_HEADING_DEPTH"):
            config.max_heading_depth = int(val)
        if val := os.environ.get("MD_FORMATTER_MAX_PARAGRAPH_CHARS"):
            config.max_paragraph_chars = int(val)
        if val := os.environ.get("MD_FORMATTER_REPORT_FORMAT"):
            if val in REPORT_FORMATS:
                config.report_format = val
            else:
                logger.warning(f"Unknown report format: {val}, using {config.report_format}")

        return config

    def _apply_file(self, path: Path) -> None:
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse config file {path}: {e}")
            return

        if data is None:
            return
        if not isinstance(data, dict):
            logger.warning(f"Config file {path} is not a mapping, ignoring")
            return

        known = {f.name for f in fields(self)}
        for key, value in data.items():
            name = str(key).replace("-", "_")
            if name not in known:
                logger.warning(f"Unknown config key: {key}")
                continue
            if name in RULE_LIST_KEYS:
                value = _rule_list(key, value)
                if value is None:
                    continue
            elif name == "report_format" and value not in REPORT_FORMATS:
                logger.warning(f"Unknown report format: {value}, using {self.report_format}")
                continue
            setattr(self, name, value)

        logger.debug(f"Loaded config from {path}")

    def to_engine_options(self) -> FormatEngineOptions:
        """
        Build engine options from this config.

        Raises:
            ValueError: If a fix rule option is out of range
        """
        data = asdict(self)
        data.pop("report_format")
        return FormatEngineOptions.from_dict(data)


def _rule_list(key, value) -> list[str] | None:
    """Read a rule list from YAML: a sequence, or a comma-separated string."""
    if value is None:
        return None
    if isinstance(value, str):
        return [r.strip() for r in value.split(",") if r.strip()]
    if isinstance(value, (list, tuple)):
        return [str(r).strip() for r in value]
    logger.warning(f"Config key {key} should be a list of rule ids, ignoring")
    return None
