"""
Named rule presets.

A preset bundles the rules to enable with the options they run under.
Selecting one replaces the caller's enabled rules and options wholesale.
Presets are static and never touch the rule registry.
"""
from dataclasses import dataclass, replace
import logging
from typing import Optional

from .models import CitationStyle, RuleOptions
from .rules import ALL_RULES, academic, writing

logger = logging.getLogger(__name__)

DEFAULT_RULE_IDS = frozenset(r.id for r in ALL_RULES if r.enabled_by_default)
WRITING_RULE_IDS = frozenset(r.id for r in writing.RULES)
ACADEMIC_RULE_IDS = frozenset(r.id for r in academic.RULES)


@dataclass(frozen=True)
class Preset:
    """A named set of enabled rules plus rule options."""
    name: str
    description: str
    enabled_rule_ids: frozenset
    options: RuleOptions = RuleOptions()

    def to_options(self) -> RuleOptions:
        """Options with this preset's rule set as the enabled rules."""
        return replace(self.options, enabled_rules=self.enabled_rule_ids, disabled_rules=frozenset())


PRESETS: dict[str, Preset] = {
    "standard": Preset(
        name="standard",
        description="All default formatting rules",
        enabled_rule_ids=DEFAULT_RULE_IDS,
    ),
    "github": Preset(
        name="github",
        description="GitHub-flavoured Markdown conventions",
        enabled_rule_ids=DEFAULT_RULE_IDS,
    ),
    "writing": Preset(
        name="writing",
        description="Light touch for drafting prose",
        enabled_rule_ids=frozenset({
            "trailing-spaces",
            "eof-newline",
            "heading-space",
            "heading-depth",
            "long-paragraph",
        }),
        options=RuleOptions(max_consecutive_blank_lines=2),
    ),
    "strict": Preset(
        name="strict",
        description="Every formatting rule plus writing checks with tight limits",
        enabled_rule_ids=DEFAULT_RULE_IDS | WRITING_RULE_IDS,
        options=RuleOptions(max_heading_depth=3, max_paragraph_chars=600),
    ),
    "ieee": Preset(
        name="ieee",
        description="IEEE transactions: numeric citations, 'Fig. 1.' captions",
        enabled_rule_ids=DEFAULT_RULE_IDS | ACADEMIC_RULE_IDS,
        options=RuleOptions(
            max_heading_depth=3,
            max_paragraph_chars=1200,
            figure_format="Fig. 1.",
            table_format="Table 1.",
            citation_style=CitationStyle.IEEE,
        ),
    ),
    "acm": Preset(
        name="acm",
        description="ACM proceedings: numeric citations, 'Figure 1.' captions",
        enabled_rule_ids=DEFAULT_RULE_IDS | ACADEMIC_RULE_IDS,
        options=RuleOptions(
            max_heading_depth=4,
            max_paragraph_chars=1200,
            figure_format="Figure 1.",
            table_format="Table 1.",
            citation_style=CitationStyle.ACM,
        ),
    ),
    "apa": Preset(
        name="apa",
        description="APA 7th edition: author-year citations, 'Figure 1' captions",
        enabled_rule_ids=DEFAULT_RULE_IDS | ACADEMIC_RULE_IDS,
        options=RuleOptions(
            max_heading_depth=5,
            max_paragraph_chars=1200,
            figure_format="Figure 1",
            table_format="Table 1",
            citation_style=CitationStyle.APA,
        ),
    ),
}


def get_preset(name: Optional[str]) -> Optional[Preset]:
    if not name:
        return None
    return PRESETS.get(name.strip().lower())


def apply_preset(name: Optional[str], options: Optional[RuleOptions] = None) -> RuleOptions:
    """
    Resolve a preset name into the options to run with.

    Args:
        name: Preset name (case-insensitive)
        options: Caller's options, returned unchanged when the name is unknown

    Returns:
        The preset's options, or the caller's options (defaults if None)
    """
    fallback = options if options is not None else RuleOptions()
    preset = get_preset(name)
    if preset is None:
        if name:
            logger.warning(f"Unknown preset: {name}, keeping current options")
        return fallback
    return preset.to_options()
