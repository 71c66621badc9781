"""Built-in formatting rules."""
import logging
from typing import Optional

from ..registry import RuleRegistry, registry as default_registry
from . import academic, blockquote, code_block, heading, lists, whitespace, writing

logger = logging.getLogger(__name__)

# All built-in rules, in registry order
ALL_RULES = [
    # Whitespace rules
    *whitespace.RULES,
    # Heading rules
    *heading.RULES,
    # List rules
    *lists.RULES,
    # Blockquote rules
    *blockquote.RULES,
    # Code block rules
    *code_block.RULES,
    # Writing quality rules (opt-in)
    *writing.RULES,
    # Academic rules (opt-in, enabled by journal presets)
    *academic.RULES,
]


def initialize_rules(registry: Optional[RuleRegistry] = None) -> RuleRegistry:
    """
    Register every built-in rule once.

    Later calls on an initialized registry do nothing.
    """
    target = registry if registry is not None else default_registry
    if target.initialized:
        return target

    target.register_all(ALL_RULES)
    target.initialized = True
    logger.debug(f"Registered {len(ALL_RULES)} formatting rules")
    return target


def reset_rules() -> None:
    """Empty the process-wide registry."""
    default_registry.clear()


def get_rule_stats() -> dict:
    return default_registry.stats()


__all__ = [
    "ALL_RULES",
    "initialize_rules",
    "reset_rules",
    "get_rule_stats",
    "academic",
    "blockquote",
    "code_block",
    "heading",
    "lists",
    "whitespace",
    "writing",
]
