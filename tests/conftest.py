"""Shared fixtures."""
import pytest

from md_formatter.core.formatter import FormatEngine, RuleRegistry, initialize_rules, reset_rules


@pytest.fixture(autouse=True)
def fresh_registry():
    """Start every test with an empty process-wide registry."""
    reset_rules()
    yield
    reset_rules()


@pytest.fixture
def engine():
    """Engine over a private registry holding the built-in rules."""
    return FormatEngine(initialize_rules(RuleRegistry()))
