"""Rule registry."""
import logging
from typing import Iterable, Optional

from .models import CATEGORY_ORDER, FormatRule, RuleCategory

logger = logging.getLogger(__name__)


class DuplicateRuleError(ValueError):
    """Raised when a rule id is registered twice."""

    def __init__(self, rule_id: str):
        super().__init__(f"Rule already registered: {rule_id}")
        self.rule_id = rule_id


class RuleRegistry:
    """
    Ordered table of formatting rules.

    Rules iterate by category, then by registration order inside the
    category. The table is filled once at startup and only read after.
    """

    def __init__(self, rules: Optional[Iterable[FormatRule]] = None):
        self._rules: dict[str, FormatRule] = {}
        self._sequence: dict[str, int] = {}
        self.initialized = False
        if rules:
            self.register_all(rules)

    def register(self, rule: FormatRule) -> None:
        if rule.id in self._rules:
            raise DuplicateRuleError(rule.id)
        self._sequence[rule.id] = len(self._sequence)
        self._rules[rule.id] = rule

    def register_all(self, rules: Iterable[FormatRule]) -> None:
        """Register several rules, all or none."""
        rules = list(rules)
        seen = set(self._rules)
        for rule in rules:
            if rule.id in seen:
                raise DuplicateRuleError(rule.id)
            seen.add(rule.id)
        for rule in rules:
            self.register(rule)

    def get(self, rule_id: str) -> Optional[FormatRule]:
        return self._rules.get(rule_id)

    def __contains__(self, rule_id: str) -> bool:
        return rule_id in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def rules(self) -> list[FormatRule]:
        return sorted(
            self._rules.values(),
            key=lambda r: (CATEGORY_ORDER[r.category], self._sequence[r.id])
        )

    def by_category(self, category: RuleCategory) -> list[FormatRule]:
        return [r for r in self.rules() if r.category == category]

    def default_rule_ids(self) -> set[str]:
        return {r.id for r in self._rules.values() if r.enabled_by_default}

    def stats(self) -> dict:
        """Rule counts per category, for diagnostics."""
        by_category: dict[str, int] = {}
        enabled = 0
        for rule in self.rules():
            by_category[rule.category.value] = by_category.get(rule.category.value, 0) + 1
            if rule.enabled_by_default:
                enabled += 1
        return {
            "total": len(self._rules),
            "by_category": by_category,
            "enabled": enabled,
            "disabled": len(self._rules) - enabled,
        }

    def clear(self) -> None:
        self._rules.clear()
        self._sequence.clear()
        self.initialized = False


# Process-wide registry, populated by initialize_rules()
registry = RuleRegistry()


def register_rule(rule: FormatRule) -> None:
    registry.register(rule)


def register_rules(rules: Iterable[FormatRule]) -> None:
    registry.register_all(rules)
