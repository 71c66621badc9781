"""Format engine - applies fix rules and runs lint rules."""
import logging
from typing import Optional

from .diff import compute_changed_lines
from .models import FormatResult, LintContext, LintResult, RuleOptions
from .presets import apply_preset
from .registry import RuleRegistry, registry as default_registry
from .rules import initialize_rules
from .snapshot import RuleState

logger = logging.getLogger(__name__)


class FormatEngine:
    """
    Runs the rules of a registry against Markdown content.

    Fix rules run in registry order, each on the output of the previous
    one. Lint rules then run on the final content.
    """

    def __init__(self, registry: Optional[RuleRegistry] = None):
        self.registry = registry if registry is not None else default_registry

    def resolve_options(self, options: Optional[RuleOptions] = None) -> RuleOptions:
        """Expand a preset name, if any, into concrete options."""
        options = options if options is not None else RuleOptions()
        preset = getattr(options, "preset", None)
        if preset:
            return apply_preset(preset, options)
        return options

    def enabled_rule_ids(self, options: RuleOptions) -> set[str]:
        if options.enabled_rules is not None:
            enabled = set(options.enabled_rules)
            for rule_id in sorted(enabled):
                if rule_id not in self.registry:
                    logger.warning(f"Unknown rule: {rule_id}")
        else:
            enabled = self.registry.default_rule_ids()
        return enabled - set(options.disabled_rules)

    def rule_states(self, options: Optional[RuleOptions] = None) -> list[RuleState]:
        """Enabled flag of every registered rule, for snapshots."""
        enabled = self.enabled_rule_ids(self.resolve_options(options))
        return [RuleState(rule.id, rule.id in enabled) for rule in self.registry.rules()]

    def format(
        self,
        content: str,
        options: Optional[RuleOptions] = None,
        context: Optional[LintContext] = None,
        previous_content: Optional[str] = None
    ) -> FormatResult:
        """
        Format markdown content.

        Args:
            content: The markdown content to format
            options: Rule options, optionally naming a preset
            context: Restrict lint results to these changed lines
            previous_content: Earlier version of the document; when given
                and no context is passed, lint results are restricted to
                lines that differ from it

        Returns:
            FormatResult with the formatted content and lint results
        """
        resolved = self.resolve_options(options)
        enabled = self.enabled_rule_ids(resolved)

        formatted = content
        applied_rules = []
        for rule in self.registry.rules():
            if rule.id not in enabled or rule.fix is None:
                continue
            try:
                updated = rule.fix(formatted, resolved)
            except Exception as e:
                logger.error(f"Rule {rule.id} failed: {e}")
                continue
            if updated != formatted:
                applied_rules.append(rule.id)
                formatted = updated

        if context is None and previous_content is not None:
            context = LintContext.from_diff(previous_content, formatted)

        lint_results = self._run_lints(formatted, resolved, enabled, context)

        if applied_rules:
            logger.debug(f"Applied {len(applied_rules)} rules: {', '.join(applied_rules)}")

        return FormatResult(
            original=content,
            formatted=formatted,
            has_changes=formatted != content,
            applied_rules=applied_rules,
            lint_results=lint_results,
            changed_lines=compute_changed_lines(content, formatted),
        )

    def lint(
        self,
        content: str,
        options: Optional[RuleOptions] = None,
        context: Optional[LintContext] = None
    ) -> list[LintResult]:
        """Run the enabled lint rules without changing the content."""
        resolved = self.resolve_options(options)
        return self._run_lints(content, resolved, self.enabled_rule_ids(resolved), context)

    def _run_lints(
        self,
        content: str,
        options: RuleOptions,
        enabled: set[str],
        context: Optional[LintContext]
    ) -> list[LintResult]:
        results: list[LintResult] = []

        for rule in self.registry.rules():
            if rule.id not in enabled or rule.lint is None:
                continue
            try:
                for result in rule.lint(content, options, context):
                    result.severity = rule.severity
                    results.append(result)
            except Exception as e:
                logger.error(f"Rule {rule.id} failed: {e}")

        # Rules report on the whole document; scope to the edit afterwards
        if context is not None:
            results = [r for r in results if context.allows(r)]

        _make_ids_unique(results)
        results.sort(key=lambda r: r.line)
        return results


def _make_ids_unique(results: list[LintResult]) -> None:
    seen: set[str] = set()
    for result in results:
        if result.id in seen:
            suffix = 2
            while f"{result.id}-{suffix}" in seen:
                suffix += 1
            result.id = f"{result.id}-{suffix}"
        seen.add(result.id)


def format_content(
    content: str,
    options: Optional[RuleOptions] = None,
    context: Optional[LintContext] = None,
    previous_content: Optional[str] = None
) -> FormatResult:
    """Format with the built-in rules."""
    initialize_rules()
    return FormatEngine().format(content, options, context, previous_content)


def lint_content(
    content: str,
    options: Optional[RuleOptions] = None,
    context: Optional[LintContext] = None
) -> list[LintResult]:
    """Lint with the built-in rules."""
    initialize_rules()
    return FormatEngine().lint(content, options, context)
