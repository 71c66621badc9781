"""Helpers shared by rule modules."""
from typing import Callable, Optional, Union

from ..diff import lines_touched_by
from ..models import FixFn, LintContext, LintFn, LintResult, RuleOptions


def message_key(rule_id: str, suffix: str = "desc") -> str:
    return f"formatter_rule_{rule_id.replace('-', '_')}_{suffix}"


def lint_from_fix(
    rule_id: str,
    fix: FixFn,
    message: Union[str, Callable[[RuleOptions], str]]
) -> LintFn:
    """
    Derive a lint from a fix: one result per line the fix would touch.

    Run against already-fixed content this reports nothing. The message may
    be a function of the options for rules whose target is configurable.
    """
    key = message_key(rule_id)

    def lint(
        content: str,
        options: RuleOptions,
        context: Optional[LintContext] = None
    ) -> list[LintResult]:
        fixed = fix(content, options)
        text = message(options) if callable(message) else message
        return [
            LintResult(
                id=f"{rule_id}-{line}",
                rule_id=rule_id,
                message_key=key,
                message=text,
                line=line,
            )
            for line in lines_touched_by(content, fixed)
        ]

    lint.__doc__ = fix.__doc__
    return lint
