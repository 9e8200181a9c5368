"""
Nesting depth rule.

The depth walker reports constructs nested deeper than ``max_depth``; this
rule supplies the metadata and wording of those diagnostics.
"""

from typing import Optional

from nestinglint.core.findings import Diagnostic, RuleId, Severity, Span
from nestinglint.core.rules import Rule, RuleMetadata, rule

HELP_MESSAGE = "use early returns and guard clauses to reduce nesting"


@rule
class NestingDepthRule(Rule):
    """
    Detects blocks, match arms and closures nested too many levels deep.

    One diagnostic is produced per maximal violating subtree, at the first
    construct that crossed the limit. The message gives the range of levels
    reached inside that subtree.
    """

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id=RuleId.NESTING_DEPTH,
            name="Nesting Depth",
            description="Detects code nested deeper than the configured maximum.",
            severity=Severity.MEDIUM,
            help=HELP_MESSAGE,
            config_key="max_depth",
        )

    def message(self, deepest: int) -> str:
        first = self.threshold + 1
        if deepest > first:
            levels = f"{first} to {deepest} levels"
        else:
            levels = f"{deepest} levels"
        return f"nesting depth: {self.threshold} max allowed, {levels} found"

    def diagnostic(self, span: Span, deepest: int, outer_span: Optional[Span] = None) -> Diagnostic:
        return self.create_diagnostic(
            span,
            self.message(deepest),
            outer_span=outer_span,
            outer_label="outer nested context",
        )
