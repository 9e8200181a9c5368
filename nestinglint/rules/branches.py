"""
Consecutive if-else rule.
"""

from typing import Optional

from nestinglint.core.findings import Diagnostic, RuleId, Severity
from nestinglint.core.rules import Rule, RuleMetadata, rule
from nestinglint.core.tree import SyntaxNode, iter_chain


@rule
class ConsecutiveIfElseRule(Rule):
    """
    Detects if / else-if / else chains with too many links.

    The root ``if`` counts as the first link and a terminal ``else`` as the
    last. Chains nested inside branch bodies are separate roots and are
    counted when the walker reaches them.
    """

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id=RuleId.CONSECUTIVE_IF_ELSE,
            name="Consecutive If-Else",
            description="Detects conditional chains longer than the configured maximum.",
            severity=Severity.LOW,
            help="replace the chain with a match or a lookup table",
            config_key="max_consec_if_else",
        )

    def count_links(self, root: SyntaxNode) -> int:
        return sum(1 for _ in iter_chain(root))

    def check(self, root: SyntaxNode) -> Optional[Diagnostic]:
        count = self.count_links(root)
        if count <= self.threshold:
            return None
        return self.create_diagnostic(
            root.span,
            f"consecutive if-else statements: {self.threshold} max allowed, {count} found",
        )
