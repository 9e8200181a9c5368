"""
Then-block size rule.
"""

from typing import List

from nestinglint.core.findings import Diagnostic, RuleId, Severity
from nestinglint.core.rules import Rule, RuleMetadata, rule
from nestinglint.core.tree import CONDITIONAL_KINDS, SyntaxNode, iter_chain


@rule
class ThenBlockSizeRule(Rule):
    """
    Detects conditional bodies with too many top-level items.

    Every ``if`` and ``else if`` body in a chain is checked on its own. Items
    are the block's direct children, statements plus any tail expression;
    nested blocks are not looked into. ``else`` bodies are not then-blocks.
    """

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id=RuleId.THEN_BLOCK_SIZE,
            name="Then-Block Size",
            description="Detects conditional bodies with more items than the configured maximum.",
            severity=Severity.LOW,
            help="move the body of the branch into its own function",
            config_key="max_then_items",
        )

    def check(self, root: SyntaxNode) -> List[Diagnostic]:
        diagnostics = []
        for link in iter_chain(root):
            if link.kind not in CONDITIONAL_KINDS:
                continue
            body = link.then_body
            if body is None:
                continue
            items = len(body.children)
            if items > self.threshold:
                diagnostics.append(self.create_diagnostic(
                    body.span,
                    f"if 'then' block has too many items: {items} (max: {self.threshold})",
                    outer_span=link.span,
                    outer_label="conditional",
                ))
        return diagnostics
