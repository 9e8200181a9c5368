"""
Structural rules.

Importing this package registers every rule with the global registry.
"""

from nestinglint.rules.nesting import NestingDepthRule
from nestinglint.rules.branches import ConsecutiveIfElseRule
from nestinglint.rules.then_block import ThenBlockSizeRule

__all__ = [
    "NestingDepthRule",
    "ConsecutiveIfElseRule",
    "ThenBlockSizeRule",
]
