"""
Nesting context carried through a depth walk.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from nestinglint.config import Config
from nestinglint.core.findings import Span
from nestinglint.core.tree import NodeKind
from nestinglint.exceptions import TraversalError


def counts_depth(kind: NodeKind, config: Config, body: bool = False) -> bool:
    """
    Check whether entering a construct of this kind adds a nesting level.

    ``body`` marks a block that is the direct body of a match arm or a
    closure; the arm or closure already accounts for that level.
    """
    if kind is NodeKind.BLOCK:
        return not body
    if kind is NodeKind.MATCH_ARM:
        return True
    if kind is NodeKind.CLOSURE:
        return not config.ignore_closures
    return False


@dataclass(frozen=True)
class Frame:
    """An active depth-incrementing construct."""
    kind: NodeKind
    span: Span


class NestingContext:
    """
    Stack of the depth-incrementing constructs enclosing the current node.

    Owned by a single walker for a single unit.
    """

    def __init__(self):
        self._frames: List[Frame] = []

    @property
    def depth(self) -> int:
        return len(self._frames)

    @property
    def kinds(self) -> Tuple[NodeKind, ...]:
        return tuple(frame.kind for frame in self._frames)

    @property
    def outer_span(self) -> Optional[Span]:
        """Span of the outermost active construct."""
        return self._frames[0].span if self._frames else None

    def push(self, kind: NodeKind, span: Span) -> int:
        """Enter a construct and return the new depth."""
        self._frames.append(Frame(kind, span))
        return self.depth

    def pop(self) -> Frame:
        """Leave the innermost construct."""
        if not self._frames:
            raise TraversalError("nesting context popped while empty")
        return self._frames.pop()
