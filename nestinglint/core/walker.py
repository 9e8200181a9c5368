"""
Depth walker: the single traversal of a compilation unit.

The walker tracks nesting depth through a NestingContext, skips the inside
of ignored macro invocations, and hands every root conditional to the
consecutive if-else and then-block rules.

Traversal runs off an explicit work stack rather than Python recursion, so
tree depth is bounded by memory, not by the interpreter's recursion limit.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple, Optional, Set

from nestinglint.config import Config
from nestinglint.core.aliases import MacroAliasTable
from nestinglint.core.context import NestingContext, counts_depth
from nestinglint.core.emitter import DiagnosticEmitter
from nestinglint.core.findings import Span
from nestinglint.core.tree import CONDITIONAL_KINDS, NodeKind, SyntaxNode
from nestinglint.exceptions import TraversalError
from nestinglint.rules.branches import ConsecutiveIfElseRule
from nestinglint.rules.nesting import NestingDepthRule
from nestinglint.rules.then_block import ThenBlockSizeRule

# Kinds whose direct Block children are bodies rather than nested blocks
BODY_OWNER_KINDS = (NodeKind.MATCH_ARM, NodeKind.CLOSURE)


@dataclass
class Violation:
    """
    An over-nested subtree being walked.

    While a violation is active no further depth diagnostics are reported;
    ``deepest`` records the deepest level reached inside it.
    """
    span: Span
    deepest: int
    outer_span: Optional[Span]


class Step(Enum):
    VISIT = "visit"
    SCAN = "scan"
    CLOSE = "close"
    EXIT = "exit"


class Work(NamedTuple):
    """
    One pending step of the walk.

    VISIT walks a node, SCAN looks inside an ignored macro, CLOSE leaves a
    depth-incrementing construct and EXIT takes a node off the active path.
    """
    step: Step
    node: SyntaxNode
    violation: Optional[Violation] = None
    body: bool = False
    chain_link: bool = False
    started: Optional[Violation] = None


class DepthWalker:
    """
    Walks one tree and reports its findings to an emitter.

    The active violation travels with each work item rather than living on
    the walker; the only walker state is the nesting context and the set of
    nodes on the current path, both private to one unit.
    """

    def __init__(self, config: Config, aliases: MacroAliasTable, emitter: DiagnosticEmitter):
        self.config = config
        self.aliases = aliases
        self.emitter = emitter
        self.context = NestingContext()
        self.nesting_rule = NestingDepthRule(config)
        self.branch_rule = ConsecutiveIfElseRule(config)
        self.then_rule = ThenBlockSizeRule(config)
        self._path: Set[int] = set()

    def walk(self, root: SyntaxNode):
        stack: List[Work] = [Work(Step.VISIT, root)]
        while stack:
            work = stack.pop()
            if work.step is Step.VISIT:
                self._visit(work, stack)
            elif work.step is Step.SCAN:
                self._scan_ignored(work, stack)
            elif work.step is Step.CLOSE:
                self._close(work)
            else:
                self._path.discard(id(work.node))

        if self.context.depth != 0:
            raise TraversalError(f"walk finished at depth {self.context.depth}", root.span)

    def _enter(self, node: SyntaxNode, stack: List[Work]):
        if id(node) in self._path:
            raise TraversalError(f"{node.kind.value} node is its own descendant", node.span)
        self._path.add(id(node))
        stack.append(Work(Step.EXIT, node))

    def _push_children(
        self,
        stack: List[Work],
        node: SyntaxNode,
        violation: Optional[Violation],
        link: Optional[SyntaxNode] = None,
    ):
        body_blocks = node.kind in BODY_OWNER_KINDS
        # reversed so the first child is popped first
        for child in reversed(node.children):
            stack.append(Work(
                Step.VISIT,
                child,
                violation,
                body=body_blocks and child.kind is NodeKind.BLOCK,
                chain_link=child is link,
            ))

    def _visit(self, work: Work, stack: List[Work]):
        node, violation = work.node, work.violation
        self._enter(node, stack)
        kind = node.kind

        if kind is NodeKind.MACRO_INVOCATION and self.aliases.is_ignored(node.invoked_name):
            self._trace(f"ignore {node.invoked_name}!", node, violation)
            for child in reversed(node.children):
                stack.append(Work(Step.SCAN, child, violation))
            return

        if kind in CONDITIONAL_KINDS:
            if not work.chain_link:
                self._check_conditional(node, violation)
            self._push_children(stack, node, violation, link=node.else_branch)
        elif counts_depth(kind, self.config, body=work.body):
            self._open(node, violation, stack)
        elif kind in NodeKind:
            self._push_children(stack, node, violation)
        else:
            raise TraversalError(f"unhandled node kind {kind!r}", node.span)

    def _open(self, node: SyntaxNode, violation: Optional[Violation], stack: List[Work]):
        depth = self.context.push(node.kind, node.span)
        started = None
        if violation is None and depth > self.config.max_depth:
            violation = started = Violation(node.span, depth, self.context.outer_span)
            self._trace("suppress", node, violation)
        elif violation is not None:
            violation.deepest = max(violation.deepest, depth)
        self._trace("enter", node, violation)

        stack.append(Work(Step.CLOSE, node, violation, started=started))
        self._push_children(stack, node, violation)

    def _close(self, work: Work):
        node, started = work.node, work.started
        self._trace("leave", node, work.violation)
        self.context.pop()
        if started is not None:
            self.emitter.emit(self.nesting_rule.diagnostic(
                started.span, started.deepest, outer_span=started.outer_span,
            ))
            self._trace("unsuppress", node, None)

    def _check_conditional(self, root: SyntaxNode, violation: Optional[Violation]):
        self._trace("chain", root, violation)
        diagnostic = self.branch_rule.check(root)
        if diagnostic is not None:
            self.emitter.emit(diagnostic)
        for diagnostic in self.then_rule.check(root):
            self.emitter.emit(diagnostic)

    def _scan_ignored(self, work: Work, stack: List[Work]):
        # inside an ignored macro only nested invocations are looked at
        node = work.node
        if node.kind is NodeKind.MACRO_INVOCATION:
            self._visit(work._replace(step=Step.VISIT), stack)
            return
        self._enter(node, stack)
        for child in reversed(node.children):
            stack.append(Work(Step.SCAN, child, work.violation))

    def _trace(self, event: str, node: SyntaxNode, violation: Optional[Violation]):
        self.emitter.trace(event, node.kind.value, node.span, self.context.depth, violation is not None)
