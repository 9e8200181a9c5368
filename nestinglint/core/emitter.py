"""
Collection and ordering of diagnostics for one compilation unit.
"""

from dataclasses import dataclass
from typing import List, Optional, Dict, Any
import logging

from nestinglint.config import SpanRange
from nestinglint.core.findings import Diagnostic, RuleId, Severity, Span

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TraceEntry:
    """One traversal decision, recorded when debugging is enabled."""
    event: str
    kind: str
    span: Span
    depth: int
    suppressed: bool

    def __str__(self) -> str:
        marker = " (suppressed)" if self.suppressed else ""
        return f"{'  ' * self.depth}[{self.depth:2}] {self.event} {self.kind} {self.span}{marker}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": self.event,
            "kind": self.kind,
            "span": self.span.to_dict(),
            "depth": self.depth,
            "suppressed": self.suppressed,
        }


class DiagnosticEmitter:
    """
    Accumulates diagnostics in traversal order and returns them sorted by span.

    With ``debug`` set, traversal decisions are recorded as trace entries,
    kept apart from the diagnostics and also logged at DEBUG level.
    """

    def __init__(self, debug: bool = False, debug_span_range: Optional[SpanRange] = None):
        self.debug = debug
        self.debug_span_range = debug_span_range
        self._diagnostics: List[Diagnostic] = []
        self._trace: List[TraceEntry] = []

    def emit(self, diagnostic: Diagnostic):
        self._diagnostics.append(diagnostic)

    def internal_error(self, message: str, span: Optional[Span] = None):
        """Replace everything found so far with a single InternalError."""
        self._diagnostics = [
            Diagnostic(
                rule_id=RuleId.INTERNAL_ERROR,
                span=span or Span(),
                message=message,
                severity=Severity.HIGH,
            )
        ]

    def trace(self, event: str, kind: str, span: Span, depth: int, suppressed: bool):
        if not self.debug:
            return
        if self.debug_span_range is not None and not self.debug_span_range.intersects(
            span.file, span.start_line, span.end_line
        ):
            return
        entry = TraceEntry(event, kind, span, depth, suppressed)
        self._trace.append(entry)
        logger.debug("%s", entry)

    @property
    def trace_entries(self) -> List[TraceEntry]:
        return list(self._trace)

    @property
    def count(self) -> int:
        return len(self._diagnostics)

    def finish(self) -> List[Diagnostic]:
        """Return the diagnostics ordered by source position."""
        return sorted(self._diagnostics, key=lambda d: d.sort_key)
