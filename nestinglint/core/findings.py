"""
Diagnostic data structures for the nesting lint.

This module defines the value objects produced by the analysis:
source spans, severities and the diagnostics themselves.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any, Tuple


class Severity(Enum):
    """Severity levels for diagnostics."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"

    def __lt__(self, other):
        order = [Severity.INFO, Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL]
        return order.index(self) < order.index(other)

    def __le__(self, other):
        return self == other or self < other


class RuleId(Enum):
    """Identifiers of the findings the analyzer can produce."""
    NESTING_DEPTH = "NestingDepth"
    CONSECUTIVE_IF_ELSE = "ConsecutiveIfElse"
    THEN_BLOCK_SIZE = "ThenBlockSize"
    INTERNAL_ERROR = "InternalError"

    @property
    def order(self) -> int:
        return list(RuleId).index(self)


@dataclass(frozen=True, order=True)
class Span:
    """
    A region of source code.

    Spans order by file, then start position, then end position, which is
    the order diagnostics are reported in.
    """
    file: str = ""
    start_line: int = 0
    start_column: int = 0
    end_line: int = 0
    end_column: int = 0

    def __str__(self) -> str:
        if self.file:
            return f"{self.file}:{self.start_line}:{self.start_column}"
        return f"{self.start_line}:{self.start_column}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "start_line": self.start_line,
            "start_column": self.start_column,
            "end_line": self.end_line,
            "end_column": self.end_column,
        }

    @classmethod
    def from_value(cls, value: Any, file: str = "") -> "Span":
        """
        Build a span from a dict or a ``[start_line, start_column, end_line, end_column]`` list.

        ``file`` is used when the value does not name one.
        """
        if value is None:
            return cls(file=file)
        if isinstance(value, cls):
            return value
        if isinstance(value, dict):
            return cls(
                file=value.get("file") or file,
                start_line=int(value.get("start_line", 0)),
                start_column=int(value.get("start_column", 0)),
                end_line=int(value.get("end_line", value.get("start_line", 0))),
                end_column=int(value.get("end_column", 0)),
            )
        if isinstance(value, (list, tuple)):
            numbers = [int(v) for v in value] + [0] * (4 - len(value))
            if len(numbers) > 4:
                raise ValueError(f"span has too many positions: {value!r}")
            return cls(file, *numbers)
        raise ValueError(f"not a span: {value!r}")


@dataclass(frozen=True)
class Diagnostic:
    """
    A single finding of the analyzer.

    Diagnostics are created by the depth walker or one of the counters and
    never change afterwards.
    """
    rule_id: RuleId
    span: Span
    message: str
    severity: Severity
    help: Optional[str] = None
    outer_span: Optional[Span] = None
    outer_label: Optional[str] = None

    @property
    def sort_key(self) -> Tuple[Span, int, str]:
        return (self.span, self.rule_id.order, self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the diagnostic to a dictionary."""
        result = {
            "rule_id": self.rule_id.value,
            "span": self.span.to_dict(),
            "message": self.message,
            "severity": self.severity.value,
        }
        if self.help:
            result["help"] = self.help
        if self.outer_span is not None:
            result["outer_span"] = self.outer_span.to_dict()
            result["outer_label"] = self.outer_label
        return result
