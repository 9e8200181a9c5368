"""Core analysis engine and data structures."""

from nestinglint.core.findings import Diagnostic, RuleId, Severity, Span
from nestinglint.core.tree import CompilationUnit, MacroImport, NodeKind, SyntaxNode
from nestinglint.core.aliases import MacroAliasTable
from nestinglint.core.context import NestingContext
from nestinglint.core.emitter import DiagnosticEmitter, TraceEntry
from nestinglint.core.rules import Rule, RuleRegistry
from nestinglint.core.walker import DepthWalker
from nestinglint.core.engine import Analyzer, AnalysisResult, UnitResult

__all__ = [
    "Diagnostic",
    "RuleId",
    "Severity",
    "Span",
    "CompilationUnit",
    "MacroImport",
    "NodeKind",
    "SyntaxNode",
    "MacroAliasTable",
    "NestingContext",
    "DiagnosticEmitter",
    "TraceEntry",
    "Rule",
    "RuleRegistry",
    "DepthWalker",
    "Analyzer",
    "AnalysisResult",
    "UnitResult",
]
