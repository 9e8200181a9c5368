"""
Nesting Depth Lint

A structural-complexity analyzer that walks syntax trees and flags code
nested too deeply, conditional chains that run too long, and conditional
bodies that hold too many items.
"""

__version__ = "1.0.0"
__author__ = "nestinglint developers"

from nestinglint.core.engine import Analyzer
from nestinglint.core.findings import Diagnostic, RuleId, Severity, Span
from nestinglint.core.tree import SyntaxNode, NodeKind, MacroImport, CompilationUnit
from nestinglint.config import Config
from nestinglint.exceptions import ConfigError

__all__ = [
    "Analyzer",
    "Diagnostic",
    "RuleId",
    "Severity",
    "Span",
    "SyntaxNode",
    "NodeKind",
    "MacroImport",
    "CompilationUnit",
    "Config",
    "ConfigError",
]
