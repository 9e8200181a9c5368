"""
Analysis engine for the nesting lint.

This module runs the depth walker over compilation units, one unit per
call or many units in parallel, and merges their diagnostics.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, Any, Iterable, List, Optional, Sequence

from nestinglint.config import Config
from nestinglint.core.aliases import MacroAliasTable
from nestinglint.core.emitter import DiagnosticEmitter, TraceEntry
from nestinglint.core.findings import Diagnostic, RuleId
from nestinglint.core.tree import CompilationUnit, MacroImport, SyntaxNode
from nestinglint.core.walker import DepthWalker
from nestinglint.exceptions import TraversalError

logger = logging.getLogger(__name__)


@dataclass
class UnitResult:
    """Diagnostics and debug trace of one compilation unit."""
    unit: str
    diagnostics: List[Diagnostic]
    trace: List[TraceEntry] = field(default_factory=list)

    @property
    def aborted(self) -> bool:
        return any(d.rule_id is RuleId.INTERNAL_ERROR for d in self.diagnostics)


@dataclass
class AnalysisResult:
    """Results from analyzing a set of compilation units."""
    units: List[UnitResult]
    analysis_time_seconds: float

    @property
    def diagnostics(self) -> List[Diagnostic]:
        """All diagnostics ordered by unit, then span."""
        ordered = sorted(self.units, key=lambda r: r.unit)
        return [d for result in ordered for d in result.diagnostics]

    @property
    def units_analyzed(self) -> int:
        return len(self.units)

    @property
    def total_diagnostics(self) -> int:
        return sum(len(result.diagnostics) for result in self.units)

    @property
    def internal_error_count(self) -> int:
        return self.count(RuleId.INTERNAL_ERROR)

    @property
    def aborted_units(self) -> List[str]:
        """Names of the units whose analysis ended in an InternalError."""
        return [result.unit for result in self.units if result.aborted]

    def count(self, rule_id: RuleId) -> int:
        return sum(1 for d in self.diagnostics if d.rule_id is rule_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": {
                "units_analyzed": self.units_analyzed,
                "analysis_time_seconds": self.analysis_time_seconds,
                "total_diagnostics": self.total_diagnostics,
                "by_rule": {rule_id.value: self.count(rule_id) for rule_id in RuleId},
            },
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


class Analyzer:
    """
    Runs the nesting analysis.

    The Config is shared by every unit; the alias table, nesting context and
    emitter are created afresh for each one, so units can be analyzed on
    separate threads.
    """

    def __init__(self, config: Optional[Config] = None, max_workers: int = 4):
        self.config = config or Config()
        self.max_workers = max_workers

    def analyze(
        self,
        root: SyntaxNode,
        imports: Sequence[MacroImport] = (),
        name: str = "<unit>",
    ) -> List[Diagnostic]:
        """Analyze a single tree and return its ordered diagnostics."""
        return self.analyze_unit(CompilationUnit(name=name, root=root, imports=list(imports))).diagnostics

    def analyze_unit(self, unit: CompilationUnit) -> UnitResult:
        """Analyze one compilation unit."""
        aliases = MacroAliasTable.build(unit.imports, self.config.ignore_macros)
        emitter = DiagnosticEmitter(
            debug=self.config.debug,
            debug_span_range=self.config.debug_span_range,
        )
        walker = DepthWalker(self.config, aliases, emitter)

        try:
            walker.walk(unit.root)
        except TraversalError as e:
            logger.warning("Aborting analysis of %s: %s", unit.name, e)
            emitter.internal_error(str(e), e.span or unit.root.span)

        return UnitResult(
            unit=unit.name,
            diagnostics=emitter.finish(),
            trace=emitter.trace_entries,
        )

    def analyze_units(self, units: Iterable[CompilationUnit]) -> AnalysisResult:
        """
        Analyze several units and merge their results.

        Units run in parallel when there is more than one of them and more
        than one worker; the merged output does not depend on which.
        """
        start_time = time.time()
        units = list(units)

        if len(units) > 1 and self.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                results = list(executor.map(self.analyze_unit, units))
        else:
            results = [self.analyze_unit(unit) for unit in units]

        results.sort(key=lambda r: r.unit)
        elapsed_time = time.time() - start_time

        return AnalysisResult(
            units=results,
            analysis_time_seconds=round(elapsed_time, 3),
        )


def create_analyzer(config_path: Optional[str] = None, **kwargs) -> Analyzer:
    """
    Create an analyzer with configuration.

    Args:
        config_path: Optional path to a configuration file.
        **kwargs: Configuration values overriding the file's.

    Returns:
        Configured Analyzer instance.
    """
    from nestinglint.config import load_lint_config

    config = load_lint_config(config_path) if config_path else Config()
    if kwargs:
        data = config.to_dict()
        data.update(kwargs)
        config = Config.from_dict(data)

    return Analyzer(config)
