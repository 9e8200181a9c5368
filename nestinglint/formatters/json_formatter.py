"""
JSON output for machine-readable results.
"""

import json

from nestinglint.core.engine import AnalysisResult


class JSONFormatter:
    """
    Serializes analysis results as JSON for the tools that render them.
    """

    def __init__(self, indent: int = 2, include_trace: bool = False):
        self.indent = indent
        self.include_trace = include_trace

    def format_result(self, result: AnalysisResult) -> str:
        """Format a complete analysis result as JSON."""
        data = result.to_dict()

        if self.include_trace:
            data["trace"] = {
                unit.unit: [entry.to_dict() for entry in unit.trace]
                for unit in result.units
                if unit.trace
            }

        return json.dumps(data, indent=self.indent, default=str)
