"""
Output formatters for analysis results.
"""

from nestinglint.formatters.json_formatter import JSONFormatter

__all__ = [
    "JSONFormatter",
]
