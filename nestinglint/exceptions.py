"""
Exception hierarchy for the nesting lint.

NestingLintError (base)
├── ConfigError      - malformed configuration, fatal for the whole run
├── TreeFormatError  - a tree document that cannot be turned into nodes
└── TraversalError   - cyclic tree or broken walker invariant, aborts one unit
"""

from typing import Optional


class NestingLintError(Exception):
    """Base exception for the nesting lint."""
    pass


class ConfigError(NestingLintError):
    """
    Raised when a configuration payload is rejected.

    ``key`` names the offending configuration key when there is one.
    """

    def __init__(self, message: str, key: Optional[str] = None):
        self.key = key
        if key is not None:
            message = f"{key}: {message}"
        super().__init__(message)


class TreeFormatError(NestingLintError):
    """Raised when a serialized syntax tree is malformed."""
    pass


class TraversalError(NestingLintError):
    """Raised inside a traversal that cannot continue safely."""

    def __init__(self, message: str, span=None):
        super().__init__(message)
        self.span = span
