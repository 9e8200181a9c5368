"""
Rule framework for the nesting lint.

This module provides the base class for the structural rules and the
registry used to list them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Dict, Optional, Type

from nestinglint.config import Config
from nestinglint.core.findings import Diagnostic, RuleId, Severity, Span


@dataclass(frozen=True)
class RuleMetadata:
    """Metadata for a rule."""
    rule_id: RuleId
    name: str
    description: str
    severity: Severity
    help: Optional[str] = None
    config_key: Optional[str] = None


class Rule(ABC):
    """
    Base class for the structural rules.

    A rule holds the run's Config and knows how to phrase its diagnostics;
    the depth walker decides when to consult it.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()

    @property
    @abstractmethod
    def metadata(self) -> RuleMetadata:
        """Return rule metadata."""
        pass

    @property
    def threshold(self) -> Optional[int]:
        """The configured limit this rule enforces."""
        if self.metadata.config_key is None:
            return None
        return getattr(self.config, self.metadata.config_key)

    def create_diagnostic(
        self,
        span: Span,
        message: str,
        outer_span: Optional[Span] = None,
        outer_label: Optional[str] = None,
    ) -> Diagnostic:
        """
        Create a diagnostic using the rule's metadata as defaults.
        """
        return Diagnostic(
            rule_id=self.metadata.rule_id,
            span=span,
            message=message,
            severity=self.metadata.severity,
            help=self.metadata.help,
            outer_span=outer_span,
            outer_label=outer_label if outer_span is not None else None,
        )


class RuleRegistry:
    """
    Registry of the rule classes, in registration order.
    """

    _instance: Optional["RuleRegistry"] = None

    def __init__(self):
        self._rules: Dict[RuleId, Type[Rule]] = {}

    @classmethod
    def get_instance(cls) -> "RuleRegistry":
        """Get the singleton registry instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def register(self, rule_class: Type[Rule]) -> Type[Rule]:
        """
        Register a rule class.

        Can be used as a decorator:

        @registry.register
        class MyRule(Rule):
            ...
        """
        rule_id = rule_class().metadata.rule_id
        self._rules[rule_id] = rule_class
        return rule_class

    def get_rule(self, rule_id: RuleId, config: Optional[Config] = None) -> Optional[Rule]:
        """Get a rule instance by ID."""
        rule_class = self._rules.get(rule_id)
        if rule_class is None:
            return None
        return rule_class(config)

    def get_all_rules(self, config: Optional[Config] = None) -> List[Rule]:
        """Get instances of all registered rules."""
        return [rule_class(config) for rule_class in self._rules.values()]


# Global registry instance
registry = RuleRegistry.get_instance()


def rule(cls: Type[Rule]) -> Type[Rule]:
    """
    Decorator to register a rule with the global registry.

    Usage:
        @rule
        class MyRule(Rule):
            ...
    """
    return registry.register(cls)
