"""Validation of one message against several independent rule sets.

Only rule sets that apply to the message take part in the verdict; errors of
failing rule sets are attributed with the rule set name.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..ruleset import RuleSet, load_rule_sets_from_directory
from . import messages
from .validator import MessageValidator

logger = logging.getLogger(__name__)


@dataclass
class ValidationReport:
    """Verdict of a multi rule set validation run."""
    success: bool
    errors: list[str] = field(default_factory=list)
    total: int = 0
    applicable: int = 0
    successful: int = 0

    @property
    def exit_code(self) -> int:
        """Exit code for front ends: 0 = pass, 2 = an applicable rule set failed."""
        return 0 if self.success else 2

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "success": self.success,
            "exit_code": self.exit_code,
            "counters": {
                "validators": self.total,
                "applicable": self.applicable,
                "successful": self.successful,
            },
            "errors": list(self.errors),
        }


class MultiRuleValidator:
    """Validates one XML message against an ordered collection of rule sets."""

    def __init__(self, xml_content: str | bytes):
        self.xml_content = xml_content
        self.validators: list[MessageValidator] = []
        self.errors: list[str] = []

    def add_validator(
        self,
        rules: RuleSet | Mapping[str, Any] | None,
        name: str | None = None,
    ) -> MessageValidator:
        """Append a validator for ``rules``; nothing is evaluated yet."""
        validator = MessageValidator(self.xml_content, rules, name)
        self.validators.append(validator)
        logger.debug(f"Added validator {validator.name}")
        return validator

    def add_rule_sets(self, rule_sets: Iterable[tuple[str, RuleSet]]) -> None:
        """Append one validator per ``(name, rule_set)`` pair, in order."""
        for name, rule_set in rule_sets:
            self.add_validator(rule_set, name)

    def load_rules_from_directory(self, directory: str | Path) -> int:
        """Add a validator for every JSON rule file in ``directory``.

        Returns:
            Number of validators added
        """
        rule_sets = load_rule_sets_from_directory(directory)
        self.add_rule_sets(rule_sets)
        return len(rule_sets)

    def validate(self) -> bool:
        """Evaluate all applicable validators; True if every one of them passed."""
        return self.report().success

    def report(self) -> ValidationReport:
        """Evaluate all applicable validators and return the full verdict."""
        self.errors.clear()
        applicable = 0
        successful = 0

        for validator in self.validators:
            if not validator.applicable():
                logger.debug(f"Skipping {validator.name}: not applicable")
                continue

            applicable += 1
            if validator.validate():
                successful += 1
            else:
                for error in validator.errors:
                    self.errors.append(messages.attributed(validator.name, error))

        # No applicable rule set means nothing to violate
        success = applicable == 0 or successful == applicable

        logger.info(
            f"Validation finished: {applicable}/{len(self.validators)} applicable, "
            f"{successful} passed, {len(self.errors)} error(s)"
        )
        return ValidationReport(
            success=success,
            errors=list(self.errors),
            total=len(self.validators),
            applicable=applicable,
            successful=successful,
        )
