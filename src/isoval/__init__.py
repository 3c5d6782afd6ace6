"""isoval - Rule-based validator for ISO 20022 XML payment messages.

isoval checks XML payment messages against declarative JSON rule sets
(required elements, expected values, root checks and format patterns) and
combines the outcome of several rule sets into a single verdict.
"""

__version__ = "0.1.0"
__author__ = "isoval contributors"
__description__ = "Rule-based validator for ISO 20022 XML payment messages"

from isoval.ruleset import DEFAULT_RULE_SET, FormatValidation, RuleSet, RuleSetError
from isoval.validation import MessageValidator, MultiRuleValidator, ValidationReport

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "DEFAULT_RULE_SET",
    "FormatValidation",
    "RuleSet",
    "RuleSetError",
    "MessageValidator",
    "MultiRuleValidator",
    "ValidationReport",
]
