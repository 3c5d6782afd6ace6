"""Rule based validation of ISO 20022 XML messages.

MessageValidator checks a message against one rule set; MultiRuleValidator
combines several rule sets into one verdict.
"""

from .aggregator import MultiRuleValidator, ValidationReport
from .validator import DEFAULT_VALIDATOR_NAME, MessageValidator

__all__ = [
    "MessageValidator",
    "MultiRuleValidator",
    "ValidationReport",
    "DEFAULT_VALIDATOR_NAME",
]
