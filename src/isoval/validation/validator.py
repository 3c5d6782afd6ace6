"""Single rule set validation of a payment message."""

import logging
from collections.abc import Mapping
from typing import Any

from ..document import DocumentParseError, XmlDocument, node_text, parse_document
from ..ruleset import DEFAULT_RULE_SET, RuleSet, RuleSetError
from . import messages

logger = logging.getLogger(__name__)

DEFAULT_VALIDATOR_NAME = "MessageValidator"


class MessageValidator:
    """Validates one XML message against one rule set.

    Parse problems and unusable rules are recorded at construction and make
    every evaluation fail. A rule set whose required elements are all absent
    from the message does not apply to it, and evaluation passes vacuously.

    Example:
        validator = MessageValidator(xml_text, rules, name="pacs008")
        if not validator.validate():
            for error in validator.errors:
                print(error)
    """

    def __init__(
        self,
        xml_content: str | bytes,
        rules: RuleSet | Mapping[str, Any] | None = None,
        name: str | None = None,
    ):
        """Bind a message to a rule set.

        Args:
            xml_content: Raw XML message text
            rules: RuleSet, deserialized rule mapping, or None for the default rule set
            name: Display name used to attribute errors
        """
        self.name = name or DEFAULT_VALIDATOR_NAME
        self.document: XmlDocument | None = None
        self.rules: RuleSet | None = None
        self._setup_errors: list[str] = []

        try:
            self.rules = _coerce_rules(rules)
        except RuleSetError as e:
            logger.debug(f"{self.name}: unusable rules: {e}")
            self._setup_errors.append(messages.invalid_rules(str(e)))

        try:
            self.document = parse_document(xml_content)
        except DocumentParseError as e:
            logger.debug(f"{self.name}: document rejected: {e}")
            self._setup_errors.append(messages.invalid_xml(str(e)))
        else:
            for warning in self.document.warnings:
                self._setup_errors.append(messages.parse_warning(warning))

        self.errors: list[str] = list(self._setup_errors)

    def applicable(self) -> bool:
        """Whether the rule set concerns this message.

        True for rule sets without required elements, otherwise true when at
        least one required element path exists in the message.
        """
        if self.rules is None:
            # Broken rules are reported, never skipped
            return True
        if self.rules.is_universal:
            return True
        if self.document is None:
            return False
        return any(self.document.exists(path) for path in self.rules.required_elements)

    def validate(self) -> bool:
        """Run all checks and return True if the message conforms.

        ``errors`` is rebuilt on every call.
        """
        self.errors = list(self._setup_errors)

        if self.errors:
            return False

        if not self.applicable():
            logger.debug(f"{self.name}: not applicable, skipping checks")
            return True

        self._validate_structure()
        self._validate_content()
        self._validate_root()
        self._validate_formats()

        logger.debug(f"{self.name}: {len(self.errors)} violation(s)")
        return not self.errors

    def _validate_structure(self) -> None:
        for path in self.rules.required_elements:
            if not self.document.exists(path):
                self.errors.append(messages.required_element_missing(path))

    def _validate_content(self) -> None:
        for path, expected in self.rules.expected_values.items():
            element = self.document.resolve(path)
            if element is None:
                # Missing required elements are reported by the structure check
                continue
            actual = node_text(element).strip()
            if actual != expected:
                self.errors.append(messages.invalid_value(path, expected, actual))

    def _validate_root(self) -> None:
        if self.rules.root_element is not None:
            actual = self.document.root_name
            if actual != self.rules.root_element:
                self.errors.append(messages.root_element_mismatch(actual, self.rules.root_element))

        if self.rules.root_content is not None:
            actual = self.document.root_text
            if actual != self.rules.root_content:
                self.errors.append(messages.root_content_mismatch(actual, self.rules.root_content))

    def _validate_formats(self) -> None:
        for path, validation in self.rules.format_validations.items():
            if validation.pattern is None:
                continue
            element = self.document.resolve(path)
            if element is None:
                continue
            if not validation.pattern.search(node_text(element).strip()):
                self.errors.append(messages.format_error(path, validation.description))


def _coerce_rules(rules: RuleSet | Mapping[str, Any] | None) -> RuleSet:
    if rules is None:
        return DEFAULT_RULE_SET
    if isinstance(rules, RuleSet):
        return rules
    return RuleSet.from_mapping(rules)
