"""Violation message texts shared by the validators.

Front ends and downstream tooling match on these strings, so the wording is
kept stable.
"""

DEFAULT_FORMAT_DESCRIPTION = "Invalid format"


def invalid_xml(message: str) -> str:
    return f"Invalid XML: {message}"


def parse_warning(warning: str) -> str:
    return f"XML parsing error: {warning}"


def invalid_rules(message: str) -> str:
    return f"Invalid rules: {message}"


def required_element_missing(path: str) -> str:
    return f"Required element missing: {path}"


def invalid_value(path: str, expected: str, actual: str) -> str:
    return f"Invalid value for {path}. Expected: '{expected}', Found: '{actual}'"


def root_element_mismatch(actual: str | None, expected: str) -> str:
    return f"Root element is '{_render(actual)}' but expected '{expected}'"


def root_content_mismatch(actual: str | None, expected: str) -> str:
    return f"Root element content is '{_render(actual)}' but expected '{expected}'"


def format_error(path: str, description: str | None) -> str:
    return f"Format error for {path}: {description or DEFAULT_FORMAT_DESCRIPTION}"


def attributed(validator_name: str, message: str) -> str:
    """Prefix a violation with the name of the validator that produced it."""
    return f"[{validator_name}] {message}"


def _render(value: str | None) -> str:
    # An absent value renders as an empty string
    return "" if value is None else value
