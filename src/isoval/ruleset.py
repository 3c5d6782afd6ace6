"""Rule set model and loaders.

A rule set is declarative data describing what a payment message must contain:
required element paths, expected element values, root element checks and
format patterns. Rule sets are usually stored as JSON files, one rule set per
file, named after the file stem.
"""

import json
import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from isoval.document import check_path

logger = logging.getLogger(__name__)


class RuleSetError(ValueError):
    """Raised when a rule set source cannot be turned into a RuleSet."""


class FormatValidation(BaseModel):
    """Format constraint for a single element.

    ``pattern`` is compiled when the rule set is loaded; a plain string is
    compiled with ``re.compile`` and a compiled expression is kept as-is.
    """
    pattern: re.Pattern[str] | None = None
    description: str | None = None

    model_config = ConfigDict(frozen=True, extra="ignore")


class RuleSet(BaseModel):
    """Immutable description of what a document must contain and look like."""
    required_elements: list[str] = Field(default_factory=list)
    expected_values: dict[str, str] = Field(default_factory=dict)
    root_element: str | None = None
    root_content: str | None = None
    format_validations: dict[str, FormatValidation] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("required_elements")
    @classmethod
    def validate_required_paths(cls, v):
        for path in v:
            check_path(path)
        return v

    @field_validator("expected_values", "format_validations")
    @classmethod
    def validate_keyed_paths(cls, v):
        for path in v:
            check_path(path)
        return v

    @property
    def is_universal(self) -> bool:
        """True when the rule set applies to every document."""
        return not self.required_elements

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "RuleSet":
        """Build a RuleSet from a deserialized mapping.

        Explicit ``null`` values are treated as absent fields.

        Raises:
            RuleSetError: If the mapping does not have the rule set shape or
                a format pattern is not a valid regular expression
        """
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise RuleSetError(f"Rule set must be a JSON object, got {type(data).__name__}")

        fields = {key: value for key, value in data.items() if value is not None}
        try:
            return cls.model_validate(fields)
        except ValidationError as e:
            raise RuleSetError(_describe_validation_error(e)) from e


def _describe_validation_error(error: ValidationError) -> str:
    problems = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"])
        problems.append(f"{location}: {detail['msg']}" if location else detail["msg"])
    return "; ".join(problems)


DEFAULT_RULE_SET = RuleSet(
    required_elements=[
        "SvcLvl",
        "SvcLvl/Prtry",
        "CtgyPurp",
        "CtgyPurp/Cd",
    ],
    expected_values={
        "SvcLvl/Prtry": "NURG",
        "CtgyPurp/Cd": "SUPP",
    },
)

PAYMENT_METHOD_VALIDATOR_NAME = "PaymentMethodValidator"


def load_rule_set_file(path: str | Path) -> RuleSet:
    """Load a rule set from a JSON file.

    Args:
        path: Path to the JSON rule file

    Returns:
        RuleSet described by the file

    Raises:
        FileNotFoundError: If the file does not exist
        RuleSetError: If the file is not valid JSON or not a valid rule set
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Rules file '{path}' not found")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise RuleSetError(f"Invalid JSON in {path.name}: {e}") from e
    except UnicodeDecodeError as e:
        raise RuleSetError(f"Cannot decode {path.name}: {e}") from e
    except OSError as e:
        raise RuleSetError(f"Cannot read {path.name}: {e}") from e

    rule_set = RuleSet.from_mapping(data)
    logger.debug(
        f"Loaded rule set {path.stem}: {len(rule_set.required_elements)} required, "
        f"{len(rule_set.expected_values)} expected, {len(rule_set.format_validations)} format"
    )
    return rule_set


def rule_files_in(directory: str | Path) -> list[Path]:
    """JSON rule files in a directory, sorted by file name."""
    return sorted(Path(directory).glob("*.json"))


def load_rule_sets_from_directory(directory: str | Path) -> list[tuple[str, RuleSet]]:
    """Load every ``*.json`` rule file in a directory.

    Files that fail to load are logged and skipped.

    Args:
        directory: Directory containing rule files

    Returns:
        ``(name, rule_set)`` pairs in file name order, named by file stem
    """
    directory = Path(directory)
    if not directory.is_dir():
        logger.debug(f"Rules directory {directory} does not exist")
        return []

    loaded = []
    for rule_file in rule_files_in(directory):
        try:
            loaded.append((rule_file.stem, load_rule_set_file(rule_file)))
        except RuleSetError as e:
            logger.warning(f"Error parsing rules file {rule_file}: {e}")

    logger.info(f"Loaded {len(loaded)} rule set(s) from {directory}")
    return loaded


def parse_payment_method(option: str) -> tuple[str, str]:
    """Split a ``TAG=VALUE`` option at the first ``=``.

    Raises:
        ValueError: If there is no ``=`` or the tag is empty
    """
    tag, separator, value = option.partition("=")
    tag = tag.strip()
    if not separator or not tag:
        raise ValueError(f"Payment method must be given as TAG=VALUE, got '{option}'")
    return tag, value


def payment_method_rule_set(tag: str, value: str) -> RuleSet:
    """Rule set requiring ``tag`` to be present with text ``value``.

    Raises:
        RuleSetError: If ``tag`` is not a usable element path
    """
    return RuleSet.from_mapping({"required_elements": [tag], "expected_values": {tag: value}})

