"""Tests for single rule set validation."""

import re

from isoval.ruleset import RuleSet
from isoval.validation import DEFAULT_VALIDATOR_NAME, MessageValidator

BIC_FORMAT_RULES = {
    "required_elements": ["CdtrAgt/FinInstnId/BIC"],
    "format_validations": {
        "CdtrAgt/FinInstnId/BIC": {
            "pattern": "^[A-Z]{6}[A-Z0-9]{2}([A-Z0-9]{3})?$",
            "description": "BIC must be 8 or 11 characters"
        }
    }
}


class TestConstruction:
    """Test validator construction and parse handling."""

    def test_defaults(self, valid_xml):
        validator = MessageValidator(valid_xml)

        assert validator.name == DEFAULT_VALIDATOR_NAME
        assert validator.rules.expected_values == {"SvcLvl/Prtry": "NURG", "CtgyPurp/Cd": "SUPP"}
        assert validator.errors == []

    def test_malformed_xml_is_recorded(self, malformed_xml):
        validator = MessageValidator(malformed_xml)

        assert validator.document is None
        assert len(validator.errors) == 1
        assert validator.errors[0].startswith("Invalid XML: ")

    def test_malformed_xml_fails_validation(self, malformed_xml):
        validator = MessageValidator(malformed_xml, {"root_element": "Document"})

        assert not validator.validate()
        assert len(validator.errors) == 1

    def test_doctype_does_not_fail_validation(self):
        xml = (
            '<?xml version="1.0"?><!DOCTYPE Document SYSTEM "pacs.dtd">'
            "<Document><SvcLvl><Prtry>NURG</Prtry></SvcLvl><CtgyPurp><Cd>SUPP</Cd></CtgyPurp></Document>"
        )
        validator = MessageValidator(xml)

        assert validator.validate()
        assert validator.errors == []

    def test_invalid_rules_are_recorded(self, valid_xml):
        validator = MessageValidator(valid_xml, {"format_validations": {"BIC": {"pattern": "(["}}})

        assert validator.rules is None
        assert validator.applicable()
        assert not validator.validate()
        assert validator.errors[0].startswith("Invalid rules: ")

    def test_uncompilable_path_is_recorded(self):
        validator = MessageValidator("<Document><Cd a='1'>x</Cd></Document>", {
            "required_elements": ["Cd[abc"],
            "expected_values": {"Cd[abc": "x"}
        })

        assert validator.applicable()
        assert not validator.validate()
        assert len(validator.errors) == 1
        assert validator.errors[0].startswith("Invalid rules: ")
        assert "Cd[abc" in validator.errors[0]


class TestApplicability:
    """Test the applicability gate."""

    def test_universal_rule_set(self, valid_xml):
        assert MessageValidator(valid_xml, {}).applicable()
        assert MessageValidator(valid_xml, {"required_elements": []}).applicable()

    def test_one_required_element_present_is_enough(self, valid_xml):
        validator = MessageValidator(valid_xml, {"required_elements": ["CdtrAgt", "SvcLvl"]})
        assert validator.applicable()

    def test_no_required_element_present(self, valid_xml):
        validator = MessageValidator(valid_xml, {"required_elements": ["CdtrAgt/FinInstnId/BIC"]})

        assert not validator.applicable()
        assert validator.validate()
        assert validator.errors == []

    def test_parse_failure_is_not_applicable(self, malformed_xml):
        assert not MessageValidator(malformed_xml).applicable()

    def test_parse_failure_with_universal_rules(self, malformed_xml):
        assert MessageValidator(malformed_xml, {}).applicable()


class TestChecks:
    """Test the structural, content, root and format checks."""

    def test_valid_document(self, valid_xml):
        validator = MessageValidator(valid_xml)

        assert validator.validate()
        assert validator.errors == []

    def test_invalid_values(self, invalid_values_xml):
        validator = MessageValidator(invalid_values_xml)

        assert not validator.validate()
        assert len(validator.errors) == 2
        assert validator.errors[0] == "Invalid value for SvcLvl/Prtry. Expected: 'NURG', Found: 'INCORRECT'"
        assert validator.errors[1] == "Invalid value for CtgyPurp/Cd. Expected: 'SUPP', Found: 'INVALID'"

    def test_custom_rules(self, valid_xml):
        validator = MessageValidator(valid_xml, {
            "required_elements": ["SvcLvl/Prtry"],
            "expected_values": {"SvcLvl/Prtry": "CUSTOM"}
        })

        assert not validator.validate()
        assert len(validator.errors) == 1
        assert "Expected: 'CUSTOM', Found: 'NURG'" in validator.errors[0]

    def test_missing_required_element_not_double_reported(self, valid_xml):
        validator = MessageValidator(valid_xml, {
            "required_elements": ["SvcLvl", "SvcLvl/Cd"],
            "expected_values": {"SvcLvl/Cd": "URGP"}
        })

        assert not validator.validate()
        assert validator.errors == ["Required element missing: SvcLvl/Cd"]

    def test_whitespace_around_text_is_ignored(self):
        xml = "<Document><SvcLvl><Prtry>\n   NURG  \n</Prtry></SvcLvl><CtgyPurp><Cd> SUPP</Cd></CtgyPurp></Document>"
        assert MessageValidator(xml).validate()

    def test_whitespace_around_text_is_ignored_by_format_check(self):
        xml = "<Document><CdtrAgt><FinInstnId><BIC>\n  BOFAUS3N  </BIC></FinInstnId></CdtrAgt></Document>"
        validator = MessageValidator(xml, BIC_FORMAT_RULES)

        assert validator.validate()
        assert validator.errors == []

    def test_root_element_mismatch(self, valid_xml):
        validator = MessageValidator(valid_xml, {"root_element": "AppHdr"})

        assert not validator.validate()
        assert validator.errors == ["Root element is 'Document' but expected 'AppHdr'"]

    def test_root_element_match(self, namespaced_xml):
        assert MessageValidator(namespaced_xml, {"root_element": "Document"}).validate()

    def test_root_content(self):
        assert MessageValidator("<Document> hello </Document>", {"root_content": "hello"}).validate()

        validator = MessageValidator("<Document>bye</Document>", {"root_content": "hello"})
        assert not validator.validate()
        assert validator.errors == ["Root element content is 'bye' but expected 'hello'"]

    def test_format_match(self, payment_xml):
        assert MessageValidator(payment_xml, BIC_FORMAT_RULES).validate()

    def test_format_mismatch_uses_description(self):
        xml = "<Document><CdtrAgt><FinInstnId><BIC>bofa</BIC></FinInstnId></CdtrAgt></Document>"
        validator = MessageValidator(xml, BIC_FORMAT_RULES)

        assert not validator.validate()
        assert validator.errors == ["Format error for CdtrAgt/FinInstnId/BIC: BIC must be 8 or 11 characters"]

    def test_format_mismatch_without_description(self):
        validator = MessageValidator("<Document><Amt>12.5x</Amt></Document>", {
            "format_validations": {"Amt": {"pattern": r"^\d+(\.\d{1,2})?$"}}
        })

        assert not validator.validate()
        assert validator.errors == ["Format error for Amt: Invalid format"]

    def test_format_skips_missing_element_and_pattern(self, valid_xml):
        validator = MessageValidator(valid_xml, {
            "format_validations": {
                "Amt": {"pattern": r"^\d+$"},
                "SvcLvl/Prtry": {"description": "no pattern given"}
            }
        })
        assert validator.validate()

    def test_compiled_pattern(self, valid_xml):
        rules = RuleSet.from_mapping({"format_validations": {"Cd": {"pattern": re.compile("^[A-Z]{4}$")}}})
        assert MessageValidator(valid_xml, rules).validate()

    def test_checks_accumulate_across_passes(self, valid_xml):
        validator = MessageValidator(valid_xml, {
            "required_elements": ["SvcLvl", "InstrId"],
            "expected_values": {"SvcLvl/Prtry": "URGP"},
            "root_element": "AppHdr",
            "format_validations": {"CtgyPurp/Cd": {"pattern": "^[0-9]+$"}}
        })

        assert not validator.validate()
        assert validator.errors == [
            "Required element missing: InstrId",
            "Invalid value for SvcLvl/Prtry. Expected: 'URGP', Found: 'NURG'",
            "Root element is 'Document' but expected 'AppHdr'",
            "Format error for CtgyPurp/Cd: Invalid format",
        ]

    def test_namespaced_document_with_default_rules(self, namespaced_xml):
        assert MessageValidator(namespaced_xml).validate()


class TestDeterminism:
    """Test repeated evaluation."""

    def test_fresh_validators_agree(self, invalid_values_xml):
        first = MessageValidator(invalid_values_xml)
        second = MessageValidator(invalid_values_xml)

        assert first.validate() == second.validate()
        assert first.errors == second.errors

    def test_revalidation_does_not_duplicate_errors(self, invalid_values_xml):
        validator = MessageValidator(invalid_values_xml)

        validator.validate()
        validator.validate()
        assert len(validator.errors) == 2
