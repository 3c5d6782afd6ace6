"""CLI interface for isoval using Typer framework."""

import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from isoval import __description__, __version__
from isoval.config import IsovalConfig, LogLevel, OutputFormat, load_config
from isoval.ruleset import (
    DEFAULT_RULE_SET,
    PAYMENT_METHOD_VALIDATOR_NAME,
    RuleSet,
    RuleSetError,
    load_rule_set_file,
    parse_payment_method,
    payment_method_rule_set,
    rule_files_in,
)
from isoval.validation import MultiRuleValidator, ValidationReport

SUCCESS_MESSAGE = "XML validation successful! The file follows the ISO 20022 format rules."
FAILURE_MESSAGE = "XML validation failed with the following errors:"

app = typer.Typer(
    name="isoval",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console(soft_wrap=True)


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"isoval version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """isoval - Rule-based validator for ISO 20022 XML payment messages."""


def _configure_logging(level: LogLevel, verbose: bool = False) -> None:
    logging.basicConfig(
        level="DEBUG" if verbose else level.logging_level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _fail(message: str) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(message)}")
    raise typer.Exit(1)


def _load_config_or_exit(config_path: Path | None) -> IsovalConfig:
    try:
        return load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))


def _collect_rule_sets(
    rule_files: list[Path],
    rules_dir: Path,
    payment_method: str | None,
    announce,
) -> list[tuple[str, RuleSet]]:
    """Resolve the rule sets for a run.

    Named rule files must all load. Without named files, every rule file in
    ``rules_dir`` is loaded and broken ones are skipped.
    """
    rule_sets: list[tuple[str, RuleSet]] = []

    for rule_file in rule_files:
        try:
            rule_sets.append((rule_file.stem, load_rule_set_file(rule_file)))
        except FileNotFoundError:
            _fail(f"Rules file '{rule_file}' not found")
        except RuleSetError as e:
            _fail(f"Error parsing rules file: {e}")
        announce(f"Loaded rules from {rule_file}")

    if not rule_files and rules_dir.is_dir():
        for rule_file in rule_files_in(rules_dir):
            try:
                rule_sets.append((rule_file.stem, load_rule_set_file(rule_file)))
            except RuleSetError as e:
                announce(f"Error parsing rules file {rule_file}: {e}")
                continue
            announce(f"Loaded rules from {rule_file}")

    if payment_method is not None:
        try:
            tag, value = parse_payment_method(payment_method)
            rule_set = payment_method_rule_set(tag, value)
        except ValueError as e:
            _fail(str(e))
        rule_sets.append((PAYMENT_METHOD_VALIDATOR_NAME, rule_set))
        announce(f"Validating that <{tag}> contains '{value}'")

    return rule_sets


def _output_text(report: ValidationReport) -> None:
    if report.success:
        console.print(f"[green]{SUCCESS_MESSAGE}[/green]")
        return

    console.print(f"[red]{FAILURE_MESSAGE}[/red]")
    for index, error in enumerate(report.errors, 1):
        console.print(f"  {index}. {escape(error)}")


def _output_table(report: ValidationReport) -> None:
    status_color = "green" if report.success else "red"
    status = "PASS" if report.success else "FAIL"
    console.print(f"[{status_color}]Validation Status: {status}[/{status_color}]")
    console.print(
        f"Rule sets: {report.total}  Applicable: {report.applicable}  Passed: {report.successful}"
    )

    if not report.errors:
        console.print("\n[green]No issues found![/green]")
        return

    issues_table = Table()
    issues_table.add_column("#", style="dim", justify="right")
    issues_table.add_column("Error", style="white")
    for index, error in enumerate(report.errors, 1):
        issues_table.add_row(str(index), escape(error))

    console.print("\n[blue]Issues Found:[/blue]")
    console.print(issues_table)


@app.command()
def validate(
    xml_file: Annotated[
        Optional[Path],
        typer.Argument(help="Path to the XML message to validate")
    ] = None,
    rules: Annotated[
        Optional[list[Path]],
        typer.Option("--rules", "-r", help="JSON file containing validation rules (repeatable)")
    ] = None,
    rules_dir: Annotated[
        Optional[Path],
        typer.Option("--rules-dir", "-d", help="Directory containing rule files")
    ] = None,
    payment_method: Annotated[
        Optional[str],
        typer.Option("--payment-method", "-p", help="Check specific payment method tag and value (TAG=VALUE)")
    ] = None,
    format: Annotated[
        Optional[OutputFormat],
        typer.Option("--format", "-f", help="Output format: text, table, json")
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .isoval.json)")
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging")
    ] = False,
) -> None:
    """Validate an XML message against rule sets.

    Exit codes: 0 = all applicable rule sets passed, 2 = at least one failed,
    1 = usage or I/O error.
    """
    if xml_file is None:
        console.print("Missing XML file path. Use --help for usage details.")
        raise typer.Exit(1)

    isoval_config = _load_config_or_exit(config)
    _configure_logging(isoval_config.logging.level, verbose)
    output_format = format or isoval_config.output.format

    def announce(message: str) -> None:
        # Keep stdout parseable in JSON mode
        if output_format != OutputFormat.JSON:
            console.print(escape(message))

    if not xml_file.is_file():
        _fail(f"File '{xml_file}' not found")

    try:
        xml_content = xml_file.read_bytes()
    except OSError as e:
        _fail(f"Cannot read '{xml_file}': {e}")

    rule_sets = _collect_rule_sets(
        rules or [],
        rules_dir or isoval_config.rules_dir(),
        payment_method,
        announce,
    )
    if not rule_sets and isoval_config.rules.include_default:
        rule_sets.append(("default", DEFAULT_RULE_SET))
        announce("Using built-in default rules")

    multi_validator = MultiRuleValidator(xml_content)
    multi_validator.add_rule_sets(rule_sets)
    report = multi_validator.report()

    if output_format == OutputFormat.JSON:
        console.print(jsonlib.dumps(report.to_dict(), indent=2), markup=False, highlight=False)
    elif output_format == OutputFormat.TABLE:
        _output_table(report)
    else:
        _output_text(report)

    raise typer.Exit(report.exit_code)


@app.command("check-rules")
def check_rules(
    paths: Annotated[
        list[Path],
        typer.Argument(help="Rule files or directories of rule files")
    ],
) -> None:
    """Check that rule files load as valid rule sets."""
    rule_files: list[Path] = []
    for path in paths:
        if path.is_dir():
            rule_files.extend(rule_files_in(path))
        else:
            rule_files.append(path)

    if not rule_files:
        _fail("No rule files found")

    invalid = 0
    for rule_file in rule_files:
        try:
            rule_set = load_rule_set_file(rule_file)
        except (FileNotFoundError, RuleSetError) as e:
            invalid += 1
            console.print(f"[red]INVALID[/red] {escape(str(rule_file))}: {escape(str(e))}")
            continue

        console.print(
            f"[green]OK[/green] {escape(str(rule_file))} "
            f"({len(rule_set.required_elements)} required, "
            f"{len(rule_set.expected_values)} expected, "
            f"{len(rule_set.format_validations)} format)"
        )

    console.print(f"\nChecked {len(rule_files)} file(s), {invalid} invalid")
    raise typer.Exit(1 if invalid else 0)


if __name__ == "__main__":
    app()
