"""Defines the command-line interface for the pyvalq application.

This module uses the `click` library to expose the validator on the command
line: validate a JSON or TOML data file against a TOML rules file, list the
available rules, and inspect the active configuration.
"""
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click
from halo import Halo
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .core.config import Config
from .core.exceptions import ConfigurationError
from .core.message_bag import MessageBag
from .core.parser import snake
from .core.registry import RuleRegistry
from .core.validator import Factory
from .utils.files import UploadedFile
from .utils.translator import flatten_lines

try:
    import tomllib  # Available in Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for Python versions < 3.11

# Configure rich console for beautiful output.
console = Console(emoji=True, force_terminal=True)

# Set up basic logging.
logger = logging.getLogger(__name__)

EXIT_FAILED = 1
EXIT_MISCONFIGURED = 2


class AliasedGroup(click.Group):
    """A custom click Group that supports command aliases and case-insensitivity."""

    def __init__(self, *args, **kwargs):
        """Initializes the aliased group."""
        super().__init__(*args, **kwargs)
        self._aliases: Dict[str, str] = {}

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        """Gets a command by name, checking for aliases and prefixes.

        Args:
            ctx: The click context.
            cmd_name: The command name entered by the user.

        Returns:
            The matched click command, or None.
        """
        cmd_name = cmd_name.lower()
        rv = super().get_command(ctx, cmd_name)
        if rv is not None:
            return rv
        if cmd_name in self._aliases:
            return super().get_command(ctx, self._aliases[cmd_name])
        matches = [x for x in self.list_commands(ctx) if x.startswith(cmd_name)]
        if not matches:
            return None
        if len(matches) == 1:
            return super().get_command(ctx, matches[0])
        ctx.fail(f"Ambiguous command: '{cmd_name}'. Matches: {', '.join(sorted(matches))}")
        return None

    def add_alias(self, alias: str, command_name: str) -> None:
        """Adds an alias for a command.

        Args:
            alias: The alias to add.
            command_name: The name of the command to alias.
        """
        self._aliases[alias.lower()] = command_name.lower()


def _apply_config_verbosity(config_obj: Config) -> None:
    """Raises logging to INFO when the config sets `verbose` and no flag asked for more."""
    root = logging.getLogger()
    if config_obj.get("verbose") and root.getEffectiveLevel() > logging.INFO:
        root.setLevel(logging.INFO)


def _load_document(path: str) -> Dict[str, Any]:
    """Loads a JSON or TOML file, chosen by its extension.

    Raises:
        click.BadParameter: If the file cannot be parsed.
    """
    try:
        if Path(path).suffix.lower() == ".toml":
            with open(path, "rb") as f:
                return tomllib.load(f)
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except (OSError, ValueError) as e:
        raise click.BadParameter(f"Could not read {path}: {e}") from e
    if not isinstance(document, dict):
        raise click.BadParameter(f"{path} must contain an object at the top level.")
    return document


def _parse_file_options(file_options: Tuple[str, ...]) -> Dict[str, UploadedFile]:
    """Turns ``attribute=path`` options into file values."""
    files = {}
    for option in file_options:
        attribute, separator, path = option.partition("=")
        if not separator or not attribute:
            raise click.BadParameter(f"Expected ATTRIBUTE=PATH, got '{option}'.", param_hint="--file")
        files[attribute.strip()] = UploadedFile(path.strip())
    return files


def _format_errors_as_markdown(errors: MessageBag) -> str:
    """Formats validation errors as a Markdown list grouped by attribute."""
    if errors.is_empty():
        return "**Validation passed.**"
    lines = ["# Validation errors", ""]
    for attribute in errors.keys():
        lines.append(f"## {attribute}")
        lines.extend(f"- {message}" for message in errors.get(attribute))
        lines.append("")
    return "\n".join(lines)


def _display_errors(errors: MessageBag) -> None:
    """Displays validation errors in a formatted table."""
    if errors.is_empty():
        console.print(Panel("All attributes passed validation.", style="green", title="Validation Passed"))
        return

    table = Table(title="Validation Errors")
    table.add_column("Attribute", style="cyan")
    table.add_column("Message")
    for attribute in errors.keys():
        for message in errors.get(attribute):
            table.add_row(attribute, message)
    console.print(table)
    console.print(Panel(f"Found {errors.count()} error(s) in {len(errors.keys())} attribute(s).", style="red", title="Validation Failed"))


@click.group(cls=AliasedGroup, invoke_without_command=True, context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="pyvalq")
@click.option("--verbose", is_flag=True, help="Enable verbose output.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, debug: bool) -> None:
    """Validate structured data against declarative rules.

    Rules are written per attribute in a compact syntax such as
    "required|email" or "numeric|between:1,10", and every failure is
    reported as a readable message.
    """
    log_level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=log_level, format='%(asctime)s - %(levelname)s - %(message)s')
    logger.debug("Debug mode enabled.")

    if ctx.invoked_subcommand is None:
        console.print("Use 'pyvalq check <data> --rules <rules>' to validate a file, or 'pyvalq --help' for more commands.")


@main.command()
@click.argument("data_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--rules", "rules_path", type=click.Path(exists=True, dir_okay=False), required=True, help="TOML file with a [rules] table.")
@click.option("--file", "file_options", multiple=True, help="Attach a file value as ATTRIBUTE=PATH. Repeatable.")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="Path to a custom config file.")
@click.option("--json", "json_output", is_flag=True, help="Output errors in JSON format.")
@click.option("--md", "md_output", is_flag=True, help="Output errors in Markdown format.")
def check(data_path: str, rules_path: str, file_options: Tuple[str, ...], config_path: Optional[str], json_output: bool, md_output: bool) -> None:
    """Validate a JSON or TOML data file against a rules file.

    The rules file holds a [rules] table mapping each attribute to its rule
    string, and may hold a [messages] table of custom message lines (keys
    such as "required" or "email.required").

    Exits with status 1 when the data fails validation and 2 when the rules
    are misconfigured.
    """
    config_obj = Config(config_path=config_path)
    _apply_config_verbosity(config_obj)
    data = _load_document(data_path)
    rules_document = _load_document(rules_path)
    rules = rules_document.get("rules")
    if not isinstance(rules, dict):
        raise click.BadParameter(f"{rules_path} has no [rules] table.", param_hint="--rules")
    files = _parse_file_options(file_options)

    with Halo(text=f"Validating {data_path}...", spinner="dots") as spinner:
        try:
            factory = Factory.from_config(config_obj)
            validator = factory.make(data, rules, flatten_lines(rules_document.get("messages", {})))
            validator.set_files(files)
            errors = validator.validate()
            spinner.succeed(f"Validation complete for {data_path}")
        except (ConfigurationError, OSError, tomllib.TOMLDecodeError) as e:
            spinner.fail(f"Invalid configuration for {rules_path}: {e}")
            sys.exit(EXIT_MISCONFIGURED)

    if json_output:
        click.echo(errors.to_json(indent=2))
    elif md_output:
        click.echo(_format_errors_as_markdown(errors))
    else:
        _display_errors(errors)

    if errors.any():
        sys.exit(EXIT_FAILED)


@main.command(name="rules")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="Path to a custom config file.")
def list_rules(config_path: Optional[str]) -> None:
    """List the available validation rules."""
    config_obj = Config(config_path=config_path)
    _apply_config_verbosity(config_obj)
    table = Table(title="Validation Rules")
    table.add_column("Rule", style="cyan")
    table.add_column("Token", style="magenta")
    table.add_column("Implicit")
    table.add_column("Description")
    for name, rule in RuleRegistry().rules().items():
        if not config_obj.is_rule_enabled(name):
            continue
        table.add_row(name, snake(name), "yes" if rule.implicit else "", rule.description)
    console.print(table)


@main.command()
@click.argument("action", type=click.Choice(['get', 'list']), required=True)
@click.argument("key", type=str, required=False)
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="Path to a custom config file.")
def config(action: str, key: Optional[str], config_path: Optional[str]) -> None:
    """Show the pyvalq configuration.

    \b
    ACTION:
        get <key>       Get a configuration value.
        list            List all current configuration values.
    """
    config_obj = Config(config_path=config_path)
    _apply_config_verbosity(config_obj)
    if action == "list":
        console.print(Panel(json.dumps(config_obj.config, indent=2), title="Current Configuration"))
    elif action == "get":
        if not key:
            console.print("[red]Error: 'get' action requires a key.[/red]")
            sys.exit(1)
        click.echo(json.dumps(config_obj.get(key)))


main.add_alias("validate", "check")
main.add_alias("ls", "rules")


if __name__ == "__main__":
    main()
