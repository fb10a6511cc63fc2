"""formrule CLI entry point."""

import logging
import os
from pathlib import Path

import click

from formrule.config import RuleConfig
from formrule.errors import RuleConfigError, RuleRegistrationError
from formrule.rules.registry import RuleRegistry


@click.group()
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Rule configuration file (defaults to $FORMRULE_CONFIG).",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool):
    """formrule — declare form validation rules once, check them on both sides."""
    level = "DEBUG" if verbose else os.environ.get("FORMRULE_LOG_LEVEL", "WARNING")
    logging.basicConfig(level=level.upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        config = RuleConfig.from_yaml(config_path) if config_path else RuleConfig.from_env()
        ctx.obj = RuleRegistry(config)
    except (RuleConfigError, RuleRegistrationError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)


# Register subcommands
from formrule.cli.rules_cmd import rules  # noqa: E402
from formrule.cli.script_cmd import script  # noqa: E402

cli.add_command(rules)
cli.add_command(script)
