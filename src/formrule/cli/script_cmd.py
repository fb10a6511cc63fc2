"""Script CLI command — emit the client-side validation function of a form."""

from pathlib import Path

import click

from formrule.errors import FormRuleError
from formrule.forms import load_form
from formrule.rules.registry import RuleRegistry


@click.command()
@click.argument("form_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--form-id", default=None, help="Override the form id used in the function name.")
@click.pass_obj
def script(registry: RuleRegistry, form_path: Path, form_id: str | None):
    """Print the browser validation function for the form defined in FORM_PATH."""
    try:
        default_id, rule_set = load_form(form_path, registry)
        output = rule_set.validation_script(form_id or default_id)
    except FormRuleError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    if not output:
        click.echo("No client-side rules defined.", err=True)
        return
    click.echo(output)
