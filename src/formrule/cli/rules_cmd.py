"""Rule CLI commands — list and check."""

import click

from formrule.errors import FormRuleError
from formrule.rules.registry import RuleRegistry


@click.group()
def rules():
    """Rule commands."""
    pass


@rules.command("list")
@click.pass_obj
def list_cmd(registry: RuleRegistry):
    """List registered rules and how they are implemented."""
    names = registry.list_registered()
    failed = False
    for name in names:
        kind = registry.rule_kind(name).value
        try:
            implementation = type(registry.get_rule(name).rule).__name__
        except FormRuleError as e:
            implementation = click.style(str(e), fg="red")
            failed = True
        click.echo(f"  {name:<16} {kind:<9} {implementation}")
    click.echo(f"\n{len(names)} rule(s) registered.")
    if failed:
        raise SystemExit(1)


@rules.command()
@click.argument("rule_name")
@click.argument("values", nargs=-1, required=True)
@click.option("--format", "rule_format", default=None, help="Rule format (pattern, bound, operator).")
@click.option(
    "--multiple",
    is_flag=True,
    default=False,
    help="Pass all values to the rule as one unit (e.g. compare).",
)
@click.pass_obj
def check(registry: RuleRegistry, rule_name: str, values: tuple[str, ...], rule_format: str | None, multiple: bool):
    """Validate VALUES against RULE_NAME on the server side.

    One value gives a pass/fail result; several values give the number
    that pass. Exits with status 1 when nothing passes.
    """
    target: str | list[str] = values[0] if len(values) == 1 and not multiple else list(values)
    try:
        result = registry.validate(rule_name, target, rule_format, multiple=multiple)
    except FormRuleError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(2)

    if isinstance(result, bool):
        label = "valid" if result else "invalid"
        click.echo(click.style(label, fg="green" if result else "red"))
    else:
        click.echo(
            click.style(
                f"{result} of {len(values)} value(s) valid",
                fg="green" if result else "red",
            )
        )
    if not result:
        raise SystemExit(1)
