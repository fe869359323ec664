"""Display language commands."""

import click
from fintrack.domain.i18n import LanguageService
from fintrack.cli.error_handling import handle_domain_error


@click.group()
def language_group():
    """Show or change the display language (en, vi)."""
    pass


@language_group.command("show")
@click.pass_context
def show_language(ctx):
    """Show the saved display language."""
    service = LanguageService(ctx.obj["db"])
    click.echo(service.get_language())


@language_group.command("set")
@click.argument("code", metavar="LANGUAGE")
@click.pass_context
def set_language(ctx, code: str):
    """Save the display language.

    LANGUAGE is one of: en, vi.

    Examples:
        fintrack language set vi
    """
    service = LanguageService(ctx.obj["db"])
    try:
        saved = service.set_language(code)
    except ValueError as e:
        handle_domain_error(ctx, e)

    translator = service.translator(saved)
    click.echo(f"{translator.t('success')}: {saved}")


def register_commands(cli: click.Group) -> None:
    """Register language commands with main CLI."""
    cli.add_command(language_group, name="language")
