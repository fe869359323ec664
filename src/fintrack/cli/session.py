"""CLI helpers for the logged-in user and display language."""

import click

from fintrack.domain.auth import AuthService
from fintrack.domain.entities import User
from fintrack.domain.i18n import LanguageService, Translator


def require_user_or_exit(ctx: click.Context) -> User:
    """Return the logged-in user, or exit with a CLI error."""
    try:
        return AuthService(ctx.obj["db"]).require_user()
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def get_translator(ctx: click.Context) -> Translator:
    """Translator for --lang if given, else the saved language."""
    try:
        return LanguageService(ctx.obj["db"]).translator(ctx.obj.get("lang"))
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
