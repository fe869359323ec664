"""Account sign-up and session commands."""

import click
from fintrack.domain.auth import AuthService
from fintrack.cli.error_handling import handle_domain_error
from fintrack.cli.session import get_translator


@click.command("register")
@click.option("--username", prompt=True, help="Unique username")
@click.option("--email", prompt=True, help="Email address")
@click.option("--password", prompt=True, hide_input=True, help="Password")
@click.option(
    "--confirm-password", prompt="Confirm password", hide_input=True, help="Repeat the password"
)
@click.pass_context
def register(ctx, username: str, email: str, password: str, confirm_password: str):
    """Create a user and log in as them.

    Examples:
        fintrack register --username lan --email lan@example.com
    """
    t = get_translator(ctx)
    service = AuthService(ctx.obj["db"])

    try:
        user = service.register(username, email, password, confirm_password)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Registered user '{user.username}' (ID: {user.id})")
    click.echo(f"{t.t('welcome')} {user.username}")


@click.command("login")
@click.option("--username", prompt=True, help="Username or email")
@click.option("--password", prompt=True, hide_input=True, help="Password")
@click.pass_context
def login(ctx, username: str, password: str):
    """Log in. The session is kept until 'fintrack logout'."""
    t = get_translator(ctx)
    service = AuthService(ctx.obj["db"])

    try:
        user = service.login(username, password)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"{t.t('welcome')} {user.username}")


@click.command("logout")
@click.pass_context
def logout(ctx):
    """Log out the current user."""
    t = get_translator(ctx)
    AuthService(ctx.obj["db"]).logout()
    click.echo(t.t("logout"))


@click.command("whoami")
@click.pass_context
def whoami(ctx):
    """Show the logged-in user."""
    user = AuthService(ctx.obj["db"]).current_user()
    if user is None:
        click.echo("Not logged in.")
        return
    click.echo(f"{user.username} <{user.email}> (ID: {user.id})")


def register_commands(cli: click.Group) -> None:
    """Register auth commands with main CLI."""
    cli.add_command(register)
    cli.add_command(login)
    cli.add_command(logout)
    cli.add_command(whoami)
