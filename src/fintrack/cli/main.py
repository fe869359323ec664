"""Main CLI entry point."""

import logging

import click
from fintrack.database.factories import create_database

# Import and register all commands at module level
from fintrack.cli.commands import (
    account,
    api,
    auth,
    language,
    rates,
    seed,
    summary,
    transaction,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FINTRACK_DB_PATH environment variable)",
    envvar="FINTRACK_DB_PATH",
)
@click.option(
    "--api-url",
    help="Mock API base URL; the local database is used when it can't be reached "
    "(overrides FINTRACK_API_URL environment variable)",
    envvar="FINTRACK_API_URL",
)
@click.option(
    "--lang",
    help="Display language for this run, 'en' or 'vi' (overrides FINTRACK_LANG "
    "environment variable and the saved language)",
    envvar="FINTRACK_LANG",
)
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, api_url: str | None, lang: str | None, verbose: bool):
    """Fintrack - Personal finance tracker.

    Record income and expenses in VND or USD, manage bank accounts, see
    balances and monthly summaries, and compare USD/VND exchange rates.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_database(database_path=db_path, api_url=api_url)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["lang"] = lang
        ctx.obj["api_url"] = api_url
        ctx.call_on_close(db.disconnect)


# Register all commands
auth.register_commands(cli)
transaction.register_commands(cli)
account.register_commands(cli)
summary.register_commands(cli)
rates.register_commands(cli)
language.register_commands(cli)
seed.register_commands(cli)
api.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
