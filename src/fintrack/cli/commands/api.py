"""Mock API connectivity commands."""

from datetime import date

import click
import requests
from fintrack.database.factories import create_mock_api_database
from fintrack.domain.transaction import TransactionService
from fintrack.cli.commands.transaction import format_transaction_line
from fintrack.cli.error_handling import handle_domain_error, handle_network_error

SAMPLE_COUNT = 2


@click.group()
def api_group():
    """Inspect the mock API backend."""
    pass


@api_group.command("check")
@click.option("--create-sample", is_flag=True, help="Also create a 1,000 VND test income")
@click.option("--user-id", help="Owner of the test income (defaults to the first user)")
@click.pass_context
def check_api(ctx, create_sample: bool, user_id: str | None):
    """Check that the mock API answers, without falling back to local data.

    Uses --api-url or FINTRACK_API_URL.

    Examples:
        fintrack --api-url https://example.mockapi.io/api/v1 api check
    """
    try:
        remote = create_mock_api_database(ctx.obj.get("api_url"))
    except ValueError as e:
        handle_domain_error(ctx, e)

    try:
        transactions = remote.list_transactions()
        click.echo(f"Connected to {remote.base_url}")
        click.echo(f"Transactions: {len(transactions)}")
        for txn in transactions[:SAMPLE_COUNT]:
            click.echo(format_transaction_line(txn))

        if create_sample:
            owner = user_id
            if owner is None:
                users = remote.list_users()
                if not users:
                    click.echo("Error: No users on the backend to own the test income", err=True)
                    ctx.exit(1)
                owner = users[0].id
            transaction_id = TransactionService(remote).create_transaction(
                user_id=owner,
                type="income",
                amount=1000,
                description="Test transaction",
                date=date.today(),
            )
            click.echo(f"Created test transaction {transaction_id}")
    except requests.RequestException as e:
        handle_network_error(ctx, e)
    except ValueError as e:
        handle_domain_error(ctx, e)
    finally:
        remote.disconnect()


def register_commands(cli: click.Group) -> None:
    """Register API commands with main CLI."""
    cli.add_command(api_group, name="api")
