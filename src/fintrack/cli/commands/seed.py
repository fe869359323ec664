"""Load sample data."""

from datetime import date
from decimal import Decimal

import click
from fintrack.domain.auth import AuthService
from fintrack.domain.transaction import TransactionService

SAMPLE_USER = {
    "username": "sample",
    "email": "sample@example.com",
    "password": "password123",
}

# (type, amount, description, date, category)
SAMPLE_TRANSACTIONS = [
    ("income", Decimal("2500000"), "Lương tháng", date(2025, 1, 15), "salary"),
    ("expense", Decimal("150000"), "Tiền ăn trưa", date(2025, 1, 16), "food"),
    ("expense", Decimal("400000"), "Xăng xe", date(2025, 1, 17), "transport"),
    ("income", Decimal("1000000"), "Làm thêm", date(2025, 1, 18), "freelance"),
    ("expense", Decimal("300000"), "Ăn tối", date(2025, 1, 19), "food"),
    ("expense", Decimal("50000"), "Cà phê", date(2025, 1, 20), "food"),
    ("income", Decimal("500000"), "Tiền thưởng", date(2025, 1, 21), "bonus"),
]


@click.command("seed")
@click.option("--login", "log_in", is_flag=True, help="Log in as the sample user afterwards")
@click.pass_context
def seed(ctx, log_in: bool):
    """Create the sample user and sample VND transactions if missing.

    The sample user is 'sample' with password 'password123'. Transactions
    are only added when the sample user has none, so running this twice
    is harmless.
    """
    db = ctx.obj["db"]
    auth_service = AuthService(db)
    transaction_service = TransactionService(db)

    user = db.get_user_by_username(SAMPLE_USER["username"])
    if user is None:
        user_id = db.create_user(**SAMPLE_USER)
        click.echo(f"Created sample user '{SAMPLE_USER['username']}' (ID: {user_id})")
    else:
        user_id = user.id
        click.echo(f"Sample user already exists (ID: {user_id})")

    if transaction_service.list_transactions(user_id):
        click.echo("Sample transactions already exist.")
    else:
        created = 0
        errors = 0
        for txn_type, amount, description, txn_date, category in SAMPLE_TRANSACTIONS:
            try:
                transaction_service.create_transaction(
                    user_id=user_id,
                    type=txn_type,
                    amount=amount,
                    description=description,
                    date=txn_date,
                    category=category,
                )
                created += 1
            except ValueError as e:
                click.echo(f"Error creating '{description}': {e}", err=True)
                errors += 1
        click.echo(f"Created {created} sample transactions")
        if errors > 0:
            click.echo(f"Errors: {errors}", err=True)

    if log_in:
        try:
            auth_service.login(SAMPLE_USER["username"], SAMPLE_USER["password"])
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)
        click.echo(f"Logged in as '{SAMPLE_USER['username']}'")


def register_commands(cli: click.Group) -> None:
    """Register seed command with main CLI."""
    cli.add_command(seed)
