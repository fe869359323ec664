"""Transaction management commands."""

from datetime import date as date_type

import click
from fintrack.domain.entities import SUPPORTED_CURRENCIES, TransactionType
from fintrack.domain.summary import format_signed, totals_by_currency
from fintrack.domain.transaction import TransactionService
from fintrack.cli.date_filters import date_range_options, period_flags_from, resolve_cli_date_range
from fintrack.cli.error_handling import handle_domain_error
from fintrack.cli.session import get_translator, require_user_or_exit
from fintrack.utils.amount_parser import parse_amount
from fintrack.utils.date_parser import parse_date

TYPE_CHOICE = click.Choice([t.value for t in TransactionType], case_sensitive=False)
CURRENCY_CHOICE = click.Choice(SUPPORTED_CURRENCIES, case_sensitive=False)


def format_transaction_line(txn) -> str:
    """One-line rendering used by list and dashboard views."""
    kind = "income" if txn.type == TransactionType.INCOME else "expense"
    amount_str = f"{format_signed(txn.amount, kind)} {txn.currency}"
    category = txn.category or ""
    return (
        f"{txn.id:<6} {str(txn.date):<12} {txn.type.value:<8} {amount_str:>22}  "
        f"{category:<12} {txn.description}"
    )


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option("--type", "txn_type", type=TYPE_CHOICE, required=True, help="income or expense")
@click.option("--amount", required=True, help="Positive amount (e.g., 150000 or '1,500,000')")
@click.option("--description", required=True, help="What the money was for")
@click.option("--date", "txn_date", default="today", show_default=True,
              help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--currency", type=CURRENCY_CHOICE, default="VND", show_default=True)
@click.option("--category", help="Optional category label (e.g., 'food')")
@click.pass_context
def add_transaction(
    ctx,
    txn_type: str,
    amount: str,
    description: str,
    txn_date: str,
    currency: str,
    category: str | None,
) -> None:
    """Add an income or expense transaction.

    Examples:
        fintrack transaction add --type income --amount 2500000 --description "Salary"
        fintrack transaction add --type expense --amount 50000 --description "Coffee" --category food
    """
    user = require_user_or_exit(ctx)
    t = get_translator(ctx)
    service = TransactionService(ctx.obj["db"])

    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        parsed_date = parse_date(txn_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        transaction_id = service.create_transaction(
            user_id=user.id,
            type=txn_type.lower(),
            amount=txn_amount,
            description=description,
            date=parsed_date,
            currency=currency,
            category=category,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"{t.t('success')}: {t.t('addTransaction')} (ID: {transaction_id})")


@transaction_group.command("list")
@date_range_options
@click.option("--type", "txn_type", type=TYPE_CHOICE, help="Show only income or expenses")
@click.option("--currency", type=CURRENCY_CHOICE, help="Show only one currency")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    txn_type: str | None,
    currency: str | None,
    **periods: bool,
) -> None:
    """View your transactions, newest first."""
    user = require_user_or_exit(ctx)
    t = get_translator(ctx)
    service = TransactionService(ctx.obj["db"])

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags_from(periods),
    )

    try:
        transactions = service.list_transactions(
            user_id=user.id,
            start_date=start,
            end_date=end,
            type=txn_type.lower() if txn_type else None,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if currency:
        transactions = [txn for txn in transactions if txn.currency == currency.upper()]

    if not transactions:
        click.echo(t.t("noData"))
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 90)
    click.echo(
        f"{'ID':<6} {t.t('date'):<12} {'Type':<8} {t.t('amount'):>22}  "
        f"{'Category':<12} {t.t('description')}"
    )
    click.echo("-" * 90)
    for txn in transactions:
        click.echo(format_transaction_line(txn))

    click.echo("-" * 90)
    for code, totals in totals_by_currency(transactions).items():
        click.echo(
            f"{t.t('income')}: {format_signed(totals.income, 'income')} {code} | "
            f"{t.t('expenses')}: {format_signed(totals.expenses, 'expense')} {code} | "
            f"Count: {totals.count}"
        )


@transaction_group.command("update")
@click.argument("transaction_id")
@click.option("--type", "txn_type", type=TYPE_CHOICE, help="income or expense")
@click.option("--amount", help="New positive amount")
@click.option("--description", help="New description")
@click.option("--date", "txn_date", help="New date (YYYY-MM-DD or relative like 'yesterday')")
@click.option("--currency", type=CURRENCY_CHOICE, help="New currency")
@click.option("--category", help="New category label, or empty string to clear")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: str,
    txn_type: str | None,
    amount: str | None,
    description: str | None,
    txn_date: str | None,
    currency: str | None,
    category: str | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided. Use --category "" to clear the category.

    Examples:
        fintrack transaction update 3 --amount 420000
        fintrack transaction update 3 --type income --description "Refund"
    """
    user = require_user_or_exit(ctx)
    t = get_translator(ctx)
    service = TransactionService(ctx.obj["db"])

    txn_amount = None
    if amount is not None:
        try:
            txn_amount = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    parsed_date: date_type | None = None
    if txn_date is not None:
        try:
            parsed_date = parse_date(txn_date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    try:
        service.update_transaction(
            transaction_id,
            user_id=user.id,
            type=txn_type.lower() if txn_type else None,
            amount=txn_amount,
            description=description,
            date=parsed_date,
            currency=currency,
            category=category,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"{t.t('success')}: {t.t('update')} {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: str, yes: bool) -> None:
    """Delete a transaction.

    Examples:
        fintrack transaction delete 3
    """
    user = require_user_or_exit(ctx)
    t = get_translator(ctx)
    service = TransactionService(ctx.obj["db"])

    try:
        txn = service.require_transaction(transaction_id, user.id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(format_transaction_line(txn))
    if not yes and not click.confirm(t.t("deleteConfirmation")):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_transaction(transaction_id, user.id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
