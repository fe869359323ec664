"""Bank account management commands."""

import click
from fintrack.domain.bank_account import BankAccountService, mask_account_number
from fintrack.domain.entities import SUPPORTED_CURRENCIES
from fintrack.cli.error_handling import handle_domain_error
from fintrack.cli.session import get_translator, require_user_or_exit
from fintrack.utils.account_resolver import resolve_account
from fintrack.utils.amount_parser import parse_amount

CURRENCY_CHOICE = click.Choice(SUPPORTED_CURRENCIES, case_sensitive=False)


def _resolve_or_exit(ctx, service: BankAccountService, user_id: str, account: str) -> str:
    try:
        return resolve_account(service, user_id, account)
    except ValueError as e:
        handle_domain_error(ctx, e)


def _parse_balance_or_exit(ctx, balance: str):
    try:
        return parse_amount(balance)
    except ValueError as e:
        click.echo(f"Error: Invalid balance format: {e}", err=True)
        ctx.exit(1)


@click.group()
def account_group():
    """Manage bank accounts and e-wallets."""
    pass


@account_group.command("add")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--number", "account_number", required=True, help="Account number")
@click.option("--balance", default="0", show_default=True, help="Current balance")
@click.option("--currency", type=CURRENCY_CHOICE, default="VND", show_default=True)
@click.option("--bank-code", help="Optional bank code (e.g., VCB)")
@click.option("--inactive", is_flag=True, help="Create the account as inactive")
@click.pass_context
def add_account(
    ctx,
    name: str,
    account_number: str,
    balance: str,
    currency: str,
    bank_code: str | None,
    inactive: bool,
):
    """Add a bank account.

    Examples:
        fintrack account add "Vietcombank" --number 0011004455667 --balance 5000000
        fintrack account add "Momo" --number 0901234567
    """
    user = require_user_or_exit(ctx)
    service = BankAccountService(ctx.obj["db"])

    amount = _parse_balance_or_exit(ctx, balance)
    try:
        account_id = service.create_account(
            user_id=user.id,
            name=name,
            account_number=account_number,
            balance=amount,
            currency=currency,
            is_active=not inactive,
            bank_code=bank_code,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created account '{name}' (ID: {account_id})")


@account_group.command("list")
@click.option("--active-only", is_flag=True, help="Hide inactive accounts")
@click.pass_context
def list_accounts(ctx, active_only: bool):
    """List your bank accounts with total balances."""
    user = require_user_or_exit(ctx)
    t = get_translator(ctx)
    service = BankAccountService(ctx.obj["db"])

    accounts = service.list_accounts(user.id, active_only=active_only)
    if not accounts:
        click.echo(t.t("noData"))
        return

    click.echo("\nBank accounts:")
    click.echo("-" * 80)
    for acc in accounts:
        status = "active" if acc.is_active else "inactive"
        click.echo(
            f"ID: {acc.id:>4} | {acc.name:20s} | {mask_account_number(acc.account_number):>16} | "
            f"{acc.balance:>18,.2f} {acc.currency} | {status}"
        )

    click.echo("-" * 80)
    for currency, total in service.total_balance(user.id).items():
        click.echo(f"{t.t('balance')} ({currency}): {total:,.2f}")


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--number", "account_number", help="New account number")
@click.option("--balance", help="New balance")
@click.option("--currency", type=CURRENCY_CHOICE, help="New currency")
@click.option("--bank-code", help="New bank code")
@click.pass_context
def update_account(
    ctx,
    account: str,
    name: str | None,
    account_number: str | None,
    balance: str | None,
    currency: str | None,
    bank_code: str | None,
) -> None:
    """Update a bank account.

    ACCOUNT can be an account name or ID.

    Examples:
        fintrack account update Momo --balance 250000
        fintrack account update 2 --name "VCB Savings"
    """
    user = require_user_or_exit(ctx)
    t = get_translator(ctx)
    service = BankAccountService(ctx.obj["db"])

    account_id = _resolve_or_exit(ctx, service, user.id, account)
    amount = _parse_balance_or_exit(ctx, balance) if balance is not None else None

    try:
        service.update_account(
            account_id,
            user_id=user.id,
            name=name,
            account_number=account_number,
            balance=amount,
            currency=currency,
            bank_code=bank_code,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"{t.t('success')}: {t.t('update')} {account_id}")


def _set_active(ctx, account: str, is_active: bool) -> None:
    user = require_user_or_exit(ctx)
    service = BankAccountService(ctx.obj["db"])
    account_id = _resolve_or_exit(ctx, service, user.id, account)
    try:
        service.set_active(account_id, is_active, user_id=user.id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Account {account_id} {'activated' if is_active else 'deactivated'}")


@account_group.command("activate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def activate_account(ctx, account: str) -> None:
    """Mark an account as active."""
    _set_active(ctx, account, True)


@account_group.command("deactivate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def deactivate_account(ctx, account: str) -> None:
    """Mark an account as inactive (excluded from totals)."""
    _set_active(ctx, account, False)


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete a bank account.

    ACCOUNT can be an account name or ID.

    Examples:
        fintrack account delete Momo
        fintrack account delete 1 --yes
    """
    user = require_user_or_exit(ctx)
    service = BankAccountService(ctx.obj["db"])

    account_id = _resolve_or_exit(ctx, service, user.id, account)
    account_obj = service.get_account(account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id, user_id=user.id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted account '{account_obj.name}'")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
