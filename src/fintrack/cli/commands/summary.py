"""Dashboard and summary commands."""

import click
from fintrack.domain.bank_account import BankAccountService
from fintrack.domain.entities import SUPPORTED_CURRENCIES, SummaryTotals
from fintrack.domain.summary import SummaryService, format_signed
from fintrack.cli.commands.transaction import format_transaction_line
from fintrack.cli.date_filters import date_range_options, period_flags_from, resolve_cli_date_range
from fintrack.cli.error_handling import handle_domain_error
from fintrack.cli.session import get_translator, require_user_or_exit
from fintrack.utils.date_parser import month_range

CURRENCY_CHOICE = click.Choice(SUPPORTED_CURRENCIES, case_sensitive=False)


def _echo_cards(t, totals: SummaryTotals, suffix: str = "") -> None:
    balance = totals.balance
    flag = " (negative)" if balance < 0 else ""
    click.echo(f"  {t.t('balance'):<12} {format_signed(balance, 'balance'):>20}{suffix}{flag}")
    click.echo(f"  {t.t('income'):<12} {format_signed(totals.income, 'income'):>20}{suffix}")
    click.echo(f"  {t.t('expenses'):<12} {format_signed(totals.expenses, 'expense'):>20}{suffix}")


def _echo_month_table(t, months, totals: SummaryTotals) -> None:
    click.echo(f"{'Month':<10} {t.t('income'):>18} {t.t('expenses'):>18} {t.t('balance'):>18}")
    click.echo("-" * 66)
    for month in months:
        click.echo(
            f"{month.month:<10} {format_signed(month.totals.income, 'income'):>18} "
            f"{format_signed(month.totals.expenses, 'expense'):>18} "
            f"{format_signed(month.totals.balance, 'balance'):>18}"
        )
    click.echo("-" * 66)
    click.echo(
        f"{'TOTAL':<10} {format_signed(totals.income, 'income'):>18} "
        f"{format_signed(totals.expenses, 'expense'):>18} "
        f"{format_signed(totals.balance, 'balance'):>18}"
    )


def _echo_breakdown(t, breakdown) -> None:
    if not breakdown:
        click.echo(t.t("noData"))
        return
    click.echo(f"{'Category':<20} {t.t('expenses'):>18} {'Share':>8}  Color")
    click.echo("-" * 60)
    for item in breakdown:
        name = t.t(item.name, item.name)
        click.echo(f"{name:<20} {item.value:>18,.2f} {item.percent:>7.1f}%  {item.color}")


def _load_report(ctx, user_id, start_date, end_date, currency, periods, month=None):
    flags = period_flags_from(periods)
    if month is not None:
        if start_date or end_date or any(flags.values()):
            click.echo("Error: --month cannot be combined with other date options.", err=True)
            ctx.exit(1)
        try:
            start, end = month_range(month)
        except ValueError as e:
            handle_domain_error(ctx, e)
    else:
        start, end = resolve_cli_date_range(
            ctx,
            start_date=start_date,
            end_date=end_date,
            period_flags=flags,
        )
    try:
        return SummaryService(ctx.obj["db"]).build_dashboard(
            user_id, start_date=start, end_date=end, currency=currency
        )
    except ValueError as e:
        handle_domain_error(ctx, e)


@click.command("dashboard")
@date_range_options
@click.option("--month", help="Single calendar month (YYYY-MM)")
@click.option("--currency", type=CURRENCY_CHOICE, help="Only count one currency")
@click.pass_context
def dashboard(ctx, start_date, end_date, month, currency, **periods):
    """Show balance, income and expenses plus recent transactions."""
    user = require_user_or_exit(ctx)
    t = get_translator(ctx)
    report = _load_report(ctx, user.id, start_date, end_date, currency, periods, month)

    click.echo(t.t("financeTracker"))
    click.echo(f"{t.t('welcome')} {user.username}")
    click.echo("=" * 60)

    if report.currency is not None:
        _echo_cards(t, report.totals, f" {report.currency}")
    elif len(report.totals_by_currency) <= 1:
        suffix = "".join(f" {code}" for code in report.totals_by_currency)
        _echo_cards(t, report.totals, suffix)
    else:
        for code, totals in report.totals_by_currency.items():
            click.echo(f"[{code}]")
            _echo_cards(t, totals, f" {code}")

    balances = BankAccountService(ctx.obj["db"]).total_balance(user.id)
    if balances:
        click.echo("-" * 60)
        for code, total in balances.items():
            click.echo(f"  Bank accounts ({code}): {total:,.2f}")

    click.echo("-" * 60)
    if not report.recent:
        click.echo(t.t("noData"))
        return
    for txn in report.recent:
        click.echo(format_transaction_line(txn))


@click.command("summary")
@date_range_options
@click.option(
    "--by",
    "group_by",
    type=click.Choice(["month", "category"]),
    default="month",
    show_default=True,
    help="Group by calendar month or expense category",
)
@click.option("--currency", type=CURRENCY_CHOICE, help="Only count one currency")
@click.pass_context
def summary(ctx, start_date, end_date, group_by, currency, **periods):
    """Show income and expenses per month, or expenses per category."""
    user = require_user_or_exit(ctx)
    t = get_translator(ctx)
    report = _load_report(ctx, user.id, start_date, end_date, currency, periods)

    if report.totals.count == 0:
        click.echo(t.t("noData"))
        return

    if report.currency is not None:
        sections = [(report.currency, report.months, report.breakdown, report.totals)]
    else:
        sections = [
            (
                code,
                report.months_by_currency[code],
                report.breakdown_by_currency[code],
                report.totals_by_currency[code],
            )
            for code in report.totals_by_currency
        ]
    # Amounts in different currencies are never added together
    show_header = len(sections) > 1

    for code, months, breakdown, totals in sections:
        if show_header:
            click.echo(f"[{code}]")
        if group_by == "month":
            _echo_month_table(t, months, totals)
        else:
            _echo_breakdown(t, breakdown)


def register_commands(cli: click.Group) -> None:
    """Register dashboard and summary commands with main CLI."""
    cli.add_command(dashboard)
    cli.add_command(summary)
