"""Exchange rate commands."""

import click
from fintrack.domain.entities import SUPPORTED_CURRENCIES
from fintrack.domain.rates import (
    BASE_RATE_URL,
    BankRatesService,
    best_rate,
    convert,
    parse_rate_lines,
    worst_rate,
)
from fintrack.cli.error_handling import handle_domain_error
from fintrack.cli.session import get_translator
from fintrack.utils.amount_parser import parse_amount

CURRENCY_CHOICE = click.Choice(SUPPORTED_CURRENCIES, case_sensitive=False)


@click.group()
def rates_group():
    """Compare exchange rates."""
    pass


@rates_group.command("compare")
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.pass_context
def compare_rates(ctx, source):
    """Rank provider quotes read from SOURCE (a file, or '-' for stdin).

    One quote per line: "<rate> <provider>", optionally followed by
    "+<fee> = <final rate>".

    Examples:
        fintrack rates compare quotes.txt
        printf '25450 Wise\\n25400 Remitly +50 = 25450\\n' | fintrack rates compare
    """
    t = get_translator(ctx)
    rates = parse_rate_lines(source.read())
    if not rates:
        click.echo(t.t("noData"))
        return

    click.echo(f"{'#':<4} {'Provider':<24} {'Rate':>14} {'Fee':>10} {'Final':>14}")
    click.echo("-" * 70)
    for rate in rates:
        fee = f"+{rate.fee:,.2f}" if rate.fee is not None else ""
        final = f"{rate.final_rate:,.2f}" if rate.final_rate is not None else ""
        click.echo(
            f"{rate.rank:<4} {rate.provider:<24} {rate.rate:>14,.2f} {fee:>10} {final:>14}"
        )

    best = best_rate(rates)
    worst = worst_rate(rates)
    click.echo("-" * 70)
    click.echo(f"Best:  {best.provider} {best.effective_rate:,.2f}")
    click.echo(f"Worst: {worst.provider} {worst.effective_rate:,.2f}")
    click.echo(f"Spread: {worst.effective_rate - best.effective_rate:,.2f}")


@rates_group.command("banks")
@click.option(
    "--url",
    default=BASE_RATE_URL,
    show_default=True,
    envvar="FINTRACK_RATES_URL",
    help="USD base rate endpoint",
)
@click.pass_context
def bank_rates(ctx, url: str):
    """Show USD/VND buy and sell rates for major Vietnamese banks."""
    t = get_translator(ctx)
    rates = BankRatesService(url=url).fetch_usd_rates()

    click.echo(f"{rates.symbol}  ({rates.last_updated:%Y-%m-%d %H:%M})")
    if rates.is_fallback:
        click.echo(f"{t.t('error')}: {rates.error}")
        click.echo("Showing last known rates.")
    click.echo(f"{'Bank':<14} {'Buy':>12} {'Sell':>12} {'Spread':>10}")
    click.echo("-" * 52)
    for bank in rates.banks:
        click.echo(
            f"{bank.bank_name:<14} {bank.buy_rate:>12,.2f} {bank.sell_rate:>12,.2f} "
            f"{bank.sell_rate - bank.buy_rate:>10,.2f}"
        )
    click.echo("-" * 52)
    click.echo(
        f"{'Average':<14} {rates.average_buy:>12,.2f} {rates.average_sell:>12,.2f} "
        f"{rates.average_sell - rates.average_buy:>10,.2f}"
    )


@rates_group.command("convert")
@click.argument("amount")
@click.option("--from", "from_currency", type=CURRENCY_CHOICE, required=True)
@click.option("--to", "to_currency", type=CURRENCY_CHOICE, required=True)
@click.option("--rate", type=float, help="USD/VND rate (defaults to the average bank sell rate)")
@click.pass_context
def convert_amount(ctx, amount: str, from_currency: str, to_currency: str, rate: float | None):
    """Convert an amount between USD and VND.

    Examples:
        fintrack rates convert 100 --from USD --to VND --rate 25000
    """
    try:
        value = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    if rate is None:
        rate = BankRatesService().fetch_usd_rates().average_sell

    try:
        result = convert(value, from_currency, to_currency, rate)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"{value:,.2f} {from_currency.upper()} = {result:,.2f} {to_currency.upper()}")


def register_commands(cli: click.Group) -> None:
    """Register rate commands with main CLI."""
    cli.add_command(rates_group, name="rates")
