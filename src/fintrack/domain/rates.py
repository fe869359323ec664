"""Exchange rate helpers.

Two views are supported:

* comparing provider quotes pasted as text, one ``<rate> <provider>`` per
  line, optionally with a ``+<fee> = <final>`` suffix;
* USD/VND buy/sell quotes for a fixed set of Vietnamese banks. Banks have no
  public API, so each bank's quote is simulated as a fixed margin around a
  public base rate. When the base rate cannot be fetched a fixed table is
  returned instead.
"""

import logging
import re
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

import requests

from fintrack.domain.entities import BankRate, CurrencyRates, ExchangeRate
from fintrack.domain.errors import ValidationError

logger = logging.getLogger(__name__)

BASE_RATE_URL = "https://api.exchangerate-api.com/v4/latest/USD"
DEFAULT_USD_VND = 23500.0
REFRESH_INTERVAL_SECONDS = 300
USD_VND_SYMBOL = "USD/VND"

# (buy margin, sell margin) applied to the base USD/VND rate
BANK_MARGINS: dict[str, tuple[float, float]] = {
    "Vietcombank": (-15, 15),
    "Techcombank": (-12, 18),
    "ACB": (-10, 20),
    "VPBank": (-8, 22),
    "MBBank": (-13, 17),
    "Sacombank": (-11, 19),
}

FALLBACK_BANK_QUOTES: tuple[tuple[str, float, float], ...] = (
    ("Vietcombank", 23470, 23510),
    ("Techcombank", 23475, 23515),
    ("ACB", 23465, 23505),
    ("VPBank", 23480, 23520),
    ("MBBank", 23472, 23512),
    ("Sacombank", 23468, 23508),
)
FALLBACK_AVERAGE_BUY = 23480.0
FALLBACK_AVERAGE_SELL = 23520.0

_RATE_LINE = re.compile(r"(\d+(?:\.\d+)?)\s+([^\d]+)")
_FEE_SUFFIX = re.compile(r"\+(\d+(?:\.\d+)?)\s*=\s*(\d+(?:\.\d+)?)")


def parse_rate_lines(text: str) -> list[ExchangeRate]:
    """Parse pasted provider quotes.

    Lines that don't start with a number followed by a provider name are
    skipped. Ranks are assigned in input order starting at "1".

    Examples:
        "25450 Wise" -> rate 25450, provider "Wise"
        "25400 Remitly +50 = 25450" -> rate 25400, fee 50, final 25450
    """
    rates: list[ExchangeRate] = []
    for line in text.splitlines():
        match = _RATE_LINE.search(line)
        if match is None:
            continue
        provider = match.group(2).strip().rstrip("+= ").strip()
        if not provider:
            continue
        rank = str(len(rates) + 1)
        fee_match = _FEE_SUFFIX.search(line)
        if fee_match:
            rates.append(
                ExchangeRate(
                    rank=rank,
                    rate=float(match.group(1)),
                    provider=provider,
                    fee=float(fee_match.group(1)),
                    final_rate=float(fee_match.group(2)),
                )
            )
        else:
            rates.append(ExchangeRate(rank=rank, rate=float(match.group(1)), provider=provider))
    return rates


def best_rate(rates: Sequence[ExchangeRate]) -> Optional[ExchangeRate]:
    """Lowest effective rate (cheapest for a buyer); first wins on ties."""
    if not rates:
        return None
    return min(rates, key=lambda r: r.effective_rate)


def worst_rate(rates: Sequence[ExchangeRate]) -> Optional[ExchangeRate]:
    """Highest effective rate; first wins on ties."""
    if not rates:
        return None
    return max(rates, key=lambda r: r.effective_rate)


def convert(amount: Decimal, from_currency: str, to_currency: str, usd_vnd_rate: float) -> Decimal:
    """Convert an amount between USD and VND.

    Raises:
        ValidationError: For unsupported currency pairs or a non-positive rate
    """
    source = from_currency.upper()
    target = to_currency.upper()
    if source == target:
        return amount
    if usd_vnd_rate <= 0:
        raise ValidationError("Exchange rate must be greater than zero")
    rate = Decimal(str(usd_vnd_rate))
    if (source, target) == ("USD", "VND"):
        return amount * rate
    if (source, target) == ("VND", "USD"):
        return amount / rate
    raise ValidationError(f"Cannot convert {source} to {target}")


def build_bank_rates(base_rate: float, now: Optional[datetime] = None) -> CurrencyRates:
    """Apply each bank's margins to a base rate and average the results."""
    now = now or datetime.now()
    banks = tuple(
        BankRate(
            bank_name=name,
            buy_rate=base_rate + buy_margin,
            sell_rate=base_rate + sell_margin,
            last_updated=now,
        )
        for name, (buy_margin, sell_margin) in BANK_MARGINS.items()
    )
    average_buy = sum(bank.buy_rate for bank in banks) / len(banks)
    average_sell = sum(bank.sell_rate for bank in banks) / len(banks)
    return CurrencyRates(
        symbol=USD_VND_SYMBOL,
        banks=banks,
        average_buy=round(average_buy, 2),
        average_sell=round(average_sell, 2),
        last_updated=now,
        base_rate=base_rate,
    )


def fallback_bank_rates(error: Optional[str] = None, now: Optional[datetime] = None) -> CurrencyRates:
    """Fixed quote table used when rates cannot be fetched."""
    now = now or datetime.now()
    return CurrencyRates(
        symbol=USD_VND_SYMBOL,
        banks=tuple(
            BankRate(bank_name=name, buy_rate=buy, sell_rate=sell, last_updated=now)
            for name, buy, sell in FALLBACK_BANK_QUOTES
        ),
        average_buy=FALLBACK_AVERAGE_BUY,
        average_sell=FALLBACK_AVERAGE_SELL,
        last_updated=now,
        is_fallback=True,
        error=error,
    )


class BankRatesService:
    """Fetch the USD/VND base rate and derive per-bank quotes."""

    def __init__(
        self,
        url: str = BASE_RATE_URL,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        """Initialize bank rates service.

        Args:
            url: Endpoint returning ``{"rates": {"VND": ...}}`` for USD
            timeout: Request timeout in seconds
            session: Optional requests session (useful for testing)
        """
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_base_rate(self) -> float:
        """Fetch the USD/VND base rate.

        A non-success response or a body without a VND rate yields the
        default rate.

        Raises:
            requests.RequestException: If the request fails outright
            ValueError: If the body is not valid JSON
        """
        response = self.session.get(self.url, timeout=self.timeout)
        if not response.ok:
            logger.warning("Rate endpoint returned %s, using default base rate", response.status_code)
            return DEFAULT_USD_VND
        data = response.json()
        rates = data.get("rates") if isinstance(data, dict) else None
        vnd = rates.get("VND") if isinstance(rates, dict) else None
        if not vnd:
            return DEFAULT_USD_VND
        return float(vnd)

    def fetch_usd_rates(self) -> CurrencyRates:
        """Return simulated bank quotes, or the fallback table on failure."""
        try:
            base_rate = self.fetch_base_rate()
        except (requests.RequestException, ValueError) as e:
            logger.error("Error fetching currency rates: %s", e)
            return fallback_bank_rates(error=f"Failed to fetch currency rates: {e}")
        return build_bank_rates(base_rate)
