"""Tests for exchange rate parsing, bank rates and rate commands."""

from decimal import Decimal

import pytest
import requests

from fintrack.cli.main import cli
from fintrack.domain.errors import ValidationError
from fintrack.domain.rates import (
    BANK_MARGINS,
    DEFAULT_USD_VND,
    FALLBACK_AVERAGE_BUY,
    FALLBACK_AVERAGE_SELL,
    BankRatesService,
    best_rate,
    build_bank_rates,
    convert,
    parse_rate_lines,
    worst_rate,
)

QUOTES = """\
25450 Wise
25400 Remitly +50 = 25450.50

not a quote
25380 Western Union
"""


class FakeRateSession:
    """Session returning a fixed response, or raising."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.urls = []

    def get(self, url, timeout=None):
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.response


class TestParseRateLines:
    """Tests for provider quote parsing."""

    def test_parse_lines(self):
        rates = parse_rate_lines(QUOTES)

        assert [r.provider for r in rates] == ["Wise", "Remitly", "Western Union"]
        assert [r.rank for r in rates] == ["1", "2", "3"]
        assert rates[0].rate == 25450
        assert rates[0].fee is None
        assert rates[1].rate == 25400
        assert rates[1].fee == 50
        assert rates[1].final_rate == 25450.5
        assert rates[1].effective_rate == 25450.5

    def test_skips_blank_and_garbage(self):
        assert parse_rate_lines("\n\nhello\n123\n") == []

    def test_best_and_worst(self):
        rates = parse_rate_lines(QUOTES)

        assert best_rate(rates).provider == "Western Union"
        assert worst_rate(rates).provider == "Remitly"

    def test_best_of_nothing(self):
        assert best_rate([]) is None
        assert worst_rate([]) is None


class TestConvert:
    """Tests for USD/VND conversion."""

    def test_usd_to_vnd(self):
        assert convert(Decimal("100"), "USD", "VND", 25000) == Decimal("2500000")

    def test_vnd_to_usd(self):
        assert convert(Decimal("2500000"), "vnd", "usd", 25000) == Decimal("100")

    def test_same_currency(self):
        assert convert(Decimal("7"), "VND", "VND", 0) == Decimal("7")

    def test_invalid(self):
        with pytest.raises(ValidationError):
            convert(Decimal("1"), "USD", "VND", 0)
        with pytest.raises(ValidationError, match="Cannot convert"):
            convert(Decimal("1"), "USD", "EUR", 25000)


class TestBankRatesService:
    """Tests for simulated bank quotes."""

    def test_build_bank_rates_applies_margins(self):
        rates = build_bank_rates(25000.0)

        assert [b.bank_name for b in rates.banks] == list(BANK_MARGINS)
        vcb = rates.banks[0]
        assert (vcb.buy_rate, vcb.sell_rate) == (24985.0, 25015.0)
        assert rates.average_buy == pytest.approx(24988.5)
        assert rates.average_sell == pytest.approx(25018.5)
        assert rates.is_fallback is False
        assert rates.base_rate == 25000.0

    def test_fetch_uses_vnd_rate(self, fake_response):
        session = FakeRateSession(fake_response(200, {"rates": {"VND": 25000, "EUR": 0.9}}))
        rates = BankRatesService(url="https://rates.test/usd", session=session).fetch_usd_rates()

        assert session.urls == ["https://rates.test/usd"]
        assert rates.base_rate == 25000.0
        assert rates.symbol == "USD/VND"

    def test_fetch_defaults_when_vnd_missing(self, fake_response):
        session = FakeRateSession(fake_response(200, {"rates": {}}))
        rates = BankRatesService(session=session).fetch_usd_rates()

        assert rates.base_rate == DEFAULT_USD_VND
        assert rates.is_fallback is False

    @pytest.mark.parametrize("payload", [{"rates": ["VND", 25000]}, {"rates": "n/a"}, [25000]])
    def test_fetch_defaults_on_unexpected_shape(self, fake_response, payload):
        session = FakeRateSession(fake_response(200, payload))
        rates = BankRatesService(session=session).fetch_usd_rates()

        assert rates.base_rate == DEFAULT_USD_VND
        assert rates.is_fallback is False

    def test_fetch_defaults_on_error_status(self, fake_response):
        session = FakeRateSession(fake_response(503, None))
        rates = BankRatesService(session=session).fetch_usd_rates()

        assert rates.base_rate == DEFAULT_USD_VND

    def test_fetch_falls_back_on_network_error(self):
        session = FakeRateSession(error=requests.ConnectionError("offline"))
        rates = BankRatesService(session=session).fetch_usd_rates()

        assert rates.is_fallback is True
        assert "offline" in rates.error
        assert rates.average_buy == FALLBACK_AVERAGE_BUY
        assert rates.average_sell == FALLBACK_AVERAGE_SELL
        assert len(rates.banks) == 6
        assert rates.banks[0].bank_name == "Vietcombank"
        assert (rates.banks[0].buy_rate, rates.banks[0].sell_rate) == (23470, 23510)

    def test_fetch_falls_back_on_bad_json(self, fake_response):
        session = FakeRateSession(fake_response(200, None))
        rates = BankRatesService(session=session).fetch_usd_rates()

        assert rates.is_fallback is True


class TestRateCommands:
    """Tests for rates commands."""

    def test_compare_from_stdin(self, cli_runner, temp_db):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "rates", "compare", "-"], input=QUOTES
        )

        assert result.exit_code == 0
        assert "Wise" in result.output
        assert "+50.00" in result.output
        assert "Best:  Western Union 25,380.00" in result.output
        assert "Worst: Remitly 25,450.50" in result.output

    def test_compare_from_file(self, cli_runner, temp_db, tmp_path):
        quotes = tmp_path / "quotes.txt"
        quotes.write_text("25450 Wise\n", encoding="utf-8")

        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "rates", "compare", str(quotes)]
        )

        assert result.exit_code == 0
        assert "Spread: 0.00" in result.output

    def test_compare_nothing(self, cli_runner, temp_db):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "rates", "compare", "-"], input="\n"
        )

        assert result.exit_code == 0
        assert "No data available" in result.output

    def test_banks(self, cli_runner, temp_db, monkeypatch):
        monkeypatch.setattr(BankRatesService, "fetch_base_rate", lambda self: 25000.0)

        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "rates", "banks"])

        assert result.exit_code == 0
        assert "Vietcombank" in result.output
        assert "24,985.00" in result.output
        assert "Average" in result.output

    def test_banks_fallback(self, cli_runner, temp_db, monkeypatch):
        def offline(self):
            raise requests.ConnectionError("no route")

        monkeypatch.setattr(BankRatesService, "fetch_base_rate", offline)

        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "rates", "banks"])

        assert result.exit_code == 0
        assert "Error: Failed to fetch currency rates: no route" in result.output
        assert "23,480.00" in result.output

    def test_convert_with_rate(self, cli_runner, temp_db):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path",
                temp_db.database_path,
                "rates",
                "convert",
                "100",
                "--from",
                "USD",
                "--to",
                "VND",
                "--rate",
                "25000",
            ],
        )

        assert result.exit_code == 0
        assert "100.00 USD = 2,500,000.00 VND" in result.output
