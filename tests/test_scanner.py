import asyncio
import time
from decimal import Decimal

import ccxt
import pytest

from arbscan.core.exceptions import InsufficientMarketData
from arbscan.services.scanner import QuoteFetcher, QuoteScanner
from arbscan.services.venues import QuoteStatus

from conftest import FakeVenue


def _fetch(registry, venue_id, symbol="BTC", timeout=1.0):
    fetcher = QuoteFetcher(registry, timeout_sec=timeout, quote_currency="USDT")
    return asyncio.run(fetcher.fetch_quote(venue_id, symbol))


def test_fetch_quote_success(make_registry):
    venue = FakeVenue("binance", price=64000.5)
    quote = _fetch(make_registry(venue), "binance")

    assert quote.status is QuoteStatus.SUCCESS
    assert quote.price == Decimal("64000.5")
    assert venue.symbols == ["BTC/USDT"]


@pytest.mark.parametrize(
    "error, reason",
    [
        (ccxt.NetworkError("connection reset"), "NetworkError"),
        (ccxt.RequestTimeout("slow"), "RequestTimeout"),
        (ccxt.BadSymbol("no such market"), "BadSymbol"),
        (ccxt.ExchangeError("maintenance"), "ExchangeError"),
        (RuntimeError("bug in connector"), "RuntimeError"),
    ],
)
def test_fetch_quote_swallows_lookup_errors(make_registry, error, reason):
    quote = _fetch(make_registry(FakeVenue("okx", error=error)), "okx")

    assert quote.status is QuoteStatus.ERROR
    assert quote.price is None
    assert quote.error == reason


@pytest.mark.parametrize("price", [None, 0, -3.2, "n/a", float("nan")])
def test_fetch_quote_rejects_unusable_price(make_registry, price):
    quote = _fetch(make_registry(FakeVenue("kucoin", price=price)), "kucoin")

    assert not quote.ok
    assert quote.error == "no price"


def test_fetch_quote_timeout_cancels_lookup(make_registry):
    venue = FakeVenue("bybit", hang=True)
    quote = _fetch(make_registry(venue), "bybit", timeout=0.05)

    assert quote.status is QuoteStatus.ERROR
    assert quote.error == "timeout"
    assert venue.cancelled


def test_fetch_quote_unknown_venue(make_registry):
    quote = _fetch(make_registry(FakeVenue("binance", price=1.0)), "ftx")

    assert not quote.ok
    assert quote.error == "not registered"


def test_scan_all_keeps_only_successes(make_registry):
    registry = make_registry(
        FakeVenue("binance", price=100.0),
        FakeVenue("bybit", error=ccxt.NetworkError("down")),
        FakeVenue("okx", price=101.5),
        FakeVenue("kucoin", price=None),
    )
    scanner = QuoteScanner(QuoteFetcher(registry, timeout_sec=1.0))

    quotes = asyncio.run(scanner.scan_all("ETH"))

    assert [q.venue_id for q in quotes] == ["binance", "okx"]
    assert all(q.ok for q in quotes)


def test_scan_all_subset_of_venues(make_registry):
    binance = FakeVenue("binance", price=100.0)
    okx = FakeVenue("okx", price=101.0)
    gateio = FakeVenue("gateio", price=99.0)
    scanner = QuoteScanner(QuoteFetcher(make_registry(binance, okx, gateio), timeout_sec=1.0))

    quotes = asyncio.run(scanner.scan_all("SOL", venues=["okx", "gateio"]))

    assert [q.venue_id for q in quotes] == ["okx", "gateio"]
    assert binance.symbols == []


def test_scan_all_all_failures_raise(make_registry):
    registry = make_registry(
        FakeVenue("binance", error=ccxt.NetworkError("down")),
        FakeVenue("okx", error=ccxt.ExchangeError("halted")),
        FakeVenue("bybit", hang=True),
    )
    scanner = QuoteScanner(QuoteFetcher(registry, timeout_sec=0.05))

    with pytest.raises(InsufficientMarketData):
        asyncio.run(scanner.scan_all("BTC"))


def test_scan_all_single_success_is_not_enough(make_registry):
    registry = make_registry(
        FakeVenue("binance", price=100.0),
        FakeVenue("okx", error=ccxt.NetworkError("down")),
    )
    scanner = QuoteScanner(QuoteFetcher(registry, timeout_sec=1.0))

    with pytest.raises(InsufficientMarketData):
        asyncio.run(scanner.scan_all("BTC"))


def test_scan_all_bounded_by_one_timeout(make_registry):
    hanging = [FakeVenue(f"slow{i}", hang=True) for i in range(8)]
    registry = make_registry(
        FakeVenue("binance", price=100.0),
        FakeVenue("okx", price=102.0),
        *hanging,
    )
    scanner = QuoteScanner(QuoteFetcher(registry, timeout_sec=0.2))

    start = time.monotonic()
    quotes = asyncio.run(scanner.scan_all("BTC"))
    elapsed = time.monotonic() - start

    assert len(quotes) == 2
    # Venues run in parallel: one timeout period, not eight
    assert elapsed < 0.2 + 0.5
    assert all(v.cancelled for v in hanging)
