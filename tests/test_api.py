import ccxt
from fastapi.testclient import TestClient

from arbscan.main import create_app
from arbscan.services.rate_limiting import RateLimiter
from arbscan.services.venues import VenueRegistry

from conftest import FakeRateProvider, FakeVenue


def _venues():
    return [
        FakeVenue("binance", price=64000.0),
        FakeVenue("bybit", price=64150.0),
        FakeVenue("okx", price=64320.0),
        FakeVenue("kucoin", error=ccxt.NetworkError("down")),
    ]


def build_app(venues=None, rate_provider=None, max_requests=50):
    registry = VenueRegistry(venues if venues is not None else _venues())
    app = create_app(
        registry=registry,
        rate_provider=rate_provider or FakeRateProvider(),
        limiter=RateLimiter(max_requests, 60.0),
    )
    return app, registry


def test_arbitrage_defaults():
    app, _ = build_app()
    with TestClient(app) as client:
        resp = client.get("/api/v1/arbitrage/btc")

    assert resp.status_code == 200
    body = resp.json()
    assert set(body) == {
        "config",
        "input_summary",
        "arbitrage_deal",
        "profit_loss_report",
        "execution_checklist",
    }
    assert body["config"] == {
        "coin": "BTC",
        "investment": "100000 INR",
        "applied_forex_fee": "2.5%",
    }
    assert body["input_summary"]["converted_to_usdt"] == "1167.66 USDT"
    assert body["arbitrage_deal"]["route"] == "Buy on BINANCE ➔ Sell on OKX"
    assert body["arbitrage_deal"]["buy_price"] == "$64000"
    assert body["arbitrage_deal"]["sell_price"] == "$64320"
    assert body["arbitrage_deal"]["gross_gap"] == "0.50%"
    assert len(body["execution_checklist"]) == 5
    assert body["execution_checklist"][-1] == "Note: 1% TDS is included in local profit calculation."


def test_arbitrage_query_parameters():
    app, registry = build_app(rate_provider=FakeRateProvider({"AED": 3.67, "USD": 1}))
    with TestClient(app) as client:
        resp = client.get(
            "/api/v1/arbitrage/eth",
            params={"amount": 5000, "currency": "aed", "forex_fee": 2},
        )

    assert resp.status_code == 200
    body = resp.json()
    assert body["config"]["investment"] == "5000 AED"
    assert body["config"]["applied_forex_fee"] == "2%"
    assert body["profit_loss_report"]["net_local_profit"].endswith(" AED")
    assert body["execution_checklist"][-1] == "Note: Standard exit fees applied."
    assert registry.get("binance").symbols == ["ETH/USDT"]


def test_not_enough_market_data_is_500():
    venues = [
        FakeVenue("binance", price=64000.0),
        FakeVenue("okx", error=ccxt.ExchangeError("halted")),
        FakeVenue("bybit", price=None),
    ]
    app, _ = build_app(venues=venues)
    with TestClient(app) as client:
        resp = client.get("/api/v1/arbitrage/BTC")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Not enough market data"}


def test_invalid_input_is_400():
    app, _ = build_app()
    bad_requests = [
        ("/api/v1/arbitrage/BTC", {"amount": -5}),
        ("/api/v1/arbitrage/BTC", {"amount": 0}),
        ("/api/v1/arbitrage/BTC", {"amount": "lots"}),
        ("/api/v1/arbitrage/BTC", {"currency": "RUPEE"}),
        ("/api/v1/arbitrage/BTC", {"forex_fee": 150}),
        ("/api/v1/arbitrage/BTC", {"forex_fee": -1}),
        # 99.5% forex + 1% TDS would take more than the whole exit amount
        ("/api/v1/arbitrage/BTC", {"forex_fee": 99.5, "currency": "INR"}),
        ("/api/v1/arbitrage/BTC-USD", {}),
    ]
    with TestClient(app) as client:
        for path, params in bad_requests:
            resp = client.get(path, params=params)
            assert resp.status_code == 400, (path, params)
            assert "error" in resp.json()


def test_unexpected_error_is_500():
    app, _ = build_app(rate_provider=FakeRateProvider(error=RuntimeError("boom")))
    with TestClient(app, raise_server_exceptions=False) as client:
        resp = client.get("/api/v1/arbitrage/BTC")

    assert resp.status_code == 500
    assert resp.json() == {"error": "boom"}


def test_health():
    app, _ = build_app()
    with TestClient(app) as client:
        resp = client.get("/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "Active"
    assert body["timestamp"]


def test_rate_limit_applies_to_api_only():
    app, _ = build_app(max_requests=2)
    with TestClient(app) as client:
        assert client.get("/api/v1/arbitrage/BTC").status_code == 200
        assert client.get("/api/v1/arbitrage/BTC").status_code == 200
        resp = client.get("/api/v1/arbitrage/BTC")
        health = client.get("/health")

    assert resp.status_code == 429
    assert resp.json() == {"error": "Too many requests, please try again after a minute."}
    assert int(resp.headers["Retry-After"]) > 0
    assert health.status_code == 200


def test_venue_clients_closed_on_shutdown():
    app, registry = build_app()
    with TestClient(app) as client:
        client.get("/health")
        assert not any(v.closed for v in registry)

    assert all(v.closed for v in registry)


def test_high_forex_fee_allowed_without_extra_exit_fee():
    app, _ = build_app(rate_provider=FakeRateProvider({"AED": 3.67, "USD": 1}))
    with TestClient(app) as client:
        resp = client.get("/api/v1/arbitrage/BTC", params={"forex_fee": 99.5, "currency": "AED"})

    assert resp.status_code == 200


def test_very_large_amount():
    app, _ = build_app()
    with TestClient(app) as client:
        resp = client.get("/api/v1/arbitrage/BTC", params={"amount": "1e30"})

    assert resp.status_code == 200
    assert resp.json()["config"]["investment"] == "1" + "0" * 30 + " INR"
