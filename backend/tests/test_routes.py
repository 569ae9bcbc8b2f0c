import pytest
from fastapi import HTTPException

from quotewatch.api.routes import health, live_endpoint, quote_endpoint, status_endpoint
from quotewatch.cache import MemoryQuoteCache
from quotewatch.config.settings import Settings
from quotewatch.main import create_app
from quotewatch.schemas.quote import Quote, SymbolDefinition
from quotewatch.services.quotes import QuoteService


class FakeResolver:
    def __init__(self, price: float | None) -> None:
        self.price = price

    def resolve(self, symbol: str) -> Quote | None:
        if self.price is None:
            return None
        return Quote(symbol=symbol, name="MCX GOLD", price=self.price, source="https://a.test", ts=1)


def build_service(price: float | None) -> QuoteService:
    return QuoteService(
        {"MCX:GOLD1!": SymbolDefinition(name="MCX GOLD", aliases=["GOLD"])},
        MemoryQuoteCache(),
        FakeResolver(price),  # type: ignore[arg-type]
        ttl_seconds=15,
        poll_interval_seconds=5,
    )


def test_health() -> None:
    assert health() == {"status": "ok"}


def test_quote_endpoint_returns_fresh_quote() -> None:
    result = quote_endpoint(symbol="MCX:GOLD1!", service=build_service(100.0))
    assert result.ok is True
    assert result.cached is False
    assert result.data.price == 100.0


def test_quote_endpoint_requires_symbol() -> None:
    with pytest.raises(HTTPException) as excinfo:
        quote_endpoint(symbol="  ", service=build_service(100.0))
    assert excinfo.value.status_code == 400


def test_unknown_symbol_is_404_not_pending() -> None:
    with pytest.raises(HTTPException) as excinfo:
        quote_endpoint(symbol="MCX:ZINC1!", service=build_service(None))
    assert excinfo.value.status_code == 404
    assert excinfo.value.detail == {"error": "symbol not supported"}


def test_quote_endpoint_does_not_accept_aliases() -> None:
    with pytest.raises(HTTPException) as excinfo:
        quote_endpoint(symbol="GOLD", service=build_service(100.0))
    assert excinfo.value.status_code == 404


def test_live_endpoint_maps_alias() -> None:
    result = live_endpoint(symbol="gold", service=build_service(100.0))
    assert result.data.symbol == "MCX:GOLD1!"


def test_pending_payload() -> None:
    result = live_endpoint(symbol="GOLD", service=build_service(None))
    assert result.ok is False
    assert result.status == "pending"
    assert result.message


def test_status_endpoint() -> None:
    status = status_endpoint(service=build_service(None))
    assert status.ok is True
    assert status.symbols[0].symbol == "MCX:GOLD1!"
    assert status.symbols[0].cached is False
    assert status.poll_interval_ms == 5000


def test_create_app_wires_shared_cache() -> None:
    cache = MemoryQuoteCache()
    app = create_app(Settings(polling_enabled=False), cache=cache)
    assert app.state.quote_service.cache is cache
    assert app.state.scheduler.cache is cache
    assert app.state.scheduler.running is False


def test_mcx_path_serves_quote_handler() -> None:
    app = create_app(Settings(polling_enabled=False), cache=MemoryQuoteCache())
    endpoints = {route.path: route.endpoint for route in app.routes if hasattr(route, "endpoint")}
    assert endpoints["/mcx"] is quote_endpoint
    assert endpoints["/quote"] is quote_endpoint
