from __future__ import annotations

import logging
from typing import Mapping

from quotewatch.cache import QuoteCache
from quotewatch.providers.resolver import SymbolResolver
from quotewatch.schemas.quote import QueryResult, StatusResponse, SymbolDefinition, SymbolStatus

logger = logging.getLogger(__name__)

PENDING_MESSAGE = "no price available yet, will be polled soon"


class UnknownSymbolError(LookupError):
    def __init__(self, symbol: str):
        super().__init__(f"symbol not supported: {symbol}")
        self.symbol = symbol


class QuoteService:
    """Per-request entry point: cache first, then (optionally) an on-demand resolve."""

    def __init__(
        self,
        symbols: Mapping[str, SymbolDefinition],
        cache: QuoteCache,
        resolver: SymbolResolver,
        ttl_seconds: float,
        poll_interval_seconds: float,
        polling_enabled: bool = False,
    ):
        self.symbols = dict(symbols)
        self.cache = cache
        self.resolver = resolver
        self.ttl_seconds = ttl_seconds
        self.poll_interval_seconds = poll_interval_seconds
        self.polling_enabled = polling_enabled
        self._aliases: dict[str, str] = {}
        for symbol, definition in self.symbols.items():
            for alias in definition.aliases:
                self._aliases[alias.strip().upper()] = symbol

    def normalize(self, raw: str, allow_alias: bool = True) -> str:
        symbol = (raw or "").strip().upper()
        if allow_alias and symbol in self._aliases:
            symbol = self._aliases[symbol]
        if symbol not in self.symbols:
            raise UnknownSymbolError(symbol)
        return symbol

    def query(self, raw_symbol: str, allow_alias: bool = True) -> QueryResult:
        symbol = self.normalize(raw_symbol, allow_alias=allow_alias)

        cached = self.cache.get(symbol)
        if cached is not None:
            logger.debug("Cache hit for %s", symbol)
            return QueryResult(ok=True, cached=True, status="cached", data=cached)

        logger.debug("Cache miss for %s", symbol)
        if not self.polling_enabled:
            fresh = self.resolver.resolve(symbol)
            if fresh is not None:
                self.cache.put(symbol, fresh, self.ttl_seconds)
                return QueryResult(ok=True, cached=False, status="fresh", data=fresh)

        return QueryResult(ok=False, cached=False, status="pending", message=PENDING_MESSAGE)

    def list_symbols(self) -> list[SymbolStatus]:
        return [
            SymbolStatus(
                symbol=symbol,
                name=definition.name,
                cached=self.cache.get(symbol) is not None,
            )
            for symbol, definition in self.symbols.items()
        ]

    def status(self) -> StatusResponse:
        return StatusResponse(
            symbols=self.list_symbols(),
            poll_interval_seconds=self.poll_interval_seconds,
            poll_interval_ms=int(self.poll_interval_seconds * 1000),
            polling_enabled=self.polling_enabled,
        )
