from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, Mapping, Optional

from quotewatch.parsing.documents import parse_document
from quotewatch.parsing.selectors import resolve_match
from quotewatch.schemas.quote import Quote, SourceDescriptor, SymbolDefinition

logger = logging.getLogger(__name__)

FetchFn = Callable[[str], Optional[str]]


class SymbolResolver:
    """Walk a symbol's sources in priority order; the first usable price wins."""

    def __init__(
        self,
        symbols: Mapping[str, SymbolDefinition],
        fetch: FetchFn,
        fallback_selectors: Iterable[str] = (),
        clock: Callable[[], float] = time.time,
    ):
        self.symbols = dict(symbols)
        self.fetch = fetch
        self.fallback_selectors = list(fallback_selectors)
        self.clock = clock

    def _price_from_source(
        self, source: SourceDescriptor
    ) -> Optional[tuple[float, Optional[str]]]:
        body = self.fetch(source.url)
        if body is None:
            return None
        document = parse_document(body, source.format)
        if document is None:
            logger.warning("Source %s returned an unreadable %s body", source.url, source.format)
            return None
        match = resolve_match(document, source.selectors, self.fallback_selectors)
        if match is None:
            logger.warning("Source %s had no extractable price", source.url)
            return None
        return match.value * source.multiplier, match.raw

    def resolve(self, symbol: str) -> Optional[Quote]:
        definition = self.symbols.get(symbol)
        if definition is None:
            return None

        for source in definition.sources:
            try:
                result = self._price_from_source(source)
            except Exception:
                logger.exception("Source %s failed for %s", source.url, symbol)
                continue
            if result is None:
                continue
            price, raw = result
            quote = Quote(
                symbol=symbol,
                name=definition.name,
                price=price,
                source=source.url,
                raw=raw,
                ts=int(self.clock() * 1000),
            )
            logger.info("Resolved %s = %s from %s", symbol, price, source.url)
            return quote

        logger.warning("All %d sources exhausted for %s", len(definition.sources), symbol)
        return None
