from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional

from quotewatch.cache import QuoteCache
from quotewatch.providers.resolver import SymbolResolver

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """Background poller that keeps the cache warm for every configured symbol.

    One tick resolves all symbols concurrently. The first tick runs as soon as
    the scheduler starts; later ticks are spaced ``interval_seconds`` apart,
    measured from the start of the previous tick.
    """

    def __init__(
        self,
        resolver: SymbolResolver,
        cache: QuoteCache,
        symbols: Iterable[str],
        interval_seconds: float,
        ttl_seconds: float,
        max_workers: int = 4,
    ):
        self.resolver = resolver
        self.cache = cache
        self.symbols = list(symbols)
        self.interval_seconds = interval_seconds
        # Entries must outlive the gap between two healthy ticks.
        self.ttl_seconds = max(ttl_seconds, interval_seconds)
        self.max_workers = max(1, max_workers)
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def _refresh_symbol(self, symbol: str) -> bool:
        try:
            quote = self.resolver.resolve(symbol)
        except Exception:
            logger.exception("Refresh of %s failed", symbol)
            return False
        if quote is None:
            return False
        self.cache.put(symbol, quote, self.ttl_seconds)
        return True

    def run_once(self) -> dict[str, bool]:
        if not self.symbols:
            return {}
        workers = min(self.max_workers, len(self.symbols))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="quotewatch-refresh") as pool:
            outcomes = list(pool.map(self._refresh_symbol, self.symbols))
        results = dict(zip(self.symbols, outcomes))
        logger.debug("Refresh tick finished: %s", results)
        return results

    def _loop(self) -> None:
        while not self._stop.is_set():
            started = time.monotonic()
            try:
                self.run_once()
            except Exception:
                logger.exception("Refresh tick crashed")
            remaining = self.interval_seconds - (time.monotonic() - started)
            if self._stop.wait(max(0.0, remaining)):
                break

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="quotewatch-scheduler", daemon=True)
        self._thread.start()
        logger.info(
            "Refresh scheduler started for %d symbols every %ss",
            len(self.symbols),
            self.interval_seconds,
        )

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("Refresh scheduler still finishing a tick after stop")
                return
            self._thread = None
        logger.info("Refresh scheduler stopped")
