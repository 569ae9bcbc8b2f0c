from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quotewatch.api.routes import router
from quotewatch.cache import QuoteCache, build_cache
from quotewatch.config.settings import Settings, settings
from quotewatch.jobs.refresh import RefreshScheduler
from quotewatch.observability import configure_logging
from quotewatch.providers.fetcher import SourceFetcher
from quotewatch.providers.resolver import SymbolResolver
from quotewatch.services.quotes import QuoteService

logger = logging.getLogger(__name__)


def create_app(config: Settings = settings, cache: Optional[QuoteCache] = None) -> FastAPI:
    configure_logging(config.log_level)

    cache = cache if cache is not None else build_cache(config)
    fetcher = SourceFetcher(
        config.request_timeout_seconds,
        config.user_agent,
        max_bytes=config.max_response_bytes,
    )
    resolver = SymbolResolver(config.symbols, fetcher, config.fallback_selectors)
    service = QuoteService(
        config.symbols,
        cache,
        resolver,
        ttl_seconds=config.cache_ttl_seconds,
        poll_interval_seconds=config.poll_interval_seconds,
        polling_enabled=config.polling_enabled,
    )
    scheduler = RefreshScheduler(
        resolver,
        cache,
        config.symbols.keys(),
        interval_seconds=config.poll_interval_seconds,
        ttl_seconds=config.cache_ttl_seconds,
        max_workers=config.refresh_workers,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if config.polling_enabled:
            scheduler.start()
        try:
            yield
        finally:
            if scheduler.running:
                scheduler.stop(timeout=config.request_timeout_seconds)

    app = FastAPI(title="quotewatch", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.state.quote_service = service
    app.state.scheduler = scheduler
    app.include_router(router)
    return app


app = create_app()
