from __future__ import annotations

from typing import Dict, List, Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from quotewatch.schemas.quote import SourceDescriptor, SymbolDefinition


_INVESTING_LAST = ".instrument-price_last__KQzyA"


def _default_symbols() -> Dict[str, SymbolDefinition]:
    return {
        "MCX:GOLD1!": SymbolDefinition(
            name="MCX GOLD",
            aliases=["GOLD"],
            sources=[
                SourceDescriptor(
                    url="https://www.moneycontrol.com/commodity/gold-price.html",
                    selectors=["#nse_ticker .pcst", ".inprice", ".price", _INVESTING_LAST, ".prc"],
                ),
                SourceDescriptor(
                    url="https://in.investing.com/commodities/gold",
                    selectors=[_INVESTING_LAST, "#last_last", ".text-2xl"],
                ),
            ],
        ),
        "MCX:SILVER1!": SymbolDefinition(
            name="MCX SILVER",
            aliases=["SILVER"],
            sources=[
                SourceDescriptor(
                    url="https://www.moneycontrol.com/commodity/silver-price.html",
                    selectors=[".inprice", ".price", "#nse_ticker .pcst"],
                ),
                SourceDescriptor(
                    url="https://in.investing.com/commodities/silver",
                    selectors=[_INVESTING_LAST, "#last_last"],
                ),
            ],
        ),
        "MCX:CRUDEOIL1!": SymbolDefinition(
            name="MCX CRUDEOIL",
            aliases=["CRUDE"],
            sources=[
                SourceDescriptor(
                    url="https://in.investing.com/commodities/brent-oil",
                    selectors=[_INVESTING_LAST, "#last_last"],
                ),
                SourceDescriptor(
                    url="https://www.moneycontrol.com/commodity/crude-oil-price.html",
                    selectors=[".inprice", ".price"],
                ),
            ],
        ),
    }


def _default_fallback_selectors() -> List[str]:
    return [
        _INVESTING_LAST,
        "[data-test='instrument-price-last']",
        "#last_last",
        ".inprice",
        ".price",
        ".last-price",
        ".prc",
    ]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="QUOTEWATCH_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    cache_ttl_seconds: float = Field(
        default=15.0,
        gt=0,
        validation_alias=AliasChoices("CACHE_TTL", "QUOTEWATCH_CACHE_TTL_SECONDS"),
    )
    poll_interval_seconds: float = Field(
        default=5.0,
        gt=0,
        validation_alias=AliasChoices("POLL_INTERVAL_SECONDS", "QUOTEWATCH_POLL_INTERVAL_SECONDS"),
    )
    request_timeout_seconds: float = Field(default=8.0, gt=0)
    max_response_bytes: int = Field(default=2_000_000, ge=1)
    user_agent: str = "Mozilla/5.0 (compatible; quotewatch/1.0)"
    polling_enabled: bool = True
    refresh_workers: int = Field(default=4, ge=1)

    cache_backend: Literal["memory", "redis"] = "memory"
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        validation_alias=AliasChoices("REDIS_URL", "QUOTEWATCH_REDIS_URL"),
    )

    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    fallback_selectors: List[str] = Field(default_factory=_default_fallback_selectors)
    symbols: Dict[str, SymbolDefinition] = Field(default_factory=_default_symbols)


settings = Settings()
