from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class SourceDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    selectors: list[str] = Field(default_factory=list)
    format: Literal["html", "json"] = "html"
    # Unit conversion factor applied to the extracted value (e.g. per-ounce to per-lot).
    multiplier: float = 1.0


class SymbolDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    aliases: list[str] = Field(default_factory=list)
    sources: list[SourceDescriptor] = Field(default_factory=list)


class Quote(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: str
    name: Optional[str] = None
    price: float
    source: str
    raw: Optional[str] = None
    ts: int  # epoch milliseconds


QueryStatus = Literal["cached", "fresh", "pending"]


class QueryResult(BaseModel):
    ok: bool
    cached: bool = False
    status: QueryStatus
    data: Optional[Quote] = None
    message: Optional[str] = None


class SymbolStatus(BaseModel):
    symbol: str
    name: Optional[str] = None
    cached: bool


class StatusResponse(BaseModel):
    ok: bool = True
    symbols: list[SymbolStatus] = Field(default_factory=list)
    poll_interval_seconds: float
    poll_interval_ms: int
    polling_enabled: bool
