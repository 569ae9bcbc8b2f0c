from quotewatch.providers.resolver import SymbolResolver
from quotewatch.schemas.quote import SourceDescriptor, SymbolDefinition


class FakeFetcher:
    def __init__(self, pages: dict[str, str | None]) -> None:
        self.pages = pages
        self.calls: list[str] = []

    def __call__(self, url: str) -> str | None:
        self.calls.append(url)
        return self.pages.get(url)


SYMBOLS = {
    "MCX:GOLD1!": SymbolDefinition(
        name="MCX GOLD",
        aliases=["GOLD"],
        sources=[
            SourceDescriptor(url="https://a.test/gold", selectors=[".price"]),
            SourceDescriptor(url="https://b.test/gold", selectors=[".price"]),
            SourceDescriptor(url="https://c.test/gold", selectors=[".price"]),
        ],
    ),
}


def test_first_successful_source_wins_and_stops() -> None:
    fetcher = FakeFetcher(
        {
            "https://a.test/gold": None,
            "https://b.test/gold": '<span class="price">100</span>',
            "https://c.test/gold": '<span class="price">200</span>',
        }
    )
    resolver = SymbolResolver(SYMBOLS, fetcher, clock=lambda: 1700000000.5)

    quote = resolver.resolve("MCX:GOLD1!")

    assert quote is not None
    assert quote.price == 100
    assert quote.source == "https://b.test/gold"
    assert quote.name == "MCX GOLD"
    assert quote.raw == "100"
    assert quote.ts == 1700000000500
    assert fetcher.calls == ["https://a.test/gold", "https://b.test/gold"]


def test_source_without_price_is_skipped() -> None:
    fetcher = FakeFetcher(
        {
            "https://a.test/gold": "<p>market closed</p>",
            "https://b.test/gold": None,
            "https://c.test/gold": '<div class="price">₹ 72,850.20</div>',
        }
    )
    quote = SymbolResolver(SYMBOLS, fetcher).resolve("MCX:GOLD1!")
    assert quote is not None
    assert quote.price == 72850.20
    assert quote.source == "https://c.test/gold"


def test_all_sources_exhausted_returns_none() -> None:
    fetcher = FakeFetcher({})
    assert SymbolResolver(SYMBOLS, fetcher).resolve("MCX:GOLD1!") is None
    assert len(fetcher.calls) == 3


def test_unknown_symbol_returns_none_without_fetching() -> None:
    fetcher = FakeFetcher({})
    assert SymbolResolver(SYMBOLS, fetcher).resolve("MCX:ZINC1!") is None
    assert fetcher.calls == []


def test_raising_fetcher_counts_as_miss() -> None:
    def fetch(url: str) -> str | None:
        if "a.test" in url:
            raise RuntimeError("boom")
        return '<span class="price">101.5</span>'

    quote = SymbolResolver(SYMBOLS, fetch).resolve("MCX:GOLD1!")
    assert quote is not None
    assert quote.source == "https://b.test/gold"


def test_json_source_with_multiplier() -> None:
    symbols = {
        "XAUINR": SymbolDefinition(
            name="Gold per 10g",
            sources=[
                SourceDescriptor(
                    url="https://api.test/xau",
                    selectors=["rates.XAU"],
                    format="json",
                    multiplier=10,
                )
            ],
        )
    }
    fetcher = FakeFetcher({"https://api.test/xau": '{"rates": {"XAU": 7285.5}}'})
    quote = SymbolResolver(symbols, fetcher).resolve("XAUINR")
    assert quote is not None
    assert quote.price == 72855.0
