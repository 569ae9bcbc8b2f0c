from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import PlainTextResponse

from quotewatch.schemas.quote import QueryResult, StatusResponse
from quotewatch.services.quotes import QuoteService, UnknownSymbolError

router = APIRouter()


def get_quote_service(request: Request) -> QuoteService:
    return request.app.state.quote_service


def _require_symbol(symbol: str, example: str) -> str:
    cleaned = (symbol or "").strip()
    if not cleaned:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": f"symbol query required, e.g. ?symbol={example}"},
        )
    return cleaned


def _query(service: QuoteService, symbol: str, allow_alias: bool) -> QueryResult:
    try:
        return service.query(symbol, allow_alias=allow_alias)
    except UnknownSymbolError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "symbol not supported"},
        )


@router.get("/", response_class=PlainTextResponse)
def index() -> str:
    return "quotewatch backend running"


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/mcx", response_model=QueryResult)
@router.get("/quote", response_model=QueryResult)
def quote_endpoint(
    symbol: str = Query(default=""),
    service: QuoteService = Depends(get_quote_service),
) -> QueryResult:
    cleaned = _require_symbol(symbol, "MCX:GOLD1!")
    return _query(service, cleaned, allow_alias=False)


@router.get("/live", response_model=QueryResult)
def live_endpoint(
    symbol: str = Query(default=""),
    service: QuoteService = Depends(get_quote_service),
) -> QueryResult:
    cleaned = _require_symbol(symbol, "GOLD")
    return _query(service, cleaned, allow_alias=True)


@router.get("/status", response_model=StatusResponse)
def status_endpoint(service: QuoteService = Depends(get_quote_service)) -> StatusResponse:
    return service.status()
