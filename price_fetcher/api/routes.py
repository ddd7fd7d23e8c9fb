import time

from fastapi import APIRouter, Request

from price_fetcher.errors import AllPricesFailedError, ApiError, FetchError
from price_fetcher.schemas.api import HealthResponse
from price_fetcher.services.price_aggregator import PriceAggregator, parse_symbols
from price_fetcher.services.stock_groups import list_groups

router = APIRouter()

_MISSING_SYMBOLS_MESSAGE = (
    "Missing 'symbols' parameter. Use comma-separated values like: ?symbols=AAPL,TSLA,MSFT"
)


def _source_or_default(source: str | None, request: Request) -> str:
    if source is None:
        return request.app.state.get_settings().DEFAULT_SOURCE
    return source


@router.get('/health')
def health(request: Request):
    settings = request.app.state.get_settings()
    return HealthResponse(
        status='healthy',
        service=settings.SERVICE_NAME,
        timestamp=int(time.time()),
    ).model_dump()


@router.get('/groups')
def get_groups():
    return list_groups()


@router.get('/price/{symbol}')
def get_price(symbol: str, request: Request, source: str | None = None):
    symbol = symbol.strip().upper()
    service = request.app.state.quote_gateway_service
    try:
        quote = service.fetch(symbol, _source_or_default(source, request))
    except FetchError as exc:
        raise ApiError('PRICE_FETCH_FAILED', f'Failed to fetch price for {symbol}: {exc}') from exc
    return quote.model_dump()


@router.get('/prices')
def get_prices(request: Request, symbols: str | None = None, source: str | None = None):
    requested = parse_symbols(symbols)
    if not requested:
        raise ApiError('MISSING_SYMBOLS', _MISSING_SYMBOLS_MESSAGE)

    aggregator = PriceAggregator(request.app.state.quote_gateway_service)
    try:
        result = aggregator.fetch_batch(requested, _source_or_default(source, request))
    except AllPricesFailedError as exc:
        raise ApiError('ALL_PRICES_FAILED', exc.message) from exc
    # failed symbols are left out of the success payload
    return [quote.model_dump() for quote in result.quotes]
