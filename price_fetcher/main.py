from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from price_fetcher.api.routes import router
from price_fetcher.config.log import configure_logging
from price_fetcher.config.settings import Settings, get_settings
from price_fetcher.errors import ApiError
from price_fetcher.integrations.yahoo_rest import YahooChartClient
from price_fetcher.schemas.api import ErrorResponse
from price_fetcher.services.quote_gateway import QuoteGatewayService

logger = logging.getLogger(__name__)


def build_yahoo_client(settings: Settings, session=None) -> YahooChartClient:
    return YahooChartClient(
        session=session,
        base_url=settings.YAHOO_BASE_URL,
        timeout=settings.UPSTREAM_TIMEOUT_SEC,
    )


def build_quote_gateway_service(settings: Settings, session=None) -> QuoteGatewayService:
    return QuoteGatewayService.from_client(build_yahoo_client(settings, session=session))


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.get_settings()
    configure_logging(settings.LOG_LEVEL)
    logger.info(
        "[APP][startup] service=%r default_source=%s upstream=%s",
        settings.SERVICE_NAME,
        settings.DEFAULT_SOURCE,
        settings.YAHOO_BASE_URL,
    )
    try:
        yield
    finally:
        app.state.yahoo_client.close()
        logger.info("[APP][shutdown] http_sessions=closed")


app = FastAPI(title="WSB Price Fetcher", version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(router)


@app.exception_handler(ApiError)
async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.code, message=exc.message).model_dump(),
    )


app.state.get_settings = get_settings
app.state.yahoo_client = build_yahoo_client(get_settings())
app.state.quote_gateway_service = QuoteGatewayService.from_client(app.state.yahoo_client)


def run() -> None:
    settings = get_settings()
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
