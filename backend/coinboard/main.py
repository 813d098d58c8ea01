"""Relay service entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings
from .market import QuoteSource, create_quote_source, create_relay_router

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings: Settings | None = None, source: QuoteSource | None = None) -> FastAPI:
    """Build the relay application.

    Without an explicit source one is chosen from the settings (CoinMarketCap
    when an API key is configured, the simulator otherwise). The source is
    closed when the application shuts down.
    """
    settings = settings or Settings.from_env()
    source = source or create_quote_source(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Relay started with %s source", source.name)
        yield
        await source.close()
        logger.info("Relay stopped")

    app = FastAPI(title="coinboard relay", lifespan=lifespan)
    app.state.source = source
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.include_router(create_relay_router(source, listing_limit=settings.listing_limit))
    return app


def main() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
