import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import health, tokens
from .config import settings
from .logging_config import setup_logging
from .middleware import RequestLoggingMiddleware

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    if not settings.has_moralis_key:
        logger.warning("MORALIS_API_KEY is not set; /api/getTokens will answer 500")
    logger.info(
        "walletlens starting",
        extra={"default_chain": settings.default_chain, "indexer": settings.moralis_base_url},
    )
    yield


app = FastAPI(
    title="WalletLens API",
    description="ERC-20 and NFT holdings for a wallet, via the Moralis indexer",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
# The browser form is served from a different origin during development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["Health"])
app.include_router(tokens.router, tags=["Tokens"])


@app.get("/")
async def root():
    """Service info"""
    return {
        "name": "WalletLens API",
        "version": __version__,
        "default_chain": settings.default_chain,
        "endpoints": {"holdings": "/api/getTokens?address=<wallet>", "health": "/healthz", "docs": "/docs"},
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "walletlens.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level=settings.log_level.lower()
    )
