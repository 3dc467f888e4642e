from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..config import settings
from ..providers.base import IndexerProvider
from ..providers.moralis import MoralisProvider

router = APIRouter()


def get_indexer() -> IndexerProvider:
    return MoralisProvider()


@router.get("/healthz")
async def health_check(indexer: IndexerProvider = Depends(get_indexer)) -> Dict[str, Any]:
    """Report whether the indexer is configured and reachable."""

    indexer_status = await indexer.health_check()

    return {
        "status": "healthy" if indexer_status["status"] == "healthy" else "degraded",
        "providers": {indexer.name: indexer_status},
        "default_chain": settings.default_chain,
    }
