import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from ..config import settings
from ..errors import ConfigurationError, UpstreamError, ValidationError
from ..providers.moralis import MoralisProvider
from ..services.holdings import HoldingsGateway
from ..types import Holding

router = APIRouter(prefix="/api")
_logger = logging.getLogger(__name__)


def get_holdings_gateway() -> HoldingsGateway:
    return HoldingsGateway(
        MoralisProvider(),
        metadata_timeout_s=settings.metadata_timeout_seconds,
        max_concurrency=settings.max_concurrent_requests,
        default_chain=settings.default_chain,
    )


@router.get("/getTokens", response_model=List[Holding])
async def get_tokens(
    address: str = Query("", description="Wallet address to look up"),
    chain: Optional[str] = Query(None, description="Chain (defaults to the configured chain)"),
    gateway: HoldingsGateway = Depends(get_holdings_gateway),
):
    """ERC-20 balances followed by NFTs held by ``address``."""

    if not address.strip():
        return JSONResponse({"error": "Address is required"}, status_code=400)

    try:
        return await gateway.fetch_holdings(address, chain)
    except ValidationError as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)
    except ConfigurationError as exc:
        return JSONResponse({"error": str(exc)}, status_code=500)
    except UpstreamError as exc:
        status = exc.status_code or 500
        _logger.warning(
            "holdings lookup failed upstream",
            extra={"status": status, "error": exc.message},
        )
        return JSONResponse({"error": exc.message, "status": status}, status_code=status)
