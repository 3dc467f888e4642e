"""Moralis deep index API provider.

Docs: https://docs.moralis.io/web3-data-api/evm/reference
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from ..errors import UpstreamError
from ..services.address import moralis_chain_slug
from .base import IndexerProvider

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Pull the human-readable message out of a Moralis error body."""

    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if isinstance(message, str) and message:
            return message
    return f"Request failed with status code {response.status_code}"


def _result_items(data: Any) -> List[Dict[str, Any]]:
    # v2 returns a bare list for erc20 and {"result": [...], "cursor": ...} for nft
    if isinstance(data, dict):
        data = data.get("result")
    if not isinstance(data, list):
        return []
    return [item for item in data if isinstance(item, dict)]


class MoralisProvider(IndexerProvider):
    """Moralis API provider for EVM token and NFT holdings"""

    name = "moralis"
    timeout_s = 30

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = settings.moralis_api_key if api_key is None else api_key
        self.base_url = (base_url or settings.moralis_base_url).rstrip("/")
        self.timeout_s = timeout_s or settings.request_timeout_seconds
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        return {"X-API-Key": self.api_key, "Accept": "application/json"}

    async def ready(self) -> bool:
        return bool(self.api_key) and settings.enable_moralis

    async def health_check(self) -> Dict[str, Any]:
        if not await self.ready():
            return {
                "status": "unavailable",
                "reason": "API key not configured or provider disabled"
            }

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    f"{self.base_url}/web3/version",
                    headers=self._headers(),
                    timeout=self.timeout_s
                )
                response.raise_for_status()
                return {"status": "healthy", "latency_ms": int(response.elapsed.total_seconds() * 1000)}
        except httpx.HTTPError as e:
            return {"status": "error", "reason": str(e)}

    async def _get(self, path: str, params: Dict[str, str]) -> Any:
        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout_s) as client:
            try:
                response = await client.get(
                    f"{self.base_url}{path}",
                    params=params,
                    headers=self._headers(),
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                message = _error_message(exc.response)
                logger.error(
                    "moralis request failed",
                    extra={"path": path, "status": status, "error": message},
                )
                raise UpstreamError(message, status) from exc
            except httpx.RequestError as exc:
                logger.error(
                    "moralis unreachable",
                    extra={"path": path, "error": str(exc)},
                )
                raise UpstreamError(str(exc) or exc.__class__.__name__) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError("Indexer returned a non-JSON response") from exc

    async def get_token_balances(self, address: str, chain: str = "base") -> List[Dict[str, Any]]:
        """Get ERC-20 token balances for address"""
        data = await self._get(f"/{address}/erc20", {"chain": moralis_chain_slug(chain)})
        items = _result_items(data)
        logger.debug("raw erc20 response", extra={"count": len(items), "chain": chain})
        return items

    async def get_nft_holdings(self, address: str, chain: str = "base") -> List[Dict[str, Any]]:
        """Get NFTs held by address, asking Moralis to normalize metadata"""
        data = await self._get(
            f"/{address}/nft",
            {
                "chain": moralis_chain_slug(chain),
                "format": "decimal",
                "normalizeMetadata": "true",
            },
        )
        items = _result_items(data)
        logger.debug("raw nft response", extra={"count": len(items), "chain": chain})
        return items
