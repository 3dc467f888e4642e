import asyncio
from typing import Any, Dict, List, Optional

import httpx
import pytest

from walletlens.providers.base import IndexerProvider

WALLET = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"

ERC20_FOO = {
    "token_address": "0x1",
    "name": "Foo",
    "symbol": "FOO",
    "logo": None,
    "decimals": "18",
    "balance": "1000000000000000000",
}


class FakeIndexer(IndexerProvider):
    """In-memory indexer returning canned raw items."""

    name = "fake"

    def __init__(
        self,
        tokens: Optional[List[Dict[str, Any]]] = None,
        nfts: Optional[List[Dict[str, Any]]] = None,
        *,
        ready: bool = True,
        error: Optional[Exception] = None,
        nft_delay: float = 0.0,
    ):
        self.tokens = tokens or []
        self.nfts = nfts or []
        self._ready = ready
        self.error = error
        self.nft_delay = nft_delay
        self.nft_cancelled = False
        self.calls: List[tuple] = []

    async def ready(self) -> bool:
        return self._ready

    async def health_check(self) -> Dict[str, Any]:
        return {"status": "healthy" if self._ready else "unavailable"}

    async def get_token_balances(self, address: str, chain: str) -> List[Dict[str, Any]]:
        self.calls.append(("erc20", address, chain))
        if self.error:
            raise self.error
        return list(self.tokens)

    async def get_nft_holdings(self, address: str, chain: str) -> List[Dict[str, Any]]:
        self.calls.append(("nft", address, chain))
        if self.nft_delay:
            try:
                await asyncio.sleep(self.nft_delay)
            except asyncio.CancelledError:
                self.nft_cancelled = True
                raise
        return list(self.nfts)


def build_moralis_transport(
    tokens: Optional[List[Dict[str, Any]]] = None,
    nfts: Optional[List[Dict[str, Any]]] = None,
    *,
    status_code: int = 200,
    error_body: Optional[Dict[str, Any]] = None,
    requests: Optional[List[httpx.Request]] = None,
) -> httpx.MockTransport:
    """Mock of the two Moralis endpoints the provider calls."""

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        if status_code != 200:
            if error_body is None:
                return httpx.Response(status_code, text="upstream exploded")
            return httpx.Response(status_code, json=error_body)
        if request.url.path.endswith("/erc20"):
            return httpx.Response(200, json=tokens or [])
        if request.url.path.endswith("/nft"):
            return httpx.Response(200, json={"result": nfts or [], "cursor": None})
        return httpx.Response(404, json={"message": "not found"})

    return httpx.MockTransport(handler)


@pytest.fixture
def fake_indexer():
    return FakeIndexer


@pytest.fixture
def moralis_transport():
    return build_moralis_transport


@pytest.fixture
def wallet():
    return WALLET


@pytest.fixture
def erc20_foo():
    return dict(ERC20_FOO)
