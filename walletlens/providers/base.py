from abc import ABC, abstractmethod
from typing import Any, Dict, List


class Provider(ABC):
    """Base provider interface"""

    name: str
    timeout_s: int = 10

    @abstractmethod
    async def ready(self) -> bool:
        """Check if provider is ready to serve requests"""
        pass

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """Return provider health status"""
        pass


class IndexerProvider(Provider):
    """Provider for blockchain indexing data (token balances, NFT holdings).

    Implementations return the indexer's raw item dicts; normalization happens
    in the holdings gateway.
    """

    @abstractmethod
    async def get_token_balances(self, address: str, chain: str) -> List[Dict[str, Any]]:
        """Get all fungible (ERC-20) token balances for an address"""
        pass

    @abstractmethod
    async def get_nft_holdings(self, address: str, chain: str) -> List[Dict[str, Any]]:
        """Get all NFTs held by an address"""
        pass
