from .base import IndexerProvider, Provider
from .moralis import MoralisProvider

__all__ = [
    "Provider",
    "IndexerProvider",
    "MoralisProvider",
]
