from .holdings import (
    FungibleTokenEntry,
    Holding,
    HoldingList,
    MetadataAttribute,
    NonFungibleTokenEntry,
    TokenMetadata,
)

__all__ = [
    "FungibleTokenEntry",
    "NonFungibleTokenEntry",
    "TokenMetadata",
    "MetadataAttribute",
    "Holding",
    "HoldingList",
]
