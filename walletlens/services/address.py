"""Helpers for normalizing chain identifiers and validating wallet addresses."""

from __future__ import annotations

import re
from functools import lru_cache

from eth_utils import is_address

_EVM_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")

_CHAIN_ALIASES = {
    "eth": "ethereum",
    "ethereum": "ethereum",
    "mainnet": "ethereum",
    "base-mainnet": "base",
    "base": "base",
    "matic": "polygon",
    "polygon": "polygon",
    "bnb": "bsc",
    "bsc": "bsc",
    "binance": "bsc",
    "arb": "arbitrum",
    "arbitrum": "arbitrum",
    "op": "optimism",
    "optimism": "optimism",
}

# Canonical slug -> chain name the Moralis deep index expects
_MORALIS_CHAINS = {
    "ethereum": "eth",
    "base": "base",
    "polygon": "polygon",
    "bsc": "bsc",
    "arbitrum": "arbitrum",
    "optimism": "optimism",
}

_EXPLORERS = {
    "ethereum": "https://etherscan.io",
    "base": "https://basescan.org",
    "polygon": "https://polygonscan.com",
    "bsc": "https://bscscan.com",
    "arbitrum": "https://arbiscan.io",
    "optimism": "https://optimistic.etherscan.io",
}


def normalize_chain(chain: str | None, default: str = "base") -> str:
    """Collapse user-provided chain identifiers into canonical slugs."""

    if not chain or not chain.strip():
        chain = default
    canonical = _CHAIN_ALIASES.get(chain.lower().strip())
    return canonical or chain.lower().strip()


def is_supported_chain(chain: str) -> bool:
    """Return True if the indexer can serve holdings for this chain."""

    return chain in _MORALIS_CHAINS


def moralis_chain_slug(chain: str) -> str:
    try:
        return _MORALIS_CHAINS[chain]
    except KeyError:
        raise ValueError(f"Unsupported chain '{chain}'") from None


def explorer_url(chain: str, address: str, kind: str = "address") -> str | None:
    """Block explorer link for an address (``kind="address"``) or token contract (``kind="token"``)."""

    base = _EXPLORERS.get(chain)
    if base is None:
        return None
    return f"{base}/{kind}/{address}"


@lru_cache(maxsize=256)
def is_valid_address_for_chain(address: str, chain: str = "base") -> bool:
    """Syntactic check: 0x-prefixed 20-byte hex, EIP-55 checksum enforced on mixed case."""

    if not address:
        return False
    # Every supported chain is EVM; the chain argument is kept for call-site symmetry
    if not _EVM_ADDRESS_RE.fullmatch(address):
        return False
    return is_address(address)


__all__ = [
    "normalize_chain",
    "is_supported_chain",
    "moralis_chain_slug",
    "explorer_url",
    "is_valid_address_for_chain",
]
