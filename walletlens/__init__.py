"""Wallet holdings viewer: ERC-20 balances and NFTs for an EVM address."""

__version__ = "0.1.0"
