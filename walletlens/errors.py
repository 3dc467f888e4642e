"""Error taxonomy for holdings lookups."""

from typing import Optional


class WalletLensError(Exception):
    """Base error for the holdings service."""
    pass


class ValidationError(WalletLensError):
    """Caller supplied a bad or missing input; no network call was made."""
    pass


class ConfigurationError(WalletLensError):
    """Operator-side misconfiguration, e.g. the indexer API key is missing."""
    pass


class UpstreamError(WalletLensError):
    """The indexing service failed; the whole request is aborted."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class MetadataFetchError(WalletLensError):
    """A single NFT's token URI could not be resolved. Never leaves the gateway."""

    def __init__(self, message: str, token_id: Optional[str] = None):
        super().__init__(message)
        self.token_id = token_id


__all__ = [
    "WalletLensError",
    "ValidationError",
    "ConfigurationError",
    "UpstreamError",
    "MetadataFetchError",
]
