"""Holdings gateway: fungible balances plus NFTs for a wallet, normalized.

The indexer is queried twice (ERC-20 balances, NFT holdings) concurrently.
NFTs whose metadata the indexer did not inline get a bounded fetch of their
token URI; a failed fetch only blanks that NFT's ``metadata`` and never
aborts the batch.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from ..errors import ConfigurationError, MetadataFetchError, ValidationError
from ..providers.base import IndexerProvider
from ..types import FungibleTokenEntry, Holding, NonFungibleTokenEntry, TokenMetadata
from .address import is_supported_chain, normalize_chain

logger = logging.getLogger(__name__)

DEFAULT_DECIMALS = 18
# ERC-20 decimals is a uint8
MAX_DECIMALS = 255
UNKNOWN_NFT_NAME = "Unknown NFT"
UNKNOWN_SYMBOL = "N/A"

_LEADING_INT_RE = re.compile(r"\s*(\d+)")


def parse_decimals(raw: Any) -> int:
    """Parse the indexer's decimals field.

    Anything unparseable yields 18; values past the uint8 range are clamped
    to 255.
    """

    if isinstance(raw, bool) or raw is None:
        return DEFAULT_DECIMALS
    if isinstance(raw, int):
        return min(raw, MAX_DECIMALS) if raw >= 0 else DEFAULT_DECIMALS
    match = _LEADING_INT_RE.match(str(raw))
    if not match:
        return DEFAULT_DECIMALS
    digits = match.group(1).lstrip("0") or "0"
    if len(digits) > len(str(MAX_DECIMALS)):
        return MAX_DECIMALS
    return min(int(digits), MAX_DECIMALS)


def _text(value: Any, default: str = "") -> str:
    if value is None or value == "":
        return default
    return str(value)


def normalize_token(item: Dict[str, Any]) -> FungibleTokenEntry:
    return FungibleTokenEntry(
        token_address=_text(item.get("token_address")),
        name=_text(item.get("name")),
        symbol=_text(item.get("symbol")),
        logo=item.get("logo") or None,
        decimals=parse_decimals(item.get("decimals")),
        balance=_text(item.get("balance"), "0"),
    )


def metadata_from_payload(payload: Any, token_id: Optional[str] = None) -> TokenMetadata:
    """Coerce a decoded metadata document into ``TokenMetadata``."""

    if not isinstance(payload, dict):
        raise MetadataFetchError("metadata document is not a JSON object", token_id)
    try:
        return TokenMetadata.model_validate(payload)
    except PydanticValidationError as exc:
        raise MetadataFetchError(f"metadata document is malformed: {exc}", token_id) from exc


def parse_embedded_metadata(raw: Any, token_id: Optional[str] = None) -> Optional[TokenMetadata]:
    """Parse metadata the indexer inlined as a serialized JSON string.

    Returns None when nothing usable was inlined so the caller can fall back
    to the token URI.
    """

    if not raw:
        return None
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except (ValueError, RecursionError):
            logger.warning(
                "embedded nft metadata is not valid JSON",
                extra={"token_id": token_id},
            )
            return None
    try:
        return metadata_from_payload(raw, token_id)
    except MetadataFetchError:
        return None


class HoldingsGateway:
    """Fetch and normalize the holdings of one wallet."""

    def __init__(
        self,
        provider: IndexerProvider,
        *,
        metadata_timeout_s: float = 5.0,
        max_concurrency: int = 10,
        default_chain: str = "base",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.provider = provider
        self.metadata_timeout_s = metadata_timeout_s
        self.max_concurrency = max_concurrency
        self.default_chain = default_chain
        # Only used for token URI fetches; the provider owns its own transport
        self._transport = transport

    async def fetch_holdings(self, address: str, chain: Optional[str] = None) -> List[Holding]:
        """Return ERC-20 entries followed by NFT entries, each in indexer order.

        Raises:
            ValidationError: empty address or unsupported chain.
            ConfigurationError: the indexer credential is missing.
            UpstreamError: the indexer failed; propagated from the provider.
        """

        address = (address or "").strip()
        if not address:
            raise ValidationError("Address is required")

        normalized_chain = normalize_chain(chain, self.default_chain)
        if not is_supported_chain(normalized_chain):
            raise ValidationError(f"Unsupported chain '{chain}'")

        if not await self.provider.ready():
            logger.error("indexer credential missing", extra={"provider": self.provider.name})
            raise ConfigurationError("Server configuration error: API key missing")

        queries = [
            asyncio.ensure_future(self.provider.get_token_balances(address, normalized_chain)),
            asyncio.ensure_future(self.provider.get_nft_holdings(address, normalized_chain)),
        ]
        try:
            raw_tokens, raw_nfts = await asyncio.gather(*queries)
        except BaseException:
            # One query failed (or we were cancelled); stop the other before re-raising
            for query in queries:
                query.cancel()
            await asyncio.gather(*queries, return_exceptions=True)
            raise

        tokens = [normalize_token(item) for item in raw_tokens]
        nfts = await self._normalize_nfts(raw_nfts)

        logger.info(
            "holdings fetched",
            extra={
                "address": address,
                "chain": normalized_chain,
                "tokens": len(tokens),
                "nfts": len(nfts),
            },
        )
        return [*tokens, *nfts]

    async def _normalize_nfts(self, raw_nfts: List[Dict[str, Any]]) -> List[NonFungibleTokenEntry]:
        if not raw_nfts:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrency)
        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=self.metadata_timeout_s,
            follow_redirects=True,
        ) as client:
            # gather preserves input order regardless of completion order
            return list(
                await asyncio.gather(
                    *(self._normalize_nft(item, client, semaphore) for item in raw_nfts)
                )
            )

    async def _normalize_nft(
        self,
        item: Dict[str, Any],
        client: httpx.AsyncClient,
        semaphore: asyncio.Semaphore,
    ) -> NonFungibleTokenEntry:
        token_id = _text(item.get("token_id"))
        metadata = parse_embedded_metadata(item.get("metadata"), token_id)

        token_uri = item.get("token_uri")
        if metadata is None and token_uri:
            try:
                async with semaphore:
                    try:
                        metadata = await self.fetch_token_uri(client, str(token_uri), token_id)
                    except MetadataFetchError:
                        raise
                    except Exception as exc:
                        raise MetadataFetchError(
                            str(exc) or exc.__class__.__name__, token_id
                        ) from exc
            except MetadataFetchError as exc:
                logger.warning(
                    "failed to fetch metadata for token %s: %s",
                    token_id,
                    exc,
                    extra={"token_uri": token_uri},
                )
                metadata = None

        return NonFungibleTokenEntry(
            token_address=_text(item.get("token_address")),
            name=_text(item.get("name"), UNKNOWN_NFT_NAME),
            symbol=_text(item.get("symbol"), UNKNOWN_SYMBOL),
            token_id=token_id,
            metadata=metadata,
        )

    async def fetch_token_uri(
        self,
        client: httpx.AsyncClient,
        uri: str,
        token_id: Optional[str] = None,
    ) -> TokenMetadata:
        """GET a token URI and parse it as metadata, within ``metadata_timeout_s`` overall."""

        try:
            response = await asyncio.wait_for(client.get(uri), timeout=self.metadata_timeout_s)
            response.raise_for_status()
            payload = response.json()
        except asyncio.TimeoutError as exc:
            raise MetadataFetchError(f"timed out after {self.metadata_timeout_s}s", token_id) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise MetadataFetchError(str(exc) or exc.__class__.__name__, token_id) from exc
        except (ValueError, RecursionError) as exc:
            raise MetadataFetchError("token URI did not return JSON", token_id) from exc

        return metadata_from_payload(payload, token_id)
