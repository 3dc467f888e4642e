"""Presentation client for the holdings endpoint.

``WalletViewer`` keeps the view state a form-plus-table UI needs (entries,
error, loading flag) and drives it from a submitted address. ``to_rows``
flattens entries into display rows for whatever renders the table.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import httpx

from .config import settings
from .errors import WalletLensError
from .services.address import explorer_url, is_valid_address_for_chain, normalize_chain
from .services.holdings import MAX_DECIMALS
from .types import Holding, HoldingList, TokenMetadata

logger = logging.getLogger(__name__)

INVALID_ADDRESS = "Invalid address"
FETCH_FAILED = "Failed to fetch tokens"


class HoldingsRequestError(WalletLensError):
    """The holdings endpoint answered with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _server_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return FETCH_FAILED
    if isinstance(body, dict) and isinstance(body.get("error"), str) and body["error"]:
        return body["error"]
    return FETCH_FAILED


class WalletViewer:
    """Form/table view state for one wallet lookup at a time."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        chain: Optional[str] = None,
        *,
        timeout_s: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.chain = normalize_chain(chain, settings.default_chain)
        self.timeout_s = timeout_s
        self._transport = transport

        self.address: str = ""
        self.entries: List[Holding] = []
        self.error: Optional[str] = None
        self.loading: bool = False

    async def submit(self, raw_address: str) -> None:
        """Validate ``raw_address`` and replace the view with its holdings or an error."""

        if self.loading:
            return

        address = (raw_address or "").strip()
        if not is_valid_address_for_chain(address, self.chain):
            self.error = INVALID_ADDRESS
            self.entries = []
            return

        self.address = address
        self.error = None
        self.entries = []
        self.loading = True

        try:
            self.entries = await self.fetch(address)
        except HoldingsRequestError as exc:
            self.error = exc.message
        except httpx.HTTPError as exc:
            self.error = str(exc) or FETCH_FAILED
        except ValueError:
            # Response body was not a holdings list
            self.error = FETCH_FAILED
        finally:
            self.loading = False

        if self.error:
            logger.warning("holdings lookup failed", extra={"address": address, "error": self.error})

    async def fetch(self, address: str) -> List[Holding]:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout_s,
            transport=self._transport,
        ) as client:
            response = await client.get(
                "/api/getTokens",
                params={"address": address, "chain": self.chain},
            )

        if response.is_error:
            raise HoldingsRequestError(_server_message(response), response.status_code)
        return HoldingList.validate_python(response.json())

    @property
    def address_url(self) -> Optional[str]:
        if not self.address:
            return None
        return explorer_url(self.chain, self.address)


def format_units(raw: str, decimals: int) -> str:
    """Render a raw integer amount with ``decimals`` places, e.g. ("1500", 3) -> "1.5"."""

    try:
        value = int(raw)
    except (TypeError, ValueError):
        return str(raw)

    sign = "-" if value < 0 else ""
    digits = str(abs(value))
    if decimals <= 0:
        return f"{sign}{digits}.0"

    decimals = min(decimals, MAX_DECIMALS)
    digits = digits.rjust(decimals + 1, "0")
    whole, fraction = digits[:-decimals], digits[-decimals:].rstrip("0")
    return f"{sign}{whole}.{fraction or '0'}"


@dataclass(frozen=True)
class HoldingRow:
    type: str
    image: Optional[str]
    name: str
    symbol: str
    amount: str
    contract: str
    contract_url: Optional[str]
    metadata: Optional[str]


def summarize_metadata(metadata: Optional[TokenMetadata]) -> Optional[str]:
    if metadata is None:
        return None
    lines = [metadata.name or "No name", metadata.description or "No description"]
    for attr in metadata.attributes:
        lines.append(f"{attr.trait_type or 'Trait'}: {attr.value}")
    return "\n".join(lines)


def to_rows(entries: List[Holding], chain: str) -> List[HoldingRow]:
    rows = []
    for entry in entries:
        if entry.type == "ERC-20":
            image = entry.logo
            amount = format_units(entry.balance, entry.decimals)
            metadata = None
        else:
            image = entry.metadata.image if entry.metadata else None
            amount = entry.token_id or "N/A"
            metadata = summarize_metadata(entry.metadata)
        rows.append(
            HoldingRow(
                type=entry.type,
                image=image,
                name=entry.name or "Unknown",
                symbol=entry.symbol or "N/A",
                amount=amount,
                contract=entry.token_address,
                contract_url=explorer_url(chain, entry.token_address, kind="token"),
                metadata=metadata,
            )
        )
    return rows
