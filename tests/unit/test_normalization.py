import json

import pytest

from walletlens.errors import MetadataFetchError
from walletlens.services.holdings import (
    DEFAULT_DECIMALS,
    MAX_DECIMALS,
    metadata_from_payload,
    normalize_token,
    parse_decimals,
    parse_embedded_metadata,
)
from walletlens.types import FungibleTokenEntry, HoldingList, NonFungibleTokenEntry


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("18", 18),
        ("6", 6),
        (8, 8),
        ("6.0", 6),
        (" 9", 9),
        ("abc", DEFAULT_DECIMALS),
        ("", DEFAULT_DECIMALS),
        (None, DEFAULT_DECIMALS),
        (-1, DEFAULT_DECIMALS),
        (True, DEFAULT_DECIMALS),
        ({"x": 1}, DEFAULT_DECIMALS),
        ("255", 255),
        ("256", MAX_DECIMALS),
        ("4294967296", MAX_DECIMALS),
        ("0007", 7),
        ("9" * 5000, MAX_DECIMALS),
        (10**30, MAX_DECIMALS),
    ],
)
def test_parse_decimals_never_raises(raw, expected):
    assert parse_decimals(raw) == expected


def test_normalize_token_maps_moralis_fields(erc20_foo):
    entry = normalize_token(erc20_foo)

    assert entry == FungibleTokenEntry(
        token_address="0x1",
        name="Foo",
        symbol="FOO",
        logo=None,
        decimals=18,
        balance="1000000000000000000",
    )
    dumped = entry.model_dump()
    assert dumped["type"] == "ERC-20"
    # logo is present and null, not omitted
    assert "logo" in dumped and dumped["logo"] is None


def test_normalize_token_keeps_logo_and_balance_text():
    entry = normalize_token({
        "token_address": "0xabc",
        "name": "USD Coin",
        "symbol": "USDC",
        "logo": "https://logo.example/usdc.png",
        "decimals": "6",
        "balance": "123456789012345678901234567890",
    })

    assert entry.logo == "https://logo.example/usdc.png"
    assert entry.balance == "123456789012345678901234567890"
    assert entry.decimals == 6


def test_normalize_token_empty_logo_becomes_null():
    entry = normalize_token({"token_address": "0xabc", "name": "X", "symbol": "X", "logo": "", "decimals": "0", "balance": "1"})
    assert entry.logo is None


def test_entries_are_immutable(erc20_foo):
    entry = normalize_token(erc20_foo)
    with pytest.raises(Exception):
        entry.name = "Bar"


def test_entries_do_not_mix_kinds():
    with pytest.raises(Exception):
        FungibleTokenEntry(
            token_address="0x1", name="Foo", symbol="FOO", decimals=18, balance="1", token_id="7",
        )


def test_parse_embedded_metadata_string():
    raw = json.dumps({
        "name": "Punk #1",
        "description": "A punk",
        "image": "https://img.example/1.png",
        "external_url": "https://ignored.example",
        "attributes": [
            {"trait_type": "Hat", "value": "Cap"},
            {"value": 7},
            {"trait_type": "Rare", "value": True},
            "junk",
        ],
    })

    metadata = parse_embedded_metadata(raw, "1")

    assert metadata is not None
    assert metadata.name == "Punk #1"
    assert metadata.image == "https://img.example/1.png"
    assert [(a.trait_type, a.value) for a in metadata.attributes] == [
        ("Hat", "Cap"),
        (None, 7),
        ("Rare", "true"),
    ]


def test_parse_embedded_metadata_absent_or_malformed():
    assert parse_embedded_metadata(None) is None
    assert parse_embedded_metadata("") is None
    assert parse_embedded_metadata("{not json") is None
    assert parse_embedded_metadata("null") is None
    assert parse_embedded_metadata("[1, 2]") is None
    assert parse_embedded_metadata("[" * 100000 + "]" * 100000) is None


def test_metadata_attributes_default_to_empty_list():
    metadata = metadata_from_payload({"name": "Lonely", "attributes": {"oops": "dict"}})
    assert metadata.attributes == []
    assert metadata.description is None


def test_metadata_from_payload_rejects_non_objects():
    with pytest.raises(MetadataFetchError) as exc_info:
        metadata_from_payload(["not", "an", "object"], token_id="42")
    assert exc_info.value.token_id == "42"


def test_holding_list_uses_type_discriminator():
    entries = HoldingList.validate_python([
        {"token_address": "0x1", "name": "Foo", "symbol": "FOO", "logo": None,
         "decimals": 18, "balance": "1", "type": "ERC-20"},
        {"token_address": "0x2", "name": "Punks", "symbol": "PNK", "token_id": "7",
         "metadata": None, "type": "NFT"},
    ])

    assert isinstance(entries[0], FungibleTokenEntry)
    assert isinstance(entries[1], NonFungibleTokenEntry)
