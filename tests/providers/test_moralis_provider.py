import httpx
import pytest

from walletlens.errors import UpstreamError
from walletlens.providers.moralis import MoralisProvider


BASE_URL = "https://deep-index.moralis.io/api/v2"


@pytest.mark.asyncio
async def test_token_balances_request_shape(moralis_transport, wallet, erc20_foo):
    requests = []
    provider = MoralisProvider(
        api_key="test-key",
        base_url=BASE_URL,
        transport=moralis_transport(tokens=[erc20_foo], requests=requests),
    )

    items = await provider.get_token_balances(wallet, "ethereum")

    assert items == [erc20_foo]
    [request] = requests
    assert request.url.path == f"/api/v2/{wallet}/erc20"
    assert request.url.params["chain"] == "eth"
    assert request.headers["X-API-Key"] == "test-key"
    assert request.headers["Accept"] == "application/json"


@pytest.mark.asyncio
async def test_nft_holdings_request_shape(moralis_transport, wallet):
    requests = []
    nft = {"token_address": "0xc0", "token_id": "1", "name": "C", "symbol": "C"}
    provider = MoralisProvider(
        api_key="test-key",
        base_url=BASE_URL,
        transport=moralis_transport(nfts=[nft], requests=requests),
    )

    items = await provider.get_nft_holdings(wallet, "base")

    assert items == [nft]
    params = requests[0].url.params
    assert params["chain"] == "base"
    assert params["format"] == "decimal"
    assert params["normalizeMetadata"] == "true"


@pytest.mark.asyncio
async def test_result_envelope_and_bare_list_both_accepted(wallet):
    def handler(request):
        if request.url.path.endswith("/erc20"):
            return httpx.Response(200, json={"result": [{"token_address": "0x1"}, "junk"]})
        return httpx.Response(200, json=[{"token_address": "0x2"}])

    provider = MoralisProvider(api_key="k", base_url=BASE_URL, transport=httpx.MockTransport(handler))

    assert await provider.get_token_balances(wallet, "base") == [{"token_address": "0x1"}]
    assert await provider.get_nft_holdings(wallet, "base") == [{"token_address": "0x2"}]


@pytest.mark.asyncio
async def test_rate_limit_surfaces_status_and_message(moralis_transport, wallet):
    provider = MoralisProvider(
        api_key="test-key",
        base_url=BASE_URL,
        transport=moralis_transport(status_code=429, error_body={"message": "Rate limit exceeded"}),
    )

    with pytest.raises(UpstreamError) as exc_info:
        await provider.get_token_balances(wallet, "base")

    assert exc_info.value.status_code == 429
    assert exc_info.value.message == "Rate limit exceeded"


@pytest.mark.asyncio
async def test_error_without_json_body_gets_generic_message(moralis_transport, wallet):
    provider = MoralisProvider(
        api_key="test-key",
        base_url=BASE_URL,
        transport=moralis_transport(status_code=502),
    )

    with pytest.raises(UpstreamError) as exc_info:
        await provider.get_nft_holdings(wallet, "base")

    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "Request failed with status code 502"


@pytest.mark.asyncio
async def test_unreachable_indexer_has_no_status(wallet):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    provider = MoralisProvider(api_key="k", base_url=BASE_URL, transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamError) as exc_info:
        await provider.get_token_balances(wallet, "base")

    assert exc_info.value.status_code is None
    assert "connection refused" in exc_info.value.message


@pytest.mark.asyncio
async def test_not_ready_without_key():
    provider = MoralisProvider(api_key="", base_url=BASE_URL)

    assert await provider.ready() is False
    health = await provider.health_check()
    assert health["status"] == "unavailable"


@pytest.mark.asyncio
async def test_health_check_healthy():
    def handler(request):
        assert request.url.path == "/api/v2/web3/version"
        return httpx.Response(200, json={"version": "2"})

    provider = MoralisProvider(api_key="k", base_url=BASE_URL, transport=httpx.MockTransport(handler))

    health = await provider.health_check()

    assert health["status"] == "healthy"
