import asyncio
import base64
import json

import httpx
import pytest

from deepbook_sdk.ledger import OWNER_ADDRESS, OWNER_SHARED, SignedTransaction
from deepbook_sdk.rpc import (
    RpcError,
    RpcResponseError,
    RpcTransportError,
    SuiRpcClient,
    SuiRpcConfig,
)

from deepbook_sdk.tests.fakes import POOL_ID, SENDER, digest

URL = "https://fullnode.testnet.sui.io:443"


def _run(handler, fn):
    """Run ``fn(client)`` against a client served by ``handler``."""

    async def go():
        async with SuiRpcClient(SuiRpcConfig(URL), transport=httpx.MockTransport(handler)) as client:
            return await fn(client)

    return asyncio.run(go())


def _reply(result):
    def handler(request):
        body = json.loads(request.content)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})

    return handler


def test_get_shared_object():
    result = {
        "data": {
            "objectId": POOL_ID,
            "version": "45",
            "digest": digest(1),
            "owner": {"Shared": {"initial_shared_version": 11}},
        }
    }
    metadata = _run(_reply(result), lambda client: client.get_object(POOL_ID))
    assert metadata.owner_kind == OWNER_SHARED
    assert metadata.initial_shared_version == 11
    assert metadata.version == 45


def test_get_owned_object():
    result = {
        "data": {
            "objectId": "0xc1",
            "version": "4",
            "digest": digest(2),
            "owner": {"AddressOwner": SENDER},
        }
    }
    metadata = _run(_reply(result), lambda client: client.get_object("0xc1"))
    assert metadata.owner_kind == OWNER_ADDRESS
    assert metadata.object_id == "0x" + "0" * 62 + "c1"


def test_missing_object_returns_none():
    result = {"error": {"code": "notExists", "object_id": POOL_ID}}
    assert _run(_reply(result), lambda client: client.get_object(POOL_ID)) is None


def test_get_coins_follows_cursor():
    seen = []

    def handler(request):
        body = json.loads(request.content)
        seen.append(body["params"])
        cursor = body["params"][2]
        if cursor is None:
            page = {
                "data": [{"coinObjectId": "0x1", "version": "1", "digest": digest(1), "balance": "10"}],
                "hasNextPage": True,
                "nextCursor": "page-2",
            }
        else:
            page = {
                "data": [{"coinObjectId": "0x2", "version": "2", "digest": digest(2), "balance": "20"}],
                "hasNextPage": False,
                "nextCursor": None,
            }
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": page})

    coins = _run(handler, lambda client: client.get_coins(SENDER, "0x2::sui::SUI"))
    assert [c.balance for c in coins] == [10, 20]
    assert [params[2] for params in seen] == [None, "page-2"]


def test_json_rpc_error_is_raised():
    def handler(request):
        return httpx.Response(
            200, json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32602, "message": "bad params"}}
        )

    with pytest.raises(RpcResponseError, match="bad params") as excinfo:
        _run(handler, lambda client: client.get_reference_gas_price())
    assert excinfo.value.code == -32602


def test_http_error_is_transport_error():
    def handler(request):
        return httpx.Response(503, text="unavailable")

    with pytest.raises(RpcTransportError):
        _run(handler, lambda client: client.get_reference_gas_price())


def test_connection_error_is_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RpcTransportError, match="connection refused"):
        _run(handler, lambda client: client.get_reference_gas_price())


def test_dev_inspect_parses_return_values():
    seen = {}

    def handler(request):
        body = json.loads(request.content)
        seen.update(body)
        result = {
            "effects": {"status": {"status": "success"}},
            "results": [
                {"returnValues": [[[1, 0, 0, 0, 0, 0, 0, 0], "u64"]]},
                {"returnValues": [[[1], "bool"], [[7, 0, 0, 0, 0, 0, 0, 0], "u64"]]},
            ],
        }
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})

    response = _run(handler, lambda client: client.dev_inspect(b"\x00\x01", SENDER))
    assert response.succeeded
    assert response.results[-1].values == (b"\x01", b"\x07" + b"\x00" * 7)
    assert response.results[-1].types == ("bool", "u64")
    assert seen["method"] == "sui_devInspectTransactionBlock"
    assert seen["params"][1] == base64.b64encode(b"\x00\x01").decode("ascii")


def test_dev_inspect_failure_keeps_error():
    result = {"effects": {"status": {"status": "failure", "error": "MoveAbort(7)"}}}
    response = _run(_reply(result), lambda client: client.dev_inspect(b"\x00", SENDER))
    assert not response.succeeded
    assert response.error == "MoveAbort(7)"
    assert response.results == ()


def test_execute_returns_confirmation():
    result = {"digest": "Dg1", "effects": {"status": {"status": "success"}}}
    signed = SignedTransaction("AAAA", ("sig",))
    confirmation = _run(_reply(result), lambda client: client.execute(signed))
    assert confirmation.digest == "Dg1"
    assert confirmation.status == "success"


def test_reference_gas_price():
    assert _run(_reply("1000"), lambda client: client.get_reference_gas_price()) == 1000


@pytest.mark.parametrize(
    "config",
    [SuiRpcConfig("ftp://node"), SuiRpcConfig(""), SuiRpcConfig(URL, timeout_s=0)],
)
def test_invalid_config(config):
    with pytest.raises(RpcError):
        SuiRpcClient(config)


@pytest.mark.parametrize(
    "fn",
    [
        lambda client: client.get_object(POOL_ID),
        lambda client: client.get_coins(SENDER, "0x2::sui::SUI"),
        lambda client: client.dev_inspect(b"\x00", SENDER),
        lambda client: client.execute(SignedTransaction("AAAA", ("sig",))),
        lambda client: client.get_reference_gas_price(),
    ],
)
def test_null_result_is_response_error(fn):
    with pytest.raises(RpcResponseError, match="returned"):
        _run(_reply(None), fn)
