"""Sui full-node JSON-RPC client.

Implements the ledger query, simulation and submission interfaces over
HTTP with httpx. No retries happen here; failures surface as ``RpcError``.
"""

from __future__ import annotations

import base64
import itertools
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from .ledger import (
    OWNER_ADDRESS,
    OWNER_IMMUTABLE,
    OWNER_OBJECT,
    OWNER_SHARED,
    CoinHandle,
    Confirmation,
    DevInspectResponse,
    ObjectMetadata,
    SignedTransaction,
    SimulatedResult,
)
from .validation import ValidationError, normalize_sui_address, validate_url


logger = logging.getLogger(__name__)

COINS_PAGE_LIMIT = 50


class RpcError(RuntimeError):
    """Raised when a JSON-RPC call fails."""


class RpcTransportError(RpcError):
    """Raised when the node cannot be reached or answers with an HTTP error."""


class RpcResponseError(RpcError):
    """Raised when the node answers with a JSON-RPC error object."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


@dataclass(frozen=True)
class SuiRpcConfig:
    url: str
    timeout_s: float = 30.0
    max_attempts: int = 5
    retry_delay_s: float = 3.0


def _parse_owner(owner: Any) -> Dict[str, Any]:
    if owner == "Immutable":
        return {"owner_kind": OWNER_IMMUTABLE}
    if isinstance(owner, dict):
        if "Shared" in owner:
            return {
                "owner_kind": OWNER_SHARED,
                "initial_shared_version": int(owner["Shared"]["initial_shared_version"]),
            }
        if "AddressOwner" in owner:
            return {"owner_kind": OWNER_ADDRESS}
        if "ObjectOwner" in owner:
            return {"owner_kind": OWNER_OBJECT}
    return {}


def _parse_return_values(entry: Dict[str, Any]) -> SimulatedResult:
    values = []
    types = []
    for raw, type_name in entry.get("returnValues") or []:
        values.append(bytes(raw))
        types.append(type_name)
    return SimulatedResult(tuple(values), tuple(types))


class SuiRpcClient:
    """Async Sui JSON-RPC client."""

    def __init__(
        self,
        config: SuiRpcConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        try:
            validate_url(config.url)
        except ValidationError as exc:
            raise RpcError(str(exc)) from exc
        if config.timeout_s <= 0:
            raise RpcError("timeout_s must be positive")
        self.config = config
        self._ids = itertools.count(1)
        self._http = httpx.AsyncClient(timeout=httpx.Timeout(config.timeout_s), transport=transport)

    async def close(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "SuiRpcClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def call(self, method: str, params: List[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        logger.debug("rpc %s -> %s", method, self.config.url)
        try:
            response = await self._http.post(self.config.url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as exc:
            raise RpcTransportError(f"{method} failed: {exc}") from exc
        except ValueError as exc:
            raise RpcTransportError(f"{method} returned invalid JSON: {exc}") from exc
        if not isinstance(body, dict):
            raise RpcTransportError(f"{method} returned a non-object response")

        error = body.get("error")
        if error:
            raise RpcResponseError(f"{method} error: {error.get('message', error)}", error.get("code"))
        return body.get("result")

    async def call_for_object(self, method: str, params: List[Any]) -> Dict[str, Any]:
        """Like ``call``, for methods whose result must be a JSON object."""
        result = await self.call(method, params)
        if not isinstance(result, dict):
            raise RpcResponseError(f"{method} returned no result object: {result!r}")
        return result

    async def get_object(self, object_id: str) -> Optional[ObjectMetadata]:
        result = await self.call_for_object("sui_getObject", [object_id, {"showOwner": True}])
        data = result.get("data")
        if not data:
            return None
        return ObjectMetadata(
            object_id=normalize_sui_address(data["objectId"]),
            version=int(data["version"]),
            digest=data["digest"],
            **_parse_owner(data.get("owner")),
        )

    async def get_coins(self, owner: str, coin_type: str) -> List[CoinHandle]:
        """All coins of ``coin_type`` owned by ``owner``, across pages, in node order."""
        coins: List[CoinHandle] = []
        cursor = None
        while True:
            page = await self.call_for_object(
                "suix_getCoins", [owner, coin_type, cursor, COINS_PAGE_LIMIT]
            )
            for item in page.get("data", []):
                coins.append(
                    CoinHandle(
                        object_id=normalize_sui_address(item["coinObjectId"]),
                        version=int(item["version"]),
                        digest=item["digest"],
                        balance=int(item["balance"]),
                    )
                )
            if not page.get("hasNextPage"):
                return coins
            cursor = page.get("nextCursor")

    async def dev_inspect(self, tx_kind: bytes, sender: str) -> DevInspectResponse:
        encoded = base64.b64encode(tx_kind).decode("ascii")
        result = await self.call_for_object(
            "sui_devInspectTransactionBlock", [sender, encoded, None, None]
        )
        status = result.get("effects", {}).get("status", {})
        return DevInspectResponse(
            status=status.get("status", "failure"),
            error=result.get("error") or status.get("error"),
            results=tuple(_parse_return_values(entry) for entry in result.get("results") or []),
            raw=result,
        )

    async def execute(self, signed: SignedTransaction) -> Confirmation:
        result = await self.call_for_object(
            "sui_executeTransactionBlock",
            [
                signed.tx_bytes,
                list(signed.signatures),
                {"showEffects": True},
                "WaitForLocalExecution",
            ],
        )
        status = result.get("effects", {}).get("status", {})
        return Confirmation(
            digest=result.get("digest", ""),
            status=status.get("status", "unknown"),
            error=status.get("error"),
            raw=result,
        )

    async def get_reference_gas_price(self) -> int:
        result = await self.call("suix_getReferenceGasPrice", [])
        try:
            return int(result)
        except (TypeError, ValueError) as exc:
            raise RpcResponseError(f"suix_getReferenceGasPrice returned {result!r}") from exc
