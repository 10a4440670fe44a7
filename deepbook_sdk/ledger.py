"""Interfaces of the remote ledger collaborators and the records they return."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple


OWNER_SHARED = "shared"
OWNER_ADDRESS = "address"
OWNER_OBJECT = "object"
OWNER_IMMUTABLE = "immutable"


@dataclass(frozen=True)
class ObjectMetadata:
    object_id: str
    version: int
    digest: str
    owner_kind: Optional[str] = None
    initial_shared_version: Optional[int] = None

    @property
    def is_shared(self) -> bool:
        return self.owner_kind == OWNER_SHARED


@dataclass(frozen=True)
class CoinHandle:
    object_id: str
    version: int
    digest: str
    balance: int


@dataclass(frozen=True)
class SimulatedResult:
    """Return values of one simulated command, one BCS buffer per value."""

    values: Tuple[bytes, ...]
    types: Tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class DevInspectResponse:
    status: str
    error: Optional[str]
    results: Tuple[SimulatedResult, ...]
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def succeeded(self) -> bool:
        return self.status == "success"


@dataclass(frozen=True)
class SignedTransaction:
    tx_bytes: str
    signatures: Tuple[str, ...]


@dataclass(frozen=True)
class Confirmation:
    digest: str
    status: str
    error: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


class LedgerQuery(Protocol):
    async def get_object(self, object_id: str) -> Optional[ObjectMetadata]:
        ...

    async def get_coins(self, owner: str, coin_type: str) -> List[CoinHandle]:
        ...


class SimulationService(Protocol):
    async def dev_inspect(self, tx_kind: bytes, sender: str) -> DevInspectResponse:
        ...


class SubmissionService(Protocol):
    async def execute(self, signed: SignedTransaction) -> Confirmation:
        ...


class GasPriceSource(Protocol):
    async def get_reference_gas_price(self) -> int:
        ...

