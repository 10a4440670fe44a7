"""Resolve object ids into transaction-ready references.

References are never cached: object versions are monotonic and a stale
version makes the transaction fail on the node.
"""

from __future__ import annotations

import logging

from .ledger import LedgerQuery
from .rpc import RpcError
from .transaction import ObjectRef, OwnedObjectArg, ResolvedReference, SharedObjectArg
from .validation import ValidationError, normalize_sui_address


logger = logging.getLogger(__name__)


class ResolutionError(RuntimeError):
    """Raised when an object cannot be resolved."""


class ObjectNotFoundError(ResolutionError):
    """Raised when the ledger returns no data for an object id."""


class ResolutionTransportError(ResolutionError):
    """Raised when the ledger query itself fails."""


class ObjectResolver:
    def __init__(self, ledger: LedgerQuery):
        self.ledger = ledger

    async def resolve(self, object_id: str, mutable: bool = True) -> ResolvedReference:
        """Fetch the current ownership metadata of ``object_id``.

        Shared objects become ``SharedObjectArg`` with the requested
        mutability; anything else is pinned to its exact (id, version, digest).
        """
        try:
            object_id = normalize_sui_address(object_id)
        except ValidationError as exc:
            raise ResolutionError(str(exc)) from exc

        try:
            metadata = await self.ledger.get_object(object_id)
        except RpcError as exc:
            raise ResolutionTransportError(f"Failed to query object {object_id}: {exc}") from exc
        if metadata is None:
            raise ObjectNotFoundError(f"Missing data in object response for '{object_id}'")

        if metadata.is_shared:
            if metadata.initial_shared_version is None:
                raise ResolutionError(f"shared object {object_id} has no initial shared version")
            logger.debug("resolved %s as shared@%d", object_id, metadata.initial_shared_version)
            return SharedObjectArg(object_id, metadata.initial_shared_version, mutable)

        logger.debug("resolved %s as owned@%d", object_id, metadata.version)
        return OwnedObjectArg(ObjectRef(metadata.object_id, metadata.version, metadata.digest))
