"""Submission of externally signed transactions.

Signing happens outside the SDK. The submitter only forwards signed bytes
and retries while an owned object is locked by another in-flight
transaction.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from .ledger import Confirmation, SignedTransaction, SubmissionService
from .rpc import RpcError


logger = logging.getLogger(__name__)

LOCKED_OBJECT_MARKER = "reserved for another transaction"


class SubmissionError(RuntimeError):
    """Raised when a transaction is rejected or fails on execution."""


class ObjectLockedError(SubmissionError):
    """Raised when an input object stays locked after every retry."""


class TransactionSubmitter:
    """Submit signed transactions, retrying on object lock conflicts."""

    def __init__(
        self,
        service: SubmissionService,
        max_attempts: int = 5,
        retry_delay_s: float = 3.0,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        if max_attempts < 1:
            raise SubmissionError("max_attempts must be at least 1")
        if retry_delay_s < 0:
            raise SubmissionError("retry_delay_s must be non-negative")
        self.service = service
        self.max_attempts = max_attempts
        self.retry_delay_s = retry_delay_s
        self._sleep = sleep or asyncio.sleep

    async def submit(self, signed: SignedTransaction) -> Confirmation:
        """Execute ``signed`` and return its confirmation."""
        if not signed.tx_bytes or not signed.signatures:
            raise SubmissionError("signed transaction needs tx_bytes and at least one signature")

        for attempt in range(1, self.max_attempts + 1):
            try:
                confirmation = await self.service.execute(signed)
            except RpcError as exc:
                message = str(exc)
                if LOCKED_OBJECT_MARKER not in message:
                    raise SubmissionError(f"Failed to submit transaction: {message}") from exc
                if attempt == self.max_attempts:
                    raise ObjectLockedError(
                        f"Object still locked after {attempt} attempts: {message}"
                    ) from exc
                logger.warning(
                    "object locked (attempt %d/%d), retrying in %.1fs",
                    attempt,
                    self.max_attempts,
                    self.retry_delay_s,
                )
                await self._sleep(self.retry_delay_s)
                continue

            if confirmation.status != "success":
                raise SubmissionError(
                    f"Transaction {confirmation.digest} failed: {confirmation.error or confirmation.status}"
                )
            if not confirmation.digest:
                raise SubmissionError("Transaction submitted but no digest returned")
            logger.debug("transaction %s confirmed", confirmation.digest)
            return confirmation
