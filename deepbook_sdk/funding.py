"""Coin selection: produce a transaction argument holding an exact amount."""

from __future__ import annotations

import logging
from typing import List

from .constants import SUI_COIN_TYPE
from .ledger import CoinHandle, LedgerQuery
from .rpc import RpcError
from .transaction import Argument, ObjectRef, OwnedObjectArg, PendingTransaction
from .type_tags import TypeTagError, parse_type_tag
from .validation import MAX_U64, ValidationError, validate_uint


logger = logging.getLogger(__name__)


class FundingError(RuntimeError):
    """Raised when a coin input cannot be produced."""


class NoCoinsFoundError(FundingError):
    """Raised when the owner holds no coins of the requested type."""


class InsufficientBalanceError(FundingError):
    """Raised when the owner's coins cannot cover the requested amount."""


def is_gas_coin_type(coin_type: str) -> bool:
    try:
        return parse_type_tag(coin_type) == parse_type_tag(SUI_COIN_TYPE)
    except TypeTagError as exc:
        raise FundingError(f"invalid coin type {coin_type!r}: {exc}") from exc


def _coin_input(tx: PendingTransaction, coin: CoinHandle) -> Argument:
    return tx.object(OwnedObjectArg(ObjectRef(coin.object_id, coin.version, coin.digest)))


class CoinFunder:
    """Locates, merges and splits coins for a transaction.

    SUI requests are served from the gas coin, which is always available to
    the transaction and needs no query.
    """

    def __init__(self, ledger: LedgerQuery):
        self.ledger = ledger

    async def _list_coins(self, owner: str, coin_type: str) -> List[CoinHandle]:
        try:
            coins = await self.ledger.get_coins(owner, coin_type)
        except RpcError as exc:
            raise FundingError(f"Failed to fetch coins for type {coin_type}: {exc}") from exc
        if not coins:
            raise NoCoinsFoundError(f"No coins of type {coin_type} owned by {owner}")
        return coins

    @staticmethod
    def _validate_amount(amount: int) -> None:
        try:
            validate_uint(amount, "amount", MAX_U64)
        except ValidationError as exc:
            raise FundingError(str(exc)) from exc

    async def fund(
        self,
        tx: PendingTransaction,
        owner: str,
        coin_type: str,
        amount: int,
        use_gas_coin: bool = True,
        check_balance: bool = False,
    ) -> Argument:
        """Merge every owned coin into the first one and split off ``amount``.

        Solvency is validated by the node at execution time unless
        ``check_balance`` is set, in which case the listed balances are summed
        first and ``InsufficientBalanceError`` is raised locally.
        """
        self._validate_amount(amount)
        if use_gas_coin and is_gas_coin_type(coin_type):
            logger.debug("funding %d of %s from gas coin", amount, coin_type)
            return tx.split_coin(tx.gas, tx.pure_u64(amount))

        coins = await self._list_coins(owner, coin_type)
        if check_balance:
            total = sum(coin.balance for coin in coins)
            if total < amount:
                raise InsufficientBalanceError(
                    f"{owner} holds {total} of {coin_type}, {amount} required"
                )

        inputs = [_coin_input(tx, coin) for coin in coins]
        primary = inputs[0]
        if len(inputs) > 1:
            tx.merge_coins(primary, inputs[1:])
        logger.debug("funding %d of %s from %d coin(s)", amount, coin_type, len(inputs))
        return tx.split_coin(primary, tx.pure_u64(amount))

    async def fund_exact(
        self,
        tx: PendingTransaction,
        owner: str,
        coin_type: str,
        amount: int,
        use_gas_coin: bool = True,
    ) -> Argument:
        """Use the first single coin whose balance covers ``amount``.

        The coin is used as is when its balance is exactly ``amount``;
        otherwise ``amount`` is split off and the remainder stays with the
        owner in the original coin.
        """
        self._validate_amount(amount)
        if use_gas_coin and is_gas_coin_type(coin_type):
            logger.debug("funding exactly %d of %s from gas coin", amount, coin_type)
            return tx.split_coin(tx.gas, tx.pure_u64(amount))

        coins = await self._list_coins(owner, coin_type)
        coin = next((c for c in coins if c.balance >= amount), None)
        if coin is None:
            raise InsufficientBalanceError(
                f"No suitable coin found with required amount: {amount}"
            )

        coin_arg = _coin_input(tx, coin)
        if coin.balance == amount:
            return coin_arg
        return tx.split_coin(coin_arg, tx.pure_u64(amount))
