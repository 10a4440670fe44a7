"""Flash loan borrow and return calls.

A borrow yields two outputs: the borrowed coin and a flash loan receipt
that must be returned to the same pool before the transaction ends. The
builder does not enforce the return; the chain rejects a transaction that
drops the receipt.
"""

from __future__ import annotations

from typing import Tuple

from .config import DeepBookConfig
from .models import Coin
from .resolver import ObjectResolver
from .scaling import to_base_units
from .transaction import Argument, NestedResult, PendingTransaction


BORROW_OUTPUTS = 2


class FlashLoanContract:
    def __init__(self, config: DeepBookConfig, resolver: ObjectResolver):
        self.config = config
        self.resolver = resolver

    async def _borrow(
        self, tx: PendingTransaction, pool_key: str, amount: float, borrow_base: bool
    ) -> Tuple[NestedResult, NestedResult]:
        pool, base, quote = self.config.pool_coins(pool_key)
        asset: Coin = base if borrow_base else quote
        function = "borrow_flashloan_base" if borrow_base else "borrow_flashloan_quote"

        pool_arg = tx.object(await self.resolver.resolve(pool.address))
        loan = tx.move_call_multi(
            self.config.target("pool", function),
            BORROW_OUTPUTS,
            [pool_arg, tx.pure_u64(to_base_units(amount, asset.scalar))],
            [base.coin_type, quote.coin_type],
        )
        return loan[0], loan[1]

    async def _return(
        self,
        tx: PendingTransaction,
        pool_key: str,
        borrow_amount: float,
        coin: Argument,
        flash_loan: Argument,
        borrow_base: bool,
    ) -> Argument:
        pool, base, quote = self.config.pool_coins(pool_key)
        asset: Coin = base if borrow_base else quote
        function = "return_flashloan_base" if borrow_base else "return_flashloan_quote"

        pool_arg = tx.object(await self.resolver.resolve(pool.address))
        repayment = tx.split_coin(coin, tx.pure_u64(to_base_units(borrow_amount, asset.scalar)))
        tx.move_call(
            self.config.target("pool", function),
            [pool_arg, repayment, flash_loan],
            [base.coin_type, quote.coin_type],
        )
        return coin

    async def borrow_base_asset(
        self, tx: PendingTransaction, pool_key: str, amount: float
    ) -> Tuple[NestedResult, NestedResult]:
        """Borrow base asset; returns ``(coin, flash_loan)``."""
        return await self._borrow(tx, pool_key, amount, borrow_base=True)

    async def borrow_quote_asset(
        self, tx: PendingTransaction, pool_key: str, amount: float
    ) -> Tuple[NestedResult, NestedResult]:
        """Borrow quote asset; returns ``(coin, flash_loan)``."""
        return await self._borrow(tx, pool_key, amount, borrow_base=False)

    async def return_base_asset(
        self,
        tx: PendingTransaction,
        pool_key: str,
        borrow_amount: float,
        coin: Argument,
        flash_loan: Argument,
    ) -> Argument:
        """Repay ``borrow_amount`` out of ``coin``; returns ``coin`` holding the remainder."""
        return await self._return(tx, pool_key, borrow_amount, coin, flash_loan, borrow_base=True)

    async def return_quote_asset(
        self,
        tx: PendingTransaction,
        pool_key: str,
        borrow_amount: float,
        coin: Argument,
        flash_loan: Argument,
    ) -> Argument:
        return await self._return(tx, pool_key, borrow_amount, coin, flash_loan, borrow_base=False)
