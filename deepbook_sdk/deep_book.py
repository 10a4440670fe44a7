"""Pool calls: order placement, cancellation, swaps and read-only queries.

Every method appends to a caller-owned ``PendingTransaction``. Read
builders reference the pool and manager immutably and are meant to be
simulated, not submitted.
"""

from __future__ import annotations

from typing import Sequence

from .config import DeepBookConfig
from .constants import MAX_TIMESTAMP, SUI_FRAMEWORK_ADDRESS
from .funding import CoinFunder
from .models import Coin, PlaceLimitOrderParams, PlaceMarketOrderParams, SwapParams
from .proof import ProofSelector
from .resolver import ObjectResolver
from .scaling import encode_price, to_base_units
from .transaction import (
    Argument,
    Input,
    MultiResult,
    PendingTransaction,
    Result,
    clock_arg,
)


DEEP_COIN_KEY = "DEEP"
SWAP_OUTPUTS = 3


def _type_arguments(base: Coin, quote: Coin) -> Sequence[str]:
    return (base.coin_type, quote.coin_type)


class DeepBookContract:
    def __init__(
        self,
        config: DeepBookConfig,
        resolver: ObjectResolver,
        funder: CoinFunder,
        proofs: ProofSelector,
    ):
        self.config = config
        self.resolver = resolver
        self.funder = funder
        self.proofs = proofs

    async def _object(self, tx: PendingTransaction, object_id: str, mutable: bool = True) -> Input:
        return tx.object(await self.resolver.resolve(object_id, mutable=mutable))

    async def _manager_and_proof(self, tx: PendingTransaction, manager_key: str):
        manager = self.config.get_balance_manager(manager_key)
        manager_arg = await self._object(tx, manager.address)
        proof = await self.proofs.generate_proof(tx, manager_key, manager_arg)
        return manager_arg, proof

    # Trading

    async def place_limit_order(
        self, tx: PendingTransaction, params: PlaceLimitOrderParams
    ) -> Result:
        pool, base, quote = self.config.pool_coins(params.pool_key)
        manager_arg, proof = await self._manager_and_proof(tx, params.balance_manager_key)
        pool_arg = await self._object(tx, pool.address)

        expiration = MAX_TIMESTAMP if params.expiration is None else params.expiration
        return tx.move_call(
            self.config.target("pool", "place_limit_order"),
            [
                pool_arg,
                manager_arg,
                proof,
                tx.pure_u64(params.client_order_id),
                tx.pure_u8(int(params.order_type)),
                tx.pure_u8(int(params.self_matching_option)),
                tx.pure_u64(encode_price(params.price, base.scalar, quote.scalar)),
                tx.pure_u64(to_base_units(params.quantity, base.scalar)),
                tx.pure_bool(params.is_bid),
                tx.pure_bool(params.pay_with_deep),
                tx.pure_u64(expiration),
                tx.object(clock_arg()),
            ],
            _type_arguments(base, quote),
        )

    async def place_market_order(
        self, tx: PendingTransaction, params: PlaceMarketOrderParams
    ) -> Result:
        pool, base, quote = self.config.pool_coins(params.pool_key)
        manager_arg, proof = await self._manager_and_proof(tx, params.balance_manager_key)
        pool_arg = await self._object(tx, pool.address)

        return tx.move_call(
            self.config.target("pool", "place_market_order"),
            [
                pool_arg,
                manager_arg,
                proof,
                tx.pure_u64(params.client_order_id),
                tx.pure_u8(int(params.self_matching_option)),
                tx.pure_u64(to_base_units(params.quantity, base.scalar)),
                tx.pure_bool(params.is_bid),
                tx.pure_bool(params.pay_with_deep),
                tx.object(clock_arg()),
            ],
            _type_arguments(base, quote),
        )

    async def cancel_order(
        self, tx: PendingTransaction, pool_key: str, manager_key: str, order_id: int
    ) -> Result:
        pool, base, quote = self.config.pool_coins(pool_key)
        manager_arg, proof = await self._manager_and_proof(tx, manager_key)
        pool_arg = await self._object(tx, pool.address)

        return tx.move_call(
            self.config.target("pool", "cancel_order"),
            [pool_arg, manager_arg, proof, tx.pure_u128(order_id), tx.object(clock_arg())],
            _type_arguments(base, quote),
        )

    async def cancel_all_orders(
        self, tx: PendingTransaction, pool_key: str, manager_key: str
    ) -> Result:
        pool, base, quote = self.config.pool_coins(pool_key)
        manager_arg, proof = await self._manager_and_proof(tx, manager_key)
        pool_arg = await self._object(tx, pool.address)

        return tx.move_call(
            self.config.target("pool", "cancel_all_orders"),
            [pool_arg, manager_arg, proof, tx.object(clock_arg())],
            _type_arguments(base, quote),
        )

    async def _deep_payment(self, tx: PendingTransaction, deep_amount: float) -> Argument:
        deep = self.config.get_coin(DEEP_COIN_KEY)
        if deep_amount == 0:
            return tx.move_call(
                f"{SUI_FRAMEWORK_ADDRESS}::coin::zero", type_arguments=[deep.coin_type]
            )
        return await self.funder.fund(
            tx,
            self.config.sender_address,
            deep.coin_type,
            to_base_units(deep_amount, deep.scalar),
        )

    async def _swap(
        self, tx: PendingTransaction, params: SwapParams, base_to_quote: bool
    ) -> MultiResult:
        pool, base, quote = self.config.pool_coins(params.pool_key)
        input_coin, output_coin = (base, quote) if base_to_quote else (quote, base)
        function = "swap_exact_base_for_quote" if base_to_quote else "swap_exact_quote_for_base"

        pool_arg = await self._object(tx, pool.address)
        amount_in = to_base_units(params.amount, input_coin.scalar)
        deep = self.config.get_coin(DEEP_COIN_KEY)
        if input_coin.coin_type == deep.coin_type and params.deep_amount > 0:
            # One funding pass; the owner's DEEP coins may only be inputs once.
            deep_units = to_base_units(params.deep_amount, deep.scalar)
            coin_in = await self.funder.fund(
                tx, self.config.sender_address, deep.coin_type, amount_in + deep_units
            )
            deep_in = tx.split_coin(coin_in, tx.pure_u64(deep_units))
        else:
            coin_in = await self.funder.fund(
                tx, self.config.sender_address, input_coin.coin_type, amount_in
            )
            deep_in = await self._deep_payment(tx, params.deep_amount)
        return tx.move_call_multi(
            self.config.target("pool", function),
            SWAP_OUTPUTS,
            [
                pool_arg,
                coin_in,
                deep_in,
                tx.pure_u64(to_base_units(params.min_out, output_coin.scalar)),
                tx.object(clock_arg()),
            ],
            _type_arguments(base, quote),
        )

    async def swap_exact_base_for_quote(
        self, tx: PendingTransaction, params: SwapParams
    ) -> MultiResult:
        """Swap base for quote; outputs are the (base, quote, DEEP) coins.

        The caller owns the returned coins and must transfer or consume them.
        """
        return await self._swap(tx, params, base_to_quote=True)

    async def swap_exact_quote_for_base(
        self, tx: PendingTransaction, params: SwapParams
    ) -> MultiResult:
        """Swap quote for base; outputs are the (base, quote, DEEP) coins."""
        return await self._swap(tx, params, base_to_quote=False)

    # Read-only queries

    async def _pool_read(self, tx: PendingTransaction, pool_key: str):
        pool, base, quote = self.config.pool_coins(pool_key)
        pool_arg = await self._object(tx, pool.address, mutable=False)
        return pool_arg, base, quote

    async def _manager_read(self, tx: PendingTransaction, manager_key: str) -> Input:
        manager = self.config.get_balance_manager(manager_key)
        return await self._object(tx, manager.address, mutable=False)

    async def mid_price(self, tx: PendingTransaction, pool_key: str) -> Result:
        pool_arg, base, quote = await self._pool_read(tx, pool_key)
        return tx.move_call(
            self.config.target("pool", "mid_price"),
            [pool_arg, tx.object(clock_arg(mutable=True))],
            _type_arguments(base, quote),
        )

    async def whitelisted(self, tx: PendingTransaction, pool_key: str) -> Result:
        pool_arg, base, quote = await self._pool_read(tx, pool_key)
        return tx.move_call(
            self.config.target("pool", "whitelisted"), [pool_arg], _type_arguments(base, quote)
        )

    async def get_quote_quantity_out(
        self, tx: PendingTransaction, pool_key: str, base_quantity: float
    ) -> Result:
        pool_arg, base, quote = await self._pool_read(tx, pool_key)
        return tx.move_call(
            self.config.target("pool", "get_quote_quantity_out"),
            [
                pool_arg,
                tx.pure_u64(to_base_units(base_quantity, base.scalar)),
                tx.object(clock_arg(mutable=True)),
            ],
            _type_arguments(base, quote),
        )

    async def get_base_quantity_out(
        self, tx: PendingTransaction, pool_key: str, quote_quantity: float
    ) -> Result:
        pool_arg, base, quote = await self._pool_read(tx, pool_key)
        return tx.move_call(
            self.config.target("pool", "get_base_quantity_out"),
            [
                pool_arg,
                tx.pure_u64(to_base_units(quote_quantity, quote.scalar)),
                tx.object(clock_arg(mutable=True)),
            ],
            _type_arguments(base, quote),
        )

    async def get_quantity_out(
        self,
        tx: PendingTransaction,
        pool_key: str,
        base_quantity: float,
        quote_quantity: float,
    ) -> Result:
        pool_arg, base, quote = await self._pool_read(tx, pool_key)
        return tx.move_call(
            self.config.target("pool", "get_quantity_out"),
            [
                pool_arg,
                tx.pure_u64(to_base_units(base_quantity, base.scalar)),
                tx.pure_u64(to_base_units(quote_quantity, quote.scalar)),
                tx.object(clock_arg(mutable=True)),
            ],
            _type_arguments(base, quote),
        )

    async def account_open_orders(
        self, tx: PendingTransaction, pool_key: str, manager_key: str
    ) -> Result:
        pool_arg, base, quote = await self._pool_read(tx, pool_key)
        manager_arg = await self._manager_read(tx, manager_key)
        return tx.move_call(
            self.config.target("pool", "account_open_orders"),
            [pool_arg, manager_arg],
            _type_arguments(base, quote),
        )

    async def get_level2_range(
        self,
        tx: PendingTransaction,
        pool_key: str,
        price_low: float,
        price_high: float,
        is_bid: bool,
    ) -> Result:
        pool_arg, base, quote = await self._pool_read(tx, pool_key)
        return tx.move_call(
            self.config.target("pool", "get_level2_range"),
            [
                pool_arg,
                tx.pure_u64(encode_price(price_low, base.scalar, quote.scalar)),
                tx.pure_u64(encode_price(price_high, base.scalar, quote.scalar)),
                tx.pure_bool(is_bid),
                tx.object(clock_arg(mutable=True)),
            ],
            _type_arguments(base, quote),
        )

    async def get_level2_ticks_from_mid(
        self, tx: PendingTransaction, pool_key: str, ticks: int
    ) -> Result:
        pool_arg, base, quote = await self._pool_read(tx, pool_key)
        return tx.move_call(
            self.config.target("pool", "get_level2_ticks_from_mid"),
            [pool_arg, tx.pure_u64(ticks), tx.object(clock_arg(mutable=True))],
            _type_arguments(base, quote),
        )

    async def vault_balances(self, tx: PendingTransaction, pool_key: str) -> Result:
        pool_arg, base, quote = await self._pool_read(tx, pool_key)
        return tx.move_call(
            self.config.target("pool", "vault_balances"), [pool_arg], _type_arguments(base, quote)
        )

    async def get_pool_id_by_assets(
        self, tx: PendingTransaction, base_type: str, quote_type: str
    ) -> Result:
        registry_arg = await self._object(tx, self.config.registry_id, mutable=False)
        return tx.move_call(
            self.config.target("pool", "get_pool_id_by_asset"),
            [registry_arg],
            [base_type, quote_type],
        )

    async def pool_trade_params(self, tx: PendingTransaction, pool_key: str) -> Result:
        pool_arg, base, quote = await self._pool_read(tx, pool_key)
        return tx.move_call(
            self.config.target("pool", "pool_trade_params"),
            [pool_arg],
            _type_arguments(base, quote),
        )

    async def pool_book_params(self, tx: PendingTransaction, pool_key: str) -> Result:
        pool_arg, base, quote = await self._pool_read(tx, pool_key)
        return tx.move_call(
            self.config.target("pool", "pool_book_params"),
            [pool_arg],
            _type_arguments(base, quote),
        )

    async def account(self, tx: PendingTransaction, pool_key: str, manager_key: str) -> Result:
        pool_arg, base, quote = await self._pool_read(tx, pool_key)
        manager_arg = await self._manager_read(tx, manager_key)
        return tx.move_call(
            self.config.target("pool", "account"),
            [pool_arg, manager_arg],
            _type_arguments(base, quote),
        )

    async def locked_balance(
        self, tx: PendingTransaction, pool_key: str, manager_key: str
    ) -> Result:
        pool_arg, base, quote = await self._pool_read(tx, pool_key)
        manager_arg = await self._manager_read(tx, manager_key)
        return tx.move_call(
            self.config.target("pool", "locked_balance"),
            [pool_arg, manager_arg],
            _type_arguments(base, quote),
        )

    async def get_pool_deep_price(self, tx: PendingTransaction, pool_key: str) -> Result:
        pool_arg, base, quote = await self._pool_read(tx, pool_key)
        return tx.move_call(
            self.config.target("pool", "get_order_deep_price"),
            [pool_arg],
            _type_arguments(base, quote),
        )
