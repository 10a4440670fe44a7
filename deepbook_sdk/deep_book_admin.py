"""Registry and pool administration. Every call is authorized by the admin cap."""

from __future__ import annotations

from typing import Tuple

from .config import DeepBookConfig
from .models import CreatePoolAdminParams
from .resolver import ObjectResolver
from .scaling import encode_price, to_base_units
from .transaction import Input, PendingTransaction, ResolvedReference, Result


class DeepBookAdminContract:
    def __init__(self, config: DeepBookConfig, resolver: ObjectResolver):
        self.config = config
        self.resolver = resolver

    async def _registry_and_cap(
        self, tx: PendingTransaction
    ) -> Tuple[Input, ResolvedReference]:
        """Register the registry and resolve the cap; callers register the cap last."""
        admin_cap = self.config.require_admin_cap()
        registry_arg = tx.object(await self.resolver.resolve(self.config.registry_id))
        cap = await self.resolver.resolve(admin_cap)
        return registry_arg, cap

    async def create_pool_admin(
        self, tx: PendingTransaction, params: CreatePoolAdminParams
    ) -> Result:
        base = self.config.get_coin(params.base_coin_key)
        quote = self.config.get_coin(params.quote_coin_key)
        registry_arg, cap = await self._registry_and_cap(tx)
        return tx.move_call(
            self.config.target("pool", "create_pool_admin"),
            [
                registry_arg,
                tx.pure_u64(encode_price(params.tick_size, base.scalar, quote.scalar)),
                tx.pure_u64(to_base_units(params.lot_size, base.scalar)),
                tx.pure_u64(to_base_units(params.min_size, base.scalar)),
                tx.pure_bool(params.whitelisted),
                tx.pure_bool(params.stable_pool),
                tx.object(cap),
            ],
            [base.coin_type, quote.coin_type],
        )

    async def _pool_admin_call(
        self, tx: PendingTransaction, pool_key: str, function: str
    ) -> Result:
        pool, base, quote = self.config.pool_coins(pool_key)
        admin_cap = self.config.require_admin_cap()
        pool_arg = tx.object(await self.resolver.resolve(pool.address))
        registry_arg = tx.object(await self.resolver.resolve(self.config.registry_id))
        cap_arg = tx.object(await self.resolver.resolve(admin_cap))
        return tx.move_call(
            self.config.target("pool", function),
            [pool_arg, registry_arg, cap_arg],
            [base.coin_type, quote.coin_type],
        )

    async def unregister_pool_admin(self, tx: PendingTransaction, pool_key: str) -> Result:
        return await self._pool_admin_call(tx, pool_key, "unregister_pool_admin")

    async def update_allowed_versions(self, tx: PendingTransaction, pool_key: str) -> Result:
        return await self._pool_admin_call(tx, pool_key, "update_allowed_versions")

    async def enable_version(self, tx: PendingTransaction, version: int) -> Result:
        registry_arg, cap = await self._registry_and_cap(tx)
        return tx.move_call(
            self.config.target("registry", "enable_version"),
            [registry_arg, tx.pure_u64(version), tx.object(cap)],
        )

    async def disable_version(self, tx: PendingTransaction, version: int) -> Result:
        registry_arg, cap = await self._registry_and_cap(tx)
        return tx.move_call(
            self.config.target("registry", "disable_version"),
            [registry_arg, tx.pure_u64(version), tx.object(cap)],
        )

    async def set_treasury_address(self, tx: PendingTransaction, treasury_address: str) -> Result:
        registry_arg, cap = await self._registry_and_cap(tx)
        return tx.move_call(
            self.config.target("registry", "set_treasury_address"),
            [registry_arg, tx.pure_address(treasury_address), tx.object(cap)],
        )
