"""Static DeepBook configuration: environment, registries and package ids."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from .constants import DEFAULT_COINS, DEFAULT_POOLS, ENVIRONMENTS, PACKAGE_IDS
from .models import BalanceManager, Coin, Pool
from .validation import ValidationError, normalize_sui_address


class ConfigError(ValueError):
    """Raised for unknown registry keys or incomplete configuration."""


@dataclass(frozen=True)
class DeepBookConfig:
    """Immutable configuration shared by every contract builder.

    Build it once with :meth:`create`; lookups never mutate it.
    """

    env: str
    sender_address: str
    deepbook_package_id: str
    registry_id: str
    deep_treasury_id: str
    coins: Mapping[str, Coin]
    pools: Mapping[str, Pool]
    balance_managers: Mapping[str, BalanceManager]
    admin_cap: Optional[str] = None

    @classmethod
    def create(
        cls,
        env: str,
        sender_address: str,
        admin_cap: Optional[str] = None,
        balance_managers: Optional[Mapping[str, BalanceManager]] = None,
        coins: Optional[Mapping[str, Coin]] = None,
        pools: Optional[Mapping[str, Pool]] = None,
    ) -> "DeepBookConfig":
        if env not in ENVIRONMENTS:
            raise ConfigError(f"unknown environment {env!r}; expected one of {ENVIRONMENTS}")
        try:
            sender = normalize_sui_address(sender_address)
            cap = normalize_sui_address(admin_cap) if admin_cap else None
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc

        package_ids = PACKAGE_IDS[env]
        return cls(
            env=env,
            sender_address=sender,
            deepbook_package_id=package_ids.deepbook_package_id,
            registry_id=package_ids.registry_id,
            deep_treasury_id=package_ids.deep_treasury_id,
            coins=MappingProxyType(dict(coins if coins is not None else DEFAULT_COINS[env])),
            pools=MappingProxyType(dict(pools if pools is not None else DEFAULT_POOLS[env])),
            balance_managers=MappingProxyType(dict(balance_managers or {})),
            admin_cap=cap,
        )

    def get_coin(self, key: str) -> Coin:
        try:
            return self.coins[key]
        except KeyError:
            raise ConfigError(f"Coin not found for key: {key}") from None

    def get_pool(self, key: str) -> Pool:
        try:
            return self.pools[key]
        except KeyError:
            raise ConfigError(f"Pool not found for key: {key}") from None

    def get_balance_manager(self, key: str) -> BalanceManager:
        try:
            return self.balance_managers[key]
        except KeyError:
            raise ConfigError(f"Balance manager with key {key} not found.") from None

    def require_admin_cap(self) -> str:
        if not self.admin_cap:
            raise ConfigError("admin_cap is not configured")
        return self.admin_cap

    def target(self, module: str, function: str) -> str:
        """Fully qualified DeepBook Move function."""
        return f"{self.deepbook_package_id}::{module}::{function}"

    def pool_coins(self, pool_key: str) -> Tuple[Pool, Coin, Coin]:
        """The pool with its base and quote coin descriptors."""
        pool = self.get_pool(pool_key)
        return pool, self.get_coin(pool.base_coin), self.get_coin(pool.quote_coin)
