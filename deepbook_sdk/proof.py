"""Trade proof generation for balance managers.

A manager configured with a trade cap proves authorization as a trader;
otherwise the sender proves it as the owner. The choice is fixed when the
selector is built from the configuration, no on-chain permission probing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Union

from .config import ConfigError, DeepBookConfig
from .resolver import ObjectResolver
from .transaction import Argument, PendingTransaction, Result


@dataclass(frozen=True)
class OwnerProof:
    manager_id: str


@dataclass(frozen=True)
class TraderProof:
    manager_id: str
    trade_cap_id: str


ProofStrategy = Union[OwnerProof, TraderProof]


def select_strategy(manager_id: str, trade_cap: Optional[str]) -> ProofStrategy:
    if trade_cap:
        return TraderProof(manager_id, trade_cap)
    return OwnerProof(manager_id)


class ProofSelector:
    def __init__(self, config: DeepBookConfig, resolver: ObjectResolver):
        self.config = config
        self.resolver = resolver
        self._strategies: Dict[str, ProofStrategy] = {
            key: select_strategy(manager.address, manager.trade_cap)
            for key, manager in config.balance_managers.items()
        }

    def strategy(self, manager_key: str) -> ProofStrategy:
        try:
            return self._strategies[manager_key]
        except KeyError:
            raise ConfigError(f"Balance manager with key {manager_key} not found.") from None

    async def generate_proof(
        self,
        tx: PendingTransaction,
        manager_key: str,
        manager_arg: Optional[Argument] = None,
    ) -> Result:
        """Emit the proof command for ``manager_key`` and return its output.

        ``manager_arg`` lets callers reuse the manager input they already
        registered for the call that consumes the proof.
        """
        strategy = self.strategy(manager_key)
        if manager_arg is None:
            manager_arg = tx.object(await self.resolver.resolve(strategy.manager_id))

        if isinstance(strategy, TraderProof):
            cap_arg = tx.object(await self.resolver.resolve(strategy.trade_cap_id))
            return tx.move_call(
                self.config.target("balance_manager", "generate_proof_as_trader"),
                [manager_arg, cap_arg],
            )
        return tx.move_call(
            self.config.target("balance_manager", "generate_proof_as_owner"),
            [manager_arg],
        )
