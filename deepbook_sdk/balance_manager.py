"""Balance manager calls: creation, deposits, withdrawals and reads."""

from __future__ import annotations

from .config import DeepBookConfig
from .constants import SUI_FRAMEWORK_ADDRESS
from .funding import CoinFunder
from .proof import ProofSelector
from .resolver import ObjectResolver
from .scaling import to_base_units
from .transaction import PendingTransaction, Result


class BalanceManagerContract:
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

    async def create_and_share_balance_manager(self, tx: PendingTransaction) -> None:
        """Create a new balance manager and share it in the same transaction."""
        manager = tx.move_call(self.config.target("balance_manager", "new"))
        tx.move_call(
            f"{SUI_FRAMEWORK_ADDRESS}::transfer::public_share_object",
            [manager],
            [f"{self.config.deepbook_package_id}::balance_manager::BalanceManager"],
        )

    async def deposit_into_manager(
        self,
        tx: PendingTransaction,
        manager_key: str,
        coin_key: str,
        amount: float,
    ) -> None:
        manager = self.config.get_balance_manager(manager_key)
        coin = self.config.get_coin(coin_key)
        deposit_amount = to_base_units(amount, coin.scalar)

        manager_arg = tx.object(await self.resolver.resolve(manager.address))
        coin_arg = await self.funder.fund_exact(
            tx, self.config.sender_address, coin.coin_type, deposit_amount
        )
        tx.move_call(
            self.config.target("balance_manager", "deposit"),
            [manager_arg, coin_arg],
            [coin.coin_type],
        )

    async def withdraw_from_manager(
        self,
        tx: PendingTransaction,
        manager_key: str,
        coin_key: str,
        amount: float,
        recipient: str,
    ) -> None:
        """Withdraw ``amount`` and transfer the resulting coin to ``recipient``."""
        manager = self.config.get_balance_manager(manager_key)
        coin = self.config.get_coin(coin_key)
        withdraw_amount = to_base_units(amount, coin.scalar)

        manager_arg = tx.object(await self.resolver.resolve(manager.address))
        withdrawn = tx.move_call(
            self.config.target("balance_manager", "withdraw"),
            [manager_arg, tx.pure_u64(withdraw_amount)],
            [coin.coin_type],
        )
        tx.transfer_objects([withdrawn], recipient)

    async def withdraw_all_from_manager(
        self,
        tx: PendingTransaction,
        manager_key: str,
        coin_key: str,
        recipient: str,
    ) -> None:
        manager = self.config.get_balance_manager(manager_key)
        coin = self.config.get_coin(coin_key)

        manager_arg = tx.object(await self.resolver.resolve(manager.address))
        withdrawn = tx.move_call(
            self.config.target("balance_manager", "withdraw_all"),
            [manager_arg],
            [coin.coin_type],
        )
        tx.transfer_objects([withdrawn], recipient)

    async def check_manager_balance(
        self, tx: PendingTransaction, manager_key: str, coin_key: str
    ) -> Result:
        """Read call returning the manager's balance of ``coin_key`` as a u64."""
        manager = self.config.get_balance_manager(manager_key)
        coin = self.config.get_coin(coin_key)

        manager_arg = tx.object(await self.resolver.resolve(manager.address, mutable=False))
        return tx.move_call(
            self.config.target("balance_manager", "balance"),
            [manager_arg],
            [coin.coin_type],
        )

    async def owner(self, tx: PendingTransaction, manager_key: str) -> Result:
        manager = self.config.get_balance_manager(manager_key)
        manager_arg = tx.object(await self.resolver.resolve(manager.address, mutable=False))
        return tx.move_call(self.config.target("balance_manager", "owner"), [manager_arg])

    async def id(self, tx: PendingTransaction, manager_key: str) -> Result:
        manager = self.config.get_balance_manager(manager_key)
        manager_arg = tx.object(await self.resolver.resolve(manager.address, mutable=False))
        return tx.move_call(self.config.target("balance_manager", "id"), [manager_arg])

    async def generate_proof(self, tx: PendingTransaction, manager_key: str) -> Result:
        return await self.proofs.generate_proof(tx, manager_key)
