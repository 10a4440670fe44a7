"""Pool governance: staking DEEP, fee proposals and voting."""

from __future__ import annotations

from typing import Tuple

from .config import DeepBookConfig
from .constants import DEEP_SCALAR
from .models import ProposalParams
from .proof import ProofSelector
from .resolver import ObjectResolver
from .scaling import encode_float, to_base_units
from .transaction import Input, PendingTransaction, Result


class GovernanceContract:
    def __init__(self, config: DeepBookConfig, resolver: ObjectResolver, proofs: ProofSelector):
        self.config = config
        self.resolver = resolver
        self.proofs = proofs

    async def _pool_manager_proof(
        self, tx: PendingTransaction, pool_key: str, manager_key: str
    ) -> Tuple[Input, Input, Result, Tuple[str, str]]:
        pool, base, quote = self.config.pool_coins(pool_key)
        manager = self.config.get_balance_manager(manager_key)
        pool_arg = tx.object(await self.resolver.resolve(pool.address))
        manager_arg = tx.object(await self.resolver.resolve(manager.address))
        proof = await self.proofs.generate_proof(tx, manager_key, manager_arg)
        return pool_arg, manager_arg, proof, (base.coin_type, quote.coin_type)

    async def stake(
        self, tx: PendingTransaction, pool_key: str, manager_key: str, stake_amount: float
    ) -> Result:
        pool_arg, manager_arg, proof, types = await self._pool_manager_proof(
            tx, pool_key, manager_key
        )
        return tx.move_call(
            self.config.target("pool", "stake"),
            [pool_arg, manager_arg, proof, tx.pure_u64(to_base_units(stake_amount, DEEP_SCALAR))],
            types,
        )

    async def unstake(self, tx: PendingTransaction, pool_key: str, manager_key: str) -> Result:
        pool_arg, manager_arg, proof, types = await self._pool_manager_proof(
            tx, pool_key, manager_key
        )
        return tx.move_call(
            self.config.target("pool", "unstake"), [pool_arg, manager_arg, proof], types
        )

    async def submit_proposal(self, tx: PendingTransaction, params: ProposalParams) -> Result:
        """Propose new fees; rates are fractions (0.001 is 10 bps)."""
        pool_arg, manager_arg, proof, types = await self._pool_manager_proof(
            tx, params.pool_key, params.balance_manager_key
        )
        return tx.move_call(
            self.config.target("pool", "submit_proposal"),
            [
                pool_arg,
                manager_arg,
                proof,
                tx.pure_u64(encode_float(params.taker_fee)),
                tx.pure_u64(encode_float(params.maker_fee)),
                tx.pure_u64(to_base_units(params.stake_required, DEEP_SCALAR)),
            ],
            types,
        )

    async def vote(
        self, tx: PendingTransaction, pool_key: str, manager_key: str, proposal_id: str
    ) -> Result:
        pool_arg, manager_arg, proof, types = await self._pool_manager_proof(
            tx, pool_key, manager_key
        )
        return tx.move_call(
            self.config.target("pool", "vote"),
            [pool_arg, manager_arg, proof, tx.pure_address(proposal_id)],
            types,
        )
