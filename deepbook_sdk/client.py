"""High-level DeepBook client.

Wires the configuration and the ledger collaborators into the contract
builders, and offers typed read helpers that build, simulate and decode a
single read call.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple, Union

from .balance_manager import BalanceManagerContract
from .config import ConfigError, DeepBookConfig
from .constants import DEEP_SCALAR, DEFAULT_RPC_URLS, GAS_BUDGET
from .decoder import (
    DecodeError,
    Decoder,
    address,
    boolean,
    decode,
    option,
    struct,
    u64,
    u128,
    vector,
)
from .deep_book import DeepBookContract
from .deep_book_admin import DeepBookAdminContract
from .flash_loans import FlashLoanContract
from .funding import CoinFunder, FundingError
from .governance import GovernanceContract
from .ledger import (
    Confirmation,
    GasPriceSource,
    LedgerQuery,
    SignedTransaction,
    SimulatedResult,
    SimulationService,
)
from .models import (
    Account,
    Balances,
    BookParams,
    Level2Range,
    Level2TicksFromMid,
    OrderDeepPrice,
    PoolDeepPrice,
    QuantityOut,
    TradeParams,
    VaultBalances,
)
from .proof import ProofSelector
from .resolver import ObjectResolver, ResolutionError
from .rpc import RpcError, SuiRpcClient, SuiRpcConfig
from .scaling import ScalingError, decode_deep, decode_float, decode_price, from_base_units
from .submitter import TransactionSubmitter
from .transaction import (
    ObjectRef,
    PendingTransaction,
    ProgrammableTransaction,
    TransactionBuildError,
    build_transaction_data,
)
from .type_tags import TypeTagError
from .validation import ValidationError


logger = logging.getLogger(__name__)

BALANCES = struct(Balances, u64, u64, u64)
ACCOUNT = struct(
    Account,
    u64,
    vector(u128),
    u128,
    u128,
    u64,
    u64,
    boolean,
    option(address),
    BALANCES,
    BALANCES,
    BALANCES,
)
ORDER_DEEP_PRICE = struct(OrderDeepPrice, boolean, u64)


class SimulationError(RuntimeError):
    """Raised when a simulated transaction fails or returns no results."""


class DeepBookClientError(RuntimeError):
    """High-level client error."""


_READ_ERRORS = (
    ConfigError,
    ValidationError,
    ScalingError,
    TypeTagError,
    TransactionBuildError,
    ResolutionError,
    FundingError,
    SimulationError,
    DecodeError,
)

BuildStep = Callable[[PendingTransaction], Awaitable[Any]]
Transaction = Union[PendingTransaction, ProgrammableTransaction]


def _sealed(tx: Transaction) -> ProgrammableTransaction:
    return tx.finish() if isinstance(tx, PendingTransaction) else tx


class DeepBookClient:
    """DeepBook SDK client for building, simulating and submitting transactions."""

    def __init__(
        self,
        config: DeepBookConfig,
        ledger: LedgerQuery,
        simulator: SimulationService,
        submitter: Optional[TransactionSubmitter] = None,
        gas_prices: Optional[GasPriceSource] = None,
    ):
        self.config = config
        self.ledger = ledger
        self.simulator = simulator
        self.submitter = submitter
        self.gas_prices = gas_prices
        self._rpc: Optional[SuiRpcClient] = None

        self.resolver = ObjectResolver(ledger)
        self.funder = CoinFunder(ledger)
        self.proofs = ProofSelector(config, self.resolver)
        self.balance_manager = BalanceManagerContract(
            config, self.resolver, self.funder, self.proofs
        )
        self.deep_book = DeepBookContract(config, self.resolver, self.funder, self.proofs)
        self.deep_book_admin = DeepBookAdminContract(config, self.resolver)
        self.flash_loans = FlashLoanContract(config, self.resolver)
        self.governance = GovernanceContract(config, self.resolver, self.proofs)

    @classmethod
    def connect(
        cls,
        env: str,
        sender_address: str,
        rpc_url: Optional[str] = None,
        rpc_config: Optional[SuiRpcConfig] = None,
        **config_options: Any,
    ) -> "DeepBookClient":
        """Client talking to a full node over JSON-RPC.

        ``config_options`` are forwarded to :meth:`DeepBookConfig.create`.
        """
        config = DeepBookConfig.create(env, sender_address, **config_options)
        rpc_config = rpc_config or SuiRpcConfig(url=rpc_url or DEFAULT_RPC_URLS[env])
        rpc = SuiRpcClient(rpc_config)
        submitter = TransactionSubmitter(rpc, rpc_config.max_attempts, rpc_config.retry_delay_s)
        client = cls(config, rpc, rpc, submitter=submitter, gas_prices=rpc)
        client._rpc = rpc
        return client

    async def close(self) -> None:
        if self._rpc is not None:
            await self._rpc.close()

    async def __aenter__(self) -> "DeepBookClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # Simulation and submission

    async def simulate(self, tx: Transaction) -> SimulatedResult:
        """Dev-inspect ``tx`` as the sender; return the last command's values."""
        transaction = _sealed(tx)
        if not transaction.commands:
            raise SimulationError("transaction has no commands to simulate")
        logger.debug("simulating %d command(s)", len(transaction.commands))
        try:
            response = await self.simulator.dev_inspect(
                transaction.kind_bytes(), self.config.sender_address
            )
        except RpcError as exc:
            raise SimulationError(f"Failed to execute dev inspect: {exc}") from exc
        if not response.succeeded:
            raise SimulationError(f"Simulation failed: {response.error or response.status}")
        if not response.results:
            raise SimulationError("No results returned from simulation")
        return response.results[-1]

    async def build_transaction_data(
        self,
        tx: Transaction,
        gas_payment: Sequence[ObjectRef],
        gas_budget: int = GAS_BUDGET,
        gas_price: Optional[int] = None,
    ) -> bytes:
        """Signable ``TransactionData`` bytes for ``tx``, paid by the sender."""
        if gas_price is None:
            if self.gas_prices is None:
                raise DeepBookClientError("gas_price is required without a gas price source")
            try:
                gas_price = await self.gas_prices.get_reference_gas_price()
            except RpcError as exc:
                raise DeepBookClientError(f"Failed to fetch reference gas price: {exc}") from exc
        return build_transaction_data(
            _sealed(tx), self.config.sender_address, gas_payment, gas_price, gas_budget
        )

    async def submit(self, signed: SignedTransaction) -> Confirmation:
        if self.submitter is None:
            raise DeepBookClientError("client has no transaction submitter")
        return await self.submitter.submit(signed)

    # Typed reads

    async def _read(self, build: BuildStep, *decoders: Decoder) -> Tuple[Any, ...]:
        tx = PendingTransaction()
        try:
            await build(tx)
            result = await self.simulate(tx)
            return decode(result, *decoders)
        except _READ_ERRORS as exc:
            raise DeepBookClientError(f"Read failed: {exc}") from exc

    async def check_manager_balance(self, manager_key: str, coin_key: str) -> Tuple[str, float]:
        """Return ``(coin_type, balance)`` with the balance in whole coins."""
        try:
            coin = self.config.get_coin(coin_key)
        except ConfigError as exc:
            raise DeepBookClientError(str(exc)) from exc
        (balance,) = await self._read(
            lambda tx: self.balance_manager.check_manager_balance(tx, manager_key, coin_key), u64
        )
        return coin.coin_type, from_base_units(balance, coin.scalar)

    async def get_manager_owner(self, manager_key: str) -> str:
        (owner,) = await self._read(lambda tx: self.balance_manager.owner(tx, manager_key), address)
        return owner

    async def get_manager_id(self, manager_key: str) -> str:
        (manager_id,) = await self._read(
            lambda tx: self.balance_manager.id(tx, manager_key), address
        )
        return manager_id

    async def whitelisted(self, pool_key: str) -> bool:
        (value,) = await self._read(lambda tx: self.deep_book.whitelisted(tx, pool_key), boolean)
        return value

    def _pool_scalars(self, pool_key: str) -> Tuple[int, int]:
        try:
            _, base, quote = self.config.pool_coins(pool_key)
        except ConfigError as exc:
            raise DeepBookClientError(str(exc)) from exc
        return base.scalar, quote.scalar

    async def mid_price(self, pool_key: str) -> float:
        base_scalar, quote_scalar = self._pool_scalars(pool_key)
        (price,) = await self._read(lambda tx: self.deep_book.mid_price(tx, pool_key), u64)
        return decode_price(price, base_scalar, quote_scalar)

    def _quantity_out(
        self,
        values: Tuple[int, int, int],
        base_scalar: int,
        quote_scalar: int,
        base_quantity: float,
        quote_quantity: float,
    ) -> QuantityOut:
        base_out, quote_out, deep_required = values
        return QuantityOut(
            base_quantity=base_quantity,
            quote_quantity=quote_quantity,
            base_out=from_base_units(base_out, base_scalar),
            quote_out=from_base_units(quote_out, quote_scalar),
            deep_required=decode_deep(deep_required),
        )

    async def get_quote_quantity_out(self, pool_key: str, base_quantity: float) -> QuantityOut:
        base_scalar, quote_scalar = self._pool_scalars(pool_key)
        values = await self._read(
            lambda tx: self.deep_book.get_quote_quantity_out(tx, pool_key, base_quantity),
            u64,
            u64,
            u64,
        )
        return self._quantity_out(values, base_scalar, quote_scalar, base_quantity, 0.0)

    async def get_base_quantity_out(self, pool_key: str, quote_quantity: float) -> QuantityOut:
        base_scalar, quote_scalar = self._pool_scalars(pool_key)
        values = await self._read(
            lambda tx: self.deep_book.get_base_quantity_out(tx, pool_key, quote_quantity),
            u64,
            u64,
            u64,
        )
        return self._quantity_out(values, base_scalar, quote_scalar, 0.0, quote_quantity)

    async def get_quantity_out(
        self, pool_key: str, base_quantity: float, quote_quantity: float
    ) -> QuantityOut:
        base_scalar, quote_scalar = self._pool_scalars(pool_key)
        values = await self._read(
            lambda tx: self.deep_book.get_quantity_out(tx, pool_key, base_quantity, quote_quantity),
            u64,
            u64,
            u64,
        )
        return self._quantity_out(values, base_scalar, quote_scalar, base_quantity, quote_quantity)

    async def account_open_orders(self, pool_key: str, manager_key: str) -> List[int]:
        """Order ids of the manager's open orders in the pool."""
        (orders,) = await self._read(
            lambda tx: self.deep_book.account_open_orders(tx, pool_key, manager_key),
            vector(u128),
        )
        return orders

    async def get_level2_range(
        self, pool_key: str, price_low: float, price_high: float, is_bid: bool
    ) -> Level2Range:
        base_scalar, quote_scalar = self._pool_scalars(pool_key)
        prices, quantities = await self._read(
            lambda tx: self.deep_book.get_level2_range(tx, pool_key, price_low, price_high, is_bid),
            vector(u64),
            vector(u64),
        )
        return Level2Range(
            prices=[decode_price(p, base_scalar, quote_scalar) for p in prices],
            quantities=[from_base_units(q, base_scalar) for q in quantities],
        )

    async def get_level2_ticks_from_mid(self, pool_key: str, ticks: int) -> Level2TicksFromMid:
        base_scalar, quote_scalar = self._pool_scalars(pool_key)
        bid_prices, bid_quantities, ask_prices, ask_quantities = await self._read(
            lambda tx: self.deep_book.get_level2_ticks_from_mid(tx, pool_key, ticks),
            vector(u64),
            vector(u64),
            vector(u64),
            vector(u64),
        )
        return Level2TicksFromMid(
            bid_prices=[decode_price(p, base_scalar, quote_scalar) for p in bid_prices],
            bid_quantities=[from_base_units(q, base_scalar) for q in bid_quantities],
            ask_prices=[decode_price(p, base_scalar, quote_scalar) for p in ask_prices],
            ask_quantities=[from_base_units(q, base_scalar) for q in ask_quantities],
        )

    async def vault_balances(self, pool_key: str) -> VaultBalances:
        """Pool vault holdings as ``(base, quote, deep)`` in whole coins."""
        base_scalar, quote_scalar = self._pool_scalars(pool_key)
        base, quote, deep = await self._read(
            lambda tx: self.deep_book.vault_balances(tx, pool_key), u64, u64, u64
        )
        return (
            from_base_units(base, base_scalar),
            from_base_units(quote, quote_scalar),
            decode_deep(deep),
        )

    async def get_pool_id_by_assets(self, base_type: str, quote_type: str) -> str:
        (pool_id,) = await self._read(
            lambda tx: self.deep_book.get_pool_id_by_assets(tx, base_type, quote_type), address
        )
        return pool_id

    async def pool_trade_params(self, pool_key: str) -> TradeParams:
        taker_fee, maker_fee, stake_required = await self._read(
            lambda tx: self.deep_book.pool_trade_params(tx, pool_key), u64, u64, u64
        )
        return TradeParams(
            taker_fee=decode_float(taker_fee),
            maker_fee=decode_float(maker_fee),
            stake_required=decode_deep(stake_required),
        )

    async def pool_book_params(self, pool_key: str) -> BookParams:
        base_scalar, quote_scalar = self._pool_scalars(pool_key)
        tick_size, lot_size, min_size = await self._read(
            lambda tx: self.deep_book.pool_book_params(tx, pool_key), u64, u64, u64
        )
        return BookParams(
            tick_size=decode_price(tick_size, base_scalar, quote_scalar),
            lot_size=from_base_units(lot_size, base_scalar),
            min_size=from_base_units(min_size, base_scalar),
        )

    async def account(self, pool_key: str, manager_key: str) -> Account:
        """The manager's raw account record in the pool, amounts in base units."""
        (account,) = await self._read(
            lambda tx: self.deep_book.account(tx, pool_key, manager_key), ACCOUNT
        )
        return account

    async def locked_balance(self, pool_key: str, manager_key: str) -> VaultBalances:
        base_scalar, quote_scalar = self._pool_scalars(pool_key)
        base, quote, deep = await self._read(
            lambda tx: self.deep_book.locked_balance(tx, pool_key, manager_key), u64, u64, u64
        )
        return (
            from_base_units(base, base_scalar),
            from_base_units(quote, quote_scalar),
            decode_deep(deep),
        )

    async def get_pool_deep_price(self, pool_key: str) -> PoolDeepPrice:
        base_scalar, quote_scalar = self._pool_scalars(pool_key)
        (price,) = await self._read(
            lambda tx: self.deep_book.get_pool_deep_price(tx, pool_key), ORDER_DEEP_PRICE
        )
        per_asset = decode_float(price.deep_per_asset)
        if price.asset_is_base:
            return PoolDeepPrice(
                asset_is_base=True, deep_per_base=per_asset * base_scalar / DEEP_SCALAR
            )
        return PoolDeepPrice(
            asset_is_base=False, deep_per_quote=per_asset * quote_scalar / DEEP_SCALAR
        )
