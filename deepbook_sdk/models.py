"""Registry descriptors, order parameters and decoded result records."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Coin:
    address: str
    coin_type: str
    scalar: int


@dataclass(frozen=True)
class Pool:
    address: str
    base_coin: str
    quote_coin: str


@dataclass(frozen=True)
class BalanceManager:
    address: str
    trade_cap: Optional[str] = None


@dataclass(frozen=True)
class PackageIds:
    deepbook_package_id: str
    registry_id: str
    deep_treasury_id: str


class OrderType(IntEnum):
    NO_RESTRICTION = 0
    IMMEDIATE_OR_CANCEL = 1
    FILL_OR_KILL = 2
    POST_ONLY = 3


class SelfMatchingOptions(IntEnum):
    SELF_MATCHING_ALLOWED = 0
    CANCEL_TAKER = 1
    CANCEL_MAKER = 2


@dataclass(frozen=True)
class PlaceLimitOrderParams:
    pool_key: str
    balance_manager_key: str
    client_order_id: int
    price: float
    quantity: float
    is_bid: bool
    expiration: Optional[int] = None
    order_type: OrderType = OrderType.NO_RESTRICTION
    self_matching_option: SelfMatchingOptions = SelfMatchingOptions.SELF_MATCHING_ALLOWED
    pay_with_deep: bool = True


@dataclass(frozen=True)
class PlaceMarketOrderParams:
    pool_key: str
    balance_manager_key: str
    client_order_id: int
    quantity: float
    is_bid: bool
    self_matching_option: SelfMatchingOptions = SelfMatchingOptions.SELF_MATCHING_ALLOWED
    pay_with_deep: bool = True


@dataclass(frozen=True)
class ProposalParams:
    pool_key: str
    balance_manager_key: str
    taker_fee: float
    maker_fee: float
    stake_required: float


@dataclass(frozen=True)
class SwapParams:
    pool_key: str
    amount: float
    deep_amount: float
    min_out: float


@dataclass(frozen=True)
class CreatePoolAdminParams:
    base_coin_key: str
    quote_coin_key: str
    tick_size: float
    lot_size: float
    min_size: float
    whitelisted: bool
    stable_pool: bool


# Decoded on-chain records


@dataclass(frozen=True)
class Balances:
    base: int
    quote: int
    deep: int


@dataclass(frozen=True)
class Account:
    epoch: int
    open_orders: List[int]
    taker_volume: int
    maker_volume: int
    active_stake: int
    inactive_stake: int
    created_proposal: bool
    voted_proposal: Optional[str]
    unclaimed_rebates: Balances
    settled_balances: Balances
    owed_balances: Balances


@dataclass(frozen=True)
class OrderDeepPrice:
    asset_is_base: bool
    deep_per_asset: int


@dataclass(frozen=True)
class PoolDeepPrice:
    asset_is_base: bool
    deep_per_base: Optional[float] = None
    deep_per_quote: Optional[float] = None


@dataclass(frozen=True)
class QuantityOut:
    base_quantity: float
    quote_quantity: float
    base_out: float
    quote_out: float
    deep_required: float


@dataclass(frozen=True)
class Level2Range:
    prices: List[float]
    quantities: List[float]


@dataclass(frozen=True)
class Level2TicksFromMid:
    bid_prices: List[float]
    bid_quantities: List[float]
    ask_prices: List[float]
    ask_quantities: List[float]


@dataclass(frozen=True)
class TradeParams:
    taker_fee: float
    maker_fee: float
    stake_required: float


@dataclass(frozen=True)
class BookParams:
    tick_size: float
    lot_size: float
    min_size: float


VaultBalances = Tuple[float, float, float]
