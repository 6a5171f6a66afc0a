"""Receipts returned to callers and notifications published after commit.

A receipt is the caller's proof of what moved; a notification is the same
fact addressed to everyone else. Both exist only for committed operations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import final

from pegvault.core.types import UtcDatetime
from pegvault.oracle.price import PriceSample

# ---------------------------------------------------------------------------
# Receipts
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class MintReceipt:
    account: str
    collateral_deposited: int
    debt_minted: int
    price: PriceSample
    tx_id: str
    timestamp: UtcDatetime


@final
@dataclass(frozen=True, slots=True)
class RedeemReceipt:
    account: str
    debt_retired: int
    collateral_released: int
    closed: bool
    price: PriceSample
    tx_id: str
    timestamp: UtcDatetime


@final
@dataclass(frozen=True, slots=True)
class LiquidationReceipt:
    target: str
    liquidator: str
    owner: str
    collateral_seized: int
    debt_cleared: int
    owner_share: int
    liquidator_share: int
    price: PriceSample
    tx_id: str
    timestamp: UtcDatetime


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class Minted:
    account: str
    collateral_amount: int
    debt_amount: int
    tx_id: str
    timestamp: UtcDatetime


@final
@dataclass(frozen=True, slots=True)
class Redeemed:
    account: str
    debt_amount: int
    collateral_amount: int
    tx_id: str
    timestamp: UtcDatetime


@final
@dataclass(frozen=True, slots=True)
class Liquidated:
    target: str
    liquidator: str
    collateral_seized: int
    debt_cleared: int
    owner_share: int
    liquidator_share: int
    tx_id: str
    timestamp: UtcDatetime


type Notification = Minted | Redeemed | Liquidated


def notification_for(receipt: MintReceipt | RedeemReceipt | LiquidationReceipt) -> Notification:
    match receipt:
        case MintReceipt():
            return Minted(
                account=receipt.account,
                collateral_amount=receipt.collateral_deposited,
                debt_amount=receipt.debt_minted,
                tx_id=receipt.tx_id,
                timestamp=receipt.timestamp,
            )
        case RedeemReceipt():
            return Redeemed(
                account=receipt.account,
                debt_amount=receipt.debt_retired,
                collateral_amount=receipt.collateral_released,
                tx_id=receipt.tx_id,
                timestamp=receipt.timestamp,
            )
        case LiquidationReceipt():
            return Liquidated(
                target=receipt.target,
                liquidator=receipt.liquidator,
                collateral_seized=receipt.collateral_seized,
                debt_cleared=receipt.debt_cleared,
                owner_share=receipt.owner_share,
                liquidator_share=receipt.liquidator_share,
                tx_id=receipt.tx_id,
                timestamp=receipt.timestamp,
            )


def notification_key(notification: Notification) -> str:
    """Partition key: the account whose position changed."""
    match notification:
        case Liquidated():
            return notification.target
        case _:
            return notification.account
