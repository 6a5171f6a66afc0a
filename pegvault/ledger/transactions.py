"""Custody domain types: Account, Move, Transaction.

Collateral value leaves or enters the vault only as Moves inside a
Transaction that the custody engine applies atomically.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import final

from pegvault.core.result import Err, Ok
from pegvault.core.types import NonEmptyStr, UtcDatetime
from pegvault.core.units import PositiveInt


class AccountType(Enum):
    WALLET = "WALLET"      # user-controlled, cannot go negative
    VAULT = "VAULT"        # pooled collateral held on behalf of positions
    EXTERNAL = "EXTERNAL"  # outside world (funding source), may go negative


class ExecuteResult(Enum):
    APPLIED = "APPLIED"
    ALREADY_APPLIED = "ALREADY_APPLIED"


@final
@dataclass(frozen=True, slots=True)
class Account:
    account_id: NonEmptyStr
    account_type: AccountType
    accepts_deposits: bool = True  # False models a recipient that rejects value


@final
@dataclass(frozen=True, slots=True)
class Move:
    """One leg of a transaction: quantity of unit from source to destination."""

    source: str
    destination: str
    unit: str
    quantity: PositiveInt

    @staticmethod
    def create(source: str, destination: str, unit: str, quantity: int) -> Ok[Move] | Err[str]:
        if not source:
            return Err("Move: source must be non-empty")
        if not destination:
            return Err("Move: destination must be non-empty")
        if source == destination:
            return Err(f"Move: source and destination must differ, both are '{source}'")
        if not unit:
            return Err("Move: unit must be non-empty")
        match PositiveInt.parse(quantity):
            case Err(e):
                return Err(f"Move.quantity: {e}")
            case Ok(q):
                return Ok(Move(source=source, destination=destination, unit=unit, quantity=q))


@final
@dataclass(frozen=True, slots=True)
class Transaction:
    """Atomic batch of moves."""

    tx_id: str
    moves: tuple[Move, ...]
    timestamp: UtcDatetime

    @staticmethod
    def create(
        tx_id: str, moves: tuple[Move, ...], timestamp: UtcDatetime,
    ) -> Ok[Transaction] | Err[str]:
        if not tx_id:
            return Err("Transaction: tx_id must be non-empty")
        if not moves:
            return Err("Transaction: at least one move is required")
        return Ok(Transaction(tx_id=tx_id, moves=moves, timestamp=timestamp))
