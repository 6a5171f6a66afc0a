"""Infrastructure protocol definitions for PegVault.

The vault depends on these abstractions; storage engines, message buses and
custody back-ends implement them. All protocols return
Ok[T] | Err[...]: infrastructure failures are values, never exceptions.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pegvault.core.errors import ConservationViolationError, PersistenceError
from pegvault.core.result import Err, Ok
from pegvault.ledger.position import CollateralPosition, LedgerTotals
from pegvault.ledger.transactions import ExecuteResult, Transaction


@runtime_checkable
class PositionStore(Protocol):
    """Durable account -> CollateralPosition mapping plus the total_issued scalar.

    Invariants:
      - load() returns Ok(None) for an account with no stored position.
      - commit() applies every position and the totals atomically, or nothing.
      - A zero position passed to commit() is deleted, not stored.
    """

    def load(
        self, account: str,
    ) -> Ok[CollateralPosition | None] | Err[PersistenceError]: ...

    def load_totals(self) -> Ok[LedgerTotals] | Err[PersistenceError]: ...

    def accounts(self) -> Ok[tuple[str, ...]] | Err[PersistenceError]: ...

    def commit(
        self, positions: tuple[CollateralPosition, ...], totals: LedgerTotals,
    ) -> Ok[None] | Err[PersistenceError]: ...


@runtime_checkable
class EventBus(Protocol):
    """Append-only notification transport.

    Messages are keyed by account for deterministic partitioning. Values are
    opaque bytes -- serialization is the caller's responsibility.
    """

    def publish(
        self, topic: str, key: str, value: bytes,
    ) -> Ok[None] | Err[PersistenceError]: ...


@runtime_checkable
class CollateralCustody(Protocol):
    """Moves collateral value between accounts, all moves of a tx or none."""

    def execute(
        self, tx: Transaction,
    ) -> Ok[ExecuteResult] | Err[ConservationViolationError]: ...
