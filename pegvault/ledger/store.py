"""Position ledger over a PositionStore, with a staged transaction scope.

Reads go through the store. Writes are staged in a LedgerScope and reach the
store in a single commit(); discarding a scope leaves no trace. Positions
are created on first touch by explicit lookup-or-insert of a zero position.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, final

from pegvault.core.errors import PersistenceError
from pegvault.core.result import Err, Ok
from pegvault.ledger.position import CollateralPosition, LedgerTotals

if TYPE_CHECKING:
    from pegvault.infra.protocols import PositionStore


@final
class LedgerScope:
    """Staged mutations for one operation. Not thread-safe; one per operation."""

    def __init__(self, store: PositionStore, totals: LedgerTotals) -> None:
        self._store = store
        self._staged: dict[str, CollateralPosition] = {}
        self.totals = totals

    def get(self, account: str) -> Ok[CollateralPosition] | Err[PersistenceError]:
        """Lookup-or-insert: staged value, else stored value, else a zero position."""
        staged = self._staged.get(account)
        if staged is not None:
            return Ok(staged)
        match self._store.load(account):
            case Err() as e:
                return e
            case Ok(stored):
                position = stored if stored is not None else CollateralPosition.empty(account)
        self._staged[account] = position
        return Ok(position)

    def put(self, position: CollateralPosition) -> None:
        self._staged[position.account] = position

    @property
    def staged(self) -> tuple[CollateralPosition, ...]:
        return tuple(self._staged[a] for a in sorted(self._staged))

    def commit(self) -> Ok[None] | Err[PersistenceError]:
        return self._store.commit(self.staged, self.totals)


@final
class PositionLedger:
    """Read side of the ledger plus the factory for LedgerScopes."""

    def __init__(self, store: PositionStore) -> None:
        self._store = store

    def begin(self) -> Ok[LedgerScope] | Err[PersistenceError]:
        match self._store.load_totals():
            case Err() as e:
                return e
            case Ok(totals):
                return Ok(LedgerScope(self._store, totals))

    def position(self, account: str) -> Ok[CollateralPosition] | Err[PersistenceError]:
        """Zero position for accounts never seen or fully closed."""
        return self._store.load(account).map(
            lambda p: p if p is not None else CollateralPosition.empty(account),
        )

    def totals(self) -> Ok[LedgerTotals] | Err[PersistenceError]:
        return self._store.load_totals()

    def positions(self) -> Ok[tuple[CollateralPosition, ...]] | Err[PersistenceError]:
        """All non-zero positions, ordered by account."""
        match self._store.accounts():
            case Err() as e:
                return e
            case Ok(accounts):
                pass
        found: list[CollateralPosition] = []
        for account in accounts:
            match self._store.load(account):
                case Err() as e:
                    return e
                case Ok(position):
                    if position is not None and not position.is_zero:
                        found.append(position)
        return Ok(tuple(found))
