"""In-memory implementations of the storage and event protocols.

Let the whole suite (and the demo) run without a database or broker.
All classes are @final. None of them are production code.
"""

from __future__ import annotations

from typing import final

from pegvault.core.errors import PersistenceError
from pegvault.core.result import Err, Ok
from pegvault.core.types import UtcDatetime
from pegvault.ledger.position import CollateralPosition, LedgerTotals


def _persistence_error(operation: str, detail: str) -> PersistenceError:
    return PersistenceError(
        message=detail,
        code="PERSISTENCE_ERROR",
        timestamp=UtcDatetime.now(),
        source=f"memory_adapter.{operation}",
        operation=operation,
    )


@final
class InMemoryPositionStore:
    """Dict-backed position store. commit() swaps state in one step."""

    def __init__(self) -> None:
        self._positions: dict[str, CollateralPosition] = {}
        self._totals = LedgerTotals()
        self._fail_next_commit = False

    def load(
        self, account: str,
    ) -> Ok[CollateralPosition | None] | Err[PersistenceError]:
        return Ok(self._positions.get(account))

    def load_totals(self) -> Ok[LedgerTotals] | Err[PersistenceError]:
        return Ok(self._totals)

    def accounts(self) -> Ok[tuple[str, ...]] | Err[PersistenceError]:
        return Ok(tuple(sorted(self._positions)))

    def commit(
        self, positions: tuple[CollateralPosition, ...], totals: LedgerTotals,
    ) -> Ok[None] | Err[PersistenceError]:
        if self._fail_next_commit:
            self._fail_next_commit = False
            return Err(_persistence_error("commit", "injected commit failure"))
        updated = dict(self._positions)
        for position in positions:
            if position.is_zero:
                updated.pop(position.account, None)
            else:
                updated[position.account] = position
        self._positions = updated
        self._totals = totals
        return Ok(None)

    def fail_next_commit(self) -> None:
        """Test-only helper: the next commit() returns Err and changes nothing."""
        self._fail_next_commit = True

    def count(self) -> int:
        """Test-only helper."""
        return len(self._positions)


@final
class InMemoryEventBus:
    """In-memory event bus. Messages stored per-topic as (key, value) pairs."""

    def __init__(self) -> None:
        self._topics: dict[str, list[tuple[str, bytes]]] = {}
        self._down = False

    def publish(
        self, topic: str, key: str, value: bytes,
    ) -> Ok[None] | Err[PersistenceError]:
        if self._down:
            return Err(_persistence_error("publish", f"bus unavailable for topic {topic}"))
        self._topics.setdefault(topic, []).append((key, value))
        return Ok(None)

    def set_down(self, down: bool) -> None:
        """Test-only helper: while down, publish() returns Err."""
        self._down = down

    def get_messages(self, topic: str) -> list[tuple[str, bytes]]:
        """Test-only helper."""
        return list(self._topics.get(topic, []))
