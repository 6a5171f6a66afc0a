"""Double-entry custody of collateral with conservation law enforcement.

Core invariant: for every unit U, sigma(U) = sum_W balance(W, U) is
unchanged by every execute(). Value is only ever moved, never created.

A transaction is rejected as a whole (no balance changes) when:
  - any account it touches is not registered
  - a destination does not accept deposits
  - a non-EXTERNAL account would go negative
  - sigma(U) would change

CustodyEngine is @final but NOT a dataclass -- it holds mutable internal state.
"""

from __future__ import annotations

from collections import defaultdict
from typing import final

from pegvault.core.errors import ConservationViolationError
from pegvault.core.result import Err, Ok
from pegvault.ledger.transactions import (
    Account,
    AccountType,
    ExecuteResult,
    Transaction,
)

_SOURCE = "ledger.custody.CustodyEngine.execute"


def _rejected(tx: Transaction, message: str, code: str, law: str,
              expected: str, actual: str) -> Err[ConservationViolationError]:
    return Err(ConservationViolationError(
        message=message, code=code, timestamp=tx.timestamp, source=_SOURCE,
        law_name=law, expected=expected, actual=actual,
    ))


@final
class CustodyEngine:
    """Holds collateral balances per account; O(1) lookup by (account, unit)."""

    def __init__(self) -> None:
        self._accounts: dict[str, Account] = {}
        self._balances: dict[tuple[str, str], int] = defaultdict(int)
        self._transactions: list[Transaction] = []
        self._applied_tx_ids: set[str] = set()

    def register_account(self, account: Account) -> Ok[None] | Err[str]:
        aid = account.account_id.value
        if aid in self._accounts:
            return Err(f"Account already registered: {aid}")
        self._accounts[aid] = account
        return Ok(None)

    def is_registered(self, account_id: str) -> bool:
        return account_id in self._accounts

    def execute(
        self, tx: Transaction,
    ) -> Ok[ExecuteResult] | Err[ConservationViolationError]:
        """Execute a transaction atomically.

        1. Idempotency: already applied -> Ok(ALREADY_APPLIED)
        2. Verify accounts exist and destinations accept deposits
        3. Pre-compute sigma(U) for affected units
        4. Apply all moves, remembering old balances
        5. Verify no non-EXTERNAL balance is negative and sigma(U) is unchanged
        6. Record transaction, return Ok(APPLIED)

        On any failure after step 4 every balance is restored.
        """
        if tx.tx_id in self._applied_tx_ids:
            return Ok(ExecuteResult.ALREADY_APPLIED)

        for move in tx.moves:
            if move.source not in self._accounts:
                return _rejected(
                    tx, f"Source account not registered: {move.source}",
                    "UNREGISTERED_ACCOUNT", "registered-accounts", "registered", move.source,
                )
            destination = self._accounts.get(move.destination)
            if destination is None:
                return _rejected(
                    tx, f"Destination account not registered: {move.destination}",
                    "UNREGISTERED_ACCOUNT", "registered-accounts", "registered",
                    move.destination,
                )
            if not destination.accepts_deposits:
                return _rejected(
                    tx, f"Destination account rejects deposits: {move.destination}",
                    "RECIPIENT_REJECTED", "recipient-accepts", "accepts_deposits",
                    move.destination,
                )

        affected_units = {m.unit for m in tx.moves}
        pre_sigma = {u: self.total_supply(u) for u in affected_units}

        old_balances: dict[tuple[str, str], int] = {}
        for move in tx.moves:
            src_key = (move.source, move.unit)
            dst_key = (move.destination, move.unit)
            if src_key not in old_balances:
                old_balances[src_key] = self._balances[src_key]
            if dst_key not in old_balances:
                old_balances[dst_key] = self._balances[dst_key]
            self._balances[src_key] -= move.quantity.value
            self._balances[dst_key] += move.quantity.value

        for (account_id, unit) in old_balances:
            balance = self._balances[(account_id, unit)]
            if balance < 0 and self._accounts[account_id].account_type is not AccountType.EXTERNAL:
                self._restore(old_balances)
                return _rejected(
                    tx, f"Insufficient {unit} in {account_id}",
                    "OVERDRAFT", "non-negative-balance", ">= 0", str(balance),
                )

        for u in affected_units:
            post = self.total_supply(u)
            if pre_sigma[u] != post:
                self._restore(old_balances)
                return _rejected(
                    tx, f"Conservation violated for unit {u}",
                    "CONSERVATION_VIOLATION", "sigma-unchanged", str(pre_sigma[u]), str(post),
                )

        self._transactions.append(tx)
        self._applied_tx_ids.add(tx.tx_id)
        return Ok(ExecuteResult.APPLIED)

    def _restore(self, old_balances: dict[tuple[str, str], int]) -> None:
        for key, val in old_balances.items():
            self._balances[key] = val

    def get_balance(self, account_id: str, unit: str) -> int:
        return self._balances.get((account_id, unit), 0)

    def total_supply(self, unit: str) -> int:
        """sigma(U) -- sum of all balances for unit across all accounts."""
        return sum(qty for (_, u), qty in self._balances.items() if u == unit)

    def transaction_count(self) -> int:
        return len(self._transactions)
