"""Ledger state types: CollateralPosition, LedgerTotals.

issued_balance is kept next to minted_debt even though no path exists that
could make them differ: a violation must be observable, not impossible to
express.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import final

from pegvault.core.units import require_non_negative


@final
@dataclass(frozen=True, slots=True)
class CollateralPosition:
    """One account's locked collateral (wei) and outstanding stable-unit debt."""

    account: str
    collateral_amount: int = 0
    minted_debt: int = 0
    issued_balance: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.account, str) or not self.account:
            raise TypeError("CollateralPosition.account must be a non-empty string")
        require_non_negative("CollateralPosition.collateral_amount", self.collateral_amount)
        require_non_negative("CollateralPosition.minted_debt", self.minted_debt)
        require_non_negative("CollateralPosition.issued_balance", self.issued_balance)

    @staticmethod
    def empty(account: str) -> CollateralPosition:
        return CollateralPosition(account=account)

    @property
    def is_zero(self) -> bool:
        return self.collateral_amount == 0 and self.minted_debt == 0 and self.issued_balance == 0

    @property
    def balanced(self) -> bool:
        """minted_debt == issued_balance."""
        return self.minted_debt == self.issued_balance

    def deposit(self, collateral: int, debt: int) -> CollateralPosition:
        return replace(
            self,
            collateral_amount=self.collateral_amount + collateral,
            minted_debt=self.minted_debt + debt,
            issued_balance=self.issued_balance + debt,
        )

    def withdraw(self, collateral: int, debt: int) -> CollateralPosition:
        """Raises TypeError (via __post_init__) if either field would go negative."""
        return replace(
            self,
            collateral_amount=self.collateral_amount - collateral,
            minted_debt=self.minted_debt - debt,
            issued_balance=self.issued_balance - debt,
        )


@final
@dataclass(frozen=True, slots=True)
class LedgerTotals:
    total_issued: int = 0

    def __post_init__(self) -> None:
        require_non_negative("LedgerTotals.total_issued", self.total_issued)

    def issue(self, amount: int) -> LedgerTotals:
        return LedgerTotals(total_issued=self.total_issued + amount)

    def retire(self, amount: int) -> LedgerTotals:
        return LedgerTotals(total_issued=self.total_issued - amount)
