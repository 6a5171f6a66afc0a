"""Activity payloads for hosting the vault behind a Temporal worker.

Every activity takes one frozen-dataclass input and returns a frozen-dataclass
output carrying either the result or an OperationFailure, never both.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import final

from pegvault.core.errors import PegVaultError
from pegvault.ledger.events import LiquidationReceipt, MintReceipt, RedeemReceipt
from pegvault.ledger.position import CollateralPosition, LedgerTotals

# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class MintInput:
    caller: str
    deposit: int


@final
@dataclass(frozen=True, slots=True)
class RedeemInput:
    caller: str
    amount: int


@final
@dataclass(frozen=True, slots=True)
class LiquidationInput:
    caller: str
    target: str


@final
@dataclass(frozen=True, slots=True)
class PositionQuery:
    account: str


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class OperationFailure:
    """Wire form of a PegVaultError: code is the machine-matchable part."""

    code: str
    message: str
    source: str

    @staticmethod
    def of(error: PegVaultError) -> OperationFailure:
        return OperationFailure(code=error.code, message=error.message, source=error.source)


@final
@dataclass(frozen=True, slots=True)
class MintOutput:
    receipt: MintReceipt | None = None
    error: OperationFailure | None = None


@final
@dataclass(frozen=True, slots=True)
class RedeemOutput:
    receipt: RedeemReceipt | None = None
    error: OperationFailure | None = None


@final
@dataclass(frozen=True, slots=True)
class LiquidationOutput:
    receipt: LiquidationReceipt | None = None
    error: OperationFailure | None = None


@final
@dataclass(frozen=True, slots=True)
class PositionOutput:
    position: CollateralPosition | None = None
    totals: LedgerTotals | None = None
    error: OperationFailure | None = None
