"""Error value hierarchy. No vault operation raises for a domain failure.

Every error is a frozen dataclass value that can be pattern-matched,
serialized, and published. Base class PegVaultError; one @final subclass per
failing surface. Operation errors carry a `kind` enum naming the exact
rejection so callers can match on it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import final

from pegvault.core.types import UtcDatetime


@dataclass(frozen=True, slots=True)
class PegVaultError:
    """Base error value. NOT @final -- has subclasses."""

    message: str
    code: str
    timestamp: UtcDatetime
    source: str  # "module.function" that produced this error

    def with_context[E: PegVaultError](self: E, context: str) -> E:
        """Return a copy of the same error type with context prepended to message."""
        return replace(self, message=f"{context}: {self.message}")

    def to_dict(self) -> dict[str, object]:
        return {
            "message": self.message,
            "code": self.code,
            "timestamp": self.timestamp.value.isoformat(),
            "source": self.source,
        }


# ---------------------------------------------------------------------------
# Kinds
# ---------------------------------------------------------------------------


class OracleErrorKind(Enum):
    INVALID_PRICE = "INVALID_PRICE"


class MintErrorKind(Enum):
    ZERO_DEPOSIT = "ZERO_DEPOSIT"
    BELOW_MINTING_THRESHOLD = "BELOW_MINTING_THRESHOLD"
    WOULD_UNDERCOLLATERALIZE = "WOULD_UNDERCOLLATERALIZE"
    TRANSFER_FAILED = "TRANSFER_FAILED"


class RedeemErrorKind(Enum):
    ZERO_AMOUNT = "ZERO_AMOUNT"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    INSUFFICIENT_COLLATERAL = "INSUFFICIENT_COLLATERAL"
    WOULD_UNDERCOLLATERALIZE = "WOULD_UNDERCOLLATERALIZE"
    TRANSFER_FAILED = "TRANSFER_FAILED"


class LiquidationErrorKind(Enum):
    POSITION_HEALTHY = "POSITION_HEALTHY"
    TRANSFER_FAILED = "TRANSFER_FAILED"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class OracleError(PegVaultError):
    """The price source returned an unusable sample. Hard stop, never retried."""

    kind: OracleErrorKind
    round_id: int | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            **PegVaultError.to_dict(self),
            "kind": self.kind.value,
            "round_id": self.round_id,
        }


@final
@dataclass(frozen=True, slots=True)
class MintError(PegVaultError):
    kind: MintErrorKind
    account: str

    def to_dict(self) -> dict[str, object]:
        return {**PegVaultError.to_dict(self), "kind": self.kind.value, "account": self.account}


@final
@dataclass(frozen=True, slots=True)
class RedeemError(PegVaultError):
    kind: RedeemErrorKind
    account: str

    def to_dict(self) -> dict[str, object]:
        return {**PegVaultError.to_dict(self), "kind": self.kind.value, "account": self.account}


@final
@dataclass(frozen=True, slots=True)
class LiquidationError(PegVaultError):
    kind: LiquidationErrorKind
    target: str

    def to_dict(self) -> dict[str, object]:
        return {**PegVaultError.to_dict(self), "kind": self.kind.value, "target": self.target}


@final
@dataclass(frozen=True, slots=True)
class ReentrancyError(PegVaultError):
    """An operation was invoked while another one was in flight on this thread."""

    operation: str

    def to_dict(self) -> dict[str, object]:
        return {**PegVaultError.to_dict(self), "operation": self.operation}


@final
@dataclass(frozen=True, slots=True)
class ConservationViolationError(PegVaultError):
    """A custody transfer was rejected; no balance changed."""

    law_name: str
    expected: str
    actual: str

    def to_dict(self) -> dict[str, object]:
        return {
            **PegVaultError.to_dict(self),
            "law_name": self.law_name,
            "expected": self.expected,
            "actual": self.actual,
        }


@final
@dataclass(frozen=True, slots=True)
class PersistenceError(PegVaultError):
    """Position storage operation failed."""

    operation: str

    def to_dict(self) -> dict[str, object]:
        return {**PegVaultError.to_dict(self), "operation": self.operation}
