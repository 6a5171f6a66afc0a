"""Fixed-point units, protocol constants and price conversions.

Amounts are Python ints in smallest units:
  - collateral (ETH) in wei, 18 fractional digits
  - stable-unit debt in 18 fractional digits
  - oracle rate in USD per 1 ETH with 8 fractional digits

Rounding policy: integer floor division everywhere, applied at the same
point in the forward (collateral -> USD -> debt) and reverse
(debt -> USD -> collateral) conversions. Health is compared by
cross-multiplication so it never truncates.

Decimal is only used to render amounts for humans (logs, demo output), under
PEGVAULT_DECIMAL_CONTEXT.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN as _ROUND_HALF_EVEN
from decimal import (
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
    localcontext,
)
from typing import final

from pegvault.core.result import Err, Ok

COLLATERAL_DECIMALS = 18
STABLE_DECIMALS = 18
FEED_DECIMALS = 8

PRECISION = 10**18
# Lifts an 8-decimal feed rate onto the 18-decimal USD scale.
ADDITIONAL_FEED_PRECISION = 10 ** (STABLE_DECIMALS - FEED_DECIMALS)

COLLATERAL_RATIO_NUMERATOR = 125
COLLATERAL_RATIO_DENOMINATOR = 100

LIQUIDATION_OWNER_SHARE_NUMERATOR = 75
LIQUIDATION_SHARE_DENOMINATOR = 100

BPS = 10_000

PEGVAULT_DECIMAL_CONTEXT = Context(
    prec=78,
    rounding=_ROUND_HALF_EVEN,
    Emin=-999999,
    Emax=999999,
    capitals=1,
    clamp=0,
    flags=[],
    traps=[InvalidOperation, DivisionByZero, Overflow],
)


def _is_int(raw: object) -> bool:
    # bool is an int subclass and never a valid amount
    return isinstance(raw, int) and not isinstance(raw, bool)


@final
@dataclass(frozen=True, slots=True)
class PositiveInt:
    """Integer amount constrained to be > 0."""

    value: int

    def __post_init__(self) -> None:
        if not _is_int(self.value) or self.value <= 0:
            raise TypeError(f"PositiveInt requires int > 0, got {self.value!r}")

    @staticmethod
    def parse(raw: int) -> Ok[PositiveInt] | Err[str]:
        if not _is_int(raw):
            return Err(f"PositiveInt requires int, got {type(raw).__name__}")
        if raw <= 0:
            return Err(f"PositiveInt requires > 0, got {raw}")
        return Ok(PositiveInt(value=raw))


def require_non_negative(name: str, value: int) -> None:
    """Raise TypeError unless value is a non-negative int (dataclass guards)."""
    if not _is_int(value) or value < 0:
        raise TypeError(f"{name} must be int >= 0, got {value!r}")


# ---------------------------------------------------------------------------
# Conversions (floor throughout)
# ---------------------------------------------------------------------------


def collateral_to_usd(collateral_wei: int, rate: int) -> int:
    """USD value (18 decimals) of collateral_wei at an 8-decimal rate."""
    return collateral_wei * rate * ADDITIONAL_FEED_PRECISION // PRECISION


def usd_to_collateral(usd: int, rate: int) -> int:
    """Collateral (wei) bought by usd (18 decimals) at an 8-decimal rate."""
    return usd * PRECISION // (rate * ADDITIONAL_FEED_PRECISION)


def mintable_debt(usd: int) -> int:
    """Debt issuable against usd of collateral at the fixed 125% ratio."""
    return usd * COLLATERAL_RATIO_DENOMINATOR // COLLATERAL_RATIO_NUMERATOR


def debt_to_usd(debt: int) -> int:
    """Collateral USD value that backs debt at the fixed 125% ratio."""
    return debt * COLLATERAL_RATIO_NUMERATOR // COLLATERAL_RATIO_DENOMINATOR


def split_liquidation(seized: int) -> tuple[int, int]:
    """(owner_share, liquidator_share); the two always sum to seized."""
    owner_share = seized * LIQUIDATION_OWNER_SHARE_NUMERATOR // LIQUIDATION_SHARE_DENOMINATOR
    return owner_share, seized - owner_share


def rescale(amount: int, from_decimals: int, to_decimals: int) -> int:
    """Move amount between fixed-point scales (floor when reducing)."""
    if from_decimals == to_decimals:
        return amount
    if from_decimals < to_decimals:
        return amount * 10 ** (to_decimals - from_decimals)
    return amount // 10 ** (from_decimals - to_decimals)


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------


def to_decimal(amount: int, decimals: int) -> Decimal:
    """Render a smallest-unit int as a Decimal of whole units (exact)."""
    with localcontext(PEGVAULT_DECIMAL_CONTEXT):
        return Decimal(amount).scaleb(-decimals)


def from_decimal(value: Decimal, decimals: int) -> Ok[int] | Err[str]:
    """Parse a whole-unit Decimal into smallest units; rejects sub-unit dust."""
    if not isinstance(value, Decimal) or not value.is_finite():
        return Err(f"from_decimal requires finite Decimal, got {value!r}")
    with localcontext(PEGVAULT_DECIMAL_CONTEXT):
        scaled = value.scaleb(decimals)
        if scaled != scaled.to_integral_value():
            return Err(f"{value} has more than {decimals} fractional digits")
        return Ok(int(scaled))
