"""Mint, redeem and liquidation as pure planning functions.

Each plan_* function takes the current position, the current totals and the
operation's single price sample, and returns either the complete post-state
(plus the amounts to move) or the typed rejection. Nothing here touches
storage or custody; the vault stages, settles and commits a plan.

Conversion rules (floor throughout, see pegvault.core.units):

    mint:    debt     = mintable_debt(collateral_to_usd(deposit, rate))
    redeem:  released = usd_to_collateral(debt_to_usd(amount), rate)
    health:  collateral_to_usd(collateral, rate) * 100 >= debt * 125
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import final

from pegvault.core.errors import (
    LiquidationError,
    LiquidationErrorKind,
    MintError,
    MintErrorKind,
    RedeemError,
    RedeemErrorKind,
)
from pegvault.core.result import Err, Ok
from pegvault.core.types import UtcDatetime
from pegvault.core.units import (
    collateral_to_usd,
    debt_to_usd,
    mintable_debt,
    split_liquidation,
    usd_to_collateral,
)
from pegvault.ledger.health import is_healthy
from pegvault.ledger.position import CollateralPosition, LedgerTotals
from pegvault.oracle.price import PriceSample


def _is_amount(raw: object) -> bool:
    return isinstance(raw, int) and not isinstance(raw, bool)


# ---------------------------------------------------------------------------
# Mint
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class MintPlan:
    position: CollateralPosition
    totals: LedgerTotals
    deposit: int
    debt: int


def _mint_err(kind: MintErrorKind, account: str, message: str) -> Err[MintError]:
    return Err(MintError(
        message=message, code=kind.value, timestamp=UtcDatetime.now(),
        source="ledger.operations.plan_mint", kind=kind, account=account,
    ))


def plan_mint(
    position: CollateralPosition,
    totals: LedgerTotals,
    deposit: int,
    price: PriceSample,
) -> Ok[MintPlan] | Err[MintError]:
    """Lock deposit and issue mintable_debt of its USD value.

    The new tranche sits at or above 125% by construction of the conversion.
    Collateral already in the position may have lost value since it was
    locked, so the whole post-mint position must pass the health rule.
    """
    if not _is_amount(deposit) or deposit <= 0:
        return _mint_err(
            MintErrorKind.ZERO_DEPOSIT, position.account,
            f"deposit must be > 0, got {deposit!r}",
        )
    debt = mintable_debt(collateral_to_usd(deposit, price.rate))
    if debt == 0:
        return _mint_err(
            MintErrorKind.BELOW_MINTING_THRESHOLD, position.account,
            f"deposit of {deposit} wei at rate {price.rate} mints nothing",
        )
    after = position.deposit(deposit, debt)
    if not is_healthy(after, price):
        return _mint_err(
            MintErrorKind.WOULD_UNDERCOLLATERALIZE, position.account,
            f"position would hold {after.collateral_amount} wei against "
            f"{after.minted_debt} debt at rate {price.rate}",
        )
    return Ok(MintPlan(
        position=after,
        totals=totals.issue(debt),
        deposit=deposit,
        debt=debt,
    ))


# ---------------------------------------------------------------------------
# Redeem
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class RedeemPlan:
    position: CollateralPosition
    totals: LedgerTotals
    debt: int
    released: int
    closed: bool


def _redeem_err(kind: RedeemErrorKind, account: str, message: str) -> Err[RedeemError]:
    return Err(RedeemError(
        message=message, code=kind.value, timestamp=UtcDatetime.now(),
        source="ledger.operations.plan_redeem", kind=kind, account=account,
    ))


def plan_redeem(
    position: CollateralPosition,
    totals: LedgerTotals,
    amount: int,
    price: PriceSample,
) -> Ok[RedeemPlan] | Err[RedeemError]:
    """Retire amount of debt and release the collateral it is worth now.

    Health is judged on the post-redeem position, so a partial redeem that
    leaves a thinner but still safe position passes. Retiring the whole debt
    closes the position and releases all of its collateral.
    """
    account = position.account
    if not _is_amount(amount) or amount <= 0:
        return _redeem_err(
            RedeemErrorKind.ZERO_AMOUNT, account, f"amount must be > 0, got {amount!r}",
        )
    if amount > position.minted_debt or amount > position.issued_balance:
        return _redeem_err(
            RedeemErrorKind.INSUFFICIENT_BALANCE, account,
            f"redeeming {amount} exceeds balance {position.issued_balance}",
        )
    owed = usd_to_collateral(debt_to_usd(amount), price.rate)
    if owed > position.collateral_amount:
        return _redeem_err(
            RedeemErrorKind.INSUFFICIENT_COLLATERAL, account,
            f"{amount} debt is worth {owed} wei, position holds {position.collateral_amount}",
        )

    closed = amount == position.minted_debt
    if closed:
        released = position.collateral_amount
        after = CollateralPosition.empty(account)
    else:
        released = owed
        after = position.withdraw(owed, amount)

    if not is_healthy(after, price):
        return _redeem_err(
            RedeemErrorKind.WOULD_UNDERCOLLATERALIZE, account,
            f"position would hold {after.collateral_amount} wei against "
            f"{after.minted_debt} debt at rate {price.rate}",
        )
    return Ok(RedeemPlan(
        position=after,
        totals=totals.retire(amount),
        debt=amount,
        released=released,
        closed=closed,
    ))


# ---------------------------------------------------------------------------
# Liquidation
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class LiquidationPlan:
    position: CollateralPosition
    totals: LedgerTotals
    seized: int
    debt_cleared: int
    owner_share: int
    liquidator_share: int


def plan_liquidation(
    target: CollateralPosition,
    totals: LedgerTotals,
    price: PriceSample,
) -> Ok[LiquidationPlan] | Err[LiquidationError]:
    """Seize all collateral of an unhealthy position and clear its debt.

    owner_share = seized * 75 // 100, liquidator_share = seized - owner_share.
    All-or-nothing: there is no partial liquidation.
    """
    if target.minted_debt == 0 or is_healthy(target, price):
        return Err(LiquidationError(
            message=f"position {target.account} is healthy at rate {price.rate}",
            code=LiquidationErrorKind.POSITION_HEALTHY.value,
            timestamp=UtcDatetime.now(),
            source="ledger.operations.plan_liquidation",
            kind=LiquidationErrorKind.POSITION_HEALTHY,
            target=target.account,
        ))
    seized = target.collateral_amount
    owner_share, liquidator_share = split_liquidation(seized)
    return Ok(LiquidationPlan(
        position=CollateralPosition.empty(target.account),
        totals=totals.retire(target.minted_debt),
        seized=seized,
        debt_cleared=target.minted_debt,
        owner_share=owner_share,
        liquidator_share=liquidator_share,
    ))
