"""Health rule shared by redeem, liquidation and queries.

A position is healthy iff it has no debt, or

    collateral_to_usd(collateral, rate) * 100 >= minted_debt * 125

The comparison is cross-multiplied so it never truncates; the only floor in
the rule is the one collateral_to_usd applies, which is the same floor mint
applies before deriving debt.
"""

from __future__ import annotations

from pegvault.core.units import (
    BPS,
    COLLATERAL_RATIO_DENOMINATOR,
    COLLATERAL_RATIO_NUMERATOR,
    collateral_to_usd,
    mintable_debt,
)
from pegvault.ledger.position import CollateralPosition
from pegvault.oracle.price import PriceSample


def is_healthy(position: CollateralPosition, price: PriceSample) -> bool:
    if position.minted_debt == 0:
        return True
    usd = collateral_to_usd(position.collateral_amount, price.rate)
    return usd * COLLATERAL_RATIO_DENOMINATOR >= position.minted_debt * COLLATERAL_RATIO_NUMERATOR


def collateral_ratio_bps(position: CollateralPosition, price: PriceSample) -> int | None:
    """Collateral value / debt in basis points (12500 == 125%). None without debt."""
    if position.minted_debt == 0:
        return None
    usd = collateral_to_usd(position.collateral_amount, price.rate)
    return usd * BPS // position.minted_debt


def max_mintable(position: CollateralPosition, price: PriceSample) -> int:
    """Additional debt the current collateral could back without a new deposit."""
    ceiling = mintable_debt(collateral_to_usd(position.collateral_amount, price.rate))
    return max(ceiling - position.minted_debt, 0)
