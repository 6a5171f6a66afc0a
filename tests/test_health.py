"""Tests for pegvault.ledger.health -- the 125% rule."""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from pegvault.core.units import collateral_to_usd, mintable_debt
from pegvault.ledger.health import collateral_ratio_bps, is_healthy, max_mintable
from pegvault.ledger.position import CollateralPosition
from pegvault.oracle.price import PriceSample

ETH = 10**18
SIXTEENTH = 62_500_000_000_000_000


def _price(usd: int) -> PriceSample:
    return PriceSample(rate=usd * 10**8, valid_at=1)


def _pos(collateral: int, debt: int) -> CollateralPosition:
    return CollateralPosition(
        account="alice", collateral_amount=collateral, minted_debt=debt, issued_balance=debt,
    )


class TestIsHealthy:
    def test_no_debt_is_healthy(self) -> None:
        assert is_healthy(_pos(0, 0), _price(1))
        assert is_healthy(_pos(ETH, 0), _price(1))

    def test_exactly_125_percent(self) -> None:
        assert is_healthy(_pos(SIXTEENTH, 100 * ETH), _price(2_000))

    def test_one_unit_over_the_line(self) -> None:
        assert not is_healthy(_pos(SIXTEENTH, 100 * ETH + 1), _price(2_000))

    def test_price_drop_makes_unhealthy(self) -> None:
        assert not is_healthy(_pos(SIXTEENTH, 100 * ETH), _price(1_500))

    def test_debt_without_collateral(self) -> None:
        assert not is_healthy(_pos(0, 1), _price(2_000))

    @given(
        st.integers(min_value=1, max_value=10**6 * ETH),
        st.integers(min_value=1, max_value=10**6),
    )
    def test_mintable_debt_is_always_healthy(self, collateral: int, usd: int) -> None:
        price = _price(usd)
        debt = mintable_debt(collateral_to_usd(collateral, price.rate))
        assert is_healthy(_pos(collateral, debt), price)


class TestRatio:
    def test_ratio_none_without_debt(self) -> None:
        assert collateral_ratio_bps(_pos(ETH, 0), _price(2_000)) is None

    def test_ratio_at_threshold(self) -> None:
        assert collateral_ratio_bps(_pos(SIXTEENTH, 100 * ETH), _price(2_000)) == 12_500

    def test_ratio_after_drop(self) -> None:
        assert collateral_ratio_bps(_pos(SIXTEENTH, 100 * ETH), _price(1_500)) == 9_375


class TestMaxMintable:
    def test_fresh_collateral(self) -> None:
        assert max_mintable(_pos(SIXTEENTH, 0), _price(2_000)) == 100 * ETH

    def test_fully_drawn(self) -> None:
        assert max_mintable(_pos(SIXTEENTH, 100 * ETH), _price(2_000)) == 0

    def test_underwater_is_zero(self) -> None:
        assert max_mintable(_pos(SIXTEENTH, 100 * ETH), _price(1_000)) == 0

    def test_price_rise_frees_headroom(self) -> None:
        assert max_mintable(_pos(SIXTEENTH, 100 * ETH), _price(4_000)) == 100 * ETH
