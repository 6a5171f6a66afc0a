"""Tests for pegvault.oracle.price -- samples, static oracle, round-data adapter."""

from __future__ import annotations

from dataclasses import dataclass

import pytest
from hypothesis import given
from hypothesis import strategies as st

from pegvault.core.errors import OracleError, OracleErrorKind
from pegvault.core.result import Err, Ok, unwrap
from pegvault.oracle.price import (
    PriceOracle,
    PriceSample,
    RoundDataOracle,
    StaticPriceOracle,
)

RATE_2000 = 2_000 * 10**8


@dataclass
class _Feed:
    round_id: int = 10
    answer: int = RATE_2000
    started_at: int = 1_700_000_000
    updated_at: int = 1_700_000_060
    answered_in_round: int = 10
    feed_decimals: int = 8

    def latest_round_data(self) -> tuple[int, int, int, int, int]:
        return (
            self.round_id, self.answer, self.started_at, self.updated_at,
            self.answered_in_round,
        )

    def decimals(self) -> int:
        return self.feed_decimals


class TestPriceSample:
    def test_create(self) -> None:
        sample = unwrap(PriceSample.create(RATE_2000, 1, "test"))
        assert sample.rate == RATE_2000

    @pytest.mark.parametrize("rate", [0, -1])
    def test_create_rejects_non_positive(self, rate: int) -> None:
        match PriceSample.create(rate, 3, "test"):
            case Err(OracleError() as e):
                assert e.kind is OracleErrorKind.INVALID_PRICE
                assert e.round_id == 3
            case _:
                pytest.fail("expected OracleError")

    def test_constructor_guard(self) -> None:
        with pytest.raises(TypeError):
            PriceSample(rate=0, valid_at=1)


class TestStaticPriceOracle:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(StaticPriceOracle(RATE_2000), PriceOracle)

    def test_sample(self) -> None:
        oracle = StaticPriceOracle(RATE_2000)
        assert unwrap(oracle.sample()).rate == RATE_2000
        assert oracle.samples_taken == 1

    def test_set_rate_opens_new_round(self) -> None:
        oracle = StaticPriceOracle(RATE_2000)
        first = unwrap(oracle.sample())
        oracle.set_rate(1_500 * 10**8)
        second = unwrap(oracle.sample())
        assert second.rate == 1_500 * 10**8
        assert second.valid_at == first.valid_at + 1

    def test_broken_rate_is_invalid_price(self) -> None:
        oracle = StaticPriceOracle(RATE_2000)
        oracle.set_rate(0)
        assert isinstance(oracle.sample(), Err)


class TestRoundDataOracle:
    def test_fresh_round(self) -> None:
        assert RoundDataOracle(_Feed()).sample() == Ok(PriceSample(rate=RATE_2000, valid_at=10))

    def test_satisfies_protocol(self) -> None:
        assert isinstance(RoundDataOracle(_Feed()), PriceOracle)

    @pytest.mark.parametrize("answer", [0, -RATE_2000])
    def test_non_positive_answer(self, answer: int) -> None:
        assert isinstance(RoundDataOracle(_Feed(answer=answer)).sample(), Err)

    def test_incomplete_round(self) -> None:
        result = RoundDataOracle(_Feed(updated_at=0)).sample()
        assert isinstance(result, Err)
        assert "incomplete" in result.error.message

    def test_stale_answer(self) -> None:
        result = RoundDataOracle(_Feed(answered_in_round=9)).sample()
        assert isinstance(result, Err)
        assert result.error.round_id == 10

    def test_rescales_18_decimal_feed(self) -> None:
        feed = _Feed(answer=2_000 * 10**18, feed_decimals=18)
        assert unwrap(RoundDataOracle(feed).sample()).rate == RATE_2000

    def test_answer_that_rescales_to_zero(self) -> None:
        feed = _Feed(answer=5, feed_decimals=18)
        assert isinstance(RoundDataOracle(feed).sample(), Err)

    @given(st.integers(min_value=1, max_value=10**15), st.integers(min_value=0, max_value=8))
    def test_positive_answers_up_to_8_decimals_pass(self, answer: int, decimals: int) -> None:
        feed = _Feed(answer=answer, feed_decimals=decimals)
        assert unwrap(RoundDataOracle(feed).sample()).rate == answer * 10 ** (8 - decimals)
