"""Tests for pegvault.workflow.converter -- Temporal payload round-trips."""

from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest

from pegvault.core.types import UtcDatetime
from pegvault.ledger.events import LiquidationReceipt, MintReceipt
from pegvault.ledger.position import CollateralPosition, LedgerTotals
from pegvault.oracle.price import PriceSample
from pegvault.workflow.converter import PEGVAULT_DATA_CONVERTER, _from_json, _to_json
from pegvault.workflow.types import (
    LiquidationOutput,
    MintInput,
    MintOutput,
    OperationFailure,
    PositionOutput,
)

ETH = 10**18
_NOW = UtcDatetime(value=datetime(2025, 6, 15, 12, 0, tzinfo=UTC))
_PRICE = PriceSample(rate=2_000 * 10**8, valid_at=4)


async def _round_trip(value: object, hint: type) -> object:
    payloads = await PEGVAULT_DATA_CONVERTER.encode([value])
    (decoded,) = await PEGVAULT_DATA_CONVERTER.decode(payloads, [hint])
    return decoded


class TestToJson:
    def test_small_int_stays_native(self) -> None:
        assert _to_json(42) == 42

    def test_large_int_is_tagged(self) -> None:
        assert _to_json(100 * ETH) == {"__int__": str(100 * ETH)}

    def test_bool_is_not_an_int(self) -> None:
        assert _to_json(True) is True

    def test_dataclass_is_tagged(self) -> None:
        encoded = _to_json(_PRICE)
        assert encoded["__type__"] == "pegvault.oracle.price.PriceSample"
        assert encoded["rate"] == 2_000 * 10**8

    def test_payload_is_plain_json(self) -> None:
        json.dumps(_to_json(MintInput(caller="alice", deposit=ETH)))


class TestFromJson:
    def test_refuses_types_outside_allowlist(self) -> None:
        with pytest.raises(TypeError, match="Refusing"):
            _from_json(object, {"__type__": "os.system"})

    def test_large_int(self) -> None:
        assert _from_json(int, {"__int__": str(10**30)}) == 10**30

    def test_list_becomes_tuple(self) -> None:
        assert _from_json(tuple, [1, 2]) == (1, 2)


@pytest.mark.asyncio
async def test_mint_input_round_trip() -> None:
    value = MintInput(caller="alice", deposit=62_500_000_000_000_000)
    assert await _round_trip(value, MintInput) == value


@pytest.mark.asyncio
async def test_mint_output_round_trip() -> None:
    value = MintOutput(receipt=MintReceipt(
        account="alice",
        collateral_deposited=62_500_000_000_000_000,
        debt_minted=100 * ETH,
        price=_PRICE,
        tx_id="mint-abc",
        timestamp=_NOW,
    ))
    assert await _round_trip(value, MintOutput) == value


@pytest.mark.asyncio
async def test_liquidation_output_round_trip() -> None:
    value = LiquidationOutput(receipt=LiquidationReceipt(
        target="alice",
        liquidator="bob",
        owner="owner",
        collateral_seized=62_500_000_000_000_000,
        debt_cleared=100 * ETH,
        owner_share=46_875_000_000_000_000,
        liquidator_share=15_625_000_000_000_000,
        price=_PRICE,
        tx_id="liquidate-abc",
        timestamp=_NOW,
    ))
    assert await _round_trip(value, LiquidationOutput) == value


@pytest.mark.asyncio
async def test_error_output_round_trip() -> None:
    value = MintOutput(error=OperationFailure(
        code="ZERO_DEPOSIT", message="deposit must be > 0, got 0", source="plan_mint",
    ))
    assert await _round_trip(value, MintOutput) == value


@pytest.mark.asyncio
async def test_position_output_round_trip() -> None:
    value = PositionOutput(
        position=CollateralPosition(
            account="alice",
            collateral_amount=10**40,
            minted_debt=100 * ETH,
            issued_balance=100 * ETH,
        ),
        totals=LedgerTotals(total_issued=100 * ETH),
    )
    assert await _round_trip(value, PositionOutput) == value
