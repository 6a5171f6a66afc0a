"""Tests for pegvault.core.serialization and pegvault.ledger.events."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal

from hypothesis import given
from hypothesis import strategies as st

from pegvault.core.result import Err, Ok, unwrap
from pegvault.core.serialization import canonical_bytes
from pegvault.core.types import NonEmptyStr, UtcDatetime
from pegvault.ledger.events import (
    Liquidated,
    LiquidationReceipt,
    MintReceipt,
    Minted,
    RedeemReceipt,
    Redeemed,
    notification_for,
    notification_key,
)
from pegvault.oracle.price import PriceSample

_NOW = UtcDatetime(value=datetime(2025, 6, 15, 12, 0, tzinfo=UTC))
_PRICE = PriceSample(rate=2_000 * 10**8, valid_at=1)


class TestCanonicalBytes:
    def test_returns_result(self) -> None:
        assert isinstance(canonical_bytes(42), Ok)

    def test_int_written_as_string(self) -> None:
        assert unwrap(canonical_bytes(10**30)) == b'"1000000000000000000000000000000"'

    def test_bool_stays_bool(self) -> None:
        assert unwrap(canonical_bytes(True)) == b"true"

    def test_decimal_zero_canonical(self) -> None:
        assert unwrap(canonical_bytes(Decimal("0.00"))) == b'"0"'

    def test_non_empty_str(self) -> None:
        assert unwrap(canonical_bytes(NonEmptyStr(value="alice"))) == b'"alice"'

    def test_naive_datetime_rejected(self) -> None:
        assert isinstance(canonical_bytes(datetime(2025, 1, 1)), Err)  # noqa: DTZ001

    def test_unsupported_type(self) -> None:
        assert isinstance(canonical_bytes(object()), Err)

    def test_dataclass_sorted_and_typed(self) -> None:
        @dataclass(frozen=True)
        class Sample:
            b: int
            a: str

        assert unwrap(canonical_bytes(Sample(b=1, a="x"))) == b'{"_type":"Sample","a":"x","b":"1"}'

    @given(st.dictionaries(st.text(max_size=5), st.integers(), max_size=5))
    def test_deterministic(self, d: dict[str, int]) -> None:
        assert canonical_bytes(d) == canonical_bytes(dict(reversed(list(d.items()))))


class TestNotifications:
    def test_minted(self) -> None:
        receipt = MintReceipt(
            account="alice", collateral_deposited=5, debt_minted=4, price=_PRICE,
            tx_id="mint-1", timestamp=_NOW,
        )
        n = notification_for(receipt)
        assert n == Minted(
            account="alice", collateral_amount=5, debt_amount=4, tx_id="mint-1", timestamp=_NOW,
        )
        assert notification_key(n) == "alice"

    def test_redeemed(self) -> None:
        receipt = RedeemReceipt(
            account="bob", debt_retired=4, collateral_released=5, closed=True, price=_PRICE,
            tx_id="redeem-1", timestamp=_NOW,
        )
        n = notification_for(receipt)
        assert isinstance(n, Redeemed)
        assert (n.debt_amount, n.collateral_amount) == (4, 5)
        assert notification_key(n) == "bob"

    def test_liquidated_keyed_by_target(self) -> None:
        receipt = LiquidationReceipt(
            target="alice", liquidator="bob", owner="owner", collateral_seized=100,
            debt_cleared=80, owner_share=75, liquidator_share=25, price=_PRICE,
            tx_id="liquidate-1", timestamp=_NOW,
        )
        n = notification_for(receipt)
        assert isinstance(n, Liquidated)
        assert notification_key(n) == "alice"

    def test_payload_shape(self) -> None:
        n = Minted(
            account="alice", collateral_amount=5, debt_amount=4, tx_id="mint-1", timestamp=_NOW,
        )
        payload = json.loads(unwrap(canonical_bytes(n)))
        assert payload == {
            "_type": "Minted",
            "account": "alice",
            "collateral_amount": "5",
            "debt_amount": "4",
            "timestamp": "2025-06-15T12:00:00+00:00",
            "tx_id": "mint-1",
        }
