"""Price oracle contract consumed by the vault, plus two adapters.

The vault never computes or caches a price. Every operation calls
PriceOracle.sample() exactly once and uses that PriceSample throughout.
A sample that cannot be trusted is an Err[OracleError] and stops the
operation before any state is touched.

Adapters:
  StaticPriceOracle -- host-pushed rate (tests, demo, manual feeds)
  RoundDataOracle   -- aggregator-style feed exposing latest_round_data()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, final, runtime_checkable

from pegvault.core.errors import OracleError, OracleErrorKind
from pegvault.core.result import Err, Ok
from pegvault.core.types import UtcDatetime
from pegvault.core.units import FEED_DECIMALS, rescale


@final
@dataclass(frozen=True, slots=True)
class PriceSample:
    """USD per 1 collateral unit, 8 fractional digits, observed in round valid_at."""

    rate: int
    valid_at: int

    def __post_init__(self) -> None:
        if not isinstance(self.rate, int) or isinstance(self.rate, bool) or self.rate <= 0:
            raise TypeError(f"PriceSample.rate must be int > 0, got {self.rate!r}")

    @staticmethod
    def create(rate: int, valid_at: int, source: str) -> Ok[PriceSample] | Err[OracleError]:
        if not isinstance(rate, int) or isinstance(rate, bool) or rate <= 0:
            return Err(invalid_price(f"rate must be a positive int, got {rate!r}", source, valid_at))
        return Ok(PriceSample(rate=rate, valid_at=valid_at))


def invalid_price(detail: str, source: str, round_id: int | None = None) -> OracleError:
    return OracleError(
        message=detail,
        code="INVALID_PRICE",
        timestamp=UtcDatetime.now(),
        source=source,
        kind=OracleErrorKind.INVALID_PRICE,
        round_id=round_id,
    )


@runtime_checkable
class PriceOracle(Protocol):
    """Source of the collateral/USD rate. One call per vault operation."""

    def sample(self) -> Ok[PriceSample] | Err[OracleError]: ...


# ---------------------------------------------------------------------------
# StaticPriceOracle
# ---------------------------------------------------------------------------


@final
class StaticPriceOracle:
    """Oracle whose rate is pushed by the host. Each push opens a new round."""

    def __init__(self, rate: int) -> None:
        self._rate = rate
        self._round = 1
        self._samples_taken = 0

    def set_rate(self, rate: int) -> None:
        """Publish a new rate. Non-positive values are accepted and reported
        as INVALID_PRICE by sample(), mirroring a broken upstream feed."""
        self._rate = rate
        self._round += 1

    @property
    def rate(self) -> int:
        return self._rate

    @property
    def samples_taken(self) -> int:
        return self._samples_taken

    def sample(self) -> Ok[PriceSample] | Err[OracleError]:
        self._samples_taken += 1
        return PriceSample.create(self._rate, self._round, "oracle.price.StaticPriceOracle.sample")


# ---------------------------------------------------------------------------
# RoundDataOracle
# ---------------------------------------------------------------------------


class RoundDataFeed(Protocol):
    """Aggregator feed: latest_round_data() returns
    (round_id, answer, started_at, updated_at, answered_in_round)."""

    def latest_round_data(self) -> tuple[int, int, int, int, int]: ...

    def decimals(self) -> int: ...


@final
class RoundDataOracle:
    """Adapts a RoundDataFeed to PriceOracle.

    Rejects (INVALID_PRICE):
      - answer <= 0
      - updated_at == 0 (round not complete)
      - answered_in_round < round_id (answer carried over from a stale round)
      - an answer that rescales to zero at 8 decimals
    """

    def __init__(self, feed: RoundDataFeed) -> None:
        self._feed = feed

    def sample(self) -> Ok[PriceSample] | Err[OracleError]:
        source = "oracle.price.RoundDataOracle.sample"
        round_id, answer, _started_at, updated_at, answered_in_round = (
            self._feed.latest_round_data()
        )
        if answer <= 0:
            return Err(invalid_price(f"feed answer must be > 0, got {answer}", source, round_id))
        if updated_at == 0:
            return Err(invalid_price(f"round {round_id} is incomplete", source, round_id))
        if answered_in_round < round_id:
            return Err(invalid_price(
                f"stale answer: answered in round {answered_in_round}, latest {round_id}",
                source, round_id,
            ))
        rate = rescale(answer, self._feed.decimals(), FEED_DECIMALS)
        return PriceSample.create(rate, round_id, source)
