"""Temporal activities exposing the vault's operations.

Activities are thin IO wrappers. All domain logic lives in the Vault.

Each activity:
- Is an @activity.defn method on VaultActivities, bound to one Vault
- Takes a single frozen-dataclass input
- Returns a frozen-dataclass output with either a result or an error
- Runs the blocking vault call in a worker thread; the vault's lock keeps
  operations serialized regardless of activity concurrency

Activities are NOT idempotent: a retried mint mints twice. Register them
with a RetryPolicy of maximum_attempts=1.
"""

from __future__ import annotations

import asyncio
from typing import final

from temporalio import activity

from pegvault.core.result import Err, Ok
from pegvault.vault import Vault
from pegvault.workflow.types import (
    LiquidationInput,
    LiquidationOutput,
    MintInput,
    MintOutput,
    OperationFailure,
    PositionOutput,
    PositionQuery,
    RedeemInput,
    RedeemOutput,
)


@final
class VaultActivities:
    def __init__(self, vault: Vault) -> None:
        self._vault = vault

    @activity.defn(name="mint_position")
    async def mint_position(self, inp: MintInput) -> MintOutput:
        activity.logger.info("Mint for %s: deposit %d wei", inp.caller, inp.deposit)
        match await asyncio.to_thread(self._vault.mint, inp.caller, inp.deposit):
            case Ok(receipt):
                return MintOutput(receipt=receipt)
            case Err(error):
                return MintOutput(error=OperationFailure.of(error))

    @activity.defn(name="redeem_position")
    async def redeem_position(self, inp: RedeemInput) -> RedeemOutput:
        activity.logger.info("Redeem for %s: %d debt", inp.caller, inp.amount)
        match await asyncio.to_thread(self._vault.redeem, inp.caller, inp.amount):
            case Ok(receipt):
                return RedeemOutput(receipt=receipt)
            case Err(error):
                return RedeemOutput(error=OperationFailure.of(error))

    @activity.defn(name="liquidate_position")
    async def liquidate_position(self, inp: LiquidationInput) -> LiquidationOutput:
        activity.logger.info("Liquidation of %s requested by %s", inp.target, inp.caller)
        match await asyncio.to_thread(self._vault.liquidate, inp.caller, inp.target):
            case Ok(receipt):
                return LiquidationOutput(receipt=receipt)
            case Err(error):
                return LiquidationOutput(error=OperationFailure.of(error))

    @activity.defn(name="query_position")
    async def query_position(self, query: PositionQuery) -> PositionOutput:
        match await asyncio.to_thread(self._vault.snapshot, query.account):
            case Ok((position, totals)):
                return PositionOutput(position=position, totals=totals)
            case Err(error):
                return PositionOutput(error=OperationFailure.of(error))

    def all(self) -> list[object]:
        """Bound activity callables for Worker(activities=...)."""
        return [
            self.mint_position,
            self.redeem_position,
            self.liquidate_position,
            self.query_position,
        ]
