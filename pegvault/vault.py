"""Vault -- the caller-facing surface of the collateralized-debt ledger.

Every operation runs the same pipeline, serialized by one global lock:

    1. sample the oracle once (Err -> stop, nothing touched)
    2. stage the position change in a LedgerScope
    3. plan: compute amounts and check health on the post-state
    4. settle: move collateral through custody in one atomic transaction
    5. commit the staged positions and totals in one store write
    6. queue the notification and flush the outbox

Any Err before step 5 discards the scope: no position, total or balance
changes. If the store rejects the commit after custody settled, the custody
transaction is reversed before the error is returned.

A second operation started on the same thread while one is in flight (for
example from a custody callback or an EventBus subscriber) is refused with
ReentrancyError.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable
from typing import final

from pegvault.core.errors import (
    ConservationViolationError,
    LiquidationError,
    LiquidationErrorKind,
    MintError,
    MintErrorKind,
    OracleError,
    PegVaultError,
    PersistenceError,
    RedeemError,
    RedeemErrorKind,
    ReentrancyError,
)
from pegvault.core.result import Err, Ok
from pegvault.core.serialization import canonical_bytes
from pegvault.core.types import UtcDatetime
from pegvault.infra.config import VaultConfig
from pegvault.infra.protocols import CollateralCustody, EventBus, PositionStore
from pegvault.ledger.events import (
    LiquidationReceipt,
    MintReceipt,
    Notification,
    RedeemReceipt,
    notification_for,
    notification_key,
)
from pegvault.ledger.health import is_healthy, max_mintable
from pegvault.ledger.operations import plan_liquidation, plan_mint, plan_redeem
from pegvault.ledger.position import CollateralPosition, LedgerTotals
from pegvault.ledger.store import LedgerScope, PositionLedger
from pegvault.ledger.transactions import Move, Transaction
from pegvault.oracle.price import PriceOracle

logger = logging.getLogger(__name__)

type MintResult = Ok[MintReceipt] | Err[MintError | OracleError | ReentrancyError | PersistenceError]
type RedeemResult = (
    Ok[RedeemReceipt] | Err[RedeemError | OracleError | ReentrancyError | PersistenceError]
)
type LiquidationResult = (
    Ok[LiquidationReceipt]
    | Err[LiquidationError | OracleError | ReentrancyError | PersistenceError]
)


@final
class Vault:
    """Serializable mint / redeem / liquidate over one collateral asset."""

    def __init__(
        self,
        config: VaultConfig,
        oracle: PriceOracle,
        store: PositionStore,
        custody: CollateralCustody,
        events: EventBus,
    ) -> None:
        self._config = config
        self._oracle = oracle
        self._ledger = PositionLedger(store)
        self._custody = custody
        self._events = events
        self._lock = threading.RLock()
        self._local = threading.local()
        self._outbox: list[Notification] = []

    @property
    def config(self) -> VaultConfig:
        return self._config

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def mint(self, caller: str, deposit: int) -> MintResult:
        """Lock deposit wei from caller's wallet and issue stable units against it."""
        self._require_account("caller", caller)
        return self._serialized("mint", lambda: self._mint(caller, deposit))

    def redeem(self, caller: str, amount: int) -> RedeemResult:
        """Retire amount of caller's debt and release the collateral it is worth."""
        self._require_account("caller", caller)
        return self._serialized("redeem", lambda: self._redeem(caller, amount))

    def liquidate(self, caller: str, target: str) -> LiquidationResult:
        """Seize target's collateral if unhealthy; 75% to owner, 25% to caller."""
        self._require_account("caller", caller)
        self._require_account("target", target)
        return self._serialized("liquidate", lambda: self._liquidate(caller, target))

    def _require_account(self, name: str, account: str) -> None:
        if not isinstance(account, str) or not account:
            raise TypeError(f"{name} must be a non-empty account identity, got {account!r}")
        if account == self._config.vault_account:
            raise TypeError(f"{name} cannot be the vault's own account '{account}'")

    def _serialized[T](
        self, operation: str, run: Callable[[], Ok[T] | Err[PegVaultError]],
    ) -> Ok[T] | Err[PegVaultError]:
        if getattr(self._local, "active", None) is not None:
            logger.warning(
                "Refused re-entrant %s while %s is in flight", operation, self._local.active,
            )
            return Err(ReentrancyError(
                message=f"{operation} called while {self._local.active} is in flight",
                code="REENTRANT_CALL",
                timestamp=UtcDatetime.now(),
                source=f"vault.Vault.{operation}",
                operation=operation,
            ))
        with self._lock:
            self._local.active = operation
            try:
                result = run()
            finally:
                self._local.active = None
        if isinstance(result, Err):
            logger.warning("%s rejected: %s (%s)", operation, result.error.code, result.error.message)
        return result

    def _mint(self, caller: str, deposit: int) -> MintResult:
        match self._oracle.sample():
            case Err() as oracle_err:
                return oracle_err
            case Ok(price):
                pass
        match self._begin(caller):
            case Err() as store_err:
                return store_err
            case Ok((scope, position)):
                pass
        match plan_mint(position, scope.totals, deposit, price):
            case Err() as plan_err:
                return plan_err
            case Ok(plan):
                pass

        scope.put(plan.position)
        scope.totals = plan.totals
        moves = self._moves((caller, self._config.vault_account, plan.deposit))
        match self._settle_and_commit("mint", scope, moves):
            case Err(ConservationViolationError() as transfer_err):
                return Err(MintError(
                    message=f"deposit transfer failed: {transfer_err.message}",
                    code=MintErrorKind.TRANSFER_FAILED.value,
                    timestamp=UtcDatetime.now(),
                    source="vault.Vault.mint",
                    kind=MintErrorKind.TRANSFER_FAILED,
                    account=caller,
                ))
            case Err(PersistenceError() as commit_err):
                return Err(commit_err)
            case Ok((tx_id, timestamp)):
                pass

        receipt = MintReceipt(
            account=caller,
            collateral_deposited=plan.deposit,
            debt_minted=plan.debt,
            price=price,
            tx_id=tx_id,
            timestamp=timestamp,
        )
        self._notify(receipt)
        return Ok(receipt)

    def _redeem(self, caller: str, amount: int) -> RedeemResult:
        match self._oracle.sample():
            case Err() as oracle_err:
                return oracle_err
            case Ok(price):
                pass
        match self._begin(caller):
            case Err() as store_err:
                return store_err
            case Ok((scope, position)):
                pass
        match plan_redeem(position, scope.totals, amount, price):
            case Err() as plan_err:
                return plan_err
            case Ok(plan):
                pass

        scope.put(plan.position)
        scope.totals = plan.totals
        moves = self._moves((self._config.vault_account, caller, plan.released))
        match self._settle_and_commit("redeem", scope, moves):
            case Err(ConservationViolationError() as transfer_err):
                return Err(RedeemError(
                    message=f"collateral release failed: {transfer_err.message}",
                    code=RedeemErrorKind.TRANSFER_FAILED.value,
                    timestamp=UtcDatetime.now(),
                    source="vault.Vault.redeem",
                    kind=RedeemErrorKind.TRANSFER_FAILED,
                    account=caller,
                ))
            case Err(PersistenceError() as commit_err):
                return Err(commit_err)
            case Ok((tx_id, timestamp)):
                pass

        receipt = RedeemReceipt(
            account=caller,
            debt_retired=plan.debt,
            collateral_released=plan.released,
            closed=plan.closed,
            price=price,
            tx_id=tx_id,
            timestamp=timestamp,
        )
        self._notify(receipt)
        return Ok(receipt)

    def _liquidate(self, caller: str, target: str) -> LiquidationResult:
        match self._oracle.sample():
            case Err() as oracle_err:
                return oracle_err
            case Ok(price):
                pass
        match self._begin(target):
            case Err() as store_err:
                return store_err
            case Ok((scope, position)):
                pass
        match plan_liquidation(position, scope.totals, price):
            case Err() as plan_err:
                return plan_err
            case Ok(plan):
                pass

        scope.put(plan.position)
        scope.totals = plan.totals
        vault = self._config.vault_account
        moves = self._moves(
            (vault, self._config.owner, plan.owner_share),
            (vault, caller, plan.liquidator_share),
        )
        match self._settle_and_commit("liquidate", scope, moves):
            case Err(ConservationViolationError() as transfer_err):
                return Err(LiquidationError(
                    message=f"proceeds transfer failed: {transfer_err.message}",
                    code=LiquidationErrorKind.TRANSFER_FAILED.value,
                    timestamp=UtcDatetime.now(),
                    source="vault.Vault.liquidate",
                    kind=LiquidationErrorKind.TRANSFER_FAILED,
                    target=target,
                ))
            case Err(PersistenceError() as commit_err):
                return Err(commit_err)
            case Ok((tx_id, timestamp)):
                pass

        logger.info(
            "Liquidated %s by %s: seized %d wei, cleared %d %s (owner %d, liquidator %d)",
            target, caller, plan.seized, plan.debt_cleared, self._config.stable_unit,
            plan.owner_share, plan.liquidator_share,
        )
        receipt = LiquidationReceipt(
            target=target,
            liquidator=caller,
            owner=self._config.owner,
            collateral_seized=plan.seized,
            debt_cleared=plan.debt_cleared,
            owner_share=plan.owner_share,
            liquidator_share=plan.liquidator_share,
            price=price,
            tx_id=tx_id,
            timestamp=timestamp,
        )
        self._notify(receipt)
        return Ok(receipt)

    # ------------------------------------------------------------------
    # Staging, settlement, commit
    # ------------------------------------------------------------------

    def _begin(
        self, account: str,
    ) -> Ok[tuple[LedgerScope, CollateralPosition]] | Err[PersistenceError]:
        match self._ledger.begin():
            case Err() as e:
                return e
            case Ok(scope):
                pass
        return scope.get(account).map(lambda position: (scope, position))

    def _moves(self, *legs: tuple[str, str, int]) -> tuple[Move, ...]:
        """Moves for the non-zero legs (source, destination, wei)."""
        return tuple(
            Move.create(src, dst, self._config.collateral_unit, qty).unwrap()
            for src, dst, qty in legs
            if qty > 0
        )

    def _settle_and_commit(
        self, operation: str, scope: LedgerScope, moves: tuple[Move, ...],
    ) -> Ok[tuple[str, UtcDatetime]] | Err[ConservationViolationError | PersistenceError]:
        tx_id = f"{operation}-{uuid.uuid4().hex}"
        timestamp = UtcDatetime.now()
        tx = Transaction(tx_id=tx_id, moves=moves, timestamp=timestamp) if moves else None

        if tx is not None:
            match self._custody.execute(tx):
                case Err() as transfer_err:
                    return transfer_err
                case Ok(_):
                    pass

        match scope.commit():
            case Err(commit_err):
                if tx is not None:
                    self._reverse(tx)
                return Err(commit_err.with_context(f"{operation} {tx_id}"))
            case Ok(_):
                pass

        logger.debug("Committed %s %s (%d positions)", operation, tx_id, len(scope.staged))
        return Ok((tx_id, timestamp))

    def _reverse(self, tx: Transaction) -> None:
        reversal = Transaction(
            tx_id=f"{tx.tx_id}-reversal",
            moves=tuple(
                Move(source=m.destination, destination=m.source, unit=m.unit, quantity=m.quantity)
                for m in reversed(tx.moves)
            ),
            timestamp=UtcDatetime.now(),
        )
        match self._custody.execute(reversal):
            case Err(error):
                logger.error(
                    "Custody reversal %s failed after commit error: %s",
                    reversal.tx_id, error.message,
                )
            case Ok(_):
                logger.warning("Reversed custody transaction %s after commit error", tx.tx_id)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def _notify(self, receipt: MintReceipt | RedeemReceipt | LiquidationReceipt) -> None:
        self._outbox.append(notification_for(receipt))
        self.flush_notifications()

    def flush_notifications(self) -> int:
        """Publish queued notifications in order; returns how many remain queued.

        While the outbox drains, the thread counts as busy: an EventBus
        subscriber that calls back into mint/redeem/liquidate gets
        ReentrancyError, and a nested flush returns without publishing.
        """
        with self._lock:
            if getattr(self._local, "flushing", False):
                return len(self._outbox)
            active = getattr(self._local, "active", None)
            self._local.flushing = True
            self._local.active = active or "flush_notifications"
            try:
                self._drain_outbox()
            finally:
                self._local.flushing = False
                self._local.active = active
            return len(self._outbox)

    def _drain_outbox(self) -> None:
        while self._outbox:
            notification = self._outbox.pop(0)
            match canonical_bytes(notification):
                case Err(detail):
                    logger.error("Cannot encode %r: %s", notification, detail)
                    self._outbox.insert(0, notification)
                    return
                case Ok(payload):
                    pass
            try:
                published = self._events.publish(
                    self._config.events_topic, notification_key(notification), payload,
                )
            except Exception:
                self._outbox.insert(0, notification)
                raise
            if isinstance(published, Err):
                logger.warning(
                    "Notification %s queued, publish failed: %s",
                    notification.tx_id, published.error.message,
                )
                self._outbox.insert(0, notification)
                return

    @property
    def pending_notifications(self) -> tuple[Notification, ...]:
        return tuple(self._outbox)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def position(self, account: str) -> Ok[CollateralPosition] | Err[PersistenceError]:
        with self._lock:
            return self._ledger.position(account)

    def totals(self) -> Ok[LedgerTotals] | Err[PersistenceError]:
        with self._lock:
            return self._ledger.totals()

    def snapshot(
        self, account: str,
    ) -> Ok[tuple[CollateralPosition, LedgerTotals]] | Err[PersistenceError]:
        """Position and totals read under one lock, so no commit lands between them."""
        with self._lock:
            match self._ledger.position(account):
                case Err() as e:
                    return e
                case Ok(position):
                    pass
            return self._ledger.totals().map(lambda totals: (position, totals))

    def mint_headroom(self, account: str) -> Ok[int] | Err[OracleError | PersistenceError]:
        """Debt account could still mint without a new deposit, at a fresh price."""
        with self._lock:
            match self._oracle.sample():
                case Err() as oracle_err:
                    return oracle_err
                case Ok(price):
                    pass
            return self._ledger.position(account).map(lambda p: max_mintable(p, price))

    def positions(self) -> Ok[tuple[CollateralPosition, ...]] | Err[PersistenceError]:
        with self._lock:
            return self._ledger.positions()

    def is_healthy(self, account: str) -> Ok[bool] | Err[OracleError | PersistenceError]:
        """Health of account at a freshly sampled price."""
        with self._lock:
            match self._oracle.sample():
                case Err() as oracle_err:
                    return oracle_err
                case Ok(price):
                    pass
            return self._ledger.position(account).map(lambda p: is_healthy(p, price))

    def unhealthy_accounts(self) -> Ok[tuple[str, ...]] | Err[OracleError | PersistenceError]:
        """Liquidation candidates at one freshly sampled price."""
        with self._lock:
            match self._oracle.sample():
                case Err() as oracle_err:
                    return oracle_err
                case Ok(price):
                    pass
            return self._ledger.positions().map(
                lambda found: tuple(p.account for p in found if not is_healthy(p, price)),
            )
