"""Hypothesis profiles and pytest fixtures for PegVault.

Amounts are in smallest units (wei, 18-decimal debt) and rates carry 8
decimals. The make_vault fixture wires a Vault over the
in-memory adapters with funded wallets, so tests can drive whole operations.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

import pytest
from hypothesis import HealthCheck, settings

from pegvault.core.result import unwrap
from pegvault.core.types import NonEmptyStr, UtcDatetime
from pegvault.infra.config import VaultConfig
from pegvault.infra.memory_adapter import InMemoryEventBus, InMemoryPositionStore
from pegvault.ledger.custody import CustodyEngine
from pegvault.ledger.transactions import Account, AccountType, Move, Transaction
from pegvault.oracle.price import StaticPriceOracle
from pegvault.vault import Vault

# ---------------------------------------------------------------------------
# Hypothesis global settings
# ---------------------------------------------------------------------------

settings.register_profile(
    "ci",
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
    deadline=None,
)
settings.register_profile(
    "dev",
    max_examples=50,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
    deadline=None,
)
settings.load_profile("dev")


# ===================================================================
# CONSTANTS
# ===================================================================

ETH = 10**18
USD_RATE = 10**8
RATE_2000 = 2_000 * USD_RATE
OWNER = "owner"
WALLETS = ("alice", "bob", "carol")
FUNDING = "FAUCET"
WALLET_FUNDS = 1_000_000 * ETH
TS = UtcDatetime(value=datetime(2025, 6, 15, 12, 0, tzinfo=UTC))


# ===================================================================
# VAULT HARNESS
# ===================================================================


@dataclass
class VaultHarness:
    """A Vault plus direct handles on every adapter behind it."""

    vault: Vault
    oracle: StaticPriceOracle
    store: InMemoryPositionStore
    custody: CustodyEngine
    bus: InMemoryEventBus
    config: VaultConfig

    def balance(self, account: str) -> int:
        return self.custody.get_balance(account, self.config.collateral_unit)

    def vault_balance(self) -> int:
        return self.balance(self.config.vault_account)

    def events(self) -> list[tuple[str, bytes]]:
        return self.bus.get_messages(self.config.events_topic)


def build_harness(
    rate: int = RATE_2000,
    wallets: tuple[str, ...] = WALLETS,
    funds: int = WALLET_FUNDS,
) -> VaultHarness:
    """Vault at rate with each wallet funded from an EXTERNAL faucet account."""
    config = VaultConfig(owner=OWNER)
    oracle = StaticPriceOracle(rate)
    store = InMemoryPositionStore()
    custody = CustodyEngine()
    bus = InMemoryEventBus()

    unwrap(custody.register_account(
        Account(account_id=NonEmptyStr(value=FUNDING), account_type=AccountType.EXTERNAL),
    ))
    unwrap(custody.register_account(
        Account(account_id=NonEmptyStr(value=config.vault_account), account_type=AccountType.VAULT),
    ))
    for name in (OWNER, *wallets):
        unwrap(custody.register_account(
            Account(account_id=NonEmptyStr(value=name), account_type=AccountType.WALLET),
        ))
    if wallets and funds > 0:
        moves = tuple(
            unwrap(Move.create(FUNDING, name, config.collateral_unit, funds)) for name in wallets
        )
        unwrap(custody.execute(unwrap(Transaction.create("funding", moves, TS))))

    vault = Vault(config, oracle, store, custody, bus)
    return VaultHarness(
        vault=vault, oracle=oracle, store=store, custody=custody, bus=bus, config=config,
    )


@pytest.fixture
def harness() -> VaultHarness:
    return build_harness()


@pytest.fixture
def make_vault() -> Callable[..., VaultHarness]:
    """Factory fixture; safe under @given since every call builds fresh state."""
    return build_harness
