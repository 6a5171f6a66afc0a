"""Vault and worker configuration.

Pure configuration data. The collateralization ratio, liquidation split and
fixed-point scales are protocol constants in pegvault.core.units and are
deliberately not configurable here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import final

# ---------------------------------------------------------------------------
# Topic names
# ---------------------------------------------------------------------------

TOPIC_VAULT_EVENTS: str = "pegvault.vault.events"

VAULT_TOPICS: tuple[str, ...] = (TOPIC_VAULT_EVENTS,)


# ---------------------------------------------------------------------------
# Vault
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class VaultConfig:
    """Fixed once at construction.

    owner is the protocol-owner account that receives the 75% share of every
    liquidation; it is set here and never changes for the vault's lifetime.
    """

    owner: str
    collateral_unit: str = "ETH"
    stable_unit: str = "PUSD"
    vault_account: str = "VAULT"
    events_topic: str = TOPIC_VAULT_EVENTS

    def __post_init__(self) -> None:
        if not self.owner:
            raise TypeError("VaultConfig.owner must be non-empty")
        if not self.vault_account:
            raise TypeError("VaultConfig.vault_account must be non-empty")
        if self.owner == self.vault_account:
            raise TypeError(
                f"VaultConfig.owner and vault_account must differ, both are '{self.owner}'"
            )


# ---------------------------------------------------------------------------
# Temporal worker
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class WorkerConfig:
    """Connection settings for the Temporal worker hosting vault activities."""

    target_host: str = "localhost:7233"
    namespace: str = "default"
    task_queue: str = "pegvault-operations"
    max_concurrent_activities: int = 1
