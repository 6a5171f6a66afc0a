"""Tests for pegvault.infra.config."""

from __future__ import annotations

import dataclasses

import pytest

from pegvault.infra.config import (
    TOPIC_VAULT_EVENTS,
    VAULT_TOPICS,
    VaultConfig,
    WorkerConfig,
)


class TestVaultConfig:
    def test_defaults(self) -> None:
        config = VaultConfig(owner="treasury")
        assert config.collateral_unit == "ETH"
        assert config.vault_account == "VAULT"
        assert config.events_topic == TOPIC_VAULT_EVENTS

    def test_frozen(self) -> None:
        config = VaultConfig(owner="treasury")
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.owner = "other"  # type: ignore[misc]

    def test_owner_required(self) -> None:
        with pytest.raises(TypeError):
            VaultConfig(owner="")

    def test_owner_cannot_be_vault(self) -> None:
        with pytest.raises(TypeError, match="must differ"):
            VaultConfig(owner="VAULT")

    def test_vault_account_required(self) -> None:
        with pytest.raises(TypeError):
            VaultConfig(owner="treasury", vault_account="")


class TestWorkerConfig:
    def test_defaults(self) -> None:
        config = WorkerConfig()
        assert config.target_host == "localhost:7233"
        assert config.task_queue == "pegvault-operations"
        assert config.max_concurrent_activities == 1

    def test_topics(self) -> None:
        assert TOPIC_VAULT_EVENTS in VAULT_TOPICS
