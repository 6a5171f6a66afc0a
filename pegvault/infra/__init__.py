"""pegvault.infra -- Infrastructure protocols, adapters, and configuration."""

from pegvault.infra.config import TOPIC_VAULT_EVENTS as TOPIC_VAULT_EVENTS
from pegvault.infra.config import VAULT_TOPICS as VAULT_TOPICS
from pegvault.infra.config import VaultConfig as VaultConfig
from pegvault.infra.config import WorkerConfig as WorkerConfig
from pegvault.infra.memory_adapter import InMemoryEventBus as InMemoryEventBus
from pegvault.infra.memory_adapter import InMemoryPositionStore as InMemoryPositionStore
from pegvault.infra.protocols import CollateralCustody as CollateralCustody
from pegvault.infra.protocols import EventBus as EventBus
from pegvault.infra.protocols import PositionStore as PositionStore
