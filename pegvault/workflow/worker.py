"""Temporal worker hosting the vault activities.

Usage::

    import asyncio
    from pegvault.workflow.worker import run_worker

    asyncio.run(run_worker(vault, WorkerConfig()))
"""

from __future__ import annotations

import logging

from temporalio.client import Client
from temporalio.worker import Worker

from pegvault.infra.config import WorkerConfig
from pegvault.vault import Vault
from pegvault.workflow.activities import VaultActivities
from pegvault.workflow.converter import PEGVAULT_DATA_CONVERTER

logger = logging.getLogger(__name__)


def build_worker(client: Client, vault: Vault, config: WorkerConfig) -> Worker:
    """Worker with every vault activity registered on config.task_queue."""
    return Worker(
        client,
        task_queue=config.task_queue,
        activities=VaultActivities(vault).all(),
        max_concurrent_activities=config.max_concurrent_activities,
    )


async def run_worker(vault: Vault, config: WorkerConfig | None = None) -> None:
    """Connect to Temporal and run the worker until interrupted."""
    config = config or WorkerConfig()
    client = await Client.connect(
        config.target_host, namespace=config.namespace,
        data_converter=PEGVAULT_DATA_CONVERTER,
    )
    logger.info(
        "Serving vault activities on %s (namespace %s, queue %s)",
        config.target_host, config.namespace, config.task_queue,
    )
    await build_worker(client, vault, config).run()
