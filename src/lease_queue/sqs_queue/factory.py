"""
Module: factory.py
Description: Transport selection from configuration.

The memory backend keeps one InMemoryTransport per region for the
whole process, so every client built from a memory config sees the
same queues, the way clients of a real SQS region do.
"""

import threading
from typing import Dict

from ..config.settings import QueueConfig
from .base import QueueTransport
from .memory import InMemoryTransport
from .sqs import SqsTransport

_memory_transports: Dict[str, InMemoryTransport] = {}
_memory_lock = threading.Lock()


def shared_memory_transport(region: str) -> InMemoryTransport:
    """Return the process-wide in-memory transport for region."""
    with _memory_lock:
        transport = _memory_transports.get(region)
        if transport is None:
            transport = InMemoryTransport(region=region)
            _memory_transports[region] = transport
        return transport


def reset_memory_transports() -> None:
    """Forget every shared in-memory transport and the queues it holds."""
    with _memory_lock:
        _memory_transports.clear()


def create_transport(config: QueueConfig) -> QueueTransport:
    """
    Build the transport named by config.backend.

    SQS gets a new boto3-backed transport per call. Memory returns the
    shared transport for config.aws_region.
    """
    if config.backend == "sqs":
        return SqsTransport(config)
    if config.backend == "memory":
        return shared_memory_transport(config.aws_region)
    raise ValueError(f"Unknown queue backend: {config.backend}")
