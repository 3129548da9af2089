"""
Package: lease_queue
Description: Lease-based client for at-least-once message queues.

Producers add items with QueueClient.create_item(); consumers claim
them for a lease, then delete or release them. Amazon SQS is the
production backend; an in-memory backend serves local runs and tests.
"""

from .config.settings import QueueConfig, load_config
from .delivery.worker import QueueWorker, WorkerStats
from .exceptions import (
    ConfigurationError,
    InvalidItemError,
    PayloadTooLargeError,
    PermissionDeniedError,
    QueueDoesNotExistError,
    QueueError,
    QueueNotCreatedError,
    SerializationError,
    SuspendQueue,
    ThrottlingError,
    TransportError,
)
from .models.item import ClaimedItem, RawPayload
from .sqs_queue.client import QueueClient
from .sqs_queue.memory import InMemoryTransport
from .sqs_queue.sqs import SqsTransport

__version__ = "0.1.0"

__all__ = [
    "ClaimedItem",
    "ConfigurationError",
    "InMemoryTransport",
    "InvalidItemError",
    "PayloadTooLargeError",
    "PermissionDeniedError",
    "QueueClient",
    "QueueConfig",
    "QueueDoesNotExistError",
    "QueueError",
    "QueueNotCreatedError",
    "QueueWorker",
    "RawPayload",
    "SerializationError",
    "SqsTransport",
    "SuspendQueue",
    "ThrottlingError",
    "TransportError",
    "WorkerStats",
    "load_config",
]
