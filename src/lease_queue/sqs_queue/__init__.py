"""
Package: sqs_queue
Description: Lease-based queue client and its transports.

Provides the synchronous QueueClient, the SQS transport used in
production, an in-memory transport for local runs and tests, and
the payload serializers.
"""

from .base import QueueTransport
from .client import QueueClient
from .factory import create_transport, reset_memory_transports, shared_memory_transport
from .memory import InMemoryTransport
from .serializer import JsonSerializer, PickleSerializer, Serializer, create_serializer
from .sqs import SqsTransport

__all__ = [
    "InMemoryTransport",
    "JsonSerializer",
    "PickleSerializer",
    "QueueClient",
    "QueueTransport",
    "Serializer",
    "SqsTransport",
    "create_serializer",
    "create_transport",
    "reset_memory_transports",
    "shared_memory_transport",
]
