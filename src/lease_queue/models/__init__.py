"""
Module: models
Description: Package initialization for queue data models.

This package contains the data models used by the queue client:
- ClaimedItem: In-flight claimed message with its receipt handle
- RawPayload: Explicit raw payload wrapper for create_item()
- ReceivedMessage: Transport-level message before decoding
- QueueHandle: Queue name to URL binding with lease defaults

All models are exported here for convenient importing.
"""

from .handle import LeaseTerms, QueueHandle, negotiate_lease
from .item import ClaimedItem, RawPayload, ReceivedMessage

__all__ = [
    "ClaimedItem",
    "LeaseTerms",
    "QueueHandle",
    "RawPayload",
    "ReceivedMessage",
    "negotiate_lease",
]
