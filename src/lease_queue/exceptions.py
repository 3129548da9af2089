"""
Module: exceptions.py
Description: Exception hierarchy for lease queue operations.

Every error raised by the queue client derives from QueueError so
callers can catch the whole family at an orchestration boundary.
Transport failures carry the service error code and the operation
that failed.
"""

from typing import Optional


class QueueError(Exception):
    """Base exception for lease queue operations."""

    pass


class ConfigurationError(QueueError):
    """Queue configuration is missing or unusable (e.g. no credentials)."""

    pass


class TransportError(QueueError):
    """
    A remote queue call failed.

    Attributes:
        code: Service error code, when the service returned one
        operation: Transport operation that failed (e.g. 'SendMessage')
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        operation: Optional[str] = None
    ):
        super().__init__(message)
        self.code = code
        self.operation = operation


class ThrottlingError(TransportError):
    """The service throttled the request - retry with backoff."""

    pass


class PermissionDeniedError(TransportError):
    """Credentials were rejected or lack permission for the operation."""

    pass


class QueueDoesNotExistError(TransportError):
    """The remote queue addressed by the call does not exist."""

    pass


class InvalidItemError(QueueError):
    """Release or delete was called on an item without a receipt handle."""

    pass


class PayloadTooLargeError(QueueError):
    """Encoded payload exceeds the configured message size ceiling."""

    def __init__(self, size: int, limit: int):
        super().__init__(
            f"Encoded payload is {size} bytes, limit is {limit} bytes"
        )
        self.size = size
        self.limit = limit


class SerializationError(QueueError):
    """A payload could not be encoded or a message body could not be decoded."""

    pass


class QueueNotCreatedError(QueueError):
    """The operation needs a queue URL but the queue has not been created."""

    pass


class SuspendQueue(QueueError):
    """
    Raised by a worker handler to stop processing the queue.

    The current item is released so it can be retried later.
    """

    pass
