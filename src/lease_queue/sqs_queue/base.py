"""
Module: base.py
Description: Transport capability consumed by the queue client.

A transport is a thin object over the remote queue service. It knows
nothing about payloads, leases or serialization: it moves message
bodies and receipt handles. Implementations translate their own
failures into TransportError subclasses.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from ..models.item import ReceivedMessage


class QueueTransport(ABC):
    """Remote queue operations used by QueueClient."""

    @abstractmethod
    def create_queue(self, name: str, attributes: Optional[Dict[str, str]] = None) -> str:
        """Create the queue (or find the existing one) and return its URL."""

    @abstractmethod
    def get_queue_url(self, name: str) -> Optional[str]:
        """Return the URL of an existing queue, or None if it does not exist."""

    @abstractmethod
    def delete_queue(self, queue_url: str) -> None:
        """Delete the queue and every message in it."""

    @abstractmethod
    def send_message(self, queue_url: str, body: str) -> str:
        """Send a message body and return the service message id."""

    @abstractmethod
    def receive_message(
        self,
        queue_url: str,
        visibility_timeout: int,
        wait_time_seconds: int
    ) -> Optional[ReceivedMessage]:
        """Receive at most one message, long-polling up to wait_time_seconds."""

    @abstractmethod
    def change_visibility(self, queue_url: str, receipt_handle: str, visibility_timeout: int) -> None:
        """Change the remaining lease of a received message."""

    @abstractmethod
    def delete_message(self, queue_url: str, receipt_handle: str) -> None:
        """Delete a received message."""

    @abstractmethod
    def get_attributes(self, queue_url: str, names: List[str]) -> Dict[str, str]:
        """Return the requested queue attributes."""
