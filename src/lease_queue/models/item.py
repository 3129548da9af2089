"""
Module: item.py
Description: Item models for the lease queue.

Defines the in-flight representation of a claimed message, the
explicit raw-payload wrapper accepted by create_item(), and the
message shape returned by transports.

Key Components:
- ClaimedItem: Decoded payload plus the receipt handle used to ack it
- RawPayload: Marks a value as payload, never as a claimed item
- ReceivedMessage: Undecoded message as returned by a transport

Dependencies: pydantic, datetime, typing
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ClaimedItem(BaseModel):
    """
    A message claimed from a queue.

    The receipt handle is not a stable message identity: the service
    issues a new one every time the message becomes visible again and
    is claimed. Once the lease expires, or the item is deleted, the
    handle must not be reused.

    Attributes:
        data: Decoded payload
        handle: Receipt handle required by delete_item() and release_item()
        queue_name: Remote name of the queue the item was claimed from
        message_id: Service-assigned message identifier, when known
        receive_count: How many times the message has been received
        claimed_at: When the claim returned
        lease_seconds: Visibility timeout requested for the claim
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    data: Any = Field(..., description="Decoded payload")
    handle: Optional[str] = Field(default=None, description="Receipt handle")
    queue_name: Optional[str] = Field(default=None, description="Queue the item came from")
    message_id: Optional[str] = Field(default=None, description="Service message id")
    receive_count: int = Field(default=1, ge=1, description="Approximate receive count")
    claimed_at: datetime = Field(default_factory=_utcnow, description="Claim timestamp")
    lease_seconds: int = Field(default=0, ge=0, description="Lease requested for the claim")

    def has_handle(self) -> bool:
        """Return True when the item carries a usable receipt handle."""
        return bool(self.handle and self.handle.strip())


class RawPayload(BaseModel):
    """
    Explicit wrapper for a value that must be queued as-is.

    Use it to enqueue a value that would otherwise be mistaken for
    something else, e.g. a ClaimedItem that is itself the payload.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: Any


class ReceivedMessage(BaseModel):
    """Message as returned by a transport, before decoding."""

    model_config = ConfigDict(frozen=True)

    body: str
    receipt_handle: Optional[str] = None
    message_id: Optional[str] = None
    receive_count: int = Field(default=1, ge=1)
