"""
Module: handle.py
Description: Queue handle and lease negotiation.

A QueueHandle binds a remote queue name to the URL the service
assigned on creation and owns the lease defaults used when claiming.
negotiate_lease() computes the visibility timeout and long-poll wait
for a single claim.
"""

from typing import NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..config.settings import MAX_VISIBILITY_TIMEOUT, MAX_WAIT_TIME_SECONDS
from ..exceptions import QueueNotCreatedError


class LeaseTerms(NamedTuple):
    """Visibility timeout and wait time for one receive call."""

    visibility_timeout: int
    wait_time_seconds: int


def negotiate_lease(
    lease_time: int,
    default_visibility_timeout: int,
    configured_wait_seconds: int
) -> LeaseTerms:
    """
    Compute the lease terms for a claim.

    The wait never exceeds the visibility timeout: a consumer that can
    only hold a lease for T seconds must not block longer than T inside
    the receive call. A configured wait of 0 disables long polling.

    Args:
        lease_time: Requested lease in seconds (<= 0 uses the default)
        default_visibility_timeout: Configured default lease in seconds
        configured_wait_seconds: Configured long-poll wait in seconds

    Returns:
        LeaseTerms for the receive call

    Example:
        >>> negotiate_lease(5, 60, 10)
        LeaseTerms(visibility_timeout=5, wait_time_seconds=5)
        >>> negotiate_lease(0, 60, 0)
        LeaseTerms(visibility_timeout=60, wait_time_seconds=0)
    """
    visibility = lease_time if lease_time and lease_time > 0 else default_visibility_timeout
    visibility = min(int(visibility), MAX_VISIBILITY_TIMEOUT)

    wait = max(0, min(int(configured_wait_seconds), MAX_WAIT_TIME_SECONDS))
    if wait > visibility:
        wait = visibility

    return LeaseTerms(visibility_timeout=visibility, wait_time_seconds=wait)


class QueueHandle(BaseModel):
    """
    Binding between a queue name and its remote URL.

    The URL is None until the queue has been created and is then set
    once. Every operation other than creation requires it.

    Attributes:
        name: Remote (prefixed) queue name
        queue_url: URL assigned by the service, None until created
        visibility_timeout: Default lease in seconds
        wait_time_seconds: Default long-poll wait in seconds
    """

    model_config = ConfigDict(validate_assignment=True)

    name: str = Field(..., min_length=1, max_length=80)
    queue_url: Optional[str] = Field(default=None)
    visibility_timeout: int = Field(..., ge=1, le=MAX_VISIBILITY_TIMEOUT)
    wait_time_seconds: int = Field(..., ge=0, le=MAX_WAIT_TIME_SECONDS)

    @property
    def is_bound(self) -> bool:
        return bool(self.queue_url)

    def bind(self, queue_url: str) -> None:
        """
        Record the URL of the created queue.

        Raises:
            ValueError: If queue_url is empty
            RuntimeError: If the handle is already bound to another URL
        """
        if not queue_url or not isinstance(queue_url, str):
            raise ValueError("queue_url must be a non-empty string")
        if self.queue_url and self.queue_url != queue_url:
            raise RuntimeError(
                f"Queue '{self.name}' is already bound to {self.queue_url}"
            )
        self.queue_url = queue_url

    def unbind(self) -> None:
        """Forget the URL once the remote queue has been deleted."""
        self.queue_url = None

    def require_url(self) -> str:
        """Return the queue URL or raise QueueNotCreatedError."""
        if not self.queue_url:
            raise QueueNotCreatedError(
                f"Queue '{self.name}' has not been created"
            )
        return self.queue_url

    def lease_terms(self, lease_time: int = 0) -> LeaseTerms:
        """Negotiate lease terms against this handle's defaults."""
        return negotiate_lease(
            lease_time,
            self.visibility_timeout,
            self.wait_time_seconds
        )
