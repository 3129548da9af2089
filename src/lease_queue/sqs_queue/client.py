"""
Module: client.py
Description: Lease-based queue client.

Producers enqueue payloads with create_item(); consumers claim an item
for a lease with claim_item(), then acknowledge it with delete_item()
or hand it back early with release_item(). A claimed item that is
neither deleted nor released becomes visible again when its lease
expires, so delivery is at-least-once.

Key Components:
- QueueClient: create/claim/release/delete/count plus queue provisioning
- Lease negotiation: wait time clamped to the lease (see negotiate_lease)
- Re-queue normalization: a ClaimedItem passed to create_item() is unwrapped

Dependencies: config, models, serializer, transport, utils
"""

from typing import Any, Optional

from ..config.settings import QueueConfig
from ..exceptions import (
    ConfigurationError,
    InvalidItemError,
    PayloadTooLargeError,
    SerializationError,
    TransportError,
)
from ..models.handle import QueueHandle
from ..models.item import ClaimedItem, RawPayload
from ..utils.logger import get_logger
from ..utils.metrics import MetricsClient
from .base import QueueTransport
from .factory import create_transport
from .serializer import Serializer, create_serializer

logger = get_logger(__name__)

APPROXIMATE_COUNT_ATTRIBUTE = 'ApproximateNumberOfMessages'


class QueueClient:
    """
    Client for one named queue.

    Each instance owns its QueueHandle. Instances never share mutable
    state: several clients (in one process or many) can work the same
    queue, and the service alone decides which of them holds a lease.

    Attributes:
        name: Logical queue name supplied by the caller
        config: Resolved queue configuration
        handle: Queue name/URL binding with lease defaults
        transport: Remote queue operations
        serializer: Payload encoder/decoder
        metrics: CloudWatch metrics client, or None when disabled

    Example:
        >>> client = QueueClient("orders", load_config())
        >>> client.create_item({"id": 42, "tags": ["a", "b"]})
        True
        >>> item = client.claim_item(lease_time=30)
        >>> client.delete_item(item)
    """

    def __init__(
        self,
        name: str,
        config: QueueConfig,
        transport: Optional[QueueTransport] = None,
        serializer: Optional[Serializer] = None,
        metrics: Optional[MetricsClient] = None,
        auto_create: bool = True
    ):
        """
        Initialize the queue client and provision the queue.

        Args:
            name: Logical queue name (the configured prefix is added)
            config: Resolved queue configuration
            transport: Transport override (default: built from config.backend)
            serializer: Serializer override (default: built from config.serializer)
            metrics: Metrics client override (default: built from config.metrics_namespace)
            auto_create: Create the queue (or find the existing one) now

        Raises:
            ConfigurationError: If the SQS backend is selected without credentials
            ValueError: If the queue name is invalid
            TransportError: If provisioning fails
        """
        if not isinstance(config, QueueConfig):
            raise ValueError("config must be a QueueConfig instance")

        if config.backend == "sqs" and not config.has_credentials():
            logger.error("AWS credentials are not configured", queue=name)
            raise ConfigurationError(
                "AWS credentials are missing: set aws_access_key_id and aws_secret_access_key"
            )

        self.name = name
        self.config = config
        self.handle = QueueHandle(
            name=config.queue_name(name),
            visibility_timeout=config.visibility_timeout,
            wait_time_seconds=config.wait_time_seconds
        )
        self.transport = transport or create_transport(config)
        self.serializer = serializer or create_serializer(config.serializer)
        self.metrics = metrics if metrics is not None else MetricsClient.from_config(config)

        logger.info(
            "Queue client initialized",
            queue=self.handle.name,
            backend=config.backend,
            visibility_timeout=self.handle.visibility_timeout,
            wait_time_seconds=self.handle.wait_time_seconds
        )

        if auto_create:
            self.create_queue()

    def create_queue(self) -> str:
        """
        Create the queue, or resolve it if it already exists.

        Idempotent: calling it again, from this or any other client,
        returns the same URL.

        Returns:
            Queue URL

        Raises:
            TransportError: If the service call fails
        """
        queue_url = self.transport.create_queue(
            self.handle.name,
            {'VisibilityTimeout': str(self.handle.visibility_timeout)}
        )
        self.handle.bind(queue_url)
        return queue_url

    def delete_queue(self) -> None:
        """
        Delete the queue and every undelivered message in it.

        This cannot be undone. Gate it above this layer if needed.
        """
        queue_url = self.handle.require_url()
        self.transport.delete_queue(queue_url)
        self.handle.unbind()

        logger.warning("Queue deleted", queue=self.handle.name, queue_url=queue_url)

    def get_queue_url(self) -> Optional[str]:
        """Return the queue URL, or None (with a warning) if the queue was not created."""
        if not self.handle.is_bound:
            logger.warning(
                "Queue has not been created",
                queue=self.handle.name
            )
            return None
        return self.handle.queue_url

    def create_item(self, payload: Any) -> bool:
        """
        Add an item to the queue.

        A ClaimedItem is re-queued by its data only (with a warning);
        wrap a value in RawPayload to queue it exactly as given.

        Args:
            payload: Value to queue, a RawPayload, or a ClaimedItem

        Returns:
            True if the service accepted the message

        Raises:
            PayloadTooLargeError: If the encoded payload exceeds max_message_bytes
            SerializationError: If the payload cannot be encoded
            QueueNotCreatedError: If the queue has not been created
            TransportError: If the send fails
        """
        if isinstance(payload, ClaimedItem):
            logger.warning(
                "Claimed item passed to create_item, re-queueing its data only",
                queue=self.handle.name,
                message_id=payload.message_id
            )
            value = payload.data
        elif isinstance(payload, RawPayload):
            value = payload.value
        else:
            value = payload

        queue_url = self.handle.require_url()
        body = self.serializer.encode(value)

        size = len(body.encode('utf-8'))
        if size > self.config.max_message_bytes:
            logger.error(
                "Payload exceeds message size limit",
                queue=self.handle.name,
                size=size,
                limit=self.config.max_message_bytes
            )
            raise PayloadTooLargeError(size, self.config.max_message_bytes)

        message_id = self.transport.send_message(queue_url, body)

        logger.info(
            "Item created",
            queue=self.handle.name,
            message_id=message_id,
            size=size
        )
        self._publish("ItemsCreated")

        return bool(message_id)

    def claim_item(self, lease_time: int = 0) -> Optional[ClaimedItem]:
        """
        Claim the next available item for a lease.

        The item stays invisible to other consumers for the lease. The
        receive call long-polls for at most min(configured wait, lease)
        seconds; a configured wait of 0 never blocks.

        Args:
            lease_time: Lease in seconds (<= 0 uses the configured visibility timeout)

        Returns:
            ClaimedItem, or None when no item is available

        Raises:
            SerializationError: If the message body cannot be decoded
            QueueNotCreatedError: If the queue has not been created
            TransportError: If the receive fails (unless treat_receive_errors_as_empty)
        """
        queue_url = self.handle.require_url()
        terms = self.handle.lease_terms(lease_time)

        try:
            message = self.transport.receive_message(
                queue_url,
                terms.visibility_timeout,
                terms.wait_time_seconds
            )
        except TransportError as e:
            if not self.config.treat_receive_errors_as_empty:
                raise
            logger.warning(
                "Receive failed, reporting no item",
                queue=self.handle.name,
                error_code=e.code,
                error=str(e)
            )
            return None

        if message is None:
            logger.debug(
                "No item available",
                queue=self.handle.name,
                wait_time_seconds=terms.wait_time_seconds
            )
            return None

        if not message.receipt_handle:
            logger.warning(
                "Received message without receipt handle, ignoring it",
                queue=self.handle.name,
                message_id=message.message_id
            )
            return None

        try:
            data = self.serializer.decode(message.body)
        except SerializationError as e:
            logger.error(
                "Failed to decode message body",
                queue=self.handle.name,
                message_id=message.message_id,
                receive_count=message.receive_count,
                error=str(e)
            )
            raise

        item = ClaimedItem(
            data=data,
            handle=message.receipt_handle,
            queue_name=self.handle.name,
            message_id=message.message_id,
            receive_count=message.receive_count,
            lease_seconds=terms.visibility_timeout
        )

        logger.info(
            "Item claimed",
            queue=self.handle.name,
            message_id=item.message_id,
            receive_count=item.receive_count,
            lease_seconds=item.lease_seconds
        )
        self._publish("ItemsClaimed")

        return item

    def release_item(self, item: ClaimedItem) -> bool:
        """
        Release a claimed item so any consumer can claim it again.

        The lease is cut to zero; the item's handle is invalid afterwards.

        Raises:
            InvalidItemError: If the item has no receipt handle
            TransportError: If the visibility change fails
        """
        handle = self._require_handle(item, "release")
        queue_url = self.handle.require_url()

        self.transport.change_visibility(queue_url, handle, 0)

        logger.info("Item released", queue=self.handle.name, message_id=item.message_id)
        self._publish("ItemsReleased")

        return True

    def delete_item(self, item: ClaimedItem) -> None:
        """
        Delete a claimed item permanently.

        Deleting an already deleted item is not an error.

        Raises:
            InvalidItemError: If the item has no receipt handle
            TransportError: If the delete fails
        """
        handle = self._require_handle(item, "delete")
        queue_url = self.handle.require_url()

        self.transport.delete_message(queue_url, handle)

        logger.info("Item deleted", queue=self.handle.name, message_id=item.message_id)
        self._publish("ItemsDeleted")

    def number_of_items(self) -> int:
        """
        Return the approximate number of visible items.

        The count is eventually consistent: use it for backlog signals,
        not for exact accounting.
        """
        queue_url = self.handle.require_url()
        attributes = self.transport.get_attributes(queue_url, [APPROXIMATE_COUNT_ATTRIBUTE])
        count = int(attributes.get(APPROXIMATE_COUNT_ATTRIBUTE, 0))

        self._publish("QueueDepth", float(count))
        return count

    def _require_handle(self, item: Any, action: str) -> str:
        if not isinstance(item, ClaimedItem) or not item.has_handle():
            logger.error(
                f"Cannot {action} item without receipt handle",
                queue=self.handle.name,
                item_type=type(item).__name__
            )
            raise InvalidItemError(f"Cannot {action} an item without a receipt handle")
        return item.handle

    def _publish(self, metric_name: str, value: float = 1.0) -> None:
        if self.metrics is None:
            return
        self.metrics.put_metric(
            metric_name=metric_name,
            value=value,
            dimensions={'QueueName': self.handle.name}
        )
