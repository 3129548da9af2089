"""
Module: memory.py
Description: In-process queue transport.

Implements the transport contract inside the current process so
workers and tests can run without a remote service. Honors visibility
timeouts, issues a fresh receipt handle per receive, and long-polls
with a condition variable. State lives on the transport instance:
clients that must see the same queues have to share one instance.
"""

import threading
import time
import uuid
from collections import OrderedDict
from typing import Callable, Dict, List, Optional

from ..exceptions import QueueDoesNotExistError, TransportError
from ..models.item import ReceivedMessage
from ..utils.logger import get_logger
from .base import QueueTransport

logger = get_logger(__name__)

# Upper bound on a single condition wait so expiring leases are noticed
POLL_INTERVAL = 0.05


class _StoredMessage:
    __slots__ = ('message_id', 'body', 'receipt_handle', 'visible_at', 'receive_count')

    def __init__(self, message_id: str, body: str, visible_at: float):
        self.message_id = message_id
        self.body = body
        self.receipt_handle: Optional[str] = None
        self.visible_at = visible_at
        self.receive_count = 0


class _StoredQueue:
    __slots__ = ('name', 'attributes', 'messages')

    def __init__(self, name: str, attributes: Dict[str, str]):
        self.name = name
        self.attributes = attributes
        self.messages: "OrderedDict[str, _StoredMessage]" = OrderedDict()


class InMemoryTransport(QueueTransport):
    """
    Thread-safe in-memory transport.

    Args:
        region: Region label used in generated queue URLs
        clock: Monotonic clock used for visibility timeouts (injectable for tests)

    Example:
        >>> transport = InMemoryTransport()
        >>> url = transport.create_queue("orders")
        >>> transport.send_message(url, '{"id": 42}')
    """

    def __init__(self, region: str = "local", clock: Callable[[], float] = time.monotonic):
        self.region = region
        self._clock = clock
        self._condition = threading.Condition()
        self._queues: Dict[str, _StoredQueue] = {}

        logger.debug("In-memory transport initialized", region=region)

    def _url_for(self, name: str) -> str:
        return f"memory://{self.region}/{name}"

    def _queue(self, queue_url: str, operation: str) -> _StoredQueue:
        queue = self._queues.get(queue_url)
        if queue is None:
            raise QueueDoesNotExistError(
                f"Queue does not exist: {queue_url}",
                code="AWS.SimpleQueueService.NonExistentQueue",
                operation=operation
            )
        return queue

    def _find_by_receipt(self, queue: _StoredQueue, receipt_handle: str) -> Optional[_StoredMessage]:
        for message in queue.messages.values():
            if message.receipt_handle == receipt_handle:
                return message
        return None

    def create_queue(self, name: str, attributes: Optional[Dict[str, str]] = None) -> str:
        queue_url = self._url_for(name)
        with self._condition:
            if queue_url not in self._queues:
                self._queues[queue_url] = _StoredQueue(name, dict(attributes or {}))
                logger.info("Queue created", queue_name=name, queue_url=queue_url)
        return queue_url

    def get_queue_url(self, name: str) -> Optional[str]:
        queue_url = self._url_for(name)
        with self._condition:
            return queue_url if queue_url in self._queues else None

    def delete_queue(self, queue_url: str) -> None:
        with self._condition:
            self._queue(queue_url, "DeleteQueue")
            del self._queues[queue_url]
            self._condition.notify_all()
        logger.info("Queue deleted", queue_url=queue_url)

    def send_message(self, queue_url: str, body: str) -> str:
        message_id = str(uuid.uuid4())
        with self._condition:
            queue = self._queue(queue_url, "SendMessage")
            queue.messages[message_id] = _StoredMessage(message_id, body, self._clock())
            self._condition.notify_all()
        return message_id

    def receive_message(
        self,
        queue_url: str,
        visibility_timeout: int,
        wait_time_seconds: int
    ) -> Optional[ReceivedMessage]:
        deadline = time.monotonic() + max(0, wait_time_seconds)

        with self._condition:
            while True:
                queue = self._queue(queue_url, "ReceiveMessage")
                now = self._clock()
                for message in queue.messages.values():
                    if message.visible_at <= now:
                        message.receipt_handle = uuid.uuid4().hex
                        message.visible_at = now + visibility_timeout
                        message.receive_count += 1
                        return ReceivedMessage(
                            body=message.body,
                            receipt_handle=message.receipt_handle,
                            message_id=message.message_id,
                            receive_count=message.receive_count
                        )

                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return None
                self._condition.wait(min(remaining, POLL_INTERVAL))

    def change_visibility(self, queue_url: str, receipt_handle: str, visibility_timeout: int) -> None:
        with self._condition:
            queue = self._queue(queue_url, "ChangeMessageVisibility")
            now = self._clock()
            message = self._find_by_receipt(queue, receipt_handle)
            if message is None or message.visible_at <= now:
                raise TransportError(
                    "Receipt handle is invalid or its lease has expired",
                    code="ReceiptHandleIsInvalid",
                    operation="ChangeMessageVisibility"
                )
            message.visible_at = now + visibility_timeout
            self._condition.notify_all()

    def delete_message(self, queue_url: str, receipt_handle: str) -> None:
        with self._condition:
            queue = self._queue(queue_url, "DeleteMessage")
            message = self._find_by_receipt(queue, receipt_handle)
            if message is not None:
                del queue.messages[message.message_id]

    def get_attributes(self, queue_url: str, names: List[str]) -> Dict[str, str]:
        with self._condition:
            queue = self._queue(queue_url, "GetQueueAttributes")
            now = self._clock()
            visible = sum(1 for m in queue.messages.values() if m.visible_at <= now)
            values = dict(queue.attributes)
            values['ApproximateNumberOfMessages'] = str(visible)
            values['ApproximateNumberOfMessagesNotVisible'] = str(len(queue.messages) - visible)

        if 'All' in names:
            return values
        return {name: values[name] for name in names if name in values}
