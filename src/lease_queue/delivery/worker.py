"""
Module: delivery/worker.py
Description: Queue worker that claims and processes items.

Claims items one at a time, hands each payload to a handler, deletes
the item when the handler returns and releases it when the handler
raises. Throttled claims are retried with exponential backoff; every
other transport failure stops the run and propagates.
"""

import time
from typing import Any, Callable, Optional

from pydantic import BaseModel
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..exceptions import SuspendQueue, ThrottlingError, TransportError
from ..models.item import ClaimedItem
from ..sqs_queue.client import QueueClient
from ..utils.logger import get_logger

logger = get_logger(__name__)


class WorkerStats(BaseModel):
    """Counters for a worker run."""

    claimed: int = 0
    processed: int = 0
    failed: int = 0
    suspended: bool = False


def _log_retry(retry_state) -> None:
    logger.warning(
        "Claim throttled, backing off",
        attempt=retry_state.attempt_number,
        sleep_seconds=retry_state.next_action.sleep if retry_state.next_action else None
    )


class QueueWorker:
    """
    Process items from a queue with a handler function.

    Args:
        client: Queue client to claim from
        handler: Callable receiving the item payload
        lease_time: Lease per claim in seconds (<= 0 uses the configured default)
        retry_attempts: Claim attempts when throttled
        retry_max_wait: Upper bound in seconds on the backoff between attempts

    Example:
        >>> worker = QueueWorker(client, send_email, lease_time=30)
        >>> stats = worker.run(max_items=100)
    """

    def __init__(
        self,
        client: QueueClient,
        handler: Callable[[Any], Any],
        lease_time: int = 0,
        retry_attempts: int = 3,
        retry_max_wait: float = 10
    ):
        if not callable(handler):
            raise ValueError("handler must be callable")
        if retry_attempts < 1:
            raise ValueError("retry_attempts must be at least 1")

        self.client = client
        self.handler = handler
        self.lease_time = lease_time
        self._retrying = Retrying(
            stop=stop_after_attempt(retry_attempts),
            wait=wait_exponential(multiplier=1, min=0, max=retry_max_wait),
            retry=retry_if_exception_type(ThrottlingError),
            before_sleep=_log_retry,
            reraise=True
        )

    def claim(self) -> Optional[ClaimedItem]:
        """Claim one item, retrying while the service throttles."""
        return self._retrying(self.client.claim_item, self.lease_time)

    def process_one(self, stats: Optional[WorkerStats] = None) -> Optional[bool]:
        """
        Claim and process a single item.

        Returns:
            None if the queue was empty, True if the item was processed
            and deleted, False if the handler failed and it was released

        Raises:
            SuspendQueue: If the handler asked to stop (item is released)
            TransportError: If claiming or deleting fails
        """
        stats = stats if stats is not None else WorkerStats()

        item = self.claim()
        if item is None:
            return None
        stats.claimed += 1

        try:
            self.handler(item.data)
        except SuspendQueue:
            self._release(item)
            raise
        except Exception as e:
            logger.error(
                "Item processing failed, releasing it",
                queue=item.queue_name,
                message_id=item.message_id,
                receive_count=item.receive_count,
                error=str(e),
                error_type=type(e).__name__
            )
            self._release(item)
            stats.failed += 1
            return False

        self.client.delete_item(item)
        stats.processed += 1
        return True

    def run(self, max_items: Optional[int] = None, time_limit: Optional[float] = None) -> WorkerStats:
        """
        Process items until the queue is empty or a limit is reached.

        Args:
            max_items: Stop after claiming this many items
            time_limit: Stop claiming after this many seconds

        Returns:
            WorkerStats for the run
        """
        stats = WorkerStats()
        started = time.monotonic()

        while True:
            if max_items is not None and stats.claimed >= max_items:
                break
            if time_limit is not None and time.monotonic() - started >= time_limit:
                break

            try:
                result = self.process_one(stats)
            except SuspendQueue as e:
                logger.warning(
                    "Queue processing suspended",
                    queue=self.client.handle.name,
                    reason=str(e)
                )
                stats.suspended = True
                break

            if result is None:
                break

        logger.info(
            "Queue run finished",
            queue=self.client.handle.name,
            claimed=stats.claimed,
            processed=stats.processed,
            failed=stats.failed,
            suspended=stats.suspended
        )
        return stats

    def _release(self, item: ClaimedItem) -> None:
        try:
            self.client.release_item(item)
        except TransportError as e:
            # Lease already expired: the item is visible again regardless
            logger.warning(
                "Failed to release item",
                queue=item.queue_name,
                message_id=item.message_id,
                error_code=e.code,
                error=str(e)
            )
