"""
Package: delivery
Description: Item processing on top of the queue client.

Provides the QueueWorker loop that claims items, runs a handler,
and deletes or releases each item depending on the outcome.
"""

from .worker import QueueWorker, WorkerStats

__all__ = [
    "QueueWorker",
    "WorkerStats",
]
