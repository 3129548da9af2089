"""
Package: config
Description: Queue configuration resolved from the environment.
"""

from .settings import QueueConfig, load_config

__all__ = [
    "QueueConfig",
    "load_config",
]
