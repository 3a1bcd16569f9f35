"""
Count and print operations for keyspace.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import threading
from typing import TextIO

from ..logging_config import get_logger
from .cancellation import CancellationToken
from .client import RedisClient, UnifiedClient
from .concurrency import AtomicCounter
from .scan_operations import ScanOptions, scan_keys

logger = get_logger(__name__)


def count_keys(
    client: UnifiedClient,
    options: ScanOptions,
    cancel: CancellationToken,
) -> int:
    """
    Count keys matching the pattern across the whole endpoint.

    Returns:
        Number of matching keys seen by SCAN
    """
    count = AtomicCounter()

    def handler(_shard: RedisClient, keys: list[str], _cancel: CancellationToken) -> None:
        count.add(len(keys))

    logger.info(f"Counting keys with pattern '{options.pattern}'")
    scan_keys(client, options, handler, cancel)
    return count.value


def print_keys(
    client: UnifiedClient,
    options: ScanOptions,
    writer: TextIO,
    cancel: CancellationToken,
) -> int:
    """
    Write every matching key to `writer`, one per line.

    Each batch is written while holding a lock so shards never interleave
    within a batch.

    Returns:
        Number of keys written
    """
    lock = threading.Lock()
    count = AtomicCounter()

    def handler(_shard: RedisClient, keys: list[str], _cancel: CancellationToken) -> None:
        with lock:
            writer.write("".join(f"{key}\n" for key in keys))
            writer.flush()
        count.add(len(keys))

    scan_keys(client, options, handler, cancel)
    return count.value
