"""
Scan operations for keyspace - cursor iteration, cluster fan-out and the
batch pipeline every command is built on.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import threading
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from ..constants import DEFAULT_SCAN_BATCH, DEFAULT_WAIT, PROGRESS_INTERVAL
from ..logging_config import PROGRESS, get_logger
from ..models import ScanProgress
from ..utils import validate_pattern
from .cancellation import CancellationToken
from .client import RedisClient, UnifiedClient
from .concurrency import AtomicCounter, ErrorGroup

logger = get_logger(__name__)

# handler(shard, keys, cancel)
BatchHandler = Callable[[RedisClient, list[str], CancellationToken], None]


@dataclass
class ScanOptions:
    """What to scan and how fast."""

    pattern: str
    batch_size: int = DEFAULT_SCAN_BATCH
    wait: float = DEFAULT_WAIT


class ProgressReporter:
    """Logs a shard's scan progress on a fixed interval from a daemon thread."""

    def __init__(
        self,
        address: str,
        processed: AtomicCounter,
        cancel: CancellationToken,
        interval: float = PROGRESS_INTERVAL,
    ):
        self.address = address
        self.processed = processed
        self.interval = interval
        self._stop = cancel.child()
        self._start = time.monotonic()
        self._thread = threading.Thread(
            target=self._run, name=f"progress-{address}", daemon=True
        )

    def snapshot(self) -> ScanProgress:
        return ScanProgress(
            address=self.address,
            processed=self.processed.value,
            elapsed=time.monotonic() - self._start,
        )

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            logger.log(PROGRESS, str(self.snapshot()))

    def __enter__(self) -> "ProgressReporter":
        self._thread.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._stop.cancel()
        self._thread.join()
        logger.log(PROGRESS, str(self.snapshot()))


def scan_batches(
    client: RedisClient,
    pattern: str,
    batch_size: int,
    cancel: CancellationToken,
) -> Iterator[list[str]]:
    """
    Yield non-empty key batches from one node, following SCAN cursors.

    Starts at cursor 0 and stops the first time Redis returns cursor 0.
    The next SCAN is only issued once the consumer asks for the next batch.

    Raises:
        OperationCancelledError: If cancelled between SCAN calls
        StoreError: For Redis errors
    """
    cursor = 0
    while True:
        cancel.raise_if_cancelled()
        cursor, keys = client.scan(cursor, pattern, batch_size)
        if keys:
            yield keys
        if cursor == 0:
            return


def iterate_keys(
    client: RedisClient,
    pattern: str,
    batch_size: int,
    handler: BatchHandler,
    cancel: CancellationToken,
    progress_interval: float = PROGRESS_INTERVAL,
) -> int:
    """
    Feed every batch matching `pattern` on one node to `handler`, in cursor order.

    Args:
        client: Node to scan
        pattern: SCAN MATCH pattern
        batch_size: SCAN COUNT hint
        handler: Called as handler(client, keys, cancel) for each batch
        cancel: Cancellation token
        progress_interval: Seconds between progress reports

    Returns:
        Number of keys handed to the handler

    Raises:
        OperationCancelledError: If cancelled
        StoreError: For Redis errors
        Exception: Whatever the handler raises
    """
    processed = AtomicCounter()
    with ProgressReporter(client.address, processed, cancel, progress_interval):
        for keys in scan_batches(client, pattern, batch_size, cancel):
            processed.add(len(keys))
            handler(client, keys, cancel)
    return processed.value


def for_each_shard(
    client: UnifiedClient,
    fn: Callable[[RedisClient, CancellationToken], object],
    cancel: CancellationToken,
    shards: list[RedisClient] | None = None,
) -> None:
    """
    Run fn(shard, token) concurrently on every primary shard.

    The first shard to fail cancels the others; that first error is the one
    raised once every shard has stopped. Shard connections are opened and
    closed here unless the caller passes its own `shards`.

    Raises:
        StoreError: If the cluster topology cannot be read
        Exception: The first error raised by any shard
    """
    owned = shards is None
    if shards is None:
        shards = client.open_shards()
    logger.info(f"Fanning out over {len(shards)} shards: {', '.join(s.address for s in shards)}")
    try:
        group = ErrorGroup(cancel, max_workers=len(shards), name="shard")
        for shard in shards:
            group.go(fn, shard)
        group.wait()
    finally:
        if owned:
            close_shards(client, shards)


def close_shards(client: UnifiedClient, shards: list[RedisClient]) -> None:
    for shard in shards:
        if shard is not client.single:
            shard.close()


def throttled(handler: BatchHandler, wait: float) -> BatchHandler:
    """Wrap a handler so it sleeps `wait` seconds after each successful batch."""
    if wait <= 0:
        return handler

    def wrapper(shard: RedisClient, keys: list[str], cancel: CancellationToken) -> None:
        handler(shard, keys, cancel)
        cancel.sleep(wait)

    return wrapper


def scan_keys(
    client: UnifiedClient,
    options: ScanOptions,
    handler: BatchHandler,
    cancel: CancellationToken,
    shards: list[RedisClient] | None = None,
) -> None:
    """
    Run the batch pipeline: scan every matching key and hand batches to `handler`.

    Uses a single node or fans out over all primary shards depending on the
    resolved endpoint. In cluster mode the handler is called from several
    threads at once. `shards` lets a caller keep shard connections open
    beyond the scan.

    Raises:
        InvalidArgumentError: If the pattern is empty
        OperationCancelledError: If cancelled
        StoreError: For Redis errors
    """
    validate_pattern(options.pattern)
    callback = throttled(handler, options.wait)

    if client.is_cluster:

        def scan_shard(shard: RedisClient, token: CancellationToken) -> None:
            iterate_keys(shard, options.pattern, options.batch_size, callback, token)

        for_each_shard(client, scan_shard, cancel, shards)
    else:
        iterate_keys(client.single, options.pattern, options.batch_size, callback, cancel)
