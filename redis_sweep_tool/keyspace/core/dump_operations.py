"""
Dump operations for keyspace - type-aware export of keys and values.

A producer runs the batch pipeline and hands each batch to a fixed pool of
workers through a single-slot queue, so scanning never runs ahead of dumping
by more than one batch. Workers write one JSON line per key.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import queue
import threading
from typing import Any, TextIO

from ..constants import DEFAULT_PARALLEL, HANDOFF_POLL_INTERVAL, SET_SCAN_BATCH
from ..logging_config import get_logger
from ..models import DumpRecord, KeyType
from .cancellation import CancellationToken
from .client import RedisClient, UnifiedClient
from .concurrency import AtomicCounter, ErrorGroup
from .scan_operations import ScanOptions, close_shards, scan_keys

logger = get_logger(__name__)

_CLOSED = object()


class Handoff:
    """Single-slot queue whose put/get give up when the token is cancelled."""

    def __init__(self, cancel: CancellationToken, poll_interval: float = HANDOFF_POLL_INTERVAL):
        self._queue: queue.Queue = queue.Queue(maxsize=1)
        self._cancel = cancel
        self._poll_interval = poll_interval

    def put(self, item: Any) -> None:
        """
        Block until a worker has room for the item.

        Raises:
            OperationCancelledError: If cancelled while waiting
        """
        while True:
            self._cancel.raise_if_cancelled()
            try:
                self._queue.put(item, timeout=self._poll_interval)
                return
            except queue.Full:
                continue

    def get(self) -> Any:
        """
        Block until an item is available.

        Returns:
            The item, or None once the handoff is closed

        Raises:
            OperationCancelledError: If cancelled while waiting
        """
        while True:
            self._cancel.raise_if_cancelled()
            try:
                item = self._queue.get(timeout=self._poll_interval)
            except queue.Empty:
                continue
            if item is _CLOSED:
                # Leave the marker for the next worker
                self._queue.put(item)
                return None
            return item

    def close(self) -> None:
        self.put(_CLOSED)


def read_set_members(client: RedisClient, key: str, batch_size: int = SET_SCAN_BATCH) -> list[str]:
    """Collect every set member with SSCAN until its cursor returns to 0."""
    members: list[str] = []
    cursor = 0
    while True:
        cursor, batch = client.sscan(key, cursor, batch_size)
        members.extend(batch)
        if cursor == 0:
            return members


def classify_keys(client: RedisClient, keys: list[str]) -> dict[KeyType, list[str]]:
    """Group keys by their current TYPE."""
    groups: dict[KeyType, list[str]] = {key_type: [] for key_type in KeyType}
    for key in keys:
        groups[KeyType.from_reply(client.key_type(key))].append(key)
    return groups


def dump_keys(
    client: RedisClient,
    keys: list[str],
    writer: TextIO,
    write_lock: threading.Lock,
) -> int:
    """
    Write one JSON line per key with its type and value.

    Types are read at dump time; a key deleted since it was scanned is
    reported as 'unknown' with a null value.

    Args:
        client: Node that owns the keys
        keys: Keys to dump
        writer: Output stream
        write_lock: Serializes writes to `writer`

    Returns:
        Number of records written

    Raises:
        StoreError: For Redis errors (e.g. WRONGTYPE after a type change)
    """
    groups = classify_keys(client, keys)
    written = 0

    def emit(records: list[DumpRecord]) -> None:
        nonlocal written
        if not records:
            return
        text = "".join(record.to_json() + "\n" for record in records)
        with write_lock:
            writer.write(text)
            writer.flush()
        written += len(records)

    string_keys = groups[KeyType.STRING]
    if string_keys:
        values = client.mget(string_keys)
        emit([DumpRecord(key, KeyType.STRING, value) for key, value in zip(string_keys, values)])

    for key in groups[KeyType.LIST]:
        emit([DumpRecord(key, KeyType.LIST, client.lrange_all(key))])

    for key in groups[KeyType.SET]:
        emit([DumpRecord(key, KeyType.SET, read_set_members(client, key))])

    for key in groups[KeyType.ZSET]:
        members = [
            {"score": score, "value": member}
            for member, score in client.zrange_with_scores(key)
        ]
        emit([DumpRecord(key, KeyType.ZSET, members)])

    for key in groups[KeyType.HASH]:
        emit([DumpRecord(key, KeyType.HASH, client.hgetall(key))])

    # Stream contents are not exported
    emit([DumpRecord(key, KeyType.STREAM) for key in groups[KeyType.STREAM]])
    emit([DumpRecord(key, KeyType.UNKNOWN) for key in groups[KeyType.UNKNOWN]])

    logger.debug(f"[{client.address}] dumped {written} keys")
    return written


def dump(
    client: UnifiedClient,
    options: ScanOptions,
    writer: TextIO,
    cancel: CancellationToken,
    parallel: int = DEFAULT_PARALLEL,
) -> int:
    """
    Dump every matching key using `parallel` workers.

    Args:
        client: Endpoint to dump
        options: Scan options
        writer: Output stream for JSON lines
        cancel: Cancellation token
        parallel: Number of dump workers (values below 1 mean 1)

    Returns:
        Number of records written

    Raises:
        StoreError: On the first Redis error in any worker or the scan
        OperationCancelledError: If cancelled
    """
    parallel = max(1, parallel)
    group = ErrorGroup(cancel, max_workers=parallel + 1, name="dump")
    handoff = Handoff(group.token)
    write_lock = threading.Lock()
    written = AtomicCounter()

    def worker(token: CancellationToken) -> None:
        while True:
            entry = handoff.get()
            if entry is None:
                return
            shard, keys = entry
            written.add(dump_keys(shard, keys, writer, write_lock))

    def enqueue(shard: RedisClient, keys: list[str], _token: CancellationToken) -> None:
        handoff.put((shard, keys))

    # Shard connections must outlive the scan: workers still use them
    shards = client.open_shards() if client.is_cluster else None

    def producer(token: CancellationToken) -> None:
        scan_keys(client, options, enqueue, token, shards)
        handoff.close()

    try:
        for _ in range(parallel):
            group.go(worker)
        group.go(producer)
        group.wait()
    finally:
        if shards is not None:
            close_shards(client, shards)

    logger.info(f"Dumped {written.value} keys")
    return written.value
