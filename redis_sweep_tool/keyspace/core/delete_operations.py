"""
Delete operations for keyspace.

Two modes:
- counted: list and count matching keys, confirm, then scan again and delete
- uncounted: confirm, then delete keys as they are found

Every DEL is appended to a deletion log as '<deleted> <key1> ... <keyN>'.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import tempfile
import threading
import time
from typing import Any, TextIO

import click

from ..constants import (
    DEFAULT_DELETE_BATCH,
    DEFAULT_THINK_TIME,
    DELETION_LOG_PREFIX,
    LISTED_KEYS_PREFIX,
)
from ..exceptions import InvalidArgumentError
from ..logging_config import get_logger
from ..models import DeletionRecord
from ..utils import chunked, format_duration, validate_pattern
from .cancellation import CancellationToken
from .client import RedisClient, UnifiedClient
from .concurrency import AtomicCounter
from .confirm_operations import user_confirm
from .scan_operations import BatchHandler, ScanOptions, scan_keys

logger = get_logger(__name__)

MILD_WARNING = click.style("WARNING!", fg="yellow", bold=True)
SEVERE_WARNING = click.style("WARNING!", fg="red", bold=True)
DANGEROUS = click.style("DANGEROUS", fg="red", bold=True)


class LockedFile:
    """Text file whose writes are serialized and flushed."""

    def __init__(self, file: TextIO):
        self.file = file
        self.name = file.name
        self._lock = threading.Lock()

    def write(self, text: str) -> None:
        with self._lock:
            self.file.write(text)
            self.file.flush()

    def close(self) -> None:
        self.file.close()

    def __enter__(self) -> "LockedFile":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def open_log_file(prefix: str, address: str, log_dir: str | None = None) -> LockedFile:
    """
    Create a uniquely named log file that survives the run.

    Args:
        prefix: File name prefix
        address: Endpoint address, embedded in the file name
        log_dir: Directory (defaults to the system temp dir)
    """
    safe_address = address.replace("/", "_")
    file = tempfile.NamedTemporaryFile(
        mode="w",
        prefix=f"{prefix}-{safe_address}-",
        dir=log_dir,
        delete=False,
        encoding="utf-8",
        errors="surrogateescape",
    )
    logger.debug(f"Created {file.name}")
    return LockedFile(file)


def deletion_handler(
    delete_batch_size: int,
    deletion_log: LockedFile,
    total_deleted: AtomicCounter,
) -> BatchHandler:
    """
    Build a batch handler that deletes keys in sub-batches and logs each DEL.

    Args:
        delete_batch_size: Keys per DEL call
        deletion_log: Shared deletion log
        total_deleted: Shared counter of keys Redis reported as deleted
    """

    def handler(shard: RedisClient, keys: list[str], _cancel: CancellationToken) -> None:
        for batch in chunked(keys, delete_batch_size):
            deleted = shard.delete(batch)
            total_deleted.add(deleted)
            deletion_log.write(DeletionRecord(keys=batch, deleted=deleted).to_log_line())

    return handler


def run_deletion(
    client: UnifiedClient,
    options: ScanOptions,
    deletion_log: LockedFile,
    cancel: CancellationToken,
    delete_batch_size: int = DEFAULT_DELETE_BATCH,
) -> int:
    """
    Scan and delete every matching key.

    Returns:
        Number of keys Redis reported as deleted

    Raises:
        StoreError: On the first failed SCAN or DEL
        OperationCancelledError: If cancelled
    """
    total_deleted = AtomicCounter()
    handler = deletion_handler(delete_batch_size, deletion_log, total_deleted)

    start = time.monotonic()
    scan_keys(client, options, handler, cancel)
    logger.info(
        f"Deleted {total_deleted.value} keys in {format_duration(time.monotonic() - start)}"
    )
    return total_deleted.value


def _validate_delete_arguments(options: ScanOptions, delete_batch_size: int) -> None:
    validate_pattern(options.pattern)
    if delete_batch_size < 1:
        raise InvalidArgumentError("--delete-batch must be at least 1")


def list_keys_for_deletion(
    client: UnifiedClient,
    options: ScanOptions,
    listed_keys: LockedFile,
    cancel: CancellationToken,
) -> int:
    """
    Dry pass: write every matching key to the audit file and count them.

    Returns:
        Number of listed keys
    """
    count = AtomicCounter()

    def handler(_shard: RedisClient, keys: list[str], _cancel: CancellationToken) -> None:
        listed_keys.write("".join(f"{key}\n" for key in keys))
        count.add(len(keys))

    scan_keys(client, options, handler, cancel)
    return count.value


def delete_with_count(
    client: UnifiedClient,
    options: ScanOptions,
    cancel: CancellationToken,
    delete_batch_size: int = DEFAULT_DELETE_BATCH,
    think_time: float = DEFAULT_THINK_TIME,
    unsafe_no_confirm: bool = False,
    log_dir: str | None = None,
    stdin: TextIO | None = None,
) -> dict[str, Any]:
    """
    Count matching keys, ask for confirmation, then delete them in a second pass.

    The second pass is an independent scan: keys created after counting are
    deleted too, keys removed after counting are skipped.

    Returns:
        Summary with counted and deleted totals and the file paths

    Raises:
        UserAbortedError: If the operator does not confirm
        StoreError: For Redis errors
        OperationCancelledError: If cancelled
    """
    _validate_delete_arguments(options, delete_batch_size)
    address = client.endpoint.address
    with (
        open_log_file(LISTED_KEYS_PREFIX, address, log_dir) as listed_keys,
        open_log_file(DELETION_LOG_PREFIX, address, log_dir) as deletion_log,
    ):
        result: dict[str, Any] = {
            "pattern": options.pattern,
            "address": address,
            "counted": 0,
            "deleted": 0,
            "duration_seconds": 0.0,
            "listed_keys_file": listed_keys.name,
            "deletion_log_file": deletion_log.name,
        }

        logger.info("Counting keys for deletion")
        count = list_keys_for_deletion(client, options, listed_keys, cancel)
        result["counted"] = count

        if count == 0:
            logger.warning(f"No keys with pattern {options.pattern} were found")
            return result

        message = (
            f"{MILD_WARNING} Deleting an estimate of {count} keys "
            f"with pattern {options.pattern} in {address}.\n"
            f"Check {listed_keys.name} for selected keys.\n"
            f"Keys being deleted will be logged to {deletion_log.name}"
        )
        user_confirm(
            message,
            cancel,
            confirmation_text=address,
            think_time=think_time,
            unsafe_no_confirm=unsafe_no_confirm,
            stdin=stdin,
        )

        start = time.monotonic()
        result["deleted"] = run_deletion(client, options, deletion_log, cancel, delete_batch_size)
        result["duration_seconds"] = round(time.monotonic() - start, 3)
        return result


def delete_without_count(
    client: UnifiedClient,
    options: ScanOptions,
    cancel: CancellationToken,
    delete_batch_size: int = DEFAULT_DELETE_BATCH,
    think_time: float = DEFAULT_THINK_TIME,
    unsafe_no_confirm: bool = False,
    log_dir: str | None = None,
    stdin: TextIO | None = None,
) -> dict[str, Any]:
    """
    Ask for confirmation, then delete matching keys as they are found.

    Returns:
        Summary with the deleted total and the deletion log path

    Raises:
        UserAbortedError: If the operator does not confirm
        StoreError: For Redis errors
        OperationCancelledError: If cancelled
    """
    _validate_delete_arguments(options, delete_batch_size)
    address = client.endpoint.address
    with open_log_file(DELETION_LOG_PREFIX, address, log_dir) as deletion_log:
        message = (
            f"{SEVERE_WARNING} --unsafe-no-count passed. Skipping initial key counting. "
            f"Keys with pattern {options.pattern} will be deleted as they are found in {address}. "
            f"This is a faster but {DANGEROUS} option.\n"
            f"Keys being deleted will be logged to {deletion_log.name}"
        )
        user_confirm(
            message,
            cancel,
            confirmation_text=address,
            think_time=think_time,
            unsafe_no_confirm=unsafe_no_confirm,
            stdin=stdin,
        )

        start = time.monotonic()
        deleted = run_deletion(client, options, deletion_log, cancel, delete_batch_size)
        return {
            "pattern": options.pattern,
            "address": address,
            "counted": None,
            "deleted": deleted,
            "duration_seconds": round(time.monotonic() - start, 3),
            "deletion_log_file": deletion_log.name,
        }
