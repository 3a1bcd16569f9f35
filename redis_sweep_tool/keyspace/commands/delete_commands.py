"""
Delete command for keyspace.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import click

from ..constants import DEFAULT_DELETE_BATCH
from ..core.cancellation import CancellationToken
from ..core.delete_operations import delete_with_count, delete_without_count
from ..core.scan_operations import ScanOptions
from ..core.topology_operations import connect
from ..exceptions import KeyspaceError
from ..logging_config import get_logger, setup_logging
from ..utils import format_duration, output_json, output_text
from .common import (
    DURATION,
    connection_options,
    output_options,
    report_error,
    require_pattern,
    scan_options,
    show_doc,
)

logger = get_logger(__name__)


@click.command("delete")
@connection_options
@scan_options
@click.option(
    "--delete-batch",
    "delete_batch_size",
    type=click.IntRange(min=1),
    default=DEFAULT_DELETE_BATCH,
    show_default=True,
    help="Delete this amount of keys per DEL command",
)
@click.option(
    "--unsafe-no-count",
    is_flag=True,
    help=(
        "WARNING: faster but considerably more dangerous. By default keys are counted "
        "first, deletion is confirmed and then deletion starts. With this option counting "
        "is skipped and keys are deleted as they are found after a single confirmation"
    ),
)
@click.option(
    "--think-time",
    type=DURATION,
    default="5s",
    show_default=True,
    help="Wait this long before asking for confirmation",
)
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False, dir_okay=True, writable=True, exists=True),
    help="Directory for the listed-keys and deletion log files (default: system temp dir)",
)
@click.option(
    "--unsafe-no-confirm",
    is_flag=True,
    help="Skip the confirmation prompt entirely (also: UNSAFE_NO_CONFIRM=true)",
)
@output_options
@click.pass_context
def delete_command(
    ctx: click.Context,
    address: str,
    cluster: bool,
    pattern: str | None,
    batch_size: int,
    wait: float,
    delete_batch_size: int,
    unsafe_no_count: bool,
    think_time: float,
    log_dir: str | None,
    unsafe_no_confirm: bool,
    text: bool,
    verbose: int,
    doc: bool,
) -> None:
    """Delete keys matching a pattern.

    By default matching keys are first listed to a file and counted, then the
    operator must type the Redis address to confirm, then a second scan
    deletes them. Every DEL is logged as '<deleted> <key1> ... <keyN>'.

    Exit codes:
    - 0: Deletion finished (or nothing matched)
    - 1: Redis error
    - 2: Invalid arguments
    - 3: Confirmation declined
    - 130: Cancelled

    Examples:

    \b
        # Counted delete (default)
        redis-sweep-tool keyspace delete -a localhost:6379 -p 'tmp:*'

    \b
        # Throttled delete across a cluster
        redis-sweep-tool keyspace delete -a node1:6379 -c -p 'cache:*' -w 50ms

    \b
        # Unattended (automation only)
        UNSAFE_NO_CONFIRM=true redis-sweep-tool keyspace delete -a localhost:6379 -p 'tmp:*'

    \b
    Output Format:
        Returns JSON:
        {"pattern": "tmp:*", "address": "localhost:6379", "counted": 120,
         "deleted": 118, "duration_seconds": 0.42,
         "listed_keys_file": "/tmp/...", "deletion_log_file": "/tmp/..."}
    """
    if doc:
        show_doc(ctx, "delete")

    setup_logging(verbose)
    pattern = require_pattern(ctx, pattern)

    cancel = CancellationToken()
    try:
        logger.info(f"Deleting keys matching '{pattern}' on {address}")
        logger.debug(
            f"Batch: {batch_size}, Delete batch: {delete_batch_size}, Wait: {wait}s, "
            f"Counted: {not unsafe_no_count}"
        )

        client = connect(address, cluster, cancel)
        try:
            delete = delete_without_count if unsafe_no_count else delete_with_count
            result = delete(
                client,
                ScanOptions(pattern, batch_size, wait),
                cancel,
                delete_batch_size=delete_batch_size,
                think_time=think_time,
                unsafe_no_confirm=unsafe_no_confirm,
                log_dir=log_dir,
            )
        finally:
            client.close()

        if text:
            if result["counted"] == 0:
                output_text(f"No keys with pattern {pattern} were found")
            else:
                duration = format_duration(result["duration_seconds"])
                output_text(f"✅ Deleted {result['deleted']} keys in {duration}")
                output_text(f"Deletion log: {result['deletion_log_file']}")
                if "listed_keys_file" in result:
                    output_text(f"Listed keys: {result['listed_keys_file']}")
        else:
            output_json(result)

    except KeyboardInterrupt as e:
        cancel.cancel()
        report_error(e, text)
    except KeyspaceError as e:
        report_error(e, text)
