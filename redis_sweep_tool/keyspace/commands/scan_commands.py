"""
Read-only scan commands for keyspace: count and print.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import click

from ..core.cancellation import CancellationToken
from ..core.count_operations import count_keys, print_keys
from ..core.scan_operations import ScanOptions
from ..core.topology_operations import connect
from ..exceptions import KeyspaceError
from ..logging_config import get_logger, setup_logging
from ..utils import output_json, output_text
from .common import (
    connection_options,
    output_options,
    report_error,
    require_pattern,
    scan_options,
    show_doc,
)

logger = get_logger(__name__)


@click.command("count")
@connection_options
@scan_options
@output_options
@click.pass_context
def count_command(
    ctx: click.Context,
    address: str,
    cluster: bool,
    pattern: str | None,
    batch_size: int,
    wait: float,
    text: bool,
    verbose: int,
    doc: bool,
) -> None:
    """Count keys matching a pattern.

    Scans the whole keyspace with SCAN (every primary shard with --cluster)
    and prints how many keys matched. Nothing is modified.

    Examples:

    \b
        # Count session keys
        redis-sweep-tool keyspace count -a localhost:6379 -p 'session:*'

    \b
        # Count across a cluster, gently
        redis-sweep-tool keyspace count -a node1:6379 -c -p 'tmp:*' -b 500 -w 100ms

    \b
    Output Format:
        Returns JSON:
        {"pattern": "session:*", "address": "localhost:6379", "count": 1234}

        With --text only the number is printed.
    """
    if doc:
        show_doc(ctx, "count")

    setup_logging(verbose)
    pattern = require_pattern(ctx, pattern)

    cancel = CancellationToken()
    try:
        logger.info(f"Counting keys matching '{pattern}' on {address}")
        client = connect(address, cluster, cancel)
        try:
            count = count_keys(client, ScanOptions(pattern, batch_size, wait), cancel)
        finally:
            client.close()

        if text:
            output_text(str(count))
        else:
            output_json({"pattern": pattern, "address": address, "count": count})

    except KeyboardInterrupt as e:
        cancel.cancel()
        report_error(e, text)
    except KeyspaceError as e:
        report_error(e, text)


@click.command("print")
@connection_options
@scan_options
@output_options
@click.pass_context
def print_command(
    ctx: click.Context,
    address: str,
    cluster: bool,
    pattern: str | None,
    batch_size: int,
    wait: float,
    text: bool,
    verbose: int,
    doc: bool,
) -> None:
    """Print keys matching a pattern, one per line.

    Keys are written as they are scanned. With --cluster, shards are scanned
    concurrently and their batches interleave in the output.

    Examples:

    \b
        # List matching keys
        redis-sweep-tool keyspace print -a localhost:6379 -p 'user:*:cache'

    \b
        # Review before deleting
        redis-sweep-tool keyspace print -a localhost:6379 -p 'tmp:*' | head -100

    \b
    Output Format:
        One key per line on stdout.
    """
    if doc:
        show_doc(ctx, "print")

    setup_logging(verbose)
    pattern = require_pattern(ctx, pattern)

    cancel = CancellationToken()
    try:
        client = connect(address, cluster, cancel)
        try:
            printed = print_keys(
                client,
                ScanOptions(pattern, batch_size, wait),
                click.get_text_stream("stdout", errors="surrogateescape"),
                cancel,
            )
        finally:
            client.close()
        logger.info(f"Printed {printed} keys")

    except KeyboardInterrupt as e:
        cancel.cancel()
        report_error(e, text)
    except KeyspaceError as e:
        report_error(e, text)
