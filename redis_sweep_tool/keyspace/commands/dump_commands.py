"""
Dump command for keyspace.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from typing import TextIO

import click

from ..constants import DEFAULT_PARALLEL
from ..core.cancellation import CancellationToken
from ..core.dump_operations import dump
from ..core.scan_operations import ScanOptions
from ..core.topology_operations import connect
from ..exceptions import KeyspaceError
from ..logging_config import get_logger, setup_logging
from .common import (
    connection_options,
    output_options,
    report_error,
    require_pattern,
    scan_options,
    show_doc,
)

logger = get_logger(__name__)


@click.command("dump")
@connection_options
@scan_options
@click.option(
    "--parallel",
    type=int,
    default=DEFAULT_PARALLEL,
    show_default=True,
    help="How many batches to dump in parallel once they are scanned",
)
@click.option(
    "--output",
    "-o",
    type=click.File("w", encoding="utf-8", lazy=False),
    default="-",
    help="Write JSON lines here instead of stdout",
)
@output_options
@click.pass_context
def dump_command(
    ctx: click.Context,
    address: str,
    cluster: bool,
    pattern: str | None,
    batch_size: int,
    wait: float,
    parallel: int,
    output: TextIO,
    text: bool,
    verbose: int,
    doc: bool,
) -> None:
    """Dump keys matching a pattern together with their values.

    Each key's type is read at dump time and its value fetched with the
    matching command (MGET, LRANGE, SSCAN, ZRANGE WITHSCORES, HGETALL).
    Stream values are not exported and are written as null.

    Examples:

    \b
        # Dump to a file with 4 workers
        redis-sweep-tool keyspace dump -a localhost:6379 -p 'user:*' --parallel 4 -o users.jsonl

    \b
        # Inspect hashes with jq
        redis-sweep-tool keyspace dump -a localhost:6379 -p 'cfg:*' | jq 'select(.type=="hash")'

    \b
    Output Format:
        One JSON object per line:
        {"key":"a","type":"string","value":"x"}
        {"key":"z","type":"zset","value":[{"score":1.0,"value":"m1"}]}
    """
    if doc:
        show_doc(ctx, "dump")

    setup_logging(verbose)
    pattern = require_pattern(ctx, pattern)

    cancel = CancellationToken()
    try:
        logger.info(f"Dumping keys matching '{pattern}' on {address} with {parallel} workers")

        client = connect(address, cluster, cancel)
        try:
            dumped = dump(client, ScanOptions(pattern, batch_size, wait), output, cancel, parallel)
        finally:
            client.close()
        logger.info(f"Dumped {dumped} keys")

    except KeyboardInterrupt as e:
        cancel.cancel()
        report_error(e, text)
    except KeyspaceError as e:
        report_error(e, text)
