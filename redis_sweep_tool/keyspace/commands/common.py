"""
Shared options and error reporting for keyspace commands.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from collections.abc import Callable
from typing import Any

import click

from ..constants import (
    DEFAULT_SCAN_BATCH,
    EXIT_ABORTED,
    EXIT_CANCELLED,
    EXIT_INVALID_ARGUMENT,
    EXIT_STORE_ERROR,
)
from ..doc_data import get_doc_data
from ..doc_generator import display_doc, generate_doc
from ..exceptions import (
    InvalidArgumentError,
    KeyspaceError,
    OperationCancelledError,
    StoreConnectionError,
    UserAbortedError,
)
from ..logging_config import get_logger
from ..utils import output_error, parse_duration

logger = get_logger(__name__)


class DurationType(click.ParamType):
    """Click parameter accepting '200ms', '5s', '1m30s' or plain seconds."""

    name = "duration"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> float:
        if isinstance(value, (int, float)):
            return float(value)
        try:
            return parse_duration(value)
        except InvalidArgumentError as e:
            self.fail(str(e), param, ctx)


DURATION = DurationType()


def connection_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Add --address and --cluster."""
    fn = click.option(
        "--cluster",
        "-c",
        is_flag=True,
        help="Connect in cluster mode (fan out over every primary shard)",
    )(fn)
    fn = click.option(
        "--address",
        "-a",
        envvar="REDIS_ADDRESS",
        required=True,
        help="Redis server address. Eg: localhost:6379",
    )(fn)
    return fn


def scan_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Add --pattern, --batch and --wait."""
    fn = click.option(
        "--wait",
        "-w",
        type=DURATION,
        default="0s",
        show_default=True,
        help="Wait this long between batches (e.g. 200ms, 1s) to limit load on Redis",
    )(fn)
    fn = click.option(
        "--batch",
        "-b",
        "batch_size",
        type=click.IntRange(min=1),
        default=DEFAULT_SCAN_BATCH,
        show_default=True,
        help="How many keys to scan at a time. Higher is faster but loads Redis more",
    )(fn)
    fn = click.option(
        "--pattern",
        "-p",
        default=None,
        help="Key pattern to match, same format as the SCAN command (use '*' for all keys)",
    )(fn)
    return fn


def output_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Add --text, --verbose and --doc."""
    fn = click.option(
        "--doc",
        is_flag=True,
        help="Show operator documentation (safety properties, examples, failure modes)",
    )(fn)
    fn = click.option(
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
    )(fn)
    fn = click.option("--text", is_flag=True, help="Output as human-readable text")(fn)
    return fn


def show_doc(ctx: click.Context, command: str) -> None:
    """Print the command's documentation and exit."""
    doc_data = get_doc_data(command)
    if doc_data:
        display_doc(generate_doc(**doc_data))
    else:
        click.echo(f"Documentation not available for: {command}", err=True)
        ctx.exit(1)


def require_pattern(ctx: click.Context, pattern: str | None) -> str:
    """Fail with a usage error when --pattern is missing or empty."""
    if not pattern:
        raise click.UsageError(
            "--pattern must be set to a value. To match all keys use --pattern '*'", ctx
        )
    return pattern


def report_error(error: BaseException, text: bool) -> None:
    """
    Print an error the way every keyspace command does, then exit.

    Exit codes:
    - 1: Redis error (unreachable, rejected command, ...)
    - 2: Invalid argument
    - 3: Operator declined confirmation
    - 130: Cancelled / interrupted
    """
    if isinstance(error, UserAbortedError):
        output_error(
            str(error),
            "Nothing was deleted. Re-run and type the confirmation text",
            EXIT_ABORTED,
            text,
        )
    elif isinstance(error, (OperationCancelledError, KeyboardInterrupt)):
        output_error(
            "operation cancelled",
            "Check the log files for work completed before cancellation",
            EXIT_CANCELLED,
            text,
        )
    elif isinstance(error, InvalidArgumentError):
        output_error(
            str(error), "Check the command arguments with --help", EXIT_INVALID_ARGUMENT, text
        )
    elif isinstance(error, StoreConnectionError):
        output_error(
            str(error), "Check the address and that Redis is reachable", EXIT_STORE_ERROR, text
        )
    elif isinstance(error, KeyspaceError):
        output_error(
            str(error), "Check the Redis server logs and re-run the command", EXIT_STORE_ERROR, text
        )
    else:
        raise error
