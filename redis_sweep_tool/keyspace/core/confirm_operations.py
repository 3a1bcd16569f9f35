"""
Confirmation gate for destructive keyspace operations.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import os
import sys
from typing import TextIO

import click

from ..constants import DEFAULT_CONFIRMATION, DEFAULT_THINK_TIME, ENV_UNSAFE_NO_CONFIRM
from ..exceptions import UserAbortedError
from ..logging_config import get_logger
from ..utils import format_duration
from .cancellation import CancellationToken

logger = get_logger(__name__)


def confirmation_bypassed(unsafe_no_confirm: bool = False) -> bool:
    """True when the flag or UNSAFE_NO_CONFIRM=true disables the prompt."""
    return unsafe_no_confirm or os.environ.get(ENV_UNSAFE_NO_CONFIRM) == "true"


def user_confirm(
    message: str,
    cancel: CancellationToken,
    confirmation_text: str = DEFAULT_CONFIRMATION,
    think_time: float = DEFAULT_THINK_TIME,
    unsafe_no_confirm: bool = False,
    stdin: TextIO | None = None,
) -> None:
    """
    Show a warning, wait, then require the operator to type a confirmation token.

    Args:
        message: Multi-line description of what is about to happen
        cancel: Cancellation token for the think-time wait
        confirmation_text: Exact text the operator must type
        think_time: Seconds to wait before prompting
        unsafe_no_confirm: Skip the whole gate
        stdin: Input stream (defaults to sys.stdin)

    Raises:
        UserAbortedError: On end of input or a mismatching answer
        OperationCancelledError: If cancelled during the think time
    """
    if confirmation_bypassed(unsafe_no_confirm):
        logger.info("Confirmation bypassed")
        return

    for line in message.splitlines():
        click.echo(line, err=True)

    if think_time > 0:
        click.echo(
            f"Waiting {format_duration(think_time)} before asking for confirmation", err=True
        )
        cancel.sleep(think_time)

    if not confirmation_text:
        confirmation_text = DEFAULT_CONFIRMATION

    click.echo(f"Type {confirmation_text} to confirm: ", err=True, nl=False)
    answer = (stdin or sys.stdin).readline()
    if not answer:
        logger.debug("End of input while waiting for confirmation")
        raise UserAbortedError()
    if answer.rstrip("\r\n") != confirmation_text:
        raise UserAbortedError()
