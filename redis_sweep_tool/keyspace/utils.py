"""
Utility functions for keyspace operations.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import json
import re
import sys
from collections.abc import Iterator
from typing import Any

from .constants import DEFAULT_PORT
from .exceptions import InvalidArgumentError

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_address(address: str) -> tuple[str, int]:
    """
    Split a Redis address into host and port.

    Args:
        address: Address in 'host:port' form (port optional, IPv6 in brackets)

    Returns:
        Tuple of (host, port)

    Raises:
        InvalidArgumentError: If the address is empty or the port is not numeric
    """
    if not address:
        raise InvalidArgumentError("Address cannot be empty")

    host, sep, port = address.rpartition(":")
    if not sep or host.endswith(":"):
        # No port, or a bare IPv6 address
        host, port = address, str(DEFAULT_PORT)
    host = host.strip("[]")
    if not host:
        raise InvalidArgumentError(f"Address '{address}' has no host")
    if not port.isdigit():
        raise InvalidArgumentError(f"Address '{address}' has an invalid port")
    return host, int(port)


def parse_duration(value: str) -> float:
    """
    Parse a duration such as '200ms', '5s', '1m30s' or a bare number of seconds.

    Args:
        value: Duration string

    Returns:
        Duration in seconds

    Raises:
        InvalidArgumentError: If the value is not a valid duration
    """
    text = value.strip()
    try:
        seconds = float(text)
    except ValueError:
        pass
    else:
        if seconds < 0:
            raise InvalidArgumentError(f"Duration '{value}' cannot be negative")
        return seconds

    pos = 0
    total = 0.0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()

    if not text or pos != len(text):
        raise InvalidArgumentError(
            f"Invalid duration '{value}'. Use forms like '200ms', '5s', '1m30s'"
        )
    return total


def format_duration(seconds: float) -> str:
    """Render seconds as a short human-readable duration (e.g. '1m 5.20s')."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    minutes, secs = divmod(seconds, 60)
    hours, minutes = divmod(int(minutes), 60)
    if hours:
        return f"{hours}h {minutes}m {secs:.0f}s"
    if minutes:
        return f"{minutes}m {secs:.2f}s"
    return f"{secs:.2f}s"


def chunked(keys: list[str], size: int) -> Iterator[list[str]]:
    """
    Split keys into consecutive sub-batches of at most `size` items.

    Raises:
        InvalidArgumentError: If size is not positive
    """
    if size < 1:
        raise InvalidArgumentError("Batch size must be at least 1")
    for idx in range(0, len(keys), size):
        yield keys[idx : idx + size]


def validate_pattern(pattern: str) -> bool:
    """
    Validate a SCAN match pattern.

    Raises:
        InvalidArgumentError: If the pattern is empty
    """
    if not pattern:
        raise InvalidArgumentError(
            "--pattern must be set to a value. To match all keys use --pattern '*'"
        )
    return True


def output_json(data: dict[str, Any], quiet: bool = False) -> None:
    """
    Output JSON to stdout.

    Args:
        data: Data to output as JSON
        quiet: If True, suppress output
    """
    if not quiet:
        print(json.dumps(data))


def output_text(message: str, quiet: bool = False) -> None:
    """
    Output text to stdout.

    Args:
        message: Message to output
        quiet: If True, suppress output
    """
    if not quiet:
        print(message)


def error_json(error: str, solution: str, exit_code: int) -> dict[str, Any]:
    """
    Format error as JSON.

    Args:
        error: Error message
        solution: Solution suggestion
        exit_code: Exit code

    Returns:
        Error dictionary
    """
    return {"error": error, "solution": solution, "exit_code": exit_code}


def error_text(error: str, solution: str) -> str:
    """
    Format error as human-readable text.

    Args:
        error: Error message
        solution: Solution suggestion

    Returns:
        Formatted error message
    """
    return f"❌ Error: {error}\n\n💡 Solution: {solution}"


def output_error(error: str, solution: str, exit_code: int, text_format: bool = False) -> None:
    """
    Output error message and exit.

    Args:
        error: Error message
        solution: Solution suggestion
        exit_code: Exit code
        text_format: If True, output as text; otherwise JSON
    """
    if text_format:
        sys.stderr.write(error_text(error, solution) + "\n")
    else:
        sys.stderr.write(json.dumps(error_json(error, solution, exit_code)) + "\n")
    sys.exit(exit_code)
