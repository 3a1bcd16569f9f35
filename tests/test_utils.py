"""Tests for argument parsing helpers and record models."""
import pytest

from redis_sweep_tool.keyspace.exceptions import InvalidArgumentError
from redis_sweep_tool.keyspace.models import DeletionRecord, KeyType, ScanProgress
from redis_sweep_tool.keyspace.utils import (
    chunked,
    format_duration,
    parse_address,
    parse_duration,
    validate_pattern,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        ("0", 0.0),
        ("1.5", 1.5),
        ("200ms", 0.2),
        ("5s", 5.0),
        ("1m30s", 90.0),
        ("2h", 7200.0),
    ],
)
def test_parse_duration(value, expected):
    assert parse_duration(value) == pytest.approx(expected)


@pytest.mark.parametrize("value", ["", "abc", "5x", "-1", "1s garbage"])
def test_parse_duration_rejects_invalid(value):
    with pytest.raises(InvalidArgumentError):
        parse_duration(value)


def test_format_duration():
    assert format_duration(0.25) == "250ms"
    assert format_duration(5) == "5.00s"
    assert format_duration(65.2) == "1m 5.20s"
    assert format_duration(3725) == "1h 2m 5s"


@pytest.mark.parametrize(
    "address,expected",
    [
        ("localhost:6379", ("localhost", 6379)),
        ("10.0.0.1:7000", ("10.0.0.1", 7000)),
        ("redis.internal", ("redis.internal", 6379)),
        ("[::1]:6380", ("::1", 6380)),
    ],
)
def test_parse_address(address, expected):
    assert parse_address(address) == expected


@pytest.mark.parametrize("address", ["", ":6379", "host:port"])
def test_parse_address_rejects_invalid(address):
    with pytest.raises(InvalidArgumentError):
        parse_address(address)


def test_chunked_keeps_order_and_remainder():
    keys = [str(i) for i in range(120)]

    chunks = list(chunked(keys, 50))

    assert [len(c) for c in chunks] == [50, 50, 20]
    assert [k for c in chunks for k in c] == keys


def test_chunked_rejects_non_positive_size():
    with pytest.raises(InvalidArgumentError):
        list(chunked(["a"], 0))


def test_validate_pattern_message():
    with pytest.raises(InvalidArgumentError, match="--pattern '\\*'"):
        validate_pattern("")


def test_key_type_falls_back_to_unknown():
    assert KeyType.from_reply("zset") is KeyType.ZSET
    assert KeyType.from_reply("none") is KeyType.UNKNOWN
    assert KeyType.from_reply("vectorset") is KeyType.UNKNOWN


def test_deletion_record_line():
    assert DeletionRecord(["a", "b"], 1).to_log_line() == "1 a b\n"


def test_deletion_record_rejects_impossible_count():
    with pytest.raises(ValueError):
        DeletionRecord(["a"], 2)


def test_scan_progress_rate():
    assert str(ScanProgress("n1:6379", 500, 2.0)) == "[n1:6379] processed 500 keys (~250.00 keys/s)"
    assert ScanProgress("n1:6379", 10, 0).keys_per_second == 0.0
