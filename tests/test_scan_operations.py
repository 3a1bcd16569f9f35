"""Tests for cursor iteration, progress, throttling, cancellation and cluster fan-out."""
import io
import threading
import time

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from conftest import FakeRedis, make_cluster_client, make_single_client, strings
from redis_sweep_tool.keyspace.core.scan_operations import (
    ScanOptions,
    for_each_shard,
    iterate_keys,
    scan_batches,
    scan_keys,
)
from redis_sweep_tool.keyspace.core.cancellation import CancellationToken
from redis_sweep_tool.keyspace.core.count_operations import print_keys
from redis_sweep_tool.keyspace.core.client import RedisClient
from redis_sweep_tool.keyspace.exceptions import (
    InvalidArgumentError,
    OperationCancelledError,
    StoreConnectionError,
)
from redis_sweep_tool.keyspace.logging_config import PROGRESS


def _collect(client, options, cancel):
    seen = []
    lock = threading.Lock()

    def handler(shard, keys, _cancel):
        with lock:
            seen.extend(keys)

    scan_keys(client, options, handler, cancel)
    return seen


def test_every_matching_key_is_handled(cancel):
    keys = [f"user:{i}" for i in range(250)]
    client = make_single_client(FakeRedis(strings(keys)))

    seen = _collect(client, ScanOptions("user:*", batch_size=30), cancel)

    assert sorted(seen) == sorted(keys)


def test_scan_stops_when_cursor_returns_to_zero(cancel):
    fake = FakeRedis(strings([f"k{i}" for i in range(25)]))
    node = RedisClient(fake, "localhost:6379")

    batches = list(scan_batches(node, "*", 10, cancel))

    assert [len(b) for b in batches] == [10, 10, 5]
    assert fake.count_calls("scan") == 3


def test_empty_batches_do_not_end_the_scan(cancel):
    data = strings([f"a{i}" for i in range(20)])
    data.update(strings([f"b{i}" for i in range(5)]))
    fake = FakeRedis(data)
    node = RedisClient(fake, "localhost:6379")
    calls = []

    processed = iterate_keys(node, "b*", 5, lambda s, k, c: calls.append(k), cancel)

    assert processed == 5
    assert calls == [[f"b{i}" for i in range(5)]]
    # Four empty pages of a* keys were scanned first
    assert fake.count_calls("scan") == 5


def test_no_matches_never_calls_handler(cancel):
    client = make_single_client(FakeRedis(strings(["a", "b"])))

    assert _collect(client, ScanOptions("zzz*"), cancel) == []


def test_empty_pattern_is_rejected(cancel):
    client = make_single_client(FakeRedis())

    with pytest.raises(InvalidArgumentError):
        scan_keys(client, ScanOptions(""), lambda s, k, c: None, cancel)


def test_handler_error_aborts_iteration(cancel):
    fake = FakeRedis(strings([f"k{i}" for i in range(50)]))
    client = make_single_client(fake)

    def handler(shard, keys, _cancel):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        scan_keys(client, ScanOptions("*", batch_size=10), handler, cancel)
    assert fake.count_calls("scan") == 1


def test_scan_error_is_translated(cancel):
    fake = FakeRedis(strings(["a"]))
    fake.fail_on["scan"] = RedisConnectionError("refused")
    client = make_single_client(fake)

    with pytest.raises(StoreConnectionError, match="localhost:6379"):
        scan_keys(client, ScanOptions("*"), lambda s, k, c: None, cancel)


def test_cancelled_token_stops_before_next_scan():
    cancel = CancellationToken()
    fake = FakeRedis(strings([f"k{i}" for i in range(50)]))
    client = make_single_client(fake)

    def handler(shard, keys, token):
        cancel.cancel()

    with pytest.raises(OperationCancelledError):
        scan_keys(client, ScanOptions("*", batch_size=10), handler, cancel)
    assert fake.count_calls("scan") == 1


def test_wait_throttles_each_batch(cancel):
    client = make_single_client(FakeRedis(strings([f"k{i}" for i in range(30)])))

    start = time.monotonic()
    seen = _collect(client, ScanOptions("*", batch_size=10, wait=0.2), cancel)
    elapsed = time.monotonic() - start

    assert len(seen) == 30
    assert elapsed >= 0.4


def test_cancel_interrupts_throttle_wait():
    cancel = CancellationToken()
    client = make_single_client(FakeRedis(strings([f"k{i}" for i in range(30)])))
    threading.Timer(0.1, cancel.cancel).start()

    start = time.monotonic()
    with pytest.raises(OperationCancelledError):
        _collect(client, ScanOptions("*", batch_size=10, wait=5.0), cancel)
    assert time.monotonic() - start < 2.0


def test_cluster_scan_covers_every_shard(cancel):
    shards = {
        "10.0.0.1:6379": FakeRedis(strings([f"a:{i}" for i in range(40)])),
        "10.0.0.2:6379": FakeRedis(strings([f"b:{i}" for i in range(40)])),
        "10.0.0.3:6379": FakeRedis(strings([f"c:{i}" for i in range(40)])),
    }
    client = make_cluster_client(shards)

    seen = _collect(client, ScanOptions("*", batch_size=7), cancel)

    assert len(seen) == 120
    assert len(set(seen)) == 120
    assert all(fake.closed for fake in shards.values())


def test_cluster_handler_receives_owning_shard(cancel):
    shards = {
        "10.0.0.1:6379": FakeRedis(strings(["a:1", "a:2"])),
        "10.0.0.2:6379": FakeRedis(strings(["b:1"])),
    }
    client = make_cluster_client(shards)
    owners = {}
    lock = threading.Lock()

    def handler(shard, keys, _cancel):
        with lock:
            for key in keys:
                owners[key] = shard.address

    scan_keys(client, ScanOptions("*"), handler, cancel)

    assert owners == {"a:1": "10.0.0.1:6379", "a:2": "10.0.0.1:6379", "b:1": "10.0.0.2:6379"}


def test_first_shard_failure_cancels_the_others(cancel):
    shard2 = FakeRedis(strings(["b:1"]))
    shard2.fail_on["scan"] = RedisConnectionError("shard down")
    shards = {
        "10.0.0.1:6379": FakeRedis(strings([f"a:{i}" for i in range(1000)])),
        "10.0.0.2:6379": shard2,
        "10.0.0.3:6379": FakeRedis(strings([f"c:{i}" for i in range(1000)])),
    }
    client = make_cluster_client(shards)
    observed = []

    def scan_shard(shard, token):
        try:
            iterate_keys(shard, "*", 10, lambda s, k, c: time.sleep(0.01), token)
        except OperationCancelledError:
            observed.append(shard.address)
            raise

    with pytest.raises(StoreConnectionError, match="10.0.0.2:6379"):
        for_each_shard(client, scan_shard, cancel)

    assert sorted(observed) == ["10.0.0.1:6379", "10.0.0.3:6379"]
    assert shards["10.0.0.1:6379"].count_calls("scan") < 100
    assert shards["10.0.0.3:6379"].count_calls("scan") < 100
    assert not cancel.cancelled


def test_parent_cancel_reaches_every_shard():
    cancel = CancellationToken()
    shards = {
        "10.0.0.1:6379": FakeRedis(strings([f"a:{i}" for i in range(1000)])),
        "10.0.0.2:6379": FakeRedis(strings([f"b:{i}" for i in range(1000)])),
    }
    client = make_cluster_client(shards)
    threading.Timer(0.1, cancel.cancel).start()

    with pytest.raises(OperationCancelledError):
        scan_keys(client, ScanOptions("*", batch_size=10), lambda s, k, c: time.sleep(0.01), cancel)

    for fake in shards.values():
        assert fake.count_calls("scan") < 100


def _progress_messages(caplog):
    return [r.getMessage() for r in caplog.records if r.levelno == PROGRESS]


def test_progress_is_reported_periodically_and_at_the_end(cancel, caplog):
    fake = FakeRedis(strings([f"k{i}" for i in range(100)]))
    node = RedisClient(fake, "localhost:6379")

    with caplog.at_level(PROGRESS):
        processed = iterate_keys(
            node, "*", 10, lambda s, k, c: time.sleep(0.03), cancel, progress_interval=0.05
        )

    messages = _progress_messages(caplog)
    assert processed == 100
    assert len(messages) >= 2
    assert all(m.startswith("[localhost:6379] processed ") for m in messages)
    assert messages[-1].startswith("[localhost:6379] processed 100 keys (~")
    assert messages[-1].endswith(" keys/s)")


def test_final_progress_report_after_handler_error(cancel, caplog):
    fake = FakeRedis(strings([f"k{i}" for i in range(100)]))
    node = RedisClient(fake, "localhost:6379")
    batches = []

    def handler(shard, keys, _cancel):
        batches.append(keys)
        if len(batches) == 2:
            raise RuntimeError("boom")

    with caplog.at_level(PROGRESS), pytest.raises(RuntimeError, match="boom"):
        iterate_keys(node, "*", 10, handler, cancel, progress_interval=60)

    messages = _progress_messages(caplog)
    assert len(messages) == 1
    assert messages[0].startswith("[localhost:6379] processed 20 keys (~")


def test_key_batches_round_trip_binary_names(cancel):
    key = b"bin:\xff\xfe".decode("utf-8", "surrogateescape")
    client = make_single_client(FakeRedis(strings([key])))
    buffer = io.BytesIO()
    writer = io.TextIOWrapper(buffer, encoding="utf-8", errors="surrogateescape")

    print_keys(client, ScanOptions("*"), writer, cancel)

    assert buffer.getvalue() == b"bin:\xff\xfe\n"
