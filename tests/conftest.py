"""
Pytest configuration and shared fixtures.

FakeRedis implements the slice of the redis-py client the keyspace
operations use, with cursor paging that stays stable while keys are deleted.
"""
import threading
from fnmatch import fnmatchcase
from types import SimpleNamespace

import pytest

from redis_sweep_tool.keyspace.core.cancellation import CancellationToken
from redis_sweep_tool.keyspace.core.client import RedisClient, UnifiedClient
from redis_sweep_tool.keyspace.models import Endpoint


class FakeRedis:
    """In-memory stand-in for redis.Redis (decode_responses=True)."""

    def __init__(self, data=None, cluster_enabled=0):
        self._lock = threading.Lock()
        self._order = []
        self.data = {}
        for key, entry in (data or {}).items():
            self.set(key, *entry)
        self.cluster_enabled = cluster_enabled
        self.calls = []
        self.fail_on = {}
        self.closed = False

    def set(self, key, key_type, value):
        with self._lock:
            if key not in self.data:
                self._order.append(key)
            self.data[key] = (key_type, value)

    def _record(self, command, *args):
        with self._lock:
            self.calls.append((command, args))
        if command in self.fail_on:
            raise self.fail_on[command]

    def count_calls(self, command):
        return sum(1 for name, _ in self.calls if name == command)

    def scan(self, cursor=0, match=None, count=None):
        self._record("scan", cursor, match, count)
        count = count or 10
        with self._lock:
            page = self._order[cursor : cursor + count]
            next_cursor = cursor + count if cursor + count < len(self._order) else 0
            keys = [k for k in page if k in self.data and fnmatchcase(k, match or "*")]
        return next_cursor, keys

    def type(self, key):
        self._record("type", key)
        entry = self.data.get(key)
        return entry[0] if entry else "none"

    def mget(self, keys):
        self._record("mget", list(keys))
        values = []
        for key in keys:
            entry = self.data.get(key)
            values.append(entry[1] if entry and entry[0] == "string" else None)
        return values

    def lrange(self, key, start, end):
        self._record("lrange", key, start, end)
        return list(self.data[key][1])

    def sscan(self, key, cursor=0, count=None):
        self._record("sscan", key, cursor, count)
        members = sorted(self.data[key][1])
        count = count or 10
        page = members[cursor : cursor + count]
        next_cursor = cursor + count if cursor + count < len(members) else 0
        return next_cursor, page

    def zrange(self, key, start, end, withscores=False):
        self._record("zrange", key, start, end, withscores)
        pairs = sorted(self.data[key][1].items(), key=lambda item: (item[1], item[0]))
        return [(member, float(score)) for member, score in pairs]

    def hgetall(self, key):
        self._record("hgetall", key)
        return dict(self.data[key][1])

    def delete(self, *keys):
        self._record("delete", list(keys))
        removed = 0
        with self._lock:
            for key in keys:
                if self.data.pop(key, None) is not None:
                    removed += 1
        return removed

    def info(self, section=None):
        self._record("info", section)
        return {"cluster_enabled": self.cluster_enabled}

    def close(self):
        self.closed = True


class FakeCluster:
    """Stand-in for redis.cluster.RedisCluster exposing get_primaries()."""

    def __init__(self, addresses):
        self.addresses = addresses
        self.closed = False

    def get_primaries(self):
        nodes = []
        for address in self.addresses:
            host, port = address.rsplit(":", 1)
            nodes.append(SimpleNamespace(host=host, port=int(port)))
        return nodes

    def close(self):
        self.closed = True


def strings(keys, value="v"):
    """Build FakeRedis data with one string value per key."""
    return {key: ("string", value) for key in keys}


def make_single_client(fake, address="localhost:6379"):
    return UnifiedClient(Endpoint(address), RedisClient(fake, address))


def make_cluster_client(shards, seed_address="node1:6379"):
    """
    Build a cluster-mode UnifiedClient over FakeRedis shards.

    Args:
        shards: Mapping of 'host:port' to FakeRedis
    """
    seed = RedisClient(FakeRedis(cluster_enabled=1), seed_address)
    return UnifiedClient(
        Endpoint(seed_address, cluster=True, cluster_requested=True),
        seed,
        cluster=FakeCluster(list(shards)),
        node_factory=lambda host, port: shards[f"{host}:{port}"],
    )


@pytest.fixture
def cancel():
    return CancellationToken()


@pytest.fixture(autouse=True)
def _no_unsafe_env(monkeypatch):
    """Tests decide confirmation behaviour explicitly."""
    monkeypatch.delenv("UNSAFE_NO_CONFIRM", raising=False)
