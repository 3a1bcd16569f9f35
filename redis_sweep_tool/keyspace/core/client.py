"""
Redis client wrappers with error handling.

RedisClient wraps one node connection and remembers the address it dialed.
UnifiedClient holds the entry-point node plus, when clustered, a cluster
client used to discover the primary shards.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from collections.abc import Callable
from typing import Any

import redis
from redis.cluster import RedisCluster
from redis.exceptions import (
    AuthenticationError,
    RedisClusterException,
    RedisError,
    ResponseError,
)
from redis.exceptions import (
    ConnectionError as RedisConnectionError,
)
from redis.exceptions import (
    TimeoutError as RedisTimeoutError,
)

from ..constants import CONNECT_TIMEOUT
from ..exceptions import (
    StoreAuthenticationError,
    StoreCommandError,
    StoreConnectionError,
    StoreError,
)
from ..logging_config import TRACE, get_logger
from ..models import Endpoint
from ..utils import parse_address

logger = get_logger(__name__)

# Binary key names survive the str round trip back into DEL
CONNECTION_OPTIONS: dict[str, Any] = {
    "decode_responses": True,
    "encoding_errors": "surrogateescape",
    "socket_connect_timeout": CONNECT_TIMEOUT,
}


class RedisClient:
    """Single Redis node connection with error translation."""

    def __init__(self, connection: Any, address: str):
        """
        Wrap a node connection.

        Args:
            connection: redis.Redis (or compatible) connection
            address: 'host:port' actually dialed, used in logs
        """
        self.connection = connection
        self.address = address

    def scan(self, cursor: int, match: str, count: int) -> tuple[int, list[str]]:
        """
        Run one SCAN step.

        Returns:
            Tuple of (next cursor, keys)

        Raises:
            StoreError: For Redis errors
        """
        try:
            next_cursor, keys = self.connection.scan(cursor=cursor, match=match, count=count)
            logger.log(TRACE, f"[{self.address}] SCAN {cursor} -> {next_cursor} ({len(keys)} keys)")
            return int(next_cursor), list(keys)
        except RedisError as e:
            self._handle_error(e)
            raise  # For type checker

    def key_type(self, key: str) -> str:
        """Return the TYPE reply for a key ('none' if it vanished)."""
        try:
            return self.connection.type(key)
        except RedisError as e:
            self._handle_error(e)
            raise  # For type checker

    def mget(self, keys: list[str]) -> list[str | None]:
        try:
            return self.connection.mget(keys)
        except RedisError as e:
            self._handle_error(e)
            raise  # For type checker

    def lrange_all(self, key: str) -> list[str]:
        try:
            return self.connection.lrange(key, 0, -1)
        except RedisError as e:
            self._handle_error(e)
            raise  # For type checker

    def sscan(self, key: str, cursor: int, count: int) -> tuple[int, list[str]]:
        """Run one SSCAN step, returning (next cursor, members)."""
        try:
            next_cursor, members = self.connection.sscan(key, cursor=cursor, count=count)
            return int(next_cursor), list(members)
        except RedisError as e:
            self._handle_error(e)
            raise  # For type checker

    def zrange_with_scores(self, key: str) -> list[tuple[str, float]]:
        try:
            return self.connection.zrange(key, 0, -1, withscores=True)
        except RedisError as e:
            self._handle_error(e)
            raise  # For type checker

    def hgetall(self, key: str) -> dict[str, str]:
        try:
            return self.connection.hgetall(key)
        except RedisError as e:
            self._handle_error(e)
            raise  # For type checker

    def delete(self, keys: list[str]) -> int:
        """
        Delete keys with a single DEL.

        Returns:
            Number of keys Redis actually removed
        """
        try:
            return int(self.connection.delete(*keys))
        except RedisError as e:
            self._handle_error(e)
            raise  # For type checker

    def is_cluster(self) -> bool:
        """Check INFO cluster for cluster_enabled."""
        try:
            info = self.connection.info("cluster")
        except RedisError as e:
            self._handle_error(e)
            raise  # For type checker
        return str(info.get("cluster_enabled", 0)) not in ("0", "")

    def close(self) -> None:
        self.connection.close()

    def _handle_error(self, error: Exception) -> None:
        """
        Convert redis-py errors to keyspace exceptions.

        Raises:
            StoreAuthenticationError: If authentication failed
            StoreConnectionError: If the node is unreachable or timed out
            StoreCommandError: If Redis rejected the command
            StoreError: For other errors
        """
        if isinstance(error, AuthenticationError):
            raise StoreAuthenticationError(f"[{self.address}] authentication failed: {error}")
        elif isinstance(error, (RedisConnectionError, RedisTimeoutError)):
            raise StoreConnectionError(f"[{self.address}] connection error: {error}")
        elif isinstance(error, ResponseError):
            raise StoreCommandError(f"[{self.address}] command error: {error}")
        elif isinstance(error, RedisClusterException):
            raise StoreError(f"[{self.address}] cluster error: {error}")
        else:
            raise StoreError(f"[{self.address}] redis error: {error}")


def _default_node_factory(host: str, port: int) -> Any:
    return redis.Redis(host=host, port=port, **CONNECTION_OPTIONS)


def _default_cluster_factory(host: str, port: int) -> Any:
    return RedisCluster(host=host, port=port, **CONNECTION_OPTIONS)


class UnifiedClient:
    """Uniform handle over a single node or a cluster."""

    def __init__(
        self,
        endpoint: Endpoint,
        single: RedisClient,
        cluster: Any | None = None,
        node_factory: Callable[[str, int], Any] = _default_node_factory,
    ):
        """
        Initialize the unified client.

        Args:
            endpoint: Resolved endpoint
            single: Connection to the entry-point node
            cluster: Cluster client (anything with get_primaries()), if clustered
            node_factory: Builds a per-shard connection from host and port
        """
        self.endpoint = endpoint
        self.single = single
        self.cluster = cluster
        self.node_factory = node_factory

    @property
    def is_cluster(self) -> bool:
        return self.endpoint.cluster and self.cluster is not None

    def open_shards(self) -> list[RedisClient]:
        """
        Open one connection per primary shard.

        Callers own the returned handles and must close them. In single-node
        mode the entry-point connection is returned and must not be closed.

        Raises:
            StoreError: If the cluster topology cannot be read
        """
        if not self.is_cluster:
            return [self.single]

        try:
            primaries = self.cluster.get_primaries()
        except (RedisError, RedisClusterException) as e:
            self.single._handle_error(e)
            raise  # For type checker

        shards = []
        for node in primaries:
            address = f"{node.host}:{node.port}"
            shards.append(RedisClient(self.node_factory(node.host, node.port), address))
        logger.debug(f"Opened {len(shards)} shard connections")
        return shards

    def close(self) -> None:
        if self.cluster is not None:
            self.cluster.close()
        self.single.close()


def open_node(
    address: str,
    node_factory: Callable[[str, int], Any] = _default_node_factory,
) -> RedisClient:
    """
    Open a connection to a single node.

    Args:
        address: 'host:port' of the node
        node_factory: Builds the underlying connection

    Raises:
        InvalidArgumentError: If the address is malformed
    """
    host, port = parse_address(address)
    logger.info(f"Connecting to {host}:{port}")
    return RedisClient(node_factory(host, port), f"{host}:{port}")


def open_cluster(
    node: RedisClient,
    cluster_factory: Callable[[str, int], Any] = _default_cluster_factory,
) -> Any:
    """
    Open a cluster client seeded from an already connected node.

    Raises:
        StoreError: If the cluster cannot be initialized
    """
    host, port = parse_address(node.address)
    try:
        return cluster_factory(host, port)
    except (RedisError, RedisClusterException) as e:
        node._handle_error(e)
        raise  # For type checker
