"""
Topology operations for keyspace - cluster detection and mode resolution.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from collections.abc import Callable
from typing import Any

import click

from ..constants import CLUSTER_MISMATCH_WAIT
from ..logging_config import get_logger
from ..models import Endpoint
from .cancellation import CancellationToken
from .client import (
    RedisClient,
    UnifiedClient,
    _default_cluster_factory,
    _default_node_factory,
    open_cluster,
    open_node,
)

logger = get_logger(__name__)

WARNING_WORD = click.style("WARNING!", fg="red", bold=True)


def resolve_topology(
    node: RedisClient,
    cluster_requested: bool,
    cancel: CancellationToken,
    mismatch_wait: float = CLUSTER_MISMATCH_WAIT,
    address: str | None = None,
) -> Endpoint:
    """
    Decide whether the run operates in cluster mode.

    If the node is a cluster member but cluster mode was not requested, warn,
    wait `mismatch_wait` seconds and fall back to single-node mode. If cluster
    mode was requested on a non-cluster node, warn and continue single-node.

    Args:
        node: Connected entry-point node
        cluster_requested: Whether the operator passed --cluster
        cancel: Cancellation token for the mismatch wait
        mismatch_wait: Seconds to wait before downgrading
        address: Address as the operator typed it (defaults to the node address)

    Returns:
        Resolved endpoint

    Raises:
        StoreError: If cluster membership cannot be queried
        OperationCancelledError: If cancelled during the mismatch wait
    """
    clustered = node.is_cluster()
    endpoint = Endpoint(
        address=address or node.address,
        cluster=clustered,
        cluster_requested=cluster_requested,
    )

    if clustered and not cluster_requested:
        logger.warning(
            f"{WARNING_WORD} Connecting to a node that is a member of a cluster, "
            "but cluster mode (-c|--cluster) is NOT enabled. "
            "Commands will be local to this particular node. "
            f"Waiting {mismatch_wait:g} seconds before continuing"
        )
        cancel.sleep(mismatch_wait)
        endpoint.downgrade_to_single()
    elif cluster_requested and not clustered:
        logger.warning(
            f"{WARNING_WORD} Cluster mode (-c|--cluster) requested, but {node.address} "
            "is not a cluster member. Continuing in single-node mode"
        )

    mode = "cluster" if endpoint.cluster else "single-node"
    logger.info(f"Endpoint {endpoint.address} resolved to {mode} mode")
    return endpoint


def connect(
    address: str,
    cluster_requested: bool,
    cancel: CancellationToken,
    mismatch_wait: float = CLUSTER_MISMATCH_WAIT,
    node_factory: Callable[[str, int], Any] = _default_node_factory,
    cluster_factory: Callable[[str, int], Any] = _default_cluster_factory,
) -> UnifiedClient:
    """
    Connect to an address and resolve its topology.

    The cluster client is only created when the run ends up in cluster mode.

    Raises:
        InvalidArgumentError: If the address is malformed
        StoreError: If the endpoint cannot be reached
        OperationCancelledError: If cancelled during the mismatch wait
    """
    node = open_node(address, node_factory)
    try:
        endpoint = resolve_topology(node, cluster_requested, cancel, mismatch_wait, address)
        cluster = open_cluster(node, cluster_factory) if endpoint.cluster else None
    except BaseException:
        node.close()
        raise

    return UnifiedClient(endpoint, node, cluster=cluster, node_factory=node_factory)


def describe_topology(client: UnifiedClient) -> dict[str, Any]:
    """Summarize the resolved endpoint and its shard addresses."""
    shards = client.open_shards()
    try:
        addresses = [shard.address for shard in shards]
    finally:
        if client.is_cluster:
            for shard in shards:
                shard.close()

    return {
        "address": client.endpoint.address,
        "mode": "cluster" if client.endpoint.cluster else "single",
        "cluster_requested": client.endpoint.cluster_requested,
        "shards": addresses,
    }
