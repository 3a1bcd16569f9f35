"""
Topology command for keyspace - show how an address resolves.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import click

from ..core.cancellation import CancellationToken
from ..core.topology_operations import connect, describe_topology
from ..exceptions import KeyspaceError
from ..logging_config import get_logger, setup_logging
from ..utils import output_json, output_text
from .common import connection_options, report_error

logger = get_logger(__name__)


@click.command("shards")
@connection_options
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
def shards_command(
    address: str,
    cluster: bool,
    text: bool,
    verbose: int,
) -> None:
    """Show the resolved topology and the shards a scan would visit.

    Examples:

    \b
        # Single node
        redis-sweep-tool keyspace shards -a localhost:6379

    \b
        # Cluster primaries
        redis-sweep-tool keyspace shards -a node1:6379 -c

    \b
    Output Format:
        Returns JSON:
        {"address": "node1:6379", "mode": "cluster", "cluster_requested": true,
         "shards": ["10.0.0.1:6379", "10.0.0.2:6379", "10.0.0.3:6379"]}
    """
    setup_logging(verbose)

    cancel = CancellationToken()
    try:
        client = connect(address, cluster, cancel)
        try:
            result = describe_topology(client)
        finally:
            client.close()

        if text:
            output_text(f"Address: {result['address']}")
            output_text(f"Mode: {result['mode']}")
            output_text(f"Shards ({len(result['shards'])}):")
            for shard in result["shards"]:
                output_text(f"  {shard}")
        else:
            output_json(result)

    except KeyboardInterrupt as e:
        cancel.cancel()
        report_error(e, text)
    except KeyspaceError as e:
        report_error(e, text)
