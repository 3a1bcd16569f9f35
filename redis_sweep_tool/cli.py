"""CLI entry point for redis-sweep-tool.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import click

from redis_sweep_tool.keyspace.commands.delete_commands import delete_command
from redis_sweep_tool.keyspace.commands.dump_commands import dump_command
from redis_sweep_tool.keyspace.commands.scan_commands import count_command, print_command
from redis_sweep_tool.keyspace.commands.topology_commands import shards_command


@click.group()
@click.version_option(version="0.1.0")
def main() -> None:
    """A CLI to count, print, dump and delete Redis keys by pattern"""
    pass


@main.group("keyspace")
def keyspace() -> None:
    """SCAN-based bulk operations over a Redis node or cluster"""
    pass


# Register read-only scan commands
keyspace.add_command(count_command)
keyspace.add_command(print_command)
keyspace.add_command(dump_command)

# Register destructive commands
keyspace.add_command(delete_command)

# Register topology commands
keyspace.add_command(shards_command)

if __name__ == "__main__":
    main()
