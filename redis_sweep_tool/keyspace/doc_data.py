"""
Documentation data for keyspace commands.

Structured data for operator documentation generation.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from typing import Any

_SCAN_LOAD = {
    "Commands": "SCAN <cursor> MATCH <pattern> COUNT <batch>, one call per batch",
    "Blocking": "SCAN is incremental, Redis is never blocked for the whole keyspace",
    "Throttle": "--wait pauses after every non-empty batch on each shard",
    "Cluster": "Every primary is scanned concurrently (one thread per shard)",
}

_SCAN_FAILURES = [
    "Redis unreachable or authentication failed: exit 1",
    "--pattern missing or empty: usage error, exit 2",
    "One cluster shard fails: all shards stop, first error reported, exit 1",
    "Ctrl-C: in-flight scans stop after their current batch, exit 130",
]

# Command: count
COUNT_DOC = {
    "name": "count - Count Keys Matching a Pattern",
    "synopsis": (
        "redis-sweep-tool keyspace count -a HOST:PORT -p PATTERN "
        "[--cluster] [--batch N] [--wait DURATION]"
    ),
    "description": (
        "Walks the whole keyspace with SCAN and counts the keys matching PATTERN. "
        "With --cluster every primary shard is scanned and the counts are summed. "
        "Read-only."
    ),
    "properties": {
        "Access": "Read-only",
        "Coverage": "Every key present for the whole scan is counted at least once",
        "Accuracy": "Keys added or removed during the scan may or may not be counted",
        "Idempotency": "Safe to repeat",
    },
    "safety": [
        "No writes: only SCAN and INFO are issued",
        "Topology check: a cluster node used without --cluster is scanned as a single node "
        "after a 5s warning, so only that node's keys are seen",
    ],
    "examples": [
        {
            "title": "Count Sessions",
            "code": "redis-sweep-tool keyspace count -a localhost:6379 -p 'session:*'",
        },
        {
            "title": "Gentle Count on a Cluster",
            "code": """redis-sweep-tool keyspace count \\
  -a node1:6379 --cluster \\
  -p 'cache:*' --batch 200 --wait 100ms -v""",
        },
    ],
    "pipelines": [
        {
            "title": "Guard a Cleanup Job",
            "code": """N=$(redis-sweep-tool keyspace count -a "$REDIS" -p 'tmp:*' --text)
if [ "$N" -gt 100000 ]; then echo "too many keys: $N"; exit 1; fi""",
            "note": "--text prints only the number",
        },
    ],
    "failure_modes": _SCAN_FAILURES,
    "load": _SCAN_LOAD,
    "see_also": ["print(1)", "delete(1)", "dump(1)", "shards(1)"],
}

# Command: print
PRINT_DOC = {
    "name": "print - Print Keys Matching a Pattern",
    "synopsis": (
        "redis-sweep-tool keyspace print -a HOST:PORT -p PATTERN "
        "[--cluster] [--batch N] [--wait DURATION]"
    ),
    "description": (
        "Writes every key matching PATTERN to stdout, one per line, as it is scanned. "
        "Read-only."
    ),
    "properties": {
        "Access": "Read-only",
        "Ordering": "Unordered; with --cluster batches from different shards interleave",
        "Duplicates": "SCAN may return a key more than once if the keyspace is rehashed",
    },
    "safety": [
        "No writes: only SCAN and INFO are issued",
        "Whole lines: batches are written under a lock, lines never tear",
    ],
    "examples": [
        {
            "title": "Review Before Deleting",
            "code": "redis-sweep-tool keyspace print -a localhost:6379 -p 'tmp:*' | head -50",
        },
    ],
    "pipelines": [
        {
            "title": "Unique Prefixes",
            "code": """redis-sweep-tool keyspace print -a localhost:6379 -p '*' \\
  | cut -d: -f1 | sort | uniq -c | sort -rn""",
        },
    ],
    "failure_modes": _SCAN_FAILURES,
    "load": _SCAN_LOAD,
    "see_also": ["count(1)", "dump(1)"],
}

# Command: delete
DELETE_DOC = {
    "name": "delete - Delete Keys Matching a Pattern",
    "synopsis": (
        "redis-sweep-tool keyspace delete -a HOST:PORT -p PATTERN [--cluster] "
        "[--batch N] [--wait DURATION] [--delete-batch N] [--think-time DURATION] "
        "[--unsafe-no-count] [--unsafe-no-confirm] [--log-dir DIR]"
    ),
    "description": (
        "Deletes every key matching PATTERN. By default a first scan lists the "
        "matching keys to a file and counts them, the operator confirms by typing "
        "the Redis address, and a second scan deletes. Keys are deleted with "
        "DEL in sub-batches of --delete-batch and every DEL is appended to a "
        "deletion log as '<deleted> <key1> ... <keyN>'."
    ),
    "properties": {
        "Access": "Destructive",
        "Coverage": "Keys created after confirmation may also be deleted if they match",
        "Atomicity": "None across batches; each DEL is atomic on its own",
        "Recovery": "The deletion log lists every key sent to DEL",
    },
    "safety": [
        "Confirmation: nothing is deleted until the Redis address is typed back",
        "Think time: a pause (default 5s) before the prompt to read the summary",
        "Audit: listed-keys file and deletion log are kept in the temp dir",
        "Fail-fast: the first error on any shard stops deletion everywhere",
        "Empty match: no prompt and no deletion when the count is zero",
    ],
    "examples": [
        {
            "title": "Counted Delete",
            "code": "redis-sweep-tool keyspace delete -a localhost:6379 -p 'tmp:*'",
        },
        {
            "title": "Large Cluster Cleanup",
            "code": """redis-sweep-tool keyspace delete \\
  -a node1:6379 --cluster -p 'cache:v1:*' \\
  --batch 1000 --delete-batch 100 --wait 50ms -v""",
        },
        {
            "title": "Automation",
            "code": """UNSAFE_NO_CONFIRM=true redis-sweep-tool keyspace delete \\
  -a localhost:6379 -p 'tmp:*' --log-dir /var/log/cleanup""",
        },
    ],
    "pipelines": [
        {
            "title": "Verify the Deletion Log",
            "code": """LOG=$(redis-sweep-tool keyspace delete -a "$REDIS" -p 'tmp:*' \\
  | jq -r .deletion_log_file)
awk '{ n += $1 } END { print n }' "$LOG\"""",
            "note": "The first field of each line is the number of keys DEL removed",
        },
    ],
    "failure_modes": [
        "Confirmation text does not match or stdin closed: nothing deleted, exit 3",
        "Redis error mid-deletion: partial deletion, see the deletion log, exit 1",
        "Ctrl-C: in-flight DEL batches finish and are logged, exit 130",
        "--pattern missing or empty: usage error, exit 2",
    ],
    "load": {
        **_SCAN_LOAD,
        "Deletes": "DEL with up to --delete-batch keys per call",
        "Passes": "Two full scans by default, one with --unsafe-no-count",
    },
    "see_also": ["count(1)", "print(1)", "shards(1)"],
}

# Command: dump
DUMP_DOC = {
    "name": "dump - Export Keys and Values as JSON Lines",
    "synopsis": (
        "redis-sweep-tool keyspace dump -a HOST:PORT -p PATTERN [--cluster] "
        "[--batch N] [--wait DURATION] [--parallel N] [--output FILE]"
    ),
    "description": (
        "Scans keys matching PATTERN and writes one JSON object per key: "
        '{"key": ..., "type": ..., "value": ...}. Values are read with the '
        "command for their type. Streams and unknown types get a null value."
    ),
    "properties": {
        "Access": "Read-only",
        "Consistency": "Each value is read at dump time, not at a single snapshot",
        "Parallelism": "--parallel workers read values while the scan continues",
        "Vanished keys": "A key deleted between SCAN and TYPE is written as type unknown",
    },
    "safety": [
        "No writes: SCAN, TYPE, MGET, LRANGE, SSCAN, ZRANGE and HGETALL only",
        "Whole lines: records are written under a lock, lines never tear",
    ],
    "examples": [
        {
            "title": "Backup Before Delete",
            "code": """redis-sweep-tool keyspace dump -a localhost:6379 -p 'tmp:*' -o tmp-backup.jsonl
redis-sweep-tool keyspace delete -a localhost:6379 -p 'tmp:*'""",
        },
    ],
    "pipelines": [
        {
            "title": "Largest Lists",
            "code": """redis-sweep-tool keyspace dump -a localhost:6379 -p 'queue:*' \\
  | jq -r 'select(.type=="list") | "\\(.value | length) \\(.key)"' | sort -rn | head""",
        },
    ],
    "failure_modes": [
        *_SCAN_FAILURES,
        "Any value read fails: dump stops, output is partial, exit 1",
    ],
    "load": {
        **_SCAN_LOAD,
        "Values": "One TYPE per key plus one value command per key (MGET per batch for strings)",
    },
    "see_also": ["print(1)", "delete(1)"],
}

COMMAND_DOCS = {
    "count": COUNT_DOC,
    "print": PRINT_DOC,
    "delete": DELETE_DOC,
    "dump": DUMP_DOC,
}


def get_doc_data(command: str) -> dict[str, Any] | None:
    """
    Retrieve documentation data for a command.

    Args:
        command: Command name (e.g., "count", "delete")

    Returns:
        Documentation data dictionary or None if not found
    """
    return COMMAND_DOCS.get(command)
