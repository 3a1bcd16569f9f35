"""
Constants for keyspace operations.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

# Default endpoint
DEFAULT_PORT = 6379
CONNECT_TIMEOUT = 5.0  # seconds

# Scan behavior
DEFAULT_SCAN_BATCH = 1000
DEFAULT_WAIT = 0.0  # seconds between batches
PROGRESS_INTERVAL = 5.0  # seconds between progress reports

# Topology
CLUSTER_MISMATCH_WAIT = 5.0  # seconds before downgrading to single-node mode

# Delete behavior
DEFAULT_DELETE_BATCH = 50
DEFAULT_THINK_TIME = 5.0  # seconds before asking for confirmation
LISTED_KEYS_PREFIX = "listed-redis-keys-for-deletion"
DELETION_LOG_PREFIX = "deleted-redis-keys"

# Dump behavior
DEFAULT_PARALLEL = 1
SET_SCAN_BATCH = 1000
HANDOFF_POLL_INTERVAL = 0.1  # seconds between cancellation checks on the handoff queue

# Confirmation
DEFAULT_CONFIRMATION = "y"
ENV_UNSAFE_NO_CONFIRM = "UNSAFE_NO_CONFIRM"

# Exit codes
EXIT_STORE_ERROR = 1
EXIT_INVALID_ARGUMENT = 2
EXIT_ABORTED = 3
EXIT_CANCELLED = 130
