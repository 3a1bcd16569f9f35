"""
Type models for keyspace operations.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class KeyType(Enum):
    """Value types reported by the Redis TYPE command."""

    STRING = "string"
    LIST = "list"
    SET = "set"
    ZSET = "zset"
    HASH = "hash"
    STREAM = "stream"
    UNKNOWN = "unknown"

    @classmethod
    def from_reply(cls, reply: str) -> "KeyType":
        """Map a TYPE reply to a KeyType, falling back to UNKNOWN."""
        try:
            return cls(reply)
        except ValueError:
            return cls.UNKNOWN


@dataclass
class Endpoint:
    """Target address and its resolved topology."""

    address: str
    cluster: bool = False
    cluster_requested: bool = False

    def downgrade_to_single(self) -> None:
        """Force single-node mode for the rest of the run."""
        self.cluster = False


@dataclass
class ScanProgress:
    """Cumulative progress of one shard's scan."""

    address: str
    processed: int
    elapsed: float

    @property
    def keys_per_second(self) -> float:
        if self.elapsed <= 0:
            return 0.0
        return self.processed / self.elapsed

    def __str__(self) -> str:
        return (
            f"[{self.address}] processed {self.processed} keys "
            f"(~{self.keys_per_second:.2f} keys/s)"
        )


@dataclass
class DeletionRecord:
    """One DEL call: the keys sent and how many Redis actually removed."""

    keys: list[str]
    deleted: int

    def __post_init__(self) -> None:
        if self.deleted > len(self.keys):
            raise ValueError(
                f"Deleted count {self.deleted} exceeds sub-batch size {len(self.keys)}"
            )

    def to_log_line(self) -> str:
        """Render as '<deleted> <key1> ... <keyN>' with trailing newline."""
        return " ".join([str(self.deleted), *self.keys]) + "\n"


@dataclass
class DumpRecord:
    """A key, its type at dump time, and its value."""

    key: str
    type: KeyType
    value: Any = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "type": self.type.value, "value": self.value}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))
