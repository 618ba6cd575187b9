"""Snowflake-style ID generator for listing, bid and transaction IDs.

IDs are decimal strings that sort by creation time within one node, so
`ORDER BY id` is a stable tie-breaker after `created_at`.
"""

import threading
import time

_EPOCH_MS = 1_700_000_000_000  # 2023-11-14 approx
_NODE_BITS = 10
_SEQUENCE_BITS = 12
_MAX_NODE = (1 << _NODE_BITS) - 1
_MAX_SEQUENCE = (1 << _SEQUENCE_BITS) - 1


class SnowflakeIdGenerator:
    """Layout (64 bits): 41 bits ms since epoch | 10 bits node | 12 bits sequence."""

    def __init__(self, node_id: int = 0) -> None:
        if not (0 <= node_id <= _MAX_NODE):
            raise ValueError(f"node_id must be 0-{_MAX_NODE}, got {node_id}")
        self._node_id = node_id
        self._sequence = 0
        self._last_ms = -1
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            now_ms = int(time.time() * 1000)
            if now_ms < self._last_ms:
                # Clock stepped backwards: keep issuing from the last seen ms
                now_ms = self._last_ms
            if now_ms == self._last_ms:
                self._sequence = (self._sequence + 1) & _MAX_SEQUENCE
                if self._sequence == 0:
                    while now_ms <= self._last_ms:
                        now_ms = int(time.time() * 1000)
            else:
                self._sequence = 0
            self._last_ms = now_ms
            value = (
                ((now_ms - _EPOCH_MS) << (_NODE_BITS + _SEQUENCE_BITS))
                | (self._node_id << _SEQUENCE_BITS)
                | self._sequence
            )
            return str(value)


def timestamp_ms_of(snowflake_id: str) -> int:
    """Unix epoch milliseconds encoded in a snowflake ID."""
    return (int(snowflake_id) >> (_NODE_BITS + _SEQUENCE_BITS)) + _EPOCH_MS


_default_generator = SnowflakeIdGenerator()


def generate_id() -> str:
    """Generate a unique snowflake-style string ID using the module-level default generator."""
    return _default_generator.next_id()
