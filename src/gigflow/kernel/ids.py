"""
Identifier generation using time-ordered UUIDs

Ids for events, vendors, applications, discrepancies and queued offline
actions all come from here. Time ordering keeps the offline queue and the
discrepancy history naturally sorted by creation.
"""

import secrets
import threading
import time
from typing import Protocol


class IdFactory(Protocol):
    """Protocol for ID generation strategies"""

    def generate(self) -> str:
        """Generate a new unique ID"""
        ...


def generate_id(prefix: str | None = None) -> str:
    """
    Generate a UUIDv7-like identifier

    The first 48 bits hold the Unix timestamp in milliseconds, the rest is
    random, so string ordering matches creation ordering.

    Args:
        prefix: Optional readable prefix (e.g., "vendor" -> "vendor-0190...")

    Returns:
        Sortable UUID string, prefixed when requested
    """
    timestamp_48 = int(time.time() * 1000) & 0xFFFFFFFFFFFF
    rand_12 = secrets.randbits(12)
    rand_62 = secrets.randbits(62)

    # Version 7 nibble, RFC 4122 variant bits
    time_high = (timestamp_48 >> 16) & 0xFFFFFFFF
    time_low = timestamp_48 & 0xFFFF
    version_and_rand = 0x7000 | rand_12
    variant_and_seq = 0x8000 | ((rand_62 >> 48) & 0x3FFF)
    node = rand_62 & 0xFFFFFFFFFFFF

    uuid_str = (
        f"{time_high:08x}-{time_low:04x}-{version_and_rand:04x}-"
        f"{variant_and_seq:04x}-{node:012x}"
    )
    return f"{prefix}-{uuid_str}" if prefix else uuid_str


class DefaultIdFactory:
    """Default ID factory using UUIDv7-like generation"""

    def generate(self) -> str:
        return generate_id()


class SequentialIdFactory:
    """
    Deterministic ID factory for tests and demos

    Produces "<prefix>-1", "<prefix>-2", ... so assertions can name ids.
    """

    def __init__(self, prefix: str = "id") -> None:
        self.prefix = prefix
        self._counter = 0
        self._lock = threading.Lock()

    def generate(self) -> str:
        with self._lock:
            self._counter += 1
            return f"{self.prefix}-{self._counter}"


default_id_factory = DefaultIdFactory()
