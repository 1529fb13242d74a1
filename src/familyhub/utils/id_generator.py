"""Entity id generation.

Ids look like ``chore-lq2x8k1c-4f9za``: a prefix naming the collection, the
creation time in milliseconds and a random suffix, both in base 36.
"""

import secrets
import time
from typing import Optional

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(number: int) -> str:
    """Encode a non-negative integer in lowercase base 36."""
    if number < 0:
        raise ValueError(f"Cannot encode negative number {number}")
    digits = []
    while True:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
        if number == 0:
            break
    return "".join(reversed(digits))


def generate_id(prefix: str = "", timestamp_ms: Optional[int] = None, suffix_length: int = 5) -> str:
    """Generate an entity id.

    Args:
        prefix: Collection prefix such as "chore" (omitted when empty)
        timestamp_ms: Creation time in milliseconds; defaults to now
        suffix_length: Number of random base-36 characters

    Returns:
        Id string
    """
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(_BASE36) for _ in range(suffix_length))
    stamp = to_base36(timestamp_ms)
    return f"{prefix}-{stamp}-{suffix}" if prefix else f"{stamp}-{suffix}"
