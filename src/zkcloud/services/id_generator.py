"""Local ID generation and clock utilities."""

import secrets
import string
import time

_ALPHABET = string.ascii_letters + string.digits


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def generate_id(prefix: str = "local.", length: int = 32) -> str:
    """Generate a unique local ID.

    Args:
        prefix: The prefix (e.g., "local.").
        length: Number of random alphanumeric characters.

    Returns:
        A string like "local.1718000000000.aB3dE...".
    """
    token = "".join(secrets.choice(_ALPHABET) for _ in range(length))
    return f"{prefix}{now_ms()}.{token}"
