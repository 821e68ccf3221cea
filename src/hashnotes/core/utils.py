"""Utility functions for hashnotes."""

import time

_DIGITS36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def to_base36(value: int) -> str:
    """
    Render a non-negative integer in lowercase base 36.

    Examples:
        >>> to_base36(0)
        '0'
        >>> to_base36(35)
        'z'
        >>> to_base36(36)
        '10'
    """
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_DIGITS36[rem])
    return "".join(reversed(digits))
