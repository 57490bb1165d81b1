"""Cryptographically secure random identifiers."""

from __future__ import annotations

import secrets
import string

ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits


def random_below(upper: int) -> int:
    """Return a uniform integer in ``[0, upper)`` without modulo bias.

    Draws ``upper.bit_length()`` random bits at a time and rejects draws that
    fall outside the range.
    """
    if upper < 1:
        raise ValueError("upper must be positive")
    if upper == 1:
        return 0
    bits = (upper - 1).bit_length()
    while True:
        draw = secrets.randbits(bits)
        if draw < upper:
            return draw


def token(length: int = 30, alphabet: str = ALPHABET) -> str:
    """Generate a random string of ``length`` characters from ``alphabet``."""
    if length < 0:
        raise ValueError("length must not be negative")
    size = len(alphabet)
    return "".join(alphabet[random_below(size)] for _ in range(length))
