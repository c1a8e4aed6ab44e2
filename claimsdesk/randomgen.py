"""Random values for test data."""

from __future__ import annotations

import random
import string
import uuid

_rng = random.Random()


def random_int(low: int, high: int) -> int:
    """Return a random integer in ``[low, high]``; *low* when the range is empty."""
    if high <= low:
        return low
    return low + _rng.randrange(high - low + 1)


def random_string(n: int) -> str:
    """Return *n* random lowercase ASCII letters."""
    return "".join(_rng.choice(string.ascii_lowercase) for _ in range(n))


def random_numeric_string(n: int) -> str:
    """Return *n* random decimal digits."""
    return "".join(_rng.choice(string.digits) for _ in range(n))


def random_uuid() -> uuid.UUID:
    """Return a random version 4 UUID."""
    return uuid.uuid4()


def random_money() -> float:
    """Return a random amount between 0.00 and 999.99 with two decimals."""
    dollars = random_int(0, 999)
    cents = random_int(0, 99)
    return dollars + cents / 100.0


def random_float(low: float, high: float) -> float:
    """Return a random value in ``[low, high]`` in steps of 0.01."""
    if high <= low:
        return low
    span = high - low
    return low + random_int(0, int(span * 100)) / 100.0