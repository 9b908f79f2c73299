"""Numeric helpers for reported aggregates"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union


def round_half_up(value: float, digits: int = 0) -> Union[int, float]:
    """
    Round halves away from zero (2.5 -> 3, 1.005 -> 1.01).

    Goes through the decimal repr so values like 2.675 round the way
    they read. Returns an int when digits is 0.
    """
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if digits == 0 else float(rounded)
