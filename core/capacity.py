"""
Slot accounting for trips.

Matched delivery requests and joined riders draw from one shared pool of
``max_deliveries`` slots. Every change to ``Trip.current_deliveries`` goes
through ``adjust_capacity`` so the pool policy lives in a single place.
"""

from .exceptions import TripFullError


def adjust_capacity(current: int, maximum: int, delta: int) -> int:
    """
    Return the slot count after applying ``delta``.

    Increments that would push the count past ``maximum`` raise
    TripFullError and are never clamped. Decrements clamp at zero.

    >>> adjust_capacity(0, 2, 1)
    1
    >>> adjust_capacity(0, 2, -1)
    0
    """
    new_value = current + delta

    if delta > 0 and new_value > maximum:
        raise TripFullError()

    return max(0, new_value)


def remaining_capacity(current: int, maximum: int) -> int:
    return max(0, maximum - current)
