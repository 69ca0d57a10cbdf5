"""
Refill Event Filter

A delivery shows up in the reading history as a sudden level jump. Left in
the window it flattens (or flips) the regression slope, so refills are
removed before any rate is estimated.

Each reading is compared against the reading immediately before it in the
raw input, not against the last reading that survived filtering. A run of
consecutive large jumps is therefore judged step by step, and one spurious
jump cannot desensitize the filter for the rest of the window.

Example:
    >>> from datetime import datetime, timedelta
    >>> t0 = datetime(2025, 1, 1)
    >>> readings = [
    ...     Reading(t0 + timedelta(days=i), level_percent=p)
    ...     for i, p in enumerate([40, 38, 75, 70])
    ... ]
    >>> [r.level_percent for r in filter_refill_events(readings, 10.0)]
    [40, 38, 70]
"""

from typing import List, Sequence

import structlog

from fuel_runway.models.forecast_models import Reading

logger = structlog.get_logger()


def _percent_or_zero(reading: Reading) -> float:
    return reading.level_percent if reading.level_percent is not None else 0.0


def filter_refill_events(readings: Sequence[Reading], threshold: float) -> List[Reading]:
    """
    Drop readings that look like refills.

    The first reading is always kept. A later reading is dropped when its
    percent rose by more than `threshold` over the previous raw reading, or
    when ingestion already flagged it as a refill. Missing percents compare
    as 0.

    Args:
        readings: Readings ordered ascending by timestamp
        threshold: Maximum tolerated rise in percent points

    Returns:
        New list with refill readings removed (input is not modified)
    """
    if len(readings) < 2:
        return list(readings)

    filtered: List[Reading] = [readings[0]]
    dropped = 0

    for previous, current in zip(readings, readings[1:]):
        change = _percent_or_zero(current) - _percent_or_zero(previous)

        if current.is_refill or change > threshold:
            dropped += 1
            continue

        filtered.append(current)

    if dropped:
        logger.debug(
            "Refill readings filtered",
            dropped=dropped,
            kept=len(filtered),
            threshold=threshold,
        )

    return filtered


def detect_refill_events(readings: Sequence[Reading], threshold: float) -> List[Reading]:
    """
    Return the readings that mark a refill.

    The complement of filter_refill_events for reporting: a reading is a
    refill when it rose by at least `threshold` percent points over the
    previous raw reading, or when it carries the device refill flag.

    Examples:
        >>> from datetime import datetime
        >>> t = datetime(2025, 1, 1)
        >>> rs = [Reading(t, 20.0), Reading(t, 30.0), Reading(t, 29.0)]
        >>> [r.level_percent for r in detect_refill_events(rs, 10.0)]
        [30.0]
    """
    refills: List[Reading] = []

    for previous, current in zip(readings, readings[1:]):
        increase = _percent_or_zero(current) - _percent_or_zero(previous)
        if current.is_refill or increase >= threshold:
            refills.append(current)

    return refills
