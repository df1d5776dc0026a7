"""
Set operations over interval sequences.

Pure functions without any external dependencies: nothing here reads the
clock or touches I/O, so every call is a function of its arguments only.
"""

from typing import Iterable, List, Sequence

from .models import Interval
from .zoned import instant


def normalize(intervals: Iterable[Interval]) -> List[Interval]:
    """
    Merge overlapping or touching intervals into a disjoint, sorted list.

    Example: [10:00-11:00, 09:00-10:00, 10:30-12:00] -> [09:00-12:00]
    """
    sorted_intervals = sorted(intervals, key=lambda i: (instant(i.start), instant(i.end)))

    if not sorted_intervals:
        return []

    merged: List[Interval] = [sorted_intervals[0]]

    for current in sorted_intervals[1:]:
        last = merged[-1]

        # Overlapping or adjacent (no gap)
        if instant(current.start) <= instant(last.end):
            if instant(current.end) > instant(last.end):
                merged[-1] = Interval(start=last.start, end=current.end)
        else:
            merged.append(current)

    return merged


def _carve(source: Interval, exclusions: Sequence[Interval]) -> List[Interval]:
    """
    Subtract disjoint, sorted exclusions from one source interval.

    Example:
    Source: 09:00 - 17:00
    Exclusions: [10:00-11:00, 14:00-15:00]
    Result: [09:00-10:00, 11:00-14:00, 15:00-17:00]
    """
    tz = source.start.tzinfo
    source_end = instant(source.end)
    residuals: List[Interval] = []
    current_start = source.start

    for excluded in exclusions:
        if instant(excluded.end) <= instant(current_start):
            continue
        if instant(excluded.start) >= source_end:
            break

        # Free time before this exclusion
        if instant(current_start) < instant(excluded.start):
            residuals.append(
                Interval(start=current_start, end=excluded.start.in_timezone(tz))
            )

        current_start = max(current_start, excluded.end.in_timezone(tz), key=instant)

        if instant(current_start) >= source_end:
            break

    if instant(current_start) < source_end:
        residuals.append(Interval(start=current_start, end=source.end))

    return residuals


def subtract(sources: Sequence[Interval], exclusions: Sequence[Interval]) -> List[Interval]:
    """
    Remove every exclusion from every source interval.

    Exclusions may be unsorted and may overlap; they are normalized first so
    the result does not depend on their order. Zero-length exclusions remove
    nothing. Residuals keep the order of
    their sources and are never merged across sources. Fully covered sources
    contribute nothing.

    Args:
        sources: Intervals to carve, e.g. built availability
        exclusions: Intervals to remove, e.g. existing bookings

    Returns:
        The free parts of each source, in source order
    """
    normalized = normalize(excluded for excluded in exclusions if not excluded.is_empty())
    free: List[Interval] = []

    for source in sources:
        if source.is_empty():
            continue
        free.extend(_carve(source, normalized))

    return free


def intersect(first: Sequence[Interval], second: Sequence[Interval]) -> List[Interval]:
    """
    Calculate the common time of two interval sequences.

    Returns all overlapping periods between any intervals of both sequences,
    merged into a disjoint, sorted list.
    """
    intersections: List[Interval] = []

    for interval1 in first:
        for interval2 in second:
            overlap = interval1.intersect(interval2)
            if overlap is not None:
                intersections.append(overlap)

    return normalize(intersections)


def filter_min_duration(intervals: Iterable[Interval], min_duration_minutes: int) -> List[Interval]:
    """Keep only intervals lasting at least ``min_duration_minutes``."""
    return [
        interval for interval in intervals
        if interval.duration_minutes() >= min_duration_minutes
    ]
