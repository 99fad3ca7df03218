from datetime import date
from typing import Iterable, Protocol


class DateWindow(Protocol):
    unavailable_from: date
    unavailable_to: date


def _within(day: date, window: DateWindow) -> bool:
    return window.unavailable_from <= day <= window.unavailable_to


def overlaps(start_date: date, end_date: date, windows: Iterable[DateWindow]) -> bool:
    """
    Return True if the candidate range collides with any unavailability window.

    A collision means the candidate start or end date falls inside a window,
    bounds included, so a booking ending on the day another one starts is
    rejected. The order of ``windows`` does not matter.
    """
    return any(
        _within(start_date, window) or _within(end_date, window)
        for window in windows
    )
