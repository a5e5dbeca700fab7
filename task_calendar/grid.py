"""Calendar grid math: month boundaries padded out to whole Sunday-start weeks."""
from __future__ import annotations

from datetime import date, timedelta


class InvalidArgumentError(ValueError):
    """Raised for a (year, month) that has no calendar grid."""


def days_from_sunday(day: date) -> int:
    # date.weekday() is Monday=0 .. Sunday=6
    return (day.weekday() + 1) % 7


def last_day_of_month(year: int, month: int) -> date:
    if month == 12:
        return date(year + 1, 1, 1) - timedelta(days=1)
    return date(year, month + 1, 1) - timedelta(days=1)


def start_of_week(day: date) -> date:
    """Sunday on or before the given day."""
    return day - timedelta(days=days_from_sunday(day))


def end_of_week(day: date) -> date:
    """Saturday on or after the given day."""
    return day + timedelta(days=6 - days_from_sunday(day))


def grid_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last date (inclusive) of the month grid.

    Args:
        year: Calendar year.
        month: Month number, 1-12.

    Returns:
        (grid_start, grid_end): the Sunday before the 1st and the Saturday
        after the last day of the month.

    Raises:
        InvalidArgumentError: If the month is out of range, or the grid would
            fall outside the representable date range.
    """
    if not isinstance(month, int) or isinstance(month, bool) or not 1 <= month <= 12:
        raise InvalidArgumentError(f"Month must be between 1 and 12, got {month!r}")
    try:
        first_day = date(year, month, 1)
        last_day = last_day_of_month(year, month)
        return start_of_week(first_day), end_of_week(last_day)
    except (ValueError, OverflowError, TypeError) as e:
        raise InvalidArgumentError(f"No calendar grid for {year!r}-{month:02d}: {e}") from e


def build_grid(year: int, month: int) -> list[list[date]]:
    """Build the month grid as a list of weeks, each seven consecutive dates.

    The result always holds 4, 5 or 6 whole weeks running Sunday to Saturday.
    """
    grid_start, grid_end = grid_bounds(year, month)
    total_days = (grid_end - grid_start).days + 1
    dates = [grid_start + timedelta(days=offset) for offset in range(total_days)]
    return [dates[i:i + 7] for i in range(0, total_days, 7)]
