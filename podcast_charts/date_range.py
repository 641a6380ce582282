# podcast_charts/date_range.py
"""
Time-window arithmetic for the chart filters.

Responsibilities:
  - compute the inclusive date range of a window around a reference date
  - step a reference date one window forward/backward
  - format human-readable labels for a range
  - guard navigation into the future
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Union

from dateutil.relativedelta import relativedelta

from .models import DateRange, TimeWindow

DateLike = Union[date, datetime]

# Floor used by the "all" window.
ALL_TIME_START = date(2020, 1, 1)

ALL_TIME_LABEL = "All Time"

TIME_WINDOW_LABELS = {
    TimeWindow.WEEK: "Week",
    TimeWindow.MONTH: "Month",
    TimeWindow.QUARTER: "Quarter",
    TimeWindow.YEAR: "Year",
    TimeWindow.ALL: ALL_TIME_LABEL,
}

_STEPS = {
    TimeWindow.WEEK: relativedelta(days=7),
    TimeWindow.MONTH: relativedelta(months=1),
    TimeWindow.QUARTER: relativedelta(months=3),
    TimeWindow.YEAR: relativedelta(years=1),
}


def _as_date(d: DateLike) -> date:
    """Drop the time-of-day part of a datetime; dates pass through."""
    return d.date() if isinstance(d, datetime) else d


def _today(now: Optional[Callable[[], DateLike]]) -> date:
    return _as_date(now() if now else datetime.now())


def compute_range(
    time_window: TimeWindow,
    reference_date: DateLike,
    now: Optional[Callable[[], DateLike]] = None,
) -> DateRange:
    """
    Return the inclusive date range of the window containing reference_date.

    "all" ignores reference_date and always runs from ALL_TIME_START to now.
    """
    window = TimeWindow(time_window)
    ref = _as_date(reference_date)

    if window is TimeWindow.WEEK:
        start = ref - timedelta(days=ref.weekday())
        return DateRange(start, start + timedelta(days=6))

    if window is TimeWindow.MONTH:
        last = calendar.monthrange(ref.year, ref.month)[1]
        return DateRange(ref.replace(day=1), ref.replace(day=last))

    if window is TimeWindow.QUARTER:
        first_month = 3 * ((ref.month - 1) // 3) + 1
        start = date(ref.year, first_month, 1)
        end = start + relativedelta(months=3, days=-1)
        return DateRange(start, end)

    if window is TimeWindow.YEAR:
        return DateRange(date(ref.year, 1, 1), date(ref.year, 12, 31))

    return DateRange(ALL_TIME_START, _today(now))


def step_window(reference_date: DateLike, time_window: TimeWindow, direction: str) -> DateLike:
    """
    Move reference_date one window back ("prev") or forward ("next").

    Month-based steps clamp to the end of the target month (Jan 31 -> Feb 29).
    For "all" the input is returned as-is.
    """
    window = TimeWindow(time_window)
    if window is TimeWindow.ALL:
        return reference_date

    if direction not in ("prev", "next"):
        raise ValueError(f"direction must be 'prev' or 'next', got {direction!r}")

    step = _STEPS[window]
    return reference_date - step if direction == "prev" else reference_date + step


def can_step_next(
    reference_date: DateLike,
    time_window: TimeWindow,
    now: Optional[Callable[[], DateLike]] = None,
) -> bool:
    """
    Return True when stepping forward would not land in the future.

    Compares the stepped reference date itself, not the start of its window.
    """
    window = TimeWindow(time_window)
    if window is TimeWindow.ALL:
        return False
    stepped = step_window(reference_date, window, "next")
    return _as_date(stepped) <= _today(now)


def _short(d: date, include_year: bool = False) -> str:
    out = f"{calendar.month_abbr[d.month]} {d.day}"
    return f"{out}, {d.year}" if include_year else out


def format_short_range(date_range: DateRange, include_year: bool = False) -> str:
    """Compact label such as 'Dec 9 – Dec 15'."""
    return f"{_short(date_range.start_date, include_year)} – {_short(date_range.end_date, include_year)}"


def format_range_label(
    date_range: DateRange,
    time_window: TimeWindow,
    reference_date: Optional[DateLike] = None,
) -> str:
    """
    Human-readable label for a range.

    Examples:
      week    -> "Week 50, 2024"
      month   -> "December 2024"
      quarter -> "Q4 2024"
      year    -> "2024"
      all     -> "All Time"
    """
    try:
        window = TimeWindow(time_window)
    except ValueError:
        return format_short_range(date_range)

    start = date_range.start_date

    if window is TimeWindow.ALL:
        return ALL_TIME_LABEL
    if window is TimeWindow.WEEK:
        anchor = _as_date(reference_date) if reference_date is not None else date_range.end_date
        iso_year, iso_week, _ = anchor.isocalendar()
        return f"Week {iso_week}, {iso_year}"
    if window is TimeWindow.MONTH:
        return f"{calendar.month_name[start.month]} {start.year}"
    if window is TimeWindow.QUARTER:
        return f"Q{(start.month - 1) // 3 + 1} {start.year}"
    return f"{start.year:04d}"


def time_window_label(time_window: TimeWindow) -> str:
    """Short name of a window for summaries ("Week", "All Time", ...)."""
    return TIME_WINDOW_LABELS[TimeWindow(time_window)]
