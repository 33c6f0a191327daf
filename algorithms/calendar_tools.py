import calendar
import datetime
from typing import Optional, Tuple

from models import MonthBounds, local_naive


class CalendarTools:
    """Week and month boundaries on the local wall clock.

    Weeks start on Monday at midnight.  All results are naive datetimes; an
    aware ``now`` is first converted to local time.
    """

    PERIODS = ("week", "month")
    WEEK_DAYS: int = 7
    ROLLING_MONTH_DAYS: int = 30

    @staticmethod
    def normalize(now: datetime.datetime) -> datetime.datetime:
        """Return ``now`` as a naive local datetime."""
        if not isinstance(now, datetime.datetime):
            raise ValueError("now must be a datetime")
        return local_naive(now)

    @staticmethod
    def midnight(ts: datetime.datetime) -> datetime.datetime:
        return ts.replace(hour=0, minute=0, second=0, microsecond=0)

    @staticmethod
    def week_start(now: datetime.datetime) -> datetime.datetime:
        """Return Monday 00:00 of the week containing ``now``.

        With Sunday numbered 0 the distance back is ``(weekday + 6) % 7``,
        which is exactly :meth:`datetime.date.weekday` (Monday == 0).
        """
        now = CalendarTools.normalize(now)
        start = now - datetime.timedelta(days=now.weekday())
        return CalendarTools.midnight(start)

    @staticmethod
    def week_key(ts: datetime.datetime) -> datetime.date:
        """Return the Monday of ``ts``'s week as a date."""
        return CalendarTools.week_start(ts).date()

    @staticmethod
    def month_start(now: datetime.datetime) -> datetime.datetime:
        now = CalendarTools.normalize(now)
        return datetime.datetime(now.year, now.month, 1)

    @staticmethod
    def month_key(ts: datetime.datetime) -> str:
        return f"{ts.year:04d}-{ts.month:02d}"

    @staticmethod
    def parse_month(selected_month: str) -> Tuple[int, int]:
        """Split a ``YYYY-MM`` selector into ``(year, month)``."""
        if not isinstance(selected_month, str):
            raise ValueError("month selector must be a 'YYYY-MM' string")
        parts = selected_month.strip().split("-")
        if len(parts) != 2 or len(parts[0]) != 4 or not 1 <= len(parts[1]) <= 2:
            raise ValueError(f"invalid month selector: {selected_month!r}")
        try:
            year, month = int(parts[0]), int(parts[1])
        except ValueError:
            raise ValueError(f"invalid month selector: {selected_month!r}")
        if not 1 <= month <= 12 or year < 1:
            raise ValueError(f"invalid month selector: {selected_month!r}")
        return year, month

    @staticmethod
    def month_bounds(
        now: datetime.datetime, selected_month: Optional[str] = None
    ) -> MonthBounds:
        """Return the inclusive bounds of the selected month.

        Without ``selected_month`` the range runs from the first of ``now``'s
        month up to ``now`` itself.
        """
        now = CalendarTools.normalize(now)
        if not selected_month:
            return MonthBounds(start=CalendarTools.month_start(now), end=now)
        year, month = CalendarTools.parse_month(selected_month)
        last_day = calendar.monthrange(year, month)[1]
        start = datetime.datetime(year, month, 1)
        end = datetime.datetime.combine(
            datetime.date(year, month, last_day), datetime.time.max
        )
        return MonthBounds(start=start, end=end)

    @staticmethod
    def period_bounds(
        now: datetime.datetime,
        period: str = "week",
        selected_month: Optional[str] = None,
    ) -> Tuple[datetime.datetime, datetime.datetime]:
        """Return ``(start, end)`` for a progress period."""
        now = CalendarTools.normalize(now)
        if period == "week":
            return now - datetime.timedelta(days=CalendarTools.WEEK_DAYS), now
        if period == "month":
            if selected_month:
                bounds = CalendarTools.month_bounds(now, selected_month)
                return bounds.start, bounds.end
            return now - datetime.timedelta(days=CalendarTools.ROLLING_MONTH_DAYS), now
        raise ValueError(f"unknown period: {period!r}")
