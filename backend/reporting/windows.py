# backend/reporting/windows.py
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterable, List, Optional, Union

from .records import as_date, read_field

TODAY = "today"
THIS_WEEK = "thisWeek"
THIS_MONTH = "thisMonth"
WINDOWS = (TODAY, THIS_WEEK, THIS_MONTH)

SUNDAY = 6


def start_of_week(day: date, week_start: int = SUNDAY) -> date:
    """Return the first day of the week containing ``day``.

    Args:
        day (date): Any day of the week.
        week_start (int): Weekday the week starts on, Monday=0 .. Sunday=6.
    """
    return day - timedelta(days=(day.weekday() - week_start) % 7)


def in_window(value: Any, window: str, now: Union[date, datetime], week_start: int = SUNDAY) -> bool:
    """Check whether a date-like value falls inside a named window relative to ``now``.

    Unknown window names accept everything. A value that cannot be read as a
    date is outside every real window.
    """
    if window not in WINDOWS:
        return True
    day = as_date(value)
    if day is None:
        return False
    today = now.date() if isinstance(now, datetime) else now
    if window == TODAY:
        return day == today
    if window == THIS_WEEK:
        return start_of_week(today, week_start) <= day <= today
    return (day.year, day.month) == (today.year, today.month)


def filter_by_window(records: Iterable[Any], window: Optional[str], now=None, field_name: str = "date",
                     week_start: int = SUNDAY) -> List[Any]:
    """Keep the records whose ``field_name`` date falls in ``window``.

    Args:
        records (iterable): Models or mappings carrying a date field.
        window (str): ``today``, ``thisWeek`` or ``thisMonth``. ``all``, None or
            any other name returns every record unchanged.
        now (date or datetime, optional): Reference point; defaults to the
            current local time.
        field_name (str): Attribute holding the date.
        week_start (int): Weekday the week starts on for ``thisWeek``.

    Returns:
        list: Matching records in input order.
    """
    if window not in WINDOWS:
        return list(records)
    now = now or datetime.now()
    return [r for r in records if in_window(read_field(r, field_name), window, now, week_start)]


@dataclass
class Page:
    items: List[Any]
    page: int
    page_size: int
    total: int
    total_pages: int

    @property
    def start(self) -> int:
        """1-based position of the first item on this page, 0 when empty."""
        if not self.items:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def end(self) -> int:
        if not self.items:
            return 0
        return self.start + len(self.items) - 1


def paginate(items: Iterable[Any], page: int, page_size: int) -> Page:
    """Slice out 1-indexed ``page`` of ``items``.

    Pages outside 1..total_pages come back empty rather than raising.
    """
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    items = list(items)
    total = len(items)
    total_pages = math.ceil(total / page_size)
    if 1 <= page <= total_pages:
        chunk = items[(page - 1) * page_size:page * page_size]
    else:
        chunk = []
    return Page(items=chunk, page=page, page_size=page_size, total=total, total_pages=total_pages)
