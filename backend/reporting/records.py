# backend/reporting/records.py
"""Tolerant field access for records that may be pydantic models or plain dicts.

Reports read records loaded from the store as well as raw JSON payloads, so a
field can show up under its snake_case attribute or its camelCase key, and a
damaged record can lack it entirely. These helpers return ``None`` instead of
raising so callers can skip the record.
"""
from datetime import date, datetime
from typing import Any, Mapping, Optional

from pydantic.alias_generators import to_camel


def read_field(record: Any, name: str) -> Any:
    if record is None:
        return None
    if isinstance(record, Mapping):
        if name in record:
            return record[name]
        return record.get(to_camel(name))
    return getattr(record, name, None)


def as_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def as_date(value: Any) -> Optional[date]:
    parsed = as_datetime(value)
    return parsed.date() if parsed is not None else None


def as_int(value: Any) -> Optional[int]:
    # bool is an int subclass but never a valid id or count
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None
