# utils/periode.py
"""Calendar-month helpers.

A *periode* is always the first day of a month (``YYYY-MM-01``); issuances
and monthly balance rows are grouped by it.
"""
from datetime import date, datetime
from typing import Tuple, Union

DateLike = Union[date, datetime, str]

NAMA_BULAN = [
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
]


def _to_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        s = value.strip()
        # "2025-01" is accepted as shorthand for the whole month
        if len(s) == 7:
            s = f"{s}-01"
        return date.fromisoformat(s[:10])
    raise ValueError(f"Unsupported date value: {value!r}")


def calculate_periode(tanggal: DateLike) -> date:
    """First day of the month containing ``tanggal``."""
    d = _to_date(tanggal)
    return d.replace(day=1)


def next_periode(periode: DateLike) -> date:
    d = calculate_periode(periode)
    if d.month == 12:
        return date(d.year + 1, 1, 1)
    return date(d.year, d.month + 1, 1)


def previous_periode(periode: DateLike) -> date:
    d = calculate_periode(periode)
    if d.month == 1:
        return date(d.year - 1, 12, 1)
    return date(d.year, d.month - 1, 1)


def month_range(periode: DateLike) -> Tuple[date, date]:
    """Half-open ``[start, end)`` range covering the month."""
    start = calculate_periode(periode)
    return start, next_periode(start)


def format_periode_name(periode: DateLike) -> str:
    try:
        d = _to_date(periode)
    except ValueError:
        return "Invalid Date"
    return f"{NAMA_BULAN[d.month - 1]} {d.year}"
