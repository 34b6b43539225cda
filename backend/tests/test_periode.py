from datetime import date, datetime

import pytest

from utils.periode import (
    calculate_periode,
    format_periode_name,
    month_range,
    next_periode,
    previous_periode,
)


def test_calculate_periode_returns_first_day_of_month():
    assert calculate_periode(date(2025, 1, 15)) == date(2025, 1, 1)
    assert calculate_periode(datetime(2025, 3, 31, 23, 59)) == date(2025, 3, 1)
    assert calculate_periode("2025-07-09") == date(2025, 7, 1)
    assert calculate_periode("2025-07") == date(2025, 7, 1)


def test_month_range_is_half_open_and_rolls_over_december():
    assert month_range("2025-01-20") == (date(2025, 1, 1), date(2025, 2, 1))
    assert month_range(date(2024, 12, 5)) == (date(2024, 12, 1), date(2025, 1, 1))


def test_previous_and_next_periode():
    assert previous_periode(date(2025, 1, 10)) == date(2024, 12, 1)
    assert previous_periode("2025-06-01") == date(2025, 5, 1)
    assert next_periode("2025-12-31") == date(2026, 1, 1)


def test_format_periode_name_uses_indonesian_months():
    assert format_periode_name("2025-01-01") == "Januari 2025"
    assert format_periode_name(date(2024, 8, 17)) == "Agustus 2024"
    assert format_periode_name("bukan-tanggal") == "Invalid Date"


def test_invalid_input_raises_value_error():
    with pytest.raises(ValueError):
        calculate_periode("2025-13-01")
    with pytest.raises(ValueError):
        calculate_periode(12345)
