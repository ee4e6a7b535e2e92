from datetime import date, datetime

import pytest

from trainer_planner.utils.dates import (
    InvalidDurationError,
    add_minutes,
    duration_hours,
    duration_minutes,
    format_date_german,
    format_month_german,
    invoice_number,
    month_bounds,
    parse_month,
    quarter_of,
    week_dates,
)


def test_duration_is_computed_from_wall_clock_times():
    assert duration_minutes("09:00", "10:30") == 90
    assert duration_hours("17:15", "18:00") == pytest.approx(0.75)


def test_duration_rejects_end_before_start_and_bad_format():
    with pytest.raises(InvalidDurationError):
        duration_minutes("10:00", "10:00")
    with pytest.raises(InvalidDurationError):
        duration_minutes("22:00", "01:00")
    with pytest.raises(InvalidDurationError):
        duration_minutes("9am", "10:00")
    with pytest.raises(InvalidDurationError):
        duration_minutes("24:00", "25:00")


def test_add_minutes_normalizes_and_refuses_midnight_crossing():
    assert add_minutes("8:00", 60) == "09:00"
    assert add_minutes("08:00", 0) == "08:00"
    with pytest.raises(InvalidDurationError):
        add_minutes("23:30", 60)


def test_week_dates_starts_on_monday_even_for_sunday_anchor():
    sunday = date(2024, 12, 15)
    days = week_dates(sunday)
    assert days[0] == date(2024, 12, 9)
    assert days[-1] == sunday
    assert len(days) == 7

    wednesday = date(2024, 12, 11)
    assert week_dates(wednesday)[0] == date(2024, 12, 9)


def test_month_helpers():
    assert parse_month("2024-02") == (2024, 2)
    assert month_bounds("2024-02") == (date(2024, 2, 1), date(2024, 2, 29))
    assert quarter_of("2024-11") == 4
    with pytest.raises(ValueError):
        parse_month("2024-13")
    with pytest.raises(ValueError):
        parse_month("24-01")


def test_invoice_number_uses_timestamp_and_prefix():
    now = datetime(2024, 12, 31, 8, 5, 9)
    assert invoice_number(now) == "RG-20241231-080509"
    assert invoice_number(now, prefix="TT") == "TT-20241231-080509"


def test_german_formats():
    assert format_date_german(date(2024, 3, 7)) == "07.03.2024"
    assert format_month_german("2024-03") == "März 2024"
