import pytest

from studio.core.errors import ValidationError
from studio.scheduling.intervals import (
    TimeInterval,
    format_time,
    overlaps,
    parse_time,
    validate_date,
)


def interval(start, end):
    return TimeInterval.from_strings(start, end)


def test_parse_and_format_time():
    assert parse_time("00:00") == 0
    assert parse_time("09:30") == 570
    assert parse_time("23:59") == 1439
    assert format_time(570) == "09:30"
    assert format_time(parse_time("17:05")) == "17:05"


@pytest.mark.parametrize("value", ["9:00", "24:00", "12:60", "1200", "10:00\n", "", None, "ab:cd"])
def test_parse_time_rejects_bad_formats(value):
    with pytest.raises(ValidationError) as exc:
        parse_time(value)
    assert exc.value.message == "Invalid time format. Use HH:MM"


def test_validate_date():
    assert validate_date("2030-01-31") == "2030-01-31"

    for bad in ["2030-1-31", "31-01-2030", "2030-02-30", "2030-01-31\n", "", None]:
        with pytest.raises(ValidationError):
            validate_date(bad)


def test_interval_requires_start_before_end():
    assert interval("09:00", "10:30").duration_minutes == 90

    with pytest.raises(ValidationError) as exc:
        interval("10:00", "10:00")
    assert exc.value.message == "End time must be after start time"

    with pytest.raises(ValidationError):
        interval("11:00", "10:00")


def test_overlap_cases():
    base = interval("10:00", "12:00")

    assert overlaps(base, interval("11:00", "13:00"))
    assert overlaps(base, interval("09:00", "10:30"))
    assert overlaps(base, interval("10:30", "11:30"))
    assert overlaps(base, interval("09:00", "13:00"))
    assert overlaps(base, base)


def test_touching_intervals_do_not_overlap():
    base = interval("10:00", "12:00")

    assert not overlaps(base, interval("12:00", "13:00"))
    assert not overlaps(base, interval("08:00", "10:00"))
    assert not overlaps(base, interval("13:00", "14:00"))


def test_overlap_is_symmetric():
    pairs = [
        (interval("10:00", "12:00"), interval("11:59", "12:30")),
        (interval("10:00", "12:00"), interval("12:00", "12:30")),
        (interval("08:00", "09:00"), interval("08:30", "08:45")),
    ]
    for a, b in pairs:
        assert overlaps(a, b) == overlaps(b, a)
