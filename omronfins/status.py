"""Cycle time and clock commands."""

from __future__ import annotations

from dataclasses import dataclass

from .core import BodyTooShortError, Transport, communicate


@dataclass(frozen=True)
class CycleTime:
    """Average, minimum and maximum cycle time as reported by the PLC."""

    avg: int
    min: int
    max: int


@dataclass(frozen=True)
class PlcDateTime:
    """Calendar time held by the PLC clock."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int = 0
    day_of_week: int = 0


def _bcd_to_int(value: int) -> int:
    return (value >> 4) * 10 + (value & 0x0F)


def _int_to_bcd(value: int) -> int:
    return ((value // 10 % 10) << 4) | (value % 10)


def _full_year(two_digits: int) -> int:
    year = two_digits + 1900
    return year + 100 if year < 1998 else year


def _expect_length(response: bytes, length: int) -> None:
    if len(response) != length:
        raise BodyTooShortError(f"expected {length} response bytes, got {len(response)}")


def cycle_time_read(link: Transport) -> CycleTime:
    """Read the average, maximum and minimum cycle time."""
    response = communicate(link, 0x06, 0x20, b"\x01")
    _expect_length(response, 14)
    avg, maximum, minimum = (
        int.from_bytes(response[offset:offset + 4], "big") for offset in (2, 6, 10)
    )
    return CycleTime(avg=avg, min=minimum, max=maximum)


def clock_read(link: Transport) -> PlcDateTime:
    """Read the PLC clock."""
    response = communicate(link, 0x07, 0x01, b"")
    _expect_length(response, 9)
    year, month, day, hour, minute, second, dow = (_bcd_to_int(b) for b in response[2:9])
    return PlcDateTime(
        year=_full_year(year),
        month=month,
        day=day,
        hour=hour,
        minute=minute,
        second=second,
        day_of_week=dow,
    )


def _check(value: int, low: int, high: int, field: str) -> None:
    if not low <= value <= high:
        raise ValueError(f"{field} {value} outside {low}..{high}")


def clock_write(
    link: Transport,
    when: PlcDateTime,
    do_sec: bool = True,
    do_day_of_week: bool = True,
) -> None:
    """Set the PLC clock; seconds and day of week are sent only when asked."""
    _check(when.year, 1998, 2097, "year")
    _check(when.month, 1, 12, "month")
    _check(when.day, 1, 31, "day")
    _check(when.hour, 0, 23, "hour")
    _check(when.minute, 0, 59, "minute")
    fields = [when.year % 100, when.month, when.day, when.hour, when.minute]
    if do_sec:
        _check(when.second, 0, 59, "second")
        fields.append(when.second)
        if do_day_of_week:
            _check(when.day_of_week, 0, 6, "day of week")
            fields.append(when.day_of_week)
    body = bytes(_int_to_bcd(value) for value in fields)
    _expect_length(communicate(link, 0x07, 0x02, body), 2)