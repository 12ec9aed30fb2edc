"""Clearing errors and reading or clearing the error and access logs."""

from __future__ import annotations

from dataclasses import dataclass, field

from .core import BodyTooShortError, Transport, communicate

MAX_LOG_RECORDS = 20
"""Largest number of log records one read command may ask for."""

_ERROR_RECORD_SIZE = 10
_ACCESS_RECORD_SIZE = 12
_LOG_HEADER_SIZE = 8

CLEAR_ALL = 0xFFFF
CLEAR_CURRENT = 0xFFFE
_FAL_BASE = 0x4100
_FALS_BASE = 0xC100


@dataclass(frozen=True)
class ErrorRecord:
    """One entry of the PLC error log."""

    error_code: tuple[int, int]
    minute: int
    second: int
    day: int
    hour: int
    year: int
    month: int


@dataclass(frozen=True)
class AccessRecord:
    """One entry of the PLC write access log."""

    network: int
    node: int
    unit: int
    command_code: int
    minute: int
    second: int
    day: int
    hour: int
    year: int
    month: int


@dataclass(frozen=True)
class LogPage:
    """Records read from a log and the number of records the log holds.

    ``stored_records`` is None when nothing was asked of the PLC.
    """

    stored_records: int | None
    records: list = field(default_factory=list)


def _bcd_to_int(value: int) -> int:
    return (value >> 4) * 10 + (value & 0x0F)


def _full_year(two_digits: int) -> int:
    year = two_digits + 1900
    return year + 100 if year < 1998 else year


def _expect_length(response: bytes, length: int) -> None:
    if len(response) != length:
        raise BodyTooShortError(f"expected {length} response bytes, got {len(response)}")


def _word(data: bytes, offset: int) -> int:
    return int.from_bytes(data[offset:offset + 2], "big")


def _check_fal(number: int, kind: str) -> None:
    if not 1 <= number <= 511:
        raise ValueError(f"{kind} number {number} outside 1..511")


def error_clear(link: Transport, error_code: int) -> None:
    """Clear one error, given by its error code."""
    body = (int(error_code) & 0xFFFF).to_bytes(2, "big")
    _expect_length(communicate(link, 0x21, 0x01, body), 2)


def error_clear_all(link: Transport) -> None:
    """Clear every error in the PLC."""
    error_clear(link, CLEAR_ALL)


def error_clear_current(link: Transport) -> None:
    """Clear the current error with the highest priority."""
    error_clear(link, CLEAR_CURRENT)


def error_clear_fal(link: Transport, fal_number: int) -> None:
    """Clear a non-fatal FAL error."""
    _check_fal(fal_number, "FAL")
    error_clear(link, _FAL_BASE + fal_number)


def error_clear_fals(link: Transport, fals_number: int) -> None:
    """Clear a fatal FALS error."""
    _check_fal(fals_number, "FALS")
    error_clear(link, _FALS_BASE + fals_number)


def _read_log(
    link: Transport, src: int, start_record: int, num_records: int, record_size: int
) -> tuple[int, list[bytes]]:
    body = (int(start_record) & 0xFFFF).to_bytes(2, "big") + num_records.to_bytes(2, "big")
    response = communicate(link, 0x21, src, body)
    if len(response) < _LOG_HEADER_SIZE:
        raise BodyTooShortError(f"log response of {len(response)} bytes has no header")
    stored = _word(response, 4)
    count = _word(response, 6)
    needed = _LOG_HEADER_SIZE + count * record_size
    if len(response) < needed:
        raise BodyTooShortError(f"expected {needed} response bytes, got {len(response)}")
    chunks = [
        response[offset:offset + record_size]
        for offset in range(_LOG_HEADER_SIZE, needed, record_size)
    ]
    return stored, chunks


def _check_count(num_records: int) -> None:
    if num_records < 0:
        raise ValueError(f"record count {num_records} is negative")
    if num_records > MAX_LOG_RECORDS:
        raise ValueError(f"record count {num_records} exceeds {MAX_LOG_RECORDS}")


def error_log_read(link: Transport, start_record: int, num_records: int) -> LogPage:
    """Read up to ``num_records`` error log entries from ``start_record`` on."""
    _check_count(num_records)
    if num_records == 0:
        return LogPage(stored_records=None, records=[])
    stored, chunks = _read_log(link, 0x02, start_record, num_records, _ERROR_RECORD_SIZE)
    records = []
    for raw in chunks:
        minute, second, day, hour, year, month = (_bcd_to_int(b) for b in raw[4:10])
        records.append(
            ErrorRecord(
                error_code=(_word(raw, 0), _word(raw, 2)),
                minute=minute,
                second=second,
                day=day,
                hour=hour,
                year=_full_year(year),
                month=month,
            )
        )
    return LogPage(stored_records=stored, records=records)


def error_log_clear(link: Transport) -> None:
    """Empty the error log."""
    _expect_length(communicate(link, 0x21, 0x03, b""), 2)


def access_log_read(link: Transport, start_record: int, num_records: int) -> LogPage:
    """Read up to ``num_records`` write access log entries from ``start_record`` on."""
    _check_count(num_records)
    if num_records == 0:
        return LogPage(stored_records=None, records=[])
    stored, chunks = _read_log(link, 0x40, start_record, num_records, _ACCESS_RECORD_SIZE)
    records = []
    for raw in chunks:
        network, node, unit = raw[0:3]
        minute, second, day, hour, year, month = raw[6:12]
        records.append(
            AccessRecord(
                network=network,
                node=node,
                unit=unit,
                command_code=_word(raw, 4),
                minute=minute,
                second=second,
                day=day,
                hour=hour,
                year=_full_year(year),
                month=month,
            )
        )
    return LogPage(stored_records=stored, records=records)


def write_access_log_clear(link: Transport) -> None:
    """Empty the write access log."""
    _expect_length(communicate(link, 0x21, 0x41, b""), 2)