"""Transfers and comparisons between files and the parameter or program area."""

from __future__ import annotations

import enum

from .core import BodyTooShortError, Transport, communicate
from .directory import Disk, filename_to_83, valid_directory

_PROGRAM_AREA_FIELDS = b"\xff\xff" + b"\x00\x00\x00\x00" + b"\xff\xff\xff\xff"


class ParameterArea(enum.IntEnum):
    """Parameter areas that can be moved to and from files."""

    PLC_SETUP = 0x8010
    IO_TABLE_REGISTRATION = 0x8012
    ROUTING_TABLE = 0x8013
    CPU_BUS_UNIT_SETUP = 0x8002


class TransferMode(enum.IntEnum):
    """Direction of a transfer, or a comparison."""

    TO_FILE = 0x0000
    FROM_FILE = 0x0001
    COMPARE = 0x0002


def _word(value: int, what: str) -> bytes:
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"{what} {value} outside 0..65535")
    return int(value).to_bytes(2, "big")


def _disk_bytes(disk: int) -> bytes:
    try:
        return Disk(disk).to_bytes(2, "big")
    except ValueError:
        raise ValueError(f"unknown disk 0x{int(disk):04x}") from None


def _path_bytes(path: str | None) -> bytes:
    if not valid_directory(path):
        raise ValueError(f"invalid directory {path!r}")
    raw = (path or "").encode("latin-1")
    return len(raw).to_bytes(2, "big") + raw


def _name_bytes(name: str | None) -> bytes:
    if name is None:
        raise ValueError("no file name given")
    return filename_to_83(name).encode("latin-1")


def _area_bytes(area: int) -> bytes:
    try:
        return ParameterArea(area).to_bytes(2, "big")
    except ValueError:
        raise ValueError(f"unknown parameter area 0x{int(area):04x}") from None


def _expect_length(response: bytes, length: int) -> None:
    if len(response) != length:
        raise BodyTooShortError(f"expected {length} response bytes, got {len(response)}")


def _parameter_transfer(
    link: Transport,
    area: int,
    start: int,
    disk: int,
    path: str | None,
    filename: str,
    num_items: int,
    mode: TransferMode,
) -> int:
    if num_items < 0:
        raise ValueError(f"item count {num_items} is negative")
    if num_items == 0:
        return 0
    if filename is None:
        raise ValueError("no file name given")
    area_bytes = _area_bytes(area)
    disk_bytes = _disk_bytes(disk)
    path_bytes = _path_bytes(path)
    name = _name_bytes(filename)
    body = (
        mode.to_bytes(2, "big")
        + area_bytes
        + _word(start, "start address")
        + _word(num_items, "item count")
        + disk_bytes
        + name
        + path_bytes
    )
    response = communicate(link, 0x22, 0x0B, body)
    _expect_length(response, 4)
    return int.from_bytes(response[2:4], "big")


def parameter_area_to_file_transfer(
    link: Transport,
    area: int,
    start: int,
    disk: int,
    path: str | None,
    filename: str,
    num_items: int,
) -> int:
    """Copy words of a parameter area into a file; return the count moved."""
    return _parameter_transfer(
        link, area, start, disk, path, filename, num_items, TransferMode.TO_FILE
    )


def file_to_parameter_area_transfer(
    link: Transport,
    area: int,
    start: int,
    disk: int,
    path: str | None,
    filename: str,
    num_items: int,
) -> int:
    """Copy words from a file into a parameter area; return the count moved."""
    return _parameter_transfer(
        link, area, start, disk, path, filename, num_items, TransferMode.FROM_FILE
    )


def parameter_area_file_compare(
    link: Transport,
    area: int,
    start: int,
    disk: int,
    path: str | None,
    filename: str,
    num_items: int,
) -> int:
    """Compare a parameter area with a file; return the count compared."""
    return _parameter_transfer(
        link, area, start, disk, path, filename, num_items, TransferMode.COMPARE
    )


def _program_transfer(
    link: Transport,
    disk: int,
    path: str | None,
    filename: str,
    mode: TransferMode,
) -> int:
    if filename is None:
        raise ValueError("no file name given")
    disk_bytes = _disk_bytes(disk)
    path_bytes = _path_bytes(path)
    name = _name_bytes(filename)
    body = mode.to_bytes(2, "big") + _PROGRAM_AREA_FIELDS + disk_bytes + name + path_bytes
    response = communicate(link, 0x22, 0x0C, body)
    _expect_length(response, 6)
    return int.from_bytes(response[2:6], "big")


def program_to_file_transfer(
    link: Transport, disk: int, path: str | None, filename: str
) -> int:
    """Save the user program to a file; return the number of bytes."""
    return _program_transfer(link, disk, path, filename, TransferMode.TO_FILE)


def file_to_program_transfer(
    link: Transport, disk: int, path: str | None, filename: str
) -> int:
    """Load the user program from a file; return the number of bytes."""
    return _program_transfer(link, disk, path, filename, TransferMode.FROM_FILE)


def program_file_compare(
    link: Transport, disk: int, path: str | None, filename: str
) -> int:
    """Compare the user program with a file; return the number of bytes."""
    return _program_transfer(link, disk, path, filename, TransferMode.COMPARE)