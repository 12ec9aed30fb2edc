"""Directory listing, disk formatting, file deletion and directory commands."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from .core import BodyTooShortError, Transport, communicate

MAX_DELETE_FILES = 100
"""Largest number of files one delete command may name."""

MAX_PATH_LENGTH = 65
"""Longest directory path accepted by the PLC."""

_BASE_LENGTH = 8
_EXT_LENGTH = 3
_FORBIDDEN = frozenset(' \\/:*?"<>|.\0')
_LISTING_HEADER_SIZE = 30
_FILE_RECORD_SIZE = 22


class Disk(enum.IntEnum):
    """File devices a PLC can hold files on."""

    MEMORY_CARD = 0x8000
    EM_FILE_MEMORY = 0x8001


@dataclass(frozen=True)
class DiskInfo:
    """Volume information of a PLC disk."""

    volume_label: str
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    total_capacity: int
    free_capacity: int
    total_files: int


@dataclass(frozen=True)
class FileInfo:
    """One directory entry on a PLC disk."""

    filename: str
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    size: int
    read_only: bool
    hidden: bool
    system: bool
    volume_label: bool
    directory: bool
    archive: bool


@dataclass(frozen=True)
class DirectoryListing:
    """Volume information and the directory entries that were read."""

    disk_info: DiskInfo
    files: list[FileInfo] = field(default_factory=list)


def _valid_part(text: str, limit: int) -> bool:
    return len(text) <= limit and all(
        0x20 < ord(char) <= 0xFF and char not in _FORBIDDEN for char in text
    )


def _split_name(name: str) -> tuple[str, str] | None:
    if not name:
        return None
    base, dot, ext = name.rpartition(".")
    if not dot:
        base, ext = name, ""
    if not base or not _valid_part(base, _BASE_LENGTH) or not _valid_part(ext, _EXT_LENGTH):
        return None
    return base, ext


def filename_to_83(name: str) -> str:
    """Return ``name`` as a space-padded twelve character 8.3 file name.

    Raises ValueError when the name does not fit the 8.3 form.
    """
    parts = _split_name(name) if name is not None else None
    if parts is None:
        raise ValueError(f"invalid file name {name!r}")
    base, ext = parts
    return f"{base:<{_BASE_LENGTH}}.{ext:<{_EXT_LENGTH}}"


def valid_directory(path: str | None) -> bool:
    """Tell whether ``path`` is an acceptable directory; empty means the root."""
    if not path:
        return True
    if len(path) > MAX_PATH_LENGTH or not path.startswith("\\"):
        return False
    parts = path[1:].split("\\")
    if parts == [""]:
        return True
    return all(_split_name(part) is not None for part in parts)


def _check_disk(disk: int) -> Disk:
    try:
        return Disk(disk)
    except ValueError:
        raise ValueError(f"unknown disk 0x{int(disk):04x}") from None


def _check_path(path: str | None) -> bytes:
    if not valid_directory(path):
        raise ValueError(f"invalid directory {path!r}")
    raw = (path or "").encode("latin-1")
    return len(raw).to_bytes(2, "big") + raw


def _check_word(value: int, what: str) -> int:
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"{what} {value} outside 0..65535")
    return value


def _expect_length(response: bytes, length: int) -> None:
    if len(response) != length:
        raise BodyTooShortError(f"expected {length} response bytes, got {len(response)}")


def _timestamp(raw: bytes) -> tuple[int, int, int, int, int, int]:
    value = int.from_bytes(raw, "big")
    return (
        ((value >> 25) & 0x7F) + 1980,
        (value >> 21) & 0x0F,
        (value >> 16) & 0x1F,
        (value >> 11) & 0x1F,
        (value >> 5) & 0x3F,
        (value & 0x1F) * 2,
    )


def _label(raw: bytes) -> str:
    return raw.decode("latin-1").split("\0", 1)[0]


def _parse_disk_info(raw: bytes) -> DiskInfo:
    year, month, day, hour, minute, second = _timestamp(raw[12:16])
    return DiskInfo(
        volume_label=_label(raw[0:12]),
        year=year,
        month=month,
        day=day,
        hour=hour,
        minute=minute,
        second=second,
        total_capacity=int.from_bytes(raw[16:20], "big"),
        free_capacity=int.from_bytes(raw[20:24], "big"),
        total_files=int.from_bytes(raw[24:26], "big"),
    )


def _parse_file_info(raw: bytes) -> FileInfo:
    year, month, day, hour, minute, second = _timestamp(raw[12:16])
    attributes = raw[21]
    return FileInfo(
        filename=_label(raw[0:12]),
        year=year,
        month=month,
        day=day,
        hour=hour,
        minute=minute,
        second=second,
        size=int.from_bytes(raw[16:20], "big"),
        read_only=bool(attributes & 0x01),
        hidden=bool(attributes & 0x02),
        system=bool(attributes & 0x04),
        volume_label=bool(attributes & 0x08),
        directory=bool(attributes & 0x10),
        archive=bool(attributes & 0x20),
    )


def file_name_read(
    link: Transport,
    disk: int,
    path: str | None = None,
    start_file: int = 0,
    num_files: int = 0,
) -> DirectoryListing:
    """Read volume information and up to ``num_files`` entries of a directory."""
    disk = _check_disk(disk)
    path_bytes = _check_path(path)
    body = (
        disk.to_bytes(2, "big")
        + _check_word(start_file, "start file").to_bytes(2, "big")
        + _check_word(num_files, "file count").to_bytes(2, "big")
        + path_bytes
    )
    response = communicate(link, 0x22, 0x01, body)
    if len(response) < _LISTING_HEADER_SIZE:
        raise BodyTooShortError(
            f"expected at least {_LISTING_HEADER_SIZE} response bytes, got {len(response)}"
        )
    disk_info = _parse_disk_info(response[2:28])
    count = ((response[28] & 0x7F) << 8) | response[29]
    needed = _LISTING_HEADER_SIZE + count * _FILE_RECORD_SIZE
    if len(response) < needed:
        raise BodyTooShortError(f"expected {needed} response bytes, got {len(response)}")
    files = [
        _parse_file_info(response[offset:offset + _FILE_RECORD_SIZE])
        for offset in range(_LISTING_HEADER_SIZE, needed, _FILE_RECORD_SIZE)
    ]
    return DirectoryListing(disk_info=disk_info, files=files)


def file_memory_format(link: Transport, disk: int) -> None:
    """Format a memory card or the file memory mapped in EM."""
    disk = _check_disk(disk)
    _expect_length(communicate(link, 0x22, 0x04, disk.to_bytes(2, "big")), 2)


def file_delete(link: Transport, disk: int, path: str | None, filenames) -> int:
    """Delete the named files from a directory and return how many went."""
    names = list(filenames)
    if not names:
        return 0
    if len(names) > MAX_DELETE_FILES:
        raise ValueError(f"cannot delete more than {MAX_DELETE_FILES} files at once")
    disk = _check_disk(disk)
    path_bytes = _check_path(path)
    encoded = b"".join(filename_to_83(name).encode("latin-1") for name in names)
    body = disk.to_bytes(2, "big") + len(names).to_bytes(2, "big") + encoded + path_bytes
    response = communicate(link, 0x22, 0x05, body)
    _expect_length(response, 4)
    return int.from_bytes(response[2:4], "big")


def _directory_command(
    link: Transport, disk: int, path: str | None, name: str, mode: int
) -> None:
    if name is None:
        raise ValueError("no directory name given")
    disk = _check_disk(disk)
    path_bytes = _check_path(path)
    encoded = filename_to_83(name).encode("latin-1")
    body = disk.to_bytes(2, "big") + mode.to_bytes(2, "big") + encoded + path_bytes
    _expect_length(communicate(link, 0x22, 0x15, body), 2)


def create_directory(link: Transport, disk: int, path: str | None, name: str) -> None:
    """Create directory ``name`` inside ``path``."""
    _directory_command(link, disk, path, name, 0x0000)


def delete_directory(link: Transport, disk: int, path: str | None, name: str) -> None:
    """Delete directory ``name`` inside ``path``."""
    _directory_command(link, disk, path, name, 0x0001)