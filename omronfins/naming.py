"""Setting, deleting and reading the name of a link unit."""

from __future__ import annotations

from .core import BodyTooShortError, Transport, communicate

_NAME_LENGTH = 8


def _expect_length(response: bytes, length: int) -> None:
    if len(response) != length:
        raise BodyTooShortError(f"expected {length} response bytes, got {len(response)}")


def name_set(link: Transport, name: str) -> None:
    """Give the unit a name; at most eight characters are sent."""
    text = name.split("\0", 1)[0][:_NAME_LENGTH]
    _expect_length(communicate(link, 0x26, 0x01, text.encode("latin-1")), 2)


def name_delete(link: Transport) -> None:
    """Remove the name of the unit."""
    _expect_length(communicate(link, 0x26, 0x02, b""), 2)


def name_read(link: Transport) -> str:
    """Return the name of the unit, at most eight characters."""
    response = communicate(link, 0x26, 0x03, b"")
    raw = response[2:2 + _NAME_LENGTH]
    return raw.decode("latin-1").split("\0", 1)[0]