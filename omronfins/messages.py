"""Reading and clearing PLC messages and FAL/FALS failure messages."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .core import BodyTooShortError, Transport, communicate

_C_WHITESPACE = " \t\n\v\f\r"
_MESSAGE_TEXT_LENGTH = 32
_FAL_TEXT_LENGTH = 16


class MessageMask(enum.IntFlag):
    """Bits that select the eight user messages of a PLC."""

    MSG_0 = 0x01
    MSG_1 = 0x02
    MSG_2 = 0x04
    MSG_3 = 0x08
    MSG_4 = 0x10
    MSG_5 = 0x20
    MSG_6 = 0x40
    MSG_7 = 0x80


_MESSAGE_ORDER = tuple(MessageMask)


@dataclass(frozen=True)
class PlcMessage:
    """One user message together with the bit that selected it."""

    msg: MessageMask
    text: str


def _text(raw: bytes) -> str:
    """Decode a fixed-width text field as a NUL-terminated, right-trimmed string."""
    text = raw.decode("latin-1").rstrip(_C_WHITESPACE)
    return text.split("\0", 1)[0]


def message_clear(link: Transport, mask: int) -> None:
    """Clear the messages selected by ``mask``; an empty mask does nothing."""
    mask = int(mask) & 0xFF
    if not mask:
        return
    response = communicate(link, 0x09, 0x20, bytes([0x40, mask]))
    if len(response) != 2:
        raise BodyTooShortError(f"expected 2 response bytes, got {len(response)}")


def message_fal_fals_read(link: Transport, fal_number: int) -> str:
    """Read the text a FAL or FALS instruction with this number produced."""
    if not 1 <= fal_number <= 511:
        raise ValueError(f"FAL number {fal_number} outside 1..511")
    body = bytes([0x80 | ((fal_number >> 8) & 0x3F), fal_number & 0xFF])
    response = communicate(link, 0x09, 0x20, body)
    if len(response) != 20:
        raise BodyTooShortError(f"expected 20 response bytes, got {len(response)}")
    return _text(response[4:4 + _FAL_TEXT_LENGTH])


def message_read(link: Transport, mask: int) -> list[PlcMessage]:
    """Read the user messages selected by ``mask``, in bit order."""
    mask = int(mask) & 0xFF
    if not mask:
        return []
    response = communicate(link, 0x09, 0x20, bytes([0x00, mask]))
    if len(response) < 4:
        raise BodyTooShortError(f"response of {len(response)} bytes has no message mask")
    received = MessageMask(response[3])
    selected = [bit for bit in _MESSAGE_ORDER if bit & received]
    needed = 4 + _MESSAGE_TEXT_LENGTH * len(selected)
    if len(response) < needed:
        raise BodyTooShortError(f"expected {needed} response bytes, got {len(response)}")
    messages = []
    offset = 4
    for bit in selected:
        raw = response[offset:offset + _MESSAGE_TEXT_LENGTH]
        messages.append(PlcMessage(msg=bit, text=_text(raw)))
        offset += _MESSAGE_TEXT_LENGTH
    return messages