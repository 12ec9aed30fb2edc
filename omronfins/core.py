"""Command exchange with a remote FINS node and the access-right commands."""

from __future__ import annotations

import abc
from dataclasses import dataclass

NO_ACCESS_RIGHT = 0x3001
"""End code a PLC answers with when another node holds the access right."""

_ALL_UNITS = b"\xff\xff"


class FinsError(Exception):
    """Base class for every error raised by this package."""


class ResponseError(FinsError):
    """The remote node answered with a non-zero end code."""

    def __init__(self, end_code: int, response: bytes = b"") -> None:
        super().__init__(f"FINS end code 0x{end_code:04x}")
        self.end_code = end_code
        self.response = bytes(response)


class BodyTooShortError(FinsError):
    """The response body does not have the length the command requires."""


class AccessDeniedError(ResponseError):
    """Another node holds the access right; ``holder`` names it when known."""

    def __init__(
        self,
        end_code: int = NO_ACCESS_RIGHT,
        response: bytes = b"",
        holder: NodeAddress | None = None,
    ) -> None:
        super().__init__(end_code, response)
        self.holder = holder


@dataclass(frozen=True)
class NodeAddress:
    """Network, node and unit numbers of a FINS station."""

    network: int
    node: int
    unit: int


class Transport(abc.ABC):
    """A link to a remote FINS node that carries one command at a time."""

    @abc.abstractmethod
    def exchange(self, mrc: int, src: int, body: bytes) -> bytes:
        """Send a command and return the response body, end code included."""


def communicate(link: Transport, mrc: int, src: int, body: bytes = b"") -> bytes:
    """Send one command and return its response body.

    The first two bytes of the returned body hold the end code, which has
    already been checked to be zero.
    """
    response = bytes(link.exchange(mrc, src, bytes(body)))
    if len(response) < 2:
        raise BodyTooShortError(f"response of {len(response)} bytes has no end code")
    end_code = ((response[0] & 0x7F) << 8) | (response[1] & 0x3F)
    if end_code == NO_ACCESS_RIGHT:
        raise AccessDeniedError(end_code, response)
    if end_code:
        raise ResponseError(end_code, response)
    return response


def _expect_length(response: bytes, length: int) -> None:
    if len(response) != length:
        raise BodyTooShortError(f"expected {length} response bytes, got {len(response)}")


def access_right_acquire(link: Transport) -> None:
    """Acquire the access right; raise AccessDeniedError naming the holder."""
    try:
        communicate(link, 0x0C, 0x01, _ALL_UNITS)
    except AccessDeniedError as exc:
        holder = None
        if len(exc.response) >= 5:
            holder = NodeAddress(*exc.response[2:5])
        raise AccessDeniedError(exc.end_code, exc.response, holder) from None


def access_right_forced_acquire(link: Transport) -> None:
    """Take the access right even when another node holds it."""
    _expect_length(communicate(link, 0x0C, 0x02, _ALL_UNITS), 2)


def access_right_release(link: Transport) -> None:
    """Release a previously acquired access right."""
    _expect_length(communicate(link, 0x0C, 0x03, _ALL_UNITS), 2)


def forced_set_reset_cancel(link: Transport) -> None:
    """Cancel every forced set and reset bit in the PLC."""
    _expect_length(communicate(link, 0x23, 0x02, b""), 2)