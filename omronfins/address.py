"""Decoding of textual PLC memory addresses such as ``D100`` or ``H82.1``."""

from __future__ import annotations

import re
from dataclasses import dataclass

_WS = " \t\n\v\f\r"
_NAME_MAX = 4
_PLAIN = re.compile(r"([A-Za-z]{0,3})[ \t\n\v\f\r]*([0-9]+)(?:\.([0-9]*))?")
_AFTER_PREFIX = re.compile(r"([0-9]*)(?:\.([0-9]*))?")


@dataclass(frozen=True)
class PlcAddress:
    """An area name with a word address and an optional bit number."""

    name: str
    main_address: int
    sub_address: int = 0


def decode_address(text: str) -> PlcAddress:
    """Decode an address; bits use dot notation, as in ``H82.1``.

    Area names ending in an underscore (``E0_``) are taken as written.
    Raises ValueError when the text is not a valid address.
    """
    rest = text.lstrip(_WS)
    if "_" in rest:
        cut = rest.index("_") + 1
        name = rest[:cut]
        if len(name) > _NAME_MAX:
            raise ValueError(f"area name {name!r} is too long")
        match = _AFTER_PREFIX.fullmatch(rest[cut:])
        if match is None:
            raise ValueError(f"invalid address {text!r}")
        main, sub = match.group(1), match.group(2)
    else:
        match = _PLAIN.fullmatch(rest)
        if match is None:
            raise ValueError(f"invalid address {text!r}")
        name = match.group(1).upper()
        main, sub = match.group(2), match.group(3)

    main_address = int(main) & 0xFFFFFFFF if main else 0
    sub_address = int(sub) if sub else 0
    if sub_address > 15:
        raise ValueError(f"bit number {sub_address} outside 0..15")
    return PlcAddress(name=name, main_address=main_address, sub_address=sub_address)