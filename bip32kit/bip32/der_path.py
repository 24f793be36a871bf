#!/usr/bin/env python3

# Copyright (C) 2020-2024 The bip32kit developers
#
# This file is part of bip32kit. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip32kit including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""BIP32 child numbers and derivation paths.

A BIP 32 derivation path can be represented as:

- "m/44h/0'/1H/0/10" or "44h/0'/1H/0/10" string
- sequence of integer indexes (hardened ones having the 0x80000000 bit set)
- bytes (multiples of 4-bytes little-endian index, as used in PSBT)

The string grammar is strict: an optional "m" (or "M") root marker,
then "/" separated segments; each segment is a decimal integer
in [0, 2^31 - 1], without leading zeros,
optionally followed by one hardening symbol among "'", "h", "H".
"""

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence, Tuple, Union, overload

from bip32kit.exceptions import BIP32KitTypeError, BIP32KitValueError, ParseError

HARDENED = 0x80000000
# default hardening symbol among the possible ones: "h", "H", "'"
_HARDENING = "h"
_HARDENING_SYMBOLS = ("'", "h", "H")
_ROOT_MARKERS = ("m", "M")

_SEGMENT = re.compile(r"(0|[1-9][0-9]*)(['hH]?)")


@dataclass(frozen=True)
class ChildNumber:
    index: int
    hardened: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.index, int) or isinstance(self.index, bool):
            raise BIP32KitTypeError(f"invalid index type: {type(self.index)}")
        if not 0 <= self.index < HARDENED:
            raise BIP32KitValueError(f"invalid index: {self.index}")

    @property
    def wire_value(self) -> int:
        return self.index | HARDENED if self.hardened else self.index

    @classmethod
    def from_wire(cls, value: int) -> "ChildNumber":
        if not 0 <= value <= 0xFFFFFFFF:
            raise BIP32KitValueError(f"invalid index: {value}")
        return cls(value & ~HARDENED, value >= HARDENED)

    def to_bytes(self) -> bytes:
        return self.wire_value.to_bytes(4, byteorder="big", signed=False)

    def to_str(self, hardening: str = _HARDENING) -> str:
        if hardening not in _HARDENING_SYMBOLS:
            raise BIP32KitValueError(f"invalid hardening symbol: {hardening}")
        return str(self.index) + (hardening if self.hardened else "")

    def __str__(self) -> str:
        return self.to_str()


def _child_number_from_segment(segment: str, position: int) -> ChildNumber:

    match = _SEGMENT.fullmatch(segment)
    if match is None:
        if segment == "":
            raise ParseError(f"empty path segment at position {position}")
        err_msg = f"invalid path segment at position {position}: {segment!r}"
        raise ParseError(err_msg)

    digits = match.group(1)
    # 2^31 - 1 has 10 digits
    if len(digits) > 10:
        err_msg = f"index out of range at position {position}: {len(digits)} digits"
        raise ParseError(err_msg)
    index = int(digits)
    if index >= HARDENED:
        err_msg = f"index out of range at position {position}: {index}"
        raise ParseError(err_msg)
    return ChildNumber(index, match.group(2) != "")


@dataclass(frozen=True)
class DerivationPath:
    "Ordered sequence of child numbers, from the root to the leaf."

    steps: Tuple[ChildNumber, ...] = ()

    def __post_init__(self) -> None:
        steps = tuple(self.steps)
        if any(not isinstance(step, ChildNumber) for step in steps):
            raise BIP32KitValueError("invalid derivation path element")
        if len(steps) > 255:
            raise BIP32KitValueError(f"depth greater than 255: {len(steps)}")
        object.__setattr__(self, "steps", steps)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[ChildNumber]:
        return iter(self.steps)

    @overload
    def __getitem__(self, i: int) -> ChildNumber:
        ...

    @overload
    def __getitem__(self, i: slice) -> "DerivationPath":
        ...

    def __getitem__(self, i: Union[int, slice]) -> Union[ChildNumber, "DerivationPath"]:
        if isinstance(i, slice):
            return DerivationPath(self.steps[i])
        return self.steps[i]

    def __add__(self, other: "DerivationPath") -> "DerivationPath":
        if not isinstance(other, DerivationPath):
            return NotImplemented
        return DerivationPath(self.steps + other.steps)

    def child(self, child_number: ChildNumber) -> "DerivationPath":
        return DerivationPath(self.steps + (child_number,))

    @property
    def indexes(self) -> Tuple[int, ...]:
        "Return the wire values (hardened bit included)."
        return tuple(step.wire_value for step in self.steps)

    @classmethod
    def from_indexes(cls, indexes: Iterable[int]) -> "DerivationPath":
        return cls(tuple(ChildNumber.from_wire(int(i)) for i in indexes))

    def to_bytes(self) -> bytes:
        "Return the PSBT serialization: 4-bytes little-endian indexes."
        return b"".join(
            i.to_bytes(4, byteorder="little", signed=False) for i in self.indexes
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "DerivationPath":
        if len(data) % 4 != 0:
            err_msg = f"index are not a multiple of 4-bytes: {len(data)}"
            raise BIP32KitValueError(err_msg)
        return cls.from_indexes(
            int.from_bytes(data[n : n + 4], byteorder="little", signed=False)
            for n in range(0, len(data), 4)
        )

    @classmethod
    def from_str(cls, der_path: str) -> "DerivationPath":
        return parse_path(der_path)

    def to_str(self, hardening: str = _HARDENING, root_marker: bool = True) -> str:
        segments = [step.to_str(hardening) for step in self.steps]
        if root_marker:
            segments.insert(0, "m")
        return "/".join(segments)

    def __str__(self) -> str:
        return self.to_str()


def parse_path(der_path: str) -> DerivationPath:
    """Return the DerivationPath of a BIP32 path string.

    Leading and trailing blanks are trimmed,
    as for every other string input of the package;
    blanks inside the path are invalid.
    Parsing is pure and total: either the whole string is consumed
    or ParseError is raised; a lone root marker is the empty path.
    Error positions are zero-based step indexes, root marker excluded.
    """

    if not isinstance(der_path, str):
        raise ParseError(f"not a string: {type(der_path)}")

    der_path = der_path.strip()
    if der_path == "":
        raise ParseError("empty derivation path")

    segments = der_path.split("/")
    if segments[0] in _ROOT_MARKERS:
        segments = segments[1:]
        if segments == []:
            return DerivationPath()

    if len(segments) > 255:
        raise ParseError(f"depth greater than 255: {len(segments)}")

    return DerivationPath(
        tuple(
            _child_number_from_segment(segment, position)
            for position, segment in enumerate(segments)
        )
    )


BIP32DerPath = Union[DerivationPath, str, Sequence[int], int, bytes]


def der_path_from_bip32_path(der_path: BIP32DerPath) -> DerivationPath:
    """Return a DerivationPath from any of its representations.

    Integer indexes are wire values, i.e. hardened ones
    have the 0x80000000 bit set;
    bytes are 4-bytes little-endian indexes.
    """

    if isinstance(der_path, DerivationPath):
        return der_path

    if isinstance(der_path, str):
        return parse_path(der_path)

    if isinstance(der_path, int):
        return DerivationPath.from_indexes([der_path])

    if isinstance(der_path, (bytes, bytearray)):
        return DerivationPath.from_bytes(bytes(der_path))

    # Iterable[int]
    return DerivationPath.from_indexes(der_path)
