#!/usr/bin/env python3

# Copyright (C) 2020-2024 The bip32kit developers
#
# This file is part of bip32kit. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip32kit including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Base58 and Base58Check encoding.

Base58 writes a big-endian integer with an alphabet that omits
0 (zero), O (capital o), I (capital i), and l (lower case L),
and the '+' and '/' of Base64;
each leading zero byte is written as a leading '1'.

Base58Check appends the first 4 bytes of hash256(payload)
before encoding: it is the text form of BIP32 extended keys.

Encoding returns ASCII bytes, decoding accepts ASCII bytes or strings.
Decoding never trims spaces: surrounding blanks are invalid characters.
"""

from typing import Optional

from bip32kit.alias import Octets, String
from bip32kit.exceptions import Base58Error, ChecksumMismatch, LengthMismatch
from bip32kit.hashes import hash256
from bip32kit.utils import bytes_from_octets

_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_DIGITS = {char: value for value, char in enumerate(_ALPHABET)}
_BASE = len(_ALPHABET)
_CHECKSUM_SIZE = 4


def _checksum(payload: bytes) -> bytes:
    return hash256(payload)[:_CHECKSUM_SIZE]


def _b58encode(v: bytes) -> bytes:
    "Return the Base58 encoding of v, without checksum."

    n_zeros = len(v) - len(v.lstrip(b"\x00"))
    i = int.from_bytes(v, byteorder="big", signed=False)
    digits = []
    while i:
        i, remainder = divmod(i, _BASE)
        digits.append(_ALPHABET[remainder])
    digits.extend(_ALPHABET[0] * n_zeros)
    return "".join(reversed(digits)).encode("ascii")


def _b58decode(v: str) -> bytes:
    "Return the bytes of a Base58 string, without checksum verification."

    i = 0
    for position, char in enumerate(v):
        if char not in _DIGITS:
            raise Base58Error(f"invalid base58 character at position {position}")
        i = i * _BASE + _DIGITS[char]

    n_zeros = len(v) - len(v.lstrip(_ALPHABET[0]))
    nbytes = (i.bit_length() + 7) // 8
    return b"\x00" * n_zeros + i.to_bytes(nbytes, byteorder="big", signed=False)


def b58encode(v: Octets, in_size: Optional[int] = None) -> bytes:
    "Return the Base58Check encoding of v, optionally checking its size."

    v = bytes_from_octets(v, in_size)
    return _b58encode(v + _checksum(v))


def b58decode(v: String, out_size: Optional[int] = None) -> bytes:
    """Return the payload of a Base58Check encoded string.

    The checksum is verified before the size,
    so that any corruption is reported as ChecksumMismatch.
    Optionally, it also ensures the required payload size.
    """

    if isinstance(v, (bytes, bytearray)):
        # one character per byte: non-ASCII bytes fail the alphabet check
        v = bytes(v).decode("latin-1")

    data = _b58decode(v)
    if len(data) < _CHECKSUM_SIZE:
        err_msg = "not enough bytes for checksum, "
        err_msg += f"invalid base58 decoded size: {len(data)}"
        raise LengthMismatch(err_msg, len(data), _CHECKSUM_SIZE)

    payload, checksum = data[:-_CHECKSUM_SIZE], data[-_CHECKSUM_SIZE:]
    expected = _checksum(payload)
    if checksum != expected:
        err_msg = f"invalid checksum: 0x{checksum.hex()} instead of 0x{expected.hex()}"
        raise ChecksumMismatch(err_msg)

    if out_size is None or len(payload) == out_size:
        return payload

    err_msg = "valid checksum, invalid decoded size: "
    err_msg += f"{len(payload)} bytes instead of {out_size}"
    raise LengthMismatch(err_msg, len(payload), out_size)
