#!/usr/bin/env python3

# Copyright (C) 2020-2024 The bip32kit developers
#
# This file is part of bip32kit. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip32kit including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Exception classes.

These are meant to discriminate between Exceptions being raised
by bip32kit from those raised by other codebase.

Every class derives from one of the regular
ValueError, TypeError, and RuntimeError,
so users are free to catch just the builtin base.

Messages never include private key material or seed bytes.
"""

from typing import Optional


class BIP32KitValueError(ValueError):
    pass


class BIP32KitTypeError(TypeError):
    pass


class BIP32KitRuntimeError(RuntimeError):
    pass


class ParseError(BIP32KitValueError):
    "Malformed derivation path string."


class DerivationFailure(BIP32KitValueError):
    """Child key derivation is not possible.

    Raised for an out of range HMAC output, a zero private key,
    the point at infinity, a hardened step from a public key,
    or a depth overflow.
    When raised by a multi-step derivation, `position` is the
    zero-based path segment that failed.
    """

    def __init__(
        self,
        msg: str,
        child_number: Optional[object] = None,
        position: Optional[int] = None,
    ) -> None:
        super().__init__(msg)
        self.child_number = child_number
        self.position = position


class DecodeError(BIP32KitValueError):
    "Malformed serialized extended key."


class ChecksumMismatch(DecodeError):
    pass


class UnknownVersion(DecodeError):
    def __init__(self, msg: str, version: bytes) -> None:
        super().__init__(msg)
        self.version = version


class LengthMismatch(DecodeError):
    def __init__(self, msg: str, length: int, expected: int) -> None:
        super().__init__(msg)
        self.length = length
        self.expected = expected


class BadPadding(DecodeError):
    "Private key data not starting with the 0x00 padding byte."


class Base58Error(DecodeError):
    pass


class CurveError(BIP32KitValueError):
    "Invalid scalar or point reported by the curve backend."


class PointAtInfinity(CurveError):
    pass


class NetworkMismatch(BIP32KitValueError):
    pass


class LineageMismatch(BIP32KitValueError):
    pass
