#!/usr/bin/env python3

# Copyright (C) 2020-2024 The bip32kit developers
#
# This file is part of bip32kit. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip32kit including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Elliptic curve primitives required by BIP32 derivation.

The derivation engine never performs curve arithmetic by itself:
it consumes a CurveBackend, i.e. any object providing the few
operations listed below.
Scalars are 32 bytes big-endian, points are 33 bytes SEC compressed.

Every operation either succeeds or raises CurveError
(PointAtInfinity when the result is the identity element).
Implementations must be safe for concurrent use:
no per-call mutation of shared curve parameters.
"""

from typing import Protocol

from bip32kit.exceptions import CurveError

# secp256k1 group order
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

SCALAR_SIZE = 32
POINT_SIZE = 33


class CurveBackend(Protocol):

    name: str
    # order of the group generated by the base point G
    order: int

    def is_valid_scalar(self, scalar: bytes) -> bool:
        "Return True if scalar, as big-endian integer, is in [1, n-1]."

    def scalar_add(self, scalar: bytes, tweak: bytes) -> bytes:
        "Return (scalar + tweak) mod n, raising CurveError for a zero result."

    def point_from_scalar(self, scalar: bytes) -> bytes:
        "Return the compressed point scalar*G."

    def point_add_scalar(self, point: bytes, tweak: bytes) -> bytes:
        "Return the compressed point P + tweak*G."

    def validate_point(self, point: bytes) -> bytes:
        "Return the point if it is a valid compressed point, else raise."


def int_from_scalar(scalar: bytes, order: int) -> int:
    "Return the scalar as int, raising CurveError if not in [1, n-1]."

    if len(scalar) != SCALAR_SIZE:
        err_msg = f"invalid scalar size: {len(scalar)} bytes instead of {SCALAR_SIZE}"
        raise CurveError(err_msg)
    q = int.from_bytes(scalar, byteorder="big", signed=False)
    if not 0 < q < order:
        # the value is secret: never print it
        raise CurveError("invalid private key not in 1..n-1")
    return q


def assert_compressed_point_format(point: bytes) -> None:
    if len(point) != POINT_SIZE:
        err_msg = f"invalid compressed point size: {len(point)} bytes instead of {POINT_SIZE}"
        raise CurveError(err_msg)
    if point[0] not in (2, 3):
        err_msg = f"invalid public key prefix not in (0x02, 0x03): 0x{point[:1].hex()}"
        raise CurveError(err_msg)
