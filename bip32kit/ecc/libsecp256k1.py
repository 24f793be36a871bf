#!/usr/bin/env python3

# Copyright (C) 2020-2024 The bip32kit developers
#
# This file is part of bip32kit. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip32kit including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""secp256k1 curve backend using the btclib_libsecp256k1 cffi bindings.

The bindings are an optional dependency
(pip install bip32kit[secp256k1]):
is_available() tells whether this backend can be used.
"""

import contextlib

from bip32kit.ecc.backend import (
    POINT_SIZE,
    SECP256K1_N,
    SCALAR_SIZE,
    assert_compressed_point_format,
    int_from_scalar,
)
from bip32kit.exceptions import BIP32KitRuntimeError, CurveError, PointAtInfinity

LIBSECP256K1_AVAILABLE = False
with contextlib.suppress(ImportError):
    from btclib_libsecp256k1 import ffi, lib

    LIBSECP256K1_AVAILABLE = True
    # Keeping a single one of these is most efficient.
    # SECP256K1_CONTEXT_SIGN | SECP256K1_CONTEXT_VERIFY
    ctx = lib.secp256k1_context_create(769)
    EC_COMPRESSED = 258  # lib.SECP256K1_EC_COMPRESSED


def is_available() -> bool:
    return LIBSECP256K1_AVAILABLE


class LibSecp256k1Backend:

    name = "libsecp256k1"
    order = SECP256K1_N

    def __init__(self) -> None:
        if not is_available():
            raise BIP32KitRuntimeError("btclib_libsecp256k1 is not installed")

    def is_valid_scalar(self, scalar: bytes) -> bool:
        if len(scalar) != SCALAR_SIZE:
            return False
        return bool(lib.secp256k1_ec_seckey_verify(ctx, bytes(scalar)))

    def scalar_add(self, scalar: bytes, tweak: bytes) -> bytes:
        int_from_scalar(scalar, self.order)
        if len(tweak) != SCALAR_SIZE:
            raise CurveError("tweak not in 0..n-1")
        seckey = ffi.new("unsigned char[32]", bytes(scalar))
        try:
            if not lib.secp256k1_ec_seckey_tweak_add(ctx, seckey, bytes(tweak)):
                raise CurveError("tweak not in 0..n-1, or zero private key")
            return bytes(ffi.unpack(seckey, SCALAR_SIZE))
        finally:
            ffi.memmove(seckey, b"\x00" * SCALAR_SIZE, SCALAR_SIZE)

    def point_from_scalar(self, scalar: bytes) -> bytes:
        int_from_scalar(scalar, self.order)
        pubkey_ptr = ffi.new("secp256k1_pubkey *")
        if not lib.secp256k1_ec_pubkey_create(ctx, pubkey_ptr, bytes(scalar)):
            raise CurveError("secp256k1_ec_pubkey_create failure")  # pragma: no cover
        return self._serialize(pubkey_ptr)

    def point_add_scalar(self, point: bytes, tweak: bytes) -> bytes:
        pubkey_ptr = self._parse(point)
        t = int.from_bytes(tweak, byteorder="big", signed=False)
        if len(tweak) != SCALAR_SIZE or t >= self.order:
            raise CurveError("tweak not in 0..n-1")
        if not lib.secp256k1_ec_pubkey_tweak_add(ctx, pubkey_ptr, bytes(tweak)):
            raise PointAtInfinity("point at infinity")
        return self._serialize(pubkey_ptr)

    def validate_point(self, point: bytes) -> bytes:
        return self._serialize(self._parse(point))

    @staticmethod
    def _parse(point: bytes):
        assert_compressed_point_format(point)
        pubkey_ptr = ffi.new("secp256k1_pubkey *")
        if not lib.secp256k1_ec_pubkey_parse(ctx, pubkey_ptr, bytes(point), POINT_SIZE):
            raise CurveError(f"invalid public key: 0x{bytes(point).hex()}")
        return pubkey_ptr

    @staticmethod
    def _serialize(pubkey_ptr) -> bytes:
        serialized_pubkey_ptr = ffi.new(f"char[{POINT_SIZE}]")
        length = ffi.new("size_t *", POINT_SIZE)
        # according to documentation, it always returns 1
        lib.secp256k1_ec_pubkey_serialize(
            ctx, serialized_pubkey_ptr, length, pubkey_ptr, EC_COMPRESSED
        )
        return ffi.unpack(serialized_pubkey_ptr, POINT_SIZE)
