#!/usr/bin/env python3

# Copyright (C) 2020-2024 The bip32kit developers
#
# This file is part of bip32kit. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip32kit including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""secp256k1 curve backend based on the coincurve libsecp256k1 bindings.

coincurve keeps a single global libsecp256k1 context,
which is only read after creation.
"""

from coincurve import PublicKey

from bip32kit.ecc.backend import (
    SECP256K1_N,
    SCALAR_SIZE,
    assert_compressed_point_format,
    int_from_scalar,
)
from bip32kit.exceptions import CurveError, PointAtInfinity


class CoincurveBackend:

    name = "coincurve"
    order = SECP256K1_N

    def is_valid_scalar(self, scalar: bytes) -> bool:
        try:
            int_from_scalar(scalar, self.order)
        except CurveError:
            return False
        return True

    def scalar_add(self, scalar: bytes, tweak: bytes) -> bytes:
        q = int_from_scalar(scalar, self.order)
        t = int.from_bytes(tweak, byteorder="big", signed=False)
        if t >= self.order:
            raise CurveError("tweak not in 0..n-1")
        result = (q + t) % self.order
        if result == 0:
            raise CurveError("zero private key")
        return result.to_bytes(SCALAR_SIZE, byteorder="big", signed=False)

    def point_from_scalar(self, scalar: bytes) -> bytes:
        int_from_scalar(scalar, self.order)
        try:
            return PublicKey.from_secret(bytes(scalar)).format(compressed=True)
        except ValueError as e:  # pragma: no cover
            raise CurveError("secp256k1_ec_pubkey_create failure") from e

    def point_add_scalar(self, point: bytes, tweak: bytes) -> bytes:
        pub_key = self._public_key(point)
        t = int.from_bytes(tweak, byteorder="big", signed=False)
        if len(tweak) != SCALAR_SIZE or t >= self.order:
            raise CurveError("tweak not in 0..n-1")
        try:
            return pub_key.add(bytes(tweak)).format(compressed=True)
        except ValueError as e:
            # a valid point plus a valid tweak fails only at infinity
            raise PointAtInfinity("point at infinity") from e

    def validate_point(self, point: bytes) -> bytes:
        return self._public_key(point).format(compressed=True)

    @staticmethod
    def _public_key(point: bytes) -> PublicKey:
        assert_compressed_point_format(point)
        try:
            return PublicKey(bytes(point))
        except ValueError as e:
            raise CurveError(f"invalid public key: 0x{bytes(point).hex()}") from e
