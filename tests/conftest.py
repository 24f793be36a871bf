#!/usr/bin/env python3

# Copyright (C) 2020-2024 The bip32kit developers
#
# This file is part of bip32kit. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip32kit including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Shared fixtures: a deterministic mock curve backend."

import pytest

from bip32kit.ecc.backend import SECP256K1_N, int_from_scalar
from bip32kit.exceptions import CurveError, PointAtInfinity


class AdditiveGroupBackend:
    """Mock curve backend where k*G is k itself, i.e. the group (Z_n, +).

    A point is encoded as 0x02 || k (32 bytes big-endian):
    it is useless for cryptography, but it exposes
    the same algebra as secp256k1 to the derivation engine.
    """

    name = "mock"
    order = SECP256K1_N

    def __init__(self) -> None:
        self.calls = 0

    def is_valid_scalar(self, scalar: bytes) -> bool:
        self.calls += 1
        try:
            int_from_scalar(scalar, self.order)
        except CurveError:
            return False
        return True

    def scalar_add(self, scalar: bytes, tweak: bytes) -> bytes:
        self.calls += 1
        result = (int_from_scalar(scalar, self.order) + self._tweak(tweak)) % self.order
        if result == 0:
            raise CurveError("zero private key")
        return result.to_bytes(32, byteorder="big", signed=False)

    def point_from_scalar(self, scalar: bytes) -> bytes:
        self.calls += 1
        return b"\x02" + int_from_scalar(scalar, self.order).to_bytes(32, "big")

    def point_add_scalar(self, point: bytes, tweak: bytes) -> bytes:
        self.calls += 1
        p = int.from_bytes(self.validate_point(point)[1:], "big")
        result = (p + self._tweak(tweak)) % self.order
        if result == 0:
            raise PointAtInfinity("point at infinity")
        return b"\x02" + result.to_bytes(32, byteorder="big", signed=False)

    def validate_point(self, point: bytes) -> bytes:
        if len(point) != 33 or point[0] != 2:
            raise CurveError(f"invalid public key: 0x{bytes(point).hex()}")
        if not 0 < int.from_bytes(point[1:], "big") < self.order:
            raise CurveError(f"invalid public key: 0x{bytes(point).hex()}")
        return bytes(point)

    def _tweak(self, tweak: bytes) -> int:
        t = int.from_bytes(tweak, byteorder="big", signed=False)
        if len(tweak) != 32 or t >= self.order:
            raise CurveError("tweak not in 0..n-1")
        return t


@pytest.fixture
def mock_backend() -> AdditiveGroupBackend:
    return AdditiveGroupBackend()


@pytest.fixture
def seed() -> bytes:
    # BIP32 test vector 1
    return bytes.fromhex("000102030405060708090a0b0c0d0e0f")
