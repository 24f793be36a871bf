#!/usr/bin/env python3

# Copyright (C) 2020-2024 The bip32kit developers
#
# This file is part of bip32kit. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip32kit including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Tests for the `bip32kit.ecc` curve backends."

import threading

import pytest

from bip32kit.ecc import (
    DEFAULT_BACKEND,
    SECP256K1_N,
    CoincurveBackend,
    CurveBackend,
    LibSecp256k1Backend,
    get_backend,
    is_available,
)
from bip32kit.ecc.backend import assert_compressed_point_format, int_from_scalar
from bip32kit.exceptions import (
    BIP32KitRuntimeError,
    BIP32KitValueError,
    CurveError,
    PointAtInfinity,
)

G = bytes.fromhex("0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798")
G2 = bytes.fromhex("02c6047f9441ed7d6d3045406e95c07cd85c778e4b8cef3ca7abac09b95c709ee5")
# x = 7 is not the abscissa of a curve point
NOT_ON_CURVE = bytes.fromhex("02" + "00" * 31 + "07")


def _scalar(i: int) -> bytes:
    return i.to_bytes(32, byteorder="big", signed=False)


BACKENDS = [
    pytest.param("coincurve", id="coincurve"),
    pytest.param(
        "libsecp256k1",
        id="libsecp256k1",
        marks=pytest.mark.skipif(
            not is_available(), reason="btclib_libsecp256k1 is not installed"
        ),
    ),
]


def test_get_backend() -> None:
    assert isinstance(DEFAULT_BACKEND, CoincurveBackend)
    assert get_backend("coincurve").name == "coincurve"
    assert get_backend(" CoinCurve ").name == "coincurve"

    with pytest.raises(BIP32KitValueError, match="unknown curve backend: "):
        get_backend("openssl")


@pytest.mark.skipif(is_available(), reason="btclib_libsecp256k1 is installed")
def test_missing_libsecp256k1() -> None:
    with pytest.raises(BIP32KitRuntimeError, match="btclib_libsecp256k1 is not "):
        LibSecp256k1Backend()


def test_helpers() -> None:
    assert int_from_scalar(_scalar(1), SECP256K1_N) == 1
    for invalid in (_scalar(0), _scalar(SECP256K1_N), b"\x01" * 31):
        with pytest.raises(CurveError):
            int_from_scalar(invalid, SECP256K1_N)

    assert_compressed_point_format(G)
    with pytest.raises(CurveError, match="invalid compressed point size: "):
        assert_compressed_point_format(G[:-1])
    with pytest.raises(CurveError, match="invalid public key prefix "):
        assert_compressed_point_format(b"\x04" + G[1:])


@pytest.mark.parametrize("name", BACKENDS)
def test_scalar_operations(name: str) -> None:
    backend: CurveBackend = get_backend(name)
    assert backend.order == SECP256K1_N

    assert backend.is_valid_scalar(_scalar(1))
    assert backend.is_valid_scalar(_scalar(SECP256K1_N - 1))
    assert not backend.is_valid_scalar(_scalar(0))
    assert not backend.is_valid_scalar(_scalar(SECP256K1_N))
    assert not backend.is_valid_scalar(b"\x01")

    assert backend.scalar_add(_scalar(1), _scalar(1)) == _scalar(2)
    assert backend.scalar_add(_scalar(SECP256K1_N - 1), _scalar(2)) == _scalar(1)
    with pytest.raises(CurveError):
        backend.scalar_add(_scalar(SECP256K1_N - 1), _scalar(1))
    with pytest.raises(CurveError):
        backend.scalar_add(_scalar(1), _scalar(SECP256K1_N))


@pytest.mark.parametrize("name", BACKENDS)
def test_point_operations(name: str) -> None:
    backend: CurveBackend = get_backend(name)

    assert backend.point_from_scalar(_scalar(1)) == G
    assert backend.point_from_scalar(_scalar(2)) == G2
    with pytest.raises(CurveError):
        backend.point_from_scalar(_scalar(0))

    assert backend.point_add_scalar(G, _scalar(1)) == G2
    with pytest.raises(PointAtInfinity):
        backend.point_add_scalar(G, _scalar(SECP256K1_N - 1))
    with pytest.raises(CurveError):
        backend.point_add_scalar(G, _scalar(SECP256K1_N))

    assert backend.validate_point(G) == G
    for invalid in (NOT_ON_CURVE, b"\x04" + G[1:], b"\x00" + G[1:], G[:-1]):
        with pytest.raises(CurveError):
            backend.validate_point(invalid)


def test_concurrent_use() -> None:
    results = []

    def worker(i: int) -> None:
        results.append(DEFAULT_BACKEND.point_from_scalar(_scalar(1 + i % 2)))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(16)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert sorted(results) == sorted([G, G2] * 8)
