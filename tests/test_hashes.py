#!/usr/bin/env python3

# Copyright (C) 2020-2024 The bip32kit developers
#
# This file is part of bip32kit. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip32kit including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Tests for the `bip32kit.hashes` module."

from bip32kit.hashes import hash160, hash256, hmac_sha512, ripemd160, sha256


def test_empty_input() -> None:
    assert sha256(b"").hex() == (
        "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
    )
    assert ripemd160(b"").hex() == "9c1185a5c5e9fc54612808977ee8f548b2258d31"
    assert hash256(b"").hex() == (
        "5df6e0e2761359d30a8275058e299fcc0381534545f55cf43e41983f5d4c9456"
    )


def test_hash160() -> None:
    # BIP32 test vector 1: the master key fingerprint
    pub_key = "0339a36013301597daef41fbe593a02cc513d0b55527ec2df1050e2e8ff49c85c2"
    assert hash160(pub_key)[:4].hex() == "3442193e"
    assert hash160(pub_key) == hash160(bytes.fromhex(pub_key))
    assert hash160(pub_key) == ripemd160(sha256(pub_key))


def test_hmac_sha512() -> None:
    # RFC 4231, test case 2
    digest = hmac_sha512(b"Jefe", b"what do ya want for nothing?")
    assert len(digest) == 64
    assert digest.hex() == (
        "164b7a7bfcf819e2e395fbe73b56e0a387bd64222e831fd610270cd7ea250554"
        "9758bf75c05a994a6d034f65f8f0e6fdcaeab1a34d4a6b4b636e070a38bce737"
    )
