#!/usr/bin/env python3

# Copyright (C) 2020-2024 The bip32kit developers
#
# This file is part of bip32kit. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip32kit including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Hash based helper functions.

RIPEMD160 comes from pycryptodome: with OpenSSL 3.x hashlib
may still list ripemd160, but it is not usable
unless the legacy provider is loaded.
"""

import hashlib
import hmac

from Crypto.Hash import RIPEMD160

from bip32kit.alias import Octets
from bip32kit.utils import bytes_from_octets


def ripemd160(octets: Octets) -> bytes:
    """Return the RIPEMD160(*) of the input octet sequence."""
    octets = bytes_from_octets(octets)
    return RIPEMD160.new(octets).digest()


def sha256(octets: Octets) -> bytes:
    """Return the SHA256(*) of the input octet sequence."""
    octets = bytes_from_octets(octets)
    return hashlib.sha256(octets).digest()


def hash160(octets: Octets) -> bytes:
    """Return the HASH160=RIPEMD160(SHA256) of the input octet sequence."""
    return ripemd160(sha256(octets))


def hash256(octets: Octets) -> bytes:
    """Return the SHA256(SHA256(*)) of the input octet sequence."""
    return sha256(sha256(octets))


def hmac_sha512(key: bytes, data: bytes) -> bytes:
    "Return the 64 bytes HMAC-SHA512 of data keyed by key."
    return hmac.new(key, data, "sha512").digest()
