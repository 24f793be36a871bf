#!/usr/bin/env python3

# Copyright (C) 2020-2024 The bip32kit developers
#
# This file is part of bip32kit. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip32kit including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""BIP32 extended key serialization.

The 78 bytes payload is:

- version (4 bytes), selecting network, hint, and private/public
- depth (1 byte)
- parent fingerprint (4 bytes)
- child number (4 bytes, big-endian, hardened bit included)
- chain code (32 bytes)
- key data (33 bytes): 0x00 || private key, or the compressed public key

Its Base58Check encoding appends hash256(payload)[:4]
before the base58 encoding.

Decoding is all-or-nothing: either a fully validated key is returned
or a typed error is raised.
"""

from typing import Optional

from loguru import logger

from bip32kit import base58
from bip32kit.alias import Octets, String
from bip32kit.bip32.der_path import ChildNumber
from bip32kit.bip32.xkey import XKey, XPrv, XPub
from bip32kit.ecc import CurveBackend
from bip32kit.exceptions import (
    BadPadding,
    DecodeError,
    LengthMismatch,
    NetworkMismatch,
)
from bip32kit.network import NetworkTag, version_bytes, xkey_version
from bip32kit.utils import bytes_from_octets

PAYLOAD_SIZE = 78
_CHECKSUM_SIZE = 4


def serialize(xkey: XKey) -> bytes:
    "Return the 78 bytes BIP32 serialization of the extended key."

    if isinstance(xkey, XPrv):
        key_data = b"\x00" + xkey.private_key_bytes()
    else:
        key_data = xkey.key

    return b"".join(
        [
            version_bytes(xkey.network, xkey.hint, xkey.is_private),
            xkey.depth.to_bytes(1, byteorder="big", signed=False),
            xkey.parent_fingerprint,
            xkey.child_number.to_bytes(),
            xkey.chain_code,
            key_data,
        ]
    )


def parse(
    data: Octets,
    network: Optional[NetworkTag] = None,
    backend: Optional[CurveBackend] = None,
) -> XKey:
    """Return the extended key from its 78 bytes BIP32 serialization.

    If network is given, a key for a different network
    raises NetworkMismatch.
    """

    data = bytes_from_octets(data)
    if len(data) != PAYLOAD_SIZE:
        err_msg = "invalid extended key length: "
        err_msg += f"{len(data)} bytes instead of {PAYLOAD_SIZE}"
        raise LengthMismatch(err_msg, len(data), PAYLOAD_SIZE)

    version = xkey_version(data[:4])
    if network is not None and version.network != NetworkTag(network):
        err_msg = f"invalid network: {version.network.value}"
        err_msg += f" instead of {NetworkTag(network).value}"
        raise NetworkMismatch(err_msg)

    depth = data[4]
    parent_fingerprint = data[5:9]
    child_number = ChildNumber.from_wire(
        int.from_bytes(data[9:13], byteorder="big", signed=False)
    )
    chain_code = data[13:45]
    key_data = data[45:]

    if version.is_private:
        if key_data[0] != 0:
            err_msg = "invalid private key prefix, "
            err_msg += f"not 0x00 but 0x{key_data[:1].hex()}"
            raise BadPadding(err_msg)
        return XPrv(
            version.network,
            version.hint,
            depth,
            parent_fingerprint,
            child_number,
            chain_code,
            key_data[1:],
            backend,
        )

    return XPub(
        version.network,
        version.hint,
        depth,
        parent_fingerprint,
        child_number,
        chain_code,
        key_data,
        backend,
    )


def b58encode(xkey: XKey) -> str:
    "Return the Base58Check encoding of the extended key."
    return base58.b58encode(serialize(xkey), PAYLOAD_SIZE).decode("ascii")


def b58decode(
    xkey: String,
    network: Optional[NetworkTag] = None,
    backend: Optional[CurveBackend] = None,
) -> XKey:
    """Return the extended key from its Base58Check encoding.

    The checks are performed in this order:
    base58 alphabet, checksum, payload length, version, key data.
    """

    if isinstance(xkey, str):
        xkey = xkey.strip()

    try:
        payload = base58.b58decode(xkey)
    except DecodeError as e:
        logger.debug(f"extended key decoding failure: {e}")
        raise

    if len(payload) != PAYLOAD_SIZE:
        size = len(payload) + _CHECKSUM_SIZE
        err_msg = "invalid decoded extended key length: "
        err_msg += f"{size} bytes instead of {PAYLOAD_SIZE + _CHECKSUM_SIZE}"
        raise LengthMismatch(err_msg, size, PAYLOAD_SIZE + _CHECKSUM_SIZE)

    return parse(payload, network, backend)
