#!/usr/bin/env python3

# Copyright (C) 2020-2024 The bip32kit developers
#
# This file is part of bip32kit. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip32kit including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""BIP32 key origin: master fingerprint and derivation path.

The binary serialization (as used in PSBT) is the 4 bytes fingerprint
followed by the 4-bytes little-endian indexes;
the description (as used in output descriptors) is "d34db33f/44h/0h/0h".
"""

from dataclasses import dataclass, field
from typing import Tuple

from dataclasses_json import DataClassJsonMixin, config

from bip32kit.alias import Octets
from bip32kit.bip32.bip32 import derive_path
from bip32kit.bip32.der_path import (
    BIP32DerPath,
    DerivationPath,
    der_path_from_bip32_path,
)
from bip32kit.bip32.xkey import XKey, XPrv, fingerprint, public_key
from bip32kit.exceptions import BIP32KitValueError
from bip32kit.utils import bytes_from_octets


def _str_from_indexes(indexes: Tuple[int, ...]) -> str:
    return DerivationPath.from_indexes(indexes).to_str()


def _indexes_from_str(der_path: str) -> Tuple[int, ...]:
    return der_path_from_bip32_path(der_path).indexes


@dataclass(frozen=True)
class BIP32KeyOrigin(DataClassJsonMixin):
    master_fingerprint: bytes = field(
        metadata=config(encoder=lambda v: v.hex(), decoder=bytes.fromhex)
    )
    # wire values, hardened ones having the 0x80000000 bit set
    der_path: Tuple[int, ...] = field(
        metadata=config(
            field_name="path", encoder=_str_from_indexes, decoder=_indexes_from_str
        )
    )

    def __init__(self, master_fingerprint: Octets, der_path: BIP32DerPath) -> None:
        object.__setattr__(
            self, "master_fingerprint", bytes_from_octets(master_fingerprint)
        )
        object.__setattr__(
            self, "der_path", der_path_from_bip32_path(der_path).indexes
        )
        self.assert_valid()

    def __len__(self) -> int:
        return len(self.der_path)

    @property
    def path(self) -> DerivationPath:
        return DerivationPath.from_indexes(self.der_path)

    @property
    def description(self) -> str:
        fingerprint_ = self.master_fingerprint.hex()
        der_path = self.path.to_str(root_marker=False)
        return fingerprint_ + "/" + der_path if der_path else fingerprint_

    def assert_valid(self) -> None:
        if len(self.master_fingerprint) != 4:
            err_msg = "invalid master fingerprint length: "
            err_msg += f"{len(self.master_fingerprint)}"
            raise BIP32KitValueError(err_msg)
        if len(self) > 255:
            raise BIP32KitValueError(f"invalid der_path size: {len(self)}")

    def serialize(self) -> bytes:
        return self.master_fingerprint + self.path.to_bytes()

    @classmethod
    def parse(cls, data: Octets) -> "BIP32KeyOrigin":
        "Return a BIP32KeyOrigin by parsing binary data."
        data = bytes_from_octets(data)
        if len(data) < 4:
            err_msg = f"not enough bytes for a key origin: {len(data)}"
            raise BIP32KitValueError(err_msg)
        return cls(data[:4], DerivationPath.from_bytes(data[4:]))

    @classmethod
    def from_description(cls, description: str) -> "BIP32KeyOrigin":
        description = description.strip()
        master_fingerprint, _, der_path = description.partition("/")
        return cls(master_fingerprint, "m/" + der_path if der_path else "m")

    @classmethod
    def from_root(cls, root: XKey, der_path: BIP32DerPath) -> "BIP32KeyOrigin":
        "Return the key origin of the key derived from root along der_path."
        if not root.is_root:
            raise BIP32KitValueError("not a root key")
        return cls(fingerprint(root), der_path)


def derive_with_origin(root: XKey, der_path: BIP32DerPath) -> Tuple[bytes, BIP32KeyOrigin]:
    """Return the public key derived from root along der_path, with its origin.

    The pair is the PSBT hd_key_paths entry of the derived key.
    """

    key_origin = BIP32KeyOrigin.from_root(root, der_path)
    xkey = derive_path(root, key_origin.path)
    try:
        return public_key(xkey), key_origin
    finally:
        if xkey is not root and isinstance(xkey, XPrv):
            xkey.wipe()
