#!/usr/bin/env python3

# Copyright (C) 2020-2024 The bip32kit developers
#
# This file is part of bip32kit. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip32kit including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Module bip32kit.bip32."""

from bip32kit.bip32.bip32 import (
    BIP32Key,
    derive,
    derive_child,
    derive_from_account,
    derive_path,
    xpub_from_xprv,
)
from bip32kit.bip32.codec import b58decode, b58encode, parse, serialize
from bip32kit.bip32.der_path import (
    HARDENED,
    BIP32DerPath,
    ChildNumber,
    DerivationPath,
    der_path_from_bip32_path,
    parse_path,
)
from bip32kit.bip32.key_origin import BIP32KeyOrigin, derive_with_origin
from bip32kit.bip32.lineage import validate_lineage
from bip32kit.bip32.xkey import (
    XKey,
    XKeyInfo,
    XPrv,
    XPub,
    fingerprint,
    neuter,
    public_key,
    root_from_seed,
    with_hint,
)

__all__ = [
    "BIP32Key",
    "BIP32DerPath",
    "BIP32KeyOrigin",
    "ChildNumber",
    "DerivationPath",
    "HARDENED",
    "XKey",
    "XKeyInfo",
    "XPrv",
    "XPub",
    "b58decode",
    "b58encode",
    "der_path_from_bip32_path",
    "derive",
    "derive_child",
    "derive_from_account",
    "derive_path",
    "derive_with_origin",
    "fingerprint",
    "neuter",
    "parse",
    "parse_path",
    "public_key",
    "root_from_seed",
    "serialize",
    "validate_lineage",
    "with_hint",
    "xpub_from_xprv",
]
