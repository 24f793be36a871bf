#!/usr/bin/env python3

# Copyright (C) 2020-2024 The bip32kit developers
#
# This file is part of bip32kit. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip32kit including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Tests for the `bip32kit.bip32.key_origin` module."

import json

import pytest

from bip32kit.bip32.bip32 import derive_path
from bip32kit.bip32.der_path import parse_path
from bip32kit.bip32.key_origin import BIP32KeyOrigin, derive_with_origin
from bip32kit.bip32.xkey import fingerprint, neuter, public_key, root_from_seed
from bip32kit.exceptions import BIP32KitValueError, ParseError


def test_bip32_key_origin() -> None:

    with pytest.raises(BIP32KitValueError, match="invalid master fingerprint length: "):
        BIP32KeyOrigin("badbad", [0])

    with pytest.raises(BIP32KitValueError, match="depth greater than 255: "):
        BIP32KeyOrigin("deadbeef", [0] * 256)

    with pytest.raises(BIP32KitValueError, match="invalid index: "):
        BIP32KeyOrigin("deadbeef", [0xFFFFFFFF + 1])

    description = master_fingerprint = "deadbeef"
    key_origin = BIP32KeyOrigin.from_description(description)
    assert len(key_origin) == 0
    assert key_origin == BIP32KeyOrigin.from_description(description + "/")
    assert key_origin.description == description
    assert key_origin.master_fingerprint == bytes.fromhex(master_fingerprint)
    assert key_origin.der_path == ()
    assert BIP32KeyOrigin.parse(key_origin.serialize()) == key_origin
    assert BIP32KeyOrigin.from_dict(key_origin.to_dict()) == key_origin

    description = master_fingerprint + "/44h/0h/1h/0/10"
    key_origin = BIP32KeyOrigin.from_description(description)
    assert key_origin == BIP32KeyOrigin.from_description(" deadbeef/44h/0'/1H/0/10 ")
    assert key_origin == BIP32KeyOrigin(master_fingerprint, "m/44h/0h/1h/0/10")
    assert key_origin.description == description
    assert key_origin.der_path == (
        44 + 0x80000000,
        0 + 0x80000000,
        1 + 0x80000000,
        0,
        10,
    )
    assert key_origin.path == parse_path("m/44h/0h/1h/0/10")
    assert len(key_origin) == 5

    data = key_origin.serialize()
    assert data.hex() == (
        "deadbeef" "2c000080" "00000080" "01000080" "00000000" "0a000000"
    )
    assert BIP32KeyOrigin.parse(data) == key_origin
    assert BIP32KeyOrigin.parse(data.hex()) == key_origin

    # hashable value object
    assert len({key_origin, BIP32KeyOrigin.parse(data)}) == 1

    with pytest.raises(ParseError, match="empty path segment"):
        BIP32KeyOrigin.from_description("deadbeef//44h")
    with pytest.raises(BIP32KitValueError, match="not enough bytes for a key origin"):
        BIP32KeyOrigin.parse("deadbe")
    with pytest.raises(BIP32KitValueError, match="not a multiple of 4-bytes"):
        BIP32KeyOrigin.parse(data[:-1])


def test_dataclasses_json_dict_key_origin(tmp_path) -> None:

    key_origin = BIP32KeyOrigin.from_description("deadbeef/44h/0'/1H/0/10")

    key_origin_dict = key_origin.to_dict()
    assert key_origin_dict == {
        "master_fingerprint": "deadbeef",
        "path": "m/44h/0h/1h/0/10",
    }

    filename = tmp_path / "key_origin.json"
    with open(filename, "w", encoding="ascii") as file_:
        json.dump(key_origin_dict, file_, indent=4)
    with open(filename, "r", encoding="ascii") as file_:
        key_origin_dict2 = json.load(file_)
    assert key_origin_dict == key_origin_dict2

    assert BIP32KeyOrigin.from_dict(key_origin_dict2) == key_origin
    assert BIP32KeyOrigin.from_json(key_origin.to_json()) == key_origin


def test_from_root(seed: bytes) -> None:
    root = root_from_seed(seed)
    key_origin = BIP32KeyOrigin.from_root(root, "m/84h/0h/0h")
    assert key_origin.master_fingerprint == fingerprint(root)
    assert key_origin.description == "3442193e/84h/0h/0h"
    assert BIP32KeyOrigin.from_root(neuter(root), "m/0/1") == BIP32KeyOrigin(
        "3442193e", [0, 1]
    )

    with pytest.raises(BIP32KitValueError, match="not a root key"):
        BIP32KeyOrigin.from_root(derive_path(root, "m/84h"), "m/0h/0h")


def test_derive_with_origin(seed: bytes) -> None:
    root = root_from_seed(seed)
    pub_key, key_origin = derive_with_origin(root, "m/0h/1/2h")
    assert pub_key == public_key(derive_path(root, "m/0h/1/2h"))
    assert key_origin == BIP32KeyOrigin("3442193e", "m/0h/1/2h")
    assert not root.is_wiped

    pub_key, key_origin = derive_with_origin(neuter(root), [0, 1])
    assert pub_key == public_key(derive_path(root, "m/0/1"))
    assert len(key_origin) == 2
