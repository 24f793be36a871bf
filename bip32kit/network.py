#!/usr/bin/env python3

# Copyright (C) 2020-2024 The bip32kit developers
#
# This file is part of bip32kit. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip32kit including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Network constants and associated functions.

The BIP32 version bytes of each network are loaded once,
at import time, from the json files in the _data folder.
Both NETWORKS and the reverse VERSIONS table are read-only mappings,
safe for concurrent access.

A version encodes:

- the network (mainnet or testnet)
- the hint, i.e. the script type the key is meant for
  (BIP32 legacy xprv/xpub, BIP49 yprv/ypub, BIP84 zprv/zpub)
- whether the key is private or public
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from os import path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

from dataclasses_json import DataClassJsonMixin, config

from bip32kit.exceptions import BIP32KitValueError, UnknownVersion


class NetworkTag(Enum):
    MAIN = "mainnet"
    TEST = "testnet"


class Hint(Enum):
    # "m / 44h / 0h" p2pkh or p2sh
    LEGACY = "legacy"
    # "m / 49h / 0h" p2wpkh-p2sh (p2sh-wrapped legacy-segwit p2wpkh)
    COMPATIBILITY = "compatibility"
    # "m / 84h / 0h" p2wpkh (native-segwit p2wpkh)
    SEGWIT = "segwit"


# Hint -> (private version field, public version field)
_HINT_FIELDS: Dict[Hint, Tuple[str, str]] = {
    Hint.LEGACY: ("bip32_prv", "bip32_pub"),
    Hint.COMPATIBILITY: ("slip132_p2wpkh_p2sh_prv", "slip132_p2wpkh_p2sh_pub"),
    Hint.SEGWIT: ("slip132_p2wpkh_prv", "slip132_p2wpkh_pub"),
}


def _hex_field() -> Any:
    return field(metadata=config(encoder=lambda v: v.hex(), decoder=bytes.fromhex))


@dataclass(frozen=True)
class Network(DataClassJsonMixin):
    name: str

    # xprv / tprv, xpub / tpub
    bip32_prv: bytes = _hex_field()
    bip32_pub: bytes = _hex_field()

    # yprv / uprv, ypub / upub
    slip132_p2wpkh_p2sh_prv: bytes = _hex_field()
    slip132_p2wpkh_p2sh_pub: bytes = _hex_field()

    # zprv / vprv, zpub / vpub
    slip132_p2wpkh_prv: bytes = _hex_field()
    slip132_p2wpkh_pub: bytes = _hex_field()

    def __post_init__(self) -> None:
        self.assert_valid()

    @property
    def tag(self) -> NetworkTag:
        return NetworkTag(self.name)

    def assert_valid(self) -> None:

        if self.name not in [tag.value for tag in NetworkTag]:
            raise BIP32KitValueError(f"unknown network: {self.name}")

        for prv_field, pub_field in _HINT_FIELDS.values():
            for key in (prv_field, pub_field):
                value = getattr(self, key)
                if not isinstance(value, bytes):
                    raise BIP32KitValueError(f"invalid {key} type: {type(value)}")
                if len(value) != 4:
                    err_msg = f"invalid {key} length: "
                    err_msg += f"{len(value)} bytes instead of 4"
                    raise BIP32KitValueError(err_msg)

        versions = self.versions()
        if len(set(versions)) != len(versions):
            raise BIP32KitValueError(f"duplicated versions in network: {self.name}")

    def version(self, hint: Hint, is_private: bool) -> bytes:
        prv_field, pub_field = _HINT_FIELDS[hint]
        return getattr(self, prv_field if is_private else pub_field)

    def versions(self) -> List[bytes]:
        return [
            self.version(hint, is_private)
            for hint in Hint
            for is_private in (True, False)
        ]


@dataclass(frozen=True)
class XKeyVersion:
    network: NetworkTag
    hint: Hint
    is_private: bool


def _load_networks() -> Mapping[NetworkTag, Network]:
    datadir = path.join(path.dirname(__file__), "_data")
    networks: Dict[NetworkTag, Network] = {}
    for tag in NetworkTag:
        filename = path.join(datadir, tag.value + ".json")
        with open(filename, "r", encoding="ascii") as file_:
            networks[tag] = Network.from_dict(json.load(file_))
    return MappingProxyType(networks)


def _build_versions(networks: Mapping[NetworkTag, Network]) -> Mapping[bytes, XKeyVersion]:
    versions: Dict[bytes, XKeyVersion] = {}
    for tag, net in networks.items():
        for hint in Hint:
            for is_private in (True, False):
                version = net.version(hint, is_private)
                if version in versions:
                    err_msg = f"version shared by different networks: 0x{version.hex()}"
                    raise BIP32KitValueError(err_msg)
                versions[version] = XKeyVersion(tag, hint, is_private)
    return MappingProxyType(versions)


NETWORKS = _load_networks()
VERSIONS = _build_versions(NETWORKS)


def version_bytes(network: NetworkTag, hint: Hint, is_private: bool) -> bytes:
    "Return the 4 bytes version for the given network, hint, and key type."
    return NETWORKS[network].version(hint, is_private)


def xkey_version(version: bytes) -> XKeyVersion:
    """Return network, hint, and key type encoded in the version bytes.

    The raw version bytes are available as the `version` attribute
    of the raised UnknownVersion.
    """
    try:
        return VERSIONS[bytes(version)]
    except KeyError:
        err_msg = f"unknown extended key version: 0x{bytes(version).hex()}"
        raise UnknownVersion(err_msg, bytes(version)) from None
