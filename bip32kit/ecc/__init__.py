#!/usr/bin/env python3

# Copyright (C) 2020-2024 The bip32kit developers
#
# This file is part of bip32kit. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip32kit including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Module bip32kit.ecc.

Curve backends are injected: keys carry the backend they were built with
and every derivation or decoding entry point accepts a backend argument.
"""

from typing import Callable, Dict

from loguru import logger

from bip32kit.ecc.backend import SECP256K1_N, CurveBackend
from bip32kit.ecc.coincurve_backend import CoincurveBackend
from bip32kit.ecc.libsecp256k1 import LibSecp256k1Backend, is_available
from bip32kit.exceptions import BIP32KitValueError

_BACKENDS: Dict[str, Callable[[], CurveBackend]] = {
    CoincurveBackend.name: CoincurveBackend,
    LibSecp256k1Backend.name: LibSecp256k1Backend,
}


def get_backend(name: str) -> CurveBackend:
    "Return a new instance of the named curve backend."

    name = name.strip().lower()
    if name not in _BACKENDS:
        err_msg = f"unknown curve backend: {name}, "
        err_msg += f"available ones are: {', '.join(sorted(_BACKENDS))}"
        raise BIP32KitValueError(err_msg)
    logger.debug(f"using {name} curve backend")
    return _BACKENDS[name]()


DEFAULT_BACKEND: CurveBackend = CoincurveBackend()

__all__ = [
    "SECP256K1_N",
    "CurveBackend",
    "CoincurveBackend",
    "LibSecp256k1Backend",
    "DEFAULT_BACKEND",
    "get_backend",
    "is_available",
]
