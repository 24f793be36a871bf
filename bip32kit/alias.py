#!/usr/bin/env python3

# Copyright (C) 2020-2024 The bip32kit developers
#
# This file is part of bip32kit. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip32kit including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Aliases

mypy aliases, documenting also coding input conventions.
"""

from typing import Union

# Octets are a sequence of eight-bit bytes or a hex-string (not text string)
#
# hex-strings are strings that can be converted to bytes using bytes.fromhex,
# e.g.:
# "3442193e"
# "0339a36013301597daef41fbe593a02cc513d0b55527ec2df1050e2e8ff49c85c2"
# "03 39a36013301597daef41fbe593a02cc513d0b55527ec2df1050e2e8ff49c85c2"
#
# use bip32kit.utils.bytes_from_octets to convert Octets to bytes
#
# Octets are used for seeds, chain codes (32 bytes), fingerprints (4 bytes),
# BIP32 versions (4 bytes), compressed public keys (33 bytes), etc.
Octets = Union[bytes, str]

# bytes or 'ascii' text string (not hex-string),
# e.g. base58 encoded BIP32 keys:
# "xprv9s21ZrQH143K3QTDL4LXw2F7HEK3wJUD2nW2nRk4stbPy6cq3jPPqjiChkVvvNKmPGJxWUtg6LnF5kejMRNNU3TGtRBeJgk33yuGBxrMPHi"
#
# leading/trailing blanks should always be stripped
#     if isinstance(xkey, str):
#         xkey = xkey.strip()
String = Union[bytes, str]
