#!/usr/bin/env python3

# Copyright (C) 2020-2024 The bip32kit developers
#
# This file is part of bip32kit. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip32kit including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Fingerprints and parent/child lineage checks.

The fingerprint of an extended key is the first 4 bytes
of HASH160 of its compressed public key;
the child of a key records it as parent fingerprint.
As 4 bytes can collide, a matching fingerprint is not a proof of lineage:
validate_lineage also recomputes the child from the parent.
"""

from loguru import logger

from bip32kit.bip32.bip32 import derive_child
from bip32kit.bip32.xkey import XKey, XPrv, fingerprint, public_key
from bip32kit.exceptions import DerivationFailure, LineageMismatch

__all__ = ["fingerprint", "validate_lineage"]


def _mismatch(err_msg: str) -> LineageMismatch:
    logger.debug(err_msg)
    return LineageMismatch(err_msg)


def validate_lineage(parent: XKey, child: XKey) -> None:
    """Raise LineageMismatch if child is not the direct child of parent.

    Depth, network, parent fingerprint, chain code,
    and key material are all checked.
    A private child requires a private parent;
    a hardened child of a public parent cannot be verified
    and raises DerivationFailure.
    """

    if child.depth != parent.depth + 1:
        err_msg = "not a parent's child: wrong depths, "
        err_msg += f"{child.depth} instead of {parent.depth + 1}"
        raise _mismatch(err_msg)

    if child.network != parent.network:
        err_msg = "not a parent's child: wrong network, "
        err_msg += f"{child.network.value} instead of {parent.network.value}"
        raise _mismatch(err_msg)

    parent_fingerprint = fingerprint(parent)
    if child.parent_fingerprint != parent_fingerprint:
        err_msg = "not a parent's child: wrong parent fingerprint, "
        err_msg += f"0x{child.parent_fingerprint.hex()}"
        err_msg += f" instead of 0x{parent_fingerprint.hex()}"
        raise _mismatch(err_msg)

    if isinstance(child, XPrv) and not isinstance(parent, XPrv):
        raise _mismatch("not a parent's child: private child of a public parent")

    # DerivationFailure for a hardened child of a public parent propagates
    try:
        expected = derive_child(parent, child.child_number)
    except DerivationFailure as e:
        if child.child_number.hardened and not isinstance(parent, XPrv):
            raise
        raise _mismatch(f"not a parent's child: {e}") from e

    try:
        if expected.chain_code != child.chain_code:
            raise _mismatch("not a parent's child: wrong chain code")
        if public_key(expected) != public_key(child):
            raise _mismatch("not a parent's child: wrong key")
    finally:
        if isinstance(expected, XPrv):
            expected.wipe()
