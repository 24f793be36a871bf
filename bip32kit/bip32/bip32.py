#!/usr/bin/env python3

# Copyright (C) 2020-2024 The bip32kit developers
#
# This file is part of bip32kit. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip32kit including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""BIP32 Hierarchical Deterministic Wallet functions.

A deterministic wallet is a hash-chain of private/public key pairs
that derives from a single root, which is the only element
requiring backup. Moreover, there are schemes where public keys
can be calculated without accessing private keys.

A hierarchical deterministic wallet is a tree of multiple hash-chains,
derived from a single root, allowing for selective sharing
of keypair chains.

Here, the HD wallet is implemented according to BIP32 bitcoin standard
https://github.com/bitcoin/bips/blob/master/bip-0032.mediawiki.

Child key derivation (CKD) never retries:
when the derived key would be invalid (an occurrence with probability
lower than 1 in 2^127) DerivationFailure is raised
and it is up to the caller to move on to the next index.
"""

from typing import Optional, Union

from loguru import logger

from bip32kit.bip32 import codec
from bip32kit.bip32.der_path import (
    HARDENED,
    BIP32DerPath,
    ChildNumber,
    der_path_from_bip32_path,
)
from bip32kit.bip32.xkey import XKey, XPrv, XPub, fingerprint, neuter, with_hint
from bip32kit.exceptions import (
    BIP32KitTypeError,
    BIP32KitValueError,
    CurveError,
    DerivationFailure,
)
from bip32kit.hashes import hmac_sha512
from bip32kit.network import Hint
from bip32kit.utils import wipe

BIP32Key = Union[XKey, str]


def _child_number(child_number: Union[ChildNumber, int]) -> ChildNumber:
    if isinstance(child_number, ChildNumber):
        return child_number
    return ChildNumber.from_wire(child_number)


def _ckd_prv(parent: XPrv, child_number: ChildNumber) -> XPrv:

    backend = parent.backend
    secret = parent.private_key_bytes()
    parent_pub_key = backend.point_from_scalar(secret)
    if child_number.hardened:
        data = bytearray(b"\x00" + secret)
    else:
        data = bytearray(parent_pub_key)
    data += child_number.to_bytes()

    hmac_ = bytearray(hmac_sha512(parent.chain_code, bytes(data)))
    wipe(data)
    try:
        offset = bytes(hmac_[:32])
        if int.from_bytes(offset, byteorder="big", signed=False) >= backend.order:
            raise DerivationFailure("invalid offset not less than n", child_number)
        try:
            child_secret = backend.scalar_add(secret, offset)
        except CurveError as e:
            raise DerivationFailure("zero private key", child_number) from e
        return XPrv(
            network=parent.network,
            hint=parent.hint,
            depth=parent.depth + 1,
            parent_fingerprint=fingerprint(parent),
            child_number=child_number,
            chain_code=bytes(hmac_[32:]),
            secret=child_secret,
            backend=backend,
        )
    finally:
        wipe(hmac_)


def _ckd_pub(parent: XPub, child_number: ChildNumber) -> XPub:

    if child_number.hardened:
        err_msg = "invalid hardened derivation from public key: "
        err_msg += f"{child_number}"
        raise DerivationFailure(err_msg, child_number)

    backend = parent.backend
    hmac_ = hmac_sha512(parent.chain_code, parent.key + child_number.to_bytes())
    offset = hmac_[:32]
    if int.from_bytes(offset, byteorder="big", signed=False) >= backend.order:
        raise DerivationFailure("invalid offset not less than n", child_number)
    try:
        key = backend.point_add_scalar(parent.key, offset)
    except CurveError as e:
        raise DerivationFailure("point at infinity", child_number) from e
    return XPub(
        network=parent.network,
        hint=parent.hint,
        depth=parent.depth + 1,
        parent_fingerprint=fingerprint(parent),
        child_number=child_number,
        chain_code=hmac_[32:],
        key=key,
        backend=backend,
    )


def derive_child(parent: XKey, child_number: Union[ChildNumber, int]) -> XKey:
    """Child Key Derivation (CKD).

    Private parents derive private children,
    public parents derive public children;
    hardened derivation requires a private parent.

    Integer child numbers are wire values,
    i.e. hardened ones have the 0x80000000 bit set.
    """

    if not isinstance(parent, (XPrv, XPub)):
        raise BIP32KitTypeError(f"not an extended key: {type(parent)}")

    child_number = _child_number(child_number)
    if parent.depth == 255:
        raise DerivationFailure("depth greater than 255", child_number)

    if isinstance(parent, XPrv):
        return _ckd_prv(parent, child_number)
    return _ckd_pub(parent, child_number)


def derive_path(root: XKey, der_path: BIP32DerPath) -> XKey:
    """Derive a BIP32 key across a path spanning multiple depth levels.

    Valid BIP32DerPath examples:

    - string like "m/44h/0'/1H/0/10"
    - iterable integer indexes
    - one single integer index
    - bytes in multiples of the 4-bytes index

    The first failing step stops the derivation:
    the raised DerivationFailure carries its zero-based position
    in the path and its child number.
    Intermediate private keys are wiped.
    """

    path = der_path_from_bip32_path(der_path)

    xkey = root
    for position, child_number in enumerate(path):
        try:
            child = derive_child(xkey, child_number)
        except DerivationFailure as e:
            hardened = "hardened" if child_number.hardened else "normal"
            err_msg = f"derivation failure at position {position}, "
            err_msg += f"{hardened} index {child_number.index}: {e}"
            logger.debug(err_msg)
            raise DerivationFailure(err_msg, child_number, position) from e
        finally:
            if xkey is not root and isinstance(xkey, XPrv):
                xkey.wipe()
        xkey = child

    return xkey


def _xkey_from_bip32key(xkey: BIP32Key) -> XKey:
    if isinstance(xkey, (XPrv, XPub)):
        return xkey
    return codec.b58decode(xkey)


def derive(
    xkey: BIP32Key, der_path: BIP32DerPath, hint: Optional[Hint] = None
) -> str:
    """Derive a BIP32 key across a path, returning its Base58Check encoding.

    The key can be an extended key or its Base58Check encoding;
    if hint is given, the derived key is re-tagged with it.
    """

    root = _xkey_from_bip32key(xkey)
    derived = derive_path(root, der_path)
    if hint is not None:
        derived = with_hint(derived, hint)
    return codec.b58encode(derived)


def xpub_from_xprv(xprv: BIP32Key) -> str:
    """Neutered Derivation (ND).

    Return the Base58Check encoding of the extended public key
    corresponding to an extended private key.
    """

    xkey = _xkey_from_bip32key(xprv)
    if not isinstance(xkey, XPrv):
        raise BIP32KitValueError("extended key is not a private one")
    return codec.b58encode(neuter(xkey))


def _derive_from_account(
    mxkey: BIP32Key,
    branch: int,
    address_index: int,
    branches_0_1_only: bool = True,
    max_index: int = 0xFFFF,
) -> XKey:

    mxkey = _xkey_from_bip32key(mxkey)

    if not mxkey.is_hardened:
        raise BIP32KitValueError("unhardened account/master key")

    if branch >= HARDENED:
        raise BIP32KitValueError("invalid private derivation at branch level")
    if branch > max_index:
        raise BIP32KitValueError(f"too high branch: {branch}")
    if branches_0_1_only and branch not in (0, 1):
        raise BIP32KitValueError(f"invalid branch: {branch} not in (0, 1)")

    if address_index >= HARDENED:
        raise BIP32KitValueError("invalid private derivation at address index level")
    if address_index > max_index:
        raise BIP32KitValueError(f"too high address index: {address_index}")

    return derive_path(mxkey, [branch, address_index])


def derive_from_account(
    mxkey: BIP32Key,
    branch: int,
    address_index: int,
    branches_0_1_only: bool = True,
    max_index: int = 0xFFFF,
) -> str:
    """Derive a key with public derivation at the given branch and index.

    It also ensures that the account key is hardened,
    that the branch is a standard receive or change,
    and that the index is not arbitrarily high.
    """

    xkey = _derive_from_account(
        mxkey, branch, address_index, branches_0_1_only, max_index
    )
    return codec.b58encode(xkey)
