#!/usr/bin/env python3

# Copyright (C) 2020-2024 The bip32kit developers
#
# This file is part of bip32kit. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip32kit including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""BIP32 extended keys.

An extended key is a key plus the metadata needed
for deterministic child derivation:

- network (mainnet or testnet) and version hint
- depth in the derivation tree (0 for the root)
- parent fingerprint (4 bytes, zero for the root)
- child number (index and hardened flag, zero for the root)
- chain code (32 bytes)

XKey is the closed union of the two variants:
XPrv holds a private scalar, XPub a compressed public point.
A key never holds both forms.

Extended keys are immutable: derivation always returns a new key.
The XPrv scalar lives in a private bytearray
that is overwritten with zeros by wipe(),
when leaving a `with` block, and when the object is garbage collected;
copies returned by private_key_bytes() are the caller's responsibility.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from bip32kit.alias import Octets
from bip32kit.bip32.der_path import ChildNumber
from bip32kit.ecc import DEFAULT_BACKEND, CurveBackend
from bip32kit.ecc.backend import POINT_SIZE, SCALAR_SIZE
from bip32kit.exceptions import (
    BIP32KitRuntimeError,
    BIP32KitTypeError,
    BIP32KitValueError,
    CurveError,
    DerivationFailure,
)
from bip32kit.hashes import hash160, hmac_sha512
from bip32kit.network import Hint, NetworkTag
from bip32kit.utils import bytes_from_octets, wipe

_ZERO_FINGERPRINT = b"\x00" * 4


@dataclass(frozen=True)
class XKeyInfo:
    "Metadata shared by private and public extended keys."

    network: NetworkTag
    hint: Hint
    depth: int
    parent_fingerprint: bytes
    child_number: ChildNumber
    chain_code: bytes = field(repr=False)

    @property
    def is_root(self) -> bool:
        return (
            self.depth == 0
            and self.child_number.wire_value == 0
            and self.parent_fingerprint == _ZERO_FINGERPRINT
        )

    @property
    def is_hardened(self) -> bool:
        return self.child_number.hardened

    def _init_info(
        self,
        network: NetworkTag,
        hint: Hint,
        depth: int,
        parent_fingerprint: Octets,
        child_number: Union[ChildNumber, int],
        chain_code: Octets,
    ) -> None:

        if not isinstance(child_number, ChildNumber):
            child_number = ChildNumber.from_wire(child_number)

        object.__setattr__(self, "network", NetworkTag(network))
        object.__setattr__(self, "hint", Hint(hint))
        object.__setattr__(self, "depth", depth)
        object.__setattr__(
            self, "parent_fingerprint", bytes_from_octets(parent_fingerprint)
        )
        object.__setattr__(self, "child_number", child_number)
        object.__setattr__(self, "chain_code", bytes_from_octets(chain_code))

    def _assert_valid_info(self) -> None:

        if not isinstance(self.depth, int) or not 0 <= self.depth <= 255:
            raise BIP32KitValueError(f"invalid depth: {self.depth}")

        if len(self.parent_fingerprint) != 4:
            err_msg = "invalid parent_fingerprint length: "
            err_msg += f"{len(self.parent_fingerprint)} bytes instead of 4"
            raise BIP32KitValueError(err_msg)

        if len(self.chain_code) != 32:
            err_msg = "invalid chain_code length: "
            err_msg += f"{len(self.chain_code)} bytes instead of 32"
            raise BIP32KitValueError(err_msg)

        if self.depth == 0:
            if self.parent_fingerprint != _ZERO_FINGERPRINT:
                err_msg = "zero depth with non-zero parent fingerprint: "
                err_msg += f"0x{self.parent_fingerprint.hex()}"
                raise BIP32KitValueError(err_msg)
            if self.child_number.wire_value != 0:
                err_msg = f"zero depth with non-zero index: {self.child_number.wire_value}"
                raise BIP32KitValueError(err_msg)


@dataclass(frozen=True)
class XPub(XKeyInfo):
    "Public extended key: the compressed point plus metadata."

    key: bytes
    backend: CurveBackend = field(repr=False, compare=False)

    def __init__(
        self,
        network: NetworkTag,
        hint: Hint,
        depth: int,
        parent_fingerprint: Octets,
        child_number: Union[ChildNumber, int],
        chain_code: Octets,
        key: Octets,
        backend: Optional[CurveBackend] = None,
    ) -> None:

        self._init_info(
            network, hint, depth, parent_fingerprint, child_number, chain_code
        )
        backend = DEFAULT_BACKEND if backend is None else backend
        object.__setattr__(self, "backend", backend)

        self._assert_valid_info()
        key = bytes_from_octets(key)
        if len(key) != POINT_SIZE:
            err_msg = f"invalid key length: {len(key)} bytes instead of {POINT_SIZE}"
            raise BIP32KitValueError(err_msg)
        object.__setattr__(self, "key", backend.validate_point(key))

    @property
    def is_private(self) -> bool:
        return False


@dataclass(frozen=True)
class XPrv(XKeyInfo):
    """Private extended key: the secret scalar plus metadata.

    The scalar is never shown by repr, never part of error messages,
    and it is wiped when the key goes out of scope.
    Usable as a context manager:

        with root_from_seed(seed) as root:
            xpub = derive_path(root, "m/84h/0h/0h").neuter()
    """

    _secret: bytearray = field(repr=False)
    backend: CurveBackend = field(repr=False, compare=False)

    # the secret backing buffer is mutable
    __hash__ = None  # type: ignore

    def __init__(
        self,
        network: NetworkTag,
        hint: Hint,
        depth: int,
        parent_fingerprint: Octets,
        child_number: Union[ChildNumber, int],
        chain_code: Octets,
        secret: Union[bytes, bytearray],
        backend: Optional[CurveBackend] = None,
    ) -> None:

        self._init_info(
            network, hint, depth, parent_fingerprint, child_number, chain_code
        )
        backend = DEFAULT_BACKEND if backend is None else backend
        object.__setattr__(self, "backend", backend)
        # owned copy, so that wiping it never affects the caller's buffer
        object.__setattr__(self, "_secret", bytearray(secret))

        try:
            self._assert_valid_info()
            if len(self._secret) != SCALAR_SIZE:
                err_msg = f"invalid private key length: {len(self._secret)} bytes"
                err_msg += f" instead of {SCALAR_SIZE}"
                raise BIP32KitValueError(err_msg)
            if not backend.is_valid_scalar(bytes(self._secret)):
                raise CurveError("invalid private key not in 1..n-1")
        except BIP32KitValueError:
            self.wipe()
            raise

    @property
    def is_private(self) -> bool:
        return True

    @property
    def is_wiped(self) -> bool:
        return not any(self._secret)

    def private_key_bytes(self) -> bytes:
        "Return a copy of the 32 bytes private key."
        return bytes(self._checked_secret())

    def _checked_secret(self) -> bytearray:
        if self.is_wiped:
            raise BIP32KitRuntimeError("private key material has been wiped")
        return self._secret

    def public_key(self) -> bytes:
        "Return the compressed public key."
        return self.backend.point_from_scalar(bytes(self._checked_secret()))

    def neuter(self) -> XPub:
        return neuter(self)

    def wipe(self) -> None:
        "Overwrite the private key material; the key is unusable afterwards."
        wipe(self._secret)

    def __enter__(self) -> "XPrv":
        return self

    def __exit__(self, *args: Any) -> None:
        self.wipe()

    def __del__(self) -> None:
        # _secret might be missing if __init__ failed early
        secret = self.__dict__.get("_secret")
        if secret is not None:
            wipe(secret)

    def __copy__(self) -> "XPrv":
        raise BIP32KitRuntimeError("private extended keys cannot be copied")

    def __deepcopy__(self, memo: Any) -> "XPrv":
        raise BIP32KitRuntimeError("private extended keys cannot be copied")

    def __reduce__(self) -> Any:
        raise BIP32KitRuntimeError("private extended keys cannot be pickled")


XKey = Union[XPrv, XPub]


def neuter(xprv: XPrv) -> XPub:
    """Neutered Derivation (ND).

    Derivation of the extended public key corresponding to an extended
    private key ("neutered" as it removes the ability to sign transactions).
    """

    if not isinstance(xprv, XPrv):
        raise BIP32KitTypeError(f"not a private key: {type(xprv)}")

    return XPub(
        network=xprv.network,
        hint=xprv.hint,
        depth=xprv.depth,
        parent_fingerprint=xprv.parent_fingerprint,
        child_number=xprv.child_number,
        chain_code=xprv.chain_code,
        key=xprv.public_key(),
        backend=xprv.backend,
    )


def public_key(xkey: XKey) -> bytes:
    "Return the compressed public key of a private or public extended key."
    if isinstance(xkey, XPrv):
        return xkey.public_key()
    return xkey.key


def fingerprint(xkey: XKey) -> bytes:
    """Return the 4 bytes fingerprint of an extended key.

    It is the first 4 bytes of HASH160 of the compressed public key:
    a private key and its neutered form share the same fingerprint.
    """
    return hash160(public_key(xkey))[:4]


def with_hint(xkey: XKey, hint: Hint) -> XKey:
    """Return the same key tagged with a different version hint.

    The hint only selects the version bytes used for serialization
    (e.g. xpub, ypub, zpub); key material and metadata are unchanged.
    """

    hint = Hint(hint)
    if isinstance(xkey, XPrv):
        return XPrv(
            xkey.network,
            hint,
            xkey.depth,
            xkey.parent_fingerprint,
            xkey.child_number,
            xkey.chain_code,
            xkey._checked_secret(),
            xkey.backend,
        )
    return XPub(
        xkey.network,
        hint,
        xkey.depth,
        xkey.parent_fingerprint,
        xkey.child_number,
        xkey.chain_code,
        xkey.key,
        xkey.backend,
    )


def root_from_seed(
    seed: Octets,
    network: NetworkTag = NetworkTag.MAIN,
    hint: Hint = Hint.LEGACY,
    backend: Optional[CurveBackend] = None,
) -> XPrv:
    """Return the BIP32 root (master) extended private key from seed.

    The seed must be 128 to 512 bits long.
    If the resulting private key is invalid, i.e. zero or not less
    than the curve order, DerivationFailure is raised:
    the caller must then use another seed.
    """

    backend = DEFAULT_BACKEND if backend is None else backend
    seed = bytes_from_octets(seed)
    bit_length = len(seed) * 8
    if bit_length < 128:
        raise BIP32KitValueError(f"too few bits for seed: {bit_length}")
    if bit_length > 512:
        raise BIP32KitValueError(f"too many bits for seed: {bit_length}")

    hmac_ = bytearray(hmac_sha512(b"Bitcoin seed", seed))
    try:
        secret = hmac_[:32]
        if not backend.is_valid_scalar(bytes(secret)):
            raise DerivationFailure("invalid master key: the seed must be changed")
        return XPrv(
            network=network,
            hint=hint,
            depth=0,
            parent_fingerprint=_ZERO_FINGERPRINT,
            child_number=0,
            chain_code=bytes(hmac_[32:]),
            secret=secret,
            backend=backend,
        )
    finally:
        wipe(hmac_)
        wipe(secret)
