"""Zcash transparent addresses: P2PKH and P2SH in Base58Check."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import IntEnum
from typing import Union

from Crypto.Hash import RIPEMD160

from chainkit import base58
from chainkit.zcash.params import Params

HASH_SIZE = 20
CHECKSUM_SIZE = 4
SHORT_ADDRESS_LENGTH = HASH_SIZE + 5
LONG_ADDRESS_LENGTH = HASH_SIZE + 6


class AddressType(IntEnum):
    """The kinds of transparent address this package handles."""

    P2PKH = 0
    P2SH = 1


def hash160(data: bytes) -> bytes:
    """Return RIPEMD-160 of SHA-256 of ``data``."""
    return RIPEMD160.new(hashlib.sha256(bytes(data)).digest()).digest()


def checksum(data: bytes) -> bytes:
    """Return the first four bytes of the double SHA-256 of ``data``."""
    return hashlib.sha256(hashlib.sha256(bytes(data)).digest()).digest()[:CHECKSUM_SIZE]


def _encode(hash_: bytes, prefix: bytes) -> str:
    body = bytes(prefix) + bytes(hash_)
    return base58.encode(body + checksum(body))


def _address_type(prefix: bytes, params: Params) -> AddressType:
    if prefix == params.p2pkh_prefix:
        return AddressType.P2PKH
    if prefix == params.p2sh_prefix:
        return AddressType.P2SH
    raise ValueError("parsing address type: unknown address type")


def _split(raw: bytes, params: Params) -> tuple[AddressType, bytes, bytes]:
    """Split raw address bytes into their type, prefix and 20-byte hash."""
    if len(raw) == SHORT_ADDRESS_LENGTH:
        prefix, hash_ = raw[:1], raw[1:21]
    elif len(raw) == LONG_ADDRESS_LENGTH:
        prefix, hash_ = raw[:2], raw[2:22]
    else:
        raise ValueError(
            f"validating address length: expected {SHORT_ADDRESS_LENGTH} "
            f"or {LONG_ADDRESS_LENGTH}, got {len(raw)}"
        )
    return _address_type(prefix, params), prefix, hash_


@dataclass(frozen=True)
class AddressEncodeDecoder:
    """Converts between raw Zcash address bytes and their string form."""

    params: Params

    def encode_address(self, raw_address: bytes) -> str:
        """Encode raw address bytes, recomputing the checksum."""
        raw_address = bytes(raw_address)
        _, prefix, hash_ = _split(raw_address, self.params)
        return _encode(hash_, prefix)

    def decode_address(self, address: str) -> bytes:
        """Decode an address string; raises ValueError if it is invalid."""
        try:
            decoded = base58.decode(str(address))
        except ValueError:
            decoded = b""
        _split(decoded, self.params)
        body, cksum = decoded[:-CHECKSUM_SIZE], decoded[-CHECKSUM_SIZE:]
        if checksum(body) != cksum:
            raise ValueError("validating checksum: checksum mismatch")
        return decoded


def _check_hash(hash_: bytes) -> bytes:
    hash_ = bytes(hash_)
    if len(hash_) != HASH_SIZE:
        raise ValueError(f"hash must be {HASH_SIZE} bytes, got {len(hash_)}")
    return hash_


@dataclass(frozen=True)
class AddressPubKeyHash:
    """A pay-to-public-key-hash address on a Zcash network."""

    hash: bytes
    params: Params

    def __post_init__(self) -> None:
        object.__setattr__(self, "hash", _check_hash(self.hash))

    def encode_address(self) -> str:
        """Return the Base58Check string of this address."""
        return _encode(self.hash, self.params.p2pkh_prefix)

    def script_address(self) -> bytes:
        """Return the bytes placed in an output script: the key hash."""
        return self.hash

    def __str__(self) -> str:
        return self.encode_address()


@dataclass(frozen=True)
class AddressScriptHash:
    """A pay-to-script-hash address on a Zcash network."""

    hash: bytes
    params: Params

    def __post_init__(self) -> None:
        object.__setattr__(self, "hash", _check_hash(self.hash))

    @classmethod
    def from_script(cls, script: bytes, params: Params) -> AddressScriptHash:
        """Build the address that pays to ``script``."""
        return cls(hash160(script), params)

    def encode_address(self) -> str:
        """Return the Base58Check string of this address."""
        return _encode(self.hash, self.params.p2sh_prefix)

    def script_address(self) -> bytes:
        """Return the bytes placed in an output script: the script hash."""
        return self.hash

    def __str__(self) -> str:
        return self.encode_address()


Address = Union[AddressPubKeyHash, AddressScriptHash]


def address_from_raw_bytes(addr_bytes: bytes, params: Params) -> Address:
    """Build the typed address held by raw, decoded address bytes."""
    addr_type, _, hash_ = _split(bytes(addr_bytes), params)
    if addr_type is AddressType.P2PKH:
        return AddressPubKeyHash(hash_, params)
    return AddressScriptHash(hash_, params)