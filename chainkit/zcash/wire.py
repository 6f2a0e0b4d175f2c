"""Bitcoin-style wire primitives used to build Zcash transparent transactions."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

MAX_TX_IN_SEQUENCE_NUM = 0xFFFFFFFF
MAX_SCRIPT_ELEMENT_SIZE = 520
MAX_SCRIPT_SIZE = 10000
HASH_SIZE = 32

# secp256k1 group order, used to keep signatures in low-S form.
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

OP_0 = 0x00
OP_PUSHDATA1 = 0x4C
OP_PUSHDATA2 = 0x4D
OP_PUSHDATA4 = 0x4E
OP_1NEGATE = 0x4F
OP_1 = 0x51
OP_DUP = 0x76
OP_EQUAL = 0x87
OP_EQUALVERIFY = 0x88
OP_HASH160 = 0xA9
OP_CHECKSIG = 0xAC


def write_var_int(value: int) -> bytes:
    """Encode ``value`` as a variable-length integer."""
    if value < 0 or value > 0xFFFFFFFFFFFFFFFF:
        raise ValueError(f"var int out of range: {value}")
    if value < 0xFD:
        return bytes([value])
    if value <= 0xFFFF:
        return b"\xfd" + struct.pack("<H", value)
    if value <= 0xFFFFFFFF:
        return b"\xfe" + struct.pack("<I", value)
    return b"\xff" + struct.pack("<Q", value)


def write_var_bytes(data: bytes) -> bytes:
    """Encode ``data`` prefixed by its length as a var int."""
    data = bytes(data)
    return write_var_int(len(data)) + data


@dataclass(frozen=True)
class OutPoint:
    """A reference to an output of an earlier transaction."""

    hash: bytes
    index: int

    def __post_init__(self) -> None:
        hash_ = bytes(self.hash)
        if len(hash_) != HASH_SIZE:
            raise ValueError(f"outpoint hash must be {HASH_SIZE} bytes, got {len(hash_)}")
        if not 0 <= self.index <= 0xFFFFFFFF:
            raise ValueError(f"outpoint index out of range: {self.index}")
        object.__setattr__(self, "hash", hash_)

    def serialize(self) -> bytes:
        """Return the hash followed by the little-endian index."""
        return self.hash + struct.pack("<I", self.index)


@dataclass
class TxIn:
    """A transaction input."""

    previous_out_point: OutPoint
    signature_script: bytes = b""
    sequence: int = MAX_TX_IN_SEQUENCE_NUM
    witness: list[bytes] = field(default_factory=list)

    def serialize(self) -> bytes:
        """Return the outpoint, signature script and sequence."""
        return (
            self.previous_out_point.serialize()
            + write_var_bytes(self.signature_script)
            + struct.pack("<I", self.sequence)
        )


@dataclass
class TxOut:
    """A transaction output: a value and the script that locks it."""

    value: int
    pk_script: bytes

    def serialize(self) -> bytes:
        """Return the 8-byte value followed by the length-prefixed script."""
        return struct.pack("<q", self.value) + write_var_bytes(self.pk_script)


@dataclass
class MsgTx:
    """An unsigned or signed transaction's inputs, outputs and lock time."""

    version: int
    tx_in: list[TxIn] = field(default_factory=list)
    tx_out: list[TxOut] = field(default_factory=list)
    lock_time: int = 0

    def add_tx_in(self, tx_in: TxIn) -> None:
        """Append an input."""
        self.tx_in.append(tx_in)

    def add_tx_out(self, tx_out: TxOut) -> None:
        """Append an output."""
        self.tx_out.append(tx_out)

    def has_witness(self) -> bool:
        """Return whether any input carries witness data."""
        return any(tx_in.witness for tx_in in self.tx_in)


class ScriptBuilder:
    """Builds a script out of canonical data pushes."""

    def __init__(self) -> None:
        self._script = bytearray()

    @staticmethod
    def _push(data: bytes) -> bytes:
        size = len(data)
        if size == 0 or (size == 1 and data[0] == 0):
            return bytes([OP_0])
        if size == 1 and 1 <= data[0] <= 16:
            return bytes([OP_1 - 1 + data[0]])
        if size == 1 and data[0] == 0x81:
            return bytes([OP_1NEGATE])
        if size < OP_PUSHDATA1:
            return bytes([size]) + data
        if size <= 0xFF:
            return bytes([OP_PUSHDATA1, size]) + data
        if size <= 0xFFFF:
            return bytes([OP_PUSHDATA2]) + struct.pack("<H", size) + data
        return bytes([OP_PUSHDATA4]) + struct.pack("<I", size) + data

    def add_data(self, data: bytes) -> ScriptBuilder:
        """Push ``data`` with the smallest canonical opcode; returns the builder."""
        data = bytes(data)
        if len(data) > MAX_SCRIPT_ELEMENT_SIZE:
            raise ValueError(
                f"adding a data element of {len(data)} bytes would exceed the "
                f"maximum allowed script element size of {MAX_SCRIPT_ELEMENT_SIZE}"
            )
        push = self._push(data)
        if len(self._script) + len(push) > MAX_SCRIPT_SIZE:
            raise ValueError(
                f"adding {len(push)} bytes of data would exceed the maximum "
                f"allowed canonical script length of {MAX_SCRIPT_SIZE}"
            )
        self._script.extend(push)
        return self

    def script(self) -> bytes:
        """Return the script built so far."""
        return bytes(self._script)


def _canonical_int(value: int) -> bytes:
    body = value.to_bytes((value.bit_length() + 7) // 8, "big")
    if not body or body[0] & 0x80:
        body = b"\x00" + body
    return body


def serialize_signature(r: int, s: int) -> bytes:
    """Return the DER encoding of an ECDSA signature, with S made low."""
    if r < 0 or s < 0:
        raise ValueError("signature components must not be negative")
    if s > SECP256K1_N // 2:
        s = SECP256K1_N - s
    r_bytes = _canonical_int(r)
    s_bytes = _canonical_int(s)
    body = (
        bytes([0x02, len(r_bytes)]) + r_bytes + bytes([0x02, len(s_bytes)]) + s_bytes
    )
    return bytes([0x30, len(body)]) + body


def _check_hash160(value: bytes) -> bytes:
    value = bytes(value)
    if len(value) != 20:
        raise ValueError(f"expected a 20-byte hash, got {len(value)} bytes")
    return value


def pay_to_pubkey_hash_script(pubkey_hash: bytes) -> bytes:
    """Return the P2PKH output script for a 20-byte public key hash."""
    pubkey_hash = _check_hash160(pubkey_hash)
    return (
        bytes([OP_DUP, OP_HASH160, len(pubkey_hash)])
        + pubkey_hash
        + bytes([OP_EQUALVERIFY, OP_CHECKSIG])
    )


def pay_to_script_hash_script(script_hash: bytes) -> bytes:
    """Return the P2SH output script for a 20-byte script hash."""
    script_hash = _check_hash160(script_hash)
    return bytes([OP_HASH160, len(script_hash)]) + script_hash + bytes([OP_EQUAL])