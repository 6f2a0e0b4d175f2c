"""Building, signing and serialising Zcash transparent transactions."""

from __future__ import annotations

import hashlib
import struct
from dataclasses import dataclass, field
from typing import Iterable

from chainkit.zcash.address import (
    AddressPubKeyHash,
    AddressEncodeDecoder,
    address_from_raw_bytes,
)
from chainkit.zcash.params import (
    OUTPUTS_HASH_PERSONALIZATION,
    PREVOUTS_HASH_PERSONALIZATION,
    SEQUENCE_HASH_PERSONALIZATION,
    SIGHASH_MASK,
    VERSION_OVERWINTER_GROUP_ID,
    VERSION_SAPLING,
    VERSION_SAPLING_GROUP_ID,
    Params,
)
from chainkit.zcash.wire import (
    MsgTx,
    OutPoint,
    ScriptBuilder,
    TxIn,
    TxOut,
    pay_to_pubkey_hash_script,
    pay_to_script_hash_script,
    serialize_signature,
    write_var_bytes,
    write_var_int,
)

VERSION = 4

SIGHASH_ALL = 0x01
SIGHASH_NONE = 0x02
SIGHASH_SINGLE = 0x03
SIGHASH_ANYONE_CAN_PAY = 0x80

_ZERO_HASH = bytes(32)
_MAX_UINT32 = 0xFFFFFFFF
_MAX_INT64 = 2**63 - 1


@dataclass(frozen=True)
class Outpoint:
    """Identifies an output by its transaction hash and index."""

    hash: bytes
    index: int


@dataclass(frozen=True)
class Output:
    """An unspent transaction output."""

    outpoint: Outpoint
    value: int
    pub_key_script: bytes = b""


@dataclass(frozen=True)
class Input:
    """An output being spent, with an optional redeem script."""

    output: Output
    sig_script: bytes | None = None


@dataclass(frozen=True)
class Recipient:
    """An address and the value sent to it."""

    to: str
    value: int


def _blake2b(data: bytes, person: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32, person=person).digest()


def _version_group_id(version: int) -> int:
    return VERSION_SAPLING_GROUP_ID if version == VERSION_SAPLING else VERSION_OVERWINTER_GROUP_ID


def _check_value(value: int) -> int:
    if value < 0:
        raise ValueError(f"expected value >= 0, got value = {value}")
    if value > _MAX_INT64:
        raise ValueError(f"value out of range: {value}")
    return value


def _hash_prev_outs(tx: MsgTx) -> bytes:
    data = b"".join(tx_in.previous_out_point.serialize() for tx_in in tx.tx_in)
    return _blake2b(data, PREVOUTS_HASH_PERSONALIZATION)


def _hash_sequence(tx: MsgTx) -> bytes:
    data = b"".join(struct.pack("<I", tx_in.sequence) for tx_in in tx.tx_in)
    return _blake2b(data, SEQUENCE_HASH_PERSONALIZATION)


def _hash_outputs(tx: MsgTx) -> bytes:
    data = b"".join(tx_out.serialize() for tx_out in tx.tx_out)
    return _blake2b(data, OUTPUTS_HASH_PERSONALIZATION)


def calculate_sighash(
    params: Params,
    sub_script: bytes,
    hash_type: int,
    tx: MsgTx,
    idx: int,
    amount: int,
    expiry_height: int,
) -> bytes:
    """Return the 32-byte signature hash of input ``idx`` of ``tx``."""
    if idx > len(tx.tx_in) - 1:
        raise IndexError(
            f"blake2bSignatureHash error: idx {idx} but {len(tx.tx_in)} txins"
        )
    base_type = hash_type & SIGHASH_MASK
    anyone_can_pay = bool(hash_type & SIGHASH_ANYONE_CAN_PAY)
    sapling = tx.version == VERSION_SAPLING

    parts = [
        struct.pack("<I", (tx.version & _MAX_UINT32) | (1 << 31)),
        struct.pack("<I", _version_group_id(tx.version)),
        _ZERO_HASH if anyone_can_pay else _hash_prev_outs(tx),
    ]

    if not anyone_can_pay and base_type not in (SIGHASH_SINGLE, SIGHASH_NONE):
        parts.append(_hash_sequence(tx))
    else:
        parts.append(_ZERO_HASH)

    if base_type not in (SIGHASH_SINGLE, SIGHASH_NONE):
        parts.append(_hash_outputs(tx))
    elif base_type == SIGHASH_SINGLE and idx < len(tx.tx_out):
        parts.append(_blake2b(tx.tx_out[idx].serialize(), OUTPUTS_HASH_PERSONALIZATION))
    else:
        parts.append(_ZERO_HASH)

    # hashJoinSplits, then hashShieldedSpends and hashShieldedOutputs on Sapling.
    parts.append(_ZERO_HASH)
    if sapling:
        parts.extend([_ZERO_HASH, _ZERO_HASH])

    parts.append(struct.pack("<I", tx.lock_time))
    parts.append(struct.pack("<I", expiry_height))
    if sapling:
        parts.append(struct.pack("<Q", 0))
    parts.append(struct.pack("<I", hash_type & _MAX_UINT32))

    if idx != _MAX_UINT32:
        tx_in = tx.tx_in[idx]
        parts.append(tx_in.previous_out_point.serialize())
        parts.append(write_var_bytes(sub_script))
        parts.append(struct.pack("<q", amount))
        parts.append(struct.pack("<I", tx_in.sequence))

    return _blake2b(b"".join(parts), params.sighash_key(expiry_height))


class Tx:
    """A simple Zcash transaction spending transparent outputs."""

    def __init__(
        self,
        inputs: list[Input],
        recipients: list[Recipient],
        msg_tx: MsgTx,
        params: Params,
        expiry_height: int,
    ) -> None:
        self._inputs = list(inputs)
        self._recipients = list(recipients)
        self.msg_tx = msg_tx
        self.params = params
        self.expiry_height = expiry_height
        self.signed = False

    def hash(self) -> bytes:
        """Return the double SHA-256 of the serialised transaction."""
        return hashlib.sha256(hashlib.sha256(self.serialize()).digest()).digest()

    def inputs(self) -> list[Input]:
        """Return the inputs the transaction spends."""
        return list(self._inputs)

    def outputs(self) -> list[Output]:
        """Return the outputs the transaction creates."""
        tx_hash = self.hash()
        outputs = []
        for index, tx_out in enumerate(self.msg_tx.tx_out):
            if tx_out.value < 0:
                raise ValueError(f"bad output {index}: value is less than zero")
            outputs.append(
                Output(
                    outpoint=Outpoint(hash=tx_hash, index=index),
                    value=tx_out.value,
                    pub_key_script=bytes(tx_out.pk_script),
                )
            )
        return outputs

    def sighashes(self) -> list[bytes]:
        """Return the digest each input's signature must sign."""
        hashes = []
        for index, tx_input in enumerate(self._inputs):
            value = _check_value(tx_input.output.value)
            script = (
                tx_input.output.pub_key_script
                if tx_input.sig_script is None
                else tx_input.sig_script
            )
            hashes.append(
                calculate_sighash(
                    self.params,
                    script,
                    SIGHASH_ALL,
                    self.msg_tx,
                    index,
                    value,
                    self.expiry_height,
                )
            )
        return hashes

    def sign(self, signatures: Iterable[bytes], pub_key: bytes) -> None:
        """Attach 65-byte r||s||v signatures and the public key to the inputs."""
        if self.signed:
            raise ValueError("already signed")
        signatures = [bytes(signature) for signature in signatures]
        if len(signatures) != len(self.msg_tx.tx_in):
            raise ValueError(
                f"expected {len(self.msg_tx.tx_in)} signatures, "
                f"got {len(signatures)} signatures"
            )
        scripts = []
        for rsv, tx_input in zip(signatures, self._inputs):
            if len(rsv) != 65:
                raise ValueError(f"expected 65-byte signature, got {len(rsv)} bytes")
            r = int.from_bytes(rsv[:32], "big")
            s = int.from_bytes(rsv[32:64], "big")
            builder = ScriptBuilder()
            builder.add_data(serialize_signature(r, s) + bytes([SIGHASH_ALL]))
            builder.add_data(pub_key)
            if tx_input.sig_script is not None:
                builder.add_data(tx_input.sig_script)
            scripts.append(builder.script())
        for tx_in, script in zip(self.msg_tx.tx_in, scripts):
            tx_in.signature_script = script
        self.signed = True

    def serialize(self) -> bytes:
        """Return the transaction in the Overwinter/Sapling wire format."""
        msg = self.msg_tx
        parts = [
            struct.pack("<I", (msg.version & _MAX_UINT32) | (1 << 31)),
            struct.pack("<I", _version_group_id(msg.version)),
            write_var_int(len(msg.tx_in)),
            *(tx_in.serialize() for tx_in in msg.tx_in),
            write_var_int(len(msg.tx_out)),
            *(tx_out.serialize() for tx_out in msg.tx_out),
            struct.pack("<I", msg.lock_time),
            struct.pack("<I", self.expiry_height),
        ]
        if msg.version == VERSION_SAPLING:
            parts.append(struct.pack("<Q", 0))
            parts.append(write_var_int(0))
            parts.append(write_var_int(0))
        parts.append(write_var_int(0))
        return b"".join(parts)


@dataclass(frozen=True)
class TxBuilder:
    """Builds Zcash transactions for a network with a fixed expiry height."""

    params: Params
    expiry_height: int = field(default=0)

    def build_tx(self, inputs: Iterable[Input], recipients: Iterable[Recipient]) -> Tx:
        """Spend ``inputs`` to ``recipients``; the remainder goes as a fee."""
        inputs = list(inputs)
        recipients = list(recipients)
        msg_tx = MsgTx(version=VERSION)
        codec = AddressEncodeDecoder(self.params)

        for tx_input in inputs:
            outpoint = tx_input.output.outpoint
            tx_hash = (bytes(outpoint.hash) + _ZERO_HASH)[:32]
            msg_tx.add_tx_in(TxIn(OutPoint(tx_hash, outpoint.index & _MAX_UINT32)))

        for recipient in recipients:
            raw = codec.decode_address(recipient.to)
            address = address_from_raw_bytes(raw, self.params)
            if isinstance(address, AddressPubKeyHash):
                script = pay_to_pubkey_hash_script(address.script_address())
            else:
                script = pay_to_script_hash_script(address.script_address())
            value = _check_value(recipient.value)
            msg_tx.add_tx_out(TxOut(value, script))

        return Tx(inputs, recipients, msg_tx, self.params, self.expiry_height)