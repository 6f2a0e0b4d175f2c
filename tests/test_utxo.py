import struct

import pytest

from chainkit.zcash.address import AddressPubKeyHash, AddressScriptHash, hash160
from chainkit.zcash.params import REGRESSION_NET_PARAMS, VERSION_SAPLING_GROUP_ID
from chainkit.zcash.utxo import (
    SIGHASH_ALL,
    SIGHASH_ANYONE_CAN_PAY,
    SIGHASH_SINGLE,
    Input,
    Outpoint,
    Output,
    Recipient,
    TxBuilder,
    calculate_sighash,
)
from chainkit.zcash.wire import (
    ScriptBuilder,
    pay_to_pubkey_hash_script,
    pay_to_script_hash_script,
    serialize_signature,
)

PARAMS = REGRESSION_NET_PARAMS
PKH = bytes(range(20))
SCRIPT = b"\x51\x52\x93"


def _pkh_address():
    return AddressPubKeyHash(PKH, PARAMS).encode_address()


def _p2sh_address():
    return AddressScriptHash.from_script(SCRIPT, PARAMS).encode_address()


def _input(seed, value=100_000, sig_script=None):
    return Input(
        output=Output(
            outpoint=Outpoint(hash=bytes([seed]) * 32, index=seed),
            value=value,
            pub_key_script=pay_to_pubkey_hash_script(PKH),
        ),
        sig_script=sig_script,
    )


def _build(expiry=1_000_000, inputs=None, recipients=None):
    inputs = inputs if inputs is not None else [_input(1), _input(2)]
    recipients = (
        recipients
        if recipients is not None
        else [Recipient(_pkh_address(), 40_000), Recipient(_p2sh_address(), 50_000)]
    )
    return TxBuilder(PARAMS, expiry).build_tx(inputs, recipients)


def test_serialize_header_and_trailer():
    tx = _build(expiry=1_000_000)
    data = tx.serialize()
    assert data[:4] == struct.pack("<I", 4 | (1 << 31))
    assert data[4:8] == struct.pack("<I", VERSION_SAPLING_GROUP_ID)
    assert data[8] == 2
    # lock time, expiry height, value balance and three empty counts
    trailer = struct.pack("<I", 0) + struct.pack("<I", 1_000_000) + bytes(8) + bytes(3)
    assert data.endswith(trailer)


def test_outputs_match_recipients():
    tx = _build()
    outputs = tx.outputs()
    assert [output.value for output in outputs] == [40_000, 50_000]
    assert outputs[0].pub_key_script == pay_to_pubkey_hash_script(PKH)
    assert outputs[1].pub_key_script == pay_to_script_hash_script(hash160(SCRIPT))
    assert [output.outpoint.index for output in outputs] == [0, 1]
    assert all(output.outpoint.hash == tx.hash() for output in outputs)


def test_inputs_returned():
    inputs = [_input(3), _input(4)]
    tx = _build(inputs=inputs)
    assert tx.inputs() == inputs


def test_hash_is_32_bytes_and_stable():
    assert len(_build().hash()) == 32
    assert _build().hash() == _build().hash()


def test_negative_recipient_value_raises():
    with pytest.raises(ValueError, match="expected value >= 0"):
        _build(recipients=[Recipient(_pkh_address(), -1)])


def test_invalid_recipient_address_raises():
    with pytest.raises(ValueError):
        _build(recipients=[Recipient("notanaddress", 10)])


def test_sighashes_shape_and_determinism():
    tx = _build()
    hashes = tx.sighashes()
    assert len(hashes) == 2
    assert all(len(h) == 32 for h in hashes)
    assert hashes[0] != hashes[1]
    assert hashes == _build().sighashes()


def test_sighashes_depend_on_expiry_height():
    assert _build(expiry=5).sighashes() != _build(expiry=55).sighashes()


def test_sighash_uses_sig_script_when_present():
    plain = _build(inputs=[_input(1)]).sighashes()
    with_script = _build(inputs=[_input(1, sig_script=SCRIPT)]).sighashes()
    assert plain != with_script
    tx = _build(inputs=[_input(1, sig_script=SCRIPT)])
    direct = calculate_sighash(PARAMS, SCRIPT, SIGHASH_ALL, tx.msg_tx, 0, 100_000, 1_000_000)
    assert with_script[0] == direct


def test_sighashes_reject_negative_input_value():
    tx = _build(inputs=[_input(1, value=-5)])
    with pytest.raises(ValueError, match="expected value >= 0"):
        tx.sighashes()


def test_calculate_sighash_index_out_of_range():
    tx = _build()
    with pytest.raises(IndexError):
        calculate_sighash(PARAMS, b"", SIGHASH_ALL, tx.msg_tx, 2, 0, 1_000_000)


def test_calculate_sighash_hash_types_differ():
    tx = _build()
    results = {
        calculate_sighash(PARAMS, b"", hash_type, tx.msg_tx, 0, 1, 1_000_000)
        for hash_type in (
            SIGHASH_ALL,
            SIGHASH_SINGLE,
            SIGHASH_ALL | SIGHASH_ANYONE_CAN_PAY,
        )
    }
    assert len(results) == 3


def test_sign_sets_signature_scripts():
    tx = _build(inputs=[_input(1), _input(2, sig_script=SCRIPT)])
    before = tx.serialize()
    pub_key = b"\x02" + bytes(range(32))
    signature = (5).to_bytes(32, "big") + (7).to_bytes(32, "big") + b"\x00"
    tx.sign([signature, signature], pub_key)
    der = serialize_signature(5, 7) + bytes([SIGHASH_ALL])
    first = ScriptBuilder().add_data(der).add_data(pub_key).script()
    second = ScriptBuilder().add_data(der).add_data(pub_key).add_data(SCRIPT).script()
    assert tx.msg_tx.tx_in[0].signature_script == first
    assert tx.msg_tx.tx_in[1].signature_script == second
    assert tx.serialize() != before
    assert first in tx.serialize()


def test_sign_twice_raises():
    tx = _build(inputs=[_input(1)])
    signature = bytes([1]) * 65
    tx.sign([signature], b"\x02" * 33)
    with pytest.raises(ValueError, match="already signed"):
        tx.sign([signature], b"\x02" * 33)


def test_sign_wrong_count_raises():
    tx = _build()
    with pytest.raises(ValueError, match="expected 2 signatures, got 1 signatures"):
        tx.sign([bytes([1]) * 65], b"\x02" * 33)
    assert tx.signed is False