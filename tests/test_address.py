import pytest

from chainkit.solana.address import AddressEncodeDecoder

PROGRAM = "6kAHanNCT1LKFoMn3fBdyvJuvHLcWhLpJbTpbHpqRiG4"


@pytest.fixture
def codec():
    return AddressEncodeDecoder()


def test_system_program_address(codec):
    assert codec.decode_address("11111111111111111111111111111111") == bytes(32)
    assert codec.encode_address(bytes(32)) == "11111111111111111111111111111111"


def test_decode_encode_round_trip(codec):
    raw = codec.decode_address(PROGRAM)
    assert len(raw) == 32
    assert codec.encode_address(raw) == PROGRAM


@pytest.mark.parametrize("raw", [bytes(range(32)), b"\xff" * 32, b"\x00" * 31 + b"\x01"])
def test_encode_decode_round_trip(codec, raw):
    assert codec.decode_address(codec.encode_address(raw)) == raw


@pytest.mark.parametrize("length", [0, 31, 33])
def test_encode_wrong_length(codec, length):
    with pytest.raises(ValueError, match=f"got address length {length}"):
        codec.encode_address(bytes(length))


def test_decode_wrong_length(codec):
    with pytest.raises(ValueError, match="got address length 3"):
        codec.decode_address("111")


def test_decode_invalid_characters(codec):
    with pytest.raises(ValueError):
        codec.decode_address("0OIl" * 8)