import pytest

from chainkit import base58


def test_empty_round_trip():
    assert base58.encode(b"") == ""
    assert base58.decode("") == b""


def test_zero_bytes_become_ones():
    assert base58.encode(bytes(32)) == "1" * 32
    assert base58.decode("1" * 32) == bytes(32)


def test_known_value():
    assert base58.encode(b"Hello World") == "JxF12TrwUP45BMd"
    assert base58.decode("JxF12TrwUP45BMd") == b"Hello World"


@pytest.mark.parametrize(
    "data",
    [
        b"\x00",
        b"\x00\x00\x01",
        b"\xff" * 35,
        bytes(range(32)),
        b"\x00\x00" + bytes(range(1, 50)),
    ],
)
def test_round_trip(data):
    assert base58.decode(base58.encode(data)) == data


def test_encoding_uses_only_alphabet():
    encoded = base58.encode(bytes(range(256)))
    assert set(encoded) <= set(base58.ALPHABET)


@pytest.mark.parametrize("bad", ["0abc", "abcO", "Il", "abc!"])
def test_invalid_character_raises(bad):
    with pytest.raises(ValueError):
        base58.decode(bad)