"""Generate a Bitcoin regression-network key and its P2PKH address."""

from __future__ import annotations

import argparse
from dataclasses import dataclass

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from chainkit import base58
from chainkit.zcash.address import checksum, hash160

REGTEST_PRIVATE_KEY_ID = 0xEF
REGTEST_PUBKEY_HASH_ADDR_ID = 0x6F
COMPRESS_MAGIC = 0x01


def _base58_check(payload: bytes) -> str:
    return base58.encode(payload + checksum(payload))


def encode_wif(private_key: bytes, compressed: bool) -> str:
    """Encode a 32-byte private key in Wallet Import Format for regtest."""
    private_key = bytes(private_key)
    if len(private_key) != 32:
        raise ValueError(f"private key must be 32 bytes, got {len(private_key)}")
    payload = bytes([REGTEST_PRIVATE_KEY_ID]) + private_key
    if compressed:
        payload += bytes([COMPRESS_MAGIC])
    return _base58_check(payload)


@dataclass(frozen=True)
class KeyPair:
    """A private key in WIF and the P2PKH address of its compressed public key."""

    wif: str
    address: str


def generate() -> KeyPair:
    """Create a fresh secp256k1 key for the Bitcoin regression network."""
    key = ec.generate_private_key(ec.SECP256K1())
    private_bytes = key.private_numbers().private_value.to_bytes(32, "big")
    public_bytes = key.public_key().public_bytes(
        serialization.Encoding.X962, serialization.PublicFormat.CompressedPoint
    )
    address = _base58_check(bytes([REGTEST_PUBKEY_HASH_ADDR_ID]) + hash160(public_bytes))
    return KeyPair(wif=encode_wif(private_bytes, True), address=address)


def main(argv: list[str] | None = None) -> int:
    """Print a new key and address as environment assignments."""
    parser = argparse.ArgumentParser(
        description="Generate a Bitcoin regtest private key and address."
    )
    parser.parse_args(argv)
    pair = generate()
    print(f"BITCOIN_PK={pair.wif}")
    print(f"BITCOIN_ADDRESS={pair.address}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())