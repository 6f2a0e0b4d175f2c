"""Solana addresses: 32-byte public keys written in Base58."""

from __future__ import annotations

from chainkit import base58

ADDRESS_LENGTH = 32


class AddressEncodeDecoder:
    """Converts between raw 32-byte Solana addresses and their Base58 form."""

    def encode_address(self, raw_address: bytes) -> str:
        """Encode a raw 32-byte address to Base58."""
        raw_address = bytes(raw_address)
        if len(raw_address) != ADDRESS_LENGTH:
            raise ValueError(
                f"expected address length {ADDRESS_LENGTH}, "
                f"got address length {len(raw_address)}"
            )
        return base58.encode(raw_address)

    def decode_address(self, encoded: str) -> bytes:
        """Decode a Base58 address into its raw 32 bytes."""
        try:
            decoded = base58.decode(encoded)
        except ValueError as exc:
            raise ValueError(f"invalid address {encoded!r}: {exc}") from exc
        if len(decoded) != ADDRESS_LENGTH:
            raise ValueError(
                f"expected address length {ADDRESS_LENGTH}, "
                f"got address length {len(decoded)}"
            )
        return decoded