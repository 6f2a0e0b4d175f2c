"""Substrate address decoding."""

from __future__ import annotations

from chainkit import base58

ADDRESS_LENGTH = 35


class AddressDecoder:
    """Decodes Base58 Substrate addresses.

    A decoded address is a 2-byte address type, a 32-byte public key and a
    1-byte checksum: 35 bytes in all.
    """

    def decode_address(self, encoded: str) -> bytes:
        """Decode ``encoded``; raises ValueError unless it holds 35 bytes."""
        try:
            data = base58.decode(str(encoded))
        except ValueError as exc:
            raise ValueError(f"invalid address {encoded!r}: {exc}") from exc
        if len(data) != ADDRESS_LENGTH:
            raise ValueError(f"expected {ADDRESS_LENGTH} bytes, got {len(data)} bytes")
        return data