"""Solana key helpers: unique test keys and program-derived addresses."""

from __future__ import annotations

import hashlib
import itertools
import threading

from chainkit.solana.address import AddressEncodeDecoder

MAX_SEED_LEN = 32
PDA_MARKER = b"ProgramDerivedAddress"

_P = 2**255 - 19
_D = (-121665 * pow(121666, -1, _P)) % _P

_unique_counter = itertools.count(1)
_unique_lock = threading.Lock()


def unique_pubkey() -> str:
    """Return a new Base58 pubkey built from an incrementing counter."""
    with _unique_lock:
        value = next(_unique_counter)
    raw = value.to_bytes(8, "big") + bytes(24)
    return AddressEncodeDecoder().encode_address(raw)


def is_on_curve(point: bytes) -> bool:
    """Return whether 32 bytes decompress to a point on the ed25519 curve."""
    point = bytes(point)
    if len(point) != 32:
        raise ValueError(f"expected 32 bytes, got {len(point)} bytes")
    y = (int.from_bytes(point, "little") & ((1 << 255) - 1)) % _P
    y2 = y * y % _P
    numerator = (y2 - 1) % _P
    denominator = (_D * y2 + 1) % _P
    x2 = numerator * pow(denominator, -1, _P) % _P
    return x2 == 0 or pow(x2, (_P - 1) // 2, _P) == 1


def _create_program_address(seed: bytes, bump: int, program_id: bytes) -> bytes | None:
    digest = hashlib.sha256(seed + bytes([bump]) + program_id + PDA_MARKER).digest()
    return None if is_on_curve(digest) else digest


def program_derived_address(seeds: bytes, program: str) -> str:
    """Derive the off-curve address owned by ``program`` for the given seed.

    The bump seed is searched from 255 downwards; the first hash that is not
    an ed25519 point is the address.
    """
    seeds = bytes(seeds)
    if len(seeds) > MAX_SEED_LEN:
        raise ValueError(
            f"seed length {len(seeds)} exceeds the maximum of {MAX_SEED_LEN}"
        )
    codec = AddressEncodeDecoder()
    program_id = codec.decode_address(program)
    for bump in range(255, 0, -1):
        derived = _create_program_address(seeds, bump, program_id)
        if derived is not None:
            return codec.encode_address(derived)
    raise ValueError("unable to find a viable program address bump seed")