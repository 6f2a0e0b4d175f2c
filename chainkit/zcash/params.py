"""Zcash network parameters and signature-hash constants."""

from __future__ import annotations

from dataclasses import dataclass

SIGHASH_MASK = 0x1F
BLAKE2B_SIGHASH = b"ZcashSigHash"
PREVOUTS_HASH_PERSONALIZATION = b"ZcashPrevoutHash"
SEQUENCE_HASH_PERSONALIZATION = b"ZcashSequencHash"
OUTPUTS_HASH_PERSONALIZATION = b"ZcashOutputsHash"

VERSION_OVERWINTER = 3
VERSION_OVERWINTER_GROUP_ID = 0x3C48270
VERSION_SAPLING = 4
VERSION_SAPLING_GROUP_ID = 0x892F2085

WITNESS_MARKER_BYTES = b"\x00\x01"


@dataclass(frozen=True)
class ParamsUpgrade:
    """A network upgrade: the height it activates at and its branch id."""

    activation_height: int
    branch_id: bytes


@dataclass(frozen=True)
class Params:
    """The chain-specific parameters of a Zcash network."""

    name: str
    private_key_id: int
    p2pkh_prefix: bytes
    p2sh_prefix: bytes
    upgrades: tuple[ParamsUpgrade, ...]

    def sighash_key(self, activation_height: int) -> bytes:
        """Return the BLAKE2b personalisation for signatures at this height.

        It is the signature-hash tag followed by the branch id of the latest
        upgrade active at ``activation_height``.
        """
        for upgrade in reversed(self.upgrades):
            if activation_height >= upgrade.activation_height:
                return BLAKE2B_SIGHASH + upgrade.branch_id
        raise ValueError(f"no network upgrade is active at height {activation_height}")


def _upgrades(*heights: int) -> tuple[ParamsUpgrade, ...]:
    branch_ids = (
        bytes([0x00, 0x00, 0x00, 0x00]),
        bytes([0x19, 0x1B, 0xA8, 0x5B]),
        bytes([0xBB, 0x09, 0xB8, 0x76]),
        bytes([0x60, 0x0E, 0xB4, 0x2B]),
        bytes([0x0B, 0x23, 0xB9, 0xF5]),
        bytes([0xA6, 0x75, 0xFF, 0xE9]),
        bytes([0xB4, 0xD0, 0xD6, 0xC2]),
    )
    return tuple(
        ParamsUpgrade(height, branch_id) for height, branch_id in zip(heights, branch_ids)
    )


MAIN_NET_PARAMS = Params(
    name="mainnet",
    private_key_id=0x80,
    p2pkh_prefix=bytes([0x1C, 0xB8]),
    p2sh_prefix=bytes([0x1C, 0xBD]),
    upgrades=_upgrades(0, 347500, 419200, 653600, 903000, 1046400, 1687104),
)

TEST_NET3_PARAMS = Params(
    name="testnet3",
    private_key_id=0xEF,
    p2pkh_prefix=bytes([0x1D, 0x25]),
    p2sh_prefix=bytes([0x1C, 0xBA]),
    upgrades=_upgrades(0, 207500, 280000, 584000, 903800, 1028500, 1842420),
)

REGRESSION_NET_PARAMS = Params(
    name="regtest",
    private_key_id=0xEF,
    p2pkh_prefix=bytes([0x1D, 0x25]),
    p2sh_prefix=bytes([0x1C, 0xBA]),
    upgrades=_upgrades(0, 10, 20, 30, 40, 50, 60),
)