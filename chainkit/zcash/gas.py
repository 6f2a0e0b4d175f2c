"""Zcash fee estimation in satoshis per byte."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol

MULTIPLIER = 1e8
KILOBYTE_TO_BYTE = 1024


class FeeEstimator(Protocol):
    """A node client that estimates the fee rate in coins per kilobyte."""

    def estimate_fee_legacy(self, num_blocks: int) -> float: ...


class GasEstimationError(Exception):
    """Raised when no fee can be estimated; carries the fallback."""

    def __init__(self, message: str, fallback: int) -> None:
        super().__init__(message)
        self.fallback = fallback


@dataclass(frozen=True)
class GasEstimator:
    """Estimates the satoshis per byte needed to confirm within ``num_blocks``."""

    client: FeeEstimator
    num_blocks: int
    fallback_gas: int

    def estimate_gas(self) -> tuple[int, int]:
        """Return the gas price and gas cap in satoshis per byte.

        Raises GasEstimationError, whose ``fallback`` holds the fallback gas,
        when the client fails or reports a fee rate that is not positive.
        """
        try:
            fee_rate = float(self.client.estimate_fee_legacy(self.num_blocks))
        except Exception as exc:
            raise GasEstimationError(str(exc), self.fallback_gas) from exc
        if not fee_rate > 0.0 or not math.isfinite(fee_rate):
            raise GasEstimationError(f"invalid fee rate: {fee_rate}", self.fallback_gas)
        sats_per_byte = math.ceil(fee_rate * MULTIPLIER / KILOBYTE_TO_BYTE)
        return sats_per_byte, sats_per_byte