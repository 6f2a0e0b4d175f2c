"""Terra gas estimation from an HTTP price feed."""

from __future__ import annotations

import json
import math
import urllib.error
import urllib.request
from dataclasses import dataclass

DEFAULT_TERRA_DECIMALS_DIVISOR = 1e5

REQUEST_TIMEOUT = 10.0

_opener = urllib.request.build_opener(urllib.request.ProxyHandler({}))


class GasEstimationError(Exception):
    """Raised when no gas price can be estimated; carries the fallback."""

    def __init__(self, message: str, fallback: int) -> None:
        super().__init__(message)
        self.fallback = fallback


@dataclass(frozen=True)
class GasEstimator:
    """Reads the gas price for ``key`` from a JSON object of strings at ``url``."""

    url: str
    key: str
    decimals: int
    fallback_gas: int

    def _fail(self, message: str) -> GasEstimationError:
        return GasEstimationError(message, self.fallback_gas)

    def _fetch(self) -> bytes:
        try:
            with _opener.open(self.url, timeout=REQUEST_TIMEOUT) as response:
                return response.read()
        except urllib.error.HTTPError as exc:
            with exc:
                return exc.read()
        except (urllib.error.URLError, OSError, ValueError) as exc:
            raise self._fail(f"GET {self.url}: {exc}") from exc

    def estimate_gas(self) -> tuple[int, int]:
        """Return the gas price and gas cap, both scaled by ``decimals``.

        Raises GasEstimationError, whose ``fallback`` holds the fallback gas,
        when the feed cannot be read or holds no valid price for the key.
        """
        body = self._fetch()
        try:
            results = json.loads(body)
        except (ValueError, UnicodeDecodeError) as exc:
            raise self._fail(f"decoding response: {exc}") from exc
        if not isinstance(results, dict) or not all(
            isinstance(value, str) for value in results.values()
        ):
            raise self._fail("decoding response: expected an object of strings")
        if self.key not in results:
            raise self._fail(f"no {self.key} in response")
        try:
            price = float(results[self.key])
        except ValueError as exc:
            raise self._fail(f"invalid gas price, {exc}") from exc
        scaled = price * float(self.decimals)
        if not math.isfinite(scaled) or scaled < 0:
            raise self._fail(f"invalid gas price, {results[self.key]!r}")
        gas_price = int(scaled)
        return gas_price, gas_price