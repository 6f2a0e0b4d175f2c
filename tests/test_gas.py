import pytest

from chainkit.zcash.gas import GasEstimationError, GasEstimator


class FakeClient:
    def __init__(self, rates=None, error=None):
        self.rates = rates or {}
        self.error = error
        self.calls = []

    def estimate_fee_legacy(self, num_blocks):
        self.calls.append(num_blocks)
        if self.error is not None:
            raise self.error
        return self.rates[num_blocks]


def test_converts_fee_rate_to_sats_per_byte():
    estimator = GasEstimator(FakeClient({1: 0.0001}), 1, 123)
    assert estimator.estimate_gas() == (10, 10)


def test_rounds_up():
    estimator = GasEstimator(FakeClient({2: 0.001}), 2, 123)
    assert estimator.estimate_gas() == (98, 98)


def test_passes_num_blocks_to_client():
    client = FakeClient({10: 0.0001})
    GasEstimator(client, 10, 1).estimate_gas()
    assert client.calls == [10]


def test_fees_are_ordered_by_target():
    client = FakeClient({1: 0.001, 10: 0.0005, 100: 0.0001})
    price1, _ = GasEstimator(client, 1, 123).estimate_gas()
    price2, _ = GasEstimator(client, 10, 234).estimate_gas()
    price3, _ = GasEstimator(client, 100, 345).estimate_gas()
    assert price1 >= price2 >= price3


@pytest.mark.parametrize("fallback", [123, 234, 345])
def test_client_error_gives_fallback(fallback):
    estimator = GasEstimator(FakeClient(error=ConnectionError("down")), 1, fallback)
    with pytest.raises(GasEstimationError) as info:
        estimator.estimate_gas()
    assert info.value.fallback == fallback
    assert "down" in str(info.value)


@pytest.mark.parametrize("rate", [0.0, -0.5])
def test_non_positive_rate_is_rejected(rate):
    estimator = GasEstimator(FakeClient({1: rate}), 1, 77)
    with pytest.raises(GasEstimationError, match="invalid fee rate") as info:
        estimator.estimate_gas()
    assert info.value.fallback == 77