import socket
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer

import pytest

from chainkit.terra import GasEstimationError, GasEstimator

FALLBACK = 123


@pytest.fixture
def feed():
    state = {"body": b"{}", "status": 200}

    class Handler(BaseHTTPRequestHandler):
        def do_GET(self):
            body = state["body"]
            self.send_response(state["status"])
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, *args):
            pass

    server = HTTPServer(("127.0.0.1", 0), Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield state, f"http://127.0.0.1:{server.server_port}/gas-prices"
    server.shutdown()
    server.server_close()


def test_estimate_gas_scales_price(feed):
    state, url = feed
    state["body"] = b'{"uluna": "2.5", "uusd": "0.15"}'
    estimator = GasEstimator(url, "uluna", 4, FALLBACK)
    assert estimator.estimate_gas() == (10, 10)


def test_price_and_cap_are_equal(feed):
    state, url = feed
    state["body"] = b'{"uusd": "0.15"}'
    price, cap = GasEstimator(url, "uusd", 100000, FALLBACK).estimate_gas()
    assert price == cap
    assert price > 0


def test_missing_key_reports_fallback(feed):
    state, url = feed
    state["body"] = b'{"uusd": "0.15"}'
    with pytest.raises(GasEstimationError, match="no uluna in response") as info:
        GasEstimator(url, "uluna", 100, FALLBACK).estimate_gas()
    assert info.value.fallback == FALLBACK


def test_invalid_price_reports_fallback(feed):
    state, url = feed
    state["body"] = b'{"uluna": "cheap"}'
    with pytest.raises(GasEstimationError, match="invalid gas price") as info:
        GasEstimator(url, "uluna", 100, FALLBACK).estimate_gas()
    assert info.value.fallback == FALLBACK


def test_non_string_values_are_rejected(feed):
    state, url = feed
    state["body"] = b'{"uluna": 0.15}'
    with pytest.raises(GasEstimationError, match="decoding response"):
        GasEstimator(url, "uluna", 100, FALLBACK).estimate_gas()


def test_malformed_body_is_rejected(feed):
    state, url = feed
    state["body"] = b"not json"
    with pytest.raises(GasEstimationError, match="decoding response") as info:
        GasEstimator(url, "uluna", 100, FALLBACK).estimate_gas()
    assert info.value.fallback == FALLBACK


def test_unreachable_feed_reports_fallback():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    estimator = GasEstimator(f"http://127.0.0.1:{port}/", "uluna", 100, FALLBACK)
    with pytest.raises(GasEstimationError) as info:
        estimator.estimate_gas()
    assert info.value.fallback == FALLBACK