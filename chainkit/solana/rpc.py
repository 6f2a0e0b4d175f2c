"""A small JSON-RPC 2.0 client over HTTP POST, and Solana account types."""

from __future__ import annotations

import json
import logging
import time
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10.0
DEFAULT_RETRIES = 10
DEFAULT_RETRY_DELAY = 10


class RpcCallError(Exception):
    """Raised when a JSON-RPC call cannot be sent or returns an error."""


def _raw_text(raw: str | bytes) -> str:
    return raw.decode() if isinstance(raw, (bytes, bytearray)) else raw


@dataclass(frozen=True)
class Request:
    """A JSON-RPC 2.0 request; ``params`` holds raw JSON text."""

    version: str
    id: Any
    method: str
    params: str | bytes | None = None

    def to_json(self) -> str:
        """Serialise the request, leaving out empty params."""
        payload: dict[str, Any] = {
            "jsonrpc": self.version,
            "id": self.id,
            "method": self.method,
        }
        if self.params:
            payload["params"] = json.loads(_raw_text(self.params))
        return json.dumps(payload, separators=(",", ":"))


@dataclass(frozen=True)
class RpcError:
    """A JSON-RPC 2.0 error object; ``data`` holds raw JSON text."""

    code: int = 0
    message: str = ""
    data: str | None = None

    @classmethod
    def _from_obj(cls, obj: Any) -> RpcError:
        if not isinstance(obj, dict):
            raise ValueError(f"error object must be a JSON object, got {obj!r}")
        data = obj.get("data")
        return cls(
            code=int(obj.get("code") or 0),
            message=str(obj.get("message") or ""),
            data=None if data is None else json.dumps(data),
        )

    def __str__(self) -> str:
        text = f"code={self.code} message={self.message}"
        return text if self.data is None else f"{text} data={self.data}"


@dataclass(frozen=True)
class Response:
    """A JSON-RPC 2.0 response; ``result`` holds raw JSON text or None."""

    version: str = ""
    id: Any = None
    result: str | None = None
    error: RpcError | None = None

    @classmethod
    def from_json(cls, text: str | bytes) -> Response:
        """Parse a response; raises ValueError on malformed input."""
        obj = json.loads(_raw_text(text))
        if obj is None:
            return cls()
        if not isinstance(obj, dict):
            raise ValueError(f"response must be a JSON object, got {obj!r}")
        result = obj.get("result")
        error = obj.get("error")
        return cls(
            version=str(obj.get("jsonrpc") or ""),
            id=obj.get("id"),
            result=None if result is None else json.dumps(result),
            error=None if error is None else RpcError._from_obj(error),
        )


@dataclass(frozen=True)
class AccountContext:
    """The slot for which an account's value was returned."""

    slot: int = 0


@dataclass(frozen=True)
class AccountValue:
    """An account's information as returned by ``getAccountInfo``."""

    data: tuple[str, str] = ("", "")
    executable: bool = False
    lamports: int = 0
    owner: str = ""
    rent_epoch: int = 0


@dataclass(frozen=True)
class ResponseGetAccountInfo:
    """The result of a ``getAccountInfo`` query."""

    context: AccountContext = AccountContext()
    value: AccountValue = AccountValue()

    @classmethod
    def from_json(cls, text: str | bytes) -> ResponseGetAccountInfo:
        """Parse the result; missing fields take their zero values."""
        obj = json.loads(_raw_text(text))
        if obj is None:
            return cls()
        if not isinstance(obj, dict):
            raise ValueError(f"account info must be a JSON object, got {obj!r}")
        context = obj.get("context") or {}
        value = obj.get("value") or {}
        if not isinstance(context, dict) or not isinstance(value, dict):
            raise ValueError("account context and value must be JSON objects")
        data = value.get("data") or []
        if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
            raise ValueError(f"account data must be a list of strings, got {data!r}")
        padded = (list(data) + ["", ""])[:2]
        return cls(
            context=AccountContext(slot=int(context.get("slot") or 0)),
            value=AccountValue(
                data=(padded[0], padded[1]),
                executable=bool(value.get("executable") or False),
                lamports=int(value.get("lamports") or 0),
                owner=str(value.get("owner") or ""),
                rent_epoch=int(value.get("rentEpoch") or 0),
            ),
        )


_opener = urllib.request.build_opener(urllib.request.ProxyHandler({}))


def send_raw_post(data: str | bytes, url: str) -> bytes:
    """POST raw JSON to ``url`` and return the response body.

    A URL without an http scheme gets ``http://`` prepended. Any HTTP status
    is accepted; only transport failures raise RpcCallError.
    """
    if not url.startswith("http"):
        url = "http://" + url
    body = data.encode() if isinstance(data, str) else bytes(data)
    request = urllib.request.Request(
        url, data=body, method="POST", headers={"Content-Type": "application/json"}
    )
    try:
        with _opener.open(request, timeout=REQUEST_TIMEOUT) as response:
            return response.read()
    except urllib.error.HTTPError as exc:
        with exc:
            return exc.read()
    except (urllib.error.URLError, OSError, ValueError) as exc:
        raise RpcCallError(f"POST {url}: {exc}") from exc


def send_request(request: Request, url: str) -> bytes:
    """Send a JSON-RPC request and return the raw response body."""
    data = request.to_json()
    try:
        return send_raw_post(data, url)
    except RpcCallError as exc:
        logger.warning("Sending %s to %s resulted in an error: %s", data, url, exc)
        raise


def send_request_with_retry(
    request: Request, url: str, timeout_in_secs: int, retries: int
) -> bytes:
    """Send a request, retrying up to ``retries`` attempts in total.

    Waits ``timeout_in_secs`` seconds between attempts and re-raises the last
    error once every attempt has failed.
    """
    if retries < 1:
        raise ValueError(f"retries must be at least 1, got {retries}")
    for attempt in range(1, retries + 1):
        try:
            return send_request(request, url)
        except RpcCallError as exc:
            if attempt >= retries:
                raise
            logger.warning(
                "%s errored: %s. Retrying after %d seconds", url, exc, timeout_in_secs
            )
            time.sleep(timeout_in_secs)
    raise AssertionError("unreachable")


def _decode_response(method: str, body: bytes) -> Response:
    try:
        response = Response.from_json(body)
    except (ValueError, TypeError) as exc:
        raise RpcCallError(
            f"cannot decode {method} response body = "
            f"{body.decode(errors='replace')}, err = {exc}"
        ) from exc
    if response.error is not None:
        raise RpcCallError(f"got err back from {method} request, err = {response.error}")
    return response


def send_data(method: str, data: str | bytes, url: str) -> Response:
    """Call ``method`` with raw JSON params and return the decoded response."""
    request = Request(version="2.0", id=1, method=method, params=data)
    return _decode_response(method, send_request(request, url))


def send_data_with_retry(method: str, data: str | bytes, url: str) -> Response:
    """Like send_data, but retries sending up to ten times, ten seconds apart."""
    request = Request(version="2.0", id=1, method=method, params=data)
    try:
        body = send_request_with_retry(request, url, DEFAULT_RETRY_DELAY, DEFAULT_RETRIES)
    except RpcCallError as exc:
        raise RpcCallError(f"failed to send request, err = {exc}") from exc
    return _decode_response(method, body)