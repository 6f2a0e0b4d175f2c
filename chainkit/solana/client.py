"""A Solana client that reads program-owned account data over JSON-RPC."""

from __future__ import annotations

import base64
import binascii
import dataclasses
import json
import logging
from dataclasses import dataclass, field

from chainkit import base58
from chainkit.solana.address import AddressEncodeDecoder
from chainkit.solana.ffi import program_derived_address
from chainkit.solana.rpc import (
    ResponseGetAccountInfo,
    RpcCallError,
    send_data_with_retry,
)

DEFAULT_CLIENT_RPC_URL = "http://localhost:8899"

_METHOD = "getAccountInfo"


@dataclass(frozen=True)
class ClientOptions:
    """Options used to build a Client."""

    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))
    rpc_url: str = DEFAULT_CLIENT_RPC_URL

    def with_rpc_url(self, rpc_url: str) -> ClientOptions:
        """Return a copy of these options with the given RPC URL."""
        return dataclasses.replace(self, rpc_url=str(rpc_url))


def find_program_address(seeds: bytes, program: bytes) -> str:
    """Return the program-derived address for a raw 32-byte program id."""
    encoded = AddressEncodeDecoder().encode_address(program)
    return program_derived_address(seeds, encoded)


class Client:
    """Reads account data from a Solana cluster."""

    def __init__(self, opts: ClientOptions | None = None) -> None:
        self.opts = opts if opts is not None else ClientOptions()

    def _account_info(self, account: str, encoding: str) -> ResponseGetAccountInfo:
        params = json.dumps([str(account), {"encoding": encoding}])
        try:
            response = send_data_with_retry(_METHOD, params, self.opts.rpc_url)
        except RpcCallError as exc:
            raise RpcCallError(f'calling rpc method "{_METHOD}": {exc}') from exc
        if response.result is None:
            raise ValueError("decoding result: empty")
        try:
            return ResponseGetAccountInfo.from_json(response.result)
        except (ValueError, TypeError) as exc:
            raise ValueError(f"decoding result: {exc}") from exc

    def get_account_data(self, account: str) -> bytes:
        """Fetch an account's data, transferred as base64."""
        info = self._account_info(account, "base64")
        text = info.value.data[0]
        try:
            return base64.b64decode(text + "=" * (-len(text) % 4), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError(f"decoding base64 value: {exc}") from exc

    def call_contract(self, program: str, calldata: bytes) -> bytes:
        """Fetch the data held by the account the program derives from ``calldata``."""
        try:
            decoded_program = AddressEncodeDecoder().decode_address(program)
        except ValueError as exc:
            raise ValueError(f"decode address: {exc}") from exc
        try:
            account = find_program_address(bytes(calldata), decoded_program)
        except ValueError as exc:
            raise ValueError(f"find program-derived address: {exc}") from exc
        info = self._account_info(account, "base58")
        try:
            return base58.decode(info.value.data[0])
        except ValueError as exc:
            raise ValueError(f"decoding result from base58: {exc}") from exc