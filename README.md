# chainkit

A small toolkit for working with several blockchains from Python:

- **Base58** encoding and decoding with the Bitcoin alphabet
  (`chainkit.base58`).
- **Solana**: 32-byte address encoding and decoding, program-derived
  addresses, a JSON-RPC 2.0 helper with retries, and a client that reads
  account data (`chainkit.solana`).
- **Substrate**: decoding of 35-byte Base58 addresses (`chainkit.substrate`).
- **Terra**: a gas estimator that reads a gas price from an HTTP endpoint
  (`chainkit.terra`).
- **Zcash**: network parameters, P2PKH and P2SH address codecs, a fee
  estimator, wire serialisation, and a version 4 (Sapling) transaction
  builder with BLAKE2b sighashes (`chainkit.zcash`).
- A **key generator** that prints a fresh Bitcoin regression-network key
  in WIF form together with its P2PKH address.

## Installation

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## Usage

### Base58

```python
from chainkit import base58

text = base58.encode(b"\x00\x01\x02")
assert base58.decode(text) == b"\x00\x01\x02"
```

Each leading zero byte becomes a leading `1`. `decode` raises `ValueError`
on a character outside the alphabet.

### Solana addresses

Solana addresses are 32 raw bytes written in Base58. Encoding or decoding
anything of another length raises `ValueError`.

```python
from chainkit.solana.address import AddressEncodeDecoder

codec = AddressEncodeDecoder()
raw = codec.decode_address("6kAHanNCT1LKFoMn3fBdyvJuvHLcWhLpJbTpbHpqRiG4")
assert len(raw) == 32
assert codec.encode_address(raw) == "6kAHanNCT1LKFoMn3fBdyvJuvHLcWhLpJbTpbHpqRiG4"
```

### Program-derived addresses

`chainkit.solana.ffi.program_derived_address(seeds, program)` hashes the
seed bytes (at most 32), a bump byte, the program id and the
`ProgramDerivedAddress` marker with SHA-256, trying bumps from 255
downwards, and returns the first result that is not a point on the ed25519
curve.

```python
from chainkit.solana.ffi import program_derived_address

address = program_derived_address(
    b"GatewayState",
    "6kAHanNCT1LKFoMn3fBdyvJuvHLcWhLpJbTpbHpqRiG4",
)
assert address == "APthNc29MGRJRkKahDRNrSNA2o1e8p6aFAJNRV8ZdJaV"
```

`chainkit.solana.client.find_program_address(seeds, program)` does the same
starting from the program's raw 32 bytes. `is_on_curve(point)` tests 32
bytes for an ed25519 point, and `unique_pubkey()` returns a new Base58 key
built from an incrementing counter, for use in tests.

### Talking to a Solana node

```python
from chainkit.solana.client import Client, ClientOptions

client = Client(ClientOptions().with_rpc_url("http://localhost:8899"))
data = client.get_account_data(account_address)
burn_log = client.call_contract(program_address, calldata)
```

`ClientOptions` defaults to `http://localhost:8899`. Both methods call the
`getAccountInfo` RPC method: `get_account_data` asks for base64 data,
`call_contract` derives the account from the program and the call data and
asks for base58 data. Both return the decoded bytes.

The lower-level helpers in `chainkit.solana.rpc` (`send_data`,
`send_data_with_retry`, `send_request`, `send_request_with_retry`,
`send_raw_post`) POST JSON-RPC 2.0 requests. A URL without an `http` scheme
gets `http://` prepended. They raise `RpcCallError` when the request cannot
be sent, the response cannot be decoded, or the node answers with an error.
`send_data_with_retry` tries up to ten times, ten seconds apart.
`ResponseGetAccountInfo.from_json` parses a `getAccountInfo` result.

### Substrate addresses

```python
from chainkit.substrate import AddressDecoder

raw = AddressDecoder().decode_address(encoded_address)
assert len(raw) == 35  # otherwise ValueError is raised
```

### Terra gas prices

```python
from chainkit.terra import GasEstimationError, GasEstimator

estimator = GasEstimator(url=feed_url, key="uluna", decimals=100000, fallback_gas=1)
try:
    gas_price, gas_cap = estimator.estimate_gas()
except GasEstimationError as exc:
    gas_price = gas_cap = exc.fallback
```

The endpoint must return a JSON object whose values are strings; the value
under `key` is parsed as a float and multiplied by `decimals`. When the feed
cannot be read or has no valid price, `GasEstimationError` is raised with
the fallback gas in its `fallback` attribute.

### Zcash

- `chainkit.zcash.params` holds `MAIN_NET_PARAMS`, `TEST_NET3_PARAMS` and
  `REGRESSION_NET_PARAMS`, including each network-upgrade schedule;
  `Params.sighash_key(height)` picks the sighash personalisation for a
  height.
- `chainkit.zcash.address` encodes and decodes transparent P2PKH and P2SH
  addresses (`AddressEncodeDecoder`, `AddressPubKeyHash`,
  `AddressScriptHash`, `address_from_raw_bytes`), checking the network
  prefix and, on decoding, the double-SHA-256 checksum.
- `chainkit.zcash.gas.GasEstimator` turns a client's
  `estimate_fee_legacy(num_blocks)` fee rate (coins per kilobyte) into
  satoshis per byte, rounded up; it raises `GasEstimationError`, carrying
  the fallback, when the client fails or the rate is not positive.
- `chainkit.zcash.wire` holds var-int encoding, inputs, outputs, script
  building, DER signature encoding and P2PKH/P2SH output scripts.
- `chainkit.zcash.utxo` builds transactions with `TxBuilder.build_tx`,
  yields the digests to sign with `Tx.sighashes`, attaches 65-byte
  signatures with `Tx.sign`, and serialises with `Tx.serialize`.

```python
from chainkit.zcash.params import REGRESSION_NET_PARAMS
from chainkit.zcash.utxo import Input, Outpoint, Output, Recipient, TxBuilder

builder = TxBuilder(REGRESSION_NET_PARAMS, expiry_height=1000000)
tx = builder.build_tx(
    [Input(Output(Outpoint(prev_hash, 0), value=100000, pub_key_script=script))],
    [Recipient(to=recipient_address, value=99000)],
)
digests = tx.sighashes()
tx.sign(signatures, public_key)
raw_tx = tx.serialize()
```

### Generating a regression-network key

```
chainkit-keygen
```

prints two lines, `BITCOIN_PK=<WIF key>` and `BITCOIN_ADDRESS=<P2PKH
address>`, for a newly generated secp256k1 key on the Bitcoin regression
network. `chainkit.keygen.generate()` returns the same as a `KeyPair`.

## What this package does not do

- It does not sign anything: producing signatures for the digests from
  `Tx.sighashes` is left to the caller.
- It does not submit transactions or track confirmations, and it has no
  Zcash node client; `chainkit.zcash.gas.GasEstimator` needs a client
  object supplied by the caller.
- For Terra it offers only gas estimation: there is no Terra client,
  transaction builder or address codec.
- The Solana client only reads account data; it does not build or send
  transactions.