# w3

Building blocks for working with Ethereum JSON-RPC data and EVM state from
Python: strict hex and amount parsing, message and account types with their
JSON encodings, a cache of fetched fork state on disk, decoding of
`debug_trace*` results, and a local HTTP server for golden-file tests.

## Install

```
pip install .
pip install ".[test]"   # with pytest
```

The only runtime dependency is `pycryptodome`, used for Keccak-256.

## Modules

### `w3.hexutil`

- `A(hex_address)` – 20-byte address as `bytes`; the `0x` prefix is optional.
- `H(hex_hash)` – 32-byte hash as `bytes`.
- `B(*args)` – the bytes of one or more hex strings, concatenated.
- `I(str_int)` – an `int` from `"0x..."` hex, a decimal integer, or a decimal
  with a unit: `"ether"`/`"eth"` (10^18) or `"gwei"` (10^9). Fractional
  digits beyond the unit's precision are rejected.
- `from_wei(wei, decimals)` – render an amount with the given number of
  decimals, trailing zeros removed; `None` gives `"<nil>"`.

All of them raise `ValueError` on bad input, with messages such as
`invalid address "c0Fe": must have 20 bytes`.

```python
from w3.hexutil import A, B, H, I, from_wei

I("3.1415 ether")              # 3141500000000000000
I("0x2b98d99b09e3c000")        # 3141500000000000000
I("31.415 gwei")               # 31415000000
from_wei(I("1.23 ether"), 18)  # "1.23"
B("0xc0", "fe")                # b"\xc0\xfe"
```

### `w3.types`

- `keccak256(*args)` – Keccak-256 of the concatenated byte strings.
- `Message` – a transaction without signature (`sender`, `to`, `nonce`, gas
  fields, `value`, `input`, `access_list`, `func`, `args`), with `to_json()`
  and `Message.from_json(data)`. Zero and unset fields are left out of the
  JSON form.
- `Account` – nonce, balance, code and storage; `code_hash()` (cached, the
  empty-code hash for no code) and `to_json()` in state-override form
  (storage under `stateDiff`).
- `State` – a `dict` of addresses to `Account`s, with `to_json()`.
- `BatchElem` – one JSON-RPC request with its result or error.
- `Func` and `Caller` – abstract interfaces for ABI functions and for
  request/response handlers.

### `w3.vm_state`

- `Fetcher` – abstract interface for fetching nonce, balance, code, storage
  and header hashes.
- `ForkAccount` and `ForkState` – fetched state with JSON round trips.
  `ForkState.merge(other)` adds only what is missing and returns whether
  anything changed; existing values are never overwritten.
- `read_testdata_state(path)` – load a state file (an empty state if the file
  does not exist); results are cached in memory per path.
- `write_testdata_state(path, state)` – merge into the stored state and write
  it back, tab-indented, only if it changed. Missing directories are created.
- `parse_uint256_or_hash(text)` – hex with optional prefix and leading zeros.

### `w3.slots`

- `slot(pos, key)`, `slot2(pos, key, key2)` – storage slots of Solidity
  mappings and double mappings.
- `weth_balance_slot(addr)`, `weth_allowance_slot(owner, spender)` – slots of
  the WETH9 contract.
- `rand_a()` – a random 20-byte address.

```python
from w3.hexutil import A
from w3.slots import weth_balance_slot

weth_balance_slot(A("0x000000000000000000000000000000000000dEaD")).hex()
# "262bb27bbdd95c1cdc8e16957e36e38579ea44f7f6413dd7a9c75939def06b2c"
```

### `w3.receipt`

- `Receipt` – gas used, gas limit, logs, output, contract address and error.
  `decode_returns()` raises the receipt's error if it has one,
  `MissingFuncError` if there is no `func`, and otherwise decodes the output
  with `func`.
- `FetchError`, `RevertError` (with an optional `reason`), `MissingFuncError`.

### `w3.tracer`

- `combine_tracers(tracers)` – `None` for no tracers, the tracer itself for
  one, otherwise a `MultiTracer`; `None` entries are dropped.
- `MultiTracer` – forwards each `capture_*` hook to every tracer in order.

### `w3.debug`

- `TraceConfig` with `to_json()` for the struct-log tracer.
- `Trace`, `StructLog` and `CallTrace`, each with `from_json(data)`.
- `parse_optional_prefixed_hash(text)` – 64 hex digits, prefix optional.
- `with_encoded_input(msg)` – fills `msg.input` from `msg.func` and
  `msg.args` when input is missing.

### `w3.responses`

- `AccessListResponse` and `StatusResponse`, each with `from_json(data)`.

### `w3.rpctest`

`Server` is a local HTTP endpoint that answers one request described in a
golden file. Empty lines and lines starting with `/` are ignored:

```
// Request starts with ">".
> {"jsonrpc":"2.0","id":1,"method":"eth_chainId"}
// Response starts with "<".
< {"jsonrpc":"2.0","id":1,"result":"0x1"}
```

```python
from w3.rpctest import Server

with Server.from_file("testdata/chain_id.golden") as srv:
    ...  # POST the request body to srv.url
```

`Server(golden)` also takes the golden text as `str`, `bytes` or an open
file. A request whose body differs from the golden request is answered with
status 500, and `close()` (or leaving the `with` block) raises
`AssertionError` describing the difference.

## What this package does not do

- It has no JSON-RPC client: nothing here sends requests to a node. The
  `Caller` and `BatchElem` types describe requests, and `Fetcher` is only an
  interface with no network implementation.
- It does not execute EVM code. `Receipt`, `MultiTracer` and the fork state
  types are the data around execution, not an executor.
- It has no ABI encoder. `Func` is an abstract interface; supply your own
  implementation.

## Running the tests

```
pytest
```