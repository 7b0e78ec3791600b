"""Ethereum hex parsing, message and state types, fork state caching, trace decoding and a golden-file RPC test server."""

__version__ = "0.1.0"
__all__ = [
    "hexutil",
    "types",
    "rpctest",
    "vm_state",
    "slots",
    "receipt",
    "tracer",
    "debug",
    "responses",
]