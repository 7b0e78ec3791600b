"""Fan out EVM tracing hooks to several tracers."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any


def combine_tracers(tracers: Iterable[Any]) -> Any:
    """Return one tracer that forwards to all given tracers.

    None entries are dropped. No tracers give None and a single tracer is
    returned as it is.
    """
    tracers = list(tracers)
    if not tracers:
        return None
    if len(tracers) == 1:
        return tracers[0]

    tracers = [tracer for tracer in tracers if tracer is not None]
    if not tracers:
        return None
    if len(tracers) == 1:
        return tracers[0]
    return MultiTracer(tracers)


class MultiTracer:
    """A tracer that calls each hook on every wrapped tracer, in order."""

    def __init__(self, tracers: Iterable[Any]) -> None:
        self._tracers = tuple(tracers)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._tracers)

    def __len__(self) -> int:
        return len(self._tracers)

    def capture_tx_start(self, gas_limit: int) -> None:
        for tracer in self._tracers:
            tracer.capture_tx_start(gas_limit)

    def capture_tx_end(self, rest_gas: int) -> None:
        for tracer in self._tracers:
            tracer.capture_tx_end(rest_gas)

    def capture_start(
        self, env: Any, sender: bytes, to: bytes, create: bool, input: bytes, gas: int, value: int
    ) -> None:
        for tracer in self._tracers:
            tracer.capture_start(env, sender, to, create, input, gas, value)

    def capture_end(self, output: bytes, gas_used: int, err: Exception | None) -> None:
        for tracer in self._tracers:
            tracer.capture_end(output, gas_used, err)

    def capture_enter(
        self, typ: Any, sender: bytes, to: bytes, input: bytes, gas: int, value: int
    ) -> None:
        for tracer in self._tracers:
            tracer.capture_enter(typ, sender, to, input, gas, value)

    def capture_exit(self, output: bytes, gas_used: int, err: Exception | None) -> None:
        for tracer in self._tracers:
            tracer.capture_exit(output, gas_used, err)

    def capture_state(
        self,
        pc: int,
        op: Any,
        gas: int,
        cost: int,
        scope: Any,
        r_data: bytes,
        depth: int,
        err: Exception | None,
    ) -> None:
        for tracer in self._tracers:
            tracer.capture_state(pc, op, gas, cost, scope, r_data, depth, err)

    def capture_fault(
        self,
        pc: int,
        op: Any,
        gas: int,
        cost: int,
        scope: Any,
        depth: int,
        err: Exception | None,
    ) -> None:
        for tracer in self._tracers:
            tracer.capture_fault(pc, op, gas, cost, scope, depth, err)