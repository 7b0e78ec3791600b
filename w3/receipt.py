"""The result of applying a message, and the errors that come with it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from w3.types import Func


class FetchError(Exception):
    """Fetching state failed."""

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        message = "fetching failed" if detail is None else f"fetching failed: {detail}"
        super().__init__(message)


class RevertError(Exception):
    """Execution reverted, optionally with a reason."""

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason
        message = "execution reverted" if reason is None else f"execution reverted: {reason}"
        super().__init__(message)


class MissingFuncError(Exception):
    """The message that produced a receipt carried no function."""

    def __init__(self) -> None:
        super().__init__("missing function")


@dataclass
class Receipt:
    """The result of an applied message."""

    gas_used: int = 0
    gas_limit: int = 0
    logs: list[Any] = field(default_factory=list)
    output: bytes = b""
    contract_address: bytes | None = None
    err: Exception | None = None
    func: Func | None = field(default=None, compare=False, repr=False)

    def decode_returns(self) -> tuple:
        """ABI-decode the output with the message's function.

        Raises the receipt's error if it has one, and MissingFuncError if the
        message carried no function.
        """
        if self.err is not None:
            raise self.err
        if self.func is None:
            raise MissingFuncError()
        return self.func.decode_returns(self.output)