from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ContractError(Exception):
    code: str
    message: str

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class CapabilitiesUnavailable(ContractError):
    pass


class InputInvalid(ContractError):
    pass


class UnsafePath(ContractError):
    pass


class HandlerLoadError(ContractError):
    pass


class InvocationFailed(ContractError):
    """An invocation that ended without a valid Response."""


class HandlerFailed(InvocationFailed):
    pass


class NonConformingReturn(InvocationFailed):
    pass


class HandlerTimeout(InvocationFailed):
    pass


class UnrenderableStatus(ContractError):
    """A valid Response whose status cannot be sent as a final HTTP status."""
