"""Per-invocation capability namespace.

A handler resolves the host's capabilities at call time through
`capabilities()`. The host binds a concrete set for the duration of one
invocation with `bind_capabilities`; outside that window the lookup fails.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Protocol

from .errors import CapabilitiesUnavailable
from .types import Response


class ResponseFactory(Protocol):
    def __call__(self, status: int, data: str) -> Response: ...


class Capabilities(Protocol):
    Response: ResponseFactory

    def log(self, event: str, **fields: Any) -> None: ...

    def greet(self, name: str) -> None: ...

    async def fetch(self, url: str) -> str: ...

    async def read_file(self, path: str) -> str: ...

    async def write_file(self, path: str, contents: str) -> None: ...

    def remove_file(self, path: str) -> None: ...


_current: ContextVar[Capabilities | None] = ContextVar("jetrun_capabilities", default=None)


def capabilities() -> Capabilities:
    caps = _current.get()
    if caps is None:
        raise CapabilitiesUnavailable(
            code="CAPABILITIES_UNAVAILABLE",
            message="capabilities are only available while a handler is executing",
        )
    return caps


@contextmanager
def bind_capabilities(caps: Capabilities) -> Iterator[Capabilities]:
    token = _current.set(caps)
    try:
        yield caps
    finally:
        _current.reset(token)
