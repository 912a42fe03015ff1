from __future__ import annotations

from typing import Awaitable, Protocol, Union

from .types import Context, Request, Response


class Handler(Protocol):
    def __call__(self, request: Request, context: Context) -> Union[Awaitable[Response], Response]: ...


def is_conforming_response(value: object) -> bool:
    if not isinstance(value, Response):
        return False
    if isinstance(value.status, bool) or not isinstance(value.status, int):
        return False
    return isinstance(value.data, str)
