from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

_EMPTY: Mapping[str, Any] = MappingProxyType({})


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({str(k): _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _extras(raw: Mapping[str, Any], known: tuple[str, ...]) -> Mapping[str, Any]:
    rest = {k: v for k, v in raw.items() if k not in known}
    return _freeze(rest) if rest else _EMPTY


@dataclass(frozen=True)
class Request:
    """One inbound invocation, addressed to `to`."""

    to: str
    extra: Mapping[str, Any] = field(default_factory=lambda: _EMPTY, compare=False, hash=False, repr=False)


@dataclass(frozen=True)
class CurrentUser:
    name: str
    extra: Mapping[str, Any] = field(default_factory=lambda: _EMPTY, compare=False, hash=False, repr=False)


@dataclass(frozen=True)
class Context:
    """Ambient invocation metadata, separate from the request payload."""

    current_user: CurrentUser
    extra: Mapping[str, Any] = field(default_factory=lambda: _EMPTY, compare=False, hash=False, repr=False)


@dataclass(frozen=True)
class Response:
    """Handler result. Any integer status and any text body are accepted as-is."""

    status: int
    data: str


def request_from_dict(raw: Mapping[str, Any]) -> Request:
    return Request(to=raw["to"], extra=_extras(raw, ("to",)))


def context_from_dict(raw: Mapping[str, Any]) -> Context:
    user = raw["current_user"]
    return Context(
        current_user=CurrentUser(name=user["name"], extra=_extras(user, ("name",))),
        extra=_extras(raw, ("current_user",)),
    )


def response_to_dict(response: Response) -> dict[str, Any]:
    return {"status": response.status, "data": response.data}
