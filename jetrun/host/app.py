from __future__ import annotations

import asyncio
import importlib
import importlib.util
import inspect
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import structlog

from jetrun.contract.capability import Capabilities, bind_capabilities
from jetrun.contract.errors import (
    HandlerFailed,
    HandlerLoadError,
    HandlerTimeout,
    InvocationFailed,
    NonConformingReturn,
)
from jetrun.contract.handlers import Handler, is_conforming_response
from jetrun.contract.schema import SchemaRegistry
from jetrun.contract.types import Context, Request, Response, context_from_dict, request_from_dict

from .capabilities import HostCapabilities
from .config import RuntimeConfig
from .ids import IdGenerator
from .logs import get_logger
from .timeutil import Clock, iso_z

log = get_logger(__name__)


def _import_file(path: Path) -> Any:
    module_name = f"jetrun_user_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise HandlerLoadError(code="HANDLER_LOAD_ERROR", message=f"cannot load handler file: {path}")
    mod = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = mod
    try:
        spec.loader.exec_module(mod)
    except Exception:
        sys.modules.pop(module_name, None)
        raise
    return mod


def load_handler(handler: str, entry_point: str = "handle") -> Handler:
    """Resolve `entry_point` from a dotted module name or a `.py` file path."""
    try:
        if handler.endswith(".py"):
            path = Path(handler)
            if not path.is_file():
                raise HandlerLoadError(code="HANDLER_LOAD_ERROR", message=f"handler file not found: {handler}")
            mod = _import_file(path.resolve())
        else:
            mod = importlib.import_module(handler)
    except HandlerLoadError:
        raise
    except Exception as e:
        raise HandlerLoadError(code="HANDLER_LOAD_ERROR", message=f"cannot import {handler}: {e}") from e

    fn = getattr(mod, entry_point, None)
    if fn is None:
        raise HandlerLoadError(code="HANDLER_LOAD_ERROR", message=f"handler module must expose `{entry_point}`: {handler}")
    if not callable(fn):
        raise HandlerLoadError(code="HANDLER_LOAD_ERROR", message=f"`{entry_point}` is not callable: {handler}")
    try:
        inspect.signature(fn).bind(None, None)
    except TypeError as e:
        raise HandlerLoadError(
            code="HANDLER_LOAD_ERROR", message=f"`{entry_point}` must accept (request, context): {handler}"
        ) from e
    except ValueError:
        pass
    return fn


async def _call(handler: Handler, request: Request, context: Context) -> Any:
    # handler exceptions leave here only as HandlerFailed
    try:
        result = handler(request, context)
        if inspect.isawaitable(result):
            result = await result
    except InvocationFailed:
        raise
    except Exception as e:
        raise HandlerFailed(code="HANDLER_FAILED", message=f"{type(e).__name__}: {e}") from e
    return result


async def invoke(
    handler: Handler,
    request: Request,
    context: Context,
    *,
    capabilities: Capabilities,
    timeout: float | None = None,
) -> Response:
    """Run one invocation and return its Response.

    Any way the handler fails to produce a conforming Response is raised as
    an `InvocationFailed` subclass. No fallback Response is ever returned.
    """
    with bind_capabilities(capabilities):
        if timeout is None:
            result = await _call(handler, request, context)
        else:
            try:
                result = await asyncio.wait_for(_call(handler, request, context), timeout)
            except asyncio.TimeoutError as e:
                raise HandlerTimeout(
                    code="HANDLER_TIMEOUT", message=f"handler did not complete within {timeout}s"
                ) from e

    if not is_conforming_response(result):
        raise NonConformingReturn(
            code="NON_CONFORMING_RETURN",
            message=f"handler returned {type(result).__name__}, expected Response(status: int, data: str)",
        )
    return result


@dataclass(frozen=True)
class HostContext:
    config: RuntimeConfig
    handler: Handler
    schema_registry: SchemaRegistry = field(default_factory=SchemaRegistry)
    clock: Clock = field(default_factory=Clock)
    ids: IdGenerator = field(default_factory=IdGenerator)

    @property
    def handler_label(self) -> str:
        return f"{self.config.handler}:{self.config.entry_point}"

    def new_capabilities(self) -> Capabilities:
        return HostCapabilities(
            files_root=self.config.files_root,
            fetch_timeout_seconds=self.config.fetch_timeout_seconds,
        )


def build_host(config: RuntimeConfig) -> HostContext:
    return HostContext(config=config, handler=load_handler(config.handler, config.entry_point))


async def handle_invocation(
    ctx: HostContext,
    request: Mapping[str, Any],
    context: Mapping[str, Any],
    *,
    capabilities: Capabilities | None = None,
) -> Response:
    """Validate raw inputs, build the contract values, invoke, and log the outcome."""
    ctx.schema_registry.validate_invocation(request, context)
    req = request_from_dict(request)
    cx = context_from_dict(context)

    started = ctx.clock.now()
    invocation_id = ctx.ids.new_invocation_id(started)
    t0 = ctx.clock.monotonic()
    with structlog.contextvars.bound_contextvars(invocation_id=invocation_id, handler=ctx.handler_label):
        log.info("invocation.started", started_at=iso_z(started))
        try:
            response = await invoke(
                ctx.handler,
                req,
                cx,
                capabilities=capabilities if capabilities is not None else ctx.new_capabilities(),
                timeout=ctx.config.timeout_seconds,
            )
        except InvocationFailed as e:
            log.error("invocation.failed", code=e.code, error=e.message)
            raise
        duration_ms = round((ctx.clock.monotonic() - t0) * 1000, 3)
        log.info("invocation.succeeded", status=response.status, duration_ms=duration_ms)
    return response


def run_once(
    *,
    config: RuntimeConfig,
    request: Mapping[str, Any],
    context: Mapping[str, Any],
) -> Response:
    ctx = build_host(config)
    return asyncio.run(handle_invocation(ctx, request, context))
