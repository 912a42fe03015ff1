from __future__ import annotations

from typing import Any, Callable

from fastapi import Body, FastAPI
from fastapi.responses import JSONResponse, PlainTextResponse

from jetrun.contract.capability import Capabilities
from jetrun.contract.errors import ContractError, InputInvalid, InvocationFailed, UnrenderableStatus
from jetrun.host.app import HostContext, handle_invocation
from jetrun.host.logs import get_logger

log = get_logger(__name__)

# h11 refuses 1xx as a final response and anything outside three digits
MIN_HTTP_STATUS = 200
MAX_HTTP_STATUS = 599


def _error(status_code: int, e: ContractError) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": {"code": e.code, "message": e.message}})


def create_app(
    *,
    host: HostContext,
    capabilities_factory: Callable[[], Capabilities] | None = None,
) -> FastAPI:
    app = FastAPI(title="jetrun gateway", version="0.1.0")
    new_capabilities = capabilities_factory or host.new_capabilities

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok", "handler": host.handler_label}

    @app.post("/invoke")
    async def invoke_handler(body: dict[str, Any] = Body(...)):
        request = body.get("request")
        context = body.get("context")
        try:
            response = await handle_invocation(host, request, context, capabilities=new_capabilities())
        except InputInvalid as e:
            return _error(422, e)
        except InvocationFailed as e:
            return _error(502, e)
        if not MIN_HTTP_STATUS <= response.status <= MAX_HTTP_STATUS:
            e = UnrenderableStatus(
                code="UNRENDERABLE_STATUS",
                message=f"handler status {response.status} is outside {MIN_HTTP_STATUS}..{MAX_HTTP_STATUS}",
            )
            log.warning("gateway.unrenderable_status", status=response.status, handler=host.handler_label)
            return _error(502, e)
        return PlainTextResponse(content=response.data, status_code=response.status)

    return app
