from __future__ import annotations

from jetrun.contract.capability import capabilities
from jetrun.contract.types import Context, Request, Response


async def handle(request: Request, context: Context) -> Response:
    caps = capabilities()

    caps.log("request", to=request.to)
    caps.log("context", current_user=context.current_user.name)

    return caps.Response(200, f"Hello {request.to}, this is {context.current_user.name}.")
