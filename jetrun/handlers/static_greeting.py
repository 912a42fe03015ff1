from __future__ import annotations

from jetrun.contract.types import Context, Request, Response


async def handle(request: Request, context: Context) -> Response:
    return Response(200, f"Hello {request.to}, this is {context.current_user.name}.")
