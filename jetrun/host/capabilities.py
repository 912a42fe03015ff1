"""Capabilities the reference host hands to a handler for one invocation."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx

from jetrun.contract.types import Response

from .io import atomic_write_text, safe_relpath
from .logs import get_logger


@dataclass(frozen=True)
class HostCapabilities:
    files_root: Path = Path(".")
    fetch_timeout_seconds: float = 30.0
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)
    Response: Any = Response

    def __post_init__(self) -> None:
        object.__setattr__(self, "_logger", get_logger("jetrun.handler"))

    def log(self, event: str, **fields: Any) -> None:
        self._logger.info(event, **fields)

    def greet(self, name: str) -> None:
        self._logger.info(f"Hello {name}")

    async def fetch(self, url: str) -> str:
        async with httpx.AsyncClient(timeout=self.fetch_timeout_seconds, transport=self.transport) as client:
            resp = await client.get(url, follow_redirects=True)
            return resp.text

    def _resolve(self, path: str) -> Path:
        return self.files_root / safe_relpath(path)

    async def read_file(self, path: str) -> str:
        target = self._resolve(path)
        return await asyncio.to_thread(target.read_text, encoding="utf-8")

    async def write_file(self, path: str, contents: str) -> None:
        target = self._resolve(path)
        await asyncio.to_thread(atomic_write_text, target, contents)

    def remove_file(self, path: str) -> None:
        self._resolve(path).unlink()
