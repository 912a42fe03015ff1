from __future__ import annotations

import asyncio
from pathlib import Path

import httpx
import pytest
from structlog.testing import capture_logs

from jetrun.contract.errors import UnsafePath
from jetrun.contract.types import Response
from jetrun.host.capabilities import HostCapabilities


def test_response_constructor():
    caps = HostCapabilities()
    assert caps.Response(200, "ok") == Response(200, "ok")


def test_file_roundtrip_stays_under_root(tmp_path: Path):
    caps = HostCapabilities(files_root=tmp_path)

    async def scenario() -> str:
        await caps.write_file("notes/a.txt", "hello")
        return await caps.read_file("notes/a.txt")

    assert asyncio.run(scenario()) == "hello"
    assert (tmp_path / "notes" / "a.txt").read_text(encoding="utf-8") == "hello"

    caps.remove_file("notes/a.txt")
    assert not (tmp_path / "notes" / "a.txt").exists()


@pytest.mark.parametrize("path", ["../escape.txt", "a/../../b.txt", "/etc/passwd"])
def test_file_paths_outside_root_are_rejected(tmp_path: Path, path: str):
    caps = HostCapabilities(files_root=tmp_path)
    with pytest.raises(UnsafePath):
        asyncio.run(caps.read_file(path))
    with pytest.raises(UnsafePath):
        caps.remove_file(path)


def test_fetch_returns_body_text():
    seen = []

    def respond(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, text="welcome")

    caps = HostCapabilities(transport=httpx.MockTransport(respond))
    assert asyncio.run(caps.fetch("https://example.com/welcome.ts")) == "welcome"
    assert seen == ["https://example.com/welcome.ts"]


def test_fetch_returns_body_of_error_status():
    caps = HostCapabilities(transport=httpx.MockTransport(lambda r: httpx.Response(404, text="missing")))
    assert asyncio.run(caps.fetch("https://example.com/x")) == "missing"


def test_log_and_greet():
    caps = HostCapabilities()
    with capture_logs() as logs:
        caps.log("request", to="Alice")
        caps.greet("Alice")
    assert logs[0]["event"] == "request"
    assert logs[0]["to"] == "Alice"
    assert logs[1]["event"] == "Hello Alice"


@pytest.mark.parametrize("path", ["", ".", "  "])
def test_empty_file_paths_are_rejected(tmp_path: Path, path: str):
    caps = HostCapabilities(files_root=tmp_path)
    with pytest.raises(UnsafePath) as ei:
        asyncio.run(caps.write_file(path, "x"))
    assert "empty path" in ei.value.message


def test_write_file_leaves_no_staging_file(tmp_path: Path):
    caps = HostCapabilities(files_root=tmp_path)
    asyncio.run(caps.write_file("out.txt", "line\n"))
    assert sorted(p.name for p in tmp_path.iterdir()) == ["out.txt"]
    assert (tmp_path / "out.txt").read_bytes() == b"line\n"
