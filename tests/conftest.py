from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest
import structlog

from jetrun.contract.types import Response


@dataclass
class FakeCapabilities:
    Response: Any = Response
    logged: list[tuple[str, dict[str, Any]]] = field(default_factory=list)
    greeted: list[str] = field(default_factory=list)
    pages: dict[str, str] = field(default_factory=dict)
    files: dict[str, str] = field(default_factory=dict)

    def log(self, event: str, **fields: Any) -> None:
        self.logged.append((event, fields))

    def greet(self, name: str) -> None:
        self.greeted.append(name)

    async def fetch(self, url: str) -> str:
        return self.pages[url]

    async def read_file(self, path: str) -> str:
        return self.files[path]

    async def write_file(self, path: str, contents: str) -> None:
        self.files[path] = contents

    def remove_file(self, path: str) -> None:
        del self.files[path]


def pytest_runtest_teardown(item, nextitem):
    structlog.reset_defaults()


@pytest.fixture
def fake_caps() -> FakeCapabilities:
    return FakeCapabilities()


@pytest.fixture
def caps_factory() -> type[FakeCapabilities]:
    return FakeCapabilities
