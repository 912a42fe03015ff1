from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from jetrun.contract.schema import RUNTIME_CONFIG_SCHEMA, SchemaRegistry

from .io import read_json_document

DEFAULT_HANDLER = "jetrun.handlers.greeting"
DEFAULT_ENTRY_POINT = "handle"


@dataclass(frozen=True)
class RuntimeConfig:
    schema_version: str = "1.0"
    handler: str = DEFAULT_HANDLER
    entry_point: str = DEFAULT_ENTRY_POINT
    timeout_seconds: float | None = None
    fetch_timeout_seconds: float = 30.0
    files_root: Path = Path(".")
    log_level: str = "INFO"
    log_json: bool = False

    def with_overrides(self, **overrides: Any) -> RuntimeConfig:
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_config(config_path: Path, registry: SchemaRegistry | None = None) -> RuntimeConfig:
    raw = read_json_document(config_path)
    (registry or SchemaRegistry()).validate(raw, RUNTIME_CONFIG_SCHEMA)

    files_root = raw.get("files_root")
    if isinstance(files_root, str) and files_root.strip():
        root = (config_path.parent / files_root).resolve()
    else:
        root = config_path.parent.resolve()

    timeout = raw.get("timeout_seconds")
    return RuntimeConfig(
        schema_version=str(raw["schema_version"]),
        handler=str(raw.get("handler") or DEFAULT_HANDLER),
        entry_point=str(raw.get("entry_point") or DEFAULT_ENTRY_POINT),
        timeout_seconds=float(timeout) if timeout is not None else None,
        fetch_timeout_seconds=float(raw.get("fetch_timeout_seconds", 30.0)),
        files_root=root,
        log_level=str(raw.get("log_level") or "INFO"),
        log_json=bool(raw.get("log_json", False)),
    )
