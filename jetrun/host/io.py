from __future__ import annotations

import json
import os
from pathlib import Path

from jetrun.contract.errors import InputInvalid, UnsafePath


def safe_relpath(rel: str) -> Path:
    """Return `rel` as a path that stays below whatever root it is joined to."""
    rel_path = Path(rel)
    if not rel.strip() or rel_path == Path("."):
        raise UnsafePath(code="UNSAFE_PATH", message="empty path is not allowed")
    if rel_path.anchor:
        raise UnsafePath(code="UNSAFE_PATH", message=f"absolute path is not allowed: {rel}")
    if ".." in rel_path.parts:
        raise UnsafePath(code="UNSAFE_PATH", message=f"path traversal is not allowed: {rel}")
    return rel_path


def atomic_write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    staging = path.parent / f".{path.name}.partial"
    with staging.open("w", encoding="utf-8", newline="") as f:
        f.write(text)
        f.flush()
        os.fsync(f.fileno())
    os.replace(staging, path)


def atomic_write_json(path: Path, obj: object) -> None:
    atomic_write_text(path, json.dumps(obj, ensure_ascii=False, indent=2) + "\n")


def read_json_document(path: Path) -> dict:
    try:
        doc = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise InputInvalid(code="INPUT_INVALID", message=f"cannot read {path}: {e.strerror or e}") from e
    except json.JSONDecodeError as e:
        raise InputInvalid(code="INPUT_INVALID", message=f"{path} is not valid JSON: {e}") from e
    if not isinstance(doc, dict):
        raise InputInvalid(code="INPUT_INVALID", message=f"{path} must hold a JSON object")
    return doc
