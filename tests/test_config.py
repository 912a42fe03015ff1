from __future__ import annotations

from pathlib import Path

import pytest

from jetrun.contract.errors import InputInvalid
from jetrun.host.config import DEFAULT_HANDLER, RuntimeConfig, load_config
from jetrun.host.io import atomic_write_json


def test_load_config_resolves_files_root(tmp_path: Path):
    cfg_path = tmp_path / "jetrun.json"
    atomic_write_json(
        cfg_path,
        {
            "schema_version": "1.0",
            "handler": "jetrun.handlers.static_greeting",
            "timeout_seconds": 2.5,
            "files_root": "data",
            "log_level": "DEBUG",
            "log_json": True,
        },
    )
    cfg = load_config(cfg_path)
    assert cfg.handler == "jetrun.handlers.static_greeting"
    assert cfg.entry_point == "handle"
    assert cfg.timeout_seconds == 2.5
    assert cfg.files_root == (tmp_path / "data").resolve()
    assert cfg.log_level == "DEBUG"
    assert cfg.log_json is True


def test_load_config_defaults(tmp_path: Path):
    cfg_path = tmp_path / "jetrun.json"
    atomic_write_json(cfg_path, {"schema_version": "1.0"})
    cfg = load_config(cfg_path)
    assert cfg.handler == DEFAULT_HANDLER
    assert cfg.timeout_seconds is None
    assert cfg.fetch_timeout_seconds == 30.0
    assert cfg.files_root == tmp_path.resolve()


@pytest.mark.parametrize(
    "raw",
    [
        {},
        {"schema_version": "1.0", "timeout_seconds": 0},
        {"schema_version": "1.0", "log_level": "TRACE"},
        {"schema_version": "1.0", "unknown_key": 1},
    ],
)
def test_load_config_rejects_invalid(tmp_path: Path, raw: dict):
    cfg_path = tmp_path / "jetrun.json"
    atomic_write_json(cfg_path, raw)
    with pytest.raises(InputInvalid):
        load_config(cfg_path)


def test_with_overrides_ignores_none():
    cfg = RuntimeConfig(timeout_seconds=3.0).with_overrides(timeout_seconds=None, handler="x.y")
    assert cfg.timeout_seconds == 3.0
    assert cfg.handler == "x.y"


def test_load_config_reports_missing_or_malformed_file(tmp_path: Path):
    with pytest.raises(InputInvalid) as ei:
        load_config(tmp_path / "absent.json")
    assert "cannot read" in ei.value.message

    bad = tmp_path / "bad.json"
    bad.write_text("{", encoding="utf-8")
    with pytest.raises(InputInvalid) as ei:
        load_config(bad)
    assert "not valid JSON" in ei.value.message
