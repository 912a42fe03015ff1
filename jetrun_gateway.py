from __future__ import annotations

import argparse
import sys
from pathlib import Path

import uvicorn

from jetrun.contract.errors import ContractError
from jetrun.gateway.app import create_app
from jetrun.host.app import build_host
from jetrun.host.config import RuntimeConfig, load_config
from jetrun.host.logs import configure_logging


def main(argv: list[str] | None = None, *, serve=uvicorn.run) -> int:
    p = argparse.ArgumentParser(description="jetrun gateway: serve one handler over HTTP")
    p.add_argument("--handler", default=None, help="Module name or .py file")
    p.add_argument("--entry-point", default=None, help="Exported handler name")
    p.add_argument("--config", default=None, type=Path, help="Path to a runtime config JSON file")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", default=8000, type=int)
    args = p.parse_args(argv)

    try:
        cfg = load_config(args.config) if args.config else RuntimeConfig()
        cfg = cfg.with_overrides(handler=args.handler, entry_point=args.entry_point)
        configure_logging(cfg.log_level, cfg.log_json)
        app = create_app(host=build_host(cfg))
    except ContractError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    serve(app, host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
