from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from jetrun.contract.errors import ContractError
from jetrun.contract.types import response_to_dict
from jetrun.host.app import run_once
from jetrun.host.config import DEFAULT_ENTRY_POINT, DEFAULT_HANDLER, RuntimeConfig, load_config
from jetrun.host.io import atomic_write_json
from jetrun.host.logs import configure_logging

DEFAULT_REQUEST = '{"to": "Alice"}'
DEFAULT_CONTEXT = '{"current_user": {"name": "Alice"}}'


def _json_arg(text: str) -> dict:
    try:
        value = json.loads(text)
    except json.JSONDecodeError as e:
        raise argparse.ArgumentTypeError(f"invalid JSON: {e}") from e
    if not isinstance(value, dict):
        raise argparse.ArgumentTypeError("expected a JSON object")
    return value


def _positive_seconds(text: str) -> float:
    try:
        value = float(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"not a number: {text}") from e
    if not value > 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0: {text}")
    return value


def main(argv: list[str] | None = None, *, runner=run_once) -> int:
    p = argparse.ArgumentParser(description="jetrun host: invoke a handler once and print its Response")
    p.add_argument("--handler", default=None, help=f"Module name or .py file (default: {DEFAULT_HANDLER})")
    p.add_argument("--entry-point", default=None, help=f"Exported handler name (default: {DEFAULT_ENTRY_POINT})")
    p.add_argument("--request", default=DEFAULT_REQUEST, type=_json_arg, help="Request as a JSON object")
    p.add_argument("--context", default=DEFAULT_CONTEXT, type=_json_arg, help="Context as a JSON object")
    p.add_argument("--config", default=None, type=Path, help="Path to a runtime config JSON file")
    p.add_argument("--timeout", default=None, type=_positive_seconds, help="Seconds before the invocation is failed")
    p.add_argument("--files-root", default=None, type=Path, help="Root directory for file capabilities")
    p.add_argument("--output", default=None, type=Path, help="Also write the Response JSON to this path")
    p.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    p.add_argument("--log-json", action="store_true", default=None)
    args = p.parse_args(argv)

    try:
        cfg = load_config(args.config) if args.config else RuntimeConfig()
        cfg = cfg.with_overrides(
            handler=args.handler,
            entry_point=args.entry_point,
            timeout_seconds=args.timeout,
            files_root=args.files_root,
            log_level=args.log_level,
            log_json=args.log_json,
        )
        configure_logging(cfg.log_level, cfg.log_json)
        response = runner(config=cfg, request=args.request, context=args.context)
    except ContractError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    rendered = response_to_dict(response)
    print(f"Response: {json.dumps(rendered, ensure_ascii=False)}")
    if args.output is not None:
        try:
            atomic_write_json(args.output, rendered)
        except OSError as e:
            print(f"error: cannot write {args.output}: {e}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
