from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from rich import box
from rich.console import Console
from rich.table import Table

from .core.config import RuntimeConfig
from .core.errors import RunDebugError
from .core.registry import Registry
from .features.debug import DebugService

logger = logging.getLogger(__name__)


def _site(raw: str) -> int | str:
    # Long digit strings stay text; the matcher treats them as non-ordinals.
    if len(raw) <= 19 and raw.isascii() and raw.isdigit():
        return int(raw)
    return raw


def _console(no_color: bool) -> Console:
    if no_color:
        return Console(force_terminal=False, color_system=None)
    return Console()


def _cmd_get(service: DebugService, args: argparse.Namespace, console: Console) -> int:
    payload = service.get_setting(args.name)
    console.print(payload.value, markup=False, highlight=False)
    return 0


def _cmd_env(service: DebugService, args: argparse.Namespace, console: Console) -> int:
    env = service.environment()
    table = Table(title=f"${env.env_var}", box=box.SIMPLE)
    table.add_column("Key", no_wrap=True)
    table.add_column("Value")
    for key, value in env.settings.items():
        table.add_row(key, value)
    console.print(table)
    return 0


def _cmd_settings(service: DebugService, args: argparse.Namespace, console: Console) -> int:
    table = Table(title="Settings", box=box.SIMPLE)
    for column in ("Name", "Package", "Value", "Non-default", "Metric"):
        table.add_column(column, no_wrap=column in ("Name", "Value"))
    for payload in service.list_settings():
        table.add_row(
            payload.name,
            payload.package,
            payload.value,
            str(payload.non_default),
            payload.metric or "(opaque)",
        )
    console.print(table)
    return 0


def _cmd_metrics(service: DebugService, args: argparse.Namespace, console: Console) -> int:
    payload = service.metrics(args.name)
    table = Table(title="Metrics", box=box.SIMPLE)
    table.add_column("Name")
    table.add_column("Kind", no_wrap=True)
    table.add_column("Value", justify="right")
    for metric in payload.metrics:
        table.add_row(metric.name, metric.kind, "" if metric.value is None else str(metric.value))
    console.print(table)
    return 0


def _cmd_match(service: DebugService, args: argparse.Namespace, console: Console) -> int:
    result = service.evaluate(args.pattern, args.setting, _site(args.site))
    if not result.valid:
        logger.warning("Pattern %r does not parse; no check would be forced", args.pattern)
    console.print(f"{result.marker} {result.decision}", markup=False, highlight=False)
    return 0


def _cmd_serve(service: DebugService, args: argparse.Namespace, console: Console) -> int:  # pragma: no cover
    import uvicorn

    from .web.app import create_app

    uvicorn.run(create_app(service.registry), host=args.host, port=args.port, factory=False)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rundebug", description="Inspect runtime debug settings")
    parser.add_argument("--catalog", type=Path, default=None, help="Settings catalog JSON (default: packaged)")
    parser.add_argument("--env-var", default=None, help="Environment variable holding the settings string")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_get = sub.add_parser("get", help="Print the current value of one setting")
    p_get.add_argument("name")
    p_get.set_defaults(func=_cmd_get)

    sub.add_parser("env", help="Show the parsed settings string").set_defaults(func=_cmd_env)
    sub.add_parser("settings", help="List catalog settings").set_defaults(func=_cmd_settings)

    p_metrics = sub.add_parser("metrics", help="Show non-default counters")
    p_metrics.add_argument("--name", action="append", default=None, metavar="PATH", help="Metric path to read")
    p_metrics.set_defaults(func=_cmd_metrics)

    p_match = sub.add_parser("match", help="Evaluate a bisect pattern for one call site")
    p_match.add_argument("pattern")
    p_match.add_argument("setting")
    p_match.add_argument("site", help="Call-site identifier; digits are read as an ordinal")
    p_match.set_defaults(func=_cmd_match)

    p_serve = sub.add_parser("serve", help="Serve the debug API")
    p_serve.add_argument("--host", default="0.0.0.0")
    p_serve.add_argument("--port", type=int, default=8000)
    p_serve.set_defaults(func=_cmd_serve)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = RuntimeConfig.from_env()
    overrides: dict[str, object] = {}
    if args.catalog is not None:
        overrides["catalog"] = args.catalog
    if args.env_var:
        overrides["env_var"] = args.env_var
    if overrides:
        config = replace(config, **overrides)

    try:
        service = DebugService(Registry(config))
        return args.func(service, args, _console(args.no_color))
    except RunDebugError as exc:
        print(f"rundebug: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
